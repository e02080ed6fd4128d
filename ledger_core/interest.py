"""
Interest Scheduler Module

Advances a simulated calendar one month at a time and capitalizes interest
into every savings account whose accrual period ends in the month the clock
moves into. Accrual timing uses only the simulated clock, never wall time.
"""

from decimal import Decimal, DecimalException
from datetime import date
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import calendar

from .currency import Money, Currency
from .storage import AccountStore
from .accounts import AccountKind, SavingsAccount
from .logging_config import get_logger, log_action


def add_months(start: date, months: int) -> date:
    """
    Add calendar months to a date, clamping the day to the end of the
    target month (Jan 31 + 1 month -> Feb 28/29).
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


@dataclass
class SimulatedClock:
    """Current date of the simulation, moved only by its owner"""
    current_date: date

    def peek(self, months: int = 1) -> date:
        """Date the clock would show after advancing by months"""
        return add_months(self.current_date, months)

    def set(self, new_date: date) -> None:
        if new_date < self.current_date:
            raise ValueError(
                f"Simulated clock cannot move backwards: {new_date} < {self.current_date}"
            )
        self.current_date = new_date


@dataclass
class AccrualRun:
    """Outcome of one scheduler step"""
    run_date: date
    credited_account_ids: List[str] = field(default_factory=list)
    skipped_account_ids: List[str] = field(default_factory=list)
    interest_by_currency: Dict[Currency, Money] = field(default_factory=dict)

    def add_interest(self, account_id: str, interest: Money) -> None:
        self.credited_account_ids.append(account_id)
        total = self.interest_by_currency.get(interest.currency, Money.zero(interest.currency))
        self.interest_by_currency[interest.currency] = total + interest


class InterestScheduler:
    """
    Steps the simulated clock and applies savings interest.

    Every call to advance() moves the clock by exactly one month. An account
    is due when its last application date plus one accrual period falls in
    the same calendar month and year as the new date. Cycles skipped because
    the account was not due in the month they ended are not caught up.
    """

    def __init__(self, store: AccountStore, start_date: Optional[date] = None):
        self.store = store
        self.clock = SimulatedClock(start_date or date.today())
        self.logger = get_logger("ledger.interest")

    @property
    def current_date(self) -> date:
        return self.clock.current_date

    def advance(self) -> AccrualRun:
        """
        Advance the simulated date by one month and capitalize interest
        for every savings account due in that month.

        Interest for every due account is computed before any balance is
        touched, so an account whose interest cannot be computed is skipped
        without leaving the sweep half applied.

        Returns:
            Summary of the accounts credited in this step
        """
        with self.store.atomic():
            next_date = self.clock.peek(1)
            run = AccrualRun(run_date=next_date)
            due: List[Tuple[SavingsAccount, Money]] = []

            for account in self.store.get_by_kind(AccountKind.SAVINGS):
                due_date = self._next_interest_date(account)
                if due_date is None:
                    run.skipped_account_ids.append(account.id)
                    continue

                if due_date.year == next_date.year and due_date.month == next_date.month:
                    try:
                        interest = account.interest_for_period()
                    except DecimalException as e:
                        self._log_skip(account.id, f"interest cannot be computed ({type(e).__name__})")
                        run.skipped_account_ids.append(account.id)
                        continue
                    due.append((account, interest))

            for account, interest in due:
                account.apply_interest(interest, next_date)
                run.add_interest(account.id, interest)
                log_action(
                    self.logger, "info", "Interest applied",
                    action="apply_interest", resource=f"account:{account.id}",
                    extra={
                        "interest": interest.to_string(),
                        "balance": account.balance.to_string(),
                        "applied_on": next_date.isoformat()
                    }
                )

            self.clock.set(next_date)

        log_action(
            self.logger, "info", "Accrual step completed",
            action="advance", resource="clock",
            extra={
                "date": next_date.isoformat(),
                "credited": len(run.credited_account_ids),
                "skipped": len(run.skipped_account_ids)
            }
        )
        return run

    def advance_by(self, months: int) -> List[AccrualRun]:
        """Run advance() months times"""
        if months < 1:
            raise ValueError("months must be at least 1")
        return [self.advance() for _ in range(months)]

    def _next_interest_date(self, account: SavingsAccount) -> Optional[date]:
        """
        Date the next accrual period ends, or None when the account's
        interest configuration cannot be used.
        """
        reason = None
        period_months = getattr(account, "period_months", None)
        last_applied = getattr(account, "last_interest_applied_date", None)

        if period_months is None:
            reason = f"unknown capitalization frequency {getattr(account, 'capitalization_frequency', None)!r}"
        elif not isinstance(last_applied, date):
            reason = "missing last interest applied date"
        elif not isinstance(getattr(account, "interest_rate", None), Decimal):
            reason = "interest rate is not a Decimal"
        elif not account.interest_rate.is_finite():
            reason = f"interest rate is not finite ({account.interest_rate})"

        if reason:
            self._log_skip(account.id, reason)
            return None

        return add_months(last_applied, period_months)

    def _log_skip(self, account_id: str, reason: str) -> None:
        log_action(
            self.logger, "warning", f"Skipping interest for account: {reason}",
            action="apply_interest", resource=f"account:{account_id}"
        )
