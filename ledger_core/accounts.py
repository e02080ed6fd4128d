"""
Account Model Module

Checking and savings accounts as held by the account store. A savings account
carries its interest configuration and the date interest was last applied;
only savings accounts accrue interest and only non-savings accounts may be
the source of a transfer.
"""

from decimal import Decimal
from datetime import date
from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING
from enum import Enum

from .currency import Money, Currency

if TYPE_CHECKING:
    from .transactions import Transaction


class AccountKind(Enum):
    """Banking product kinds"""
    CHECKING = "checking"
    SAVINGS = "savings"


class CapitalizationFrequency(Enum):
    """How often savings interest is capitalized"""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"

    @property
    def period_months(self) -> int:
        """Length of one accrual period in calendar months"""
        return _PERIOD_MONTHS[self]


_PERIOD_MONTHS = {
    CapitalizationFrequency.MONTHLY: 1,
    CapitalizationFrequency.QUARTERLY: 3,
}


@dataclass
class Account:
    """
    Account record owned by the account store.

    The balance is replaced, never mutated, and the transaction list is
    append-only in insertion order.
    """
    id: str
    balance: Money
    name: str = ""
    transactions: List['Transaction'] = field(default_factory=list)
    kind: AccountKind = field(default=AccountKind.CHECKING)

    @property
    def currency(self) -> Currency:
        return self.balance.currency

    @property
    def is_savings(self) -> bool:
        return self.kind == AccountKind.SAVINGS

    def can_be_transfer_source(self) -> bool:
        """Savings accounts cannot send transfers"""
        return not self.is_savings

    def credit(self, amount: Money) -> None:
        """Add amount to the balance; amount must be in account currency"""
        self.balance = self.balance + amount

    def debit(self, amount: Money) -> None:
        """Subtract amount from the balance; amount must be in account currency"""
        self.balance = self.balance - amount

    def record(self, transaction: 'Transaction') -> None:
        self.transactions.append(transaction)


@dataclass
class SavingsAccount(Account):
    """Savings account with periodic interest capitalization"""
    interest_rate: Decimal = Decimal('0')  # Fractional rate per accrual period
    capitalization_frequency: Optional[CapitalizationFrequency] = CapitalizationFrequency.MONTHLY
    last_interest_applied_date: Optional[date] = None
    kind: AccountKind = field(default=AccountKind.SAVINGS, init=False)

    def __post_init__(self):
        if not isinstance(self.interest_rate, Decimal):
            self.interest_rate = Decimal(str(self.interest_rate))

    @property
    def period_months(self) -> Optional[int]:
        """Accrual period length, or None when the frequency is not recognized"""
        if isinstance(self.capitalization_frequency, CapitalizationFrequency):
            return self.capitalization_frequency.period_months
        return None

    def interest_for_period(self) -> Money:
        """Interest earned by the current balance over one accrual period"""
        return self.balance * self.interest_rate

    def apply_interest(self, interest: Money, applied_on: date) -> None:
        """Capitalize interest into the balance and move the last applied date"""
        self.credit(interest)
        self.last_interest_applied_date = applied_on
