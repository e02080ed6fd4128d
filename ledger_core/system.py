"""
Ledger System Module

Wires the account store, currency converter, interest scheduler and
settlement engine together from configuration.
"""

from decimal import Decimal
from datetime import date
from typing import Optional
import uuid

from .config import LedgerConfig, get_config
from .currency import Money, CurrencyConverter
from .storage import AccountStore, InMemoryAccountStore
from .accounts import Account, AccountKind, SavingsAccount, CapitalizationFrequency
from .interest import InterestScheduler
from .transactions import SettlementEngine
from .logging_config import setup_logging, get_logger, log_action


class LedgerSystem:
    """
    Composition root for the ledger core.

    Collaborators that are not supplied are built from the configuration:
    an empty in-memory store and a converter seeded with the configured
    exchange rates. The configured log level, format and file are applied
    to the "ledger" logger on construction.
    """

    def __init__(
        self,
        config: Optional[LedgerConfig] = None,
        store: Optional[AccountStore] = None,
        converter: Optional[CurrencyConverter] = None
    ):
        self.config = config or get_config()
        setup_logging(self.config.log_level, "ledger", self.config.log_format, self.config.log_file)
        self.store = store if store is not None else InMemoryAccountStore()
        self.converter = converter or CurrencyConverter.from_mapping(self.config.exchange_rates)
        self.scheduler = InterestScheduler(self.store, self.config.simulation_start_date)
        self.settlement = SettlementEngine(self.store, self.converter)
        self.logger = get_logger("ledger.system")

    def open_checking_account(self, initial_balance: Money, name: str = "") -> Account:
        """Create a checking account and add it to the store"""
        account = Account(
            id=str(uuid.uuid4()),
            balance=initial_balance,
            name=name,
            kind=AccountKind.CHECKING
        )
        return self._register(account)

    def open_savings_account(
        self,
        initial_balance: Money,
        interest_rate: Decimal,
        capitalization_frequency: CapitalizationFrequency = CapitalizationFrequency.MONTHLY,
        last_interest_applied_date: Optional[date] = None,
        name: str = ""
    ) -> SavingsAccount:
        """
        Create a savings account and add it to the store.

        The first accrual period starts at last_interest_applied_date, which
        defaults to the current simulated date.
        """
        account = SavingsAccount(
            id=str(uuid.uuid4()),
            balance=initial_balance,
            name=name,
            interest_rate=interest_rate,
            capitalization_frequency=capitalization_frequency,
            last_interest_applied_date=last_interest_applied_date or self.scheduler.current_date
        )
        return self._register(account)

    def _register(self, account: Account) -> Account:
        self.store.add(account)
        log_action(
            self.logger, "info", "Account opened",
            action="open_account", resource=f"account:{account.id}",
            extra={
                "kind": account.kind.value,
                "balance": account.balance.to_string()
            }
        )
        return account
