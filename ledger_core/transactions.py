"""
Settlement Module

Executes value-moving operations between accounts held in the account store:
transfers between two accounts and withdrawals from one account. Every
operation converts the requested amount into the currencies of the accounts
it touches, refuses to drive a balance negative and, on success, appends one
immutable Transaction record to each account involved.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Callable, List, Optional
import uuid

from .currency import Money, CurrencyConverter
from .storage import AccountStore
from .accounts import Account
from .exceptions import AccountNotFoundError, InvalidOperationError, InsufficientFundsError
from .logging_config import get_logger, log_action


@dataclass(frozen=True)
class Transaction:
    """
    Settled money movement.

    The amount is denominated in the destination account's currency. For a
    withdrawal the source and destination are the same account.
    """
    id: str
    from_account_id: str
    to_account_id: str
    amount: Money
    timestamp: datetime

    @property
    def is_withdrawal(self) -> bool:
        return self.from_account_id == self.to_account_id


def _new_transaction_id() -> str:
    return str(uuid.uuid4())


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SettlementEngine:
    """
    Transfers, withdrawals and balance queries over a shared account store.

    Args:
        store: Account store owning the account records
        converter: Currency converter, any object with convert(money, currency)
        id_factory: Returns a fresh unique transaction id
        now: Returns the timestamp stamped on new transactions
    """

    def __init__(
        self,
        store: AccountStore,
        converter: CurrencyConverter,
        id_factory: Callable[[], str] = _new_transaction_id,
        now: Callable[[], datetime] = _utc_now
    ):
        self.store = store
        self.converter = converter
        self.id_factory = id_factory
        self.now = now
        self.logger = get_logger("ledger.settlement")

    def transfer(self, from_account_id: str, to_account_id: str, amount: Money) -> Transaction:
        """
        Move amount from one account to another

        Args:
            from_account_id: Source account, must not be a savings account
            to_account_id: Destination account
            amount: Amount to move, in any supported currency

        Returns:
            The Transaction appended to both accounts, denominated in the
            destination currency

        Raises:
            InvalidOperationError: Self-transfer, savings source or negative amount
            AccountNotFoundError: Either account does not exist
            InsufficientFundsError: Source balance does not cover the converted amount
        """
        with self.store.atomic():
            if from_account_id == to_account_id:
                self._reject("transfer", from_account_id, "Cannot make a transfer to the same account")

            from_account = self._get_account(from_account_id, "transfer")
            to_account = self._get_account(to_account_id, "transfer")

            if not from_account.can_be_transfer_source():
                self._reject(
                    "transfer", from_account_id,
                    "The transfer functionality cannot be performed from a Savings Account"
                )
            self._require_non_negative("transfer", from_account_id, amount)

            amount_deducted = self.converter.convert(amount, from_account.currency)
            if from_account.balance.amount < amount_deducted.amount:
                self._insufficient_funds("transfer", from_account, amount_deducted)

            amount_added = self.converter.convert(amount, to_account.currency)

            transaction = Transaction(
                id=self.id_factory(),
                from_account_id=from_account_id,
                to_account_id=to_account_id,
                amount=amount_added,
                timestamp=self.now()
            )

            from_account.debit(amount_deducted)
            from_account.record(transaction)
            to_account.credit(amount_added)
            to_account.record(transaction)

        log_action(
            self.logger, "info", "Transfer settled",
            action="transfer", resource=f"transaction:{transaction.id}",
            extra={
                "from_account": from_account_id,
                "to_account": to_account_id,
                "requested": amount.to_string(),
                "deducted": amount_deducted.to_string(),
                "added": amount_added.to_string()
            }
        )
        return transaction

    def withdraw(self, account_id: str, amount: Money) -> Transaction:
        """
        Withdraw amount from an account

        An amount in a foreign currency is converted into the account currency
        first. The caller's Money is left untouched; the converted value is the
        one debited and recorded.

        Raises:
            AccountNotFoundError: Account does not exist
            InvalidOperationError: Negative amount
            InsufficientFundsError: Balance does not cover the converted amount
        """
        with self.store.atomic():
            account = self._get_account(account_id, "withdraw")
            self._require_non_negative("withdraw", account_id, amount)

            withdrawn = amount
            if amount.currency != account.currency:
                withdrawn = self.converter.convert(amount, account.currency)

            if account.balance.amount < withdrawn.amount:
                self._insufficient_funds("withdraw", account, withdrawn)

            transaction = Transaction(
                id=self.id_factory(),
                from_account_id=account_id,
                to_account_id=account_id,
                amount=withdrawn,
                timestamp=self.now()
            )

            account.debit(withdrawn)
            account.record(transaction)

        log_action(
            self.logger, "info", "Withdrawal settled",
            action="withdraw", resource=f"transaction:{transaction.id}",
            extra={
                "account": account_id,
                "requested": amount.to_string(),
                "withdrawn": withdrawn.to_string()
            }
        )
        return transaction

    def check_funds(self, account_id: str) -> Money:
        """Current balance of an account"""
        with self.store.atomic():
            return self._get_account(account_id, "check_funds").balance

    def retrieve_transactions(self, account_id: str) -> List[Transaction]:
        """Transaction history of an account in insertion order"""
        with self.store.atomic():
            return list(self._get_account(account_id, "retrieve_transactions").transactions)

    def _get_account(self, account_id: str, action: str) -> Account:
        account = self.store.get(account_id)
        if account is None:
            self._log_rejection(action, account_id, "Specified account does not exist")
            raise AccountNotFoundError(account_id)
        return account

    def _require_non_negative(self, action: str, account_id: str, amount: Money) -> None:
        if amount.is_negative():
            self._reject(action, account_id, f"Amount must not be negative, got {amount.to_string()}")

    def _reject(self, action: str, account_id: str, reason: str) -> None:
        self._log_rejection(action, account_id, reason)
        raise InvalidOperationError(reason)

    def _insufficient_funds(self, action: str, account: Account, requested: Money) -> None:
        self._log_rejection(action, account.id, "Insufficient funds")
        raise InsufficientFundsError(account.id, requested, account.balance)

    def _log_rejection(self, action: str, account_id: Optional[str], reason: str) -> None:
        log_action(
            self.logger, "warning", f"{action} rejected: {reason}",
            action=action, resource=f"account:{account_id}"
        )
