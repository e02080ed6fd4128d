"""
Ledger Exceptions

Domain errors raised by the settlement engine. They subclass ValueError so
callers that already treat ValueError as a rejected operation keep working.
"""

from typing import Optional

from .currency import Money


class LedgerError(ValueError):
    """Base class for all ledger errors"""


class AccountNotFoundError(LedgerError):
    """Referenced account id does not exist in the store"""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found")


class InvalidOperationError(LedgerError):
    """Operation is not permitted for the given accounts or amount"""


class InsufficientFundsError(LedgerError):
    """Balance does not cover the requested amount after conversion"""

    def __init__(self, account_id: str, requested: Money, available: Optional[Money] = None):
        self.account_id = account_id
        self.requested = requested
        self.available = available
        message = f"Insufficient funds in account {account_id}: requested {requested.to_string()}"
        if available is not None:
            message += f", available {available.to_string()}"
        super().__init__(message)
