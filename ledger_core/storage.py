"""
Account Store Module

Abstract account store interface and the in-memory implementation shared by
the interest scheduler and the settlement engine. The store owns the Account
records it hands out; callers use them for the duration of one operation,
inside atomic(), and do not keep them afterwards.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Optional
from contextlib import contextmanager
import threading

from .accounts import Account, AccountKind


class AccountStore(ABC):
    """Abstract interface for account stores"""

    @abstractmethod
    def add(self, account: Account) -> None:
        """Add an account to the store"""
        pass

    @abstractmethod
    def get(self, account_id: str) -> Optional[Account]:
        """Get the account with this id, or None"""
        pass

    @abstractmethod
    def get_all(self) -> List[Account]:
        """All accounts in insertion order"""
        pass

    @abstractmethod
    def exists(self, account_id: str) -> bool:
        """Check if an account exists"""
        pass

    @abstractmethod
    def remove(self, account_id: str) -> bool:
        """Remove an account, returning whether it was present"""
        pass

    def count(self) -> int:
        return len(self.get_all())

    def get_by_kind(self, kind: AccountKind) -> List[Account]:
        """All accounts of the given kind"""
        return [account for account in self.get_all() if account.kind == kind]

    def begin_transaction(self) -> None:
        """Start an atomic block (default no-op)"""
        pass

    def end_transaction(self) -> None:
        """End an atomic block (default no-op)"""
        pass

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Context manager for operations that must be observed as a whole"""
        self.begin_transaction()
        try:
            yield
        finally:
            self.end_transaction()


class InMemoryAccountStore(AccountStore):
    """Dict-backed account store"""

    def __init__(self, accounts: Optional[List[Account]] = None):
        self._accounts: Dict[str, Account] = {}
        self._lock = threading.RLock()
        for account in accounts or []:
            self.add(account)

    def add(self, account: Account) -> None:
        with self._lock:
            if account.id in self._accounts:
                raise ValueError(f"Account {account.id} already exists")
            self._accounts[account.id] = account

    def get(self, account_id: str) -> Optional[Account]:
        with self._lock:
            return self._accounts.get(account_id)

    def get_all(self) -> List[Account]:
        with self._lock:
            return list(self._accounts.values())

    def exists(self, account_id: str) -> bool:
        with self._lock:
            return account_id in self._accounts

    def remove(self, account_id: str) -> bool:
        with self._lock:
            return self._accounts.pop(account_id, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._accounts)

    def begin_transaction(self) -> None:
        self._lock.acquire()

    def end_transaction(self) -> None:
        self._lock.release()
