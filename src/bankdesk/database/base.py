"""Abstract storage interfaces for the ledger."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterator, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from bankdesk.domain.entities import (
    Account,
    AccountStatus,
    AccountType,
    TransactionKind,
    TransactionRecord,
)


class AccountStore(ABC):
    """Account rows keyed by id and by account number.

    Instances are bound to one unit of work or snapshot and must not be used
    after it ends.
    """

    @abstractmethod
    def get(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_by_number(self, account_number: str) -> Optional[Account]:
        """Get account by public account number."""
        pass

    @abstractmethod
    def get_by_owner(self, owner_id: int) -> Optional[Account]:
        """Get the owner's primary account (oldest ACTIVE, else oldest)."""
        pass

    @abstractmethod
    def list_by_owner(self, owner_id: int) -> list[Account]:
        """List all accounts of an owner, oldest first."""
        pass

    @abstractmethod
    def number_exists(self, account_number: str) -> bool:
        """Check whether an account number has ever been issued."""
        pass

    @abstractmethod
    def insert(
        self, owner_id: int, account_number: str, account_type: AccountType, balance: Decimal
    ) -> Account:
        """Create an ACTIVE account row. Returns the new account."""
        pass

    @abstractmethod
    def apply_delta(self, account_id: int, signed_amount: Decimal, expected_version: int) -> Decimal:
        """Add a signed amount to the balance. Returns the new balance.

        Raises:
            AccountNotFoundError: If the account does not exist
            InsufficientFundsError: If the result would be negative
            VersionConflictError: If the row changed since ``expected_version``
        """
        pass

    @abstractmethod
    def set_status(self, account_id: int, status: AccountStatus, expected_version: int) -> None:
        """Change account status under the same version check as apply_delta."""
        pass


class TransactionLog(ABC):
    """Append-only record of balance-affecting events."""

    @abstractmethod
    def append(
        self, account_id: int, kind: TransactionKind, amount: Decimal, description: str
    ) -> TransactionRecord:
        """Append a record. Storage errors propagate to abort the unit of work."""
        pass

    @abstractmethod
    def list_by_account(
        self,
        account_id: int,
        newest_first: bool = True,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> Iterator[TransactionRecord]:
        """Lazily iterate an account's records."""
        pass

    @abstractmethod
    def signed_total(self, account_id: int) -> Decimal:
        """Sum of the account's records with the sign implied by their kind."""
        pass


@dataclass(frozen=True)
class UnitOfWork:
    """Stores bound to one database transaction."""

    accounts: AccountStore
    log: TransactionLog


class Database(ABC):
    """Abstract database interface for bankdesk."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release all pooled connections."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[UnitOfWork]:
        """Check out a write transaction.

        Commits when the block exits normally and rolls back on any exception.
        Storage errors are re-raised as ``StorageFailureError``.
        """
        pass

    @abstractmethod
    def snapshot(self) -> AbstractContextManager[UnitOfWork]:
        """Check out a read-only, point-in-time view. Never commits."""
        pass
