"""Domain model entities for bankdesk.

These are pure data classes representing ledger concepts, independent of the
database schema. Storage-only columns (such as the optimistic ``version``
counter) are carried on ``Account`` so that the ledger can pass them back to
compare-and-swap writes, but nothing outside the ledger should rely on them.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class AccountType(str, Enum):
    """Kind of deposit account."""

    SAVINGS = "SAVINGS"
    CURRENT = "CURRENT"


class AccountStatus(str, Enum):
    """Account lifecycle state."""

    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


class TransactionKind(str, Enum):
    """Kind of balance-affecting event. The sign is implied by the kind."""

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    TRANSFER_IN = "TRANSFER_IN"
    TRANSFER_OUT = "TRANSFER_OUT"

    @property
    def sign(self) -> int:
        if self in (TransactionKind.CREDIT, TransactionKind.TRANSFER_IN):
            return 1
        return -1


@dataclass(frozen=True)
class Account:
    """Deposit account domain entity."""

    id: int
    owner_id: int
    account_number: str
    account_type: AccountType
    balance: Decimal
    status: AccountStatus
    version: int
    created_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status is AccountStatus.ACTIVE


@dataclass(frozen=True)
class TransactionRecord:
    """Immutable ledger entry domain entity."""

    id: int
    account_id: int
    kind: TransactionKind
    amount: Decimal
    description: str
    timestamp: datetime

    @property
    def signed_amount(self) -> Decimal:
        return self.amount * self.kind.sign


@dataclass(frozen=True)
class AccountSummary:
    """Customer-facing view of an account."""

    account_number: str
    account_type: AccountType
    balance: Decimal

    @classmethod
    def from_account(cls, account: Account) -> "AccountSummary":
        return cls(
            account_number=account.account_number,
            account_type=account.account_type,
            balance=account.balance,
        )
