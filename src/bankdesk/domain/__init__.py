"""Domain layer for bankdesk application."""

from bankdesk.domain.entities import (
    Account,
    AccountStatus,
    AccountSummary,
    AccountType,
    TransactionKind,
    TransactionRecord,
)

__all__ = [
    "Account",
    "AccountStatus",
    "AccountSummary",
    "AccountType",
    "TransactionKind",
    "TransactionRecord",
]
