"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the ledger never hands ORM rows
(which are bound to a session) to its callers.
"""

from datetime import datetime, UTC

from bankdesk.domain import entities as domain
from bankdesk.database.models import (
    Account as ORMAccount,
    TransactionRecord as ORMTransactionRecord,
)


def _aware(value: datetime) -> datetime:
    """SQLite drops tzinfo; every stored instant is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        owner_id=orm_account.owner_id,
        account_number=orm_account.account_number,
        account_type=domain.AccountType(orm_account.account_type),
        balance=orm_account.balance,
        status=domain.AccountStatus(orm_account.status),
        version=orm_account.version,
        created_at=_aware(orm_account.created_at),
    )


def record_to_domain(orm_record: ORMTransactionRecord) -> domain.TransactionRecord:
    """Convert SQLAlchemy TransactionRecord model to domain TransactionRecord entity."""
    return domain.TransactionRecord(
        id=orm_record.id,
        account_id=orm_record.account_id,
        kind=domain.TransactionKind(orm_record.kind),
        amount=orm_record.amount,
        description=orm_record.description,
        timestamp=_aware(orm_record.created_at),
    )
