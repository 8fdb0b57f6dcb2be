"""SQLAlchemy models for the bankdesk ledger database."""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional
from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

from bankdesk.domain.entities import AccountStatus, AccountType, TransactionKind
from bankdesk.domain.money import from_cents, to_cents

Base = declarative_base()


class Cents(TypeDecorator):
    """Decimal amount stored as integer minor units."""

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[int]:
        if value is None:
            return None
        return to_cents(value)

    def process_result_value(self, value: Optional[int], dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return from_cents(value)


class Account(Base):
    """Deposit account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, nullable=False, index=True)
    account_number = Column(String(32), unique=True, nullable=False)
    account_type = Column(Enum(AccountType, native_enum=False, length=16), nullable=False)
    balance = Column(Cents, nullable=False)
    status = Column(
        Enum(AccountStatus, native_enum=False, length=16),
        default=AccountStatus.ACTIVE,
        nullable=False,
    )
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),)
    # Every flush of a changed row issues UPDATE ... WHERE version = <loaded version>
    __mapper_args__ = {"version_id_col": version}


class TransactionRecord(Base):
    """Append-only ledger entry model."""

    __tablename__ = "transaction_records"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    kind = Column(Enum(TransactionKind, native_enum=False, length=16), nullable=False)
    amount = Column(Cents, nullable=False)
    description = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    # sqlite_autoincrement keeps ids monotonic and never reused
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transaction_records_amount_positive"),
        {"sqlite_autoincrement": True},
    )


def _configure_sqlite(engine: Engine) -> None:
    """Let SQLAlchemy emit BEGIN itself so writers can ask for IMMEDIATE."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        if engine.url.database not in (None, "", ":memory:"):
            cursor.execute("PRAGMA journal_mode = WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        mode = conn.get_execution_options().get("sqlite_begin", "DEFERRED")
        conn.exec_driver_sql(f"BEGIN {mode}")


def create_ledger_engine(database_url: str, busy_timeout: float = 30.0) -> Engine:
    """Create a SQLAlchemy engine and make sure the schema exists."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": busy_timeout}
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    if engine.dialect.name == "sqlite":
        _configure_sqlite(engine)
    Base.metadata.create_all(engine)
    return engine
