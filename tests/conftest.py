"""Shared pytest fixtures for bankdesk tests."""

import logging
import tempfile
import os
from decimal import Decimal
import pytest

from bankdesk.database.factories import create_sqlite_database
from bankdesk.domain.entities import AccountType
from bankdesk.domain.ledger import LedgerService
from bankdesk.domain.locking import LockCoordinator


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup, including WAL side files
    db.disconnect()
    for path in (db_path, f"{db_path}-wal", f"{db_path}-shm"):
        if os.path.exists(path):
            os.unlink(path)


@pytest.fixture
def locks():
    """Create a LockCoordinator with a short wait budget."""
    return LockCoordinator(timeout=2.0)


@pytest.fixture
def ledger(temp_db, locks):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db, locks)


@pytest.fixture
def account_a(ledger):
    """Savings account of owner 1 holding 500.00."""
    return ledger.open_account(owner_id=1, account_type=AccountType.SAVINGS, initial_balance=Decimal("500.00"))


@pytest.fixture
def account_b(ledger):
    """Current account of owner 2 holding 100.00."""
    return ledger.open_account(owner_id=2, account_type=AccountType.CURRENT, initial_balance=Decimal("100.00"))


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


def balances(ledger, *accounts):
    """Current balances of the given accounts, in order."""
    return [ledger.get_account(acc.id).balance for acc in accounts]


def history(ledger, account):
    """Full transaction history of an account, newest first."""
    return list(ledger.list_transactions(account.id))


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by CLI runs so later tests log nowhere stale."""
    yield
    logger = logging.getLogger("bankdesk")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
