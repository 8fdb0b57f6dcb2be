"""Tests for account reference resolution."""

import pytest

from bankdesk.domain.errors import AccountNotFoundError
from bankdesk.utils.account_resolver import resolve_account


def test_resolve_by_id(ledger, account_a):
    assert resolve_account(ledger, account_a.id) == account_a.id
    assert resolve_account(ledger, str(account_a.id)) == account_a.id


def test_resolve_by_number(ledger, account_b):
    assert resolve_account(ledger, f" {account_b.account_number} ") == account_b.id


@pytest.mark.parametrize("reference", [404, "404", "ACC9999999999"])
def test_resolve_unknown(ledger, reference):
    with pytest.raises(AccountNotFoundError):
        resolve_account(ledger, reference)
