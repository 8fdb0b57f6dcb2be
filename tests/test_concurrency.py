"""Concurrent ledger operations against one database file."""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
import random

from bankdesk.domain.errors import BusyError, InsufficientFundsError

from conftest import balances


def test_opposite_transfers_both_complete(ledger, account_a, account_b):
    with ThreadPoolExecutor(max_workers=2) as pool:
        forward = pool.submit(ledger.transfer, account_a.id, account_b.account_number, "100.00")
        backward = pool.submit(ledger.transfer, account_b.id, account_a.account_number, "50.00")
        forward.result(timeout=30)
        backward.result(timeout=30)

    assert balances(ledger, account_a, account_b) == [Decimal("450.00"), Decimal("150.00")]


def test_many_transfers_conserve_money(ledger):
    accounts = [
        ledger.open_account(owner_id=n, account_type="CURRENT", initial_balance="100.00") for n in range(4)
    ]
    rng = random.Random(1234)
    jobs = []
    for _ in range(60):
        sender, recipient = rng.sample(accounts, 2)
        jobs.append((sender.id, recipient.account_number, f"{rng.randint(1, 6000) / 100:.2f}"))

    def run(job):
        try:
            ledger.transfer(*job)
            return "ok"
        except InsufficientFundsError:
            return "refused"
        except BusyError:
            return "busy"

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(run, jobs))

    assert "ok" in outcomes
    final = balances(ledger, *accounts)
    assert sum(final) == Decimal("400.00")
    assert all(balance >= 0 for balance in final)
    for account in accounts:
        assert ledger.reconcile(account.id) == Decimal("0.00")


def test_concurrent_debits_never_overdraw(ledger, account_b):
    def debit(_):
        try:
            ledger.debit(account_b.id, "30.00")
            return True
        except (InsufficientFundsError, BusyError):
            return False

    with ThreadPoolExecutor(max_workers=6) as pool:
        succeeded = sum(pool.map(debit, range(6)))

    assert succeeded <= 3
    assert balances(ledger, account_b) == [Decimal("100.00") - succeeded * Decimal("30.00")]
    assert ledger.reconcile(account_b.id) == Decimal("0.00")
