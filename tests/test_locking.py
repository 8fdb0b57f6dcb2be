"""Tests for per-account lock coordination."""

import threading
import time

import pytest

from bankdesk.domain.errors import BusyError
from bankdesk.domain.locking import LockCoordinator


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached in time")
        time.sleep(0.005)


class TestLockCoordinator:
    """Tests for LockCoordinator.acquire_all."""

    def test_locks_in_ascending_order_without_duplicates(self):
        locks = LockCoordinator(timeout=1.0)
        with locks.acquire_all([7, 3, 7, 5]) as ordered:
            assert ordered == (3, 5, 7)

    def test_locks_are_released_after_block(self):
        locks = LockCoordinator(timeout=0.2)
        with locks.acquire_all([1, 2]):
            pass
        with locks.acquire_all([2, 1]) as ordered:
            assert ordered == (1, 2)

    def test_locks_are_released_on_exception(self):
        locks = LockCoordinator(timeout=0.2)
        with pytest.raises(RuntimeError):
            with locks.acquire_all([1]):
                raise RuntimeError("boom")
        with locks.acquire_all([1]):
            pass

    def test_busy_when_lock_is_held(self):
        locks = LockCoordinator(timeout=0.1)
        with locks.acquire_all([1]):
            with pytest.raises(BusyError) as exc_info:
                with locks.acquire_all([1]):
                    pass
        assert exc_info.value.retryable
        assert "busy" in str(exc_info.value)

    def test_busy_releases_partially_acquired_locks(self):
        locks = LockCoordinator(timeout=0.1)
        with locks.acquire_all([2]):
            with pytest.raises(BusyError):
                # 1 is taken, then 2 times out
                with locks.acquire_all([1, 2]):
                    pass
            with locks.acquire_all([1], timeout=0.1):
                pass

    def test_explicit_timeout_overrides_default(self):
        locks = LockCoordinator(timeout=30.0)
        started = time.monotonic()
        with locks.acquire_all([1]):
            with pytest.raises(BusyError):
                with locks.acquire_all([1], timeout=0.05):
                    pass
        assert time.monotonic() - started < 5.0

    def test_disjoint_accounts_do_not_block(self):
        locks = LockCoordinator(timeout=0.2)
        entered = threading.Event()
        release = threading.Event()

        def hold_one():
            with locks.acquire_all([1]):
                entered.set()
                release.wait(2.0)

        worker = threading.Thread(target=hold_one)
        worker.start()
        try:
            assert entered.wait(2.0)
            with locks.acquire_all([2]):
                pass
        finally:
            release.set()
            worker.join()

    def test_waiters_are_served_in_arrival_order(self):
        locks = LockCoordinator(timeout=2.0)
        order = []

        def waiter(name):
            with locks.acquire_all([1]):
                order.append(name)

        with locks.acquire_all([1]):
            lock = locks._locks[1]
            threads = []
            for name in ("first", "second", "third"):
                thread = threading.Thread(target=waiter, args=(name,))
                thread.start()
                threads.append(thread)
                wait_until(lambda: len(lock._waiters) == len(threads))

        for thread in threads:
            thread.join()
        assert order == ["first", "second", "third"]

    def test_timed_out_waiter_leaves_queue(self):
        locks = LockCoordinator(timeout=0.05)
        with locks.acquire_all([1]):
            lock = locks._locks[1]
            with pytest.raises(BusyError):
                with locks.acquire_all([1]):
                    pass
            assert len(lock._waiters) == 0

    def test_idle_locks_are_evicted(self):
        locks = LockCoordinator(timeout=0.1)
        with locks.acquire_all([1, 2]):
            assert set(locks._locks) == {1, 2}
        assert locks._locks == {}

    def test_lock_survives_while_waited_on(self):
        locks = LockCoordinator(timeout=0.05)
        with locks.acquire_all([1]):
            lock = locks._locks[1]
            with pytest.raises(BusyError):
                with locks.acquire_all([1]):
                    pass
            assert locks._locks[1] is lock
            assert lock.users == 1
        assert locks._locks == {}

    def test_registry_empties_after_contention(self):
        locks = LockCoordinator(timeout=2.0)

        def work(n):
            with locks.acquire_all([n % 3, (n + 1) % 3]):
                pass

        threads = [threading.Thread(target=work, args=(n,)) for n in range(12)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert locks._locks == {}
