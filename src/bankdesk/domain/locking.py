"""Per-account lock coordination.

Every mutating ledger operation holds the locks of all accounts it touches for
the whole of its unit of work. Locks are always taken in ascending account id
order, so two transfers between the same pair of accounts in opposite
directions cannot deadlock. Each wait is bounded; running out of time raises
``BusyError`` and releases whatever was already held.
"""

import logging
import threading
import time
from collections import deque
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from bankdesk.domain.errors import BusyError, accounts_busy

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 5.0


class _FairLock:
    """Mutex that grants ownership in arrival order."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._waiters: deque[object] = deque()
        self._held = False
        # Callers between checkout and checkin; guarded by the coordinator registry lock
        self.users = 0

    def acquire(self, timeout: float) -> bool:
        ticket = object()
        with self._cond:
            self._waiters.append(ticket)
            granted = self._cond.wait_for(
                lambda: not self._held and self._waiters[0] is ticket, timeout=timeout
            )
            if granted:
                self._waiters.popleft()
                self._held = True
                return True
            # Step out of the queue so the next waiter can move to the front
            self._waiters.remove(ticket)
            self._cond.notify_all()
            return False

    def release(self) -> None:
        with self._cond:
            self._held = False
            self._cond.notify_all()


class LockCoordinator:
    """Hands out scoped, ordered, bounded-wait locks on accounts."""

    def __init__(self, timeout: float = DEFAULT_LOCK_TIMEOUT):
        """Initialize lock coordinator.

        Args:
            timeout: Default total seconds acquire_all may wait for all its locks
        """
        self.timeout = timeout
        self._locks: dict[int, _FairLock] = {}
        self._registry_lock = threading.Lock()

    def _checkout(self, account_id: int) -> _FairLock:
        with self._registry_lock:
            lock = self._locks.get(account_id)
            if lock is None:
                lock = self._locks[account_id] = _FairLock()
            lock.users += 1
            return lock

    def _checkin(self, account_id: int, lock: _FairLock) -> None:
        with self._registry_lock:
            lock.users -= 1
            # Drop idle locks
            if lock.users == 0:
                del self._locks[account_id]

    @contextmanager
    def acquire_all(
        self, account_ids: Iterable[int], timeout: Optional[float] = None
    ) -> Iterator[tuple[int, ...]]:
        """Lock every account in canonical order for the duration of the block.

        Args:
            account_ids: Accounts to lock; duplicates are ignored
            timeout: Total wait budget in seconds (defaults to the coordinator's)

        Yields:
            The locked account ids in the order they were acquired

        Raises:
            BusyError: If the locks cannot all be acquired within the budget
        """
        ordered = tuple(sorted(set(account_ids)))
        budget = self.timeout if timeout is None else timeout
        deadline = time.monotonic() + budget
        held: list[_FairLock] = []
        checked_out: list[tuple[int, _FairLock]] = []
        try:
            for account_id in ordered:
                lock = self._checkout(account_id)
                checked_out.append((account_id, lock))
                if not lock.acquire(max(0.0, deadline - time.monotonic())):
                    logger.warning(
                        "Timed out waiting for account lock",
                        extra={"account_id": account_id, "account_ids": list(ordered)},
                    )
                    raise BusyError(accounts_busy(list(ordered), budget))
                held.append(lock)
            yield ordered
        finally:
            for lock in reversed(held):
                lock.release()
            for account_id, lock in reversed(checked_out):
                self._checkin(account_id, lock)
