"""Per-record locks for ledger read-modify-write sequences.

A lock is held across a whole command, including the unit-of-work commit that
happens after the handler returns, so two writers of one record never
interleave. Locks are keyed by record, created on demand and discarded once
nobody holds or waits on them.
"""

import threading
import time
from contextlib import contextmanager

import structlog
from protean.exceptions import ExpectedVersionError

from medstock.config import get_settings
from medstock.exceptions import RecordBusyError

logger = structlog.get_logger(__name__)


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class KeyedLocks:
    """A registry of mutexes addressed by string keys."""

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    def _checkout(self, key: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1
            return entry

    def _checkin(self, key: str, entry: _Entry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                self._entries.pop(key, None)

    def _acquire(self, key: str, deadline: float) -> _Entry:
        entry = self._checkout(key)
        remaining = max(deadline - time.monotonic(), 0)
        if entry.lock.acquire(timeout=remaining):
            return entry

        self._checkin(key, entry)
        logger.warning("record_lock_timeout", lock_key=key)
        raise RecordBusyError({"record": [f"{key} is busy, try again"]})

    def _release(self, key: str, entry: _Entry) -> None:
        entry.lock.release()
        self._checkin(key, entry)

    @contextmanager
    def hold(self, *keys: str, timeout: float | None = None):
        """Hold every lock in ``keys`` for the duration of the block.

        Keys are taken in sorted order so callers locking overlapping sets
        cannot deadlock. Raises ``RecordBusyError`` if any lock is not free
        within ``timeout`` seconds; locks already taken are released first.
        """
        if timeout is None:
            timeout = get_settings().lock_timeout
        deadline = time.monotonic() + timeout

        held = []
        try:
            for key in sorted(set(keys)):
                held.append((key, self._acquire(key, deadline)))
            yield
        finally:
            for key, entry in reversed(held):
                self._release(key, entry)

    def active_keys(self) -> list[str]:
        with self._guard:
            return sorted(self._entries)


record_locks = KeyedLocks()


@contextmanager
def exclusive(*keys: str, timeout: float | None = None):
    """Hold ``keys`` in this process and report a lost version race as ``RecordBusyError``.

    The locks only exclude writers in this process. Writers in other worker
    processes are caught by the repository version check, which raises
    ``ExpectedVersionError`` when the stored record changed under us.
    """
    with record_locks.hold(*keys, timeout=timeout):
        try:
            yield
        except ExpectedVersionError as exc:
            logger.warning("record_version_conflict", lock_keys=sorted(keys), error=str(exc))
            raise RecordBusyError({"record": ["Record was changed by another writer, try again"]}) from exc


def ledger_key(record_id) -> str:
    return f"ledger:{record_id}"


def item_key(item_id) -> str:
    return f"item:{item_id}"


def site_key(site_id) -> str:
    return f"site:{site_id}"


def stock_area_key(stock_area_id) -> str:
    return f"stock-area:{stock_area_id}"
