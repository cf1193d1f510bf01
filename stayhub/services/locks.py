"""
Per-entity lock registry.

Transitions on one booking are serialised inside the process with a lock
keyed by booking id; writers on different bookings never contend. Across
processes the ``version`` column on ``bookings`` catches the same race.

Strategy:
- One ``threading.Lock`` per key, created on first use
- Each entry counts the threads holding or waiting for it and is dropped
  when the last one leaves, so the registry only holds keys in use
- The registry itself is guarded by a module-level lock
"""

import threading
from contextlib import contextmanager
from typing import Iterator


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


_locks: dict[str, _Entry] = {}
_registry_lock = threading.Lock()


def _acquire_entry(key: str) -> _Entry:
    with _registry_lock:
        entry = _locks.get(key)
        if entry is None:
            entry = _locks[key] = _Entry()
        entry.users += 1
        return entry


def _release_entry(key: str, entry: _Entry) -> None:
    with _registry_lock:
        entry.users -= 1
        if entry.users == 0:
            del _locks[key]


@contextmanager
def entity_lock(entity_type: str, entity_id: str) -> Iterator[None]:
    """
    Hold the lock for one entity for the duration of the block.

    Args:
        entity_type: Kind of entity, e.g. "booking"
        entity_id: Entity identifier

    Example:
        >>> with entity_lock("booking", "bk-1"):
        ...     transition_and_commit()
    """
    key = f"{entity_type}:{entity_id}"
    entry = _acquire_entry(key)
    try:
        with entry.lock:
            yield
    finally:
        _release_entry(key, entry)


def held_lock_count() -> int:
    """Number of entity keys currently locked or awaited."""
    with _registry_lock:
        return len(_locks)
