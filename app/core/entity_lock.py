"""
Per-entity serialization.

Every note and chat is an independent unit of consistency: operations that
address the same entity run strictly one after another, operations on
different entities never wait on each other. Locks are reference counted
and dropped from the registry once nobody holds or waits on them.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Tuple

EntityKey = Tuple[str, str]


class _Slot:
    __slots__ = ("lock", "refs")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.refs = 0


class EntityLockRegistry:
    def __init__(self) -> None:
        self._slots: Dict[EntityKey, _Slot] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, kind: str, entity_id: str) -> Iterator[None]:
        key = (kind, entity_id)
        with self._guard:
            slot = self._slots.get(key)
            if slot is None:
                slot = self._slots[key] = _Slot()
            slot.refs += 1
        slot.lock.acquire()
        try:
            yield
        finally:
            slot.lock.release()
            with self._guard:
                slot.refs -= 1
                if slot.refs == 0:
                    self._slots.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._slots)


registry = EntityLockRegistry()


def entity_lock(kind: str, entity_id: str):
    """Hold the process-wide lock for one entity."""
    return registry.hold(kind, entity_id)
