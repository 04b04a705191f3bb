"""Tests for the per-entity lock registry."""

import threading
import time

from app.core.entity_lock import EntityLockRegistry


def test_same_entity_runs_serially():
    registry = EntityLockRegistry()
    active = []
    overlaps = []

    def worker():
        with registry.hold("note", "n1"):
            active.append(1)
            if len(active) > 1:
                overlaps.append(True)
            time.sleep(0.01)
            active.pop()

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert overlaps == []


def test_different_entities_do_not_block():
    registry = EntityLockRegistry()
    entered = threading.Event()

    def other():
        with registry.hold("note", "n2"):
            entered.set()

    with registry.hold("note", "n1"):
        t = threading.Thread(target=other)
        t.start()
        assert entered.wait(timeout=1)
        t.join()


def test_kinds_are_separate_namespaces():
    registry = EntityLockRegistry()
    with registry.hold("note", "x"):
        with registry.hold("chat", "x"):
            assert len(registry) == 2


def test_slots_are_released():
    registry = EntityLockRegistry()
    with registry.hold("chat", "c1"):
        assert len(registry) == 1
    assert len(registry) == 0


def test_slot_released_when_body_raises():
    registry = EntityLockRegistry()
    try:
        with registry.hold("chat", "c1"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert len(registry) == 0
    with registry.hold("chat", "c1"):
        pass
