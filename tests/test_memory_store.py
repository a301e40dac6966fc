from __future__ import annotations

from dataclasses import dataclass

from barberbook.domain.entities.booking_session import BookingSession
from barberbook.infrastructure.store.memory_store import MemorySessionStore


@dataclass
class Holder:
    session: BookingSession


def test_store_keeps_any_session_owner():
    """Owners are stored by their session id, whatever their concrete type."""
    store = MemorySessionStore()
    holder = Holder(BookingSession(session_id=store.new_session_id()))
    store.put(holder)

    assert store.get(holder.session.session_id) is holder
    assert store.get("missing") is None


def test_store_evicts_oldest_session():
    store = MemorySessionStore(session_limit=2)
    first, second, third = (Holder(BookingSession(session_id=s)) for s in ("s1", "s2", "s3"))
    store.put(first)
    store.put(second)
    store.put(first)
    store.put(third)

    assert store.get("s1") is first
    assert store.get("s2") is None
    assert store.get("s3") is third
