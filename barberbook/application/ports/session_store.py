from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol

from barberbook.domain.entities.booking_session import BookingSession


class SessionOwner(Protocol):
    """Anything that owns a BookingSession, keyed by its session_id."""

    @property
    def session(self) -> BookingSession: ...


class SessionStorePort(ABC):
    @abstractmethod
    def new_session_id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def put(self, owner: SessionOwner) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str) -> SessionOwner | None:
        raise NotImplementedError
