from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from barberbook.domain.entities.barber import Barber
from barberbook.domain.entities.reservation import Reservation, ReservationRequest
from barberbook.domain.entities.service import Service


class LedgerPort(ABC):
    """
    Authoritative store of barbers, services and reservations.

    Adapters raise:
        LedgerUpstreamError: transport failures and server errors
        LedgerRejectedError: the ledger refused a mutation (carries a human-readable reason)
        LedgerContractError: a response did not have the expected shape
    """

    @abstractmethod
    async def list_barbers(self) -> list[Barber]:
        raise NotImplementedError

    @abstractmethod
    async def list_services(self) -> list[Service]:
        raise NotImplementedError

    @abstractmethod
    async def list_reservations(self) -> list[Reservation]:
        raise NotImplementedError

    @abstractmethod
    async def check_available(self, barber_id: str, start: datetime, duration_min: int) -> bool:
        """Check if barber is free for [start, start + duration_min)."""
        raise NotImplementedError

    @abstractmethod
    async def create_reservation(self, request: ReservationRequest) -> Reservation:
        """Create a booked reservation. The ledger re-checks for conflicts."""
        raise NotImplementedError

    @abstractmethod
    async def cancel_reservation(self, reservation_id: str) -> Reservation:
        """Move a reservation to canceled. Returns the updated reservation."""
        raise NotImplementedError
