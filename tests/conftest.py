from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from barberbook.application.exceptions import LedgerRejectedError, LedgerUpstreamError
from barberbook.application.use_cases.booking_coordinator import BookingCoordinator
from barberbook.domain.entities.barber import Barber
from barberbook.domain.entities.booking_session import BookingSession
from barberbook.domain.entities.reservation import Reservation, ReservationRequest
from barberbook.domain.entities.service import Service
from barberbook.infrastructure.ledger.memory_ledger import InMemoryLedger


class ScriptedLedger(InMemoryLedger):
    """InMemoryLedger with knobs for busy barbers, failing calls and gated checks."""

    def __init__(self, barbers: list[Barber], services: list[Service]) -> None:
        super().__init__(barbers=barbers, services=services)
        self.busy: set[str] = set()
        self.failing_checks: set[str] = set()
        self.fail_all_checks = False
        self.fail_create: Exception | None = None
        self.fail_cancel: Exception | None = None
        self.fail_reservations = False
        self.gates: dict[tuple[str, datetime], asyncio.Event] = {}
        self.check_calls: list[tuple[str, datetime, int]] = []
        self.create_calls: list[ReservationRequest] = []

    async def check_available(self, barber_id: str, start: datetime, duration_min: int) -> bool:
        self.check_calls.append((barber_id, start, duration_min))
        gate = self.gates.get((barber_id, start))
        if gate is not None:
            await gate.wait()
        if self.fail_all_checks or barber_id in self.failing_checks:
            raise LedgerUpstreamError("Unable to check availability")
        if barber_id in self.busy:
            return False
        return await super().check_available(barber_id, start, duration_min)

    async def create_reservation(self, request: ReservationRequest) -> Reservation:
        self.create_calls.append(request)
        if self.fail_create is not None:
            raise self.fail_create
        return await super().create_reservation(request)

    async def cancel_reservation(self, reservation_id: str) -> Reservation:
        if self.fail_cancel is not None:
            raise self.fail_cancel
        return await super().cancel_reservation(reservation_id)

    async def list_reservations(self) -> list[Reservation]:
        if self.fail_reservations:
            raise LedgerUpstreamError("Ledger unavailable")
        return await super().list_reservations()


BARBER_A = Barber(id="a", name="Barber A")
BARBER_B = Barber(id="b", name="Barber B")
HAIRCUT = Service(name="Haircut", price=18, duration_min=30)
BEARD = Service(name="Beard Trim", price=10, duration_min=15)


@pytest.fixture
def ledger() -> ScriptedLedger:
    return ScriptedLedger(barbers=[BARBER_A, BARBER_B], services=[HAIRCUT, BEARD])


@pytest.fixture
def coordinator(ledger: ScriptedLedger) -> BookingCoordinator:
    return BookingCoordinator(session=BookingSession(session_id="test"), ledger=ledger)


@pytest.fixture
def conflict_error() -> LedgerRejectedError:
    return LedgerRejectedError("Appointment overlaps an existing appointment", status_code=409)
