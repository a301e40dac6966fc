from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta

from barberbook.application.exceptions import LedgerRejectedError
from barberbook.application.ports.ledger import LedgerPort
from barberbook.domain.entities.barber import Barber
from barberbook.domain.entities.reservation import Reservation, ReservationRequest, ReservationStatus
from barberbook.domain.entities.service import Service
from barberbook.infrastructure.ledger.seed_data import DEFAULT_BARBERS, DEFAULT_SERVICES


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open intervals: back-to-back appointments do not overlap."""
    return a_start < b_end and b_start < a_end


class InMemoryLedger(LedgerPort):
    """Process-local ledger for dev/local runs and tests. Enforces no overlapping bookings per barber."""

    def __init__(
        self,
        barbers: list[Barber] | None = None,
        services: list[Service] | None = None,
    ) -> None:
        self._barbers = list(DEFAULT_BARBERS if barbers is None else barbers)
        self._services = list(DEFAULT_SERVICES if services is None else services)
        self._reservations: dict[str, Reservation] = {}
        self._logger = logging.getLogger(__name__)

    async def list_barbers(self) -> list[Barber]:
        return list(self._barbers)

    async def list_services(self) -> list[Service]:
        return list(self._services)

    async def list_reservations(self) -> list[Reservation]:
        return sorted(self._reservations.values(), key=lambda r: r.start_time)

    async def check_available(self, barber_id: str, start: datetime, duration_min: int) -> bool:
        return self._is_free(barber_id, start, start + timedelta(minutes=duration_min))

    async def create_reservation(self, request: ReservationRequest) -> Reservation:
        if not any(b.id == request.barber_id for b in self._barbers):
            raise LedgerRejectedError("Barber not found", status_code=422)
        if not any(s.name == request.service_name for s in self._services):
            raise LedgerRejectedError("Service not available", status_code=422)
        if request.duration_min <= 0:
            raise LedgerRejectedError("Duration must be positive", status_code=422)

        end = request.start_time + timedelta(minutes=request.duration_min)
        if not self._is_free(request.barber_id, request.start_time, end):
            raise LedgerRejectedError("Time slot not available", status_code=409)

        reservation = Reservation(
            id=f"r{len(self._reservations) + 1}",
            customer_name=request.customer_name,
            customer_phone=request.customer_phone,
            barber_id=request.barber_id,
            service_name=request.service_name,
            start_time=request.start_time,
            end_time=end,
            status=ReservationStatus.booked,
            notes=request.notes,
        )
        self._reservations[reservation.id] = reservation
        self._logger.info(
            "In-memory reservation created",
            extra={
                "reservation_id": reservation.id,
                "barber_id": reservation.barber_id,
                "start_time": reservation.start_time.isoformat(),
            },
        )
        return reservation

    async def cancel_reservation(self, reservation_id: str) -> Reservation:
        target = self._reservations.get(reservation_id)
        if target is None:
            raise LedgerRejectedError("Appointment not found", status_code=404)
        if target.status == ReservationStatus.canceled:
            raise LedgerRejectedError("Appointment already canceled", status_code=409)

        canceled = replace(target, status=ReservationStatus.canceled)
        self._reservations[reservation_id] = canceled
        self._logger.info("In-memory reservation canceled", extra={"reservation_id": reservation_id})
        return canceled

    def _is_free(self, barber_id: str, start: datetime, end: datetime) -> bool:
        for r in self._reservations.values():
            if r.barber_id != barber_id or r.status != ReservationStatus.booked:
                continue
            if overlaps(start, end, r.start_time, r.end_time):
                return False
        return True
