from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ReservationStatus(str, Enum):
    booked = "booked"
    canceled = "canceled"
    completed = "completed"


@dataclass(frozen=True)
class Reservation:
    id: str
    customer_name: str
    customer_phone: str
    barber_id: str
    service_name: str
    start_time: datetime
    end_time: datetime
    status: ReservationStatus = ReservationStatus.booked
    notes: str | None = None


@dataclass(frozen=True)
class ReservationRequest:
    """Read-only snapshot of a draft, sent to the ledger on commit."""

    customer_name: str
    customer_phone: str
    barber_id: str
    service_name: str
    start_time: datetime
    duration_min: int
    notes: str | None = None  # None when blank, never ""
