from __future__ import annotations

from dataclasses import dataclass, field

from barberbook.domain.entities.availability import AvailabilityStatus
from barberbook.domain.entities.barber import Barber
from barberbook.domain.entities.booking_draft import BookingDraft
from barberbook.domain.entities.reservation import Reservation
from barberbook.domain.entities.service import Service
from barberbook.domain.entities.submission import SubmissionState


@dataclass
class BookingSession:
    """Everything one booking form shows. Mutated only by BookingCoordinator."""

    session_id: str
    draft: BookingDraft = field(default_factory=BookingDraft)
    catalog: list[Barber] = field(default_factory=list)  # full, unfiltered barber list
    barbers: list[Barber] = field(default_factory=list)  # visible (filtered) barber list
    services: list[Service] = field(default_factory=list)
    reservations: list[Reservation] = field(default_factory=list)
    availability: AvailabilityStatus = field(default_factory=AvailabilityStatus)
    submission: SubmissionState = SubmissionState.idle
    error: str = ""
    submitting: bool = False

    @property
    def can_submit(self) -> bool:
        return not self.submitting and self.availability.available is not False

    def find_service(self, name: str) -> Service | None:
        for service in self.services:
            if service.name == name:
                return service
        return None
