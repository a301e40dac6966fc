from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

MESSAGE_AVAILABLE = "Time is available"
MESSAGE_BUSY = "Time slot not available"
MESSAGE_UNKNOWN = "Unable to check availability"


@dataclass(frozen=True)
class AvailabilityQuery:
    barber_id: str
    start: datetime
    duration_minutes: int


@dataclass(frozen=True)
class AvailabilityStatus:
    checking: bool = False
    available: bool | None = None  # None = no opinion (neutral, checking or unknown)
    message: str = ""

    @staticmethod
    def neutral() -> "AvailabilityStatus":
        return AvailabilityStatus()

    @staticmethod
    def in_progress() -> "AvailabilityStatus":
        return AvailabilityStatus(checking=True)

    @staticmethod
    def from_result(available: bool) -> "AvailabilityStatus":
        return AvailabilityStatus(
            checking=False,
            available=available,
            message=MESSAGE_AVAILABLE if available else MESSAGE_BUSY,
        )

    @staticmethod
    def unknown() -> "AvailabilityStatus":
        return AvailabilityStatus(checking=False, available=None, message=MESSAGE_UNKNOWN)
