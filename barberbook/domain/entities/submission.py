from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from barberbook.domain.entities.reservation import Reservation


class SubmissionState(str, Enum):
    idle = "idle"
    validating = "validating"
    verifying = "verifying"
    committing = "committing"
    succeeded = "succeeded"
    rejected = "rejected"
    failed = "failed"


@dataclass(frozen=True)
class SubmissionOutcome:
    state: SubmissionState
    message: str = ""
    reservation: Reservation | None = None
