from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from barberbook.domain.entities.booking_draft import BookingDraft
from barberbook.domain.entities.reservation import ReservationRequest


def reset_after_booking(draft: BookingDraft) -> BookingDraft:
    """Clear date, time and notes. Keep who is booking and what, for repeat bookings."""
    return replace(draft, start_date="", start_time="", notes="")


def to_reservation_request(draft: BookingDraft, start: datetime, duration_min: int) -> ReservationRequest:
    notes = draft.notes.strip()
    return ReservationRequest(
        customer_name=draft.customer_name.strip(),
        customer_phone=draft.customer_phone.strip(),
        barber_id=draft.barber_id,
        service_name=draft.service_name,
        start_time=start,
        duration_min=duration_min,
        notes=notes or None,
    )
