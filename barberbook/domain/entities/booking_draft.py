from __future__ import annotations

from dataclasses import dataclass

# Human labels for the identity fields, in form order.
REQUIRED_FIELD_LABELS = {
    "customer_name": "name",
    "customer_phone": "phone",
    "barber_id": "barber",
    "service_name": "service",
}


@dataclass(frozen=True)
class BookingDraft:
    customer_name: str = ""
    customer_phone: str = ""
    barber_id: str = ""
    service_name: str = ""
    start_date: str = ""  # raw form input, YYYY-MM-DD
    start_time: str = ""  # raw form input, HH:MM
    notes: str = ""

    def missing_fields(self) -> list[str]:
        """Labels of required identity fields that are still blank. Date/time are validated separately."""
        return [
            label
            for field_name, label in REQUIRED_FIELD_LABELS.items()
            if not getattr(self, field_name).strip()
        ]
