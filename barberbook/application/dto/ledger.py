from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from barberbook.application.utils.time_normalizer import parse_wire, to_wire
from barberbook.domain.entities.barber import Barber
from barberbook.domain.entities.reservation import Reservation, ReservationRequest, ReservationStatus
from barberbook.domain.entities.service import Service


class BarberDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    name: str
    bio: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        return str(value)

    def to_entity(self) -> Barber:
        return Barber(id=self.id, name=self.name, bio=self.bio)


class ServiceDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    price: float = 0
    duration_min: int

    def to_entity(self) -> Service:
        return Service(name=self.name, price=self.price, duration_min=self.duration_min)


class ReservationDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    customer_name: str
    customer_phone: str
    barber_id: str
    service_name: str
    start_time: datetime
    end_time: datetime
    status: ReservationStatus = ReservationStatus.booked
    notes: str | None = None

    @field_validator("id", "barber_id", mode="before")
    @classmethod
    def coerce_str(cls, value):
        return str(value)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_instant(cls, value):
        if isinstance(value, str):
            return parse_wire(value)
        return value

    def to_entity(self) -> Reservation:
        return Reservation(
            id=self.id,
            customer_name=self.customer_name,
            customer_phone=self.customer_phone,
            barber_id=self.barber_id,
            service_name=self.service_name,
            start_time=self.start_time,
            end_time=self.end_time,
            status=self.status,
            notes=self.notes,
        )


class AvailabilityDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    available: bool


def reservation_request_payload(request: ReservationRequest) -> dict[str, object]:
    """Wire body for creating a reservation. Blank notes are left out, not sent empty."""
    payload: dict[str, object] = {
        "customer_name": request.customer_name,
        "customer_phone": request.customer_phone,
        "barber_id": request.barber_id,
        "service_name": request.service_name,
        "start_time": to_wire(request.start_time),
        "duration_min": request.duration_min,
    }
    if request.notes:
        payload["notes"] = request.notes
    return payload
