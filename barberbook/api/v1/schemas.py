from datetime import datetime

from pydantic import BaseModel, Field

from barberbook.domain.entities.reservation import ReservationStatus
from barberbook.domain.entities.submission import SubmissionState


class DraftUpdateSchema(BaseModel):
    customer_name: str | None = None
    customer_phone: str | None = None
    service_name: str | None = None
    start_date: str | None = None
    start_time: str | None = None
    barber_id: str | None = None
    notes: str | None = None


class DraftSchema(BaseModel):
    customer_name: str
    customer_phone: str
    barber_id: str
    service_name: str
    start_date: str
    start_time: str
    notes: str


class BarberSchema(BaseModel):
    id: str
    name: str
    bio: str | None = None


class ServiceSchema(BaseModel):
    name: str
    price: float
    duration_min: int


class ReservationSchema(BaseModel):
    id: str
    customer_name: str
    customer_phone: str
    barber_id: str
    service_name: str
    start_time: datetime
    end_time: datetime
    status: ReservationStatus
    notes: str | None = None


class AvailabilitySchema(BaseModel):
    checking: bool
    available: bool | None
    message: str


class SessionViewSchema(BaseModel):
    session_id: str
    draft: DraftSchema
    barbers: list[BarberSchema] = Field(default_factory=list)
    services: list[ServiceSchema] = Field(default_factory=list)
    reservations: list[ReservationSchema] = Field(default_factory=list)
    availability: AvailabilitySchema
    duration_min: int
    filtering_active: bool
    submission: SubmissionState
    error: str
    can_submit: bool


class SubmitResponseSchema(BaseModel):
    state: SubmissionState
    message: str
    reservation: ReservationSchema | None = None
    session: SessionViewSchema
