from fastapi import APIRouter, Depends, HTTPException

from barberbook.api.v1.schemas import (
    AvailabilitySchema,
    BarberSchema,
    DraftSchema,
    DraftUpdateSchema,
    ReservationSchema,
    ServiceSchema,
    SessionViewSchema,
    SubmitResponseSchema,
)
from barberbook.application.ports.session_store import SessionStorePort
from barberbook.application.use_cases.booking_coordinator import BookingCoordinator
from barberbook.domain.entities.reservation import Reservation
from barberbook.wiring.dependencies import get_session_store, new_booking_coordinator

router = APIRouter()


def get_coordinator(
    session_id: str,
    store: SessionStorePort = Depends(get_session_store),
) -> BookingCoordinator:
    coordinator = store.get(session_id)
    if coordinator is None:
        raise HTTPException(status_code=404, detail="Booking session not found")
    return coordinator


@router.post("/sessions", response_model=SessionViewSchema, status_code=201)
async def start_session():
    coordinator = new_booking_coordinator()
    await coordinator.load_catalog()
    await coordinator.refresh_reservations()
    return _view(coordinator)


@router.get("/sessions/{session_id}", response_model=SessionViewSchema)
async def get_session(coordinator: BookingCoordinator = Depends(get_coordinator)):
    return _view(coordinator)


@router.patch("/sessions/{session_id}/draft", response_model=SessionViewSchema)
async def update_draft(
    req: DraftUpdateSchema,
    coordinator: BookingCoordinator = Depends(get_coordinator),
):
    await coordinator.update_draft(**req.model_dump(exclude_none=True))
    return _view(coordinator)


@router.post("/sessions/{session_id}/submit", response_model=SubmitResponseSchema)
async def submit(coordinator: BookingCoordinator = Depends(get_coordinator)):
    outcome = await coordinator.submit()
    return SubmitResponseSchema(
        state=outcome.state,
        message=outcome.message,
        reservation=_reservation(outcome.reservation) if outcome.reservation else None,
        session=_view(coordinator),
    )


@router.post("/sessions/{session_id}/reservations/refresh", response_model=SessionViewSchema)
async def refresh_reservations(coordinator: BookingCoordinator = Depends(get_coordinator)):
    await coordinator.refresh_reservations()
    return _view(coordinator)


@router.post("/sessions/{session_id}/reservations/{reservation_id}/cancel", response_model=SessionViewSchema)
async def cancel_reservation(
    reservation_id: str,
    coordinator: BookingCoordinator = Depends(get_coordinator),
):
    # Failures are reported through the view's error field.
    await coordinator.cancel(reservation_id)
    return _view(coordinator)


def _view(coordinator: BookingCoordinator) -> SessionViewSchema:
    session = coordinator.session
    draft = session.draft
    return SessionViewSchema(
        session_id=session.session_id,
        draft=DraftSchema(
            customer_name=draft.customer_name,
            customer_phone=draft.customer_phone,
            barber_id=draft.barber_id,
            service_name=draft.service_name,
            start_date=draft.start_date,
            start_time=draft.start_time,
            notes=draft.notes,
        ),
        barbers=[BarberSchema(id=b.id, name=b.name, bio=b.bio) for b in session.barbers],
        services=[
            ServiceSchema(name=s.name, price=s.price, duration_min=s.duration_min)
            for s in session.services
        ],
        reservations=[_reservation(r) for r in session.reservations],
        availability=AvailabilitySchema(
            checking=session.availability.checking,
            available=session.availability.available,
            message=session.availability.message,
        ),
        duration_min=coordinator.duration_min,
        filtering_active=coordinator.filtering_active,
        submission=session.submission,
        error=session.error,
        can_submit=session.can_submit,
    )


def _reservation(r: Reservation) -> ReservationSchema:
    return ReservationSchema(
        id=r.id,
        customer_name=r.customer_name,
        customer_phone=r.customer_phone,
        barber_id=r.barber_id,
        service_name=r.service_name,
        start_time=r.start_time,
        end_time=r.end_time,
        status=r.status,
        notes=r.notes,
    )
