from __future__ import annotations

import asyncio
import logging
from dataclasses import fields, replace
from datetime import datetime

from barberbook.application.exceptions import LedgerError, LedgerRejectedError
from barberbook.application.ports.ledger import LedgerPort
from barberbook.application.use_cases.availability import (
    AvailabilityProber,
    BarberFilter,
    reconcile_selection,
)
from barberbook.application.utils.state_helpers import reset_after_booking, to_reservation_request
from barberbook.application.utils.time_normalizer import normalize, to_wire
from barberbook.domain.entities.availability import AvailabilityQuery, AvailabilityStatus
from barberbook.domain.entities.booking_draft import BookingDraft
from barberbook.domain.entities.booking_session import BookingSession
from barberbook.domain.entities.reservation import Reservation
from barberbook.domain.entities.submission import SubmissionOutcome, SubmissionState

MESSAGE_CATALOG_FAILED = "Failed to load barbers/services"
MESSAGE_SELECT_DATE_TIME = "Please select a date and time"
MESSAGE_SLOT_TAKEN = "That time was just taken. Please choose another slot."
MESSAGE_VERIFY_FAILED = "Unable to verify availability"
MESSAGE_BOOKING_FAILED = "Failed to book appointment"
MESSAGE_BOOKED = "Appointment booked"
MESSAGE_IN_PROGRESS = "A booking is already in progress"
MESSAGE_CANCEL_FAILED = "Failed to cancel appointment"

# Logical query slots. A newer request in a slot supersedes any older one still in flight.
STATUS_SLOT = "status"
ROSTER_SLOT = "roster"
RESERVATIONS_SLOT = "reservations"

DRAFT_FIELDS = frozenset(f.name for f in fields(BookingDraft))
# Edits to these fields change the interval being asked about.
RECOMPUTE_TRIGGERS = frozenset({"service_name", "start_date", "start_time"})


class BookingCoordinator:
    """
    Reactive controller for one booking form.

    Owns the BookingSession and is the only thing that mutates it. Field edits
    re-derive availability, and submit() runs verify-then-commit against the ledger.
    Results that come back after a newer request in the same slot are dropped, so
    the session never shows availability for an instant that is no longer typed.
    """

    def __init__(
        self,
        session: BookingSession,
        ledger: LedgerPort,
        default_duration_min: int = 30,
    ) -> None:
        self._session = session
        self._ledger = ledger
        self._prober = AvailabilityProber(ledger)
        self._filter = BarberFilter(self._prober)
        self._default_duration_min = default_duration_min
        self._generations: dict[str, int] = {STATUS_SLOT: 0, ROSTER_SLOT: 0, RESERVATIONS_SLOT: 0}
        self._logger = logging.getLogger(__name__)

    @property
    def session(self) -> BookingSession:
        return self._session

    @property
    def instant(self) -> datetime | None:
        draft = self._session.draft
        return normalize(draft.start_date, draft.start_time)

    @property
    def duration_min(self) -> int:
        service = self._session.find_service(self._session.draft.service_name)
        if service is None or service.duration_min <= 0:
            return self._default_duration_min
        return service.duration_min

    @property
    def filtering_active(self) -> bool:
        """True when the visible barber list is filtered against a chosen time."""
        return self.instant is not None

    async def load_catalog(self) -> None:
        session = self._session
        try:
            barbers, services = await asyncio.gather(
                self._ledger.list_barbers(),
                self._ledger.list_services(),
            )
        except LedgerError as e:
            self._logger.error(
                "Catalog load failed",
                extra={"session_id": session.session_id, "error": str(e)},
            )
            session.error = MESSAGE_CATALOG_FAILED
            return

        session.catalog = list(barbers)
        session.services = list(services)
        self._logger.info(
            "Catalog loaded",
            extra={"session_id": session.session_id, "barbers": len(barbers), "services": len(services)},
        )

        start = self.instant
        await self._refresh_roster(start, self.duration_min)

        draft = session.draft
        seeded: dict[str, str] = {}
        if not draft.barber_id and session.barbers:
            seeded["barber_id"] = session.barbers[0].id
        if not draft.service_name and session.services:
            seeded["service_name"] = session.services[0].name
        if seeded:
            session.draft = replace(draft, **seeded)
            if start is None:
                return
            if "service_name" in seeded:
                # The list above was filtered with the fallback duration.
                await self.rederive()
            else:
                await self._refresh_status()

    async def refresh_reservations(self) -> bool:
        generation = self._next_generation(RESERVATIONS_SLOT)
        try:
            reservations = await self._ledger.list_reservations()
        except LedgerError as e:
            self._logger.warning(
                "Reservation refresh failed",
                extra={"session_id": self._session.session_id, "error": str(e)},
            )
            return False
        if self._is_current(RESERVATIONS_SLOT, generation):
            self._session.reservations = list(reservations)
        return True

    async def update_draft(self, **changes: str) -> None:
        """Apply form edits, then re-derive whatever depends on the changed fields."""
        unknown = set(changes) - DRAFT_FIELDS
        if unknown:
            raise ValueError(f"Unknown draft fields: {', '.join(sorted(unknown))}")

        previous = self._session.draft
        self._session.draft = replace(previous, **changes)
        changed = {name for name, value in changes.items() if getattr(previous, name) != value}

        if changed & RECOMPUTE_TRIGGERS:
            await self.rederive()
        elif "barber_id" in changed:
            await self._refresh_status()

    async def rederive(self) -> None:
        """Recompute availability status and the visible barber list for the current draft."""
        start = self.instant
        if start is None:
            self._next_generation(STATUS_SLOT)
            self._next_generation(ROSTER_SLOT)
            self._session.availability = AvailabilityStatus.neutral()
            self._session.barbers = list(self._session.catalog)
            return

        duration = self.duration_min
        await asyncio.gather(
            self._refresh_status(),
            self._refresh_roster(start, duration),
        )

    async def submit(self) -> SubmissionOutcome:
        session = self._session
        if session.submitting:
            return SubmissionOutcome(state=SubmissionState.rejected, message=MESSAGE_IN_PROGRESS)

        session.submitting = True
        session.error = ""
        try:
            return await self._submit()
        finally:
            session.submitting = False

    async def cancel(self, reservation_id: str) -> bool:
        try:
            await self._ledger.cancel_reservation(reservation_id)
        except LedgerRejectedError as e:
            self._logger.error(
                "Cancel rejected",
                extra={"session_id": self._session.session_id, "reservation_id": reservation_id, "reason": e.reason},
            )
            self._session.error = e.reason or MESSAGE_CANCEL_FAILED
            return False
        except LedgerError as e:
            self._logger.error(
                "Cancel failed",
                extra={"session_id": self._session.session_id, "reservation_id": reservation_id, "error": str(e)},
            )
            self._session.error = MESSAGE_CANCEL_FAILED
            return False

        self._logger.info(
            "Reservation canceled",
            extra={"session_id": self._session.session_id, "reservation_id": reservation_id},
        )
        await self.refresh_reservations()
        return True

    async def _submit(self) -> SubmissionOutcome:
        session = self._session
        self._enter(SubmissionState.validating)

        start = self.instant
        if start is None:
            return self._finish(SubmissionState.rejected, MESSAGE_SELECT_DATE_TIME)
        missing = session.draft.missing_fields()
        if missing:
            return self._finish(SubmissionState.rejected, f"Please fill in: {', '.join(missing)}")

        request = to_reservation_request(session.draft, start, self.duration_min)
        log_extra = {
            "session_id": session.session_id,
            "barber_id": request.barber_id,
            "start_time": to_wire(start),
            "duration_min": request.duration_min,
        }

        self._enter(SubmissionState.verifying)
        try:
            available = await self._prober.probe(
                AvailabilityQuery(request.barber_id, start, request.duration_min)
            )
        except LedgerError as e:
            self._logger.error("Final availability check failed", extra={**log_extra, "error": str(e)})
            return self._finish(SubmissionState.failed, MESSAGE_VERIFY_FAILED)

        if not available:
            self._logger.info("Slot taken before commit", extra=log_extra)
            await self.refresh_reservations()
            return self._finish(SubmissionState.rejected, MESSAGE_SLOT_TAKEN)

        self._enter(SubmissionState.committing)
        try:
            reservation = await self._ledger.create_reservation(request)
        except LedgerRejectedError as e:
            self._logger.error("Booking rejected", extra={**log_extra, "reason": e.reason})
            if e.is_conflict:
                await self.refresh_reservations()
            return self._finish(SubmissionState.failed, e.reason or MESSAGE_BOOKING_FAILED)
        except LedgerError as e:
            self._logger.error("Booking failed", extra={**log_extra, "error": str(e)})
            return self._finish(SubmissionState.failed, MESSAGE_BOOKING_FAILED)

        self._logger.info("Reservation booked", extra={**log_extra, "reservation_id": reservation.id})
        session.draft = reset_after_booking(session.draft)
        session.availability = AvailabilityStatus.neutral()
        await self.refresh_reservations()
        await self.rederive()
        return self._finish(SubmissionState.succeeded, MESSAGE_BOOKED, reservation)

    async def _refresh_status(self) -> None:
        session = self._session
        start = self.instant
        barber_id = session.draft.barber_id
        generation = self._next_generation(STATUS_SLOT)

        if start is None or not barber_id:
            session.availability = AvailabilityStatus.neutral()
            return

        query = AvailabilityQuery(barber_id, start, self.duration_min)
        session.availability = AvailabilityStatus.in_progress()
        try:
            status = AvailabilityStatus.from_result(await self._prober.probe(query))
        except LedgerError as e:
            self._logger.warning(
                "Availability check failed",
                extra={"session_id": session.session_id, "barber_id": barber_id, "error": str(e)},
            )
            status = AvailabilityStatus.unknown()

        if not self._is_current(STATUS_SLOT, generation):
            self._logger.debug("Dropping superseded availability result", extra={"barber_id": barber_id})
            return
        session.availability = status

    async def _refresh_roster(self, start: datetime | None, duration_min: int) -> None:
        session = self._session
        generation = self._next_generation(ROSTER_SLOT)
        visible = await self._filter.filter_available(session.catalog, start, duration_min)

        if not self._is_current(ROSTER_SLOT, generation):
            self._logger.debug("Dropping superseded barber list", extra={"session_id": session.session_id})
            return
        session.barbers = visible

        selected = reconcile_selection(session.draft.barber_id, visible)
        if selected != session.draft.barber_id:
            self._logger.info(
                "Selected barber unavailable, switching",
                extra={"session_id": session.session_id, "barber_id": selected or None},
            )
            session.draft = replace(session.draft, barber_id=selected)
            # Status only; the list itself is not filtered again.
            await self._refresh_status()

    def _enter(self, state: SubmissionState) -> None:
        self._session.submission = state

    def _finish(
        self,
        state: SubmissionState,
        message: str,
        reservation: Reservation | None = None,
    ) -> SubmissionOutcome:
        self._session.submission = state
        if state in (SubmissionState.rejected, SubmissionState.failed):
            self._session.error = message
        self._logger.info(
            "Submission finished",
            extra={"session_id": self._session.session_id, "state": state.value, "reason": message},
        )
        return SubmissionOutcome(state=state, message=message, reservation=reservation)

    def _next_generation(self, slot: str) -> int:
        self._generations[slot] += 1
        return self._generations[slot]

    def _is_current(self, slot: str, generation: int) -> bool:
        return self._generations[slot] == generation
