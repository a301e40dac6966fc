from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from barberbook.application.dto.ledger import (
    AvailabilityDTO,
    BarberDTO,
    ReservationDTO,
    ServiceDTO,
    reservation_request_payload,
)
from barberbook.application.exceptions import (
    LedgerContractError,
    LedgerRejectedError,
    LedgerUpstreamError,
)
from barberbook.application.ports.ledger import LedgerPort
from barberbook.application.utils.time_normalizer import to_wire
from barberbook.core.config import settings
from barberbook.domain.entities.barber import Barber
from barberbook.domain.entities.reservation import Reservation, ReservationRequest
from barberbook.domain.entities.service import Service


class HttpLedgerGateway(LedgerPort):
    """LedgerPort over the barbershop REST API (/api/barbers, /api/services, /api/appointments)."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.LEDGER_BASE_URL or "").rstrip("/")
        if not self._base_url and client is None:
            raise ValueError("LEDGER_BASE_URL is required for the HTTP ledger")
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout or settings.LEDGER_TIMEOUT_SECONDS,
        )
        self._logger = logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_barbers(self) -> list[Barber]:
        data = await self._get_json("/api/barbers", what="barbers")
        return [dto.to_entity() for dto in _parse_list(BarberDTO, data, what="barbers")]

    async def list_services(self) -> list[Service]:
        data = await self._get_json("/api/services", what="services")
        return [dto.to_entity() for dto in _parse_list(ServiceDTO, data, what="services")]

    async def list_reservations(self) -> list[Reservation]:
        data = await self._get_json("/api/appointments", what="appointments")
        return [dto.to_entity() for dto in _parse_list(ReservationDTO, data, what="appointments")]

    async def check_available(self, barber_id: str, start: datetime, duration_min: int) -> bool:
        params = {
            "barber_id": barber_id,
            "start_time": to_wire(start),
            "duration_min": str(duration_min),
        }
        data = await self._get_json(
            "/api/appointments/check",
            what="availability",
            params=params,
            failure_message="Unable to check availability",
        )
        return _parse_one(AvailabilityDTO, data, what="availability").available

    async def create_reservation(self, request: ReservationRequest) -> Reservation:
        payload = reservation_request_payload(request)
        try:
            response = await self._client.post("/api/appointments", json=payload)
        except httpx.HTTPError as e:
            raise LedgerUpstreamError(f"Ledger request failed: {e}") from e

        _raise_for_mutation(response, fallback="Failed to book appointment")
        reservation = _parse_one(ReservationDTO, _json_body(response, "appointment"), what="appointment")
        self._logger.info(
            "Ledger reservation created",
            extra={"reservation_id": reservation.id, "barber_id": reservation.barber_id},
        )
        return reservation.to_entity()

    async def cancel_reservation(self, reservation_id: str) -> Reservation:
        try:
            response = await self._client.patch(f"/api/appointments/{reservation_id}/cancel")
        except httpx.HTTPError as e:
            raise LedgerUpstreamError(f"Ledger request failed: {e}") from e

        _raise_for_mutation(response, fallback="Failed to cancel appointment")
        return _parse_one(ReservationDTO, _json_body(response, "appointment"), what="appointment").to_entity()

    async def _get_json(
        self,
        path: str,
        what: str,
        params: dict[str, str] | None = None,
        failure_message: str | None = None,
    ) -> Any:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise LedgerUpstreamError(f"Ledger request failed: {e}") from e

        if not response.is_success:
            self._logger.warning(
                "Ledger read failed",
                extra={"status": response.status_code, "path": path},
            )
            raise LedgerUpstreamError(failure_message or f"Failed to load {what} (HTTP {response.status_code})")
        return _json_body(response, what)


def _raise_for_mutation(response: httpx.Response, fallback: str) -> None:
    if response.is_success:
        return
    if response.status_code >= 500:
        raise LedgerUpstreamError(f"{fallback} (HTTP {response.status_code})")

    reason = fallback
    try:
        body = response.json()
        detail = body.get("detail") if isinstance(body, dict) else None
        if isinstance(detail, str) and detail.strip():
            reason = detail.strip()
    except ValueError:
        pass
    raise LedgerRejectedError(reason, status_code=response.status_code)


def _json_body(response: httpx.Response, what: str) -> Any:
    try:
        return response.json()
    except ValueError:
        snippet = response.text[:200].replace("\n", " ")
        raise LedgerContractError(f"{what.capitalize()}: invalid JSON. Snippet: {snippet!r}")


def _parse_one(model: type[BaseModel], data: Any, what: str):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise LedgerContractError(f"{what.capitalize()}: unexpected shape: {e}") from e


def _parse_list(model: type[BaseModel], data: Any, what: str) -> list:
    if not isinstance(data, list):
        raise LedgerContractError(f"{what.capitalize()}: expected a JSON array.")
    return [_parse_one(model, item, what) for item in data]
