from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from barberbook.application.exceptions import (
    LedgerContractError,
    LedgerRejectedError,
    LedgerUpstreamError,
)
from barberbook.application.utils.time_normalizer import normalize
from barberbook.domain.entities.reservation import ReservationRequest, ReservationStatus
from barberbook.infrastructure.ledger.http_ledger import HttpLedgerGateway

TEN = normalize("2024-06-01", "10:00")

RESERVATION_JSON = {
    "id": "r1",
    "customer_name": "Alex",
    "customer_phone": "555",
    "barber_id": "b1",
    "service_name": "Haircut",
    "start_time": "2024-06-01T10:00:00.000Z",
    "end_time": "2024-06-01T10:30:00.000Z",
    "status": "booked",
}


def _gateway(handler) -> HttpLedgerGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://ledger.test")
    return HttpLedgerGateway(client=client)


def _request(notes: str | None = None) -> ReservationRequest:
    return ReservationRequest(
        customer_name="Alex",
        customer_phone="555",
        barber_id="b1",
        service_name="Haircut",
        start_time=TEN,
        duration_min=30,
        notes=notes,
    )


def test_requires_base_url_without_client(monkeypatch):
    """Without a URL or a client there is nothing to talk to."""
    from barberbook.core.config import settings

    monkeypatch.setattr(settings, "LEDGER_BASE_URL", None)
    with pytest.raises(ValueError):
        HttpLedgerGateway()


def test_list_barbers_accepts_mongo_ids():
    """Barber ids may come as '_id' and as non-strings."""
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/barbers"
        return httpx.Response(200, json=[{"_id": 7, "name": "Dana"}, {"id": "b2", "name": "Luis", "bio": "Beards"}])

    barbers = asyncio.run(_gateway(handler).list_barbers())

    assert [(b.id, b.name, b.bio) for b in barbers] == [("7", "Dana", None), ("b2", "Luis", "Beards")]


def test_list_services_and_reservations():
    """Catalog and ledger reads map to domain entities."""
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/services":
            return httpx.Response(200, json=[{"name": "Haircut", "price": 18, "duration_min": 30}])
        return httpx.Response(200, json=[RESERVATION_JSON])

    gateway = _gateway(handler)
    services = asyncio.run(gateway.list_services())
    reservations = asyncio.run(gateway.list_reservations())

    assert services[0].duration_min == 30
    assert reservations[0].start_time == TEN
    assert reservations[0].status == ReservationStatus.booked


def test_check_available_sends_canonical_query():
    """Availability is asked with a UTC ISO instant and minutes."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(dict(request.url.params))
        return httpx.Response(200, json={"available": False})

    available = asyncio.run(_gateway(handler).check_available("b1", TEN, 30))

    assert available is False
    assert seen == {"barber_id": "b1", "start_time": "2024-06-01T10:00:00.000Z", "duration_min": "30"}


def test_check_not_ok_is_upstream_error():
    """A non-2xx availability answer is a failed check, not 'busy'."""
    gateway = _gateway(lambda request: httpx.Response(503))

    with pytest.raises(LedgerUpstreamError, match="Unable to check availability"):
        asyncio.run(gateway.check_available("b1", TEN, 30))


def test_transport_error_is_upstream_error():
    """Connection failures map to LedgerUpstreamError."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LedgerUpstreamError):
        asyncio.run(_gateway(handler).list_barbers())


def test_create_omits_blank_notes():
    """Notes are left out of the payload when there are none."""
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json=RESERVATION_JSON)

    gateway = _gateway(handler)
    reservation = asyncio.run(gateway.create_reservation(_request()))
    asyncio.run(gateway.create_reservation(_request(notes="fade please")))

    assert reservation.id == "r1"
    assert "notes" not in bodies[0]
    assert bodies[0]["start_time"] == "2024-06-01T10:00:00.000Z"
    assert bodies[0]["duration_min"] == 30
    assert bodies[1]["notes"] == "fade please"


def test_create_conflict_carries_reason():
    """A 409 detail is passed through verbatim."""
    gateway = _gateway(lambda request: httpx.Response(409, json={"detail": "Time slot not available"}))

    with pytest.raises(LedgerRejectedError) as exc:
        asyncio.run(gateway.create_reservation(_request()))

    assert exc.value.reason == "Time slot not available"
    assert exc.value.is_conflict


def test_create_rejection_without_detail_uses_fallback():
    """Rejections without a readable body get the generic reason."""
    gateway = _gateway(lambda request: httpx.Response(400, text="nope"))

    with pytest.raises(LedgerRejectedError) as exc:
        asyncio.run(gateway.create_reservation(_request()))

    assert exc.value.reason == "Failed to book appointment"


def test_create_server_error_is_upstream():
    """5xx on a mutation is a transport-level failure."""
    gateway = _gateway(lambda request: httpx.Response(500, json={"detail": "boom"}))

    with pytest.raises(LedgerUpstreamError):
        asyncio.run(gateway.create_reservation(_request()))


def test_cancel_uses_patch():
    """Cancel is PATCH /api/appointments/{id}/cancel."""
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PATCH"
        assert request.url.path == "/api/appointments/r1/cancel"
        return httpx.Response(200, json={**RESERVATION_JSON, "status": "canceled"})

    reservation = asyncio.run(_gateway(handler).cancel_reservation("r1"))

    assert reservation.status == ReservationStatus.canceled


def test_unexpected_shape_is_contract_error():
    """Bodies that do not match the wire shape are rejected."""
    gateway = _gateway(lambda request: httpx.Response(200, json={"barbers": []}))

    with pytest.raises(LedgerContractError):
        asyncio.run(gateway.list_barbers())

    gateway = _gateway(lambda request: httpx.Response(200, json={"free": True}))
    with pytest.raises(LedgerContractError):
        asyncio.run(gateway.check_available("b1", TEN, 30))
