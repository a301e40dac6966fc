import logging

from barberbook.application.ports.ledger import LedgerPort
from barberbook.application.ports.session_store import SessionStorePort
from barberbook.application.use_cases.booking_coordinator import BookingCoordinator
from barberbook.core.config import settings
from barberbook.domain.entities.booking_session import BookingSession
from barberbook.infrastructure.ledger.http_ledger import HttpLedgerGateway
from barberbook.infrastructure.ledger.memory_ledger import InMemoryLedger
from barberbook.infrastructure.store.memory_store import MemorySessionStore


_ledger: LedgerPort | None = None
_session_store: SessionStorePort | None = None


def get_ledger() -> LedgerPort:
    global _ledger
    if _ledger is None:
        logger = logging.getLogger(__name__)
        if settings.LEDGER_BASE_URL:
            logger.info("Using HttpLedgerGateway", extra={"base_url": settings.LEDGER_BASE_URL})
            _ledger = HttpLedgerGateway()
        elif settings.ENV.lower() in {"dev", "local"}:
            logger.info("Using InMemoryLedger (LEDGER_BASE_URL missing, ENV=dev/local)")
            _ledger = InMemoryLedger()
        else:
            raise ValueError("LEDGER_BASE_URL is required outside dev/local.")
    return _ledger


def get_session_store() -> SessionStorePort:
    global _session_store
    if _session_store is None:
        _session_store = MemorySessionStore()
    return _session_store


def new_booking_coordinator() -> BookingCoordinator:
    store = get_session_store()
    session = BookingSession(session_id=store.new_session_id())
    coordinator = BookingCoordinator(
        session=session,
        ledger=get_ledger(),
        default_duration_min=settings.DEFAULT_SERVICE_DURATION_MINUTES,
    )
    store.put(coordinator)
    return coordinator


async def close_ledger() -> None:
    global _ledger
    if isinstance(_ledger, HttpLedgerGateway):
        logging.getLogger(__name__).info("Closing HttpLedgerGateway")
        await _ledger.aclose()
    _ledger = None
