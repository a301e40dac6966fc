import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from barberbook.api.v1.booking import router as booking_router
from barberbook.core.config import settings
from barberbook.wiring.dependencies import close_ledger

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in (
            "session_id",
            "barber_id",
            "start_time",
            "duration_min",
            "reservation_id",
            "state",
            "reason",
            "error",
            "barbers",
            "services",
            "status",
            "path",
            "base_url",
        ):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_ledger()


app = FastAPI(title=settings.SHOP_NAME, version="1.0.0", lifespan=lifespan)

app.include_router(booking_router, prefix="/api/v1/booking", tags=["booking"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
