from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from barberbook.application.exceptions import LedgerError
from barberbook.application.ports.ledger import LedgerPort
from barberbook.domain.entities.availability import AvailabilityQuery
from barberbook.domain.entities.barber import Barber


class AvailabilityProber:
    """
    Asks the ledger whether one barber is free for one interval.

    The two entry points differ only in how they treat a failed check:
    probe() propagates it (used right before committing a booking), while
    probe_or_assume_free() reports the barber as free (used for list filtering).
    """

    def __init__(self, ledger: LedgerPort) -> None:
        self._ledger = ledger
        self._logger = logging.getLogger(__name__)

    async def probe(self, query: AvailabilityQuery) -> bool:
        return await self._ledger.check_available(
            query.barber_id,
            query.start,
            query.duration_minutes,
        )

    async def probe_or_assume_free(self, query: AvailabilityQuery) -> bool:
        try:
            return await self.probe(query)
        except LedgerError as e:
            self._logger.warning(
                "Availability check failed, assuming free",
                extra={
                    "barber_id": query.barber_id,
                    "start_time": query.start.isoformat(),
                    "duration_min": query.duration_minutes,
                    "error": str(e),
                },
            )
            return True


class BarberFilter:
    """Reduce a barber list to the barbers free for a given instant."""

    def __init__(self, prober: AvailabilityProber) -> None:
        self._prober = prober

    async def filter_available(
        self,
        barbers: list[Barber],
        start: datetime | None,
        duration_min: int,
    ) -> list[Barber]:
        if start is None:
            return list(barbers)

        # Every probe is fail-open, so gather never raises and always waits for all.
        results = await asyncio.gather(
            *(
                self._prober.probe_or_assume_free(AvailabilityQuery(b.id, start, duration_min))
                for b in barbers
            )
        )
        return [barber for barber, available in zip(barbers, results) if available]


def reconcile_selection(selected_id: str, visible: list[Barber]) -> str:
    """
    Keep selected_id if it is still visible, else fall back to the first visible
    barber, or "" when nothing is visible. An empty selection stays empty.
    """
    if not selected_id:
        return selected_id
    if any(b.id == selected_id for b in visible):
        return selected_id
    return visible[0].id if visible else ""
