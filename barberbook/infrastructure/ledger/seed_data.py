from __future__ import annotations

from barberbook.domain.entities.barber import Barber
from barberbook.domain.entities.service import Service

DEFAULT_BARBERS: list[Barber] = [
    Barber(id="b1", name="Marco", bio="Classic cuts and hot towel shaves"),
    Barber(id="b2", name="Dana", bio="Fades and modern styles"),
    Barber(id="b3", name="Luis", bio="Beard sculpting"),
]

DEFAULT_SERVICES: list[Service] = [
    Service(name="Haircut", price=18, duration_min=30),
    Service(name="Shape Up", price=12, duration_min=15),
    Service(name="Beard Trim", price=10, duration_min=15),
    Service(name="Fade", price=25, duration_min=30),
    Service(name="Cut and Beard", price=30, duration_min=45),
]
