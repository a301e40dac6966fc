from dataclasses import dataclass


@dataclass(frozen=True)
class Barber:
    id: str
    name: str
    bio: str | None = None
