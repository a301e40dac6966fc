from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    name: str  # unique lookup key within a catalog snapshot
    price: float
    duration_min: int
