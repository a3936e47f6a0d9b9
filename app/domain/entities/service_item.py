from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceItem:
    id: str
    name: str
    price_cents: int
    duration_mins: int
    active: bool = True
    description: str | None = None
