from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..buckets import EggBuckets


def _as_decimal(value: Any, name: str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValueError(f"'{name}' must be a number.") from exc


@dataclass(frozen=True)
class EggCollectionRequest:
    """Everything a collector submits for one farm visit."""

    farmer_id: int
    staff_id: int
    hen_egg_price: Decimal
    duck_egg_price: Decimal
    hen_eggs: EggBuckets = field(default_factory=EggBuckets)
    duck_eggs: EggBuckets = field(default_factory=EggBuckets)
    route_id: Optional[int] = None
    quality_notes: str = ""
    collection_date: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.duck_eggs.extra_large:
            raise ValueError("Duck eggs have no extra large size.")
        object.__setattr__(self, "hen_egg_price", _as_decimal(self.hen_egg_price, "hen_egg_price"))
        object.__setattr__(self, "duck_egg_price", _as_decimal(self.duck_egg_price, "duck_egg_price"))

    @property
    def total_hen_eggs(self) -> int:
        return self.hen_eggs.total

    @property
    def total_duck_eggs(self) -> int:
        return self.duck_eggs.total

    @property
    def total_eggs(self) -> int:
        return self.total_hen_eggs + self.total_duck_eggs
