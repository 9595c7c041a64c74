from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from .scoring import damage_rate

_FIELD_ALIASES = {
    "extraLarge": "extra_large",
    "xl": "extra_large",
}


@dataclass(frozen=True)
class EggBuckets:
    """Size-bucketed egg counts for one species."""

    small: int = 0
    medium: int = 0
    large: int = 0
    extra_large: int = 0
    damaged: int = 0

    def __post_init__(self) -> None:
        for bucket in fields(self):
            value = getattr(self, bucket.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"Egg count '{bucket.name}' must be an integer.")
            if value < 0:
                raise ValueError(f"Egg count '{bucket.name}' cannot be negative.")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "EggBuckets":
        if not data:
            return cls()
        values: dict[str, int] = {}
        for key, value in data.items():
            name = _FIELD_ALIASES.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = int(value or 0)
        return cls(**values)

    @property
    def total(self) -> int:
        return self.small + self.medium + self.large + self.extra_large + self.damaged

    @property
    def damage_rate(self) -> float:
        return damage_rate(self.damaged, self.total)

    def as_dict(self) -> dict[str, int]:
        return {
            "small": self.small,
            "medium": self.medium,
            "large": self.large,
            "extra_large": self.extra_large,
            "damaged": self.damaged,
        }
