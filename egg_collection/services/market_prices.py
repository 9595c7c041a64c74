from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional

from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

BASE_HEN_PRICE = Decimal("2.50")
BASE_DUCK_PRICE = Decimal("4.00")
MAX_VARIATION = Decimal("0.10")

HEN_SIZE_MULTIPLIERS = {
    "small": Decimal("0.8"),
    "medium": Decimal("0.9"),
    "large": Decimal("1.0"),
    "extra_large": Decimal("1.2"),
}
DUCK_SIZE_MULTIPLIERS = {
    "small": Decimal("0.8"),
    "medium": Decimal("1.0"),
    "large": Decimal("1.2"),
}


@dataclass(frozen=True)
class HenPrices:
    small: Decimal
    medium: Decimal
    large: Decimal
    extra_large: Decimal


@dataclass(frozen=True)
class DuckPrices:
    small: Decimal
    medium: Decimal
    large: Decimal


@dataclass(frozen=True)
class MarketPrices:
    """Per-dozen reference prices by species and size."""

    hen: HenPrices
    duck: DuckPrices
    last_updated: datetime

    def as_dict(self) -> dict:
        return {
            "hen": {
                "small": str(self.hen.small),
                "medium": str(self.hen.medium),
                "large": str(self.hen.large),
                "extra_large": str(self.hen.extra_large),
            },
            "duck": {
                "small": str(self.duck.small),
                "medium": str(self.duck.medium),
                "large": str(self.duck.large),
            },
            "last_updated": self.last_updated.isoformat(),
        }


def fallback_prices(now: datetime) -> MarketPrices:
    return MarketPrices(
        hen=HenPrices(
            small=Decimal("2.00"),
            medium=Decimal("2.25"),
            large=Decimal("2.50"),
            extra_large=Decimal("3.00"),
        ),
        duck=DuckPrices(small=Decimal("3.20"), medium=Decimal("4.00"), large=Decimal("4.80")),
        last_updated=now,
    )


def _default_jitter() -> float:
    return random.random()


class MarketPriceProvider:
    """Time-cached source of simulated market prices.

    ``jitter`` returns a float in [0, 1); the same draw shifts every size of
    both species, so a refresh moves the whole table together.
    """

    def __init__(
        self,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        jitter: Optional[Callable[[], float]] = None,
        ttl: Optional[timedelta] = None,
    ) -> None:
        self.clock = clock or timezone.now
        self.jitter = jitter or _default_jitter
        if ttl is None:
            ttl = timedelta(seconds=getattr(settings, "EGG_COLLECTION_MARKET_PRICE_TTL_SECONDS", 3600))
        self.ttl = ttl
        self._cached: MarketPrices | None = None

    def get_prices(self) -> MarketPrices:
        now = self.clock()
        if self._cached is not None and now - self._cached.last_updated < self.ttl:
            return self._cached

        try:
            prices = self._compute(now)
        except Exception:
            logger.exception("Failed to refresh market prices; using fallback table.")
            return fallback_prices(now)

        self._cached = prices
        return prices

    def invalidate(self) -> None:
        self._cached = None

    def _compute(self, now: datetime) -> MarketPrices:
        variation = (Decimal(str(self.jitter())) - Decimal("0.5")) * (MAX_VARIATION * 2)

        def price(base: Decimal, multiplier: Decimal) -> Decimal:
            return (base * multiplier + variation).quantize(CENT, rounding=ROUND_HALF_UP)

        hen = {size: price(BASE_HEN_PRICE, factor) for size, factor in HEN_SIZE_MULTIPLIERS.items()}
        duck = {size: price(BASE_DUCK_PRICE, factor) for size, factor in DUCK_SIZE_MULTIPLIERS.items()}
        return MarketPrices(hen=HenPrices(**hen), duck=DuckPrices(**duck), last_updated=now)
