from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.test import SimpleTestCase

from egg_collection.services.market_prices import MarketPriceProvider


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, 8, 0, tzinfo=dt_timezone.utc)

    def __call__(self) -> datetime:
        return self.now


class MarketPriceProviderTests(SimpleTestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()

    def test_neutral_variation_yields_base_table(self) -> None:
        provider = MarketPriceProvider(clock=self.clock, jitter=lambda: 0.5)
        prices = provider.get_prices()

        self.assertEqual(
            (prices.hen.small, prices.hen.medium, prices.hen.large, prices.hen.extra_large),
            (Decimal("2.00"), Decimal("2.25"), Decimal("2.50"), Decimal("3.00")),
        )
        self.assertEqual(
            (prices.duck.small, prices.duck.medium, prices.duck.large),
            (Decimal("3.20"), Decimal("4.00"), Decimal("4.80")),
        )
        self.assertEqual(prices.last_updated, self.clock.now)

    def test_variation_is_shared_by_every_size(self) -> None:
        provider = MarketPriceProvider(clock=self.clock, jitter=lambda: 0.75)
        prices = provider.get_prices()
        self.assertEqual(prices.hen.small, Decimal("2.05"))
        self.assertEqual(prices.hen.extra_large, Decimal("3.05"))
        self.assertEqual(prices.duck.large, Decimal("4.85"))

    def test_prices_are_cached_until_the_ttl_expires(self) -> None:
        draws = iter([0.5, 1.0])
        provider = MarketPriceProvider(clock=self.clock, jitter=lambda: next(draws), ttl=timedelta(hours=1))

        first = provider.get_prices()
        self.clock.now += timedelta(minutes=59)
        self.assertIs(provider.get_prices(), first)

        self.clock.now += timedelta(minutes=2)
        refreshed = provider.get_prices()
        self.assertIsNot(refreshed, first)
        self.assertEqual(refreshed.hen.large, Decimal("2.60"))

    def test_invalidate_forces_a_refresh(self) -> None:
        provider = MarketPriceProvider(clock=self.clock, jitter=lambda: 0.5)
        first = provider.get_prices()
        provider.invalidate()
        self.assertIsNot(provider.get_prices(), first)

    def test_failed_refresh_returns_uncached_fallback(self) -> None:
        def broken() -> float:
            raise RuntimeError("no randomness today")

        provider = MarketPriceProvider(clock=self.clock, jitter=broken)
        with self.assertLogs("egg_collection.services.market_prices", level="ERROR"):
            prices = provider.get_prices()
        self.assertEqual(prices.hen.large, Decimal("2.50"))
        self.assertEqual(prices.duck.small, Decimal("3.20"))

        provider.jitter = lambda: 1.0
        self.assertEqual(provider.get_prices().hen.large, Decimal("2.60"))
