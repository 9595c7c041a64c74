from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from egg_collection.buckets import EggBuckets
from egg_collection.models import calculate_collection_value
from egg_collection.scoring import average_quality, collection_quality_score, damage_rate, quality_score
from egg_collection.services.requests import EggCollectionRequest


class QualityScoreTests(SimpleTestCase):
    def test_score_bands(self) -> None:
        self.assertEqual(quality_score(0.01), 5)
        self.assertEqual(quality_score(0.02), 5)
        self.assertEqual(quality_score(0.04), 4)
        self.assertEqual(quality_score(0.08), 3)
        self.assertEqual(quality_score(0.15), 2)
        self.assertEqual(quality_score(0.5), 1)

    def test_damage_rate_is_zero_without_eggs(self) -> None:
        self.assertEqual(damage_rate(0, 0), 0.0)
        self.assertEqual(EggBuckets().damage_rate, 0.0)

    def test_collection_without_eggs_has_no_score(self) -> None:
        self.assertIsNone(collection_quality_score(0, 0))
        self.assertEqual(collection_quality_score(100, 3), 4)

    def test_average_quality_skips_unscored_collections(self) -> None:
        collections = [
            SimpleNamespace(quality_score=5),
            SimpleNamespace(quality_score=None),
            SimpleNamespace(quality_score=2),
        ]
        self.assertEqual(average_quality(collections), 3.5)
        self.assertEqual(average_quality([]), 0.0)


class EggBucketsTests(SimpleTestCase):
    def test_total_includes_damaged_eggs(self) -> None:
        buckets = EggBuckets(small=24, medium=48, large=36, extra_large=12, damaged=6)
        self.assertEqual(buckets.total, 126)

    def test_negative_counts_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            EggBuckets(small=-1)

    def test_non_integer_counts_are_rejected(self) -> None:
        with self.assertRaises(TypeError):
            EggBuckets(medium=1.5)

    def test_from_mapping_accepts_camel_case_extra_large(self) -> None:
        buckets = EggBuckets.from_mapping({"small": 2, "extraLarge": 3, "unknown": 9})
        self.assertEqual(buckets, EggBuckets(small=2, extra_large=3))

    def test_duck_eggs_have_no_extra_large_size(self) -> None:
        with self.assertRaises(ValueError):
            EggCollectionRequest(
                farmer_id=1,
                staff_id=1,
                hen_egg_price=Decimal("2.50"),
                duck_egg_price=Decimal("4.00"),
                duck_eggs=EggBuckets(extra_large=1),
            )


class CollectionValueTests(SimpleTestCase):
    def test_value_is_priced_per_dozen(self) -> None:
        value = calculate_collection_value(126, 38, Decimal("2.50"), Decimal("4.00"))
        self.assertEqual(value.quantize(Decimal("0.0001")), Decimal("38.9167"))
        self.assertEqual(value.quantize(Decimal("0.01")), Decimal("38.92"))

    def test_value_without_duck_eggs(self) -> None:
        self.assertEqual(calculate_collection_value(24, 0, Decimal("3.00"), Decimal("4.00")), Decimal("6"))
