"""Damage-rate based quality scoring shared by alerts, metrics and reports."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

# (upper bound of the damage rate, score)
QUALITY_SCORE_BANDS: tuple[tuple[float, int], ...] = (
    (0.02, 5),
    (0.05, 4),
    (0.10, 3),
    (0.20, 2),
)
LOWEST_QUALITY_SCORE = 1


class Scored(Protocol):
    @property
    def quality_score(self) -> Optional[int]: ...


def damage_rate(damaged: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return damaged / total


def quality_score(rate: float) -> int:
    for upper_bound, score in QUALITY_SCORE_BANDS:
        if rate <= upper_bound:
            return score
    return LOWEST_QUALITY_SCORE


def collection_quality_score(total_eggs: int, damaged_eggs: int) -> Optional[int]:
    """Return the 1-5 score, or None when there are no eggs to score."""
    if total_eggs <= 0:
        return None
    return quality_score(damaged_eggs / total_eggs)


def average_quality(collections: Iterable[Scored]) -> float:
    scores = [score for score in (collection.quality_score for collection in collections) if score is not None]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)
