"""Tests for the community signal aggregator."""

from __future__ import annotations

import pytest

from knowledge_scorer.quality.community import aggregate, vote_accuracy
from knowledge_scorer.quality.schemas import PartialMetrics


def test_no_votes_is_neutral_relevance_only() -> None:
    result = aggregate(0, 0, 500)
    assert result == PartialMetrics(relevance=0.5)
    assert result.accuracy is None
    assert result.engagement_score is None
    assert result.popularity is None


def test_eight_of_ten_votes() -> None:
    result = aggregate(8, 2, 50)
    assert result.relevance == pytest.approx(0.8)
    # 0.8 is not > 0.8
    assert result.accuracy == 0.7
    assert result.engagement_score == 1.0
    assert result.popularity == 0.5


def test_engagement_and_popularity_cap() -> None:
    result = aggregate(30, 0, 1000)
    assert result.engagement_score == 1.0
    assert result.popularity == 1.0
    assert result.accuracy == 0.9


def test_partial_engagement() -> None:
    result = aggregate(1, 2, 0)
    assert result.engagement_score == pytest.approx(0.3)
    assert result.popularity == 0.0
    assert result.accuracy == 0.5


def test_negative_counters_treated_as_zero() -> None:
    assert aggregate(-3, 0, -10) == PartialMetrics(relevance=0.5)
    result = aggregate(4, -1, 0)
    assert result.relevance == 1.0


@pytest.mark.parametrize(
    ("ratio", "expected"),
    [
        (1.0, 0.9),
        (0.81, 0.9),
        (0.8, 0.7),
        (0.61, 0.7),
        (0.6, 0.5),
        (0.0, 0.5),
    ],
)
def test_vote_accuracy_thresholds(ratio: float, expected: float) -> None:
    assert vote_accuracy(ratio) == expected
