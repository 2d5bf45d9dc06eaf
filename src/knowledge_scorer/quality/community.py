"""Community voting signal."""

from __future__ import annotations

from knowledge_scorer.constants import (
    NEUTRAL_SCORE,
    VIEWS_FOR_FULL_POPULARITY,
    VOTES_FOR_FULL_ENGAGEMENT,
)
from knowledge_scorer.quality.schemas import PartialMetrics


def vote_accuracy(vote_ratio: float) -> float:
    """Strict thresholds: a ratio of exactly 0.8 maps to 0.7."""
    if vote_ratio > 0.8:
        return 0.9
    if vote_ratio > 0.6:
        return 0.7
    return 0.5


def aggregate(upvotes: int, downvotes: int, views: int) -> PartialMetrics:
    """Turn vote and view counters into relevance/accuracy/engagement.

    With no votes at all only a neutral relevance prior is reported.
    Negative counters are treated as zero.
    """
    upvotes, downvotes, views = max(0, upvotes), max(0, downvotes), max(0, views)
    votes = upvotes + downvotes
    if votes == 0:
        return PartialMetrics(relevance=NEUTRAL_SCORE)

    ratio = upvotes / votes
    return PartialMetrics(
        relevance=ratio,
        accuracy=vote_accuracy(ratio),
        engagement_score=min(1.0, votes / VOTES_FOR_FULL_ENGAGEMENT),
        popularity=min(1.0, views / VIEWS_FOR_FULL_POPULARITY),
    )
