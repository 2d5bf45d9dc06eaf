"""Combine AI, heuristic and community signals into one quality verdict.

Scoring flow:
  1. Fan out to the AI judge, heuristic analyzer and community
     aggregator concurrently; each sees the same immutable context.
  2. Blend each rubric dimension over the sources that reported it,
     using fixed per-source weights. Missing sources are left out of
     both numerator and denominator.
  3. quality = weighted rubric over five dimensions (technical_depth
     informs depth only).
  4. confidence = quality scaled by source agreement, minus a flag
     penalty, plus a community boost, clamped to [0.1, 1.0].
  5. Auto-validate only when confidence, quality, accuracy and
     completeness clear their thresholds and nothing is flagged.

The scorer holds no mutable state; concurrent calls are independent.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import cast

from knowledge_scorer.config import Settings
from knowledge_scorer.constants import (
    AGREEMENT_BASE,
    AGREEMENT_VARIANCE_SCALE,
    AGREEMENT_WEIGHT,
    COMMUNITY_BOOST,
    COMMUNITY_BOOST_ACCURACY,
    DEFAULT_REASONING,
    DIMENSIONS,
    FALLBACK_IMPROVEMENTS,
    FALLBACK_REASONING,
    FALLBACK_SCORE,
    FALLBACK_TECHNICAL_DEPTH,
    FEEDBACK_ACCURACY_WEIGHTS,
    FEEDBACK_CONFIDENCE_WEIGHTS,
    FEEDBACK_RELEVANCE_WEIGHTS,
    FLAG_PENALTY,
    MAX_FLAG_PENALTY,
    NEUTRAL_SCORE,
    QUALITY_WEIGHTS,
    REASONING_SEPARATOR,
    SOURCE_WEIGHTS,
    ScoringSource,
    Threshold,
)
from knowledge_scorer.quality.community import aggregate
from knowledge_scorer.quality.heuristics import analyze
from knowledge_scorer.quality.judge import judge_pair, rubric_quality_score
from knowledge_scorer.quality.schemas import (
    PartialMetrics,
    QualityMetrics,
    ScoringContext,
)

logger = logging.getLogger(__name__)


def _clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    """Clamp a value to [lo, hi]."""
    return max(lo, min(hi, value))


def weighted_average(
    values: Sequence[float | None],
    weights: Sequence[float | None],
    default: float = NEUTRAL_SCORE,
) -> float:
    """Average over present values only; ``default`` when none are present."""
    pairs = [
        (v, w)
        for v, w in zip(values, weights, strict=True)
        if v is not None and w is not None
    ]
    total_weight = sum(w for _, w in pairs)
    if not pairs or total_weight <= 0:
        return default
    return sum(v * w for v, w in pairs) / total_weight


def source_agreement(sources: Sequence[PartialMetrics]) -> float:
    """1 - 4 * variance of the sources' own quality scores, floored at 0.

    Sources with no opinion are skipped; with fewer than two usable
    scores agreement is neutral (0.5).
    """
    scores = [
        s.quality_score
        if s.quality_score is not None
        else rubric_quality_score(s)
        for s in sources
        if not s.is_empty
    ]
    scores = [s for s in scores if s > 0]
    if len(scores) < 2:
        return NEUTRAL_SCORE

    mean = sum(scores) / len(scores)
    variance = sum((s - mean) ** 2 for s in scores) / len(scores)
    return max(0.0, 1.0 - variance * AGREEMENT_VARIANCE_SCALE)


def quality_from_dimensions(dimensions: dict[str, float]) -> float:
    return _clamp(
        sum(
            dimensions[name] * weight
            for name, weight in QUALITY_WEIGHTS.items()
        )
    )


def confidence_score(
    quality: float,
    flag_count: int,
    ai: PartialMetrics,
    heuristic: PartialMetrics,
    community: PartialMetrics,
) -> float:
    confidence = quality
    agreement = source_agreement([ai, heuristic, community])
    confidence *= AGREEMENT_BASE + agreement * AGREEMENT_WEIGHT
    confidence -= min(MAX_FLAG_PENALTY, flag_count * FLAG_PENALTY)
    if (
        community.accuracy is not None
        and community.accuracy > COMMUNITY_BOOST_ACCURACY
    ):
        confidence += COMMUNITY_BOOST
    return _clamp(confidence, Threshold.FLOOR, Threshold.CEILING)


def should_auto_validate(metrics: QualityMetrics) -> bool:
    """All gates must hold. Threshold.LOW is not part of the gate."""
    return (
        metrics.confidence_score >= Threshold.HIGH
        and metrics.quality_score >= Threshold.MEDIUM
        and not metrics.flags
        and metrics.accuracy >= Threshold.MIN_ACCURACY
        and metrics.completeness >= Threshold.MIN_COMPLETENESS
    )


def combine_reasoning(*parts: str | None) -> str:
    present = [p for p in parts if p]
    return REASONING_SEPARATOR.join(present) if present else DEFAULT_REASONING


def combine_scores(
    ai: PartialMetrics,
    heuristic: PartialMetrics,
    community: PartialMetrics,
) -> QualityMetrics:
    """Merge three partial results into a complete verdict."""
    dimensions: dict[str, float] = {}
    for name in DIMENSIONS:
        values = cast(
            list[float | None],
            [getattr(src, name) for src in (ai, heuristic, community)],
        )
        dimensions[name] = _clamp(
            weighted_average(values, SOURCE_WEIGHTS[name])
        )

    flags = [*(ai.flags or []), *(heuristic.flags or [])]
    quality = quality_from_dimensions(dimensions)
    combined = QualityMetrics(
        **dimensions,
        quality_score=quality,
        confidence_score=confidence_score(
            quality, len(flags), ai, heuristic, community
        ),
        reasoning=combine_reasoning(ai.reasoning, heuristic.reasoning),
        flags=flags,
        suggested_improvements=list(ai.suggested_improvements or []),
    )
    return combined.model_copy(
        update={"auto_validated": should_auto_validate(combined)}
    )


def _safe_source(
    source: ScoringSource, context: ScoringContext
) -> PartialMetrics:
    """Run a synchronous source for the fallback path; failure = no opinion."""
    try:
        if source == ScoringSource.HEURISTIC:
            return analyze(context)
        return aggregate(context.upvotes, context.downvotes, context.views)
    except Exception:
        logger.warning(
            "event=fallback_source_failed source=%s", source, exc_info=True
        )
        return PartialMetrics()


def fallback_scoring(context: ScoringContext) -> QualityMetrics:
    """Heuristic + community only, pinned scores, never auto-validated."""
    heuristic = _safe_source(ScoringSource.HEURISTIC, context)
    community = _safe_source(ScoringSource.COMMUNITY, context)

    def pick(value: float | None, default: float = FALLBACK_SCORE) -> float:
        return default if value is None else _clamp(value)

    return QualityMetrics(
        clarity=pick(heuristic.clarity),
        completeness=pick(heuristic.completeness),
        accuracy=pick(community.accuracy),
        relevance=pick(community.relevance),
        actionability=pick(heuristic.actionability),
        technical_depth=pick(
            heuristic.technical_depth, FALLBACK_TECHNICAL_DEPTH
        ),
        quality_score=FALLBACK_SCORE,
        confidence_score=FALLBACK_SCORE,
        auto_validated=False,
        reasoning=FALLBACK_REASONING,
        flags=list(heuristic.flags or []),
        suggested_improvements=list(FALLBACK_IMPROVEMENTS),
    )


class QualityScorer:
    """Stateless scoring service.

    Usage:
        scorer = QualityScorer(settings)
        metrics = await scorer.score_knowledge_pair(context)
        # later, after a vote or view:
        metrics = scorer.update_with_community_feedback(metrics, 12, 1, 240)
    """

    def __init__(self, settings: Settings | None = None) -> None:
        # None: the judge loads Settings per call and degrades on bad config
        self._settings = settings

    async def score_knowledge_pair(
        self, context: ScoringContext
    ) -> QualityMetrics:
        """Score a pair from all sources. Never raises."""
        try:
            ai, heuristic, community = await self._gather_sources(context)
            metrics = combine_scores(ai, heuristic, community)
        except Exception:
            logger.error(
                "event=quality_scoring_failed fallback=true", exc_info=True
            )
            return fallback_scoring(context)

        logger.info(
            "event=quality_scored quality=%.3f confidence=%.3f "
            "auto_validated=%s flags=%d ai=%s",
            metrics.quality_score,
            metrics.confidence_score,
            metrics.auto_validated,
            len(metrics.flags),
            not ai.is_empty,
        )
        return metrics

    async def _gather_sources(
        self, context: ScoringContext
    ) -> tuple[PartialMetrics, PartialMetrics, PartialMetrics]:
        """Fan out to the three sources and wait for all of them.

        A judge exception becomes an empty partial; a heuristic or
        community exception is re-raised so the caller falls back.
        """

        async def _heuristic() -> PartialMetrics:
            return analyze(context)

        async def _community() -> PartialMetrics:
            return aggregate(
                context.upvotes, context.downvotes, context.views
            )

        ai, heuristic, community = await asyncio.gather(
            judge_pair(context, self._settings),
            _heuristic(),
            _community(),
            return_exceptions=True,
        )

        if isinstance(ai, BaseException):
            if not isinstance(ai, Exception):
                raise ai
            logger.warning(
                "event=source_failed source=%s", ScoringSource.AI,
                exc_info=ai,
            )
            ai = PartialMetrics()
        for outcome in (heuristic, community):
            if isinstance(outcome, BaseException):
                raise outcome
        return (
            ai,
            cast(PartialMetrics, heuristic),
            cast(PartialMetrics, community),
        )

    @staticmethod
    def update_with_community_feedback(
        existing: QualityMetrics,
        upvotes: int,
        downvotes: int,
        views: int,
    ) -> QualityMetrics:
        """Re-blend stored metrics with fresh vote/view counts.

        No AI call. auto_validated is carried over unchanged.
        """
        community = aggregate(upvotes, downvotes, views)
        community_relevance = (
            community.relevance
            if community.relevance is not None
            else NEUTRAL_SCORE
        )
        return existing.model_copy(
            update={
                "relevance": _clamp(
                    weighted_average(
                        [existing.relevance, community.relevance],
                        FEEDBACK_RELEVANCE_WEIGHTS,
                    )
                ),
                "accuracy": _clamp(
                    weighted_average(
                        [existing.accuracy, community.accuracy],
                        FEEDBACK_ACCURACY_WEIGHTS,
                    )
                ),
                "confidence_score": _clamp(
                    weighted_average(
                        [existing.confidence_score, community_relevance],
                        FEEDBACK_CONFIDENCE_WEIGHTS,
                    )
                ),
            }
        )


async def score_knowledge_pair(
    context: ScoringContext, settings: Settings | None = None
) -> QualityMetrics:
    """Score one pair with a throwaway scorer."""
    return await QualityScorer(settings).score_knowledge_pair(context)


def update_with_community_feedback(
    existing: QualityMetrics,
    upvotes: int,
    downvotes: int,
    views: int,
) -> QualityMetrics:
    """Re-blend stored metrics with community counters."""
    return QualityScorer.update_with_community_feedback(
        existing, upvotes, downvotes, views
    )
