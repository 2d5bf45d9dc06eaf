"""Dashboard-style rollups over scored knowledge pairs."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from knowledge_scorer.constants import (
    BAND_EXCELLENT,
    BAND_FAIR,
    BAND_GOOD,
    QualityBand,
    Threshold,
)
from knowledge_scorer.quality.schemas import QualityMetrics, QualitySummary

TOP_FLAGS_LIMIT = 5


def quality_band(score: float) -> QualityBand:
    """Bucket a 0–1 score: excellent ≥ 0.9, good ≥ 0.75, fair ≥ 0.6."""
    if score >= BAND_EXCELLENT:
        return QualityBand.EXCELLENT
    if score >= BAND_GOOD:
        return QualityBand.GOOD
    if score >= BAND_FAIR:
        return QualityBand.FAIR
    return QualityBand.POOR


def needs_review(metrics: QualityMetrics) -> bool:
    return metrics.confidence_score < Threshold.REVIEW


def summarize(metrics: Iterable[QualityMetrics]) -> QualitySummary:
    """Averages, review counts and confidence bands for a collection."""
    items = list(metrics)
    if not items:
        return QualitySummary()

    bands: Counter[QualityBand] = Counter(
        quality_band(m.confidence_score) for m in items
    )
    flags: Counter[str] = Counter(
        str(flag) for m in items for flag in m.flags
    )
    total = len(items)
    return QualitySummary(
        total=total,
        avg_quality=sum(m.quality_score for m in items) / total,
        avg_confidence=sum(m.confidence_score for m in items) / total,
        auto_validated_count=sum(1 for m in items if m.auto_validated),
        flagged_count=sum(1 for m in items if needs_review(m)),
        band_counts={band: bands.get(band, 0) for band in QualityBand},
        top_flags=flags.most_common(TOP_FLAGS_LIMIT),
    )
