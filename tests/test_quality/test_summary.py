"""Tests for quality bands and collection summaries."""

from __future__ import annotations

import pytest

from knowledge_scorer.constants import QualityBand
from knowledge_scorer.quality.summary import quality_band, summarize
from tests.conftest import make_metrics


@pytest.mark.parametrize(
    ("score", "band"),
    [
        (1.0, QualityBand.EXCELLENT),
        (0.9, QualityBand.EXCELLENT),
        (0.89, QualityBand.GOOD),
        (0.75, QualityBand.GOOD),
        (0.74, QualityBand.FAIR),
        (0.6, QualityBand.FAIR),
        (0.59, QualityBand.POOR),
        (0.0, QualityBand.POOR),
    ],
)
def test_quality_band(score: float, band: QualityBand) -> None:
    assert quality_band(score) == band


def test_empty_summary() -> None:
    summary = summarize([])
    assert summary.total == 0
    assert summary.avg_confidence == 0.0
    assert summary.band_counts == {band: 0 for band in QualityBand}
    assert summary.top_flags == []


def test_summary_counts() -> None:
    items = [
        make_metrics(confidence_score=0.95, quality_score=0.9, auto_validated=True),
        make_metrics(confidence_score=0.8, quality_score=0.7),
        make_metrics(
            confidence_score=0.65,
            quality_score=0.6,
            flags=["Solution too brief", "Not actionable"],
        ),
        make_metrics(
            confidence_score=0.3,
            quality_score=0.4,
            flags=["Solution too brief"],
        ),
    ]
    summary = summarize(items)
    assert summary.total == 4
    assert summary.avg_confidence == pytest.approx(0.675)
    assert summary.avg_quality == pytest.approx(0.65)
    assert summary.auto_validated_count == 1
    # confidence below 0.7 needs review
    assert summary.flagged_count == 2
    assert summary.band_counts == {
        QualityBand.EXCELLENT: 1,
        QualityBand.GOOD: 1,
        QualityBand.FAIR: 1,
        QualityBand.POOR: 1,
    }
    assert summary.top_flags == [
        ("Solution too brief", 2),
        ("Not actionable", 1),
    ]


def test_accepts_generator() -> None:
    summary = summarize(make_metrics() for _ in range(3))
    assert summary.total == 3
