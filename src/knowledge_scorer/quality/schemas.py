"""Pydantic models for quality scoring input and output."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from knowledge_scorer.constants import QualityBand

UnitFloat = Annotated[float, Field(ge=0.0, le=1.0)]


class ScoringContext(BaseModel):
    """A knowledge pair plus the signals available for scoring it."""

    model_config = ConfigDict(frozen=True)

    problem: str
    solution: str
    source_context: str | None = None
    platform: str | None = None
    channel_name: str | None = None
    has_code_examples: bool | None = None
    has_links: bool | None = None
    upvotes: int = Field(default=0, ge=0)
    downvotes: int = Field(default=0, ge=0)
    views: int = Field(default=0, ge=0)


class PartialMetrics(BaseModel):
    """What a single scoring source has to say.

    ``None`` means the source has no opinion on that field; it is
    excluded from blending rather than counted as zero.
    """

    model_config = ConfigDict(frozen=True)

    clarity: float | None = None
    completeness: float | None = None
    accuracy: float | None = None
    relevance: float | None = None
    actionability: float | None = None
    technical_depth: float | None = None
    quality_score: float | None = None
    engagement_score: float | None = None
    popularity: float | None = None
    reasoning: str | None = None
    flags: list[str] | None = None
    suggested_improvements: list[str] | None = None

    @property
    def is_empty(self) -> bool:
        return all(v is None for v in self.model_dump().values())


class QualityMetrics(BaseModel):
    """Combined verdict for one knowledge pair."""

    model_config = ConfigDict(frozen=True)

    clarity: UnitFloat
    completeness: UnitFloat
    accuracy: UnitFloat
    relevance: UnitFloat
    actionability: UnitFloat
    technical_depth: UnitFloat
    quality_score: UnitFloat
    confidence_score: UnitFloat
    auto_validated: bool = False
    reasoning: str = Field(min_length=1)
    flags: list[str] = Field(default_factory=lambda: list[str]())
    suggested_improvements: list[str] = Field(
        default_factory=lambda: list[str]()
    )


class QualitySummary(BaseModel):
    """Aggregate view over a collection of scored pairs."""

    total: int = 0
    avg_quality: float = 0.0
    avg_confidence: float = 0.0
    auto_validated_count: int = 0
    flagged_count: int = 0  # confidence below the review threshold
    band_counts: dict[QualityBand, int] = Field(
        default_factory=lambda: {band: 0 for band in QualityBand}
    )
    top_flags: list[tuple[str, int]] = Field(
        default_factory=lambda: list[tuple[str, int]]()
    )
