"""Shared constants: single source of truth for scoring values.

Weights, thresholds and user-facing strings used by more than one
scoring source live here. StrEnum members are str-compatible, so
flags and bands serialize to JSON unchanged.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal, TypeAlias

# ── String Enums ─────────────────────────────────────────


class HeuristicFlag(StrEnum):
    """Issues the heuristic analyzer can detect."""

    SOLUTION_TOO_BRIEF = "Solution too brief"
    PROBLEM_UNCLEAR = "Problem unclear"
    NOT_ACTIONABLE = "Not actionable"
    INCOMPLETE_SOLUTION = "Incomplete solution"


class QualityBand(StrEnum):
    """Dashboard grouping of a 0–1 score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ScoringSource(StrEnum):
    """Independent scoring sources fanned out by the combiner."""

    AI = "ai"
    HEURISTIC = "heuristic"
    COMMUNITY = "community"


# Rubric dimensions, in reporting order
Dimension: TypeAlias = Literal[
    "clarity",
    "completeness",
    "accuracy",
    "relevance",
    "actionability",
    "technical_depth",
]

DIMENSIONS: tuple[Dimension, ...] = (
    "clarity",
    "completeness",
    "accuracy",
    "relevance",
    "actionability",
    "technical_depth",
)

# JSON keys the judge is asked to return for each dimension
JUDGE_DIMENSION_KEYS: dict[Dimension, str] = {
    "clarity": "clarity",
    "completeness": "completeness",
    "accuracy": "accuracy",
    "relevance": "relevance",
    "actionability": "actionability",
    "technical_depth": "technicalDepth",
}

# ── Confidence Thresholds ────────────────────────────────


class Threshold:
    """Named confidence thresholds for auto-validation."""

    HIGH = 0.85  # minimum confidence
    MEDIUM = 0.70  # minimum quality
    LOW = 0.50  # not read by the gate
    MIN_ACCURACY = 0.80
    MIN_COMPLETENESS = 0.70
    REVIEW = 0.70  # below this a pair needs human review
    FLOOR = 0.10
    CEILING = 1.00


# ── Weights ──────────────────────────────────────────────

# technical_depth informs depth only, never acceptance
QUALITY_WEIGHTS: dict[Dimension, float] = {
    "clarity": 0.20,
    "completeness": 0.25,
    "accuracy": 0.25,
    "relevance": 0.15,
    "actionability": 0.15,
}

# Per-dimension blend of (ai, heuristic, community); None = not a contributor
SOURCE_WEIGHTS: dict[Dimension, tuple[float | None, float | None, float | None]] = {
    "clarity": (0.7, 0.3, None),
    "completeness": (0.6, 0.4, None),
    "accuracy": (0.4, 0.3, 0.3),
    "relevance": (0.5, None, 0.5),
    "actionability": (0.6, 0.4, None),
    "technical_depth": (0.7, 0.3, None),
}

NEUTRAL_SCORE = 0.5

# Confidence adjustments
AGREEMENT_BASE = 0.7
AGREEMENT_WEIGHT = 0.3
AGREEMENT_VARIANCE_SCALE = 4.0
FLAG_PENALTY = 0.1
MAX_FLAG_PENALTY = 0.3
COMMUNITY_BOOST = 0.1
COMMUNITY_BOOST_ACCURACY = 0.8

# Community feedback blend: (existing, community)
FEEDBACK_RELEVANCE_WEIGHTS = (0.6, 0.4)
FEEDBACK_ACCURACY_WEIGHTS = (0.7, 0.3)
FEEDBACK_CONFIDENCE_WEIGHTS = (0.8, 0.2)

# ── Community Signal ─────────────────────────────────────

VOTES_FOR_FULL_ENGAGEMENT = 10
VIEWS_FOR_FULL_POPULARITY = 100

# ── Quality Bands ────────────────────────────────────────

BAND_EXCELLENT = 0.90
BAND_GOOD = 0.75
BAND_FAIR = 0.60

# ── Reasoning / Fallback ─────────────────────────────────

REASONING_SEPARATOR = " | "
DEFAULT_REASONING = "Automated quality assessment completed"
FALLBACK_REASONING = "Fallback scoring - AI unavailable"
FALLBACK_SCORE = 0.6
FALLBACK_TECHNICAL_DEPTH = 0.5
FALLBACK_IMPROVEMENTS: tuple[str, ...] = (
    "Consider adding more detail",
    "Add code examples if applicable",
)

# ── Circuit Breaker Configuration ────────────────────────

CB_LLM_FAILURE_THRESHOLD = 5
CB_LLM_RECOVERY_TIMEOUT = 30

# ── Retry Strategy ───────────────────────────────────────

RETRY_MAX_ATTEMPTS = 3
RETRY_INITIAL_WAIT = 2
RETRY_MAX_WAIT = 30

# ── LLM Output ───────────────────────────────────────────

JUDGE_MAX_OUTPUT_TOKENS = 800
JUDGE_TEMPERATURE = 0.1

# ── Misc ─────────────────────────────────────────────────

UNKNOWN_CHANNEL = "unknown"
