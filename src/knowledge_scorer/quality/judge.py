"""AI rubric judge: one LLM call scoring a pair on six dimensions.

Degrades to an empty ``PartialMetrics`` (no opinion) when the LLM is
not configured, the call fails, or the response cannot be read.
Failures are logged here and never propagate to the combiner.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, cast

from pydantic import ValidationError

from knowledge_scorer.config import Settings
from knowledge_scorer.constants import (
    JUDGE_DIMENSION_KEYS,
    NEUTRAL_SCORE,
    QUALITY_WEIGHTS,
    Dimension,
)
from knowledge_scorer.llm.client import complete_json
from knowledge_scorer.prompts import build_judge_messages
from knowledge_scorer.quality.schemas import PartialMetrics, ScoringContext
from knowledge_scorer.resilience.errors import (
    JudgeFailure,
    MalformedJudgeResponseError,
    classify_judge_error,
)

logger = logging.getLogger(__name__)


def rubric_quality_score(metrics: PartialMetrics) -> float:
    """Weighted quality over the five acceptance dimensions.

    A dimension the source did not report counts as neutral (0.5).
    """
    total = 0.0
    for dimension, weight in QUALITY_WEIGHTS.items():
        value = cast(float | None, getattr(metrics, dimension))
        total += (NEUTRAL_SCORE if value is None else value) * weight
    return total


async def judge_pair(
    context: ScoringContext,
    settings: Settings | None = None,
) -> PartialMetrics:
    """Ask the LLM to grade a knowledge pair against the rubric."""
    if settings is None:
        try:
            settings = Settings()
        except ValidationError:
            logger.warning(
                "event=judge_skipped reason=%s detail=invalid_settings",
                JudgeFailure.UNCONFIGURED,
                exc_info=True,
            )
            return PartialMetrics()

    if not settings.llm_configured:
        logger.debug(
            "event=judge_skipped reason=%s", JudgeFailure.UNCONFIGURED
        )
        return PartialMetrics()

    try:
        result = await complete_json(
            build_judge_messages(context), settings
        )
        metrics = parse_judge_response(result.content)
    except Exception as exc:
        logger.warning(
            "event=ai_scoring_failed error_class=%s",
            classify_judge_error(exc),
            exc_info=True,
        )
        return PartialMetrics()

    logger.debug(
        "event=ai_scoring_done model=%s quality=%.3f tokens_in=%d tokens_out=%d",
        result.model,
        metrics.quality_score or 0.0,
        result.input_tokens,
        result.output_tokens,
    )
    return metrics


def parse_judge_response(raw_json: str) -> PartialMetrics:
    """Parse the judge's JSON into a partial result.

    Scores are clamped to [0, 1]. Raises MalformedJudgeResponseError
    when the payload is not an object or carries no usable score.
    """
    try:
        data: Any = json.loads(raw_json)
    except json.JSONDecodeError as exc:
        raise MalformedJudgeResponseError(
            f"Judge response is not JSON (len={len(raw_json)})"
        ) from exc
    if not isinstance(data, dict):
        raise MalformedJudgeResponseError(
            "Judge response is not a JSON object"
        )
    payload = cast(dict[str, Any], data)

    scores: dict[Dimension, float] = {}
    for dimension, key in JUDGE_DIMENSION_KEYS.items():
        value = _read_score(payload.get(key))
        if value is not None:
            scores[dimension] = value
    if not scores:
        raise MalformedJudgeResponseError(
            "Judge response has no rubric scores"
        )

    reasoning = payload.get("reasoning")
    metrics = PartialMetrics(
        **scores,
        reasoning=(
            reasoning.strip()
            if isinstance(reasoning, str) and reasoning.strip()
            else None
        ),
        flags=_read_strings(payload.get("flags")),
        suggested_improvements=_read_strings(
            payload.get("suggestedImprovements")
        ),
    )
    return metrics.model_copy(
        update={"quality_score": rubric_quality_score(metrics)}
    )


def _read_score(raw: Any) -> float | None:
    """Accept real numbers only; clamp into [0, 1]."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    value = float(raw)
    if math.isnan(value):
        return None
    return max(0.0, min(1.0, value))


def _read_strings(raw: Any) -> list[str]:
    """Coerce a JSON list into a list of non-empty strings."""
    if not isinstance(raw, list):
        return []
    items = cast(list[Any], raw)
    return [
        str(item).strip()
        for item in items
        if item is not None and str(item).strip()
    ]
