"""Failure classification for the LLM judge."""

from knowledge_scorer.resilience.errors import (
    JudgeFailure,
    LLMUnavailableError,
    MalformedJudgeResponseError,
    classify_judge_error,
)

__all__ = [
    "JudgeFailure",
    "LLMUnavailableError",
    "MalformedJudgeResponseError",
    "classify_judge_error",
]
