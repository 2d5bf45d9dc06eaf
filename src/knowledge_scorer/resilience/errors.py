"""Classification of AI judge failures for structured logging.

The judge never raises; every failure degrades to an empty result.
Classifying the cause keeps the logs useful: a missing key is an
operator problem, a rate limit is backpressure, a malformed response
is the model's fault.
"""

from __future__ import annotations

import asyncio
import json
from enum import StrEnum

from circuitbreaker import CircuitBreakerError


class JudgeFailure(StrEnum):
    UNCONFIGURED = "unconfigured"  # no credentials / disabled
    CIRCUIT_OPEN = "circuit_open"  # breaker refusing calls
    RATE_LIMITED = "rate_limited"  # 429 after retries
    TIMEOUT = "timeout"
    AUTH = "auth"  # 401, 403
    SERVER = "server"  # 5xx
    MALFORMED = "malformed"  # response not usable JSON
    UNKNOWN = "unknown"


class LLMUnavailableError(Exception):
    """Every model in the chain failed or was short-circuited."""

    def __init__(self, models: list[str], last_error: BaseException | None = None) -> None:
        super().__init__(
            f"No model in chain produced a response: {', '.join(models)}"
        )
        self.models = models
        self.last_error = last_error


class MalformedJudgeResponseError(ValueError):
    """Judge response could not be read as a rubric object."""


def classify_judge_error(error: BaseException) -> JudgeFailure:
    """Map an exception raised while judging to a failure category.

    Unwraps LLMUnavailableError to its last underlying cause. Checks
    structured attributes first, then falls back to message matching
    for untyped exceptions.
    """
    if isinstance(error, LLMUnavailableError) and error.last_error is not None:
        return classify_judge_error(error.last_error)

    if isinstance(error, CircuitBreakerError):
        return JudgeFailure.CIRCUIT_OPEN
    if isinstance(error, (MalformedJudgeResponseError, json.JSONDecodeError)):
        return JudgeFailure.MALFORMED
    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return JudgeFailure.TIMEOUT

    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        if status_code == 429:
            return JudgeFailure.RATE_LIMITED
        if status_code in (401, 403):
            return JudgeFailure.AUTH
        if 500 <= status_code < 600:
            return JudgeFailure.SERVER

    msg = str(error).lower()
    if "timeout" in msg or "timed out" in msg:
        return JudgeFailure.TIMEOUT
    if "429" in msg or "rate limit" in msg or "rate_limit" in msg:
        return JudgeFailure.RATE_LIMITED
    if "api key" in msg or "api_key" in msg or "401" in msg:
        return JudgeFailure.AUTH
    if any(code in msg for code in ("500", "502", "503", "504")):
        return JudgeFailure.SERVER

    return JudgeFailure.UNKNOWN
