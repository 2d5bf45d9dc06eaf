"""Tests for judge failure classification."""

from __future__ import annotations

import json

from circuitbreaker import CircuitBreaker, CircuitBreakerError

from knowledge_scorer.resilience.errors import (
    JudgeFailure,
    LLMUnavailableError,
    MalformedJudgeResponseError,
    classify_judge_error,
)


class _StatusCodeError(Exception):
    """Exception with a status_code attribute."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


# ── structured attributes ───────────────────────────────────


def test_status_code_429_is_rate_limited() -> None:
    err = _StatusCodeError("slow down", 429)
    assert classify_judge_error(err) == JudgeFailure.RATE_LIMITED


def test_status_code_401_and_403_are_auth() -> None:
    assert classify_judge_error(_StatusCodeError("no", 401)) == JudgeFailure.AUTH
    assert classify_judge_error(_StatusCodeError("no", 403)) == JudgeFailure.AUTH


def test_status_code_503_is_server() -> None:
    err = _StatusCodeError("unavailable", 503)
    assert classify_judge_error(err) == JudgeFailure.SERVER


def test_timeout_error_type() -> None:
    assert classify_judge_error(TimeoutError()) == JudgeFailure.TIMEOUT


def test_malformed_response() -> None:
    err = MalformedJudgeResponseError("Judge response has no rubric scores")
    assert classify_judge_error(err) == JudgeFailure.MALFORMED


def test_json_decode_error() -> None:
    err = json.JSONDecodeError("Expecting value", "nope", 0)
    assert classify_judge_error(err) == JudgeFailure.MALFORMED


def test_circuit_breaker_error() -> None:
    breaker = CircuitBreaker(name="judge_test-model")
    err = CircuitBreakerError(breaker)
    assert classify_judge_error(err) == JudgeFailure.CIRCUIT_OPEN


# ── message fallback ────────────────────────────────────────


def test_message_timeout() -> None:
    err = Exception("Request timed out after 60s")
    assert classify_judge_error(err) == JudgeFailure.TIMEOUT


def test_message_rate_limit() -> None:
    err = Exception("Rate limit reached for gpt-4o")
    assert classify_judge_error(err) == JudgeFailure.RATE_LIMITED


def test_message_api_key() -> None:
    err = Exception("Incorrect API key provided")
    assert classify_judge_error(err) == JudgeFailure.AUTH


def test_message_server_code() -> None:
    err = Exception("upstream returned 502")
    assert classify_judge_error(err) == JudgeFailure.SERVER


def test_unknown() -> None:
    assert classify_judge_error(RuntimeError("boom")) == JudgeFailure.UNKNOWN


# ── chain exhaustion ────────────────────────────────────────


def test_unavailable_unwraps_last_error() -> None:
    err = LLMUnavailableError(
        ["openai/gpt-4o", "openai/gpt-4o-mini"],
        _StatusCodeError("rate limited", 429),
    )
    assert classify_judge_error(err) == JudgeFailure.RATE_LIMITED


def test_unavailable_without_cause() -> None:
    err = LLMUnavailableError(["openai/gpt-4o"])
    assert classify_judge_error(err) == JudgeFailure.UNKNOWN
    assert "openai/gpt-4o" in str(err)
    assert err.models == ["openai/gpt-4o"]
    assert err.last_error is None
