"""Shared test fixtures: no real LLM calls, deterministic settings."""

import os

# Blank provider keys so a developer's shell credentials never turn the
# AI judge on implicitly. Tests that need the judge build their own
# Settings with a dummy key and patch the litellm completion.
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""
# Use litellm's bundled model cost map instead of fetching it at import.
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

import json
from typing import Any

import pytest
from circuitbreaker import CircuitBreakerMonitor

from knowledge_scorer.config import Settings
from knowledge_scorer.llm.client import _breaker_registry
from knowledge_scorer.quality.schemas import QualityMetrics, ScoringContext

ACOMPLETION_PATH = "knowledge_scorer.llm.client._acompletion"

NULL_POINTER_PROBLEM = "How do I fix a null pointer error?"
NULL_POINTER_SOLUTION = (
    "First, check if the variable is null before use. "
    "Then add a guard clause. ```if (x != null)```"
)

# Clears every heuristic gate: clarity, completeness and actionability 1.0
STRONG_PROBLEM = "How do I fix the database connection error in my server?"
STRONG_SOLUTION = (
    "First, run `pip install psycopg2` because the driver is missing. "
    "Then restart the server and check the configuration."
)


@pytest.fixture(autouse=True)
def _reset_breakers() -> None:
    """Reset circuit breakers between tests."""
    _breaker_registry.clear()
    for cb in CircuitBreakerMonitor.get_circuits():
        cb.reset()  # type: ignore[union-attr]


@pytest.fixture
def offline_settings() -> Settings:
    """Settings with no provider key, so the AI judge is skipped."""
    return Settings(
        openai_api_key="",
        anthropic_api_key="",
        litellm_model_chain=["openai/gpt-4o"],
    )


@pytest.fixture
def ai_settings() -> Settings:
    """Settings that enable the AI judge against a patched completion."""
    return Settings(
        openai_api_key="for-tests-only",
        litellm_model_chain=["openai/gpt-4o", "openai/gpt-4o-mini"],
        llm_timeout_seconds=5,
    )


def make_context(**overrides: Any) -> ScoringContext:
    fields: dict[str, Any] = {
        "problem": NULL_POINTER_PROBLEM,
        "solution": NULL_POINTER_SOLUTION,
        "platform": "slack",
        "channel_name": "dev-help",
    }
    fields.update(overrides)
    return ScoringContext(**fields)


def make_metrics(**overrides: Any) -> QualityMetrics:
    fields: dict[str, Any] = {
        "clarity": 0.8,
        "completeness": 0.8,
        "accuracy": 0.8,
        "relevance": 0.8,
        "actionability": 0.8,
        "technical_depth": 0.5,
        "quality_score": 0.8,
        "confidence_score": 0.8,
        "reasoning": "stored",
    }
    fields.update(overrides)
    return QualityMetrics(**fields)


def judge_json(**overrides: Any) -> str:
    """A valid judge response; every score defaults to 1.0."""
    payload: dict[str, Any] = {
        "clarity": 1.0,
        "completeness": 1.0,
        "accuracy": 1.0,
        "relevance": 1.0,
        "actionability": 1.0,
        "technicalDepth": 1.0,
        "reasoning": "Clear, correct and complete",
        "flags": [],
        "suggestedImprovements": [],
    }
    payload.update(overrides)
    return json.dumps(payload)


def mock_response(content: str) -> Any:
    """Build a mock litellm response with usage metadata."""
    msg = type("Msg", (), {"content": content})()
    choice = type("Choice", (), {"message": msg})()
    usage = type(
        "Usage",
        (),
        {"prompt_tokens": 120, "completion_tokens": 60},
    )()
    return type(
        "Response", (), {"choices": [choice], "usage": usage}
    )()
