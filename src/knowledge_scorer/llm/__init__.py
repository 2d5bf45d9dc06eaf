"""LLM transport used by the AI rubric judge."""

from knowledge_scorer.llm.client import (
    LLMCallResult,
    complete_json,
    guarded_llm_call,
)

__all__ = [
    "LLMCallResult",
    "complete_json",
    "guarded_llm_call",
]
