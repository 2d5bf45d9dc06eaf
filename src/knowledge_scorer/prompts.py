"""LLM prompts for the AI rubric judge."""

from __future__ import annotations

from typing import TYPE_CHECKING

from knowledge_scorer.constants import UNKNOWN_CHANNEL

if TYPE_CHECKING:
    from knowledge_scorer.quality.schemas import ScoringContext

JUDGE_SYSTEM_PROMPT = (
    "You are a quality assessment expert. Analyze the given "
    "problem-solution pair and respond with valid JSON only."
)

JUDGE_RUBRIC = """\
Rate each aspect from 0.0 to 1.0 and provide reasoning:

1. Clarity: Is the problem clearly stated and solution easy to understand?
2. Completeness: Does the solution fully address the problem?
3. Accuracy: Is the solution technically correct and current?
4. Relevance: How relevant is this solution to the stated problem?
5. Actionability: Can someone follow this solution to solve their problem?
6. Technical Depth: How detailed and thorough is the technical content?

Also identify any flags or issues:
- Outdated information
- Security concerns
- Missing context
- Incomplete solution
- Unclear instructions

Respond with JSON in this format:
{
  "clarity": 0.8,
  "completeness": 0.9,
  "accuracy": 0.85,
  "relevance": 0.95,
  "actionability": 0.8,
  "technicalDepth": 0.7,
  "reasoning": "Detailed explanation of scoring",
  "flags": ["any issues found"],
  "suggestedImprovements": ["specific suggestions"]
}"""


def build_judge_prompt(context: ScoringContext) -> str:
    """Build the user prompt for one knowledge pair."""
    platform = context.platform or UNKNOWN_CHANNEL
    channel = context.channel_name or UNKNOWN_CHANNEL
    parts = [
        "Analyze this problem-solution pair for quality and provide "
        "detailed scoring:",
        "",
        f'Problem: "{context.problem}"',
        f'Solution: "{context.solution}"',
        f"Source: {platform} - {channel}",
    ]
    if context.source_context:
        parts.append(f"Context: {context.source_context}")
    parts.extend(["", JUDGE_RUBRIC])
    return "\n".join(parts)


def build_judge_messages(context: ScoringContext) -> list[dict[str, str]]:
    """System + user messages for the judge call."""
    return [
        {"role": "system", "content": JUDGE_SYSTEM_PROMPT},
        {"role": "user", "content": build_judge_prompt(context)},
    ]
