"""Deterministic text heuristics for knowledge pair quality.

Pure functions over the problem/solution strings: no I/O, no
randomness, never raises. Produces clarity, completeness,
technical_depth and actionability estimates plus issue flags.
"""

from __future__ import annotations

import re

from knowledge_scorer.constants import HeuristicFlag
from knowledge_scorer.quality.schemas import PartialMetrics, ScoringContext

_QUESTION_WORDS = re.compile(
    r"\b(how|what|why|when|where|which)\b", re.IGNORECASE
)
_PROBLEM_TERMS = re.compile(
    r"\b(error|bug|issue|problem|failed|not working)\b", re.IGNORECASE
)
_STEP_WORDS = re.compile(
    r"\b(step|first|then|next|finally)\b", re.IGNORECASE
)
# "1." at a line start or "- " bullet after a newline
_LIST_MARKERS = re.compile(r"^\d+\.|\n\d+\.|\n-\s", re.MULTILINE)
_CODE_MARKERS = re.compile(r"```|`[^`]+`|\bcode\b", re.IGNORECASE)
_EXPLANATION_WORDS = re.compile(
    r"\b(because|reason|explanation|why)\b", re.IGNORECASE
)
_TECHNICAL_TERMS = re.compile(
    r"\b(function|method|class|variable|array|object|API|database"
    r"|server|client|configuration|implementation)\b",
    re.IGNORECASE,
)
_ACTION_WORDS = re.compile(
    r"\b(install|run|execute|create|add|remove|update|configure"
    r"|set|use|try|check)\b",
    re.IGNORECASE,
)
_COMMAND_MARKERS = re.compile(
    r"\$|npm|pip|git|cd |mkdir|touch|ls |cp |mv ", re.IGNORECASE
)
_INCOMPLETE_MARKERS = ("TODO", "...")

MIN_CLEAR_PROBLEM_CHARS = 20
MIN_COMPLETE_SOLUTION_CHARS = 50
MIN_SOLUTION_CHARS = 30
MIN_PROBLEM_CHARS = 10
TECHNICAL_TERM_WEIGHT = 0.1


def has_steps(text: str) -> bool:
    """Sequencing language or a numbered/bulleted list."""
    return bool(_STEP_WORDS.search(text) or _LIST_MARKERS.search(text))


def has_code_example(context: ScoringContext) -> bool:
    if context.has_code_examples:
        return True
    return bool(_CODE_MARKERS.search(context.solution))


def score_clarity(problem: str) -> float:
    return min(
        1.0,
        (0.3 if len(problem) > MIN_CLEAR_PROBLEM_CHARS else 0.1)
        + (0.3 if _QUESTION_WORDS.search(problem) else 0.0)
        + (0.4 if _PROBLEM_TERMS.search(problem) else 0.2),
    )


def score_completeness(context: ScoringContext) -> float:
    solution = context.solution
    return min(
        1.0,
        (0.3 if len(solution) > MIN_COMPLETE_SOLUTION_CHARS else 0.1)
        + (0.3 if has_steps(solution) else 0.1)
        + (0.2 if has_code_example(context) else 0.0)
        + (0.2 if _EXPLANATION_WORDS.search(solution) else 0.0),
    )


def score_technical_depth(solution: str) -> float:
    terms = len(_TECHNICAL_TERMS.findall(solution))
    return min(1.0, terms * TECHNICAL_TERM_WEIGHT)


def score_actionability(solution: str) -> float:
    return min(
        1.0,
        (0.4 if _ACTION_WORDS.search(solution) else 0.1)
        + (0.3 if _COMMAND_MARKERS.search(solution) else 0.0)
        + (0.3 if has_steps(solution) else 0.1),
    )


def detect_flags(context: ScoringContext) -> list[str]:
    """Issue flags, in a fixed order."""
    problem, solution = context.problem, context.solution
    flags: list[str] = []
    if len(solution) < MIN_SOLUTION_CHARS:
        flags.append(HeuristicFlag.SOLUTION_TOO_BRIEF)
    if len(problem) < MIN_PROBLEM_CHARS:
        flags.append(HeuristicFlag.PROBLEM_UNCLEAR)
    if not _ACTION_WORDS.search(solution) and not has_code_example(context):
        flags.append(HeuristicFlag.NOT_ACTIONABLE)
    if any(marker in solution for marker in _INCOMPLETE_MARKERS):
        flags.append(HeuristicFlag.INCOMPLETE_SOLUTION)
    return flags


def analyze(context: ScoringContext) -> PartialMetrics:
    """Heuristic estimate of a knowledge pair's quality."""
    clarity = score_clarity(context.problem)
    completeness = score_completeness(context)
    return PartialMetrics(
        clarity=clarity,
        completeness=completeness,
        technical_depth=score_technical_depth(context.solution),
        actionability=score_actionability(context.solution),
        flags=detect_flags(context),
        reasoning=(
            f"Heuristic analysis: Problem clarity {clarity * 100:.0f}%, "
            f"Solution completeness {completeness * 100:.0f}%"
        ),
    )
