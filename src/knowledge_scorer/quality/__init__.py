"""Quality scoring engine: AI judge, heuristics, community signal, combiner."""

from knowledge_scorer.quality.community import aggregate
from knowledge_scorer.quality.heuristics import analyze
from knowledge_scorer.quality.judge import judge_pair, parse_judge_response
from knowledge_scorer.quality.schemas import (
    PartialMetrics,
    QualityMetrics,
    QualitySummary,
    ScoringContext,
)
from knowledge_scorer.quality.scorer import (
    QualityScorer,
    score_knowledge_pair,
    update_with_community_feedback,
)
from knowledge_scorer.quality.summary import quality_band, summarize

__all__ = [
    "PartialMetrics",
    "QualityMetrics",
    "QualityScorer",
    "QualitySummary",
    "ScoringContext",
    "aggregate",
    "analyze",
    "judge_pair",
    "parse_judge_response",
    "quality_band",
    "score_knowledge_pair",
    "summarize",
    "update_with_community_feedback",
]
