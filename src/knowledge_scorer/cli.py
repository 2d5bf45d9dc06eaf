"""CLI entry point: ``knowledge-scorer score``, ``feedback`` and ``summarize``."""

from __future__ import annotations

# Phase 1: Singleton logging before any transitive litellm imports
from knowledge_scorer.logging_config import setup_logging

setup_logging()

import argparse  # noqa: E402
import asyncio  # noqa: E402
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

from pydantic import ValidationError  # noqa: E402

from knowledge_scorer import __version__  # noqa: E402
from knowledge_scorer.config import Settings  # noqa: E402
from knowledge_scorer.logging_config import (  # noqa: E402
    apply_log_level,
    cleanup_third_party_handlers,
)
from knowledge_scorer.quality.schemas import (  # noqa: E402
    QualityMetrics,
    ScoringContext,
)
from knowledge_scorer.quality.scorer import (  # noqa: E402
    QualityScorer,
    update_with_community_feedback,
)
from knowledge_scorer.quality.summary import summarize  # noqa: E402

# Phase 2: Clear litellm's duplicate handlers after all imports
cleanup_third_party_handlers()


def main() -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.version:
        print(f"knowledge-scorer {__version__}")
        return

    if args.command is None:
        parser.print_help()
        return

    settings = _load_settings()
    apply_log_level(settings.log_level)

    if args.command == "score":
        _run_score(args, settings)
    elif args.command == "feedback":
        _run_feedback(args)
    elif args.command == "summarize":
        _run_summarize(args)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="knowledge-scorer",
        description=(
            "Score problem/solution knowledge pairs from "
            "AI, heuristic and community signals."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    score = sub.add_parser("score", help="Score a knowledge pair")
    score.add_argument("--problem", "-p", required=True)
    score.add_argument("--solution", "-s", required=True)
    score.add_argument("--platform", default=None)
    score.add_argument("--channel", default=None, dest="channel_name")
    score.add_argument(
        "--source-context",
        default=None,
        help="Surrounding conversation, passed to the AI judge",
    )
    score.add_argument(
        "--has-code-examples",
        action="store_true",
        default=None,
        help="Treat the solution as containing code",
    )
    _add_counter_args(score, required=False)
    score.add_argument(
        "--no-ai",
        action="store_true",
        help="Skip the AI judge (heuristic + community only)",
    )

    feedback = sub.add_parser(
        "feedback",
        help="Re-blend stored metrics with new vote/view counts",
    )
    feedback.add_argument(
        "metrics",
        help="Path to a QualityMetrics JSON file, or - for stdin",
    )
    _add_counter_args(feedback, required=True)

    summary = sub.add_parser(
        "summarize",
        help="Summarize a JSON-lines file of QualityMetrics",
    )
    summary.add_argument(
        "metrics",
        help="Path to a JSON-lines file, or - for stdin",
    )

    return parser


def _add_counter_args(
    parser: argparse.ArgumentParser, *, required: bool
) -> None:
    for name in ("upvotes", "downvotes", "views"):
        parser.add_argument(
            f"--{name}",
            type=_non_negative_int,
            required=required,
            default=None if required else 0,
        )


def _non_negative_int(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise argparse.ArgumentTypeError(f"{raw} is negative")
    return value


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.exists():
        print(f"Error: {path} does not exist", file=sys.stderr)
        sys.exit(1)
    return path.read_text(encoding="utf-8")


def _load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        sys.exit(1)


def _run_score(args: argparse.Namespace, settings: Settings) -> None:
    """Execute the score command."""
    try:
        context = ScoringContext(
            problem=args.problem,
            solution=args.solution,
            platform=args.platform,
            channel_name=args.channel_name,
            source_context=args.source_context,
            has_code_examples=args.has_code_examples,
            upvotes=args.upvotes,
            downvotes=args.downvotes,
            views=args.views,
        )
    except ValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.no_ai:
        settings = settings.model_copy(update={"quality_ai_enabled": False})

    metrics = asyncio.run(
        QualityScorer(settings).score_knowledge_pair(context)
    )
    print(metrics.model_dump_json(indent=2))


def _run_feedback(args: argparse.Namespace) -> None:
    """Execute the feedback command."""
    try:
        existing = QualityMetrics.model_validate_json(
            _read_input(args.metrics)
        )
    except ValidationError as exc:
        print(f"Error: invalid metrics: {exc}", file=sys.stderr)
        sys.exit(1)

    updated = update_with_community_feedback(
        existing, args.upvotes, args.downvotes, args.views
    )
    print(updated.model_dump_json(indent=2))


def _run_summarize(args: argparse.Namespace) -> None:
    """Execute the summarize command."""
    items: list[QualityMetrics] = []
    for lineno, line in enumerate(
        _read_input(args.metrics).splitlines(), start=1
    ):
        if not line.strip():
            continue
        try:
            items.append(QualityMetrics.model_validate_json(line))
        except ValidationError as exc:
            print(
                f"Error: line {lineno}: {exc.error_count()} "
                f"validation error(s)",
                file=sys.stderr,
            )
            sys.exit(1)
    print(summarize(items).model_dump_json(indent=2))


if __name__ == "__main__":
    main()
