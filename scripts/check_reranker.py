"""Smoke-check the default Groq scoring client on a handful of documents.

Requires GROQ_API_KEY (environment or .env).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from core.config import get_settings  # noqa: E402
from rerank.contracts import RerankContext, RerankerExtractors  # noqa: E402
from rerank.reranker import Reranker  # noqa: E402

SAMPLE_DOCUMENTS = [
    ("Q3 travel expenses", "Expense report covering flights and hotels for Q3."),
    ("Office lunch menu", "Tacos on Tuesday, pasta on Thursday."),
    ("Expense policy", "Rules for submitting and approving expense reports."),
    ("Quarterly roadmap", "Product priorities for the next quarter."),
    ("Q2 expense report", "Reimbursements filed in the second quarter."),
]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Rerank a small built-in document set against a query via Groq.",
    )
    parser.add_argument("query", nargs="?", default="quarterly expense reports")
    parser.add_argument("--threshold", type=int, default=None, help="Relevancy threshold (0-10).")
    parser.add_argument("--batch-size", type=int, default=None, help="Candidates per LLM call.")
    parser.add_argument("--model", default=None, help="Override INTENT_MODEL.")
    parser.add_argument("--verbose", action="store_true", help="Log fallbacks and retries.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not get_settings().groq_api_key:
        print("GROQ_API_KEY is not set", file=sys.stderr)
        return 2
    if args.threshold is not None and not 0 <= args.threshold <= 10:
        print("threshold must be between 0 and 10", file=sys.stderr)
        return 2

    reranker: Reranker[tuple[str, str]] = Reranker(
        RerankContext(),
        RerankerExtractors(key=lambda doc: doc[0], summary=lambda doc: doc[1]),
        relevancy_threshold=args.threshold,
        batch_size=args.batch_size,
        model=args.model,
    )
    ranked = asyncio.run(reranker.rerank(args.query, SAMPLE_DOCUMENTS))

    print(f"query: {args.query}")
    for rank, (title, summary) in enumerate(ranked, start=1):
        print(f"{rank:>2}. {title} - {summary}")
    dropped = len(SAMPLE_DOCUMENTS) - len(ranked)
    if dropped:
        print(f"({dropped} candidate(s) at or below the threshold)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
