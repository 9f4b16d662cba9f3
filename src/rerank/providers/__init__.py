"""Scoring client selection."""

from __future__ import annotations

from typing import Optional

from core.config import Settings, get_settings
from rerank.contracts import RerankContext, ScoringClient
from rerank.providers.groq import GroqScoringClient


def select_scoring_client(
    ctx: RerankContext,
    settings: Settings | None = None,
) -> Optional[ScoringClient]:
    """Return ``ctx.llm`` if given, else a Groq client when ``GROQ_API_KEY`` is set."""
    if ctx.llm is not None:
        return ctx.llm
    resolved = settings or get_settings()
    if resolved.groq_api_key:
        return GroqScoringClient(resolved.groq_api_key, settings=resolved)
    return None


__all__ = ["GroqScoringClient", "select_scoring_client"]
