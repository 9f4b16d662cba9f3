"""LLM listwise reranking engine."""

from rerank.contracts import (
    ChatMessage,
    LlmCallConfig,
    RerankContext,
    RerankerExtractors,
    ScoringClient,
    StructuredResponse,
)
from rerank.reranker import Reranker, RerankerConfig

__all__ = [
    "ChatMessage",
    "LlmCallConfig",
    "RerankContext",
    "Reranker",
    "RerankerConfig",
    "RerankerExtractors",
    "ScoringClient",
    "StructuredResponse",
]
