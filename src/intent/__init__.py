"""Public API for the intent listwise LLM reranker."""

from importlib.metadata import PackageNotFoundError, version as pkg_version

from core.config import Settings, get_settings
from rerank.contracts import (
    ChatMessage,
    LlmCallConfig,
    RerankContext,
    RerankerExtractors,
    ScoringClient,
    StructuredResponse,
)
from rerank.providers.groq import GroqScoringClient
from rerank.reranker import Reranker, RerankerConfig

try:
    __version__ = pkg_version("intent-rerank")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "ChatMessage",
    "GroqScoringClient",
    "LlmCallConfig",
    "RerankContext",
    "Reranker",
    "RerankerConfig",
    "RerankerExtractors",
    "ScoringClient",
    "Settings",
    "StructuredResponse",
    "__version__",
    "get_settings",
]
