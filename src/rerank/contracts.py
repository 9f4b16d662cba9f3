"""Shared contracts for the LLM reranker.

The scoring backend is pluggable: anything with an async ``call`` method that
accepts chat messages plus a JSON schema and returns a ``StructuredResponse``
can drive the reranker. Its output is never trusted; the reranker validates
every score it reads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Literal, Optional, Protocol, TypeVar, Union

T = TypeVar("T")

ChatRole = Literal["system", "user", "assistant", "tool"]
JSONObject = Dict[str, Any]
LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


@dataclass(frozen=True)
class ChatMessage:
    role: ChatRole
    content: str


@dataclass(frozen=True)
class LlmCallConfig:
    model: Optional[str] = None
    temperature: Optional[float] = None
    timeout_ms: Optional[int] = None


@dataclass(frozen=True)
class StructuredResponse:
    """Parsed model output. ``data`` is expected to map candidate keys to scores."""

    data: Any


@dataclass(frozen=True)
class ScoringRequest:
    schema: JSONObject
    messages: List[ChatMessage]


class ScoringClient(Protocol):
    """Structured-output LLM client used to score one batch of candidates."""

    async def call(
        self,
        messages: List[ChatMessage],
        schema: JSONObject,
        config: Optional[LlmCallConfig] = None,
        user_id: Optional[str] = None,
    ) -> StructuredResponse: ...


@dataclass(frozen=True)
class RerankContext:
    """Per-instance collaborators.

    ``llm`` may be omitted when ``GROQ_API_KEY`` is configured; ``user_id`` is
    forwarded to the provider for abuse monitoring.
    """

    llm: Optional[ScoringClient] = None
    logger: Optional[LoggerLike] = None
    user_id: Optional[str] = None


@dataclass(frozen=True)
class RerankerExtractors(Generic[T]):
    """Derive a short human-readable key and an optional summary from an item."""

    key: Callable[[T], str]
    summary: Optional[Callable[[T], str]] = None


@dataclass(frozen=True)
class PreparedCandidate(Generic[T]):
    item: T
    index: int
    base_key: str
    summary: str = ""


@dataclass(frozen=True)
class KeyedCandidate(Generic[T]):
    item: T
    index: int
    key: str
    summary: str = ""


@dataclass(frozen=True)
class ScoredCandidate(Generic[T]):
    item: T
    index: int
    score: float = field(default=0.0)


__all__ = [
    "ChatMessage",
    "ChatRole",
    "JSONObject",
    "KeyedCandidate",
    "LlmCallConfig",
    "LoggerLike",
    "PreparedCandidate",
    "RerankContext",
    "RerankerExtractors",
    "ScoredCandidate",
    "ScoringClient",
    "ScoringRequest",
    "StructuredResponse",
]
