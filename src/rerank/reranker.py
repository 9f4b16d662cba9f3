"""Listwise LLM reranker for arbitrary items.

Each batch of candidates is scored 0-10 by the model in one call, filtered by
the relevancy threshold and sorted best-first with ties kept in input order.
Scoring failures degrade ordering, never data: a failed batch keeps its
original order and an unexpected error returns the whole input unchanged.

Example::

    reranker = Reranker(
        RerankContext(llm=my_client, user_id="user-123"),
        RerankerExtractors(key=lambda doc: doc.title, summary=lambda doc: doc.content[:200]),
        relevancy_threshold=5,
        batch_size=20,
    )
    ranked = await reranker.rerank("find expense reports", documents)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields, replace
from numbers import Real
from typing import Any, Generic, List, Mapping, Optional, Sequence, TypeVar

from core.config import Settings, get_settings
from rerank.batches import batch_process
from rerank.contracts import (
    LlmCallConfig,
    LoggerLike,
    PreparedCandidate,
    RerankContext,
    RerankerExtractors,
    ScoringRequest,
)
from rerank.errors import ScoringClientUnavailableError
from rerank.keys import ensure_unique_keys
from rerank.providers import select_scoring_client
from rerank.ranking import MAX_SCORE, MIN_SCORE, rank_and_filter
from rerank.request import build_request

T = TypeVar("T")

logger = logging.getLogger(__name__)

SCORING_TEMPERATURE = 0.0


@dataclass(frozen=True)
class RerankerConfig:
    model: str
    timeout_ms: int
    relevancy_threshold: float
    batch_size: int
    tiny_batch_fraction: float

    @classmethod
    def from_settings(cls, settings: Settings) -> "RerankerConfig":
        return cls(
            model=settings.intent_model,
            timeout_ms=settings.intent_timeout_ms,
            relevancy_threshold=settings.intent_relevancy_threshold,
            batch_size=settings.intent_batch_size,
            tiny_batch_fraction=settings.intent_tiny_batch_fraction,
        )

    def with_overrides(self, overrides: Mapping[str, Any]) -> "RerankerConfig":
        allowed = {item.name for item in fields(self)}
        unknown = sorted(set(overrides) - allowed)
        if unknown:
            raise ValueError(f"intent: unknown reranker option(s): {', '.join(unknown)}")
        updates = {name: value for name, value in overrides.items() if value is not None}
        return replace(self, **updates)

    def validate(self) -> None:
        threshold = self.relevancy_threshold
        if (
            isinstance(threshold, bool)
            or not isinstance(threshold, Real)
            or math.isnan(threshold)
            or threshold < MIN_SCORE
            or threshold > MAX_SCORE
        ):
            raise ValueError(
                f"intent: relevancy_threshold must be between 0 and 10, got {threshold}"
            )
        if isinstance(self.batch_size, bool) or not isinstance(self.batch_size, int):
            raise ValueError(f"intent: batch_size must be an integer, got {self.batch_size!r}")
        if self.batch_size < 1:
            raise ValueError(f"intent: batch_size must be >= 1, got {self.batch_size}")
        fraction = self.tiny_batch_fraction
        if not isinstance(fraction, Real) or not 0 <= fraction <= 1:
            raise ValueError(
                f"intent: tiny_batch_fraction must be between 0 and 1, got {fraction}"
            )
        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int):
            raise ValueError(f"intent: timeout_ms must be an integer, got {self.timeout_ms!r}")
        if self.timeout_ms < 1:
            raise ValueError(f"intent: timeout_ms must be >= 1, got {self.timeout_ms}")


class Reranker(Generic[T]):
    """Score, filter and order candidates against a query with an LLM."""

    def __init__(
        self,
        ctx: RerankContext,
        extractors: RerankerExtractors[T],
        *,
        settings: Settings | None = None,
        **overrides: Any,
    ) -> None:
        resolved = settings or get_settings()
        config = RerankerConfig.from_settings(resolved).with_overrides(overrides)
        config.validate()

        client = select_scoring_client(ctx, resolved)
        if client is None:
            raise ScoringClientUnavailableError(
                "intent: No LLM client provided and GROQ_API_KEY not set. "
                "Provide ctx.llm or set GROQ_API_KEY."
            )

        self.config = config
        self._ctx = ctx
        self._extractors = extractors
        self._llm = client
        self._logger: LoggerLike = ctx.logger or logger

    async def rerank(
        self,
        query: str,
        candidates: Sequence[T],
        *,
        user_id: Optional[str] = None,
    ) -> List[T]:
        """Return candidates scoring above the threshold, best first.

        Never raises on scoring problems: a failed batch keeps its original
        order and any other error returns ``candidates`` unchanged. ``user_id``
        overrides the context's user id for this call.
        """
        items = list(candidates)
        try:
            if not items:
                return []
            if len(items) == 1:
                return items

            prepared = self._prepare_candidates(items)
            return await batch_process(
                prepared,
                self.config.batch_size,
                self.config.tiny_batch_fraction,
                lambda batch: self._process_batch(query, batch, user_id),
                logger=self._logger,
                on_error=lambda batch, _exc: [candidate.item for candidate in batch],
            )
        except Exception as exc:
            self._logger.warning(
                "intent reranker failed, using fallback: %s",
                exc,
                extra={"error": str(exc)},
            )
            return items

    def _prepare_candidates(self, items: Sequence[T]) -> List[PreparedCandidate[T]]:
        summary_of = self._extractors.summary
        return [
            PreparedCandidate(
                item=item,
                index=index,
                base_key=self._extractors.key(item),
                summary=summary_of(item) if summary_of is not None else "",
            )
            for index, item in enumerate(items)
        ]

    async def _process_batch(
        self,
        query: str,
        batch: List[PreparedCandidate[T]],
        user_id: Optional[str],
    ) -> List[T]:
        keyed = ensure_unique_keys(batch)
        request = build_request(query, keyed)
        scores = await self._fetch_scores(request, user_id)
        if scores is None:
            return [candidate.item for candidate in keyed]
        return rank_and_filter(keyed, scores, self.config.relevancy_threshold)

    async def _fetch_scores(
        self,
        request: ScoringRequest,
        user_id: Optional[str],
    ) -> Mapping[str, object] | None:
        response = await self._llm.call(
            request.messages,
            request.schema,
            LlmCallConfig(
                model=self.config.model,
                temperature=SCORING_TEMPERATURE,
                timeout_ms=self.config.timeout_ms,
            ),
            user_id or self._ctx.user_id,
        )
        data = _response_data(response)
        if not isinstance(data, Mapping):
            self._logger.debug("scoring client returned no usable payload; keeping batch order")
            return None
        return data


def _response_data(response: object) -> object:
    if isinstance(response, Mapping):
        return response.get("data")
    return getattr(response, "data", None)


__all__ = ["Reranker", "RerankerConfig"]
