"""Reranker errors.

Configuration problems surface at construction time; scoring problems are
raised by clients and recovered by the reranker, never by the caller.
"""

from __future__ import annotations


class RerankError(Exception):
    """Base class for reranker errors."""


class ScoringClientUnavailableError(RerankError, RuntimeError):
    """No scoring client was provided and none could be built from settings."""


class ScoringResponseError(RerankError, ValueError):
    """The provider answered but the payload could not be used."""


class UnsupportedMessageRoleError(RerankError, ValueError):
    """A chat message role the provider adapter does not forward."""


__all__ = [
    "RerankError",
    "ScoringClientUnavailableError",
    "ScoringResponseError",
    "UnsupportedMessageRoleError",
]
