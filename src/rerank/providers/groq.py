"""Default scoring client: Groq chat completions through LangChain.

The request enforces the relevancy schema with Groq's strict ``json_schema``
response format. Groq occasionally rejects its own output against the schema
(error code ``json_validate_failed``); those calls are retried, everything else
propagates to the reranker, which falls back to the original order.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, List, Optional, Sequence

from core.config import Settings, get_settings
from rerank.contracts import ChatMessage, JSONObject, LlmCallConfig, StructuredResponse
from rerank.errors import ScoringResponseError, UnsupportedMessageRoleError

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

logger = logging.getLogger(__name__)

GROQ_PROVIDER = "groq"
RESPONSE_SCHEMA_NAME = "intent_relevancy"
SCHEMA_VALIDATION_FAILED = "json_validate_failed"
DEFAULT_MAX_ATTEMPTS = 3


class GroqScoringClient:
    """``ScoringClient`` backed by ``langchain-groq``."""

    name = "groq"

    def __init__(
        self,
        api_key: str,
        *,
        settings: Settings | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if not api_key:
            raise ValueError("api_key must be a non-empty string")
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._api_key = api_key
        self._settings = settings or get_settings()
        self._max_attempts = max_attempts

    async def call(
        self,
        messages: List[ChatMessage],
        schema: JSONObject,
        config: Optional[LlmCallConfig] = None,
        user_id: Optional[str] = None,
    ) -> StructuredResponse:
        chat_messages = to_langchain_messages(messages)
        chat_model = self._init_chat_model(config)
        bound = chat_model.bind(**build_request_kwargs(schema, user_id))

        attempt = 0
        while True:
            attempt += 1
            try:
                raw = await bound.ainvoke(chat_messages)
                return parse_structured_content(response_content(raw))
            except Exception as exc:
                if attempt >= self._max_attempts or not is_schema_validation_failure(exc):
                    raise
                logger.debug(
                    "Groq response failed schema validation (attempt %d/%d), retrying",
                    attempt,
                    self._max_attempts,
                )

    def _init_chat_model(self, config: Optional[LlmCallConfig]) -> Any:
        from langchain.chat_models import init_chat_model

        model = (config.model if config else None) or self._settings.groq_default_model
        temperature = config.temperature if config and config.temperature is not None else None
        if temperature is None:
            temperature = self._settings.groq_default_temperature

        kwargs: dict[str, Any] = {
            "model_provider": GROQ_PROVIDER,
            "api_key": self._api_key,
            "temperature": temperature,
            "max_retries": self._settings.groq_max_retries,
        }
        if config is not None and config.timeout_ms is not None:
            kwargs["timeout"] = config.timeout_ms / 1000.0

        return init_chat_model(model, **kwargs)


def build_request_kwargs(schema: JSONObject, user_id: Optional[str]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "response_format": {
            "type": "json_schema",
            "json_schema": {
                "name": RESPONSE_SCHEMA_NAME,
                "schema": schema,
                "strict": True,
            },
        }
    }
    if user_id:
        kwargs["user"] = user_id
    return kwargs


def to_langchain_messages(messages: Sequence[ChatMessage]) -> "list[BaseMessage]":
    from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

    converted: "list[BaseMessage]" = []
    for message in messages:
        if message.role == "system":
            converted.append(SystemMessage(content=message.content))
        elif message.role == "user":
            converted.append(HumanMessage(content=message.content))
        elif message.role == "assistant":
            converted.append(AIMessage(content=message.content))
        else:
            raise UnsupportedMessageRoleError(
                f"intent: '{message.role}' role messages are not supported in provider calls"
            )
    return converted


def response_content(raw: object) -> str:
    content = getattr(raw, "content", None)
    if not isinstance(content, str):
        raise ScoringResponseError("Groq did not return content")
    return content


def parse_structured_content(content: str) -> StructuredResponse:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ScoringResponseError("Groq returned invalid JSON") from exc
    return StructuredResponse(data=data)


def is_schema_validation_failure(exc: BaseException) -> bool:
    return _error_code(exc) == SCHEMA_VALIDATION_FAILED


def _error_code(exc: BaseException) -> str | None:
    code = getattr(exc, "code", None)
    if isinstance(code, str):
        return code
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        nested = body.get("error")
        if isinstance(nested, dict) and isinstance(nested.get("code"), str):
            return nested["code"]
        if isinstance(body.get("code"), str):
            return body["code"]
    return None


__all__ = [
    "GroqScoringClient",
    "build_request_kwargs",
    "is_schema_validation_failure",
    "parse_structured_content",
    "response_content",
    "to_langchain_messages",
]
