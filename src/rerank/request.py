"""Build the strict JSON schema and chat messages for one scoring call."""

from __future__ import annotations

import json
from typing import List, Sequence

from rerank.contracts import ChatMessage, JSONObject, KeyedCandidate, ScoringRequest

SCHEMA_TITLE = "Query / Candidate Relevancy Assessment"
SCHEMA_DESCRIPTION = "Map candidate results for a search query to relevancy scores (0-10)."

RELEVANCY_SYSTEM_PROMPT = """The user will provide a short description of a query they are trying to automate, along with a JSON blob containing candidate_search_results. Each candidate result has a uniquely identifying key and a short summary. Your task is to assess each candidate and return a JSON object that maps candidate keys to integers from 0 to 10: 0 means not relevant at all, and 10 means highly relevant. Sometimes none are relevant, sometimes all are relevant. Be aggressive and decisive on relevancy.

It is okay to return 0 if the candidate is not relevant to the query. It is okay to return 10 if the candidate is highly relevant to the query. Use the full range of scores.

Every key in candidate_search_results must be present in your output mapping. Do not add any keys that are not present in candidate_search_results.
Every key in candidate_search_results must map to an integer from 0 to 10.
Do not, in your generated JSON, include anything other than the `"{key}": {score}` mappings. Do not include any other text, formatting, context, explanation, or punctuation. Only provide your score.

Return a JSON object that matches the enforced JSON schema for response formatting. Use the candidate.key as the property name in the output mapping.

The JSON you return should be of the form: {
    "Key for document 1": 0,
    "Key for document 2": 7,
    ...
}

Pretty-print the JSON for readability."""


def build_relevancy_schema(keys: Sequence[str]) -> JSONObject:
    """One required integer property per key; nothing else allowed."""
    return {
        "title": SCHEMA_TITLE,
        "description": SCHEMA_DESCRIPTION,
        "type": "object",
        "properties": {key: {"type": "integer"} for key in keys},
        "required": list(keys),
        "additionalProperties": False,
    }


def build_messages(query: str, candidates: Sequence[KeyedCandidate]) -> List[ChatMessage]:
    payload = {
        "query": query,
        "candidate_search_results": [
            {"key": candidate.key, "summary": candidate.summary} for candidate in candidates
        ],
    }
    user_prompt = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return [
        ChatMessage(role="system", content=RELEVANCY_SYSTEM_PROMPT),
        ChatMessage(role="user", content=user_prompt),
    ]


def build_request(query: str, candidates: Sequence[KeyedCandidate]) -> ScoringRequest:
    schema = build_relevancy_schema([candidate.key for candidate in candidates])
    return ScoringRequest(schema=schema, messages=build_messages(query, candidates))


__all__ = [
    "RELEVANCY_SYSTEM_PROMPT",
    "build_messages",
    "build_relevancy_schema",
    "build_request",
]
