"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer
import yaml

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_candidates(path: Path, *, key_field: str) -> list[dict[str, Any]]:
    """Load candidate records from a JSON array, JSON Lines or YAML list file."""
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            payload = yaml.safe_load(text)
        elif suffix == ".jsonl":
            payload = [json.loads(line) for line in text.splitlines() if line.strip()]
        else:
            payload = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise typer.BadParameter(f"Could not parse candidates file {path}: {exc}") from exc

    if payload is None:
        return []
    if not isinstance(payload, list):
        raise typer.BadParameter("Candidates file must contain a list of objects")

    records: list[dict[str, Any]] = []
    for position, record in enumerate(payload):
        if not isinstance(record, dict):
            raise typer.BadParameter(f"Candidate #{position} is not an object")
        value = record.get(key_field)
        if not isinstance(value, str) or not value.strip():
            raise typer.BadParameter(
                f"Candidate #{position} has no non-empty string field '{key_field}'"
            )
        records.append(record)
    return records


def field_text(record: dict[str, Any], field: str | None) -> str:
    if not field:
        return ""
    value = record.get(field)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def configure_logging(level: str) -> None:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise typer.BadParameter(f"Unknown log level: {level}")
    logging.basicConfig(level=resolved, format=_LOG_FORMAT)


def emit_json(data: Any) -> None:
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


__all__ = ["configure_logging", "emit_json", "field_text", "load_candidates"]
