"""Typer CLI entrypoint for the intent reranker."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import typer

from intent import __version__

app = typer.Typer(
    help="Rerank candidate search results against a query with an LLM.",
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    add_completion=False,
)


def _register_subcommands() -> None:
    from cli.commands import config as config_commands

    app.add_typer(config_commands.app, name="config")


_register_subcommands()


@app.callback()
def root(
    ctx: typer.Context,
    version_flag: bool = typer.Option(
        False,
        "-v",
        "--version",
        help="Print the version and exit",
    ),
) -> None:
    if version_flag:
        typer.echo(__version__)
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command(help="Rerank the candidates in a JSON/JSONL/YAML file against QUERY")
def run(
    query: str = typer.Argument(..., metavar="QUERY"),
    candidates_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        metavar="CANDIDATES_FILE",
    ),
    key_field: str = typer.Option("key", "--key-field", help="Record field used as the candidate key"),
    summary_field: str | None = typer.Option(
        "summary",
        "--summary-field",
        help="Record field used as the candidate summary (empty to disable)",
    ),
    threshold: float | None = typer.Option(
        None, "--threshold", help="Keep candidates scoring strictly above this (0-10)"
    ),
    batch_size: int | None = typer.Option(None, "--batch-size", help="Candidates per LLM call"),
    tiny_batch_fraction: float | None = typer.Option(
        None,
        "--tiny-batch-fraction",
        help="Merge a trailing batch no larger than this fraction of --batch-size",
    ),
    model: str | None = typer.Option(None, "--model", help="Model name passed to the provider"),
    timeout_ms: int | None = typer.Option(None, "--timeout-ms", help="Per-call timeout (ms)"),
    user_id: str | None = typer.Option(None, "--user-id", help="User id for provider abuse monitoring"),
    json_out: bool = typer.Option(False, "--json", help="Output JSON"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
) -> None:
    from cli.common import configure_logging, emit_json, field_text, load_candidates
    from rerank.contracts import RerankContext, RerankerExtractors
    from rerank.errors import ScoringClientUnavailableError
    from rerank.reranker import Reranker

    configure_logging(log_level)
    records = load_candidates(candidates_file, key_field=key_field)

    extractors: RerankerExtractors[dict[str, Any]] = RerankerExtractors(
        key=lambda record: field_text(record, key_field),
        summary=(lambda record: field_text(record, summary_field)) if summary_field else None,
    )
    try:
        reranker = Reranker(
            RerankContext(user_id=user_id),
            extractors,
            relevancy_threshold=threshold,
            batch_size=batch_size,
            tiny_batch_fraction=tiny_batch_fraction,
            model=model,
            timeout_ms=timeout_ms,
        )
    except (ValueError, ScoringClientUnavailableError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    ranked = asyncio.run(reranker.rerank(query, records))

    if json_out:
        emit_json(ranked)
        return
    _print_ranked(ranked, key_field=key_field, summary_field=summary_field)


def _print_ranked(
    ranked: list[dict[str, Any]],
    *,
    key_field: str,
    summary_field: str | None,
) -> None:
    from rich.console import Console
    from rich.table import Table

    from cli.common import field_text

    table = Table(title=f"{len(ranked)} candidate(s)")
    table.add_column("#", justify="right")
    table.add_column("Key")
    table.add_column("Summary")
    for rank, record in enumerate(ranked, start=1):
        summary = field_text(record, summary_field)
        if len(summary) > 120:
            summary = summary[:117] + "..."
        table.add_row(str(rank), field_text(record, key_field), summary)
    Console().print(table)


def main() -> None:
    app()


__all__ = ["app", "main"]
