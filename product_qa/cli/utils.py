"""Shared utilities for CLI commands."""

import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from product_qa.common.constants import DEFAULT_DATA_FILE, PARSE_ERROR_LOG_LIMIT, RecordDialect
from product_qa.ingestion.models import IngestionReport, QARecord
from product_qa.ingestion.pipeline import IngestionPipeline
from product_qa.ingestion.record_parser import RecordParser
from product_qa.query.query_engine import QueryEngine
from product_qa.repositories.ingestion_state import IngestionState
from product_qa.utils.logger import configure_logging

# Display constants
PREVIEW_LENGTH = 200
DIALECT_CHOICES = [dialect.value for dialect in RecordDialect]


def corpus_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the --data-file and --dialect options shared by every command."""
    func = click.option(
        "--dialect",
        type=click.Choice(DIALECT_CHOICES),
        default=lambda: os.getenv("RECORD_DIALECT", RecordDialect.TOLERANT.value),
        help="Record extraction policy (default: RECORD_DIALECT env var or tolerant)",
    )(func)
    func = click.option(
        "--data-file",
        type=click.Path(path_type=Path),
        default=lambda: os.getenv("DATA_FILE", DEFAULT_DATA_FILE),
        help="Path to the gzip Q&A corpus (default: DATA_FILE env var)",
    )(func)
    return func


def configure_cli_logging() -> None:
    """Send logs to stderr so command output on stdout stays clean."""
    configure_logging(
        log_level=os.getenv("LOG_LEVEL", "WARNING"),
        log_format=os.getenv("LOG_FORMAT", "console"),
        stream=sys.stderr,
    )


def load_corpus(
    data_file: Path,
    dialect: RecordDialect = RecordDialect.TOLERANT,
    show_progress: bool = False,
    error_log_limit: int = PARSE_ERROR_LOG_LIMIT,
) -> tuple[QueryEngine, IngestionReport]:
    """Ingest the corpus in-process and return a query engine over it.

    Args:
        data_file: Path to the gzip corpus
        dialect: Field extraction policy
        show_progress: Display a tqdm progress bar
        error_log_limit: Number of parse failures kept in the report

    Returns:
        Tuple of (QueryEngine, IngestionReport)
    """
    state = IngestionState()
    pipeline = IngestionPipeline(
        state=state,
        parser=RecordParser(dialect=dialect),
        error_log_limit=error_log_limit,
        show_progress=show_progress,
    )
    report = pipeline.run(data_file)
    return QueryEngine(state), report


def truncate(text: str | None, length: int = PREVIEW_LENGTH) -> str:
    """Shorten text for terminal display."""
    if not text:
        return ""
    return text[:length] + "..." if len(text) > length else text


def display_record(position: int, record: QARecord, indent: str = "    ") -> None:
    """Print one Q&A record."""
    click.echo(f"{indent}[{position}] Q: {truncate(record.question)}")
    answer = "(no answer)" if record.answer is None else truncate(record.answer)
    click.echo(f"{indent}    A: {answer}")
    if record.answer_time:
        click.echo(f"{indent}    Answered: {record.answer_time}")
    if record.question_type:
        click.echo(f"{indent}    Type: {record.question_type}")
