"""CLI command for substring search over product identifiers."""

import json
import os
from pathlib import Path

import click
from dotenv import load_dotenv

from product_qa.cli.utils import configure_cli_logging, corpus_options, display_record, load_corpus
from product_qa.common.constants import DEFAULT_SEARCH_LIMIT, RecordDialect
from product_qa.query.query_engine import SearchResult
from product_qa.utils.exceptions import NotReadyYetError, ValidationError

load_dotenv()


def _display_results(result: SearchResult) -> None:
    """Display search matches with their record previews."""
    click.echo("=" * 80)
    click.echo("PRODUCT SEARCH RESULTS")
    click.echo("=" * 80)
    click.echo(f"Query: {result.query}")
    click.echo(f"Results: {result.total_found} products")
    click.echo("=" * 80)
    click.echo()

    if not result.matches:
        click.echo("No results found.")
        return

    for i, match in enumerate(result.matches, start=1):
        click.echo(f"[{i}] {match.product_id} ({match.count} Q&As)")
        for position, record in enumerate(match.preview, start=1):
            display_record(position, record)
        click.echo()


@click.command()
@click.argument("query_text", type=str)
@click.option(
    "--limit",
    "-k",
    type=int,
    # click converts the env string, so a bad value is reported as a bad --limit
    default=lambda: os.getenv("SEARCH_DEFAULT_LIMIT") or str(DEFAULT_SEARCH_LIMIT),
    help="Maximum number of products to return (default: SEARCH_DEFAULT_LIMIT env var or 10)",
)
@corpus_options
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def search(query_text: str, limit: int, data_file: Path, dialect: str, as_json: bool) -> None:
    """Find products whose identifier contains QUERY_TEXT (case-insensitive).

    The scan stops after --limit matches, so the reported total is the number
    of products returned rather than every match in the corpus.

    Examples:
        qa-search b0000

        qa-search B00004 --limit 3
    """
    configure_cli_logging()
    engine, _ = load_corpus(data_file, dialect=RecordDialect(dialect))

    try:
        result = engine.search(query_text, limit=limit)
    except NotReadyYetError as e:
        click.echo(f"Index not available: {e.message}", err=True)
        raise SystemExit(1) from None
    except ValidationError as e:
        raise click.BadParameter(e.message, param_hint="--limit") from None

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _display_results(result)


if __name__ == "__main__":
    search()
