"""CLI command for looking up all Q&A records of one product."""

import json
from pathlib import Path

import click
from dotenv import load_dotenv

from product_qa.cli.utils import configure_cli_logging, corpus_options, display_record, load_corpus
from product_qa.common.constants import RecordDialect
from product_qa.query.query_engine import LookupResult
from product_qa.utils.exceptions import NotReadyYetError, ProductNotFoundError

load_dotenv()


def _display_lookup(result: LookupResult) -> None:
    click.echo("=" * 80)
    click.echo(f"Product: {result.product_id}")
    click.echo(f"Total Q&As: {result.count}")
    click.echo("=" * 80)
    for position, record in enumerate(result.records, start=1):
        display_record(position, record, indent="")
        click.echo()


@click.command()
@click.argument("product_id", type=str)
@corpus_options
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def lookup(product_id: str, data_file: Path, dialect: str, as_json: bool) -> None:
    """Show every question and answer recorded for PRODUCT_ID.

    PRODUCT_ID is matched exactly and case-sensitively.

    Examples:
        qa-lookup B00004U9JP

        qa-lookup B00004U9JP --json
    """
    configure_cli_logging()
    engine, _ = load_corpus(data_file, dialect=RecordDialect(dialect))

    try:
        result = engine.lookup(product_id)
    except NotReadyYetError as e:
        click.echo(f"Index not available: {e.message}", err=True)
        raise SystemExit(1) from None
    except ProductNotFoundError as e:
        if as_json:
            click.echo(json.dumps({"error": "Product not found", "productId": e.product_id}))
        else:
            click.echo(f"Product not found: {e.product_id}")
        raise SystemExit(1) from None

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _display_lookup(result)


if __name__ == "__main__":
    lookup()
