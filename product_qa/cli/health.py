"""CLI command for index health check."""

import json
from pathlib import Path

import click
from dotenv import load_dotenv

from product_qa.cli.utils import configure_cli_logging, corpus_options, load_corpus
from product_qa.common.constants import RecordDialect

load_dotenv()


@click.command()
@corpus_options
@click.option("--json", "as_json", is_flag=True, help="Print the status as JSON")
def health(data_file: Path, dialect: str, as_json: bool) -> None:
    """Load the corpus and report whether the index is ready."""
    configure_cli_logging()
    engine, report = load_corpus(data_file, dialect=RecordDialect(dialect))
    status = engine.health()

    if as_json:
        click.echo(json.dumps(status.to_dict()))
    else:
        click.echo("=" * 80)
        click.echo("Product Q&A - Index Health Check")
        click.echo("=" * 80)
        click.echo(f"  Data File: {data_file}")
        click.echo(f"  Status: {'READY' if status.ready else 'NOT READY'}")
        click.echo(f"  Products: {status.product_count:,}")
        click.echo(f"  Ingestion: {report.status.value}")
        if report.error:
            click.echo(f"  Error: {report.error}")
        click.echo()

    if not status.ready:
        raise SystemExit(1)


if __name__ == "__main__":
    health()
