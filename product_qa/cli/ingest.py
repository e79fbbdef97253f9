"""CLI command for loading the Q&A corpus and reporting ingestion statistics."""

import json
from pathlib import Path

import click
from dotenv import load_dotenv

from product_qa.cli.utils import configure_cli_logging, corpus_options, load_corpus
from product_qa.common.constants import RecordDialect
from product_qa.ingestion.models import IngestionReport, IngestionStatus

# Load environment variables from .env file
load_dotenv()


def _display_summary(report: IngestionReport) -> None:
    """Display ingestion summary."""
    click.echo()
    click.echo("=" * 80)
    if report.status is IngestionStatus.COMPLETED:
        click.echo("Ingestion Complete!")
    elif report.status is IngestionStatus.TRUNCATED:
        click.echo("Ingestion Truncated (corrupt stream)")
    else:
        click.echo("Ingestion Skipped")
    click.echo("=" * 80)
    click.echo(f"  Source: {report.source}")
    click.echo(f"  Lines Read: {report.lines_read:,}")
    click.echo(f"  Blank Lines: {report.blank_lines:,}")
    click.echo(f"  Records Indexed: {report.records_indexed:,}")
    click.echo(f"  Products: {report.product_count:,}")
    click.echo(f"  Records Skipped: {report.records_skipped:,}")
    click.echo(f"  Invalid Lines: {report.parse_errors:,}")
    click.echo(f"  Parsed as JSON: {report.json_lines:,}")
    click.echo(f"  Parsed as Python Literal: {report.literal_lines:,}")
    click.echo(f"  Duration: {report.duration_seconds:.2f}s")

    if report.error:
        click.echo(f"  Error: {report.error}")

    if report.failures:
        click.echo()
        click.echo(f"First {len(report.failures)} invalid lines:")
        for failure in report.failures:
            click.echo(f"  Line {failure.line_number}: {failure.reason}")
            click.echo(f"    {failure.excerpt}...")
    click.echo()


@click.command()
@corpus_options
@click.option("--progress", is_flag=True, help="Show a progress bar while reading")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
def ingest(data_file: Path, dialect: str, progress: bool, as_json: bool) -> None:
    """Load a Q&A corpus and report what was indexed.

    Examples:

        \b
        # Load the corpus named by DATA_FILE
        qa-ingest

        \b
        # Load a specific file with a progress bar
        qa-ingest --data-file data/qa_Appliances.json.gz --progress
    """
    configure_cli_logging()

    if not as_json:
        click.echo("=" * 80)
        click.echo("Product Q&A - Corpus Ingestion")
        click.echo("=" * 80)
        click.echo(f"Data File: {data_file}")
        click.echo(f"Dialect: {dialect}")

    try:
        _, report = load_corpus(
            data_file,
            dialect=RecordDialect(dialect),
            show_progress=progress and not as_json,
        )
    except KeyboardInterrupt:
        click.echo()
        click.echo("  Ingestion interrupted by user", err=True)
        raise click.Abort() from None

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _display_summary(report)

    if report.status is IngestionStatus.SKIPPED:
        raise SystemExit(1)


if __name__ == "__main__":
    ingest()
