"""Ingestion pipeline: gzip corpus to a published, read-only product index."""

import time
from collections.abc import Iterator
from pathlib import Path

import structlog
from tqdm import tqdm

from product_qa.common.constants import PARSE_ERROR_LOG_LIMIT, PROGRESS_LOG_INTERVAL
from product_qa.ingestion.decompression import iter_decompressed, open_source
from product_qa.ingestion.line_reader import iter_lines
from product_qa.ingestion.models import IngestionReport, IngestionStatus, RecordParseFailure
from product_qa.ingestion.record_parser import RecordParser
from product_qa.repositories.ingestion_state import IngestionState
from product_qa.repositories.product_index import IndexBuilder
from product_qa.utils.exceptions import CorruptStreamError, SourceUnreadableError

logger = structlog.get_logger(__name__)


class IngestionPipeline:
    """Single forward pass over a compressed Q&A corpus.

    Stages:
    1. Open and decompress the gzip source
    2. Split the byte stream into trimmed, non-blank lines
    3. Parse each line (JSON fast path, Python-literal fallback)
    4. Group records by product ID in an IndexBuilder
    5. Publish the frozen index and flip the ready flag

    Failures are absorbed here: a bad line only bumps a counter, a corrupt
    stream truncates the run but still publishes what was read, and an
    unreadable source leaves the state unpublished. run() does not raise for
    any of these.
    """

    def __init__(
        self,
        state: IngestionState,
        parser: RecordParser | None = None,
        error_log_limit: int = PARSE_ERROR_LOG_LIMIT,
        show_progress: bool = False,
    ) -> None:
        """Initialize pipeline components.

        Args:
            state: Shared state the finished index is published to
            parser: Record parser (defaults to the tolerant dialect)
            error_log_limit: Number of parse failures logged and kept in the report
            show_progress: Display a tqdm progress bar while reading lines
        """
        self.state = state
        self.parser = parser or RecordParser()
        self.error_log_limit = error_log_limit
        self.show_progress = show_progress
        self.logger = logger.bind(component="ingestion_pipeline")

    def run(self, source_path: str | Path) -> IngestionReport:
        """Ingest the corpus at source_path and publish the index.

        Args:
            source_path: Path to the gzip-compressed corpus

        Returns:
            IngestionReport describing the run; status is SKIPPED when the
            source could not be opened (nothing is published in that case)
        """
        report = IngestionReport(source=str(source_path), start_time=time.time())
        builder = IndexBuilder()

        self.logger.info(
            "ingestion_started",
            source=str(source_path),
            dialect=self.parser.dialect.value,
        )

        try:
            fileobj = open_source(source_path)
        except SourceUnreadableError as e:
            report.status = IngestionStatus.SKIPPED
            report.error = e.message
            self._finish(report)
            self.logger.error("source_unreadable", source=str(source_path), error=e.message)
            return report

        json_start, literal_start = self.parser.json_hits, self.parser.literal_hits
        with fileobj:
            try:
                self._consume(iter_decompressed(fileobj), builder, report)
            except CorruptStreamError as e:
                report.status = IngestionStatus.TRUNCATED
                report.error = e.message
                self.logger.error(
                    "corrupt_stream",
                    source=str(source_path),
                    error=e.message,
                    lines_read=report.lines_read,
                    records_indexed=builder.record_count,
                )

        report.json_lines = self.parser.json_hits - json_start
        report.literal_lines = self.parser.literal_hits - literal_start

        index = builder.publish()
        report.product_count = index.product_count
        self._finish(report)
        self.state.publish(index, report)

        self.logger.info(
            "ingestion_completed",
            status=report.status.value,
            records_indexed=report.records_indexed,
            product_count=report.product_count,
            records_skipped=report.records_skipped,
            parse_errors=report.parse_errors,
            blank_lines=report.blank_lines,
            json_lines=report.json_lines,
            literal_lines=report.literal_lines,
            duration_seconds=round(report.duration_seconds, 3),
        )
        if report.parse_errors:
            self.logger.warning("invalid_records_skipped", parse_errors=report.parse_errors)

        return report

    def _consume(
        self, chunks: Iterator[bytes], builder: IndexBuilder, report: IngestionReport
    ) -> None:
        """Drain the line sequence into the builder, updating the report as it goes."""

        def count_blank(line_number: int) -> None:
            report.blank_lines += 1
            report.lines_read = line_number

        with tqdm(
            desc="Reading Q&A records",
            unit="line",
            disable=not self.show_progress,
        ) as pbar:
            for line_number, line in iter_lines(chunks, on_blank=count_blank):
                report.lines_read = line_number
                pbar.update(1)

                outcome = self.parser.parse_line(line, line_number)
                if outcome.record is not None:
                    builder.add(outcome.record)
                    report.records_indexed += 1
                    self.state.update_progress(builder.record_count, builder.product_count)
                elif outcome.failure is not None:
                    self._record_failure(outcome.failure, report)
                else:
                    report.records_skipped += 1
                    self.logger.debug(
                        "record_skipped",
                        line_number=line_number,
                        reason=outcome.skipped_reason,
                    )

                if line_number % PROGRESS_LOG_INTERVAL == 0:
                    self.logger.info(
                        "ingestion_progress",
                        lines_read=line_number,
                        records_indexed=report.records_indexed,
                        product_count=builder.product_count,
                        parse_errors=report.parse_errors,
                    )

    def _record_failure(self, failure: RecordParseFailure, report: IngestionReport) -> None:
        report.parse_errors += 1
        if report.parse_errors > self.error_log_limit:
            return

        report.failures.append(failure)
        self.logger.warning(
            "record_parse_failed",
            line_number=failure.line_number,
            reason=failure.reason,
            excerpt=failure.excerpt,
        )

    @staticmethod
    def _finish(report: IngestionReport) -> None:
        report.end_time = time.time()
        report.duration_seconds = report.end_time - report.start_time
