"""Data models for Q&A corpus ingestion."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class QARecord:
    """A normalized question/answer record for one product.

    Attributes:
        product_id: Product identifier (ASIN), case-sensitive
        question: Question text ("" if absent)
        answer: Answer text; None when the source has no answer, "" is a real empty answer
        answer_time: Free-form display timestamp ("" if absent)
        unix_time: Epoch seconds, None when the source lacks the field
        question_type: Question type label ("" if absent)
        answer_type: Answer type label ("" if absent)
    """

    product_id: str
    question: str = ""
    answer: str | None = None
    answer_time: str = ""
    unix_time: int | None = None
    question_type: str = ""
    answer_type: str = ""

    def __post_init__(self) -> None:
        """Validate record data after initialization.

        Raises:
            ValueError: If the product identifier is empty
        """
        if not self.product_id or not self.product_id.strip():
            raise ValueError("Product ID cannot be empty")

    def to_dict(self) -> dict[str, Any]:
        """Convert record to the JSON shape served by the query API."""
        return {
            "question": self.question,
            "answer": self.answer,
            "answerTime": self.answer_time,
            "unixTime": self.unix_time,
            "questionType": self.question_type,
            "answerType": self.answer_type,
        }


@dataclass(frozen=True)
class RecordParseFailure:
    """Diagnostic for a line that failed both parse stages.

    Attributes:
        line_number: 1-based physical line number in the decompressed stream
        reason: Why the line could not be parsed
        excerpt: Leading characters of the trimmed line
    """

    line_number: int
    reason: str
    excerpt: str

    def to_dict(self) -> dict[str, Any]:
        return {"line_number": self.line_number, "reason": self.reason, "excerpt": self.excerpt}


class IngestionStatus(str, Enum):
    """Terminal state of an ingestion run."""

    COMPLETED = "completed"
    TRUNCATED = "truncated"
    SKIPPED = "skipped"


@dataclass
class IngestionReport:
    """Statistics and diagnostics for one ingestion run.

    Attributes:
        source: Path of the corpus file
        status: How the run ended
        lines_read: Physical lines consumed, blank ones included
        blank_lines: Lines skipped because they were empty after trimming
        records_indexed: Records added to the index
        records_skipped: Lines that parsed but were not viable records
        parse_errors: Lines that failed both parse stages
        json_lines: Lines decoded by the strict JSON stage
        literal_lines: Lines decoded by the Python-literal fallback
        product_count: Distinct product identifiers in the index
        failures: First few parse failures kept for inspection
        error: Message of the source or stream error that ended the run early
        start_time: Start time as unix timestamp
        end_time: End time as unix timestamp
        duration_seconds: Total processing duration
    """

    source: str = ""
    status: IngestionStatus = IngestionStatus.COMPLETED
    lines_read: int = 0
    blank_lines: int = 0
    records_indexed: int = 0
    records_skipped: int = 0
    parse_errors: int = 0
    json_lines: int = 0
    literal_lines: int = 0
    product_count: int = 0
    failures: list[RecordParseFailure] = field(default_factory=list)
    error: str | None = None
    start_time: float = 0.0
    end_time: float = 0.0
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary for JSON serialization."""
        return {
            "source": self.source,
            "status": self.status.value,
            "lines_read": self.lines_read,
            "blank_lines": self.blank_lines,
            "records_indexed": self.records_indexed,
            "records_skipped": self.records_skipped,
            "parse_errors": self.parse_errors,
            "json_lines": self.json_lines,
            "literal_lines": self.literal_lines,
            "product_count": self.product_count,
            "failures": [failure.to_dict() for failure in self.failures],
            "error": self.error,
            "duration_seconds": round(self.duration_seconds, 3),
            "start_time": time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(self.start_time)),
            "end_time": time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(self.end_time)),
        }
