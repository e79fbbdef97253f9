"""Parse corpus lines into normalized QARecord objects."""

import json
import math
from dataclasses import dataclass
from typing import Any

from product_qa.common.constants import (
    EXCERPT_LENGTH,
    JSON_ID_FIELDS,
    TOLERANT_ID_FIELDS,
    RecordDialect,
)
from product_qa.ingestion.literal_parser import parse_literal
from product_qa.ingestion.models import QARecord, RecordParseFailure
from product_qa.utils.exceptions import LiteralSyntaxError


@dataclass(frozen=True)
class ParseOutcome:
    """Result of parsing one line; exactly one attribute is set.

    Attributes:
        record: The normalized record, if the line was a viable record
        failure: Diagnostic, if the line failed both parse stages
        skipped_reason: Why a successfully parsed object was not indexed
    """

    record: QARecord | None = None
    failure: RecordParseFailure | None = None
    skipped_reason: str | None = None


class RecordParser:
    """Two-stage parser: strict JSON first, Python-literal dialect as fallback.

    The field extraction policy is chosen by the dialect, not by which stage
    happened to succeed. The tolerant dialect, used for the real corpus,
    requires a non-empty ``asin``, ``question`` and ``answer``. The JSON dialect
    takes the identifier from ``asin``, ``productId`` or ``id`` and keeps
    records without a question or answer.

    Example:
        >>> parser = RecordParser()
        >>> outcome = parser.parse_line("{'asin': 'B001', 'question': 'Q?', 'answer': 'A'}")
        >>> outcome.record.product_id
        'B001'
    """

    def __init__(self, dialect: RecordDialect = RecordDialect.TOLERANT) -> None:
        """Initialize the parser.

        Args:
            dialect: Field extraction policy
        """
        self.dialect = dialect
        self.json_hits = 0
        self.literal_hits = 0

    def parse_line(self, line: str, line_number: int = 0) -> ParseOutcome:
        """Parse one trimmed, non-blank line.

        Args:
            line: Line text with surrounding whitespace removed
            line_number: 1-based line number for diagnostics

        Returns:
            ParseOutcome carrying a record, a failure or a skip reason
        """
        try:
            data = self.load_object(line)
        except LiteralSyntaxError as e:
            return ParseOutcome(
                failure=RecordParseFailure(
                    line_number=line_number,
                    reason=str(e),
                    excerpt=line[:EXCERPT_LENGTH],
                )
            )

        if not isinstance(data, dict):
            return ParseOutcome(
                failure=RecordParseFailure(
                    line_number=line_number,
                    reason=f"expected an object, got {type(data).__name__}",
                    excerpt=line[:EXCERPT_LENGTH],
                )
            )

        return self.extract_record(data)

    def load_object(self, line: str) -> Any:
        """Decode a line with the fast JSON path, falling back to the literal dialect.

        Raises:
            LiteralSyntaxError: If neither stage can parse the line
        """
        try:
            value = json.loads(line, parse_constant=lambda _token: None)
            self.json_hits += 1
            return value
        except (ValueError, RecursionError):
            # The literal parser enforces MAX_NESTING_DEPTH, so deep lines fail there
            pass

        value = parse_literal(line)
        self.literal_hits += 1
        return value

    def extract_record(self, data: dict[str, Any]) -> ParseOutcome:
        """Build a QARecord from a decoded object according to the dialect."""
        id_fields = TOLERANT_ID_FIELDS if self.dialect is RecordDialect.TOLERANT else JSON_ID_FIELDS
        product_id = _first_text(data, id_fields)
        if not product_id:
            return ParseOutcome(skipped_reason="missing product identifier")

        question = _text(data.get("question"))
        answer = _text(data.get("answer")) if data.get("answer") is not None else None

        if self.dialect is RecordDialect.TOLERANT:
            if not question:
                return ParseOutcome(skipped_reason="missing question")
            if not answer:
                return ParseOutcome(skipped_reason="missing answer")

        return ParseOutcome(
            record=QARecord(
                product_id=product_id,
                question=question,
                answer=answer,
                answer_time=_text(data.get("answerTime")),
                unix_time=_epoch_seconds(data.get("unixTime")),
                question_type=_text(data.get("questionType")),
                answer_type=_text(data.get("answerType")),
            )
        )


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _first_text(data: dict[str, Any], fields: tuple[str, ...]) -> str:
    for name in fields:
        value = _text(data.get(name))
        if value.strip():
            return value
    return ""


def _epoch_seconds(value: Any) -> int | None:
    """Normalize a unixTime field; anything that is not a finite number is absent."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None
