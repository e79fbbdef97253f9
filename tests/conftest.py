"""Pytest configuration and shared fixtures."""

import gzip
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from product_qa.ingestion.models import IngestionReport, QARecord
from product_qa.repositories.ingestion_state import IngestionState
from product_qa.repositories.product_index import IndexBuilder
from product_qa.utils.logger import configure_logging


@pytest.fixture(autouse=True)
def debug_logging() -> None:
    """Route structlog through stdlib logging at DEBUG for every test."""
    configure_logging("DEBUG", "console")


@pytest.fixture
def qa_line() -> Callable[..., str]:
    """Build one corpus line in the Python-literal dialect (repr of a dict)."""

    def _build(
        asin: str,
        question: str = "Does this run true to size?",
        answer: str = "Yes, it fits as expected.",
        **extra: Any,
    ) -> str:
        record: dict[str, Any] = {
            "questionType": "yes/no",
            "asin": asin,
            "answerTime": "Jan 1, 2014",
            "unixTime": 1388563200,
            "question": question,
            "answerType": "Y",
            "answer": answer,
        }
        record.update(extra)
        return repr(record)

    return _build


@pytest.fixture
def write_corpus(tmp_path: Path) -> Callable[..., Path]:
    """Write lines to a gzip file and return its path."""

    def _write(lines: list[str], name: str = "qa_corpus.json.gz") -> Path:
        path = tmp_path / name
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write("\n".join(lines))
            f.write("\n")
        return path

    return _write


@pytest.fixture
def sample_records() -> list[QARecord]:
    """Records for three products, B001 having three answers."""
    return [
        QARecord(product_id="B001", question="Q1 for B001", answer="A1"),
        QARecord(product_id="B002", question="Q1 for B002", answer="A1"),
        QARecord(product_id="B001", question="Q2 for B001", answer="A2"),
        QARecord(product_id="XB0015", question="Q1 for XB0015", answer="A1"),
        QARecord(product_id="B001", question="Q3 for B001", answer=""),
    ]


@pytest.fixture
def ready_state(sample_records: list[QARecord]) -> IngestionState:
    """IngestionState with sample_records published."""
    builder = IndexBuilder()
    for record in sample_records:
        builder.add(record)

    state = IngestionState()
    state.publish(builder.publish(), IngestionReport(records_indexed=len(sample_records)))
    return state


@pytest.fixture
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate CLI commands from the caller's environment and silence logs."""
    monkeypatch.chdir(tmp_path)
    for key in ("DATA_FILE", "RECORD_DIALECT", "SEARCH_DEFAULT_LIMIT", "LOG_FORMAT"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "CRITICAL")
