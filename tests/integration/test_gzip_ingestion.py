"""Integration tests: gzip corpus through ingestion to queries.

Corpus files are written with real gzip compression and the Python-literal
dialect produced by repr(), the format of the public Q&A dumps.
"""

import gzip
import random
import threading
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from product_qa.ingestion.models import IngestionStatus
from product_qa.ingestion.pipeline import IngestionPipeline
from product_qa.query.query_engine import QueryEngine
from product_qa.repositories.ingestion_state import IngestionState
from product_qa.utils.exceptions import NotReadyYetError

pytestmark = pytest.mark.integration


def _ingest(path: Path) -> tuple[QueryEngine, IngestionState]:
    state = IngestionState()
    IngestionPipeline(state=state).run(path)
    return QueryEngine(state), state


def test_counts_match_distinct_asins(write_corpus, qa_line) -> None:
    """Product count is the number of distinct asins, record count the viable lines."""
    rng = random.Random(7)
    asins = [f"B{rng.randrange(50):04d}" for _ in range(300)]
    lines = [qa_line(asin, question=f"Question {i}?") for i, asin in enumerate(asins)]
    lines += [
        "{'asin': 'B9998', 'question': '', 'answer': 'A'}",
        "{'asin': 'B9999', 'question': 'Q?', 'answer': ''}",
    ]

    engine, state = _ingest(write_corpus(lines))

    assert state.product_count == len(set(asins))
    assert state.record_count == len(asins)
    assert state.report.records_skipped == 2
    assert engine.health().product_count == len(set(asins))


def test_lookup_returns_source_order(write_corpus, qa_line) -> None:
    lines = []
    for i in range(50):
        lines.append(qa_line("B0001", question=f"q{i}"))
        lines.append(qa_line(f"OTHER{i}"))

    engine, _ = _ingest(write_corpus(lines))

    result = engine.lookup("B0001")
    assert [r.question for r in result.records] == [f"q{i}" for i in range(50)]


def test_apostrophe_line(write_corpus) -> None:
    line = (
        "{'asin': 'B001', 'question': \"It's fine\", 'answer': 'Yes', "
        "'answerTime': 'Jan 1, 2014'}"
    )

    engine, _ = _ingest(write_corpus([line]))

    record = engine.lookup("B001").records[0]
    assert record.product_id == "B001"
    assert record.question == "It's fine"
    assert record.answer == "Yes"
    assert record.answer_time == "Jan 1, 2014"


def test_malformed_lines_tolerated(write_corpus, qa_line) -> None:
    """100 lines with 10 invalid ones index 90 records and count 10 errors."""
    lines = [qa_line(f"B{i:03d}") for i in range(100)]
    for i in range(0, 100, 10):
        lines[i] = lines[i][: len(lines[i]) // 2]

    engine, state = _ingest(write_corpus(lines))

    assert state.ready is True
    assert state.record_count == 90
    assert state.report.parse_errors == 10
    assert state.report.status is IngestionStatus.COMPLETED
    assert len(state.report.failures) == 5
    assert engine.health().product_count == 90


def test_search_short_circuits(write_corpus, qa_line) -> None:
    engine, _ = _ingest(write_corpus([qa_line("B001"), qa_line("C200"), qa_line("XB001")]))

    result = engine.search("b001", limit=1)

    assert result.total_found == 1
    assert [m.product_id for m in result.matches] == ["B001"]
    assert engine.search("b001").total_found == 2


def test_queries_not_ready_during_slow_ingestion(write_corpus, qa_line) -> None:
    """Every query before publication answers NotReadyYet, never partial data."""
    path = write_corpus([qa_line("B001")])
    release = threading.Event()
    halfway = threading.Event()

    def slow_source(_fileobj) -> Iterator[bytes]:
        for i in range(20):
            yield (qa_line(f"B{i:03d}") + "\n").encode()
            if i == 10:
                halfway.set()
                release.wait(timeout=10)

    state = IngestionState()
    engine = QueryEngine(state)
    pipeline = IngestionPipeline(state=state)

    with patch("product_qa.ingestion.pipeline.iter_decompressed", slow_source):
        worker = threading.Thread(target=pipeline.run, args=(path,))
        worker.start()
        assert halfway.wait(timeout=10)

        for _ in range(50):
            with pytest.raises(NotReadyYetError):
                engine.lookup("B001")
            with pytest.raises(NotReadyYetError):
                engine.search("B")
            assert engine.health().ready is False

        release.set()
        worker.join(timeout=10)

    assert state.ready is True
    assert engine.lookup("B019").count == 1
    assert engine.search("B", limit=100).total_found == 20


def test_health_is_stable_after_ready(write_corpus, qa_line) -> None:
    engine, _ = _ingest(write_corpus([qa_line(f"P{i}") for i in range(25)]))

    counts = {engine.health().product_count for _ in range(100)}

    assert counts == {25}


def test_truncated_archive_serves_prefix(tmp_path: Path, qa_line) -> None:
    payload = "\n".join(qa_line(f"B{i:05d}") for i in range(5000)).encode() + b"\n"
    compressed = gzip.compress(payload)
    path = tmp_path / "truncated.json.gz"
    path.write_bytes(compressed[: int(len(compressed) * 0.6)])

    engine, state = _ingest(path)

    assert state.ready is True
    assert state.report.status is IngestionStatus.TRUNCATED
    assert 0 < state.record_count < 5000
    assert engine.lookup("B00000").count == 1
