"""Unit tests for ProductIndex and IndexBuilder."""

import pytest

from product_qa.ingestion.models import QARecord
from product_qa.repositories.product_index import IndexBuilder, ProductIndex
from product_qa.utils.exceptions import IndexPublishedError


@pytest.fixture
def index(sample_records: list[QARecord]) -> ProductIndex:
    builder = IndexBuilder()
    for record in sample_records:
        builder.add(record)
    return builder.publish()


class TestIndexBuilder:
    """Test accumulation and publication."""

    def test_groups_by_product(self, index: ProductIndex) -> None:
        assert index.product_count == 3
        assert index.record_count == 5
        assert len(index) == 3

    def test_preserves_arrival_order_per_product(self, index: ProductIndex) -> None:
        records = index.get("B001")
        assert records is not None
        assert [r.question for r in records] == ["Q1 for B001", "Q2 for B001", "Q3 for B001"]

    def test_keys_in_first_seen_order(self, index: ProductIndex) -> None:
        assert list(index) == ["B001", "B002", "XB0015"]
        assert [pid for pid, _records in index.items()] == ["B001", "B002", "XB0015"]

    def test_live_counters(self) -> None:
        builder = IndexBuilder()
        builder.add(QARecord(product_id="A"))
        builder.add(QARecord(product_id="A"))
        builder.add(QARecord(product_id="B"))

        assert builder.record_count == 3
        assert builder.product_count == 2
        assert builder.published is False

    def test_add_after_publish_rejected(self) -> None:
        builder = IndexBuilder()
        builder.add(QARecord(product_id="A"))
        builder.publish()

        assert builder.published is True
        assert builder.product_count == 0
        with pytest.raises(IndexPublishedError):
            builder.add(QARecord(product_id="B"))

    def test_publish_twice_rejected(self) -> None:
        builder = IndexBuilder()
        builder.publish()
        with pytest.raises(IndexPublishedError):
            builder.publish()

    def test_empty_publish(self) -> None:
        index = IndexBuilder().publish()
        assert index.product_count == 0
        assert index.record_count == 0
        assert list(index.items()) == []


class TestProductIndex:
    """Test read access to the published index."""

    def test_case_sensitive_keys(self, index: ProductIndex) -> None:
        assert "B001" in index
        assert "b001" not in index
        assert index.get("b001") is None

    def test_buckets_are_tuples(self, index: ProductIndex) -> None:
        assert isinstance(index.get("B002"), tuple)

    def test_cannot_mutate_buckets(self, index: ProductIndex) -> None:
        with pytest.raises(TypeError):
            index._buckets["NEW"] = ()  # type: ignore[index]

    def test_records_are_frozen(self, index: ProductIndex) -> None:
        records = index.get("B001")
        assert records is not None
        with pytest.raises(AttributeError):
            records[0].answer = "changed"  # type: ignore[misc]

    def test_rejects_empty_bucket(self) -> None:
        with pytest.raises(ValueError, match="Empty record bucket"):
            ProductIndex({"B001": ()})

    def test_default_is_empty(self) -> None:
        index = ProductIndex()
        assert len(index) == 0
        assert index.record_count == 0
