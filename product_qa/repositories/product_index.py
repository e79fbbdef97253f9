"""In-memory product index: a read-only multimap from product ID to Q&A records."""

from collections.abc import Iterator, Mapping
from types import MappingProxyType

import structlog

from product_qa.ingestion.models import QARecord
from product_qa.utils.exceptions import IndexPublishedError

logger = structlog.get_logger(__name__)


class ProductIndex:
    """Immutable mapping of product ID to its records in arrival order.

    Keys are case-sensitive and iterate in first-seen order. Every key maps to
    a non-empty tuple. Instances are produced by IndexBuilder.publish() and
    expose no mutating methods, so they can be shared by any number of readers
    without locking.

    Attributes:
        record_count: Total records across all products
    """

    def __init__(self, buckets: Mapping[str, tuple[QARecord, ...]] | None = None) -> None:
        """Wrap already-frozen buckets.

        Args:
            buckets: Mapping of product ID to record tuples; empty tuples are rejected

        Raises:
            ValueError: If any bucket is empty
        """
        frozen = dict(buckets or {})
        for product_id, records in frozen.items():
            if not records:
                raise ValueError(f"Empty record bucket for product {product_id!r}")
        self._buckets: Mapping[str, tuple[QARecord, ...]] = MappingProxyType(frozen)
        self.record_count = sum(len(records) for records in frozen.values())

    @property
    def product_count(self) -> int:
        return len(self._buckets)

    def get(self, product_id: str) -> tuple[QARecord, ...] | None:
        """Return all records for a product, or None if it is not indexed."""
        return self._buckets.get(product_id)

    def items(self) -> Iterator[tuple[str, tuple[QARecord, ...]]]:
        """Iterate (product_id, records) pairs in index order."""
        return iter(self._buckets.items())

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._buckets

    def __iter__(self) -> Iterator[str]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)


class IndexBuilder:
    """Sole writer of the product index during ingestion.

    Records are grouped by product ID with insertion order preserved per key.
    publish() freezes the buckets into a ProductIndex and releases the builder's
    mutable state, after which add() is rejected.
    """

    def __init__(self) -> None:
        self._buckets: dict[str, list[QARecord]] | None = {}
        self.record_count = 0

    @property
    def product_count(self) -> int:
        return len(self._buckets) if self._buckets is not None else 0

    @property
    def published(self) -> bool:
        return self._buckets is None

    def add(self, record: QARecord) -> None:
        """Append a record to its product bucket.

        Raises:
            IndexPublishedError: If the index was already published
        """
        if self._buckets is None:
            raise IndexPublishedError("Cannot add records after the index has been published")

        bucket = self._buckets.get(record.product_id)
        if bucket is None:
            bucket = self._buckets[record.product_id] = []
        bucket.append(record)
        self.record_count += 1

    def publish(self) -> ProductIndex:
        """Freeze accumulated records into a read-only ProductIndex.

        Raises:
            IndexPublishedError: If called more than once
        """
        if self._buckets is None:
            raise IndexPublishedError("Index has already been published")

        buckets, self._buckets = self._buckets, None
        index = ProductIndex({pid: tuple(records) for pid, records in buckets.items()})

        logger.debug(
            "product_index_published",
            product_count=index.product_count,
            record_count=index.record_count,
        )
        return index
