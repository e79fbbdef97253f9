"""Shared readiness state between the ingestion pipeline and query callers."""

import threading

import structlog

from product_qa.ingestion.models import IngestionReport
from product_qa.repositories.product_index import ProductIndex
from product_qa.utils.exceptions import IngestionError

logger = structlog.get_logger(__name__)


class IngestionState:
    """Readiness flag, progress counters and the published index.

    The pipeline is the only writer. publish() stores the finished index and
    report before setting the ready event; Event.set/is_set synchronize on the
    event's lock, so a reader that sees ready=True also sees the complete index.
    Readers must not touch the index before observing ready.

    Attributes:
        record_count: Records indexed so far (live during ingestion)
        product_count: Distinct products indexed so far (live during ingestion)
    """

    def __init__(self) -> None:
        self._ready = threading.Event()
        self._index: ProductIndex | None = None
        self._report: IngestionReport | None = None
        self.record_count = 0
        self.product_count = 0

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    @property
    def index(self) -> ProductIndex | None:
        """The published index, or None while ingestion is still running."""
        if not self._ready.is_set():
            return None
        return self._index

    @property
    def report(self) -> IngestionReport | None:
        if not self._ready.is_set():
            return None
        return self._report

    def update_progress(self, record_count: int, product_count: int) -> None:
        """Record live counters for health checks during ingestion."""
        self.record_count = record_count
        self.product_count = product_count

    def publish(self, index: ProductIndex, report: IngestionReport) -> None:
        """Publish the completed index and flip ready to True.

        Raises:
            IngestionError: If the state was already published
        """
        if self._ready.is_set():
            raise IngestionError("Ingestion state has already been published")

        self._index = index
        self._report = report
        self.record_count = index.record_count
        self.product_count = index.product_count
        self._ready.set()

        logger.info(
            "index_ready",
            product_count=index.product_count,
            record_count=index.record_count,
        )

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the index is published.

        Args:
            timeout: Seconds to wait, or None to wait forever

        Returns:
            True if the index is ready
        """
        return self._ready.wait(timeout)
