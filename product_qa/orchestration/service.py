"""Service facade: background ingestion plus the query boundary."""

import asyncio

import structlog

from product_qa.ingestion.models import IngestionReport
from product_qa.ingestion.pipeline import IngestionPipeline
from product_qa.ingestion.record_parser import RecordParser
from product_qa.query.query_engine import (
    HealthStatus,
    LookupResult,
    QueryEngine,
    SearchResult,
)
from product_qa.repositories.ingestion_state import IngestionState
from product_qa.utils.config import Config

logger = structlog.get_logger(__name__)


class ProductQAService:
    """Owns one ingestion run and the query engine that serves it.

    Ingestion is started explicitly with start(). The blocking pipeline runs in
    a worker thread, so the event loop keeps serving queries (which answer
    NotReadyYetError) until the index is published.

    Example:
        >>> service = ProductQAService(Config())
        >>> service.start()
        >>> report = await service.wait_until_ready()
        >>> service.search("B00", limit=5)
    """

    def __init__(
        self,
        config: Config,
        state: IngestionState | None = None,
        show_progress: bool = False,
    ) -> None:
        """Initialize the service without starting ingestion.

        Args:
            config: Application configuration
            state: Ingestion state to publish into (a fresh one by default)
            show_progress: Display a tqdm progress bar during ingestion
        """
        self.config = config
        self.state = state or IngestionState()
        self.pipeline = IngestionPipeline(
            state=self.state,
            parser=RecordParser(dialect=config.record_dialect),
            error_log_limit=config.parse_error_log_limit,
            show_progress=show_progress,
        )
        self.query_engine = QueryEngine(
            state=self.state,
            default_limit=config.search_default_limit,
        )
        self._task: asyncio.Task[IngestionReport | None] | None = None

    def start(self) -> "asyncio.Task[IngestionReport | None]":
        """Start ingestion in the background; must be called from a running loop.

        Calling start() again returns the task of the first call.

        Returns:
            Task resolving to the IngestionReport, or None when the data file
            does not exist (the service then stays not-ready)
        """
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._ingest())
        return self._task

    async def _ingest(self) -> IngestionReport | None:
        data_file = self.config.data_file
        if not data_file.exists():
            logger.warning(
                "data_file_not_found",
                data_file=str(data_file),
                hint="Set DATA_FILE to the gzip corpus path",
            )
            return None

        return await asyncio.to_thread(self.pipeline.run, data_file)

    async def wait_until_ready(self) -> IngestionReport | None:
        """Await the ingestion task started by start(), starting it if needed."""
        return await self.start()

    def lookup(self, product_id: str) -> LookupResult:
        return self.query_engine.lookup(product_id)

    def search(self, substring: str, limit: int | None = None) -> SearchResult:
        return self.query_engine.search(substring, limit=limit)

    def health(self) -> HealthStatus:
        return self.query_engine.health()
