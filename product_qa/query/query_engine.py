"""Read-only query operations over the published product index."""

from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict

from product_qa.common.constants import DEFAULT_SEARCH_LIMIT, PREVIEW_SIZE
from product_qa.ingestion.models import QARecord
from product_qa.repositories.ingestion_state import IngestionState
from product_qa.repositories.product_index import ProductIndex
from product_qa.utils.exceptions import (
    NotReadyYetError,
    ProductNotFoundError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


class LookupResult(BaseModel):
    """All records for one product, in arrival order."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    records: tuple[QARecord, ...]
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "totalQAs": self.count,
            "qaData": [record.to_dict() for record in self.records],
        }


class SearchMatch(BaseModel):
    """One product whose identifier contains the search term."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    count: int
    preview: tuple[QARecord, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "totalQAs": self.count,
            "preview": [record.to_dict() for record in self.preview],
        }


class SearchResult(BaseModel):
    """Search matches in index order.

    total_found is the number of matches returned, not the number of matching
    products in the whole corpus; the scan stops once the limit is reached.
    """

    model_config = ConfigDict(frozen=True)

    query: str
    matches: tuple[SearchMatch, ...]
    total_found: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "results": [match.to_dict() for match in self.matches],
            "totalFound": self.total_found,
        }


class HealthStatus(BaseModel):
    """Readiness and size of the index."""

    model_config = ConfigDict(frozen=True)

    ready: bool
    product_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"status": "OK", "dataLoaded": self.ready, "totalProducts": self.product_count}


class QueryEngine:
    """Exact lookup and substring search over a published ProductIndex.

    Both operations are safe to call at any time. Until the ingestion state is
    ready they raise NotReadyYetError instead of serving a partial index.

    Attributes:
        state: Shared ingestion state holding the published index
        default_limit: Search limit used when the caller passes none
        preview_size: Records included per search match
    """

    def __init__(
        self,
        state: IngestionState,
        default_limit: int = DEFAULT_SEARCH_LIMIT,
        preview_size: int = PREVIEW_SIZE,
    ) -> None:
        self.state = state
        self.default_limit = default_limit
        self.preview_size = preview_size

    def _ready_index(self) -> ProductIndex:
        index = self.state.index
        if index is None:
            raise NotReadyYetError()
        return index

    def lookup(self, product_id: str) -> LookupResult:
        """Return every record for a product.

        Args:
            product_id: Exact, case-sensitive product identifier

        Returns:
            LookupResult with records in source order

        Raises:
            NotReadyYetError: If ingestion has not completed
            ProductNotFoundError: If the product is not indexed
        """
        index = self._ready_index()
        records = index.get(product_id)
        if records is None:
            logger.debug("product_not_found", product_id=product_id)
            raise ProductNotFoundError(product_id)

        return LookupResult(product_id=product_id, records=records, count=len(records))

    def search(self, substring: str, limit: int | None = None) -> SearchResult:
        """Find products whose identifier contains substring, case-insensitively.

        Products are visited in index order and the scan stops as soon as
        limit matches are collected.

        Args:
            substring: Text to look for inside product identifiers
            limit: Maximum matches (defaults to default_limit)

        Returns:
            SearchResult with up to limit matches

        Raises:
            NotReadyYetError: If ingestion has not completed
            ValidationError: If limit is less than 1
        """
        index = self._ready_index()

        if limit is None:
            limit = self.default_limit
        if limit < 1:
            raise ValidationError(f"Search limit must be at least 1, got {limit}")

        needle = substring.lower()

        matches: list[SearchMatch] = []
        for product_id, records in index.items():
            if needle not in product_id.lower():
                continue
            matches.append(
                SearchMatch(
                    product_id=product_id,
                    count=len(records),
                    preview=records[: self.preview_size],
                )
            )
            if len(matches) >= limit:
                break

        logger.debug(
            "search_completed",
            query_text=substring[:100],
            limit=limit,
            results_count=len(matches),
        )

        return SearchResult(query=substring, matches=tuple(matches), total_found=len(matches))

    def health(self) -> HealthStatus:
        """Report readiness and the number of indexed products."""
        index = self.state.index
        if index is not None:
            return HealthStatus(ready=True, product_count=index.product_count)
        return HealthStatus(ready=False, product_count=self.state.product_count)
