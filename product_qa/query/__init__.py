"""Query engine over the published product index."""

from product_qa.query.query_engine import (
    HealthStatus,
    LookupResult,
    QueryEngine,
    SearchMatch,
    SearchResult,
)

__all__ = [
    "HealthStatus",
    "LookupResult",
    "QueryEngine",
    "SearchMatch",
    "SearchResult",
]
