"""Service orchestration: background ingestion and the query boundary."""

from product_qa.orchestration.service import ProductQAService

__all__ = ["ProductQAService"]
