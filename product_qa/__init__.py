"""Product Q&A index: gzip corpus ingestion and read-only product queries."""

__version__ = "0.1.0"
