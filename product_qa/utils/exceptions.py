"""Custom exception hierarchy for the application."""


class ProductQAError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, is_retryable: bool = False) -> None:
        """Initialize exception.

        Args:
            message: Error message
            is_retryable: Whether the operation can be retried
        """
        super().__init__(message)
        self.message = message
        self.is_retryable = is_retryable


class ConfigurationError(ProductQAError):
    """Configuration or environment setup error."""

    pass


class IngestionError(ProductQAError):
    """Data ingestion pipeline error."""

    pass


class SourceUnreadableError(IngestionError):
    """Corpus file is missing or cannot be opened."""

    pass


class CorruptStreamError(IngestionError):
    """Compressed framing became invalid while reading the corpus."""

    pass


class IndexPublishedError(IngestionError):
    """Write attempted on an index that has already been published."""

    pass


class RecordParseError(ProductQAError):
    """A single corpus line could not be parsed."""

    pass


class LiteralSyntaxError(RecordParseError):
    """Syntax error in the Python-literal record dialect."""

    def __init__(self, reason: str, position: int) -> None:
        """Initialize exception.

        Args:
            reason: Short description of what was expected or found
            position: Character offset in the line where parsing failed
        """
        super().__init__(f"{reason} at position {position}")
        self.reason = reason
        self.position = position


class QueryError(ProductQAError):
    """Query engine error surfaced to callers."""

    pass


class NotReadyYetError(QueryError):
    """Index is still loading; the query should be retried later."""

    def __init__(self, message: str = "Data is still loading, please try again later") -> None:
        super().__init__(message, is_retryable=True)


class ProductNotFoundError(QueryError):
    """Product identifier is not present in the index."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class ValidationError(ProductQAError):
    """Input validation error."""

    pass
