"""Shared defaults for ingestion and querying."""

from enum import Enum

DEFAULT_DATA_FILE = "./qa_Clothing_Shoes_and_Jewelry.json.gz"

# Search
DEFAULT_SEARCH_LIMIT = 10
PREVIEW_SIZE = 2

# Diagnostics
PARSE_ERROR_LOG_LIMIT = 5
EXCERPT_LENGTH = 100
PROGRESS_LOG_INTERVAL = 100_000

# Decompression
READ_CHUNK_SIZE = 64 * 1024

# Field names accepted as product identifier, in priority order
TOLERANT_ID_FIELDS = ("asin",)
JSON_ID_FIELDS = ("asin", "productId", "id")


class RecordDialect(str, Enum):
    """Field extraction policy for corpus records.

    TOLERANT is the policy for the Python-literal corpus: the identifier comes
    from ``asin`` only and both question and answer must be non-empty.
    JSON accepts ``asin``/``productId``/``id`` and treats question/answer as optional.
    """

    TOLERANT = "tolerant"
    JSON = "json"
