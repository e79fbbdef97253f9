"""Gzip decompression stream for the Q&A corpus."""

import gzip
import zlib
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

import structlog

from product_qa.common.constants import READ_CHUNK_SIZE
from product_qa.utils.exceptions import CorruptStreamError, SourceUnreadableError

logger = structlog.get_logger(__name__)


def open_source(path: str | Path) -> BinaryIO:
    """Open a gzip-compressed corpus for binary reading.

    The gzip header is only checked on the first read, so a file that exists
    but is not gzip surfaces later as CorruptStreamError.

    Args:
        path: Path to the .gz file

    Returns:
        Binary file object yielding decompressed bytes

    Raises:
        SourceUnreadableError: If the file is missing or cannot be opened
    """
    path = Path(path)
    try:
        return gzip.open(path, "rb")  # type: ignore[return-value]
    except OSError as e:
        raise SourceUnreadableError(f"Cannot open corpus file {path}: {e}") from e


def iter_decompressed(
    fileobj: BinaryIO, chunk_size: int = READ_CHUNK_SIZE
) -> Iterator[bytes]:
    """Yield decompressed chunks until the stream is exhausted.

    Args:
        fileobj: Decompressing file object (see open_source)
        chunk_size: Maximum bytes per yielded chunk

    Yields:
        Non-empty byte chunks

    Raises:
        CorruptStreamError: If the compressed framing is invalid or the file
            cannot be read mid-stream (gzip.BadGzipFile is an OSError)
    """
    bytes_read = 0
    while True:
        try:
            chunk = fileobj.read(chunk_size)
        except (OSError, EOFError, zlib.error) as e:
            logger.debug("decompression_failed", bytes_read=bytes_read, error=str(e))
            raise CorruptStreamError(
                f"Compressed stream is corrupt after {bytes_read} bytes: {e}"
            ) from e

        if not chunk:
            return

        bytes_read += len(chunk)
        yield chunk
