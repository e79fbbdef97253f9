"""Split a decompressed byte stream into trimmed text lines."""

from collections.abc import Callable, Iterable, Iterator


def iter_lines(
    chunks: Iterable[bytes],
    on_blank: Callable[[int], None] | None = None,
) -> Iterator[tuple[int, str]]:
    """Yield non-blank lines from a sequence of byte chunks.

    Lines are delimited by b"\\n"; a final line without a terminator is still
    emitted. Only the current partial line is buffered, so there is no cap on
    line length and memory does not grow with file size.

    Args:
        chunks: Iterable of raw byte chunks (decompressed)
        on_blank: Called with the line number of every blank line skipped

    Yields:
        (line_number, text) tuples with 1-based line numbers and surrounding
        whitespace removed
    """
    buffer = bytearray()
    line_number = 0

    for chunk in chunks:
        buffer.extend(chunk)
        start = 0
        while True:
            end = buffer.find(b"\n", start)
            if end == -1:
                break
            line_number += 1
            text = _decode(buffer[start:end])
            start = end + 1
            if text:
                yield line_number, text
            elif on_blank is not None:
                on_blank(line_number)
        del buffer[:start]

    if buffer:
        line_number += 1
        text = _decode(buffer)
        if text:
            yield line_number, text
        elif on_blank is not None:
            on_blank(line_number)


def _decode(raw: bytes | bytearray) -> str:
    # Invalid UTF-8 becomes U+FFFD instead of dropping the line
    return raw.decode("utf-8", errors="replace").strip()
