"""Recursive-descent parser for Python-literal style records.

The corpus is written with Python's repr() rather than JSON: single-quoted
strings, True/False/None, and the occasional nan or inf. This parser reads that
dialect directly instead of rewriting quotes, so apostrophes inside strings,
escaped delimiters and nested containers survive intact.

Supported:
    - dicts, lists, tuples and sets (tuples and sets become lists)
    - single, double and triple-quoted strings with r/u/b prefixes and
      adjacent-literal concatenation
    - Python escapes: \\n \\t \\r \\' \\" \\\\ \\xhh \\uXXXX \\UXXXXXXXX \\N{name}, octal
    - int (decimal, hex, octal, binary, underscores), float, exponents, signs
    - True/False/None and the JSON spellings true/false/null
    - nan/inf/Infinity/NaN (any sign), which become None
"""

import re
import unicodedata
from typing import Any, NoReturn

from product_qa.utils.exceptions import LiteralSyntaxError

MAX_NESTING_DEPTH = 64

_WHITESPACE = " \t\r\n\f\v"
_STRING_PREFIX_RE = re.compile(r"(?:[rRuUbB]|[rR][bB]|[bB][rR])?(?=['\"])")
_NUMBER_RE = re.compile(
    r"""
    0[xX][0-9a-fA-F_]+
    | 0[oO][0-7_]+
    | 0[bB][01_]+
    | (?: \d[\d_]* (?:\.[\d_]*)? | \.\d[\d_]* ) (?:[eE][+-]?\d[\d_]*)?
    """,
    re.VERBOSE,
)
_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_CONSTANTS: dict[str, Any] = {
    "True": True,
    "False": False,
    "None": None,
    "true": True,
    "false": False,
    "null": None,
}
# No representation for non-finite floats is retained
_NON_FINITE = frozenset({"nan", "NaN", "inf", "Inf", "Infinity"})

_SIMPLE_ESCAPES = {
    "\\": "\\",
    "'": "'",
    '"': '"',
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


def parse_literal(text: str) -> Any:
    """Parse a single Python-literal value.

    Args:
        text: Source text, e.g. "{'asin': 'B001', 'question': \"It's fine\"}"

    Returns:
        The parsed value built from dict, list, str, int, float, bool and None

    Raises:
        LiteralSyntaxError: If the text is not a well-formed literal
    """
    return _LiteralParser(text).parse()


class _LiteralParser:
    """Single-use parser over one line of text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.depth = 0

    def parse(self) -> Any:
        self._skip_whitespace()
        value = self._parse_value()
        self._skip_whitespace()
        if self.pos != len(self.text):
            self._fail(f"unexpected trailing data {self.text[self.pos]!r}")
        return value

    # Helpers

    def _fail(self, reason: str) -> NoReturn:
        raise LiteralSyntaxError(reason, self.pos)

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def _expect(self, char: str) -> None:
        self._skip_whitespace()
        if self._peek() != char:
            found = self._peek()
            self._fail(f"expected {char!r}, found {found!r}" if found else f"expected {char!r}")
        self.pos += 1

    # Values

    def _parse_value(self) -> Any:
        self._skip_whitespace()
        char = self._peek()

        if not char:
            self._fail("unexpected end of input")
        if char == "{":
            return self._parse_braces()
        if char == "[":
            return self._parse_sequence("[", "]")
        if char == "(":
            return self._parse_parens()
        if char in "'\"" or _STRING_PREFIX_RE.match(self.text, self.pos):
            return self._parse_strings()
        if char in "+-":
            return self._parse_signed()
        if char.isdigit() or char == ".":
            return self._parse_number()
        if char.isalpha() or char == "_":
            return self._parse_name()

        self._fail(f"unexpected character {char!r}")

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            self._fail("nesting too deep")

    def _parse_braces(self) -> dict[Any, Any] | list[Any]:
        """Parse a dict, or a set literal (returned as a list)."""
        self._enter()
        self.pos += 1
        self._skip_whitespace()

        if self._peek() == "}":
            self.pos += 1
            self.depth -= 1
            return {}

        first = self._parse_value()
        self._skip_whitespace()

        if self._peek() != ":":
            items = [first]
            self._parse_remaining_items(items, "}")
            self.depth -= 1
            return items

        result: dict[Any, Any] = {}
        key = first
        while True:
            self._expect(":")
            value = self._parse_value()
            self._store(result, key, value)

            self._skip_whitespace()
            char = self._peek()
            if char == "}":
                self.pos += 1
                break
            if char != ",":
                self._fail(f"expected ',' or '}}', found {char!r}" if char else "unterminated dict")
            self.pos += 1
            self._skip_whitespace()
            if self._peek() == "}":
                self.pos += 1
                break
            key = self._parse_value()

        self.depth -= 1
        return result

    def _store(self, result: dict[Any, Any], key: Any, value: Any) -> None:
        if isinstance(key, (dict, list)):
            self._fail(f"unhashable dict key of type {type(key).__name__}")
        result[key] = value

    def _parse_sequence(self, opener: str, closer: str) -> list[Any]:
        self._enter()
        self.pos += len(opener)
        items: list[Any] = []
        self._skip_whitespace()
        if self._peek() == closer:
            self.pos += 1
        else:
            items.append(self._parse_value())
            self._parse_remaining_items(items, closer)
        self.depth -= 1
        return items

    def _parse_remaining_items(self, items: list[Any], closer: str) -> bool:
        """Consume ", item" pairs up to and including the closer.

        Returns:
            True if at least one comma was seen
        """
        saw_comma = False
        while True:
            self._skip_whitespace()
            char = self._peek()
            if char == closer:
                self.pos += 1
                return saw_comma
            if char != ",":
                if not char:
                    self._fail(f"expected {closer!r} before end of input")
                self._fail(f"expected ',' or {closer!r}, found {char!r}")
            self.pos += 1
            saw_comma = True
            self._skip_whitespace()
            if self._peek() == closer:
                self.pos += 1
                return saw_comma
            items.append(self._parse_value())

    def _parse_parens(self) -> Any:
        """Parse a tuple (as a list) or a parenthesized single value."""
        self._enter()
        self.pos += 1
        self._skip_whitespace()
        if self._peek() == ")":
            self.pos += 1
            self.depth -= 1
            return []

        items = [self._parse_value()]
        saw_comma = self._parse_remaining_items(items, ")")
        self.depth -= 1
        if len(items) == 1 and not saw_comma:
            return items[0]
        return items

    # Strings

    def _parse_strings(self) -> str:
        parts = [self._parse_string()]
        while True:
            self._skip_whitespace()
            char = self._peek()
            if (char and char in "'\"") or _STRING_PREFIX_RE.match(self.text, self.pos):
                parts.append(self._parse_string())
            else:
                return "".join(parts)

    def _parse_string(self) -> str:
        prefix_match = _STRING_PREFIX_RE.match(self.text, self.pos)
        prefix = prefix_match.group(0).lower() if prefix_match else ""
        self.pos += len(prefix)
        raw = "r" in prefix

        quote = self.text[self.pos]
        if self.text.startswith(quote * 3, self.pos):
            quote = quote * 3
        start = self.pos
        self.pos += len(quote)

        chunks: list[str] = []
        while True:
            if self.pos >= len(self.text):
                self.pos = start
                self._fail("unterminated string")
            if self.text.startswith(quote, self.pos):
                self.pos += len(quote)
                return "".join(chunks)

            char = self.text[self.pos]
            if char == "\n" and len(quote) == 1:
                self._fail("newline in single-quoted string")
            if char == "\\":
                if raw:
                    # A raw string keeps the backslash but it still escapes the quote
                    chunks.append(self.text[self.pos : self.pos + 2])
                    self.pos += 2
                else:
                    chunks.append(self._parse_escape())
            else:
                chunks.append(char)
                self.pos += 1

    def _parse_escape(self) -> str:
        self.pos += 1
        if self.pos >= len(self.text):
            self._fail("unterminated escape sequence")
        char = self.text[self.pos]
        self.pos += 1

        if char in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[char]
        if char == "\n":
            return ""
        if char in "01234567":
            digits = char
            while len(digits) < 3 and self._peek() and self._peek() in "01234567":
                digits += self._peek()
                self.pos += 1
            return chr(int(digits, 8))
        if char == "x":
            return self._parse_hex_escape(2)
        if char == "u":
            return self._parse_hex_escape(4)
        if char == "U":
            return self._parse_hex_escape(8)
        if char == "N" and self._peek() == "{":
            end = self.text.find("}", self.pos)
            if end == -1:
                self._fail("unterminated \\N{...} escape")
            name = self.text[self.pos + 1 : end]
            try:
                resolved = unicodedata.lookup(name)
            except KeyError:
                self._fail(f"unknown unicode character name {name!r}")
            self.pos = end + 1
            return resolved

        # Unknown escapes keep their backslash, as Python does
        return "\\" + char

    def _parse_hex_escape(self, width: int) -> str:
        digits = self.text[self.pos : self.pos + width]
        if len(digits) != width or not all(c in "0123456789abcdefABCDEF" for c in digits):
            self._fail("truncated escape sequence")
        self.pos += width
        codepoint = int(digits, 16)
        if codepoint > 0x10FFFF:
            self._fail("escape outside unicode range")
        return chr(codepoint)

    # Numbers and names

    def _parse_signed(self) -> Any:
        sign = self.text[self.pos]
        self.pos += 1
        self._skip_whitespace()
        char = self._peek()
        if char.isalpha():
            start = self.pos
            name = self._read_name()
            if name in _NON_FINITE:
                return None
            self.pos = start
            self._fail(f"unexpected name {name!r} after {sign!r}")
        if char.isdigit() or char == ".":
            value = self._parse_number()
            return -value if sign == "-" and value is not None else value
        self._fail(f"expected number after {sign!r}")

    def _parse_number(self) -> int | float | None:
        match = _NUMBER_RE.match(self.text, self.pos)
        if not match or match.group(0) == ".":
            self._fail("malformed number")
        literal = match.group(0)
        end = match.end()

        following = self.text[end] if end < len(self.text) else ""
        if following.isalnum() or following == "_":
            self._fail(f"malformed number {literal + following!r}")

        cleaned = literal.replace("_", "")
        try:
            if cleaned[:2].lower() in ("0x", "0o", "0b"):
                value: int | float = int(cleaned, 0)
            elif any(c in cleaned for c in ".eE"):
                value = float(cleaned)
            else:
                value = int(cleaned)
        except ValueError:
            self._fail(f"malformed number {literal!r}")

        self.pos = end
        if isinstance(value, float) and value in (float("inf"), float("-inf")):
            return None
        return value

    def _read_name(self) -> str:
        match = _NAME_RE.match(self.text, self.pos)
        if not match:
            self._fail("expected a name")
        self.pos = match.end()
        return match.group(0)

    def _parse_name(self) -> Any:
        start = self.pos
        name = self._read_name()
        if name in _CONSTANTS:
            return _CONSTANTS[name]
        if name in _NON_FINITE:
            return None
        self.pos = start
        self._fail(f"unexpected name {name!r}")
