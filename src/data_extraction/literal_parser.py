"""Tolerant parser for JavaScript/TypeScript object and array literals.

UI sample data is written as source code, not JSON: keys are usually
unquoted, strings may use single quotes or backticks, and trailing commas
are common.  This module parses that narrow literal grammar into plain
Python values without executing any code.

Supported grammar::

    value   := object | array | string | number | keyword
    object  := '{' (key ':' value ',')* (key ':' value)? '}'
    array   := '[' (value ',')* value? ']'
    key     := identifier | string | number
    keyword := true | false | null | undefined

Comments (``//`` and ``/* */``) are skipped, and a TypeScript ``as T``
assertion after a value is ignored.  Anything else (identifier references,
calls, spreads, JSX, template interpolation) is rejected with
:class:`~src.shared.errors.LiteralSyntaxError`.
"""
from __future__ import annotations

import logging
import re

from pydantic import JsonValue

from src.shared.errors import LiteralSyntaxError
from src.shared.models.dataset import Record

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Token patterns
# ---------------------------------------------------------------------------

_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][\w$]*")
_NUMBER_RE = re.compile(
    r"""
    (?P<radix>0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+)n?
    |
    (?P<decimal>(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d+)?)(?P<bigint>n)?
    """,
    re.VERBOSE,
)
_TYPE_ASSERTION_RE = re.compile(r"as\s+[A-Za-z_$][\w$.]*(?:<[^<>]*>)?(?:\[\])*")

_KEYWORDS: dict[str, JsonValue] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
}

_SIMPLE_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_QUOTES = ("'", '"', "`")

# Deeper nesting than this is rejected before Python's recursion limit
_MAX_DEPTH = 200


class LiteralParser:
    """Recursive-descent parser over a single literal expression."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._depth = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self) -> JsonValue:
        """Parse the whole text as one literal value.

        Raises:
            LiteralSyntaxError: If the text is not a supported literal or has
                trailing content.
        """
        self._skip_trivia()
        value = self._parse_value()
        self._skip_trivia()
        if self._pos < len(self._text):
            raise LiteralSyntaxError("Unexpected trailing content", self._pos)
        return value

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def _parse_value(self) -> JsonValue:
        ch = self._peek()
        if ch == "":
            raise LiteralSyntaxError("Unexpected end of input", self._pos)
        if ch in "{[":
            self._depth += 1
            if self._depth > _MAX_DEPTH:
                raise LiteralSyntaxError("Literal is nested too deeply", self._pos)
            value: JsonValue = (
                self._parse_object() if ch == "{" else self._parse_array()
            )
            self._depth -= 1
        elif ch in _QUOTES:
            value = self._parse_string()
        elif ch.isdigit() or ch in "+-.":
            value = self._parse_number()
        else:
            value = self._parse_keyword()
        self._skip_type_assertion()
        return value

    def _parse_object(self) -> dict[str, JsonValue]:
        self._expect("{")
        result: dict[str, JsonValue] = {}
        while True:
            self._skip_trivia()
            if self._peek() == "}":
                self._pos += 1
                return result
            key = self._parse_key()
            self._skip_trivia()
            self._expect(":")
            self._skip_trivia()
            result[key] = self._parse_value()
            self._skip_trivia()
            ch = self._peek()
            if ch == ",":
                self._pos += 1
            elif ch == "}":
                self._pos += 1
                return result
            else:
                raise LiteralSyntaxError("Expected ',' or '}' in object", self._pos)

    def _parse_array(self) -> list[JsonValue]:
        self._expect("[")
        result: list[JsonValue] = []
        while True:
            self._skip_trivia()
            if self._peek() == "]":
                self._pos += 1
                return result
            result.append(self._parse_value())
            self._skip_trivia()
            ch = self._peek()
            if ch == ",":
                self._pos += 1
            elif ch == "]":
                self._pos += 1
                return result
            else:
                raise LiteralSyntaxError("Expected ',' or ']' in array", self._pos)

    def _parse_key(self) -> str:
        ch = self._peek()
        if ch in _QUOTES:
            return self._parse_string()
        if ch.isdigit() or ch == ".":
            number = self._parse_number()
            # 1e3 and 1.0 name the property "1000" and "1"
            if isinstance(number, float) and number.is_integer():
                return str(int(number))
            return str(number)
        match = _IDENTIFIER_RE.match(self._text, self._pos)
        if match is None:
            raise LiteralSyntaxError("Expected property name", self._pos)
        self._pos = match.end()
        return match.group(0)

    def _parse_keyword(self) -> JsonValue:
        match = _IDENTIFIER_RE.match(self._text, self._pos)
        if match is None:
            raise LiteralSyntaxError(
                f"Unexpected character {self._peek()!r}", self._pos
            )
        word = match.group(0)
        if word not in _KEYWORDS:
            raise LiteralSyntaxError(f"Unsupported expression '{word}'", self._pos)
        self._pos = match.end()
        return _KEYWORDS[word]

    def _parse_number(self) -> int | float:
        start = self._pos
        sign = 1
        if self._peek() in "+-":
            sign = -1 if self._peek() == "-" else 1
            self._pos += 1
            self._skip_trivia()
        match = _NUMBER_RE.match(self._text, self._pos)
        if match is None or not match.group(0):
            raise LiteralSyntaxError("Invalid number", start)
        self._pos = match.end()

        try:
            if match.group("radix"):
                return sign * int(match.group("radix").replace("_", ""), 0)
            literal = match.group("decimal").replace("_", "")
            if match.group("bigint") or not any(c in literal for c in ".eE"):
                return sign * int(literal)
            return sign * float(literal)
        except ValueError as exc:
            raise LiteralSyntaxError("Invalid number", start) from exc

    def _parse_string(self) -> str:
        quote = self._peek()
        start = self._pos
        self._pos += 1
        chunks: list[str] = []
        text = self._text
        while self._pos < len(text):
            ch = text[self._pos]
            if ch == quote:
                self._pos += 1
                return "".join(chunks)
            if ch == "\\":
                chunks.append(self._parse_escape())
                continue
            if ch == "\n" and quote != "`":
                raise LiteralSyntaxError("Unterminated string", start)
            if quote == "`" and text.startswith("${", self._pos):
                raise LiteralSyntaxError("Template interpolation is not supported", self._pos)
            chunks.append(ch)
            self._pos += 1
        raise LiteralSyntaxError("Unterminated string", start)

    def _parse_escape(self) -> str:
        # self._pos is on the backslash
        self._pos += 1
        if self._pos >= len(self._text):
            raise LiteralSyntaxError("Unterminated escape sequence", self._pos)
        ch = self._text[self._pos]
        self._pos += 1
        if ch in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[ch]
        if ch == "\r":
            # Line continuation, \r\n counts as one break
            if self._peek() == "\n":
                self._pos += 1
            return ""
        if ch in "\n\u2028\u2029":
            return ""
        if ch == "x":
            return chr(self._read_hex(2))
        if ch == "u":
            if self._peek() == "{":
                end = self._text.find("}", self._pos)
                if end == -1:
                    raise LiteralSyntaxError("Invalid unicode escape", self._pos)
                digits = self._text[self._pos + 1:end]
                self._pos = end + 1
                try:
                    code = int(digits, 16)
                    char = chr(code)
                except ValueError as exc:
                    raise LiteralSyntaxError("Invalid unicode escape", self._pos) from exc
                if 0xD800 <= code <= 0xDFFF:
                    raise LiteralSyntaxError("Lone surrogate in unicode escape", self._pos)
                return char
            code = self._read_hex(4)
            # Join UTF-16 surrogate pairs written as two escapes
            if 0xD800 <= code <= 0xDBFF and self._text.startswith("\\u", self._pos):
                saved = self._pos
                self._pos += 2
                low = self._read_hex(4)
                if 0xDC00 <= low <= 0xDFFF:
                    return chr(0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00))
                self._pos = saved
            if 0xD800 <= code <= 0xDFFF:
                # Unpaired halves cannot be written out as UTF-8
                raise LiteralSyntaxError("Lone surrogate in unicode escape", self._pos)
            return chr(code)
        # Any other escaped character stands for itself (\' \" \\ \/ ...)
        return ch

    def _read_hex(self, width: int) -> int:
        digits = self._text[self._pos:self._pos + width]
        if len(digits) != width:
            raise LiteralSyntaxError("Invalid hex escape", self._pos)
        try:
            value = int(digits, 16)
        except ValueError as exc:
            raise LiteralSyntaxError("Invalid hex escape", self._pos) from exc
        self._pos += width
        return value

    # ------------------------------------------------------------------
    # Lexical helpers
    # ------------------------------------------------------------------

    def _peek(self) -> str:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return ""

    def _expect(self, ch: str) -> None:
        if self._peek() != ch:
            raise LiteralSyntaxError(f"Expected {ch!r}", self._pos)
        self._pos += 1

    def _skip_trivia(self) -> None:
        """Skip whitespace and comments."""
        text = self._text
        while self._pos < len(text):
            ch = text[self._pos]
            if ch.isspace():
                self._pos += 1
            elif text.startswith("//", self._pos):
                end = text.find("\n", self._pos)
                self._pos = len(text) if end == -1 else end + 1
            elif text.startswith("/*", self._pos):
                end = text.find("*/", self._pos + 2)
                if end == -1:
                    raise LiteralSyntaxError("Unterminated comment", self._pos)
                self._pos = end + 2
            else:
                return

    def _skip_type_assertion(self) -> None:
        saved = self._pos
        self._skip_trivia()
        match = _TYPE_ASSERTION_RE.match(self._text, self._pos)
        if match is not None:
            self._pos = match.end()
        else:
            self._pos = saved


def parse_literal(text: str) -> JsonValue:
    """Parse *text* as a single literal value.

    Raises:
        LiteralSyntaxError: If *text* is not a supported literal.
    """
    return LiteralParser(text).parse()


# ---------------------------------------------------------------------------
# Array evaluation with per-object fallback
# ---------------------------------------------------------------------------


def evaluate_array(text: str) -> list[Record]:
    """Evaluate an array-literal span into records.

    The whole span is parsed first.  If that fails, each top-level object
    is carved out and parsed on its own so that one bad entry does not
    lose the rest of the array.  Never raises.

    Args:
        text: The array span, from ``[`` to the matching ``]``.

    Returns:
        The object elements of the array, in source order.  Empty on total
        failure.
    """
    try:
        value = parse_literal(text)
    except LiteralSyntaxError as exc:
        logger.debug("Literal parse failed (%s), falling back to per-object scan", exc)
        return _evaluate_objects(text)

    if not isinstance(value, list):
        logger.warning("Extracted literal is not an array")
        return []

    records: list[Record] = []
    for item in value:
        if isinstance(item, dict):
            records.append(item)
        else:
            logger.warning("Skipping non-object array element: %r", item)
    logger.debug("Parsed %d objects from array literal", len(records))
    return records


def _evaluate_objects(text: str) -> list[Record]:
    records: list[Record] = []
    for chunk in split_top_level_objects(text):
        try:
            value = parse_literal(chunk)
        except LiteralSyntaxError as exc:
            logger.warning("Dropping unparseable object %s: %s", _preview(chunk), exc)
            continue
        if isinstance(value, dict):
            records.append(value)
    logger.debug("Manually extracted %d objects from array literal", len(records))
    return records


def split_top_level_objects(text: str) -> list[str]:
    """Return each outermost ``{...}`` substring of *text*.

    Braces inside string literals and comments are ignored.  An object that
    is still open at the end of the text is discarded.
    """
    objects: list[str] = []
    depth = 0
    start = -1
    quote = ""
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = ""
        elif ch in _QUOTES:
            quote = ch
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
            continue
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
            continue
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                objects.append(text[start:i + 1])
        i += 1
    return objects


def _preview(text: str, limit: int = 80) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= limit else flat[:limit] + "..."
