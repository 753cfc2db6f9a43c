"""Locate tabular array-literal constants in UI source text.

A declaration such as::

    const songs: Song[] = [
      { id: "1", title: "A" },
      { id: "2", title: "B" },
    ];

is found with a regex, and its array span is delimited by counting square
brackets from the opening ``[``.  Only spans that look like a list of
records are kept; flags, single values and string lists are skipped.
"""
from __future__ import annotations

import logging
import re

from src.shared import constants
from src.shared.models.dataset import LiteralArrayMatch

logger = logging.getLogger(__name__)

_DECLARATION_RE = re.compile(
    r"const\s+(\w+)(?:\s*:\s*([^=]+))?\s*=\s*[\r\n]*\[", re.MULTILINE
)
# Non-greedy object count; nested braces are not balanced on purpose
_OBJECT_RE = re.compile(r"\{[^}]*\}")


def find_array_end(text: str, start: int) -> int:
    """Return the index of the ``]`` closing the ``[`` at *start*.

    Brackets are counted character by character; string contents are not
    treated specially.  Returns -1 when the brackets never balance.
    """
    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return i
    return -1


class ArrayLiteralLocator:
    """Finds ``const <name> = [ ... ]`` declarations holding record lists."""

    def __init__(
        self,
        min_length: int = constants.MIN_SPAN_LENGTH,
        min_objects: int = constants.MIN_OBJECT_COUNT,
    ) -> None:
        self.min_length = min_length
        self.min_objects = min_objects

    def locate(self, text: str, source_file: str = "") -> list[LiteralArrayMatch]:
        """Return data-shaped array declarations in declaration order.

        Args:
            text: Source text of one file.
            source_file: Path recorded on each match for provenance.
        """
        logger.debug("Extracting constant data from %s", source_file or "<text>")
        matches: list[LiteralArrayMatch] = []

        for decl in _DECLARATION_RE.finditer(text):
            name = decl.group(1)
            equals = text.find("=", decl.start())
            if equals == -1:
                continue
            array_start = text.find("[", equals)
            if array_start == -1:
                continue

            array_end = find_array_end(text, array_start)
            if array_end == -1:
                logger.debug("Unbalanced brackets for '%s' in %s", name, source_file)
                continue

            span = text[array_start:array_end + 1].strip()
            if not self.is_data_shaped(span):
                continue
            matches.append(
                LiteralArrayMatch(name=name, text=span, source_file=source_file)
            )

        if matches:
            logger.info(
                "Found %d data constant(s) in %s: %s",
                len(matches),
                source_file or "<text>",
                ", ".join(m.name for m in matches),
            )
        else:
            logger.debug("No data found in %s", source_file or "<text>")
        return matches

    def is_data_shaped(self, span: str) -> bool:
        """Whether *span* looks like an array of at least N object literals."""
        if span == "[]":
            return False
        if "{" not in span or "}" not in span:
            return False
        if len(span) < self.min_length:
            return False
        return len(_OBJECT_RE.findall(span)) >= self.min_objects
