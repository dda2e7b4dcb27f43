"""Parser module for goimporter.

This module provides functions to extract import declarations from the first
parenthesized import block of a Go source file. It works on text lines and
the literal markers ``import (`` and ``)``; Go syntax is never parsed.
"""

import logging
from typing import Iterator
from typing import List
from typing import Optional
from typing import Tuple

from goimporter.entities import Import

LOG = logging.getLogger(__name__)

BLOCK_START = "import ("
BLOCK_END = ")"


def split_lines(text: str) -> Iterator[Tuple[str, str]]:
    """Yield (content, line_ending) pairs covering ``text`` exactly.

    A trailing carriage return belongs to the line ending, so CRLF input is
    recognized the same way as LF input and can be written back unchanged.
    """
    pieces = text.split("\n")
    last = len(pieces) - 1
    for i, piece in enumerate(pieces):
        ending = "\n"
        if i == last:
            if not piece:
                return
            ending = ""
        if piece.endswith("\r"):
            piece = piece[:-1]
            ending = "\r" + ending
        yield piece, ending


def is_block_start(line: str) -> bool:
    return line.strip() == BLOCK_START


def is_block_end(line: str) -> bool:
    return line.strip() == BLOCK_END


def parse_import_line(line: str) -> Optional[Import]:
    """Parse one line of an import block.

    The path is the text between the first and the last double quote. Any
    text before the first quote is the alias (an identifier, ``_`` or ``.``).

    Args:
        line: A single line from inside an import block.

    Returns:
        The parsed Import, or None when the line has no quoted path.
    """
    start = line.find('"')
    end = line.rfind('"')
    if start == -1 or end <= start:
        return None
    alias = line[:start].strip()
    return Import(path=line[start + 1:end], alias=alias)


def extract_imports(text: str) -> List[Import]:
    """Return the imports declared in the first ``import (...)`` block.

    Blank lines and ``//`` comments are dropped, lines without a quoted path
    are skipped. Later import blocks are not inspected.
    """
    imports: List[Import] = []
    in_block = False
    for lineno, (line, _) in enumerate(split_lines(text), 1):
        stripped = line.strip()
        if not in_block:
            if stripped == BLOCK_START:
                in_block = True
            continue
        if stripped == BLOCK_END:
            break
        if not stripped or stripped.startswith("//"):
            continue
        imp = parse_import_line(stripped)
        if imp is None:
            LOG.debug("line %d: no quoted import path in %r, skipped", lineno, stripped)
            continue
        imports.append(imp)
    return imports


def find_import_block(text: str) -> Optional[Tuple[int, int]]:
    """Find the first import block.

    Returns:
        Zero-based line indices of the ``import (`` line and of its closing
        ``)`` line, or None if there is no terminated block.
    """
    start: Optional[int] = None
    for i, (line, _) in enumerate(split_lines(text)):
        if start is None:
            if is_block_start(line):
                start = i
        elif is_block_end(line):
            return start, i
    return None
