#!/usr/bin/env python3
"""Core utilities for goimporter. This module rebuilds the import block of
Go source files from classified import groups, and exposes the functions used
by the command line to discover Go files, skip generated ones and rewrite
them in place.
"""
from __future__ import annotations
import enum
import logging
from pathlib import Path
from typing import Iterator
from typing import List
from typing import Tuple

from goimporter.entities import ImportGroups
from goimporter.entities import RepoConfig
from goimporter.parser import BLOCK_START
from goimporter.parser import extract_imports
from goimporter.parser import find_import_block
from goimporter.parser import is_block_end
from goimporter.parser import is_block_start
from goimporter.parser import split_lines
from goimporter.rules import classify

LOG = logging.getLogger(__name__)

GENERATED_MARKERS = (
    "do not edit",
    "auto-generated",
    "autogenerated",
    "code generated",
    "by mockgen",
    "by protoc",
    "automatically generated",
)


class FileProcessingError(Exception):
    """A Go file could not be read, decoded or written."""

    def __init__(self, path, reason):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class BlockState(enum.Enum):
    OUTSIDE = "outside"
    IN_FIRST_BLOCK = "in_first_block"
    SKIPPING_EXTRA_BLOCK = "skipping_extra_block"


def render_import_block(groups: ImportGroups, indent: str, newline: str = "\n") -> List[str]:
    """Render the grouped imports as block body lines, one blank line between groups."""
    lines: List[str] = []
    for _, imports in groups:
        if not imports:
            continue
        if lines:
            lines.append(newline)
        for imp in imports:
            lines.append(f"{indent}\t{imp.render()}{newline}")
    return lines


def rewrite_imports(source: str, groups: ImportGroups) -> str:
    """Rewrite the first import block of source with groups.

    Any later ``import (...)`` blocks are removed, brackets included. All
    other lines are kept verbatim, line endings included.
    """
    out: List[str] = []
    state = BlockState.OUTSIDE
    seen_first = False

    for line, ending in split_lines(source):
        if state is BlockState.IN_FIRST_BLOCK:
            if is_block_end(line):
                out.append(line + ending)
                state = BlockState.OUTSIDE
            continue
        if state is BlockState.SKIPPING_EXTRA_BLOCK:
            if is_block_end(line):
                state = BlockState.OUTSIDE
            continue
        if is_block_start(line):
            if seen_first:
                state = BlockState.SKIPPING_EXTRA_BLOCK
                continue
            seen_first = True
            state = BlockState.IN_FIRST_BLOCK
            indent = line[:line.index(BLOCK_START)]
            out.append(line + ending)
            out.extend(render_import_block(groups, indent, ending or "\n"))
            continue
        out.append(line + ending)

    return "".join(out)


def format_source(source: str, repo: RepoConfig) -> Tuple[str, bool]:
    """Group and sort the imports of a Go source.

    Returns a tuple (new_source, changed). Sources without an import block,
    or whose first block is never closed, are returned unchanged.
    """
    imports = extract_imports(source)
    if not imports:
        LOG.debug("No import block found.")
        return source, False
    if find_import_block(source) is None:
        LOG.debug("Import block is not terminated, leaving source unchanged.")
        return source, False

    groups = classify(imports, repo)
    new_source = rewrite_imports(source, groups)
    return new_source, new_source != source


def is_generated_file(source: str) -> bool:
    """Return True if the header before the package clause marks the file as generated."""
    found_package = False
    for lineno, (line, _) in enumerate(split_lines(source), 1):
        if lineno > 10:
            break
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith("package "):
            found_package = True
            continue
        if found_package:
            continue

        lowered = line.lower()
        if "generated" in lowered and ("//" in line or "/*" in line):
            return True
        if any(marker in lowered for marker in GENERATED_MARKERS):
            return True
    return False


def read_source(path: Path) -> str:
    try:
        return path.read_bytes().decode("utf-8")
    except OSError as e:
        raise FileProcessingError(path, f"could not read file: {e}") from e
    except UnicodeDecodeError as e:
        raise FileProcessingError(path, f"not valid UTF-8: {e}") from e


def process_file(file_path, repo: RepoConfig, apply: bool = False) -> bool:
    """Process a single Go file and regroup its imports.

    Returns True if the file was rewritten (apply) or would be (dry run).

    Raises:
        FileProcessingError: If the file cannot be read or written.
    """
    path_obj = Path(file_path)
    source = read_source(path_obj)

    if is_generated_file(source):
        LOG.info("[%s] skipping generated file.", path_obj)
        return False

    new_source, changed = format_source(source, repo)
    if not changed:
        return False

    if apply:
        try:
            path_obj.write_bytes(new_source.encode("utf-8"))
        except OSError as e:
            raise FileProcessingError(path_obj, f"could not write file: {e}") from e
    return True


def iter_go_files(root, recursive: bool = False, exclude_mock: bool = True) -> Iterator[Path]:
    """Yield Go files under root, optionally recursing and skipping mocks."""
    root_path = Path(root)
    if root_path.is_file():
        yield root_path
        return

    candidates = root_path.rglob("*.go") if recursive else root_path.glob("*.go")
    for path in sorted(candidates):
        if not path.is_file():
            continue
        if exclude_mock and "mock" in path.relative_to(root_path).as_posix():
            LOG.debug("[%s] skipping mock file.", path)
            continue
        yield path
