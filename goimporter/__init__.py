"""Top-level package for goimporter.

This package exposes the core API for grouping and sorting the import blocks
of Go source files.
"""

from goimporter.core import FileProcessingError
from goimporter.core import format_source
from goimporter.core import is_generated_file
from goimporter.core import iter_go_files
from goimporter.core import process_file
from goimporter.core import rewrite_imports
from goimporter.entities import Import
from goimporter.entities import ImportGroups
from goimporter.entities import RepoConfig
from goimporter.parser import extract_imports
from goimporter.parser import parse_import_line
from goimporter.rules import classify
from goimporter.rules import detect_project


__all__ = [
    "Import",
    "ImportGroups",
    "RepoConfig",
    "extract_imports",
    "parse_import_line",
    "classify",
    "detect_project",
    "rewrite_imports",
    "format_source",
    "is_generated_file",
    "process_file",
    "iter_go_files",
    "FileProcessingError",
]
