"""
perchance-lint: structural checks for Perchance generator sources.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    perchance-lint check animals.perchance
    perchance-lint report assets/examples --top 10

Library Usage:
    from pathlib import Path
    from perchance_lint import run_diagnostics, split_lines

    lines = split_lines(Path("animals.perchance").read_text())
    for finding in run_diagnostics(lines):
        print(finding.line, finding.message)
"""

from .analyzer import analyze_text
from .boundary import find_markup_boundary
from .classifier import classify_line, count_indent_level, parse_list_name, split_lines
from .exceptions import FileTooLargeError, LintError, MissingDirectoryError, SourceReadError
from .extractor import extract_definitions, extract_references
from .markup import check_markup_balance
from .models import (
    DiagnosticOptions,
    Finding,
    FindingCode,
    HeaderKind,
    IndentInfo,
    LineInfo,
    ListContext,
    Reference,
)
from .rules import apply_single_equals_fix, fix_document, run_diagnostics
from .structure import find_list_context, folding_ranges, format_lines

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "classify_line",
    "count_indent_level",
    "parse_list_name",
    "split_lines",
    "find_markup_boundary",
    "extract_definitions",
    "extract_references",
    "run_diagnostics",
    "apply_single_equals_fix",
    "check_markup_balance",
    "analyze_text",
    # Structure
    "find_list_context",
    "folding_ranges",
    "format_lines",
    "fix_document",
    # Data models
    "DiagnosticOptions",
    "Finding",
    "FindingCode",
    "HeaderKind",
    "IndentInfo",
    "LineInfo",
    "ListContext",
    "Reference",
    # Exceptions
    "FileTooLargeError",
    "LintError",
    "MissingDirectoryError",
    "SourceReadError",
    # Version
    "__version__",
]
