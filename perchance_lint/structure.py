"""Structural queries over list syntax: nesting context, folding, formatting."""

from __future__ import annotations

import re
from collections.abc import Sequence

from .boundary import find_markup_boundary
from .classifier import classify_line
from .constants import LINE_COMMENT
from .models import HeaderKind, ListContext

CONTAINER_KINDS = frozenset({HeaderKind.BLOCK_HEADER, HeaderKind.FUNCTION_HEADER})
TRAILING_WHITESPACE_PATTERN = re.compile(r"[\t ]+$")


def find_list_context(lines: Sequence[str], line_index: int) -> ListContext:
    """Find the list headers enclosing a line.

    Walks upwards from `line_index`, collecting block or function headers that
    sit at a shallower indentation than the last one found.

    Args:
        lines: Document lines.
        line_index: Zero-based index of the line of interest.

    Returns:
        ListContext: Nearest enclosing header and its parent, when present.

    Examples:
        find_list_context(["character", "  name", "    Ada Lovelace"], 2)
        # ListContext(current="name", parent="character")
    """
    if not 0 <= line_index < len(lines):
        return ListContext()

    indent_limit = classify_line(lines[line_index]).indent.level + 1
    names: list[str] = []

    for index in range(line_index, -1, -1):
        info = classify_line(lines[index])
        if info.is_blank or info.is_comment:
            continue
        if info.indent.level < indent_limit and info.header_kind in CONTAINER_KINDS and info.name:
            names.append(info.name)
            indent_limit = info.indent.level
        if len(names) >= 2:
            break

    return ListContext(
        current=names[0] if names else None,
        parent=names[1] if len(names) > 1 else None,
    )


def folding_ranges(lines: Sequence[str], boundary: int | None = None) -> list[tuple[int, int]]:
    """Compute one foldable range per top-level list.

    Each range spans from a top-level line to the line before the next
    top-level line, or to the line before the HTML region.

    Returns:
        list[tuple[int, int]]: Inclusive zero-based start and end lines.
    """
    if boundary is None:
        boundary = find_markup_boundary(lines)

    starts = []
    for index in range(min(boundary, len(lines))):
        info = classify_line(lines[index])
        if info.is_blank or info.text.strip().startswith(LINE_COMMENT):
            continue
        if not info.indent.raw:
            starts.append(index)

    ranges = []
    for position, start in enumerate(starts):
        next_start = starts[position + 1] if position + 1 < len(starts) else boundary
        end = next_start - 1
        if end > start:
            ranges.append((start, end))
    return ranges


def format_lines(
    lines: Sequence[str],
    indent_size: int = 2,
    trim_trailing: bool = True,
    normalize_indent: bool = True,
) -> list[str]:
    """Tidy the list region of a document.

    Trailing whitespace is removed and, inside blocks opened by a block
    header, indentation is rewritten to `indent_size` spaces per nesting
    level. An indented line never drops below one level, so items stay
    inside their list. Lines nested under a function header and the HTML
    region are left untouched.

    Args:
        lines: Document lines.
        indent_size: Spaces per nesting level.
        trim_trailing: Whether to strip trailing tabs and spaces.
        normalize_indent: Whether to rewrite indentation inside list blocks.

    Returns:
        list[str]: Formatted lines, one per input line.

    Examples:
        format_lines(["animal", "\\tcat  "])  # ["animal", "  cat"]
    """
    indent_size = max(1, indent_size)
    boundary = find_markup_boundary(lines)
    formatted = list(lines)
    in_list_block = False
    function_indent_level: int | None = None

    for index in range(boundary):
        info = classify_line(formatted[index])
        if function_indent_level is not None:
            if info.is_blank or info.indent.level > function_indent_level:
                continue
            function_indent_level = None

        text = formatted[index]
        if trim_trailing:
            text = TRAILING_WHITESPACE_PATTERN.sub("", text)
            formatted[index] = text
            info = classify_line(text)

        trimmed = text.strip()
        if info.is_blank or trimmed.startswith(LINE_COMMENT) or trimmed.startswith("<"):
            in_list_block = False
            continue

        if info.header_kind is HeaderKind.FUNCTION_HEADER:
            function_indent_level = info.indent.level
            in_list_block = False
            continue
        if info.header_kind is HeaderKind.BLOCK_HEADER:
            in_list_block = True
        elif not (in_list_block and info.indent.raw):
            in_list_block = False
            continue

        if normalize_indent and info.indent.raw:
            level = max(1, info.indent.level)
            formatted[index] = " " * (indent_size * level) + trimmed

    return formatted
