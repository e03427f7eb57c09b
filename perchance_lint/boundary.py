"""Detection of the boundary between list syntax and trailing HTML."""

from __future__ import annotations

from collections.abc import Sequence

from .constants import MARKUP_TAG_PATTERN, PLACEHOLDER_MARKER


def looks_like_markup_start(line: str) -> bool:
    """Determine whether a line opens the HTML region.

    Args:
        line: Raw line text.

    Returns:
        bool: True when the left-trimmed line starts with a tag opener. Lines
            starting with ``<<<<<`` are placeholder markers, not markup.

    Examples:
        looks_like_markup_start("  <div class='x'>")  # True
        looks_like_markup_start("<<<<<name>>>>>")  # False
    """
    trimmed = line.lstrip()
    if not trimmed.startswith("<"):
        return False
    if trimmed.startswith(PLACEHOLDER_MARKER):
        return False
    return MARKUP_TAG_PATTERN.search(trimmed) is not None


def find_markup_boundary(lines: Sequence[str]) -> int:
    """Locate the first line of the HTML region.

    The HTML region starts at the first tag-opening line that directly follows
    a blank line.

    Args:
        lines: Document lines.

    Returns:
        int: Zero-based index of the first HTML line, or ``len(lines)`` when the
            document has no HTML region.

    Examples:
        find_markup_boundary(["animal", "  cat", "", "<div>"])  # 3
        find_markup_boundary(["animal", "<div>"])  # 2
    """
    saw_blank = False
    for index, line in enumerate(lines):
        if not line.strip():
            saw_blank = True
            continue
        if saw_blank and looks_like_markup_start(line):
            return index
        saw_blank = False
    return len(lines)
