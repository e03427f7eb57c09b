"""Extraction of list definitions and ``[[name]]`` references."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from .boundary import find_markup_boundary
from .classifier import classify_line
from .constants import LIST_REFERENCE_PATTERN
from .models import Reference


def iter_top_level_declarations(
    lines: Sequence[str], boundary: int | None = None
) -> Iterator[tuple[int, str]]:
    """Yield every top-level list declaration before the HTML region.

    Blank lines, comments, and lines opening with ``<`` are skipped. Names
    starting with ``$`` are meta lists and are never yielded.

    Args:
        lines: Document lines.
        boundary: Index of the first HTML line; computed when omitted.

    Yields:
        tuple[int, str]: Zero-based line index and declared list name, in
            document order and including repeated names.
    """
    if boundary is None:
        boundary = find_markup_boundary(lines)

    for index in range(min(boundary, len(lines))):
        info = classify_line(lines[index])
        if info.is_blank or info.is_comment or info.content.startswith("<"):
            continue
        if info.indent.raw or info.name is None:
            continue
        if info.name.startswith("$"):
            continue
        yield index, info.name


def extract_definitions(lines: Sequence[str], boundary: int | None = None) -> dict[str, int]:
    """Map each top-level list name to the line that first declares it.

    Later declarations of the same name do not overwrite the first one; they
    are reported by the duplicate-name rule instead.

    Args:
        lines: Document lines.
        boundary: Index of the first HTML line; computed when omitted.

    Returns:
        dict[str, int]: List name to zero-based line index.

    Examples:
        extract_definitions(["animal", "  cat", "color = red"])
        # {"animal": 0, "color": 2}
    """
    definitions: dict[str, int] = {}
    for index, name in iter_top_level_declarations(lines, boundary):
        definitions.setdefault(name, index)
    return definitions


def find_duplicate_definitions(
    lines: Sequence[str], boundary: int | None = None
) -> list[tuple[int, str]]:
    """Return top-level declarations whose name was already declared above."""
    seen: set[str] = set()
    duplicates: list[tuple[int, str]] = []
    for index, name in iter_top_level_declarations(lines, boundary):
        if name in seen:
            duplicates.append((index, name))
        else:
            seen.add(name)
    return duplicates


def extract_references(lines: Sequence[str]) -> list[Reference]:
    """Collect every ``[[name]]`` occurrence in the document.

    Both the list region and the HTML region are scanned. Repeated references
    each produce their own record.

    Args:
        lines: Document lines.

    Returns:
        list[Reference]: References in document order.

    Examples:
        extract_references(["[[a]] and [[b]]"])
        # [Reference("a", 0, 0, 5), Reference("b", 0, 10, 15)]
    """
    references: list[Reference] = []
    for line_number, line in enumerate(lines):
        for match in LIST_REFERENCE_PATTERN.finditer(line):
            references.append(
                Reference(
                    name=match.group(1),
                    line=line_number,
                    start_col=match.start(),
                    end_col=match.end(),
                )
            )
    return references
