"""Line classification for Perchance list syntax."""

from __future__ import annotations

import re

from .constants import (
    ASYNC_PREFIX,
    COMMENT_OPEN,
    DOLLAR_SHORTHAND_PATTERN,
    FUNCTION_HEADER_PATTERN,
    LEADING_WHITESPACE_PATTERN,
    LINE_COMMENT,
    LINE_SPLIT_PATTERN,
    LIST_BLOCK_HEADER_PATTERN,
    LIST_NAME_PATTERN,
    LIST_SHORTHAND_PATTERN,
)
from .models import HeaderKind, IndentInfo, LineInfo

# Evaluated in order; the first pattern that matches decides the kind.
HEADER_RULES: tuple[tuple[HeaderKind, re.Pattern[str]], ...] = (
    (HeaderKind.BLOCK_HEADER, LIST_BLOCK_HEADER_PATTERN),
    (HeaderKind.SHORTHAND, LIST_SHORTHAND_PATTERN),
    (HeaderKind.DOLLAR_SHORTHAND, DOLLAR_SHORTHAND_PATTERN),
    (HeaderKind.FUNCTION_HEADER, FUNCTION_HEADER_PATTERN),
)


def split_lines(text: str) -> list[str]:
    """Split document text into lines, accepting ``\\n`` and ``\\r\\n``.

    A trailing newline produces a final empty line.

    Examples:
        split_lines("a\\r\\nb\\n")  # ["a", "b", ""]
    """
    return LINE_SPLIT_PATTERN.split(text)


def count_indent_level(indent: str) -> int:
    """Convert a leading-whitespace run into a nesting level.

    Each tab counts as one level and every complete pair of spaces counts as
    one level; a leftover single space is dropped.

    Args:
        indent: Leading whitespace of a line.

    Returns:
        int: Nesting level.

    Examples:
        count_indent_level("\\t\\t")  # 2
        count_indent_level("   ")  # 1
    """
    level = 0
    spaces = 0
    for character in indent:
        if character == "\t":
            level += 1
        elif character == " ":
            spaces += 1
            if spaces == 2:
                level += 1
                spaces = 0
    return level


def get_indent_info(line: str) -> IndentInfo:
    indent = LEADING_WHITESPACE_PATTERN.match(line).group(0)
    return IndentInfo(raw=indent, level=count_indent_level(indent))


def strip_comment(text: str) -> str:
    """Cut `text` at the first ``//``."""
    index = text.find(LINE_COMMENT)
    if index == -1:
        return text
    return text[:index]


def is_comment_line(trimmed: str) -> bool:
    return trimmed.startswith(LINE_COMMENT) or trimmed.startswith(COMMENT_OPEN)


def parse_list_name(trimmed: str) -> str | None:
    """Extract the list name a declaration line starts with.

    A leading ``async`` keyword is skipped, then the longest run of name
    characters from the start of the line is taken.

    Args:
        trimmed: Line text with surrounding whitespace removed.

    Returns:
        str | None: The list name, or None when the line does not start with one.

    Examples:
        parse_list_name("animal = {cat|dog}")  # "animal"
        parse_list_name("async greet(name) =>")  # "greet"
    """
    line = trimmed
    if line.startswith(ASYNC_PREFIX):
        line = line[len(ASYNC_PREFIX) :].lstrip()
    match = LIST_NAME_PATTERN.match(line)
    if not match:
        return None
    return match.group(0)


def header_kind(trimmed: str) -> HeaderKind:
    """Return the declaration shape of a trimmed line."""
    if not trimmed:
        return HeaderKind.NONE
    for kind, pattern in HEADER_RULES:
        if pattern.match(trimmed):
            return kind
    return HeaderKind.NONE


def is_list_header_line(trimmed: str) -> bool:
    return header_kind(trimmed) is not HeaderKind.NONE


def classify_line(text: str) -> LineInfo:
    """Classify a raw line of Perchance source.

    Header shapes are matched against the comment-free, trimmed content so that
    ``animal // nouns`` still reads as a block header.

    Args:
        text: The raw line without its terminator.

    Returns:
        LineInfo: Indentation, comment status, header shape, and list name.

    Examples:
        classify_line("  color = red").header_kind  # HeaderKind.SHORTHAND
        classify_line("// note").is_comment  # True
    """
    indent = get_indent_info(text)
    content = text[len(indent.raw) :]
    trimmed = text.strip()
    comment_free = strip_comment(content)

    is_blank = not trimmed
    is_comment = not is_blank and is_comment_line(trimmed)

    kind = HeaderKind.NONE
    name = None
    if not is_blank and not is_comment:
        declaration = comment_free.strip()
        kind = header_kind(declaration)
        if kind is not HeaderKind.NONE:
            name = parse_list_name(declaration)

    return LineInfo(
        text=text,
        indent=indent,
        content=content,
        comment_free=comment_free,
        is_blank=is_blank,
        is_comment=is_comment,
        header_kind=kind,
        name=name,
    )
