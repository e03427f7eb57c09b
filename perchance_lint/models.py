"""Data models for perchance-lint."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class HeaderKind(Enum):
    """Shapes a list declaration line can take.

    Attributes:
        NONE: Ordinary content, not a declaration.
        BLOCK_HEADER: A bare list name on its own line (``animal``, ``$meta``).
        SHORTHAND: A one-line declaration (``animal = {cat|dog}``).
        DOLLAR_SHORTHAND: A one-line meta declaration (``$output = [x]``).
        FUNCTION_HEADER: A callable list (``async greet(name) =>``).
    """

    NONE = auto()
    BLOCK_HEADER = auto()
    SHORTHAND = auto()
    DOLLAR_SHORTHAND = auto()
    FUNCTION_HEADER = auto()


class FindingCode(str, Enum):
    """Stable identifiers for every finding the rule engine can emit."""

    UNKNOWN_REFERENCE = "unknown-reference"
    DUPLICATE_LIST = "duplicate-list"
    MIXED_INDENT = "mixed-indent"
    ODD_INDENT = "odd-indent"
    SINGLE_EQUALS = "single-equals"
    SCRIPT_TAG = "script-tag"
    STYLE_TAG = "style-tag"
    HTML_COMMENT = "html-comment"
    LIST_AFTER_HTML = "list-after-html"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IndentInfo:
    """Leading whitespace of a line and its normalized nesting level.

    Attributes:
        raw: The leading run of tabs and spaces.
        level: One unit per tab, one unit per two spaces.
    """

    raw: str
    level: int


@dataclass(frozen=True)
class LineInfo:
    """Classification of a single source line.

    Attributes:
        text: The raw line, without its line terminator.
        indent: Leading whitespace and nesting level.
        content: The line with its indentation removed.
        comment_free: `content` cut at the first ``//``.
        is_blank: True when the line holds only whitespace.
        is_comment: True when the trimmed line opens a ``//`` or ``<!--`` comment.
        header_kind: Declaration shape, `HeaderKind.NONE` for ordinary content.
        name: Declared list name for header lines, otherwise None.
    """

    text: str
    indent: IndentInfo
    content: str
    comment_free: str
    is_blank: bool
    is_comment: bool
    header_kind: HeaderKind
    name: str | None


@dataclass(frozen=True)
class Reference:
    """One ``[[name]]`` occurrence.

    Attributes:
        name: Referenced list name.
        line: Zero-based line index.
        start_col: Column of the opening ``[[``.
        end_col: Column just past the closing ``]]``.
    """

    name: str
    line: int
    start_col: int
    end_col: int


@dataclass(frozen=True)
class Finding:
    """A single diagnostic.

    Attributes:
        line: Zero-based line index, or None for a file-level finding.
        code: Stable finding identifier.
        message: Human-readable description.
        span: Start (inclusive) and end (exclusive) columns, when known.
    """

    line: int | None
    code: FindingCode
    message: str
    span: tuple[int, int] | None = None


@dataclass(frozen=True)
class DiagnosticOptions:
    """Toggles for the structural rules. The reference check is always on."""

    check_duplicates: bool = True
    check_indentation: bool = True
    check_if_else_equals: bool = True

    @property
    def any_structural(self) -> bool:
        return self.check_duplicates or self.check_indentation or self.check_if_else_equals


@dataclass(frozen=True)
class ListContext:
    """Enclosing list names for a position in the document.

    Attributes:
        current: Name of the nearest enclosing list header, if any.
        parent: Name of the header enclosing `current`, if any.
    """

    current: str | None = None
    parent: str | None = None
