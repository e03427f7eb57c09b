"""Diagnostic rules for Perchance list syntax."""

from __future__ import annotations

from collections.abc import Sequence

from .boundary import find_markup_boundary
from .classifier import classify_line, is_list_header_line
from .constants import (
    BRACKET_SPAN_PATTERN,
    COMMENT_OPEN,
    EQUALS_BLOCKING_PREDECESSORS,
    EQUALS_BLOCKING_SUCCESSORS,
    TERNARY_SPAN_PATTERN,
)
from .extractor import extract_definitions, extract_references, find_duplicate_definitions
from .models import DiagnosticOptions, Finding, FindingCode, HeaderKind

UNKNOWN_REFERENCE_MESSAGE = "Unknown list reference: {name}"
DUPLICATE_LIST_MESSAGE = "Duplicate top-level list name: {name}"
MIXED_INDENT_MESSAGE = "Mixed tabs and spaces in indentation"
ODD_INDENT_MESSAGE = "Indentation should use tabs or multiples of two spaces"
SINGLE_EQUALS_MESSAGE = "If/else conditions should use == instead of ="
LIST_AFTER_HTML_MESSAGE = "List header appears after HTML start"


def find_single_equals(text: str) -> int | None:
    """Return the index of the first lone ``=`` in `text`.

    An ``=`` belonging to ``==``, ``!=``, ``>=``, ``<=``, or ``=>`` does not
    count.

    Args:
        text: Condition text to scan.

    Returns:
        int | None: Index of the offending ``=``, or None.

    Examples:
        find_single_equals("x = 1 ")  # 2
        find_single_equals("x >= 1 ")  # None
    """
    for index, character in enumerate(text):
        if character != "=":
            continue
        previous = text[index - 1] if index > 0 else ""
        following = text[index + 1] if index + 1 < len(text) else ""
        if previous and previous in EQUALS_BLOCKING_PREDECESSORS:
            continue
        if following and following in EQUALS_BLOCKING_SUCCESSORS:
            continue
        return index
    return None


def has_single_equals(text: str) -> bool:
    return find_single_equals(text) is not None


def find_if_else_single_equals(text: str) -> list[tuple[int, int]]:
    """Locate bracketed conditionals whose condition uses a lone ``=``.

    Args:
        text: Comment-free line content.

    Returns:
        list[tuple[int, int]]: Column span of each offending ``[...]`` block,
            at most one per block.

    Examples:
        find_if_else_single_equals('[x = 1 ? "a" : "b"]')  # [(0, 19)]
    """
    spans: list[tuple[int, int]] = []
    for match in BRACKET_SPAN_PATTERN.finditer(text):
        block = match.group(1)
        question_index = block.find("?")
        colon_index = block.find(":")
        if question_index == -1 or colon_index == -1:
            continue
        if has_single_equals(block[:question_index]):
            spans.append((match.start(), match.end()))
    return spans


def apply_single_equals_fix(line_text: str) -> str | None:
    """Rewrite the first lone ``=`` of the first bracketed conditional to ``==``.

    Only the matched ``[...]`` block is changed; the rest of the line is kept
    as is.

    Args:
        line_text: Full raw line.

    Returns:
        str | None: The corrected line, or None when no fix applies.

    Examples:
        apply_single_equals_fix('  [x = 1 ? "a" : "b"]')  # '  [x == 1 ? "a" : "b"]'
    """
    match = TERNARY_SPAN_PATTERN.search(line_text)
    if not match:
        return None

    block = match.group(1)
    question_index = block.find("?")
    if question_index == -1:
        return None

    condition = block[:question_index]
    equals_index = find_single_equals(condition)
    if equals_index is None:
        return None

    fixed_condition = condition[:equals_index] + "==" + condition[equals_index + 1 :]
    fixed_block = f"[{fixed_condition}{block[question_index:]}]"
    return line_text[: match.start()] + fixed_block + line_text[match.end() :]


def find_list_after_markup(lines: Sequence[str], boundary: int | None = None) -> list[Finding]:
    """Flag the first list declaration that appears inside the HTML region."""
    if boundary is None:
        boundary = find_markup_boundary(lines)

    for index in range(boundary, len(lines)):
        trimmed = lines[index].strip()
        if not trimmed or trimmed.startswith(COMMENT_OPEN):
            continue
        if is_list_header_line(trimmed):
            return [Finding(index, FindingCode.LIST_AFTER_HTML, LIST_AFTER_HTML_MESSAGE)]
    return []


def check_unknown_references(
    lines: Sequence[str], definitions: dict[str, int]
) -> list[Finding]:
    findings: list[Finding] = []
    for reference in extract_references(lines):
        if reference.name in definitions:
            continue
        findings.append(
            Finding(
                reference.line,
                FindingCode.UNKNOWN_REFERENCE,
                UNKNOWN_REFERENCE_MESSAGE.format(name=reference.name),
                (reference.start_col, reference.end_col),
            )
        )
    return findings


def run_diagnostics(
    lines: Sequence[str], options: DiagnosticOptions | None = None
) -> list[Finding]:
    """Run the rule set over a document.

    The unknown-reference rule always runs. Duplicate names, indentation, and
    single-equals conditionals are checked on the list region only, and only
    when enabled in `options`. Lines nested under a function header hold
    JavaScript, so the single-equals rule skips them.

    Args:
        lines: Document lines.
        options: Rule toggles. Defaults to all rules enabled.

    Returns:
        list[Finding]: Reference findings followed by structural findings in
            line order.

    Examples:
        run_diagnostics(["animal", "  [[color]]"])
        # [Finding(1, FindingCode.UNKNOWN_REFERENCE, "Unknown list reference: color", (2, 11))]
    """
    options = options or DiagnosticOptions()
    boundary = find_markup_boundary(lines)
    definitions = extract_definitions(lines, boundary)

    findings = check_unknown_references(lines, definitions)
    if not options.any_structural:
        return findings

    duplicates = dict(find_duplicate_definitions(lines, boundary)) if options.check_duplicates else {}
    function_indent_level: int | None = None

    for index in range(boundary):
        info = classify_line(lines[index])
        if info.is_blank or info.is_comment:
            continue

        indent = info.indent.raw
        level = info.indent.level

        if function_indent_level is not None and level <= function_indent_level:
            function_indent_level = None
        if info.header_kind is HeaderKind.FUNCTION_HEADER:
            function_indent_level = level

        name = duplicates.get(index)
        if name is not None:
            findings.append(
                Finding(
                    index,
                    FindingCode.DUPLICATE_LIST,
                    DUPLICATE_LIST_MESSAGE.format(name=name),
                    (0, len(name)),
                )
            )

        if options.check_indentation and indent:
            if "\t" in indent and " " in indent:
                findings.append(
                    Finding(index, FindingCode.MIXED_INDENT, MIXED_INDENT_MESSAGE, (0, len(indent)))
                )
            space_count = len(indent.replace("\t", ""))
            if space_count % 2 != 0:
                findings.append(
                    Finding(index, FindingCode.ODD_INDENT, ODD_INDENT_MESSAGE, (0, len(indent)))
                )

        in_function_body = function_indent_level is not None and level > function_indent_level
        if options.check_if_else_equals and not in_function_body:
            for start, end in find_if_else_single_equals(info.comment_free):
                findings.append(
                    Finding(
                        index,
                        FindingCode.SINGLE_EQUALS,
                        SINGLE_EQUALS_MESSAGE,
                        (len(indent) + start, len(indent) + end),
                    )
                )

    return findings


def fix_document(lines: Sequence[str], options: DiagnosticOptions | None = None) -> tuple[list[str], int]:
    """Apply the single-equals quick-fix to every flagged line.

    Args:
        lines: Document lines.
        options: Rule toggles passed to `run_diagnostics`.

    Returns:
        tuple[list[str], int]: Updated lines and the number of lines changed.
    """
    fixed = list(lines)
    flagged = sorted(
        {
            finding.line
            for finding in run_diagnostics(lines, options)
            if finding.code is FindingCode.SINGLE_EQUALS and finding.line is not None
        }
    )
    changed = 0
    for index in flagged:
        updated = apply_single_equals_fix(fixed[index])
        if updated is None or updated == fixed[index]:
            continue
        fixed[index] = updated
        changed += 1
    return fixed, changed
