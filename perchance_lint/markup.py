"""Coarse tag-balance checks for the HTML region."""

from __future__ import annotations

import re

from .constants import (
    COMMENT_CLOSE,
    COMMENT_OPEN,
    SCRIPT_CLOSE_PATTERN,
    SCRIPT_OPEN_PATTERN,
    STYLE_CLOSE_PATTERN,
    STYLE_OPEN_PATTERN,
)
from .models import Finding, FindingCode

BALANCE_CHECKS: tuple[tuple[FindingCode, str, re.Pattern[str], re.Pattern[str]], ...] = (
    (FindingCode.SCRIPT_TAG, "Script tag", SCRIPT_OPEN_PATTERN, SCRIPT_CLOSE_PATTERN),
    (FindingCode.STYLE_TAG, "Style tag", STYLE_OPEN_PATTERN, STYLE_CLOSE_PATTERN),
    (
        FindingCode.HTML_COMMENT,
        "HTML comment",
        re.compile(re.escape(COMMENT_OPEN)),
        re.compile(re.escape(COMMENT_CLOSE)),
    ),
)


def count_matches(pattern: re.Pattern[str], text: str) -> int:
    return sum(1 for _ in pattern.finditer(text))


def check_markup_balance(text: str) -> list[Finding]:
    """Compare opening and closing counts of script, style, and comment markup.

    Counting is case-insensitive for tags and ignores nesting and order; it is
    a sanity check, not an HTML parser.

    Args:
        text: Markup to inspect.

    Returns:
        list[Finding]: One file-level finding per mismatched pair.

    Examples:
        check_markup_balance("<script>alert(1)")
        # [Finding(None, FindingCode.SCRIPT_TAG, "Script tag count mismatch (open 1, close 0)")]
    """
    findings: list[Finding] = []
    for code, label, open_pattern, close_pattern in BALANCE_CHECKS:
        opened = count_matches(open_pattern, text)
        closed = count_matches(close_pattern, text)
        if opened != closed:
            findings.append(
                Finding(None, code, f"{label} count mismatch (open {opened}, close {closed})")
            )
    return findings
