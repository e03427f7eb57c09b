"""Constants used across the perchance-lint package."""

from __future__ import annotations

import re

# Declaration shapes, tested in this order by the classifier.
LIST_BLOCK_HEADER_PATTERN = re.compile(r"^([A-Za-z_][A-Za-z0-9_-]*|\$[A-Za-z_][A-Za-z0-9_-]*)$")
LIST_SHORTHAND_PATTERN = re.compile(r"^([A-Za-z_][A-Za-z0-9_-]*)\s*=")
DOLLAR_SHORTHAND_PATTERN = re.compile(r"^\$([A-Za-z_][A-Za-z0-9_-]*)\s*=")
FUNCTION_HEADER_PATTERN = re.compile(r"^(async\s+)?[A-Za-z_][A-Za-z0-9_$-]*\s*\([^)]*\)\s*=>\s*$")

LIST_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_$][\w$-]*")
LIST_REFERENCE_PATTERN = re.compile(r"\[\[([A-Za-z_][A-Za-z0-9_-]*)\]\]")
LEADING_WHITESPACE_PATTERN = re.compile(r"^[\t ]*")
LINE_SPLIT_PATTERN = re.compile(r"\r?\n")

# Markup region
MARKUP_TAG_PATTERN = re.compile(r"</?[A-Za-z]")
PLACEHOLDER_MARKER = "<<<<<"

# Bracketed conditionals
BRACKET_SPAN_PATTERN = re.compile(r"\[([^\]]+)\]")
TERNARY_SPAN_PATTERN = re.compile(r"\[([^\]]+\?[^\]]+:[^\]]+)\]")
EQUALS_BLOCKING_PREDECESSORS = frozenset("=!><")
EQUALS_BLOCKING_SUCCESSORS = frozenset("=>")

# Markup balance
SCRIPT_OPEN_PATTERN = re.compile(r"<script\b[^>]*>", re.IGNORECASE)
SCRIPT_CLOSE_PATTERN = re.compile(r"</script>", re.IGNORECASE)
STYLE_OPEN_PATTERN = re.compile(r"<style\b[^>]*>", re.IGNORECASE)
STYLE_CLOSE_PATTERN = re.compile(r"</style>", re.IGNORECASE)
COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"

LINE_COMMENT = "//"
ASYNC_PREFIX = "async "

# Batch report
HTML_EXTENSIONS = (".html", ".htm")
DEFAULT_EXTENSIONS = (".html", ".perchance")
DEFAULT_TOP = 10
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
REPORT_TITLE = "Perchance example validation report (top {top} by size)"
