"""Entry point tying the rules together for whole files."""

from __future__ import annotations

from pathlib import Path

from .boundary import find_markup_boundary
from .classifier import split_lines
from .config import LintConfig
from .constants import HTML_EXTENSIONS
from .markup import check_markup_balance
from .models import Finding
from .rules import find_list_after_markup, run_diagnostics

PERCHANCE = "perchance"
HTML = "html"


def source_kind(path: Path) -> str:
    """Return ``"html"`` for HTML files and ``"perchance"`` for everything else."""
    if path.suffix.lower() in HTML_EXTENSIONS:
        return HTML
    return PERCHANCE


def analyze_text(text: str, kind: str = PERCHANCE, config: LintConfig | None = None) -> list[Finding]:
    """Analyze a whole source file.

    HTML files only get the markup-balance checks. Perchance sources get the
    list rules, a check for list declarations inside the HTML region, and the
    markup-balance checks over that region.

    Args:
        text: File content.
        kind: ``"perchance"`` or ``"html"``.
        config: Rule configuration. Defaults to a new `LintConfig`.

    Returns:
        list[Finding]: Findings in a deterministic order; empty when
            diagnostics are disabled.

    Examples:
        analyze_text("animal\\n  [[color]]\\n")
    """
    config = config or LintConfig()
    if not config.enable_diagnostics:
        return []

    if kind == HTML:
        return check_markup_balance(text) if config.check_markup_balance else []

    lines = split_lines(text)
    boundary = find_markup_boundary(lines)

    findings = run_diagnostics(lines, config.diagnostic_options)
    findings.extend(find_list_after_markup(lines, boundary))
    if config.check_markup_balance and boundary < len(lines):
        findings.extend(check_markup_balance("\n".join(lines[boundary:])))
    return findings
