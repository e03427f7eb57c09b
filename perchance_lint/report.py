"""Plain-text batch report over the largest sources in a directory."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .analyzer import analyze_text, source_kind
from .config import LintConfig
from .constants import REPORT_TITLE
from .exceptions import LintError
from .filesystem import collect_files, format_size, largest_by_extension, read_source
from .models import Finding


@dataclass
class ReportEntry:
    """Analysis outcome for one file in a report.

    Attributes:
        path: Absolute path of the file.
        size: File size in bytes.
        findings: Findings produced for the file.
        error: Reason the file was skipped, or None when it was analyzed.
    """

    path: Path
    size: int
    findings: list[Finding] = field(default_factory=list)
    error: str | None = None


def format_location(finding: Finding) -> str:
    if finding.line is None:
        return "file"
    return f"line {finding.line + 1}"


def format_finding(finding: Finding) -> str:
    return f"{format_location(finding)}: {finding.message} [{finding.code.value}]"


def analyze_entries(
    directory: Path,
    extension: str,
    config: LintConfig,
    files: list[Path],
    warn: Callable[[str], None] | None = None,
) -> list[ReportEntry]:
    entries = []
    for path, size in largest_by_extension(files, extension, config.top, warn):
        entry = ReportEntry(path=path, size=size)
        try:
            text, _ = read_source(path, config.max_file_size)
        except LintError as error:
            entry.error = str(error)
            if warn is not None:
                warn(f"Warning: skipping {path.relative_to(directory).as_posix()}: {error}")
        else:
            entry.findings = analyze_text(text, source_kind(path), config)
        entries.append(entry)
    return entries


def render_section(directory: Path, extension: str, entries: list[ReportEntry]) -> list[str]:
    lines = [f"== {extension.lstrip('.').upper()} =="]
    for entry in entries:
        relative_path = entry.path.relative_to(directory).as_posix()
        lines.append(f"- {relative_path} ({format_size(entry.size)})")
        if entry.error is not None:
            lines.append(f"  skipped: {entry.error}")
            continue
        if not entry.findings:
            lines.append("  OK")
            continue
        lines.extend(f"  {format_finding(finding)}" for finding in entry.findings)
    lines.append("")
    return lines


def build_report(
    directory: Path,
    config: LintConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> str:
    """Analyze the largest files of each configured extension and render a report.

    Args:
        directory: Root directory scanned recursively.
        config: Report size, extensions, and rule toggles. Defaults to a new
            `LintConfig`.
        warn: Optional callback for files that are skipped.

    Returns:
        str: Report text. Sections follow the order of `config.extensions`;
            files inside a section are ordered by size, largest first.

    Raises:
        MissingDirectoryError: If `directory` does not exist.

    Examples:
        print(build_report(Path("assets/examples"), LintConfig(top=3)))
    """
    config = config or LintConfig()
    directory = directory.resolve()
    files = collect_files(directory)

    lines = [REPORT_TITLE.format(top=config.top), ""]
    for extension in config.extensions:
        entries = analyze_entries(directory, extension, config, files, warn)
        lines.extend(render_section(directory, extension, entries))
    return "\n".join(lines)
