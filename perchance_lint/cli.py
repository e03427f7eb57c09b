"""
Checks Perchance generator sources for common list mistakes.
Findings are printed one per line; `report` summarizes the largest files of a directory.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import click
from .analyzer import HTML, analyze_text, source_kind
from .classifier import split_lines
from .config import ConfigError, LintConfig, build_config
from .exceptions import LintError, MissingDirectoryError
from .filesystem import (
    get_max_file_size,
    normalize_filepath,
    read_source,
    write_text_atomic,
)
from .models import Finding, FindingCode
from .report import build_report
from .rules import fix_document
from .structure import format_lines

__all__ = ["cli"]

DEFAULT_EXAMPLES_DIR = "assets/examples"


def _warn(message: str) -> None:
    click.echo(message, err=True)


def _load_config(**overrides: object) -> LintConfig:
    try:
        config = build_config(Path.cwd(), **overrides)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error
    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    return replace(config, max_file_size=max_file_size)


def _resolve(raw_path: str, config: LintConfig) -> Path:
    try:
        return normalize_filepath(raw_path, config.extensions)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error


def _display_path(path: Path) -> str:
    try:
        return path.relative_to(Path.cwd().resolve()).as_posix()
    except ValueError:
        return str(path)


def _newline_for(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def format_finding_line(display_path: str, finding: Finding) -> str:
    """Render a finding as ``path:line:col: message [code]``."""
    location = display_path
    if finding.line is not None:
        column = finding.span[0] + 1 if finding.span else 1
        location = f"{display_path}:{finding.line + 1}:{column}"
    return f"{location}: {finding.message} [{finding.code.value}]"


@click.group()
@click.version_option()
def cli():
    """Lint Perchance generator sources."""


@cli.command()
@click.option("--fix", is_flag=True, help="Rewrite `=` to `==` in flagged conditionals")
@click.option("--duplicates/--no-duplicates", default=None, help="Check duplicate list names")
@click.option("--indentation/--no-indentation", default=None, help="Check indentation")
@click.option(
    "--single-equals/--no-single-equals", default=None, help="Check `=` in [a ? b : c] conditions"
)
@click.argument("filepaths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def check(
    ctx: click.Context,
    filepaths: tuple[str, ...],
    fix: bool = False,
    duplicates: bool | None = None,
    indentation: bool | None = None,
    single_equals: bool | None = None,
):
    """
    Report findings for one or more source files.

    Args:
        filepaths: Perchance or HTML files to check.
        fix: Apply the single-equals quick-fix in place before reporting.
        duplicates: Override for the duplicate-name rule.
        indentation: Override for the indentation rules.
        single_equals: Override for the single-equals rule.

    Returns:
        None. Exits with status 1 when any finding remains.

    Raises:
        click.BadParameter: If a path or a configuration value is invalid.
        click.ClickException: If a file cannot be read or rewritten.

    Examples:
        perchance-lint check animals.perchance --no-indentation
    """
    config = _load_config(
        check_duplicate_names=duplicates,
        check_indentation=indentation,
        check_single_equals=single_equals,
    )

    total = 0
    for raw_path in filepaths:
        filepath = _resolve(raw_path, config)
        try:
            text, file_stat = read_source(filepath, config.max_file_size)
        except LintError as error:
            raise click.ClickException(str(error)) from error

        kind = source_kind(filepath)
        findings = analyze_text(text, kind, config)

        has_fixable = any(finding.code is FindingCode.SINGLE_EQUALS for finding in findings)
        if fix and kind != HTML and has_fixable:
            fixed_lines, changed = fix_document(split_lines(text), config.diagnostic_options)
            if changed:
                text = _newline_for(text).join(fixed_lines)
                try:
                    write_text_atomic(filepath, text, file_stat, warn=_warn)
                except IOError as error:
                    raise click.ClickException(str(error)) from error
                _warn(f"Fixed {changed} line(s) in {_display_path(filepath)}")
                findings = analyze_text(text, kind, config)

        display_path = _display_path(filepath)
        for finding in findings:
            click.echo(format_finding_line(display_path, finding))
        total += len(findings)

    if total:
        ctx.exit(1)


@cli.command()
@click.argument(
    "directory", required=False, default=DEFAULT_EXAMPLES_DIR, type=click.Path(file_okay=False)
)
@click.option("--top", type=click.IntRange(min=1), help="Files to sample per extension")
@click.option("--output", "output_path", type=click.Path(dir_okay=False), help="Write report to file")
def report(directory: str, top: int | None = None, output_path: str | None = None):
    """
    Summarize findings for the largest files of each extension in a directory.

    Examples:
        perchance-lint report assets/examples --top 5 --output reports/examples.txt
    """
    config = _load_config(top=top)

    try:
        report_text = build_report(Path(directory), config, warn=_warn)
    except MissingDirectoryError as error:
        raise click.ClickException(str(error)) from error

    if output_path:
        target = Path(output_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(report_text, encoding="UTF-8")
        except OSError as error:
            raise click.ClickException(f"Error writing {target}: {error}") from error
        click.echo(f"Report written to {_display_path(target.resolve())}")

    click.echo(report_text)


@cli.command(name="format")
@click.option("--write", is_flag=True, help="Rewrite the file instead of printing it")
@click.option("--indent-size", type=int, help="Spaces per nesting level")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def format_command(filepath: str, write: bool = False, indent_size: int | None = None):
    """
    Normalize list indentation and trailing whitespace.

    Examples:
        perchance-lint format animals.perchance --write
    """
    config = _load_config(indent_size=indent_size)
    path = _resolve(filepath, config)
    if source_kind(path) == HTML:
        raise click.BadParameter(f"{path} is an HTML file; only Perchance sources can be formatted.")
    try:
        text, file_stat = read_source(path, config.max_file_size)
    except LintError as error:
        raise click.ClickException(str(error)) from error

    formatted = _newline_for(text).join(
        format_lines(
            split_lines(text),
            indent_size=config.indent_size,
            trim_trailing=config.trim_trailing_whitespace,
            normalize_indent=config.normalize_list_indent,
        )
    )

    if not write:
        click.echo(formatted, nl=False)
        return

    if formatted == text:
        return
    try:
        write_text_atomic(path, formatted, file_stat, warn=_warn)
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
