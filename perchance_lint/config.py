"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_EXTENSIONS, DEFAULT_MAX_FILE_SIZE, DEFAULT_TOP
from .models import DiagnosticOptions


@dataclass
class LintConfig:
    """Configuration for checking, formatting, and reporting on Perchance sources.

    Attributes:
        enable_diagnostics: Master switch; when False no findings are produced.
        check_duplicate_names: Report repeated top-level list names.
        check_indentation: Report mixed or odd indentation.
        check_single_equals: Report ``=`` used as a comparison in ``[a ? b : c]``.
        check_markup_balance: Report unbalanced script, style, and comment markup.
        indent_size: Spaces per nesting level used by the formatter.
        trim_trailing_whitespace: Whether the formatter strips trailing whitespace.
        normalize_list_indent: Whether the formatter rewrites list indentation.
        top: Number of largest files per extension included in a report.
        extensions: File extensions a report covers, in output order.
        max_file_size: Maximum file size in bytes that will be analyzed.

    Examples:
        LintConfig(check_indentation=False, top=5)
    """

    # Rules
    enable_diagnostics: bool = True
    check_duplicate_names: bool = True
    check_indentation: bool = True
    check_single_equals: bool = True
    check_markup_balance: bool = True

    # Formatting
    indent_size: int = 2
    trim_trailing_whitespace: bool = True
    normalize_list_indent: bool = True

    # Reporting
    top: int = DEFAULT_TOP
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    @property
    def diagnostic_options(self) -> DiagnosticOptions:
        return DiagnosticOptions(
            check_duplicates=self.check_duplicate_names,
            check_indentation=self.check_indentation,
            check_if_else_equals=self.check_single_equals,
        )


BOOLEAN_FIELDS = (
    "enable_diagnostics",
    "check_duplicate_names",
    "check_indentation",
    "check_single_equals",
    "check_markup_balance",
    "trim_trailing_whitespace",
    "normalize_list_indent",
)


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`top` must be a positive integer")
    """


def load_config(search_path: Path) -> LintConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.perchance-lint]`` table from `pyproject.toml` and the
    ``[perchance-lint]`` or ``[tool.perchance-lint]`` table from
    `.perchance-lint.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        LintConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("generators"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "perchance-lint")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".perchance-lint.toml",
            table_paths=[("perchance-lint",), ("tool", "perchance-lint")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return LintConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> LintConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> LintConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return LintConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return LintConfig()

    # TOML keys use dashes or underscores interchangeably.
    settings = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return LintConfig(**settings)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: LintConfig) -> LintConfig:
    extensions = config.extensions
    if isinstance(extensions, str):
        extensions = (extensions,)
    if isinstance(extensions, (list, tuple)):
        extensions = tuple(
            _normalize_extension(extension) if isinstance(extension, str) else extension
            for extension in extensions
        )
    return replace(config, extensions=extensions)


def _normalize_extension(extension: str) -> str:
    extension = extension.strip().lower()
    if extension and not extension.startswith("."):
        extension = f".{extension}"
    return extension


def validate_config(config: LintConfig) -> None:
    """Validate a `LintConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If a toggle is not a boolean, a numeric setting is not a
            positive integer, or the extension list is empty or malformed.

    Examples:
        validate_config(LintConfig(top=3))
    """
    config = normalize_config(config)

    for key in BOOLEAN_FIELDS:
        if not isinstance(getattr(config, key), bool):
            raise ConfigError(f"`{key}` must be a boolean")

    _ensure_integers(
        {
            "indent_size": config.indent_size,
            "top": config.top,
            "max_file_size": config.max_file_size,
        }
    )
    _ensure_positive(
        {
            "indent_size": config.indent_size,
            "top": config.top,
            "max_file_size": config.max_file_size,
        }
    )

    if not isinstance(config.extensions, tuple) or not config.extensions:
        raise ConfigError("`extensions` must be a non-empty list of file extensions")
    for extension in config.extensions:
        if not isinstance(extension, str) or len(extension) < 2:
            raise ConfigError("`extensions` must be a non-empty list of file extensions")


def apply_overrides(config: LintConfig, **overrides: object) -> LintConfig:
    """Apply override values to a `LintConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        LintConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `LintConfig`.

    Examples:
        updated = apply_overrides(config, check_indentation=False, top=5)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> LintConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        LintConfig: Validated configuration ready for analysis.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), top=5)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
