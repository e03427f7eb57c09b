"""Filesystem helpers for perchance-lint."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable, Iterable
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE
from .exceptions import FileTooLargeError, MissingDirectoryError, SourceReadError

MAX_FILE_SIZE_ENV_VAR = "PERCHANCE_LINT_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["PERCHANCE_LINT_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any parent directory is a symlink.

    Examples:
        contains_symlink(Path("/tmp/link/child"))
    """
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, extensions: Iterable[str]) -> Path:
    """Resolve and validate a source filepath.

    Args:
        raw_path: User-supplied path (absolute or relative).
        extensions: Accepted file extensions, lowercase with leading dot.

    Returns:
        Path: Absolute path to the source file.

    Raises:
        ValueError: If the path does not exist, is not a regular file, uses an
            unsupported extension, or traverses a symlink.

    Examples:
        normalize_filepath("generators/animals.perchance", (".perchance",))
    """
    path = Path(raw_path).expanduser()

    if contains_symlink(path):
        error_message = f"Symlinks are not supported for security reasons: {path}"
        raise ValueError(error_message)

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        error_message = f"{path} does not exist."
        raise ValueError(error_message) from error
    except OSError as error:
        error_message = f"Error resolving {path}: {error}"
        raise ValueError(error_message) from error

    if not resolved.is_file():
        error_message = f"{resolved} is not a regular file."
        raise ValueError(error_message)

    extensions = tuple(extensions)
    if resolved.suffix.lower() not in extensions:
        error_message = f"{resolved} is not a supported source file.\n"
        error_message += f"Supported extensions are: {', '.join(extensions)}"
        raise ValueError(error_message)

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise IOError(error_message)

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def ensure_file_unchanged(
    expected_stat: os.stat_result, current_stat: os.stat_result, filepath: Path
):
    """Detect changes between two filesystem snapshots.

    Raises:
        IOError: If inode, device, size, or modification time differ.
    """
    fingerprint_before = (
        getattr(expected_stat, "st_ino", None),
        getattr(expected_stat, "st_dev", None),
        expected_stat.st_size,
        expected_stat.st_mtime_ns,
    )
    fingerprint_after = (
        getattr(current_stat, "st_ino", None),
        getattr(current_stat, "st_dev", None),
        current_stat.st_size,
        current_stat.st_mtime_ns,
    )

    if fingerprint_before != fingerprint_after:
        error_message = f"{filepath} changed during processing; refusing to overwrite."
        raise IOError(error_message)


def read_source(filepath: Path, max_file_size: int) -> tuple[str, os.stat_result]:
    """Read a source file as UTF-8 text.

    Args:
        filepath: File to read.
        max_file_size: Maximum allowed size in bytes.

    Returns:
        tuple[str, os.stat_result]: File content and the stat captured before
            reading.

    Raises:
        SourceReadError: If the file is inaccessible or not valid UTF-8.
        FileTooLargeError: If the file exceeds `max_file_size`.

    Examples:
        text, file_stat = read_source(Path("animals.perchance"), 1024 * 1024)
    """
    try:
        stat_result = collect_file_stat(filepath)
    except IOError as error:
        raise SourceReadError(filepath, str(error)) from error

    if stat_result.st_size > max_file_size:
        raise FileTooLargeError(filepath, max_file_size)

    try:
        with open(filepath, "r", encoding="UTF-8", newline="") as handle:
            return handle.read(), stat_result
    except UnicodeDecodeError as error:
        raise SourceReadError(filepath, f"invalid UTF-8 sequence ({error.reason})") from error
    except OSError as error:
        raise SourceReadError(filepath, str(error)) from error


def collect_files(directory: Path) -> list[Path]:
    """List every regular file below `directory`, in sorted order.

    Raises:
        MissingDirectoryError: If `directory` does not exist or is not a directory.
    """
    if not directory.is_dir():
        raise MissingDirectoryError(directory)
    return sorted(path for path in directory.rglob("*") if path.is_file())


def largest_by_extension(
    files: Iterable[Path],
    extension: str,
    top: int,
    warn: Callable[[str], None] | None = None,
) -> list[tuple[Path, int]]:
    """Pick the `top` largest files with the given extension.

    Ties in size are broken by path so that the selection is deterministic.
    Files that can no longer be inspected are dropped.

    Args:
        files: Candidate paths.
        extension: Lowercase extension with leading dot.
        top: Maximum number of files returned.
        warn: Optional callback for files that are dropped.

    Returns:
        list[tuple[Path, int]]: Paths with their sizes in bytes, largest first.
    """
    sized = []
    for path in files:
        if not path.name.lower().endswith(extension):
            continue
        try:
            size = path.stat().st_size
        except OSError as error:
            if warn is not None:
                warn(f"Warning: skipping {path}: {error}")
            continue
        sized.append((path, size))
    sized.sort(key=lambda item: (-item[1], str(item[0])))
    return sized[:top]


def format_size(size: int) -> str:
    """Render a byte count as kilobytes or megabytes.

    Examples:
        format_size(2048)  # "2.0 KB"
        format_size(3 * 1024 * 1024)  # "3.0 MB"
    """
    kilobytes = size / 1024
    if kilobytes < 1024:
        return f"{kilobytes:.1f} KB"
    return f"{kilobytes / 1024:.1f} MB"


def write_text_atomic(
    filepath: Path,
    text: str,
    expected_stat: os.stat_result | None = None,
    warn: Callable[[str], None] | None = None,
):
    """Write `text` to `filepath` through a temporary file and an atomic replace.

    Args:
        filepath: Destination path.
        text: Full file content to write.
        expected_stat: Stat captured when the file was read. When given, the
            write is refused if the file changed since, and its permissions,
            ownership, and access time are preserved.
        warn: Optional callback for emitting non-fatal warnings.

    Returns:
        None.

    Raises:
        IOError: If the file changed since `expected_stat` or cannot be
            replaced atomically.

    Examples:
        write_text_atomic(Path("animals.perchance"), fixed_text, file_stat)
    """
    if expected_stat is not None:
        current_stat = collect_file_stat(filepath)
        ensure_file_unchanged(expected_stat, current_stat, filepath)

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", delete=False, dir=filepath.parent, newline=""
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(text)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

            if expected_stat is not None:
                os.chmod(tmp_file.name, stat.S_IMODE(expected_stat.st_mode))
                uid = getattr(expected_stat, "st_uid", None)
                gid = getattr(expected_stat, "st_gid", None)
                # Ownership can only be kept with sufficient privileges
                if uid is not None and gid is not None and hasattr(os, "chown"):
                    try:
                        os.chown(tmp_file.name, uid, gid)
                    except PermissionError:
                        if warn is not None:
                            warn(
                                f"Warning: Could not preserve file ownership for {filepath.name} "
                                "(requires elevated privileges)"
                            )

        os.replace(temp_path, filepath)

        if expected_stat is not None:
            # Keep the original atime; mtime reflects this write
            current_stat = filepath.stat()
            os.utime(filepath, ns=(expected_stat.st_atime_ns, current_stat.st_mtime_ns))
    finally:
        if temp_path is not None:
            try:
                Path(temp_path).unlink(missing_ok=True)
            except OSError:
                pass
