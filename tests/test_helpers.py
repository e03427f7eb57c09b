from __future__ import annotations

import os
from pathlib import Path

import pytest

from perchance_lint.exceptions import FileTooLargeError, MissingDirectoryError, SourceReadError
from perchance_lint.filesystem import (
    collect_file_stat,
    collect_files,
    contains_symlink,
    format_size,
    get_max_file_size,
    largest_by_extension,
    normalize_filepath,
    read_source,
    write_text_atomic,
)

EXTENSIONS = (".perchance", ".html")


def test_get_max_file_size_uses_default(monkeypatch):
    monkeypatch.delenv("PERCHANCE_LINT_MAX_FILE_SIZE", raising=False)
    assert get_max_file_size(default=123) == 123


def test_get_max_file_size_reads_environment(monkeypatch):
    monkeypatch.setenv("PERCHANCE_LINT_MAX_FILE_SIZE", "2048")
    assert get_max_file_size(default=123) == 2048


def test_get_max_file_size_rejects_non_integer(monkeypatch):
    monkeypatch.setenv("PERCHANCE_LINT_MAX_FILE_SIZE", "invalid")
    with pytest.raises(ValueError, match="Invalid value"):
        get_max_file_size()


def test_get_max_file_size_rejects_non_positive(monkeypatch):
    monkeypatch.setenv("PERCHANCE_LINT_MAX_FILE_SIZE", "0")
    with pytest.raises(ValueError, match="positive integer"):
        get_max_file_size()


def test_normalize_filepath_missing_file(tmp_path: Path):
    with pytest.raises(ValueError, match="does not exist"):
        normalize_filepath(str(tmp_path / "missing.perchance"), EXTENSIONS)


def test_normalize_filepath_rejects_directory(tmp_path: Path):
    folder = tmp_path / "folder.perchance"
    folder.mkdir()
    with pytest.raises(ValueError, match="not a regular file"):
        normalize_filepath(str(folder), EXTENSIONS)


def test_normalize_filepath_rejects_unsupported_extension(tmp_path: Path):
    target = tmp_path / "notes.txt"
    target.write_text("animal\n", encoding="utf-8")
    with pytest.raises(ValueError, match="not a supported source file"):
        normalize_filepath(str(target), EXTENSIONS)


def test_normalize_filepath_accepts_uppercase_extension(tmp_path: Path):
    target = tmp_path / "animals.PERCHANCE"
    target.write_text("animal\n", encoding="utf-8")
    assert normalize_filepath(str(target), EXTENSIONS) == target.resolve()


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_normalize_filepath_rejects_symlink(tmp_path: Path):
    target = tmp_path / "real.perchance"
    target.write_text("animal\n", encoding="utf-8")
    link = tmp_path / "link.perchance"
    try:
        link.symlink_to(target)
    except OSError:
        pytest.skip("cannot create symlinks here")

    assert contains_symlink(link)
    with pytest.raises(ValueError, match="Symlinks"):
        normalize_filepath(str(link), EXTENSIONS)


def test_collect_file_stat_rejects_directory(tmp_path: Path):
    with pytest.raises(IOError, match="not a regular file"):
        collect_file_stat(tmp_path)


def test_read_source_preserves_line_endings(tmp_path: Path):
    target = tmp_path / "crlf.perchance"
    target.write_bytes(b"animal\r\n  cat\r\n")

    text, file_stat = read_source(target, 1024)

    assert text == "animal\r\n  cat\r\n"
    assert file_stat.st_size == len(text)


def test_read_source_rejects_invalid_utf8(tmp_path: Path):
    target = tmp_path / "broken.perchance"
    target.write_bytes(b"animal\n  \xff\xfe\n")

    with pytest.raises(SourceReadError, match="invalid UTF-8"):
        read_source(target, 1024)


def test_read_source_rejects_large_file(tmp_path: Path):
    target = tmp_path / "big.perchance"
    target.write_text("x" * 100, encoding="utf-8")

    with pytest.raises(FileTooLargeError) as excinfo:
        read_source(target, 10)
    assert excinfo.value.max_file_size == 10


def test_read_source_missing_file(tmp_path: Path):
    with pytest.raises(SourceReadError, match="Cannot read"):
        read_source(tmp_path / "gone.perchance", 1024)


def test_collect_files_is_recursive_and_sorted(tmp_path: Path):
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "two.perchance").write_text("", encoding="utf-8")
    (tmp_path / "a.html").write_text("", encoding="utf-8")

    files = collect_files(tmp_path)

    assert files == [tmp_path / "a.html", tmp_path / "b" / "two.perchance"]


def test_collect_files_missing_directory(tmp_path: Path):
    with pytest.raises(MissingDirectoryError, match="Examples directory not found"):
        collect_files(tmp_path / "nowhere")


def test_largest_by_extension_orders_by_size_then_path(tmp_path: Path):
    small = tmp_path / "small.perchance"
    small.write_text("x", encoding="utf-8")
    first = tmp_path / "a.perchance"
    first.write_text("xxx", encoding="utf-8")
    second = tmp_path / "b.perchance"
    second.write_text("yyy", encoding="utf-8")
    other = tmp_path / "page.html"
    other.write_text("zzzzzzzz", encoding="utf-8")

    picked = largest_by_extension([small, second, other, first], ".perchance", 2)

    assert picked == [(first, 3), (second, 3)]


def test_largest_by_extension_drops_files_that_vanished(tmp_path: Path):
    kept = tmp_path / "kept.perchance"
    kept.write_text("animal\n", encoding="utf-8")
    vanished = tmp_path / "vanished.perchance"
    warnings: list[str] = []

    picked = largest_by_extension([kept, vanished], ".perchance", 5, warn=warnings.append)

    assert picked == [(kept, 7)]
    assert len(warnings) == 1
    assert warnings[0].startswith(f"Warning: skipping {vanished}: ")


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0.0 KB"),
        (2048, "2.0 KB"),
        (1536, "1.5 KB"),
        (3 * 1024 * 1024, "3.0 MB"),
    ],
)
def test_format_size(size: int, expected: str):
    assert format_size(size) == expected


def test_write_text_atomic_replaces_content(tmp_path: Path):
    target = tmp_path / "animals.perchance"
    target.write_text("animal\n  cat\n", encoding="utf-8")
    target.chmod(0o640)
    _, file_stat = read_source(target, 1024)

    write_text_atomic(target, "animal\r\n  dog\r\n", file_stat)

    assert target.read_bytes() == b"animal\r\n  dog\r\n"
    assert target.stat().st_mode & 0o777 == 0o640
    assert list(tmp_path.iterdir()) == [target]


def test_write_text_atomic_refuses_changed_file(tmp_path: Path):
    target = tmp_path / "animals.perchance"
    target.write_text("animal\n", encoding="utf-8")
    _, file_stat = read_source(target, 1024)
    target.write_text("animal\n  changed by someone else\n", encoding="utf-8")

    with pytest.raises(IOError, match="changed during processing"):
        write_text_atomic(target, "animal\n  cat\n", file_stat)
    assert "someone else" in target.read_text(encoding="utf-8")
