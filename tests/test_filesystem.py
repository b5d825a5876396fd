from __future__ import annotations

import datetime
import os
import stat
from pathlib import Path

import pytest

from review_markdown.config import RenderConfig
from review_markdown.exceptions import FileTooLargeError, ParseFileError
from review_markdown.filesystem import (
    build_export_filename,
    collect_file_stat,
    contains_symlink,
    enforce_file_size,
    get_max_file_size,
    normalize_filepath,
    safe_read,
    write_export,
)
from review_markdown.models import Heading, Plain
from review_markdown.parser import parse_file


def test_get_max_file_size_defaults_when_unset(monkeypatch):
    monkeypatch.delenv("REVIEW_MARKDOWN_MAX_FILE_SIZE", raising=False)
    assert get_max_file_size(default=123) == 123


def test_get_max_file_size_reads_environment(monkeypatch):
    monkeypatch.setenv("REVIEW_MARKDOWN_MAX_FILE_SIZE", "2048")
    assert get_max_file_size() == 2048


@pytest.mark.parametrize("value", ["invalid", "0", "-5"])
def test_get_max_file_size_rejects_bad_values(monkeypatch, value: str):
    monkeypatch.setenv("REVIEW_MARKDOWN_MAX_FILE_SIZE", value)
    with pytest.raises(ValueError, match="REVIEW_MARKDOWN_MAX_FILE_SIZE"):
        get_max_file_size()


def test_normalize_filepath_accepts_review_files(tmp_path: Path):
    target = tmp_path / "review.txt"
    target.write_text("text\n", encoding="utf-8")

    assert normalize_filepath(str(target), tmp_path.resolve()) == target.resolve()


def test_normalize_filepath_missing_file(tmp_path: Path):
    with pytest.raises(ValueError, match="does not exist"):
        normalize_filepath(str(tmp_path / "missing.md"), tmp_path)


def test_normalize_filepath_rejects_directory(tmp_path: Path):
    folder = tmp_path / "folder"
    folder.mkdir()
    with pytest.raises(ValueError, match="not a regular file"):
        normalize_filepath(str(folder), tmp_path)


def test_normalize_filepath_rejects_unsupported_extension(tmp_path: Path):
    target = tmp_path / "main.py"
    target.write_text("print(1)\n", encoding="utf-8")
    with pytest.raises(ValueError, match="not a review file"):
        normalize_filepath(str(target), tmp_path)


def test_normalize_filepath_rejects_paths_outside_base(tmp_path: Path):
    base = tmp_path / "base"
    base.mkdir()
    outside = tmp_path / "outside.md"
    outside.write_text("text\n", encoding="utf-8")
    with pytest.raises(ValueError, match="outside of the working directory"):
        normalize_filepath(str(outside), base.resolve())


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_symlinks_are_rejected(tmp_path: Path):
    source = tmp_path / "source.md"
    source.write_text("text\n", encoding="utf-8")
    link = tmp_path / "alias.md"
    try:
        os.symlink(source, link)
    except OSError as error:  # pragma: no cover - platform dependent
        pytest.skip(f"Unable to create symlink: {error}")

    assert contains_symlink(link) is True
    with pytest.raises(ValueError, match="Symlinks"):
        normalize_filepath(str(link), tmp_path)
    with pytest.raises(IOError, match="Symlinks"):
        collect_file_stat(link)


def test_enforce_file_size(tmp_path: Path):
    target = tmp_path / "big.md"
    target.write_text("x" * 100, encoding="utf-8")
    stat_result = collect_file_stat(target)

    enforce_file_size(stat_result, 100, target)
    with pytest.raises(FileTooLargeError) as error:
        enforce_file_size(stat_result, 99, target)

    assert error.value.max_size == 99
    assert isinstance(error.value, OSError)


def test_safe_read_missing_file(tmp_path: Path):
    with pytest.raises(IOError, match="Error accessing"):
        safe_read(tmp_path / "missing.md")


def test_parse_file_reads_and_parses(tmp_path: Path):
    target = tmp_path / "review.md"
    target.write_text("# Review\n", encoding="utf-8")

    assert parse_file(target) == [Heading(1, (Plain("Review"),))]


def test_parse_file_wraps_size_errors(tmp_path: Path):
    target = tmp_path / "review.md"
    target.write_text("# Review\n", encoding="utf-8")

    with pytest.raises(ParseFileError, match="maximum allowed size"):
        parse_file(target, RenderConfig(max_file_size=1))


def test_parse_file_wraps_decode_errors(tmp_path: Path):
    target = tmp_path / "review.md"
    target.write_bytes(b"\xff\xfe\x00bad")

    with pytest.raises(ParseFileError, match="Invalid UTF-8"):
        parse_file(target)


def test_parse_file_rejects_invalid_config(tmp_path: Path):
    target = tmp_path / "review.md"
    target.write_text("text\n", encoding="utf-8")

    with pytest.raises(ParseFileError, match="output_format"):
        parse_file(target, RenderConfig(output_format="pdf"))


@pytest.mark.parametrize(
    ("language", "expected"),
    [
        ("C++", "code-review-CPP_20240309"),
        ("C#", "code-review-CSharp_20240309"),
        ("T-SQL", "code-review-TSQL_20240309"),
        ("PL/SQL", "code-review-PLSQL_20240309"),
        ("Python", "code-review-Python_20240309"),
    ],
)
def test_build_export_filename(language: str, expected: str):
    assert build_export_filename(language, datetime.date(2024, 3, 9)) == expected


def test_build_export_filename_custom_prefix():
    name = build_export_filename("Go", datetime.date(2023, 12, 1), prefix="review")

    assert name == "review-Go_20231201"


def test_write_export_creates_file(tmp_path: Path):
    target = write_export(tmp_path, "out.md", "# Review\n")

    assert target == tmp_path / "out.md"
    assert target.read_text(encoding="utf-8") == "# Review\n"
    assert stat.S_IMODE(target.stat().st_mode) == 0o644
    assert list(tmp_path.iterdir()) == [target]


def test_write_export_refuses_to_overwrite(tmp_path: Path):
    existing = tmp_path / "out.md"
    existing.write_text("keep", encoding="utf-8")

    with pytest.raises(FileExistsError):
        write_export(tmp_path, "out.md", "new")

    assert existing.read_text(encoding="utf-8") == "keep"


def test_write_export_requires_directory(tmp_path: Path):
    with pytest.raises(IOError, match="not a directory"):
        write_export(tmp_path / "missing", "out.md", "text")
