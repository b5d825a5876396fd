"""Filesystem helpers for review-markdown."""

from __future__ import annotations

import datetime
import logging
import os
import re
import stat
import tempfile
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_EXPORT_PREFIX, DEFAULT_MAX_FILE_SIZE, REVIEW_EXTENSIONS
from .exceptions import FileTooLargeError

MAX_FILE_SIZE_ENV_VAR = "REVIEW_MARKDOWN_MAX_FILE_SIZE"
EXPORT_PERMISSIONS = 0o644

# Names that would lose their meaning once reduced to alphanumerics
_EXPORT_LANGUAGE_NAMES = {"C++": "CPP", "C#": "CSharp"}

logger = logging.getLogger(__name__)


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the size limit from `REVIEW_MARKDOWN_MAX_FILE_SIZE`, else `default`."""
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
    """Return True when the path or one of its parents is a symlink."""
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Resolve a review path, rejecting symlinks and non-review files outside `base_dir`.

    Raises:
        ValueError: With a message fit for a CLI error.
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

    try:
        resolved.relative_to(base_dir)
    except ValueError as error:
        error_message = f"{resolved} is outside of the working directory {base_dir}."
        raise ValueError(error_message) from error

    if resolved.suffix.lower() not in REVIEW_EXTENSIONS:
        error_message = f"{resolved} is not a review file.\n"
        error_message += f"Supported extensions are: {', '.join(REVIEW_EXTENSIONS)}"
        raise ValueError(error_message)

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Stat a file without following symlinks; IOError unless it is a regular file."""
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


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Raise FileTooLargeError when the file is bigger than `max_size` bytes."""
    if stat_result.st_size > max_size:
        raise FileTooLargeError(filepath, max_size)


def safe_read(filepath: Path) -> TextIO:
    """Open a file as UTF-8 text, turning access errors into IOError."""
    try:
        return open(filepath, "r", encoding="UTF-8")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def build_export_filename(
    language: str,
    today: datetime.date | None = None,
    prefix: str = DEFAULT_EXPORT_PREFIX,
) -> str:
    """Build the stem of an exported review file.

    Args:
        language: Display name of the reviewed language.
        today: Date stamped into the name; defaults to the current date.
        prefix: Leading component of the name.

    Returns:
        str: ``<prefix>-<Language>_<YYYYMMDD>``, without an extension.

    Examples:
        build_export_filename("C++", datetime.date(2024, 3, 9))  # "code-review-CPP_20240309"
        build_export_filename("T-SQL", datetime.date(2024, 3, 9))  # "code-review-TSQL_20240309"
    """
    today = today or datetime.date.today()
    sanitized = _EXPORT_LANGUAGE_NAMES.get(language) or re.sub(r"[^a-zA-Z0-9]", "", language)
    return f"{prefix}-{sanitized}_{today:%Y%m%d}"


def write_export(directory: Path, filename: str, content: str) -> Path:
    """Write exported review content atomically.

    The content is written to a temporary file in `directory` first and then
    moved into place, so a partially written export is never visible.

    Args:
        directory: Destination directory; must exist.
        filename: File name including its extension.
        content: Text to write in UTF-8.

    Returns:
        Path: Path of the written file.

    Raises:
        FileExistsError: If the destination already exists.
        IOError: If the directory is missing or the file cannot be written.
    """
    target = directory / filename
    if target.exists():
        raise FileExistsError(f"{target} already exists; refusing to overwrite.")
    if not directory.is_dir():
        raise IOError(f"{directory} is not a directory.")

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", delete=False, dir=directory
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            os.chmod(tmp_file.name, EXPORT_PERMISSIONS)

        os.replace(temp_path, target)
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass

    logger.debug("Exported %d characters to %s", len(content), target)
    return target
