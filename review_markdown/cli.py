"""
Renders code review text as HTML, plain text, or JSON.
Reviews can also be exported to a dated file, and reviewed code can be
checked for its language.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from .config import ConfigError, RenderConfig, apply_overrides, build_config
from .constants import EXPORT_FORMATS, OUTPUT_FORMATS
from .exceptions import ParseFileError
from .filesystem import (
    build_export_filename,
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    normalize_filepath,
    safe_read,
    write_export,
)
from .languages import detect_language, guess_review_language, language_from_extension
from .parser import parse_review, read_review_file
from .render import render as render_blocks

__all__ = ["cli"]

UNKNOWN_LANGUAGE = "Unknown"


def _load_review(raw_path: str, **overrides: object) -> tuple[RenderConfig, str]:
    """Resolve the review path and configuration, then read the review text.

    Raises:
        click.BadParameter: If the path or configuration is invalid.
        click.ClickException: If the file size limit is malformed or the file
            cannot be read.
    """
    base_dir = Path.cwd().resolve()
    try:
        filepath = normalize_filepath(raw_path, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(filepath.parent, **overrides)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    config = apply_overrides(config, max_file_size=max_file_size)

    try:
        content = read_review_file(filepath, config)
    except ParseFileError as error:
        raise click.ClickException(str(error)) from error

    return config, content


def _max_file_size(search_path: Path) -> int:
    try:
        config = build_config(search_path)
        return get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error


@click.group()
@click.version_option(package_name="review-markdown")
@click.option("--verbose", "-v", is_flag=True, help="Log parser and file activity to stderr")
def cli(verbose: bool = False):
    """Render and export code review text."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@cli.command()
@click.option(
    "--format", "output_format", type=click.Choice(OUTPUT_FORMATS), help="Output format"
)
@click.option("--placeholder", help="Text shown when the review is empty")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def render(filepath: str, output_format: str | None = None, placeholder: str | None = None):
    """
    Print a review file rendered in the configured format.

    Args:
        filepath: Path to the review file.
        output_format: Override for the configured output format.
        placeholder: Override for the empty-review placeholder text.

    Raises:
        click.BadParameter: If the path or configuration is invalid.
        click.ClickException: If the file cannot be read.

    Examples:
        review-markdown render review.md --format text
    """
    config, content = _load_review(
        filepath, output_format=output_format, empty_placeholder=placeholder
    )
    blocks = parse_review(content)
    click.echo(render_blocks(blocks, config.output_format, config), nl=False)


@cli.command()
@click.option(
    "--format",
    "export_format",
    type=click.Choice(EXPORT_FORMATS),
    default="md",
    show_default=True,
    help="Export format; md writes the review text unchanged",
)
@click.option("--language", help="Reviewed language used in the file name")
@click.option(
    "--output-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Directory receiving the export",
)
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def export(filepath: str, export_format: str, language: str | None, output_dir: Path):
    """
    Write a review to a file named after its language and today's date.

    Without --language, the language is taken from the review's code blocks.

    Examples:
        review-markdown export review.md --format html --language Go
    """
    config, content = _load_review(filepath)
    blocks = parse_review(content)

    if language is None:
        language = guess_review_language(blocks)
        if language is None:
            click.echo(
                "Warning: Could not detect the reviewed language; "
                f"using {UNKNOWN_LANGUAGE!r} in the file name",
                err=True,
            )
            language = UNKNOWN_LANGUAGE

    if export_format == "md":
        exported = content
    else:
        exported = render_blocks(blocks, export_format, config)

    stem = build_export_filename(language, prefix=config.export_prefix)
    try:
        target = write_export(output_dir, f"{stem}.{export_format}", exported)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    click.echo(str(target))


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def detect(filepath: str):
    """Print the language of a source file, by extension first, then content."""
    path = Path(filepath)
    language = language_from_extension(filepath)
    if language is None:
        max_file_size = _max_file_size(path.resolve().parent)
        try:
            enforce_file_size(collect_file_stat(path), max_file_size, path)
            with safe_read(path) as file:
                language = detect_language(file.read())
        except (IOError, UnicodeDecodeError) as error:
            raise click.ClickException(str(error)) from error

    if language is None:
        raise click.ClickException(f"Could not detect the language of {filepath}")

    click.echo(language)


if __name__ == "__main__":
    cli()
