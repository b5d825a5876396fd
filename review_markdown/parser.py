"""Review text parsing utilities."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import ConfigError, RenderConfig, validate_config
from .constants import (
    CODE_FENCE,
    HEADING_PREFIXES,
    INLINE_SPAN_PATTERN,
    ORDERED_LIST_PATTERN,
    UNORDERED_LIST_PREFIXES,
)
from .exceptions import ParseFileError
from .filesystem import collect_file_stat, enforce_file_size, safe_read
from .models import (
    Block,
    Bold,
    CodeBlock,
    Heading,
    InlineCode,
    InlineRun,
    List,
    ListKind,
    Paragraph,
    ParserContext,
    ParserState,
    Plain,
    Spacer,
)

logger = logging.getLogger(__name__)


def inline_parse(line: str) -> list[InlineRun]:
    """Split a line into plain, bold, and inline code runs.

    Spans are ``**bold**`` and `` `code` ``, matched non-greedily from left to
    right without nesting. Unterminated markers stay in plain text, so joining
    the `markup` of every run reproduces `line` exactly.

    Args:
        line: Text of a paragraph, heading, or list item.

    Returns:
        list[InlineRun]: Runs in source order; empty for an empty line.

    Examples:
        inline_parse("Use **bold** here")  # [Plain("Use "), Bold("bold"), Plain(" here")]
        inline_parse("a ** b")  # [Plain("a ** b")]
    """
    runs: list[InlineRun] = []
    offset = 0

    for match in INLINE_SPAN_PATTERN.finditer(line):
        if match.start() > offset:
            runs.append(Plain(line[offset : match.start()]))
        if match.group("bold") is not None:
            runs.append(Bold(match.group("bold")[2:-2]))
        else:
            runs.append(InlineCode(match.group("code")[1:-1]))
        offset = match.end()

    if offset < len(line):
        runs.append(Plain(line[offset:]))

    return runs


def _is_fence(line: str) -> bool:
    return line.strip().startswith(CODE_FENCE)


def _flush_list(ctx: ParserContext, blocks: list[Block]) -> None:
    """Emit pending list items as one `List` block and clear them.

    Does nothing when no items are pending.
    """
    if not ctx.pending_list_items:
        return

    items = tuple(tuple(inline_parse(item)) for item in ctx.pending_list_items)
    blocks.append(List(ordered=ctx.pending_list_kind is ListKind.ORDERED, items=items))
    ctx.pending_list_items = []


def _flush_code(ctx: ParserContext, blocks: list[Block]) -> None:
    """Emit the fence buffer as one `CodeBlock` and reset the fence fields."""
    code = "\n".join(ctx.code_buffer).rstrip("\n")
    lines = tuple(code.split("\n")) if code else ()
    blocks.append(CodeBlock(language=ctx.code_lang, lines=lines))
    ctx.code_lang = ""
    ctx.code_buffer = []


def _try_open_fence(ctx: ParserContext, line: str, blocks: list[Block]) -> bool:
    """Detect the start of a fenced code block.

    Flushes any pending list before entering the fence.

    Args:
        ctx: Parser context to update when a fence opens.
        line: Current line being scanned.
        blocks: Output sequence receiving a flushed list.

    Returns:
        bool: True when the line opens a fence and the context is updated.

    Examples:
        _try_open_fence(ParserContext(), "```python", [])  # True
    """
    if ctx.state is not ParserState.NORMAL or not _is_fence(line):
        return False

    _flush_list(ctx, blocks)
    ctx.state = ParserState.IN_FENCED_CODE
    ctx.code_lang = line.strip()[len(CODE_FENCE) :].strip()
    ctx.code_buffer = []
    return True


def _try_close_fence(ctx: ParserContext, line: str, blocks: list[Block]) -> bool:
    """Attempt to close the active fenced code block.

    Args:
        ctx: Parser context describing the active fence.
        line: Current line being scanned.
        blocks: Output sequence receiving the code block.

    Returns:
        bool: True when the line closes the fence; otherwise False.
    """
    if ctx.state is not ParserState.IN_FENCED_CODE or not _is_fence(line):
        return False

    _flush_code(ctx, blocks)
    ctx.state = ParserState.NORMAL
    return True


def _classify_list_line(line: str) -> tuple[ListKind, str] | None:
    """Classify a line as a list item.

    Args:
        line: Line being scanned, outside any fence.

    Returns:
        tuple[ListKind, str] | None: The list kind and the item text with its
            marker stripped, or None for a non-list line.

    Examples:
        _classify_list_line("- item")  # (ListKind.UNORDERED, "item")
        _classify_list_line("12. item")  # (ListKind.ORDERED, "item")
    """
    if line.startswith(UNORDERED_LIST_PREFIXES):
        return ListKind.UNORDERED, line[2:]

    ordered_match = ORDERED_LIST_PATTERN.match(line)
    if ordered_match:
        return ListKind.ORDERED, line[ordered_match.end() :]

    return None


def _try_accumulate_list_item(ctx: ParserContext, line: str, blocks: list[Block]) -> bool:
    """Add a list line to the pending items.

    A change of list kind flushes the pending items first.

    Returns:
        bool: True when the line was consumed as a list item.
    """
    classified = _classify_list_line(line)
    if classified is None:
        return False

    kind, item = classified
    if kind is not ctx.pending_list_kind:
        _flush_list(ctx, blocks)
    ctx.pending_list_kind = kind
    ctx.pending_list_items.append(item)
    return True


def _split_lines(text: str) -> list[str]:
    """Split text on ``\\n`` only, dropping one trailing ``\\r`` per line.

    Form feeds, vertical tabs and Unicode separators stay inside their line.
    A final newline does not produce a trailing empty line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def _build_line_block(line: str) -> Block:
    if not line.strip():
        return Spacer()

    for prefix, level in HEADING_PREFIXES:
        if line.startswith(prefix):
            return Heading(level=level, text=tuple(inline_parse(line[len(prefix) :])))

    return Paragraph(text=tuple(inline_parse(line)))


def parse_review(text: str) -> list[Block]:
    """Parse review text into an ordered sequence of blocks.

    Recognizes ``#`` to ``###`` headings, ``*``/``-`` and numbered lists,
    fenced code blocks, blank lines, and paragraphs with inline bold and code
    spans. Anything else degrades to paragraphs. Never raises.

    Args:
        text: Review text, typically generated by a language model.

    Returns:
        list[Block]: Blocks in input order; empty for empty input. A fence left
            open at the end of input is still emitted when it holds content.

    Examples:
        parse_review("```go\\nfmt.Println(1)\\n```")  # [CodeBlock("go", ("fmt.Println(1)",))]
        parse_review("* a\\n1. b")  # unordered List(a), then ordered List(b)
    """
    blocks: list[Block] = []
    ctx = ParserContext()
    lines = _split_lines(text)

    for line in lines:
        if ctx.state is ParserState.IN_FENCED_CODE:
            if not _try_close_fence(ctx, line, blocks):
                ctx.code_buffer.append(line)
            continue

        if _try_open_fence(ctx, line, blocks):
            continue

        if _try_accumulate_list_item(ctx, line, blocks):
            continue

        _flush_list(ctx, blocks)
        blocks.append(_build_line_block(line))

    _flush_list(ctx, blocks)
    if ctx.in_code_block and ctx.code_buffer:
        logger.debug("Flushing unterminated %r fence at end of input", ctx.code_lang)
        _flush_code(ctx, blocks)

    logger.debug("Parsed %d lines into %d blocks", len(lines), len(blocks))
    return blocks


parse = parse_review


def parse_file(filepath: Path, config: RenderConfig | None = None) -> list[Block]:
    """Read a review file and parse it into blocks.

    Args:
        filepath: Path to the UTF-8 review file.
        config: Configuration supplying the size limit; defaults to a new
            `RenderConfig` when omitted.

    Returns:
        list[Block]: Parsed blocks.

    Raises:
        ParseFileError: If the configuration is invalid, or the file is too
            large, unreadable, or not valid UTF-8.

    Examples:
        blocks = parse_file(Path("review.md"))
    """
    content = read_review_file(filepath, config)
    return parse_review(content)


def read_review_file(filepath: Path, config: RenderConfig | None = None) -> str:
    """Read review text from a file within the configured size limit.

    Raises:
        ParseFileError: If the configuration is invalid, or the file is too
            large, unreadable, or not valid UTF-8.
    """
    config = config or RenderConfig()
    try:
        validate_config(config)
    except ConfigError as error:
        raise ParseFileError(str(error)) from error

    try:
        enforce_file_size(collect_file_stat(filepath), config.max_file_size, filepath)
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise ParseFileError(error_message) from error
    except IOError as error:
        raise ParseFileError(str(error)) from error

    logger.debug("Read %d characters from %s", len(content), filepath)
    return content
