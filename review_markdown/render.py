"""Presentation of parsed review blocks.

Each renderer walks the block sequence in order and matches exhaustively
over the block and inline run variants. An empty sequence renders the
configured placeholder rather than an error.
"""

from __future__ import annotations

import html
import json
from collections.abc import Iterable, Sequence

from .config import RenderConfig
from .models import (
    Block,
    Bold,
    CodeBlock,
    Heading,
    InlineCode,
    InlineRun,
    List,
    Paragraph,
    Plain,
    Spacer,
)


def _escape(text: str) -> str:
    return html.escape(text, quote=False).replace('"', "&quot;")


def _inline_html(runs: Iterable[InlineRun]) -> str:
    parts = []
    for run in runs:
        match run:
            case Plain(text=text):
                parts.append(_escape(text))
            case Bold(text=text):
                parts.append(f"<strong>{_escape(text)}</strong>")
            case InlineCode(text=text):
                parts.append(f"<code>{_escape(text)}</code>")
    return "".join(parts)


def _block_html(block: Block, config: RenderConfig) -> str:
    match block:
        case Heading(level=level, text=text):
            return f"<h{level}>{_inline_html(text)}</h{level}>"
        case Paragraph(text=text):
            return f"<p>{_inline_html(text)}</p>"
        case List(ordered=ordered, items=items):
            tag = "ol" if ordered else "ul"
            rendered_items = "".join(f"<li>{_inline_html(item)}</li>" for item in items)
            return f"<{tag}>{rendered_items}</{tag}>"
        case CodeBlock(language=language):
            lang_class = (
                f' class="{_escape(config.code_class_prefix + language)}"' if language else ""
            )
            return f"<pre><code{lang_class}>{_escape(block.code)}</code></pre>"
        case Spacer():
            return '<div class="spacer"></div>'
    raise TypeError(f"Unsupported block: {block!r}")


def render_html(blocks: Sequence[Block], config: RenderConfig | None = None) -> str:
    """Render blocks as an HTML fragment, one element per line.

    Args:
        blocks: Parsed review blocks.
        config: Supplies the placeholder and code class prefix; defaults to a
            new `RenderConfig` when omitted.

    Returns:
        str: HTML fragment ending with a newline.

    Examples:
        render_html(parse_review("# Summary"))  # "<h1>Summary</h1>\\n"
    """
    config = config or RenderConfig()
    if not blocks:
        return f'<p class="empty">{_escape(config.empty_placeholder)}</p>\n'
    return "".join(f"{_block_html(block, config)}\n" for block in blocks)


def _inline_text(runs: Iterable[InlineRun]) -> str:
    return "".join(run.markup for run in runs)


def _block_text(block: Block) -> list[str]:
    match block:
        case Heading(level=level, text=text):
            return [f"{'#' * level} {_inline_text(text)}"]
        case Paragraph(text=text):
            return [_inline_text(text)]
        case List(ordered=ordered, items=items):
            return [
                f"{f'{index}.' if ordered else '-'} {_inline_text(item)}"
                for index, item in enumerate(items, start=1)
            ]
        case CodeBlock(language=language, lines=lines):
            return [f"```{language}", *lines, "```"]
        case Spacer():
            return [""]
    raise TypeError(f"Unsupported block: {block!r}")


def render_text(blocks: Sequence[Block], config: RenderConfig | None = None) -> str:
    """Render blocks as plain text for a terminal.

    Inline markers and fences are written back, and numbered lists are
    renumbered from 1.
    """
    config = config or RenderConfig()
    if not blocks:
        return f"{config.empty_placeholder}\n"
    return "".join(f"{line}\n" for block in blocks for line in _block_text(block))


def _runs_data(runs: Iterable[InlineRun]) -> list[dict[str, str]]:
    data = []
    for run in runs:
        match run:
            case Plain(text=text):
                data.append({"type": "plain", "text": text})
            case Bold(text=text):
                data.append({"type": "bold", "text": text})
            case InlineCode(text=text):
                data.append({"type": "code", "text": text})
    return data


def blocks_to_data(blocks: Iterable[Block]) -> list[dict[str, object]]:
    """Convert blocks to JSON-ready dictionaries tagged by ``"type"``.

    Examples:
        blocks_to_data([Spacer()])  # [{"type": "spacer"}]
    """
    data: list[dict[str, object]] = []
    for block in blocks:
        match block:
            case Heading(level=level, text=text):
                data.append({"type": "heading", "level": level, "text": _runs_data(text)})
            case Paragraph(text=text):
                data.append({"type": "paragraph", "text": _runs_data(text)})
            case List(ordered=ordered, items=items):
                data.append(
                    {
                        "type": "list",
                        "ordered": ordered,
                        "items": [_runs_data(item) for item in items],
                    }
                )
            case CodeBlock(language=language, lines=lines):
                data.append({"type": "code_block", "language": language, "lines": list(lines)})
            case Spacer():
                data.append({"type": "spacer"})
            case _:
                raise TypeError(f"Unsupported block: {block!r}")
    return data


def render_json(blocks: Sequence[Block], config: RenderConfig | None = None) -> str:
    return json.dumps(blocks_to_data(blocks), ensure_ascii=False, indent=2) + "\n"


_RENDERERS = {
    "html": render_html,
    "text": render_text,
    "json": render_json,
}


def render(
    blocks: Sequence[Block], output_format: str = "html", config: RenderConfig | None = None
) -> str:
    """Render blocks in the requested output format.

    Raises:
        ValueError: If `output_format` is not one of ``html``, ``text``, ``json``.
    """
    try:
        renderer = _RENDERERS[output_format]
    except KeyError as error:
        raise ValueError(f"Unsupported output format: {output_format}") from error
    return renderer(blocks, config)
