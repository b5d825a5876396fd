import dataclasses

import pytest

from review_markdown.models import (
    Bold,
    CodeBlock,
    InlineCode,
    ListKind,
    ParserContext,
    ParserState,
    Plain,
)


def test_parser_state_members():
    assert list(ParserState) == [
        ParserState.NORMAL,
        ParserState.IN_FENCED_CODE,
    ]


def test_list_kind_members():
    assert list(ListKind) == [ListKind.UNORDERED, ListKind.ORDERED]


def test_parser_context_defaults():
    ctx = ParserContext()

    assert ctx.state is ParserState.NORMAL
    assert ctx.in_code_block is False
    assert ctx.code_lang == ""
    assert ctx.code_buffer == []
    assert ctx.pending_list_items == []
    assert ctx.pending_list_kind is ListKind.UNORDERED


def test_parser_contexts_do_not_share_buffers():
    first = ParserContext()
    second = ParserContext()

    first.code_buffer.append("x")
    first.pending_list_items.append("y")

    assert second.code_buffer == []
    assert second.pending_list_items == []


def test_inline_run_markup():
    assert Plain("a").markup == "a"
    assert Bold("a").markup == "**a**"
    assert InlineCode("a").markup == "`a`"


def test_code_block_code_joins_lines():
    assert CodeBlock(language="go", lines=("a", "b")).code == "a\nb"
    assert CodeBlock(language="", lines=()).code == ""


def test_blocks_are_immutable():
    block = CodeBlock(language="go", lines=("a",))

    with pytest.raises(dataclasses.FrozenInstanceError):
        block.language = "rust"
