from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from review_markdown.constants import ORDERED_LIST_PATTERN
from review_markdown.models import CodeBlock, List, Paragraph, Plain, Spacer
from review_markdown.parser import inline_parse, parse_review
from review_markdown.render import render_html, render_text

# Anything but line breaks and the characters that start blocks or spans
plain_line = st.text(
    alphabet=st.characters(exclude_characters="\n\r`*#-"),
    min_size=1,
    max_size=40,
).filter(lambda line: line.strip() != "" and not ORDERED_LIST_PATTERN.match(line))


@given(st.text())
def test_parse_review_never_raises(text: str):
    blocks = parse_review(text)
    assert isinstance(blocks, list)


@given(st.text(max_size=200))
def test_parse_review_is_deterministic(text: str):
    assert parse_review(text) == parse_review(text)


@given(st.text())
def test_inline_markup_reproduces_line(line: str):
    runs = inline_parse(line)
    assert "".join(run.markup for run in runs) == line


@given(st.text())
def test_inline_parse_drops_empty_plain_runs(line: str):
    assert all(run.text for run in inline_parse(line) if isinstance(run, Plain))


@given(st.lists(st.one_of(plain_line, st.just("")), max_size=20))
def test_plain_text_round_trip(lines: list[str]):
    blocks = parse_review("".join(f"{line}\n" for line in lines))

    expected = [Paragraph((Plain(line),)) if line else Spacer() for line in lines]
    assert blocks == expected


@given(st.text())
def test_lists_are_never_empty(text: str):
    for block in parse_review(text):
        if isinstance(block, List):
            assert block.items


code_line = st.text(alphabet=st.characters(exclude_characters="\n\r`"), max_size=30)


@given(st.lists(code_line, max_size=10))
def test_fenced_content_is_preserved(code_lines: list[str]):
    text = "\n".join(["```txt", *code_lines, "```"])

    blocks = parse_review(text)

    assert len(blocks) == 1
    assert isinstance(blocks[0], CodeBlock)
    assert blocks[0].code == "\n".join(code_lines).rstrip("\n")


@given(st.text(max_size=200))
def test_renderers_accept_any_parse_result(text: str):
    blocks = parse_review(text)
    assert render_html(blocks).endswith("\n")
    assert render_text(blocks).endswith("\n")
