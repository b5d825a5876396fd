"""Data models for review-markdown.

The render tree is a closed set of frozen dataclasses. ``Block`` and
``InlineRun`` are unions of their variants, so presentation code can
``match`` over them exhaustively.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from .constants import BOLD_MARKER, INLINE_CODE_MARKER


@dataclass(frozen=True, slots=True)
class Plain:
    """Unstyled text run."""

    text: str

    @property
    def markup(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class Bold:
    """Text run delimited by ``**`` markers."""

    text: str

    @property
    def markup(self) -> str:
        return f"{BOLD_MARKER}{self.text}{BOLD_MARKER}"


@dataclass(frozen=True, slots=True)
class InlineCode:
    """Text run delimited by single backticks."""

    text: str

    @property
    def markup(self) -> str:
        return f"{INLINE_CODE_MARKER}{self.text}{INLINE_CODE_MARKER}"


InlineRun = Plain | Bold | InlineCode


@dataclass(frozen=True, slots=True)
class Heading:
    """Heading block.

    Attributes:
        level: Heading level, 1 through 3.
        text: Inline runs of the heading title.
    """

    level: int
    text: tuple[InlineRun, ...]


@dataclass(frozen=True, slots=True)
class Paragraph:
    """Single line of body text."""

    text: tuple[InlineRun, ...]


@dataclass(frozen=True, slots=True)
class List:
    """Run of consecutive list items of the same kind.

    Attributes:
        ordered: True for numbered items, False for bullets.
        items: Inline runs for each item, marker stripped. Never empty.
    """

    ordered: bool
    items: tuple[tuple[InlineRun, ...], ...]


@dataclass(frozen=True, slots=True)
class CodeBlock:
    """Fenced code block.

    Attributes:
        language: Info string following the opening fence; may be empty.
        lines: Lines between the fences, trailing empty lines dropped.
    """

    language: str
    lines: tuple[str, ...]

    @property
    def code(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True, slots=True)
class Spacer:
    """Blank line preserved as vertical rhythm."""


Block = Heading | Paragraph | List | CodeBlock | Spacer


class ListKind(Enum):
    """Kind of list item a line opens."""

    UNORDERED = auto()
    ORDERED = auto()


class ParserState(Enum):
    """Parser states used while scanning review text.

    Attributes:
        NORMAL: Default state for regular text.
        IN_FENCED_CODE: Inside a fenced code block.
    """

    NORMAL = auto()
    IN_FENCED_CODE = auto()


@dataclass
class ParserContext:
    """Encapsulate parser state while walking review text.

    Created at the start of each parse call and discarded at its end.

    Attributes:
        state: Current parser state.
        code_lang: Info string of the open fence.
        code_buffer: Lines collected inside the open fence.
        pending_list_items: Item texts awaiting a flush, markers stripped.
        pending_list_kind: Kind of the pending items.
    """

    state: ParserState = ParserState.NORMAL
    code_lang: str = ""
    code_buffer: list[str] = field(default_factory=list)
    pending_list_items: list[str] = field(default_factory=list)
    pending_list_kind: ListKind = ListKind.UNORDERED

    @property
    def in_code_block(self) -> bool:
        return self.state is ParserState.IN_FENCED_CODE
