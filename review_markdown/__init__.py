"""
review-markdown: Render LLM-generated code reviews written in a Markdown subset.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    review-markdown render review.md --format text

Library Usage:
    from review_markdown import parse_review, render_html

    blocks = parse_review(review_text)
    fragment = render_html(blocks)
"""

from .config import ConfigError, RenderConfig
from .exceptions import FileTooLargeError, ParseFileError
from .languages import detect_language, language_from_extension
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
from .parser import inline_parse, parse, parse_file, parse_review
from .render import blocks_to_data, render, render_html, render_text

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_review",
    "parse",
    "inline_parse",
    "parse_file",
    # Render tree
    "Block",
    "Heading",
    "Paragraph",
    "List",
    "CodeBlock",
    "Spacer",
    "InlineRun",
    "Plain",
    "Bold",
    "InlineCode",
    # Presentation
    "render",
    "render_html",
    "render_text",
    "blocks_to_data",
    # Utilities
    "RenderConfig",
    "detect_language",
    "language_from_extension",
    # Exceptions
    "ConfigError",
    "FileTooLargeError",
    "ParseFileError",
    # Version
    "__version__",
]
