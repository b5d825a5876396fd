"""Constants used across the review-markdown package."""

from __future__ import annotations

import re

# Markdown patterns
CODE_FENCE = "```"
BOLD_MARKER = "**"
INLINE_CODE_MARKER = "`"
UNORDERED_LIST_PREFIXES = ("* ", "- ")
ORDERED_LIST_PATTERN = re.compile(r"^[0-9]+\.\s")
HEADING_PREFIXES = (("# ", 1), ("## ", 2), ("### ", 3))
INLINE_SPAN_PATTERN = re.compile(r"(?P<bold>\*\*.*?\*\*)|(?P<code>`.*?`)")

# Output
OUTPUT_FORMATS = ("html", "text", "json")
EXPORT_FORMATS = (*OUTPUT_FORMATS, "md")
DEFAULT_EMPTY_PLACEHOLDER = "Your code review feedback will appear here."
DEFAULT_CODE_CLASS_PREFIX = "language-"
DEFAULT_EXPORT_PREFIX = "code-review"

# Limits
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
REVIEW_EXTENSIONS = (".md", ".markdown", ".txt")
