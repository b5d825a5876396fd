"""Heuristic source language detection for reviewed code.

Detection is a cascade of regular expressions checked in order; the first
match wins. Structural markers (HTML, PHP tags) come first, then keyword
checks, and SQL last because its keywords appear in prose and strings.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import PurePath

from .models import Block, CodeBlock

SUPPORTED_LANGUAGES = (
    "C#",
    "JavaScript",
    "HTML",
    "CSS",
    "T-SQL",
    "PL/SQL",
    "TypeScript",
    "Python",
    "Java",
    "C++",
    "Go",
    "Rust",
    "Ruby",
    "PHP",
    "Swift",
    "Kotlin",
)

EXTENSION_LANGUAGES = {
    "cs": "C#",
    "js": "JavaScript",
    "html": "HTML",
    "htm": "HTML",
    "css": "CSS",
    "sql": "T-SQL",
    "ts": "TypeScript",
    "py": "Python",
    "java": "Java",
    "cpp": "C++",
    "cxx": "C++",
    "cc": "C++",
    "hpp": "C++",
    "hxx": "C++",
    "h": "C++",
    "go": "Go",
    "rs": "Rust",
    "rb": "Ruby",
    "php": "PHP",
    "swift": "Swift",
    "kt": "Kotlin",
}

_LANGUAGE_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "HTML",
        re.compile(r"^\s*<!DOCTYPE html|<\s*(html|body|div|p|h[1-6])\s*>", re.IGNORECASE),
    ),
    ("PHP", re.compile(r"<\?php")),
    (
        "C#",
        re.compile(r"\b(using\s+System|namespace\s+|public\s+(class|interface|enum|struct)\s+\w+\s*:?)"),
    ),
    ("Java", re.compile(r"\b(import\s+java\.|public\s+class|System\.out\.println)")),
    (
        "Python",
        re.compile(r"^\s*def\s+\w+\s*\(.*\)\s*:|import\s+(pandas|numpy|tensorflow|torch|sklearn)\b"),
    ),
    ("C++", re.compile(r"^\s*#include\s*<|std::|int\s+main\s*\(\)")),
    # Type annotations separate TypeScript from JavaScript
    (
        "TypeScript",
        re.compile(
            r":\s*(string|number|boolean|any|void|Array<.*>|Promise<.*>)\s*([=;,(){]|\s*$)"
        ),
    ),
    (
        "JavaScript",
        re.compile(r"\b(const|let|var|function|=>|import\s+\{.*\}\s+from|require\s*\()"),
    ),
    ("Go", re.compile(r"\b(package\s+main|func\s+main|import\s*\()")),
    ("Rust", re.compile(r"\b(fn\s+main|let\s+mut|::\w+)")),
    ("Ruby", re.compile(r"^\s*def\s+.*?\s+do\b|\b(end|require\s*')")),
    (
        "Swift",
        re.compile(r"\b(import\s+(UIKit|SwiftUI)|func\s+|var\s+\w+\s*:|struct\s+\w+\s*:)"),
    ),
    ("Kotlin", re.compile(r"\b(fun\s+main|val\s+|var\s+\w+\s*:|package\s+\w+)")),
    # Selector-like text before a brace, after the curly-brace languages
    ("CSS", re.compile(r"^[\s\w\-\[\]#.:,>+~*=\"' ]+\s*\{", re.MULTILINE)),
)

# Python annotations can trip the Ruby rule via "end"
_RUBY_EXCLUSION = ": #"
_CSS_REQUIRED = re.compile(r"[:;]")

_SQL_PATTERN = re.compile(
    r"\b(SELECT|CREATE\s+TABLE|UPDATE|INSERT\s+INTO|DECLARE|FROM|WHERE)\b", re.IGNORECASE
)
_PLSQL_PATTERN = re.compile(r"\b(DBMS_OUTPUT\.PUT_LINE|BEGIN|END;|ELSIF|LOOP)\b", re.IGNORECASE)


def detect_language(code: str) -> str | None:
    """Guess the language of a code snippet.

    Args:
        code: Source code to inspect.

    Returns:
        str | None: A name from `SUPPORTED_LANGUAGES`, or None when uncertain.

    Examples:
        detect_language("<?php echo 1;")  # "PHP"
        detect_language("hello world")  # None
    """
    for language, pattern in _LANGUAGE_RULES:
        if not pattern.search(code):
            continue
        if language == "Ruby" and _RUBY_EXCLUSION in code:
            continue
        if language == "CSS" and not _CSS_REQUIRED.search(code):
            continue
        return language

    if _SQL_PATTERN.search(code):
        if _PLSQL_PATTERN.search(code):
            return "PL/SQL"
        return "T-SQL"

    return None


def language_from_extension(filename: str) -> str | None:
    """Map a file name to a language by its extension.

    Examples:
        language_from_extension("main.rs")  # "Rust"
        language_from_extension("notes")  # None
    """
    extension = PurePath(filename).suffix.lstrip(".").lower()
    if not extension:
        return None
    return EXTENSION_LANGUAGES.get(extension)


def language_from_tag(tag: str) -> str | None:
    """Map a code fence info string to a supported language name.

    Matches display names case-insensitively, then file extensions.

    Examples:
        language_from_tag("python")  # "Python"
        language_from_tag("rs")  # "Rust"
    """
    normalized = tag.strip().lower()
    if not normalized:
        return None
    for language in SUPPORTED_LANGUAGES:
        if language.lower() == normalized:
            return language
    return EXTENSION_LANGUAGES.get(normalized)


def guess_review_language(blocks: Iterable[Block]) -> str | None:
    """Guess the reviewed language from the code blocks of a review.

    Code blocks are tried in order; for each, its fence tag wins over its
    content.
    """
    for block in blocks:
        if not isinstance(block, CodeBlock):
            continue
        language = language_from_tag(block.language) or detect_language(block.code)
        if language is not None:
            return language
    return None
