"""Lightweight source heuristics used by the script classifier.

None of these parse JavaScript; they are plain text scans
that tolerate arbitrary input.
"""

from __future__ import annotations

from browsercov.filtering.signatures import (
    REPETITIVE_LINE_RATIO,
    REPETITIVE_MIN_LENGTH,
    REPETITIVE_MIN_LINES,
    REPETITIVE_SYMBOL_LIMIT,
    REPETITIVE_SYMBOLS,
    STATEMENT_KEYWORDS,
)

_QUOTES = ('"', "'")


def _strip_line_comment(line: str) -> str:
    """Cut a ``//`` comment from *line*, ignoring ``//`` inside quotes."""
    in_string = False
    escaped = False
    for i, char in enumerate(line):
        if escaped:
            escaped = False
            continue
        if char == "\\" and in_string:
            escaped = True
            continue
        if char in _QUOTES:
            in_string = not in_string
            continue
        if not in_string and line.startswith("//", i):
            return line[:i]
    return line


def strip_js_comments(source: str) -> str:
    """Remove ``//`` and ``/* */`` comments from *source*.

    An unterminated block comment swallows the rest of the source.
    """
    result = "\n".join(_strip_line_comment(line) for line in source.split("\n"))

    while (start := result.find("/*")) != -1:
        end = result.find("*/", start + 2)
        if end == -1:
            return result[:start]
        result = result[:start] + result[end + 2 :]
    return result


def count_statements(source: str) -> int:
    """Estimate the number of statements in *source*.

    Uses the larger of the semicolon count and the number of statement
    keyword occurrences, both measured after comments are removed.
    """
    if not source:
        return 0
    cleaned = strip_js_comments(source)
    semicolons = cleaned.count(";")
    lowered = cleaned.lower()
    keywords = sum(lowered.count(keyword) for keyword in STATEMENT_KEYWORDS)
    return max(semicolons, keywords)


def non_empty_line_count(source: str) -> int:
    return sum(1 for line in source.split("\n") if line.strip())


def is_repetitive(source: str) -> bool:
    """Return True when *source* looks machine-generated by repetition.

    Either most adjacent line pairs are identical, or a narrow symbol such
    as ``===`` or ``000`` occurs many times.
    """
    if len(source) < REPETITIVE_MIN_LENGTH:
        return False

    lines = source.split("\n")
    if len(lines) < REPETITIVE_MIN_LINES:
        return False

    identical = 0
    for current, following in zip(lines, lines[1:], strict=False):
        stripped = current.strip()
        if stripped and stripped == following.strip():
            identical += 1

    if identical / len(lines) > REPETITIVE_LINE_RATIO:
        return True

    return any(source.count(symbol) > REPETITIVE_SYMBOL_LIMIT for symbol in REPETITIVE_SYMBOLS)
