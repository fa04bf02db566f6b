"""Splitting a command line into tokens.

Empty strings in the result separate words; text that touches without
whitespace (``a"b"``) stays in adjacent tokens so the parser can join it.
"""

from __future__ import annotations

from .strutils import closing_quote, token_kind

_SINGLE, _DOUBLE, _PIPE, _OUT, _IN = 1, 2, 3, 4, 5


def _token_end(line: str, start: int, kind: int) -> int:
    """Index just past the token starting at ``start``."""
    if kind in (_PIPE, _OUT, _IN):
        end = start + 1
        if token_kind(line[end : end + 1]) == kind:
            end += 1
        return end
    if kind in (_SINGLE, _DOUBLE):
        end = closing_quote(line, start)
        if end is None:
            raise ValueError("unmatched quotation mark")
        return end
    end = start
    while end < len(line) and not token_kind(line[end]) and line[end] != " ":
        end += 1
    return end


def tokenize(line: str) -> list[str]:
    """Split ``line`` into words, quoted strings and operators."""
    tokens: list[str] = []
    position = 0
    while position < len(line):
        start = position
        while start < len(line) and line[start] in " \t":
            start += 1
        kind = token_kind(line[start : start + 1])
        end = _token_end(line, start, kind)
        if kind in (_PIPE, _OUT, _IN):
            tokens.append("")
        tokens.append(line[start:end])
        following = line[end : end + 1]
        if kind in (_SINGLE, _DOUBLE):
            if following == " ":
                tokens.append("")
                end += 1
        elif kind in (_OUT, _IN):
            tokens.append("")
        elif kind == 0 and following == " ":
            tokens.append("")
        position = end
    return tokens