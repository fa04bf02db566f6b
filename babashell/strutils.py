"""Small string helpers shared by the lexer, parser and environment code."""

from __future__ import annotations

_TOKEN_CHARS = "'\"|><"


def token_kind(char: str) -> int:
    """Classify a character: 1 ', 2 ", 3 |, 4 >, 5 <, otherwise 0."""
    if not char:
        return 0
    index = _TOKEN_CHARS.find(char)
    return index + 1


def closing_quote(line: str, start: int) -> int | None:
    """Return the index just past the quote closing the one at ``start``.

    Returns ``None`` when the quote is never closed.
    """
    quote = line[start]
    end = line.find(quote, start + 1)
    if end == -1:
        return None
    return end + 1


def trim_char(text: str, char: str) -> str:
    """Remove every leading and trailing occurrence of ``char``."""
    return text.strip(char)


def prefix_equal(first: str | None, second: str | None) -> bool:
    """Loose comparison: both non-empty and one is a prefix of the other."""
    if first is None or second is None:
        return False
    if not first or not second:
        return False
    return first.startswith(second) or second.startswith(first)


def matches_name(entry: str, name: str) -> bool:
    """Tell whether an environment entry defines the variable ``name``."""
    return entry == name or entry.startswith(name + "=")