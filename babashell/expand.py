"""Expansion of ``$NAME`` and ``$?`` references in a command line."""

from __future__ import annotations

from .environment import ShellState
from .strutils import closing_quote, token_kind

_QUOTES = ("'", '"')


def lookup_variable(state: ShellState, name: str) -> str:
    """Return the text a ``$name`` reference expands to.

    A name starting with ``?`` yields the last exit code; anything after
    the question mark is dropped. Unknown names expand to ''.
    """
    if name.startswith("?"):
        return str(state.exit_code)
    return state.env.get(name)


def _name_end(line: str, dollar: int) -> int:
    """Index just past the variable name that follows the ``$`` at ``dollar``."""
    end = dollar + 1
    while end < len(line) and line[end] not in " $" and not token_kind(line[end]):
        end += 1
    return end


def _bare_dollar(line: str, dollar: int, in_double: bool) -> str:
    """Decide what a ``$`` with no name after it turns into."""
    before = line[dollar - 1] if dollar > 0 else ""
    after = line[dollar + 1] if dollar + 1 < len(line) else ""
    left = before not in _QUOTES
    if in_double:
        right = not token_kind(after) and after != " "
    else:
        right = after in _QUOTES
    return "" if left and right else "$"


def expand_variables(line: str, state: ShellState) -> str:
    """Replace variable references outside single quotes.

    Raises ValueError when a single quote that has to be skipped is never
    closed.
    """
    result = line
    index = 0
    in_double = False
    while "$" in result[index:]:
        char = result[index]
        if char == '"':
            in_double = not in_double
        elif char == "'" and not in_double:
            end = closing_quote(result, index)
            if end is None:
                raise ValueError("unmatched quotation mark")
            # The character right after the closing quote is stepped over too.
            index = end
        elif char == "$":
            end = _name_end(result, index)
            name = result[index + 1 : end]
            if name:
                value = lookup_variable(state, name)
            else:
                value = _bare_dollar(result, index, in_double)
            prefix = result[:index]
            result = prefix + value + result[end:]
            index = len(prefix) + len(value) - 1
        index += 1
    return result