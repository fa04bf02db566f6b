"""Grouping tokens into the commands of a pipeline."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .strutils import trim_char


@dataclass
class Command:
    """One stage of a pipeline: its words, redirections included."""

    args: list[str] = field(default_factory=list)


def _unquote(token: str) -> str:
    """Strip the surrounding quotes of a quoted token, or spaces of a word."""
    if token[0] in "\"'":
        return trim_char(token, token[0])
    return trim_char(token, " ")


def _join_words(tokens: Iterable[str]) -> list[str]:
    """Merge tokens between empty separators into arguments."""
    args: list[str] = []
    current: str | None = None
    for token in tokens:
        if not token:
            if current is not None:
                args.append(current)
                current = None
        else:
            current = (current or "") + _unquote(token)
    if current is not None:
        args.append(current)
    return args


def parse(tokens: Sequence[str]) -> list[Command]:
    """Split ``tokens`` at each ``|`` into commands.

    There is always at least one command; a command with no words marks an
    empty pipeline stage.
    """
    commands: list[Command] = []
    position = 0
    while True:
        if position < len(tokens) and tokens[position] == "|":
            position += 1
        end = position
        while end < len(tokens) and tokens[end] != "|":
            end += 1
        commands.append(Command(_join_words(tokens[position:end])))
        position = end
        if position >= len(tokens):
            return commands