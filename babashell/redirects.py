"""Input and output redirections of a single command."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import IO

from .errors import error_message
from .strutils import prefix_equal

ReadLine = Callable[[str], "str | None"]

_OPERATORS = (">", ">>", "<", "<<")
_INPUT, _HEREDOC, _TRUNCATE, _APPEND = 1, 2, 3, 4


class RedirectError(Exception):
    """A redirection target could not be opened."""

    def __init__(self, filename: str | None, reason: str) -> None:
        super().__init__(error_message(None, filename, reason))
        self.filename = filename
        self.reason = reason
        self.code = 1


def is_redirect(arg: str | None) -> bool:
    """Tell whether ``arg`` is a redirection operator (loosely, by prefix)."""
    if arg is None:
        return False
    return any(prefix_equal(arg, operator) for operator in _OPERATORS)


def redirection_type(arg: str | None) -> int:
    """Return 1 for '<', 2 for '<<', 3 for '>', 4 for '>>', 0 otherwise.

    Any operator longer than one character counts as the doubled form.
    """
    if arg is None or not is_redirect(arg):
        return 0
    kind = _INPUT if prefix_equal(arg, "<") else _TRUNCATE
    if len(arg) > 1:
        kind += 1
    return kind


def has_redirect(args: Sequence[str]) -> bool:
    """Tell whether any argument is a redirection operator."""
    return any(is_redirect(arg) for arg in args)


def strip_redirections(args: Sequence[str]) -> list[str]:
    """Drop every operator together with the argument after it."""
    result: list[str] = []
    skip = False
    for arg in args:
        if skip:
            skip = False
        elif is_redirect(arg):
            skip = True
        else:
            result.append(arg)
    return result


def _default_read_line(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def read_heredoc(delimiter: str | None, read_line: ReadLine | None = None) -> str:
    """Collect lines until one equals ``delimiter`` or input ends."""
    reader = read_line or _default_read_line
    lines: list[str] = []
    while True:
        try:
            line = reader("> ")
        except EOFError:
            break
        if line is None or line == delimiter:
            break
        lines.append(line + "\n")
    return "".join(lines)


@dataclass
class Redirections:
    """Streams a command reads from and writes to instead of the defaults."""

    stdin: IO[bytes] | None = None
    stdout: IO[str] | None = None

    def _replace_stdin(self, stream: IO[bytes]) -> None:
        if self.stdin is not None:
            self.stdin.close()
        self.stdin = stream

    def _replace_stdout(self, stream: IO[str]) -> None:
        if self.stdout is not None:
            self.stdout.close()
        self.stdout = stream

    def close(self) -> None:
        """Close every stream that was opened."""
        for stream in (self.stdin, self.stdout):
            if stream is not None:
                stream.close()
        self.stdin = None
        self.stdout = None

    def __enter__(self) -> Redirections:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _open_input(filename: str | None) -> IO[bytes]:
    reason = "No such file or directory"
    if filename is None:
        raise RedirectError(None, reason)
    try:
        return open(filename, "rb")
    except OSError as err:
        raise RedirectError(filename, reason) from err


def _open_output(filename: str | None, append: bool) -> IO[str]:
    reason = "File could not be opened"
    if filename is None:
        raise RedirectError(None, reason)
    flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
    try:
        fd = os.open(filename, flags, 0o777)
    except OSError as err:
        raise RedirectError(filename, reason) from err
    return os.fdopen(fd, "w", encoding="utf-8")


def _heredoc_stream(delimiter: str | None, read_line: ReadLine | None) -> IO[bytes]:
    stream = tempfile.TemporaryFile()
    stream.write(read_heredoc(delimiter, read_line).encode("utf-8"))
    stream.seek(0)
    return stream


def apply_redirections(
    args: Sequence[str], read_line: ReadLine | None = None
) -> Redirections:
    """Open every redirection target of ``args`` in order.

    Later redirections of the same direction replace earlier ones, though
    earlier output files are still created. A target that is itself an
    operator is skipped. Raises RedirectError when a file cannot be opened;
    streams opened so far are closed first.
    """
    redirections = Redirections()
    if not has_redirect(args):
        return redirections
    try:
        for index, arg in enumerate(args):
            if not is_redirect(arg):
                continue
            target = args[index + 1] if index + 1 < len(args) else None
            if is_redirect(target):
                continue
            kind = redirection_type(arg)
            if kind == _INPUT:
                redirections._replace_stdin(_open_input(target))
            elif kind == _HEREDOC:
                redirections._replace_stdin(_heredoc_stream(target, read_line))
            else:
                redirections._replace_stdout(_open_output(target, kind == _APPEND))
    except RedirectError:
        redirections.close()
        raise
    return redirections