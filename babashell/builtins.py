"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from typing import TextIO

from .environment import ShellState, entry_name, entry_value
from .errors import cd_error, report
from .redirects import is_redirect
from .strutils import prefix_equal

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_LONG_MAX = 2**63 - 1
_SPACES = " \t\n\v\f\r"


class ShellExit(Exception):
    """Raised by ``exit`` to end the session with ``code``."""

    def __init__(self, code: int) -> None:
        super().__init__(f"exit {code}")
        self.code = code


def _to_int32(value: int) -> int:
    return (value - _INT_MIN) % 2**32 + _INT_MIN


def atoi(text: str) -> int:
    """Parse a leading integer the way the C library's ``atoi`` does.

    Leading whitespace and one sign are accepted; parsing stops at the first
    non-digit. A magnitude past the 64-bit range gives -1, or 0 if negative.
    """
    stripped = text.lstrip(_SPACES)
    sign = 1
    if stripped[:1] in ("-", "+"):
        if stripped[0] == "-":
            sign = -1
        stripped = stripped[1:]
    number = 0
    for char in stripped:
        if not "0" <= char <= "9":
            break
        number = number * 10 + ord(char) - ord("0")
        if number > _LONG_MAX:
            return 0 if sign == -1 else -1
    return _to_int32(number * sign)


def _leading_long(text: str) -> int:
    stripped = text.lstrip(_SPACES)
    sign = 1
    if stripped[:1] in ("-", "+"):
        if stripped[0] == "-":
            sign = -1
        stripped = stripped[1:]
    digits = ""
    for char in stripped:
        if not "0" <= char <= "9":
            break
        digits += char
    return sign * int(digits or "0")


def _is_number(text: str) -> bool:
    if not text:
        return False
    body = text[1:] if text.startswith("-") else text
    return all("0" <= char <= "9" for char in body)


def _numeric_ok(text: str) -> bool:
    return _is_number(text) and _INT_MIN <= _leading_long(text) <= _INT_MAX


def _out(stdout: TextIO | None) -> TextIO:
    return sys.stdout if stdout is None else stdout


def builtin_echo(args: Sequence[str], stdout: TextIO | None = None) -> int:
    """Print the arguments separated by spaces; a leading ``-n`` drops the newline."""
    out = _out(stdout)
    words = list(args[1:])
    newline = True
    if words and prefix_equal(words[0], "-n"):
        newline = False
        words = words[1:]
    out.write(" ".join(words))
    if newline:
        out.write("\n")
    out.flush()
    return 0


def builtin_pwd(state: ShellState, stdout: TextIO | None = None) -> int:
    """Print the shell's current directory."""
    out = _out(stdout)
    out.write(f"{state.cwd}\n")
    out.flush()
    return 0


def builtin_env(state: ShellState, stdout: TextIO | None = None) -> int:
    """Print every variable that carries a value."""
    out = _out(stdout)
    for entry in state.env.envp():
        if entry:
            out.write(f"{entry}\n")
    out.flush()
    return 0


def _cd_target(args: Sequence[str], state: ShellState, out: TextIO) -> str | None:
    if len(args) == 1 or args[1].startswith("~"):
        path = state.env.get("HOME")
        if not path:
            report("cd", None, "HOME not set", 1)
            return None
        return path
    if args[1].startswith("-"):
        path = state.env.get("OLDPWD")
        if not path:
            report("cd", None, "OLDPWD not set", 1)
            return None
        out.write(f"{path}\n")
        out.flush()
        return path
    return args[1]


def builtin_cd(
    args: Sequence[str], state: ShellState, stdout: TextIO | None = None
) -> int:
    """Change directory and keep ``PWD`` and ``OLDPWD`` up to date."""
    out = _out(stdout)
    if len(args) > 2:
        return report("cd", None, "too many arguments", 1)
    path = _cd_target(args, state, out)
    if path is None:
        return 1
    try:
        os.chdir(path)
    except OSError as err:
        return cd_error(path, err)
    state.env.set(f"OLDPWD={state.cwd}")
    state.cwd = os.getcwd()
    state.env.set(f"PWD={state.cwd}")
    return 0


def _display_export(entry: str, out: TextIO) -> None:
    if not entry:
        return
    if "=" in entry:
        out.write(f'declare -x {entry_name(entry)}="{entry_value(entry)}"\n')
    else:
        out.write(f"declare -x {entry}\n")


def builtin_export(
    args: Sequence[str], state: ShellState, stdout: TextIO | None = None
) -> int:
    """List variables, or add and update the given ``NAME[=value]`` entries."""
    out = _out(stdout)
    if len(args) < 2:
        for entry in state.env:
            _display_export(entry, out)
        out.flush()
        return 0
    for arg in args[1:]:
        first = arg[:1]
        invalid = not first or (
            first.isascii() and not first.isalpha() and first != "_"
        )
        if invalid:
            if is_redirect(arg):
                return 0
            return report("export", arg, "not a valid identifier", 1)
        state.env.add_or_replace(arg)
    return 0


def builtin_unset(args: Sequence[str], state: ShellState) -> int:
    """Remove the named variables; names starting with ``_`` are kept."""
    for arg in args[1:]:
        if prefix_equal(arg, "_"):
            continue
        state.env.unset(arg)
    return 0


def builtin_exit(
    args: Sequence[str], state: ShellState, stdout: TextIO | None = None
) -> int:
    """End the session by raising ShellExit.

    Returns 1 without exiting when given too many numeric arguments.
    """
    out = _out(stdout)
    out.write("exit\n")
    out.flush()
    if len(args) > 2:
        if not _numeric_ok(args[1]):
            code = report("exit", None, "numeric argument required", 2)
        else:
            return report("exit", None, "too many arguments", 1)
    elif len(args) < 2:
        code = 0
    elif not _numeric_ok(args[1]):
        code = report("exit", None, "numeric argument required", 2)
    else:
        code = atoi(args[1])
    raise ShellExit(code % 256)


def run_builtin(
    args: Sequence[str], state: ShellState, stdout: TextIO | None = None
) -> int | None:
    """Run ``args`` as a builtin and return its status.

    Returns ``None`` when the command is not a builtin; an empty command
    gives 0.
    """
    if not args:
        return 0
    name = args[0]
    if name == "echo":
        return builtin_echo(args, stdout)
    if name == "pwd":
        return builtin_pwd(state, stdout)
    if name == "env":
        return builtin_env(state, stdout)
    if name == "cd":
        return builtin_cd(args, state, stdout)
    if name == "export":
        return builtin_export(args, state, stdout)
    if name == "unset":
        return builtin_unset(args, state)
    if name == "exit":
        return builtin_exit(args, state, stdout)
    return None