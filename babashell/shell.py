"""The interactive read-evaluate loop and the command-line entry point."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager

from .builtins import ShellExit
from .environment import Environment, ShellState
from .errors import PROMPT_NAME, report
from .executor import run_commands
from .expand import expand_variables
from .lexer import tokenize
from .parser import Command, parse
from .redirects import is_redirect
from .signals import SignalMode, consume_interrupt, install_handlers
from .strutils import closing_quote

PROMPT = f"{PROMPT_NAME}: "
_UNMATCHED = "Error: Unmatched quotation mark detected"

ReadLine = Callable[[str], "str | None"]


def has_unclosed_quote(line: str) -> bool:
    """Tell whether a single or double quote in ``line`` is never closed."""
    index = 0
    while index < len(line):
        if line[index] in "'\"":
            end = closing_quote(line, index)
            if end is None:
                return True
            index = end
        else:
            index += 1
    return False


def redirect_syntax_error(commands: Sequence[Command], state: ShellState) -> int:
    """Report an operator followed by nothing or by another operator.

    Returns 2 and sets the exit code when such an error is found, else 0.
    """
    for command in commands:
        args = command.args
        for arg, following in zip(args, [*args[1:], None]):
            if is_redirect(arg) and (following is None or is_redirect(following)):
                state.exit_code = 2
                return report(arg, None, "syntax error near unexpected token", 2)
    return 0


def _prompt_reader(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


@contextmanager
def _terminal_settings() -> Iterator[None]:
    """Stop the terminal from echoing control characters such as ``^C``."""
    try:
        import termios
    except ImportError:
        yield
        return
    try:
        interactive = sys.stdin.isatty()
        fd = sys.stdin.fileno()
    except (AttributeError, OSError, ValueError):
        interactive = False
    if not interactive:
        yield
        return
    old = termios.tcgetattr(fd)
    new = termios.tcgetattr(fd)
    new[3] &= ~getattr(termios, "ECHOCTL", 0)
    termios.tcsetattr(fd, termios.TCSANOW, new)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, old)


class Shell:
    """One interactive session with its own variables and exit status."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        source = os.environ if environ is None else environ
        self.state = ShellState(Environment.from_mapping(source))

    def run_line(self, line: str) -> int:
        """Expand, parse and run one command line; return the exit status.

        ``exit`` raises ShellExit.
        """
        if has_unclosed_quote(line):
            print(_UNMATCHED, flush=True)
            return self.state.exit_code
        try:
            tokens = tokenize(expand_variables(line, self.state))
        except ValueError:
            print(_UNMATCHED, flush=True)
            return self.state.exit_code
        commands = parse(tokens)
        if redirect_syntax_error(commands, self.state) == 0:
            run_commands(commands, self.state)
        return self.state.exit_code

    def repl(self, read_line: ReadLine | None = None) -> int:
        """Read and run lines until input ends or ``exit``; return the exit code."""
        reader = read_line or _prompt_reader
        with _terminal_settings():
            while True:
                try:
                    install_handlers(SignalMode.PROMPT)
                    if consume_interrupt():
                        self.state.exit_code = 1
                    try:
                        line = reader(PROMPT)
                    except EOFError:
                        line = None
                    if line is None:
                        return 0
                    self.run_line(line)
                except KeyboardInterrupt:
                    continue
                except ShellExit as exc:
                    return exc.code


def _enable_line_editing() -> None:
    try:
        import readline  # noqa: F401  gives input() editing and history
    except ImportError:
        pass


def main(argv: Sequence[str] | None = None) -> int:
    """Start an interactive session; any argument makes it return at once."""
    args = sys.argv[1:] if argv is None else list(argv)
    if args:
        return 0
    _enable_line_editing()
    return Shell().repl()


if __name__ == "__main__":
    raise SystemExit(main())