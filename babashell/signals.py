"""Signal handling for the prompt, running children and here-documents."""

from __future__ import annotations

import enum
import signal
import sys
from dataclasses import dataclass
from types import FrameType
from typing import Any, Callable

Handler = Callable[[int, "FrameType | None"], None]


class SignalMode(enum.IntEnum):
    """Which part of the shell is running, and so how signals are handled."""

    PROMPT = 0
    CHILD = 1
    HEREDOC = 2


@dataclass
class _Pending:
    signal: int = 0


_pending = _Pending()


def _write(stream: Any, text: str) -> None:
    stream.write(text)
    stream.flush()


def _prompt_handler(signum: int, frame: FrameType | None) -> None:
    """Ctrl-C abandons the line being typed; Ctrl-\\ and SIGTERM are ignored."""
    if signum == signal.SIGINT:
        _write(sys.stdout, "\n")
        _pending.signal = signal.SIGINT
        raise KeyboardInterrupt


def _child_handler(signum: int, frame: FrameType | None) -> None:
    """While a command runs the shell only notes the signal."""
    if signum == signal.SIGINT:
        _pending.signal = signal.SIGINT
        _write(sys.stdout, "\n")
    elif signum == getattr(signal, "SIGQUIT", None):
        _write(sys.stderr, "Quit: 3\n")
        _pending.signal = signum


def _heredoc_handler(signum: int, frame: FrameType | None) -> None:
    """Ctrl-C ends here-document input as if it had reached end of file."""
    if signum == signal.SIGINT:
        _pending.signal = signal.SIGINT
        _write(sys.stdout, "> \n")
        raise EOFError


_HANDLERS: dict[SignalMode, Handler] = {
    SignalMode.PROMPT: _prompt_handler,
    SignalMode.CHILD: _child_handler,
    SignalMode.HEREDOC: _heredoc_handler,
}


def install_handlers(mode: SignalMode) -> dict[int, Any]:
    """Install the handlers for ``mode`` on SIGINT, SIGQUIT and SIGTERM.

    Returns the handlers that were replaced, keyed by signal number.
    """
    handler = _HANDLERS[SignalMode(mode)]
    previous: dict[int, Any] = {}
    for name in ("SIGINT", "SIGQUIT", "SIGTERM"):
        signum = getattr(signal, name, None)
        if signum is None:
            continue
        previous[signum] = signal.signal(signum, handler)
    return previous


def consume_interrupt() -> bool:
    """Tell whether SIGINT arrived since the last call, and forget it."""
    if _pending.signal == signal.SIGINT:
        _pending.signal = 0
        return True
    return False