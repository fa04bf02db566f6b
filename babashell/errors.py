"""Error message formatting for the shell."""

from __future__ import annotations

import errno
import sys
from typing import TextIO

PROMPT_NAME = "babatunde shell"


def error_message(cmd: str | None, context: str | None, msg: str) -> str:
    """Format ``shell: cmd: context: msg``, skipping absent parts."""
    parts = [part for part in (cmd, context) if part]
    if not parts:
        return msg
    return ": ".join([PROMPT_NAME, *parts, msg])


def report(
    cmd: str | None,
    context: str | None,
    msg: str,
    code: int,
    stream: TextIO | None = None,
) -> int:
    """Write an error line to ``stream`` (standard error by default); return ``code``."""
    target = sys.stderr if stream is None else stream
    target.write(error_message(cmd, context, msg) + "\n")
    target.flush()
    return code


def cd_error(path: str, error: OSError | int, stream: TextIO | None = None) -> int:
    """Report a failed directory change; always returns 1."""
    code = error if isinstance(error, int) else error.errno
    if code == errno.ENOENT:
        report("cd", path, "No such file or directory", 1, stream)
    elif code == errno.ENOTDIR:
        report("cd", path, "Not a directory", 1, stream)
    return 1