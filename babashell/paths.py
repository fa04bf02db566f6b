"""Finding the files a command name may refer to."""

from __future__ import annotations

from .environment import ShellState, entry_value


def is_relative_executable(cmd: str) -> bool:
    """Tell whether ``cmd`` is a ``./name`` path."""
    return len(cmd) > 2 and cmd.startswith("./")


def is_absolute(cmd: str) -> bool:
    """Tell whether ``cmd`` is an absolute path longer than two characters."""
    return len(cmd) > 2 and cmd.startswith("/")


def split_path(value: str) -> list[str]:
    """Split a ``PATH`` value at colons, dropping empty parts."""
    return [part for part in value.split(":") if part]


def candidate_paths(state: ShellState, cmd: str) -> list[str] | None:
    """Return the paths to try for ``cmd``, in order.

    Explicit paths are returned as they are. Otherwise each ``PATH``
    directory is joined with ``cmd``; ``None`` means there is no ``PATH``.
    """
    if is_relative_executable(cmd) or is_absolute(cmd):
        return [cmd]
    entry = state.env.find("PATH")
    if entry is None:
        return None
    return [
        directory + cmd if directory.endswith("/") else f"{directory}/{cmd}"
        for directory in split_path(entry_value(entry))
    ]