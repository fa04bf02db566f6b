"""The shell's variable list and the state shared across a session."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from .strutils import matches_name


def entry_name(entry: str) -> str:
    """Return the variable name of an entry: everything before the first '='."""
    return entry.partition("=")[0]


def entry_value(entry: str) -> str:
    """Return the value of an entry, or an empty string if it has no '='."""
    return entry.partition("=")[2]


class Environment:
    """Ordered list of ``NAME=value`` (or bare ``NAME``) entries."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries: list[str] = list(entries)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> Environment:
        """Build an environment from a mapping such as ``os.environ``."""
        return cls(f"{key}={value}" for key, value in mapping.items())

    def _index(self, name: str) -> int | None:
        return next(
            (i for i, entry in enumerate(self._entries) if matches_name(entry, name)),
            None,
        )

    def find(self, name: str) -> str | None:
        """Return the first entry defining ``name``, or ``None``."""
        index = self._index(name)
        return None if index is None else self._entries[index]

    def get(self, name: str) -> str:
        """Return the value of ``name``; unknown or valueless names give ''."""
        entry = self.find(name)
        return "" if entry is None else entry_value(entry)

    def set(self, entry: str) -> None:
        """Replace the entry with the same name, or append a new one."""
        index = self._index(entry_name(entry))
        if index is None:
            self._entries.append(entry)
        else:
            self._entries[index] = entry

    def add_or_replace(self, entry: str) -> None:
        """Export semantics: append new names, replace only when a value is given."""
        index = self._index(entry_name(entry))
        if index is None:
            self._entries.append(entry)
        elif "=" in entry:
            self._entries[index] = entry

    def unset(self, name: str) -> bool:
        """Remove the variable ``name``; return whether it was present."""
        index = self._index(name)
        if index is None:
            return False
        del self._entries[index]
        return True

    def envp(self) -> list[str]:
        """Entries that carry a value, as handed to child processes."""
        return [entry for entry in self._entries if "=" in entry]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Environment({self._entries!r})"


@dataclass
class ShellState:
    """Everything a running shell session keeps between command lines."""

    env: Environment
    cwd: str = field(default_factory=os.getcwd)
    exit_code: int = 0