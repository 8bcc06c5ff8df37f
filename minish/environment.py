"""Shell environment variables, kept in the order they were defined."""

from __future__ import annotations

from typing import Iterable, Iterator


def split_assignment(text: str) -> tuple[str, str]:
    """Split ``NAME=value`` at the first ``=``.

    Raises ValueError when the text holds no ``=``.
    """
    name, sep, value = text.partition("=")
    if not sep:
        raise ValueError(f"not an assignment: {text!r}")
    return name, value


class Environment:
    """An ordered set of shell variables.

    Assigning to an existing name keeps its position; new names are
    appended at the end.
    """

    def __init__(self, entries: Iterable[tuple[str, str]] = ()) -> None:
        self._vars: dict[str, str] = {}
        for name, value in entries:
            self.set(name, value)

    @classmethod
    def from_strings(cls, strings: Iterable[str]) -> "Environment":
        """Build an environment from ``NAME=value`` strings."""
        return cls(split_assignment(text) for text in strings)

    def get(self, name: str) -> str | None:
        """Return the value of ``name``, or None when it is not set."""
        return self._vars.get(name)

    def set(self, name: str, value: str) -> None:
        """Assign ``value`` to ``name``."""
        self._vars[name] = value

    def unset(self, name: str) -> None:
        """Remove ``name``; removing an unknown name does nothing."""
        self._vars.pop(name, None)

    def to_envp(self) -> list[str]:
        """Return the variables as ``NAME=value`` strings for a child process."""
        return [f"{name}={value}" for name, value in self._vars.items()]

    def lines(self) -> Iterator[str]:
        """Yield one ``NAME=value`` line per variable, newline included."""
        for name, value in self._vars.items():
            yield f"{name}={value}\n"

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._vars.items()))

    def __len__(self) -> int:
        return len(self._vars)

    def __contains__(self, name: object) -> bool:
        return name in self._vars