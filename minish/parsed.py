"""The parsed form of a command line, ready to run."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .redirection import Redirection
from .scanner import Arg


@dataclass
class Command:
    """One command: its argument vector and the program name it runs."""

    args: list[str]
    name: str | None = None

    def __post_init__(self) -> None:
        if self.name is None and self.args:
            self.name = self.args[0]


@dataclass
class ParsedLine:
    """A parsed line: layout, commands and redirections in order.

    ``line`` holds each command as its index, each pipe as ``"|"`` and
    each redirection as ``"!"`` followed by its file name.
    """

    line: list[str] = field(default_factory=list)
    commands: list[Command] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)

    @property
    def command_count(self) -> int:
        """The number of command entries in the layout."""
        return sum(
            1 for entry in self.line if entry[:1] and entry[:1] in string.digits
        )


def join_args(args: Iterable[Arg]) -> list[str]:
    """Glue argument pieces into words.

    A piece without ``space_after`` is joined to the pieces that follow it
    up to and including the next one that ends a word.
    """
    words: list[str] = []
    current: list[str] = []
    for arg in args:
        current.append(arg.text)
        if arg.space_after:
            words.append("".join(current))
            current = []
    if current:
        words.append("".join(current))
    return words


def build_line(
    line: Sequence[str],
    commands: Sequence[Sequence[Arg]],
    redirections: Sequence[Redirection],
) -> ParsedLine:
    """Assemble the final parsed line from the regrouped scan results."""
    return ParsedLine(
        line=list(line),
        commands=[Command(join_args(args)) for args in commands],
        redirections=list(redirections),
    )