"""Merging the pieces of a command that redirections cut apart.

The scanner closes a command whenever a redirection interrupts it, so
``echo a > f b`` comes out as two commands ``echo a`` and ``b``. Between
two pipes they belong to one command, and this module joins them again.
"""

from __future__ import annotations

import string
from typing import Sequence

from .fragments import is_operator
from .scanner import Arg


def _is_command_entry(entry: str) -> bool:
    head = entry[:1]
    return bool(head) and head in string.digits


def regroup(
    line: Sequence[str], commands: Sequence[Sequence[Arg]]
) -> tuple[list[str], list[list[Arg]]]:
    """Join the commands that share one pipeline stage.

    ``line`` is the scanner's layout: command indexes, ``"|"`` and
    ``"!name"`` entries. Commands are consumed in order; every index after
    the first in a stage appends its arguments to the stage's command.
    Returns the renumbered layout and the merged commands. Raises
    ValueError when the layout refers to more commands than were given.
    """

    def command_at(index: int) -> list[Arg]:
        if index >= len(commands):
            raise ValueError(f"line refers to missing command {index}")
        return list(commands[index])

    new_line: list[str] = []
    new_commands: list[list[Arg]] = []
    current: list[Arg] | None = None
    count = 0
    source = 0
    for entry in line:
        if _is_command_entry(entry):
            if current is None:
                current = command_at(source)
                new_line.append(str(count))
                count += 1
            else:
                source += 1
                current.extend(command_at(source))
        elif entry[:1] == "!":
            new_line.append(entry)
        elif is_operator(entry[:1], "|"):
            new_line.append("|")
            if current is not None:
                new_commands.append(current)
                current = None
                source += 1
    if current is not None:
        new_commands.append(current)
    return new_line, new_commands