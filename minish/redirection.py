"""Redirection records and heredoc file naming."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from typing import IO, Any


class RedirKind(enum.Enum):
    """The kind of a redirection, by the letter the parser records."""

    INPUT = "i"
    OUTPUT = "o"
    APPEND = "a"
    HEREDOC = "h"


@dataclass
class Redirection:
    """One redirection of a command line.

    ``name`` is the file to open; for a heredoc it is the temporary file
    that holds the collected text and ``limit`` is the delimiter.
    """

    name: str
    kind: RedirKind
    limit: str | None = None
    stream: IO[Any] | None = field(default=None, compare=False, repr=False)


def heredoc_name(number: int) -> str:
    """Return the file name used for heredoc ``number``."""
    return f"heredoc{number}"


class HeredocNamer:
    """Hands out heredoc file names that do not exist yet."""

    def __init__(self, directory: str | os.PathLike[str] | None = None) -> None:
        self.directory = None if directory is None else os.fspath(directory)
        self._number = 0

    def _path(self, number: int) -> str:
        name = heredoc_name(number)
        if self.directory is None:
            return name
        return os.path.join(self.directory, name)

    def next_name(self) -> str:
        """Return the next unused heredoc path."""
        path = self._path(self._number)
        while os.path.exists(path):
            self._number += 1
            path = self._path(self._number)
        self._number += 1
        return path