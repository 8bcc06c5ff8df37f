"""Collecting the text of a heredoc into its temporary file."""

from __future__ import annotations

import os
import sys
from typing import Callable

from .redirect import FILE_MODE

ReadLine = Callable[[], "str | None"]


def _create(path: str, flags: int) -> int:
    return os.open(path, flags, FILE_MODE)


def collect_heredoc(delimiter: str, path: str, read_line: ReadLine) -> str:
    """Write lines from ``read_line`` to ``path`` until ``delimiter`` is read.

    ``read_line`` returns None at end of input, which also ends the text
    after a warning. The file is truncated first. Returns ``path``.
    """
    with open(path, "w", encoding="utf-8", opener=_create) as stream:
        while True:
            line = read_line()
            if line is None:
                sys.stdout.write(
                    "here-document delimited by end-of-file "
                    f"(wanted `{delimiter}')\n"
                )
                break
            if line == delimiter:
                break
            stream.write(f"{line}\n")
    return path


def prompt_reader(prompt: str) -> ReadLine:
    """Return a reader that shows ``prompt`` and gives None at end of input."""

    def read() -> str | None:
        try:
            return input(prompt)
        except EOFError:
            return None

    return read