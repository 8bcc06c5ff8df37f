"""Opening and closing the files named by a line's redirections."""

from __future__ import annotations

import errno
import os
import sys
from typing import IO, Any, Callable, Iterable

from .redirection import RedirKind, Redirection

FILE_MODE = 0o644


class RedirectError(OSError):
    """Raised when a redirection file cannot be opened."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message

    def __str__(self) -> str:
        return self.message


def _describe(path: str, error: OSError) -> RedirectError:
    if error.errno == errno.EACCES:
        text = "Permission denied"
    elif error.errno == errno.ENOENT:
        text = "No such file or directory"
    else:
        text = error.strerror or str(error)
    return RedirectError(path, f"minishell: {path}: {text}")


def _create(path: str, flags: int) -> int:
    return os.open(path, flags, FILE_MODE)


def open_output(path: str, append: bool = False) -> IO[Any]:
    """Open ``path`` for writing, truncating it or appending to it."""
    try:
        return open(path, "a" if append else "w", encoding="utf-8", opener=_create)
    except OSError as error:
        raise _describe(path, error) from error


def open_input(path: str) -> IO[Any]:
    """Open ``path`` for reading."""
    try:
        return open(path, "r", encoding="utf-8")
    except OSError as error:
        raise _describe(path, error) from error


def close_redirections(redirections: Iterable[Redirection]) -> None:
    """Close every open stream and delete the heredoc files."""
    for redirection in redirections:
        if redirection.stream is not None:
            redirection.stream.close()
            redirection.stream = None
        if redirection.kind is RedirKind.HEREDOC:
            try:
                os.unlink(redirection.name)
            except OSError as error:
                sys.stderr.write(
                    f"minishell: cannot remove {redirection.name}: "
                    f"{error.strerror}\n"
                )


def _close_streams(redirections: Iterable[Redirection]) -> None:
    for redirection in redirections:
        if redirection.stream is not None:
            redirection.stream.close()
            redirection.stream = None


def open_redirections(
    redirections: Iterable[Redirection],
    collect_heredoc: Callable[[str, str], object],
) -> None:
    """Open every redirection in order, storing each stream on it.

    Heredocs are collected into their files by ``collect_heredoc(limit,
    path)`` and left closed. On the first failure the streams opened so
    far are closed and RedirectError is raised.
    """
    opened: list[Redirection] = []
    try:
        for redirection in redirections:
            if redirection.kind is RedirKind.HEREDOC:
                try:
                    collect_heredoc(redirection.limit or "", redirection.name)
                except OSError as error:
                    raise _describe(redirection.name, error) from error
                continue
            if redirection.kind is RedirKind.INPUT:
                stream = open_input(redirection.name)
            else:
                stream = open_output(
                    redirection.name, redirection.kind is RedirKind.APPEND
                )
            redirection.stream = stream
            opened.append(redirection)
    except RedirectError:
        _close_streams(opened)
        raise