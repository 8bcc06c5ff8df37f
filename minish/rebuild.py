"""Turning expanded fragments back into a line of text."""

from __future__ import annotations

from typing import Iterable

from .fragments import Fragment, is_operator
from .words import QUOTES, squeeze_spaces

_OPPOSITE = {"'": '"', '"': "'"}


def _quote_mark(fragment: Fragment) -> str:
    if fragment.quote:
        return fragment.quote
    if fragment.is_var and is_operator(fragment.text[:1], "*"):
        return '"'
    return ""


def _protect_quotes(text: str) -> str:
    """Wrap each quoted stretch of a variable's value in the other quote."""
    parts: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char not in QUOTES:
            parts.append(char)
            index += 1
            continue
        opposite = _OPPOSITE[char]
        closing = text.find(char, index + 1)
        end = len(text) if closing == -1 else closing
        parts.append(opposite + char + text[index + 1:end])
        if closing != -1:
            parts.append(char)
        parts.append(opposite)
        index = end + 1
    return "".join(parts)


def rebuild_input(fragments: Iterable[Fragment]) -> str:
    """Write fragments back as a command line, restoring their quotes.

    Quotes inside expanded values are protected so the line can be split
    again, and operators that came from a variable are quoted.
    """
    pieces: list[str] = []
    for fragment in fragments:
        mark = _quote_mark(fragment)
        body = _protect_quotes(fragment.text) if fragment.is_var else fragment.text
        pieces.append(f"{mark}{body}{mark}")
        if fragment.space_after:
            pieces.append(" ")
    return squeeze_spaces("".join(pieces))