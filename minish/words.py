"""Quote-aware splitting and small string helpers for the parser."""

from __future__ import annotations

import string

QUOTES = "\"'"
_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")


class QuoteError(ValueError):
    """Raised when a quote is opened and never closed."""

    def __init__(self, message: str = "Incorrect quote") -> None:
        super().__init__(message)


def split_groups(text: str) -> list[str]:
    """Split ``text`` at every space that is outside quotes.

    Each space ends a group, so adjacent spaces give empty groups and an
    empty text gives one empty group. Quote characters stay in the groups.
    """
    groups: list[str] = []
    current: list[str] = []
    quote: str | None = None
    for char in text:
        if quote is not None:
            if char == quote:
                quote = None
            current.append(char)
        elif char in QUOTES:
            quote = char
            current.append(char)
        elif char == " ":
            groups.append("".join(current))
            current = []
        else:
            current.append(char)
    if quote is not None:
        raise QuoteError()
    groups.append("".join(current))
    return groups


def squeeze_spaces(text: str) -> str:
    """Drop leading and trailing spaces and collapse unquoted runs to one."""
    end = len(text.rstrip(" "))
    result: list[str] = []
    quote: str | None = None
    after_space = True
    for char in text[:end]:
        if quote is not None and char == quote:
            quote = None
        elif quote is None and char in QUOTES:
            quote = char
        unquoted_space = char == " " and quote is None
        if unquoted_space and after_space:
            continue
        after_space = unquoted_space
        result.append(char)
    return "".join(result)


def strip_quote(text: str, start: int, length: int, quote: str | None) -> str:
    """Return ``length`` characters of ``text`` from ``start`` without ``quote``.

    Quote characters count towards ``length`` but are left out of the result.
    """
    if start >= len(text):
        return ""
    segment = text[start:start + max(length, 0)]
    if quote:
        segment = segment.replace(quote, "")
    return segment


def _code(text: str, index: int) -> int:
    return ord(text[index]) if index < len(text) else 0


def compare_var_name(name: str, text: str) -> int:
    """Compare a variable ``name`` with the name at the start of ``text``.

    Returns 0 when they match, otherwise the difference of the first
    characters that differ, where the end of a string counts as 0.
    """
    index = 0
    while index < len(name):
        if index >= len(text) or text[index] not in _NAME_CHARS:
            break
        if name[index] != text[index]:
            return ord(name[index]) - ord(text[index])
        index += 1
    return _code(name, index) - _code(text, index)