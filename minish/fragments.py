"""Splitting a word into quoted and unquoted fragments."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from .words import QUOTES, strip_quote

_OPERATORS = {
    "|": frozenset("|"),
    "!": frozenset("<>"),
    "*": frozenset("|<>"),
}


@dataclass
class Fragment:
    """A piece of a word that shares one quoting context.

    ``quote`` is the quote character that enclosed the text, or ``""``.
    ``is_var`` marks text produced by expanding an unquoted variable and
    ``space_after`` marks a fragment that ends a word. ``index`` is the
    position of the fragment in the flattened line.
    """

    text: str
    quote: str = ""
    is_var: bool = False
    space_after: bool = False
    index: int = 0

    @property
    def quoted(self) -> bool:
        """True when the fragment was written inside quotes."""
        return bool(self.quote)


def is_operator(char: str, mode: str) -> bool:
    """Tell whether ``char`` is a shell operator of the given ``mode``.

    ``"|"`` matches a pipe, ``"!"`` a redirection sign and ``"*"`` either.
    """
    return bool(char) and char in _OPERATORS.get(mode, frozenset())


def split_fragments(word: str) -> list[Fragment]:
    """Cut ``word`` at every ``$`` and at every change of quoting.

    Quote characters are dropped from the text and recorded in
    ``Fragment.quote``. An empty word gives no fragments.
    """

    def at(position: int) -> str:
        return word[position] if 0 <= position < len(word) else ""

    fragments: list[Fragment] = []
    quote = at(0) if at(0) in QUOTES and at(0) else ""
    i = 0
    while at(i):
        start = i
        if at(i) == "$":
            i += 1
        if at(i) == " " and not quote:
            i += 1
            start += 1
        if quote:
            i += 1
            if at(i) == "$":
                i += 1
            if at(i) == quote and (at(i + 1) == quote or at(i - 1) == quote):
                fragments.append(Fragment("", quote))
                quote = ""
            else:
                while at(i) and at(i) != "$" and at(i) != quote:
                    i += 1
                fragments.append(
                    Fragment(strip_quote(word, start, i - start, quote), quote)
                )
                if at(i) == quote:
                    quote = ""
        else:
            while at(i) and at(i) != "$" and at(i) not in QUOTES:
                i += 1
            if i > start:
                fragments.append(Fragment(strip_quote(word, start, i - start, "")))
            if at(i) and at(i) in QUOTES:
                quote = at(i)
        if at(i) and at(i) != "$" and at(i + 1) != quote:
            i += 1
    return fragments


def flatten(groups: Iterable[Sequence[Fragment]]) -> list[Fragment]:
    """Join the fragments of several words into one numbered sequence.

    A fragment ends its word when it is the last of its group or when the
    next fragment starts with an unquoted operator.
    """
    counter = itertools.count()
    result: list[Fragment] = []
    for group in groups:
        group = list(group)
        followers: list[Fragment | None] = [*group[1:], None]
        for current, following in zip(group, followers):
            if following is None:
                spaced = True
            else:
                spaced = is_operator(following.text[:1], "*") and not following.quote
            result.append(replace(current, index=next(counter), space_after=spaced))
    return result