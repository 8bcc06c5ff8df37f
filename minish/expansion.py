"""Expansion of ``$NAME`` and ``$?`` in word fragments."""

from __future__ import annotations

import re
from collections import deque
from dataclasses import replace
from typing import Iterable

from .environment import Environment
from .fragments import Fragment
from .words import compare_var_name

_NAME_TAIL = re.compile(r"[A-Za-z0-9_]*")


def _lookup(env: Environment, name: str) -> str:
    for env_name, value in env:
        if compare_var_name(env_name, name) == 0:
            return value
    return ""


def _is_name_start(char: str) -> bool:
    return char.isascii() and (char.isalpha() or char == "_")


def _expand_text(
    fragment: Fragment,
    following: Fragment | None,
    env: Environment,
    last_status: int,
) -> tuple[str, str]:
    """Return the expanded text and whatever followed the variable name."""
    text = fragment.text
    if not text.startswith("$"):
        return text, ""
    second = text[1:2]
    if second == "?":
        return str(last_status), ""
    if second == "" and following is not None and following.quote != fragment.quote:
        return "", ""
    if not _is_name_start(second):
        return text, ""
    name = _NAME_TAIL.match(text, 1).group()
    after = text[1 + len(name):]
    return _lookup(env, name), after


def expand_fragments(
    fragments: Iterable[Fragment], env: Environment, last_status: int
) -> list[Fragment]:
    """Replace variables in every fragment not enclosed in single quotes.

    Text after a variable name becomes a fragment of its own with the same
    quoting. A fragment whose unquoted text changed is marked ``is_var``.
    The given fragments are left untouched.
    """
    pending = deque(replace(fragment) for fragment in fragments)
    result: list[Fragment] = []
    while pending:
        node = pending.popleft()
        if node.quote != "'":
            following = pending[0] if pending else None
            value, after = _expand_text(node, following, env, last_status)
            if after:
                pending.appendleft(Fragment(after, node.quote))
            if value != node.text and not node.quote:
                node.is_var = True
            node.text = value
        result.append(node)
    return result