"""The whole parsing pipeline, from raw input to a parsed line.

The line is split into words, variables are expanded and the result is
written back as text. That text is split again and scanned into
commands and redirections, which are finally regrouped.
"""

from __future__ import annotations

from typing import Sequence

from .assemble import regroup
from .environment import Environment
from .expansion import expand_fragments
from .fragments import Fragment, flatten, split_fragments
from .parsed import ParsedLine, build_line
from .rebuild import rebuild_input
from .redirection import HeredocNamer
from .scanner import ParseError, scan
from .words import split_groups, squeeze_spaces

EMPTY_LINE = "minishell: empty command"


def _fragments_of(words: Sequence[str]) -> list[list[Fragment]]:
    groups = [split_fragments(word) for word in words]
    if any(not group for group in groups):
        raise ParseError(EMPTY_LINE)
    return groups


def parse_line(
    text: str,
    env: Environment,
    last_status: int = 0,
    namer: HeredocNamer | None = None,
) -> ParsedLine:
    """Parse one command line.

    ``$NAME`` is looked up in ``env`` and ``$?`` becomes ``last_status``.
    Heredoc files are named by ``namer``. Raises QuoteError for an
    unclosed quote and ParseError for a syntax error or an empty line.
    """
    words = split_groups(squeeze_spaces(text))
    expanded = [
        expand_fragments(group, env, last_status) for group in _fragments_of(words)
    ]
    rebuilt = rebuild_input(flatten(expanded))

    fragments = flatten(_fragments_of(split_groups(rebuilt)))
    if not fragments:
        raise ParseError(EMPTY_LINE)
    result = scan(fragments, namer)
    line, commands = regroup(result.line, result.commands)
    return build_line(line, commands, result.redirections)