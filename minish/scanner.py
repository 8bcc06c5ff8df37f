"""Cutting a flattened fragment sequence into commands and redirections.

The scanner walks the fragments of a command line once. It records every
command as a list of arguments, every redirection in order, and a line
layout: each command as its index, each pipe as ``"|"`` and each
redirection as ``"!"`` followed by its file name.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .fragments import Fragment, is_operator
from .redirection import HeredocNamer, RedirKind, Redirection

NEAR_PIPE = "minishell: syntax error near '|'"
CONSECUTIVE_PIPES = "minishell: consecutive '|'"
FILE_SYNTAX = "minishell : syntax error file"


class ParseError(ValueError):
    """Raised when a command line breaks the shell's syntax rules."""


@dataclass(frozen=True)
class Arg:
    """A piece of a command argument.

    ``space_after`` is false when the piece is glued to the next one.
    """

    text: str
    space_after: bool


@dataclass
class Scan:
    """What the scanner found in one command line."""

    commands: list[list[Arg]] = field(default_factory=list)
    line: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)


def check_pipes(fragments: Iterable[Fragment]) -> None:
    """Reject a line that starts or ends with a pipe or holds two in a row.

    Raises ParseError with the shell's message.
    """
    frags = list(fragments)
    if not frags:
        return
    if frags[0].text[:1] == "|":
        raise ParseError(NEAR_PIPE)
    after_pipe = False
    for fragment in frags:
        for char in fragment.text:
            if char == "|":
                if after_pipe:
                    raise ParseError(CONSECUTIVE_PIPES)
                after_pipe = True
            else:
                after_pipe = False
    last = frags[-1]
    if last.text.endswith("|") and not last.quote:
        raise ParseError(NEAR_PIPE)


class _Step(enum.Enum):
    GO_ON = enum.auto()
    CONTINUE = enum.auto()
    BREAK = enum.auto()
    PIPE = enum.auto()


@dataclass
class _Cursor:
    i: int = 0
    j: int = 0
    start_arg: int = 0
    start_char: int = 0
    end_arg: int = 0
    end_char: int = 0

    def mark_start(self) -> None:
        self.start_arg, self.start_char = self.i, self.j

    def next_fragment(self) -> None:
        self.i += 1
        self.j = 0


class _Scanner:
    def __init__(self, fragments: Sequence[Fragment], namer: HeredocNamer) -> None:
        self.frags = list(fragments)
        self.namer = namer
        self.pos = _Cursor()
        self.tmp = 0
        self.result = Scan()

    # -- helpers ---------------------------------------------------------

    def _at_end(self, k: int) -> bool:
        return k >= len(self.frags)

    def _char(self, k: int, j: int) -> str:
        if not 0 <= k < len(self.frags):
            return ""
        text = self.frags[k].text
        return text[j] if 0 <= j < len(text) else ""

    def _last_command(self) -> str:
        return str(len(self.result.commands) - 1)

    # -- commands --------------------------------------------------------

    def _collect_args(self) -> list[Arg]:
        pos = self.pos
        args: list[Arg] = []
        k = max(pos.start_arg, 0)
        end = pos.start_char
        while not self._at_end(k) and k <= pos.end_arg:
            frag = self.frags[k]
            if k != pos.start_arg:
                end = 0
            begin = end
            end = pos.end_char if k == pos.end_arg else len(frag.text)
            if begin == end and frag.text == "":
                args.append(Arg("", frag.space_after))
            if begin < end:
                args.append(Arg(frag.text[begin:end], frag.space_after))
            k += 1
        return args

    def _make_command(self) -> None:
        pos = self.pos
        pos.end_arg, pos.end_char = pos.i, pos.j
        self.result.commands.append(self._collect_args())

    # -- main loop -------------------------------------------------------

    def run(self) -> Scan:
        while not self._at_end(self.tmp):
            step = self._step()
            if step is _Step.BREAK:
                break
        return self.result

    def _step(self) -> _Step:
        found = self._search_operator()
        if found is _Step.CONTINUE:
            return _Step.CONTINUE
        if found is _Step.BREAK:
            self.result.line.append(self._last_command())
            return _Step.BREAK
        char = self._char(self.tmp, self.pos.j)
        if char == "":
            self._end_of_fragment()
            return _Step.CONTINUE
        if is_operator(char, "|"):
            return self._pipe()
        if is_operator(char, "!"):
            return self._redirection()
        return _Step.GO_ON

    def _search_operator(self) -> _Step:
        pos = self.pos
        frag = self.frags[self.tmp]
        if frag.quote:
            pos.j = len(frag.text)
            self.tmp += 1
            if self._at_end(self.tmp):
                self._make_command()
                pos.mark_start()
                return _Step.BREAK
            pos.next_fragment()
            return _Step.CONTINUE
        while (char := self._char(self.tmp, pos.j)) and not is_operator(char, "*"):
            pos.j += 1
        return _Step.GO_ON

    def _end_of_fragment(self) -> None:
        pos = self.pos
        self.tmp += 1
        pending = (pos.start_arg, pos.start_char) != (pos.i, pos.j)
        if self._at_end(self.tmp) and pending:
            self._make_command()
            pos.next_fragment()
            self.result.line.append(self._last_command())
            return
        pos.next_fragment()

    def _pipe(self) -> _Step:
        pos = self.pos
        self._make_command()
        pos.j += 1
        if self._char(self.tmp, pos.j) == "":
            self.tmp += 1
            if self._at_end(self.tmp):
                return _Step.BREAK
            pos.next_fragment()
        pos.mark_start()
        self.result.line.extend([self._last_command(), "|"])
        return _Step.GO_ON

    # -- redirections ----------------------------------------------------

    def _redirection(self) -> _Step:
        pos = self.pos
        before = self._char(pos.start_arg, pos.start_char)
        if pos.i > 0 and not is_operator(before, "*"):
            self._make_command()
            if self._char(self.tmp, pos.j) == "":
                self.tmp += 1
                if self._at_end(self.tmp):
                    return _Step.BREAK
                pos.next_fragment()
            pos.mark_start()
            self.result.line.append(self._last_command())
        outcome = self._open_redirection()
        self.result.line.append("!" + self.result.redirections[-1].name)
        if outcome is _Step.BREAK:
            return _Step.BREAK
        if outcome is _Step.PIPE:
            self.result.line.append("|")
            if self._char(self.tmp, pos.j) == "":
                self.tmp += 1
                pos.next_fragment()
                pos.mark_start()
            else:
                pos.start_char = pos.j
        pos.end_arg, pos.end_char = pos.i, pos.j
        return _Step.GO_ON

    def _open_redirection(self) -> _Step:
        pos = self.pos
        kind, name, limit = self._read_target()
        if kind is RedirKind.HEREDOC:
            name = self.namer.next_name()
        self.result.redirections.append(Redirection(name, kind, limit))
        while self.tmp < pos.i:
            self.tmp += 1
            if self._at_end(self.tmp):
                return _Step.BREAK
        if is_operator(self._char(self.tmp, pos.j), "|"):
            pos.j += 1
            return _Step.PIPE
        if self._char(self.tmp, pos.j) == "":
            self.tmp += 1
            if self._at_end(self.tmp):
                return _Step.BREAK
            pos.next_fragment()
        if is_operator(self._char(self.tmp, pos.j), "|"):
            pos.j += 1
            return _Step.PIPE
        return _Step.GO_ON

    def _redirection_kind(self, k: int) -> tuple[RedirKind, int]:
        pos = self.pos
        first, second = self._char(k, pos.j), self._char(k, pos.j + 1)
        if first == ">" and second == ">":
            kind = RedirKind.APPEND
        elif first == "<" and second == "<":
            kind = RedirKind.HEREDOC
        elif first == "<":
            kind = RedirKind.INPUT
        else:
            kind = RedirKind.OUTPUT
        pos.j += 2 if kind in (RedirKind.APPEND, RedirKind.HEREDOC) else 1
        pos.mark_start()
        if is_operator(self._char(k, pos.j), "*"):
            raise ParseError(FILE_SYNTAX)
        if self._char(k, pos.j) == "":
            k += 1
            if self._at_end(k) or is_operator(self._char(k, 0), "*"):
                raise ParseError(FILE_SYNTAX)
            pos.next_fragment()
            pos.mark_start()
        return kind, k

    def _target_boundary(self, k: int, name: str) -> tuple[bool, int, str]:
        pos = self.pos
        if k + 1 < len(self.frags):
            if self.frags[k].space_after:
                pos.next_fragment()
                return True, k + 1, name
            if self.frags[k + 1].quote:
                pos.next_fragment()
                k += 1
                name += self.frags[k].text[pos.j:]
                if self.frags[k].space_after:
                    pos.next_fragment()
                    return True, k, name
        return False, k, name

    def _read_target(self) -> tuple[RedirKind, str, str | None]:
        pos = self.pos
        kind, k = self._redirection_kind(max(pos.start_arg, 0))
        name = ""
        while not self._at_end(k):
            frag = self.frags[k]
            if frag.quote:
                if frag.text == "":
                    name = ""
                    k += 1
                    pos.next_fragment()
                    break
                name += frag.text[pos.j:]
                k += 1
                pos.next_fragment()
                continue
            if pos.j > 0 and not is_operator(self._char(k, pos.j - 1), "!"):
                pos.j = 0
            while (char := self._char(k, pos.j)) and not is_operator(char, "*"):
                name += char
                pos.j += 1
            if is_operator(self._char(k, pos.j), "|"):
                break
            stop, k, name = self._target_boundary(k, name)
            if stop:
                break
            k += 1
            if self._at_end(k):
                break
            pos.i += 1
        pos.mark_start()
        if kind is RedirKind.HEREDOC:
            return kind, "", name
        return kind, name, None


def scan(fragments: Iterable[Fragment], namer: HeredocNamer | None = None) -> Scan:
    """Split a flattened fragment sequence into commands and redirections.

    Heredoc redirections take their file names from ``namer``. Raises
    ParseError on a misplaced pipe or a redirection without a file.
    """
    frags = list(fragments)
    check_pipes(frags)
    return _Scanner(frags, namer if namer is not None else HeredocNamer()).run()