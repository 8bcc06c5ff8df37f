"""Turning a child's termination into the shell's ``$?``."""

from __future__ import annotations

NOT_FOUND_STATUS = 127
SIGNAL_BASE = 128


def status_from_returncode(returncode: int, previous: int) -> int:
    """Return the new shell status after a child ended.

    ``returncode`` follows subprocess: a negative value is the signal that
    killed the child. A kill gives 128 plus the signal, an exit status of
    127 gives 127, and any other exit leaves ``previous`` unchanged.
    """
    if returncode < 0:
        return SIGNAL_BASE - returncode
    if returncode == NOT_FOUND_STATUS:
        return NOT_FOUND_STATUS
    return previous