"""Interrupt handling for the interactive prompt."""

from __future__ import annotations

import signal
import sys
from typing import Any

INTERRUPTED_STATUS = 130


class SignalState:
    """Tracks whether the shell is reading input and any pending interrupt status."""

    def __init__(self) -> None:
        self.interactive = False
        self._pending = 0

    def set_interactive(self, value: bool) -> None:
        """Record whether the shell is waiting at the prompt."""
        self.interactive = bool(value)

    def take_status(self) -> int:
        """Return the status left by an interrupt and clear it."""
        status, self._pending = self._pending, 0
        return status

    def handle_interrupt(self, signum: int, frame: Any) -> None:
        """React to SIGINT.

        At the prompt the pending status becomes 130 and the line being
        typed is abandoned by raising KeyboardInterrupt. Otherwise only a
        newline is written, leaving the running child to the signal.
        """
        sys.stdout.write("\n")
        sys.stdout.flush()
        if self.interactive:
            self._pending = INTERRUPTED_STATUS
            raise KeyboardInterrupt


def install_handlers(state: SignalState) -> None:
    """Route SIGINT to ``state`` and ignore SIGQUIT."""
    signal.signal(signal.SIGINT, state.handle_interrupt)
    sigquit = getattr(signal, "SIGQUIT", None)
    if sigquit is not None:
        signal.signal(sigquit, signal.SIG_IGN)