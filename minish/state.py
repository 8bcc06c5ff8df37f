"""The state a running shell carries from one command line to the next."""

from __future__ import annotations

import os
from typing import Mapping

from .environment import Environment
from .signals import SignalState


class Shell:
    """Environment, signal state and the status of the last command."""

    def __init__(
        self,
        env: Environment | None = None,
        signals: SignalState | None = None,
    ) -> None:
        self.env = env if env is not None else Environment()
        self.signals = signals if signals is not None else SignalState()
        self.last_status = 0

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "Shell":
        """Start a shell whose variables are copied from ``environ``.

        Without an argument the process environment is used.
        """
        source = os.environ if environ is None else environ
        return cls(Environment(source.items()))