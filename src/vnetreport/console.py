#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Human-readable progress messages printed while the report is built.

Progress messages are informational only and are not meant to be parsed. They
are prefixed with a status emoji and go to standard output, separate from the
`logging` output configured by the CLI. When `color` is enabled, warnings are
printed in yellow and errors in red using colorama.
"""
import sys

from colorama import Fore, Style

FETCH = "📡"
QUERY = "🔄"
OK = "✅"
SUBNET = "🔹"
WARN = "⚠️ "
STOP = "🚫"
TABLE = "📊"


class Console:
    """Prints progress messages to `out`, which defaults to standard output."""

    def __init__(self, out=None, color=False):
        self.out = out if out is not None else sys.stdout
        self.color = color

    def status(self, symbol, message):
        """Print `message` prefixed with the status `symbol`."""
        print(f"{symbol} {message}", file=self.out, flush=True)

    def warning(self, message):
        """Print `message` as a warning; processing continues afterwards."""
        self.status(WARN, self._paint(Fore.YELLOW, message))

    def error(self, message):
        """Print `message` as the reason the report cannot be produced."""
        self.status(STOP, self._paint(Fore.RED, message))

    def _paint(self, color, message):
        if not self.color:
            return message
        return f"{color}{message}{Style.RESET_ALL}"
