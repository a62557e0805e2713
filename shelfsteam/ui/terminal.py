"""
Terminal output for shelf-steam.

The prompt goes through a 'rich' console with markup, highlighting and
wrapping turned off. Listing and error lines are written to the streams
verbatim, since entry names and descriptions may hold tabs, carriage
returns and brackets that rich would rewrite.
"""

import sys
from typing import Iterable, Optional, TextIO

from rich.console import Console

from ..models import ListingEntry


def _plain_console(file: TextIO) -> Console:
    return Console(
        file=file,
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
        color_system=None,
    )


class TerminalUI:
    """Writes shell output to stdout and errors to stderr."""

    def __init__(
        self,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        error_message: str = "An error has occurred"
    ):
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.error_message = error_message
        self.console = _plain_console(self.stdout)

    def print_prompt(self, prompt: str) -> None:
        """Print the prompt without a line break."""
        self.console.print(prompt, end="")
        self.stdout.flush()

    def print_line(self, text: str = "") -> None:
        self.console.print(text)

    def print_listing(self, entries: Iterable[ListingEntry]) -> None:
        """Print one ``name: description`` line per entry, as each arrives."""
        for entry in entries:
            self.stdout.write(entry.render() + "\n")
            self.stdout.flush()

    def print_error(self, message: Optional[str] = None) -> None:
        """Print the generic error line (or *message*) to stderr."""
        self.stderr.write((message if message is not None else self.error_message) + "\n")
        self.stderr.flush()
