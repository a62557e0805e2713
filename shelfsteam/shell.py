"""
Main shelf-steam shell - the interactive command loop.

Reads one line at a time, parses it and hands it to the dispatcher. Every
failure below this loop is reported as a single generic error line and the
loop carries on; only ``exit`` or end of input end the session.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.history import FileHistory, History, InMemoryHistory

from .config import ShelfSteamConfig, get_config
from .errors import ErrorBoundary, ErrorContext, format_error_for_log
from .executor.probe import DescriptionProbe
from .executor.runner import ProcessRunner
from .handlers.commands import CommandDispatcher
from .models import Session
from .parser import parse_command_line
from .ui.completions import ShelfSteamCompleter
from .ui.terminal import TerminalUI

logger = logging.getLogger(__name__)


class ShelfSteamShell:
    """The shelf-steam interactive shell."""

    def __init__(
        self,
        repository_path: str,
        config: Optional[ShelfSteamConfig] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        runner: Optional[ProcessRunner] = None,
        probe: Optional[DescriptionProbe] = None,
    ):
        """
        Initialize the shell.

        Args:
            repository_path: Initial repository, already validated
            config: Configuration (defaults to the global one)
            stdin: Input stream; a terminal stdin enables line editing
            stdout: Output stream for prompts and listings
            stderr: Output stream for the error line
            runner: Process runner used for games
            probe: Description probe used by ``ls``
        """
        self.config = config if config is not None else get_config()
        self.session = Session(repository_path=repository_path)

        self.stdin = stdin if stdin is not None else sys.stdin
        self.ui = TerminalUI(
            stdout=stdout,
            stderr=stderr,
            error_message=self.config.shell.error_message,
        )
        self.runner = runner if runner is not None else ProcessRunner()
        self.probe = probe if probe is not None else DescriptionProbe(self.config.probe)
        self.dispatcher = CommandDispatcher(self.session, self.runner, self.probe, self.ui)

        self._prompt_session: Optional[PromptSession] = None
        if stdin is None and stdout is None and self._is_terminal():
            self._prompt_session = self._create_prompt_session()

    @property
    def repository_path(self) -> str:
        return self.session.repository_path

    def _is_terminal(self) -> bool:
        try:
            return sys.stdin.isatty() and sys.stdout.isatty()
        except (AttributeError, ValueError):
            return False

    def _create_history(self) -> History:
        if not self.config.session.save_history:
            return InMemoryHistory()

        history_path = Path(self.config.session.history_path).expanduser()
        try:
            history_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Cannot create history directory %s: %s", history_path.parent, e)
            return InMemoryHistory()
        return FileHistory(str(history_path))

    def _create_prompt_session(self) -> PromptSession:
        completer = ShelfSteamCompleter(lambda: self.session.repository_path)
        return PromptSession(
            history=self._create_history(),
            auto_suggest=AutoSuggestFromHistory(),
            completer=completer,
            complete_while_typing=self.config.session.complete_while_typing,
        )

    def read_line(self) -> Optional[str]:
        """
        Print the prompt and read one line.

        Returns:
            The line without its terminator, or None at end of input
        """
        prompt = self.config.shell.prompt

        if self._prompt_session is not None:
            try:
                return self._prompt_session.prompt(prompt)
            except EOFError:
                return None

        self.ui.print_prompt(prompt)
        line = self.stdin.readline()
        if not line:
            return None
        if line.endswith("\n"):
            line = line[:-1]
        return line

    def handle_line(self, line: str) -> bool:
        """
        Parse and execute one line.

        Returns:
            False once the session should end
        """
        if not line.strip():
            return True

        with ErrorBoundary(
            "command",
            on_error=self._report_error,
            show_technical_details=self.config.logging.level == "debug",
        ):
            command = parse_command_line(line)
            if command is None:
                return True
            return self.dispatcher.dispatch(command)

        return True

    def _report_error(self, context: ErrorContext) -> None:
        logger.info(format_error_for_log(context))
        self.ui.print_error()

    def run(self) -> int:
        """Run the loop until ``exit`` or end of input."""
        logger.debug("Session started in %s", self.session.repository_path)

        while True:
            try:
                line = self.read_line()
            except KeyboardInterrupt:
                self.ui.print_line()
                continue

            if line is None:
                break

            try:
                if not self.handle_line(line):
                    break
            except KeyboardInterrupt:
                self.ui.print_line()

        logger.debug("Session ended")
        return 0
