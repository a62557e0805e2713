"""
Command dispatch for shelf-steam.

Routes a parsed command to one of the builtins (exit, ls, path) or runs it
as a game from the active repository.
"""

import logging
import os
from typing import Iterator, List

from ..errors import RepositoryError, UsageError
from ..executor.probe import DescriptionProbe
from ..executor.runner import ProcessRunner
from ..models import ListingEntry, Session
from ..parser import ParsedCommand
from ..ui.terminal import TerminalUI

logger = logging.getLogger(__name__)


def is_directory(path: str) -> bool:
    """Check whether *path* names an existing directory."""
    return os.path.isdir(path)


def sorted_entry_names(repository_path: str) -> List[str]:
    """
    List a repository's entries in byte-wise order.

    Raises:
        RepositoryError: If the directory cannot be read
    """
    try:
        names = os.listdir(repository_path)
    except OSError as e:
        raise RepositoryError(
            f"Cannot list repository {repository_path}: {e}", path=repository_path
        ) from e
    return sorted(names, key=os.fsencode)


class CommandDispatcher:
    """Executes parsed commands against the session."""

    def __init__(
        self,
        session: Session,
        runner: ProcessRunner,
        probe: DescriptionProbe,
        ui: TerminalUI,
    ):
        self.session = session
        self.runner = runner
        self.probe = probe
        self.ui = ui

        self._builtins = {
            "exit": self.handle_exit,
            "ls": self.handle_ls,
            "path": self.handle_path,
        }

    def dispatch(self, command: ParsedCommand) -> bool:
        """
        Execute one command.

        Returns:
            False if the session should end, True otherwise

        Raises:
            ShelfSteamError: On usage, repository or execution failures
        """
        handler = self._builtins.get(command.name)
        if handler is not None:
            return handler(command)
        return self.handle_run(command)

    def handle_exit(self, command: ParsedCommand) -> bool:
        """Handle ``exit``."""
        if command.arguments:
            raise UsageError("exit takes no arguments", command="exit")
        logger.debug("Exit requested")
        return False

    def handle_ls(self, command: ParsedCommand) -> bool:
        """Handle ``ls``."""
        if command.arguments:
            raise UsageError("ls takes no arguments", command="ls")

        names = sorted_entry_names(self.session.repository_path)
        self.ui.print_listing(self.iter_listing(names))
        return True

    def iter_listing(self, names: List[str]) -> Iterator[ListingEntry]:
        """Describe entries lazily, in the given order."""
        repository_path = self.session.repository_path
        for name in names:
            yield ListingEntry(name=name, description=self.probe.describe(repository_path, name))

    def handle_path(self, command: ParsedCommand) -> bool:
        """Handle ``path <directory>``."""
        if len(command.arguments) != 1:
            raise UsageError("path takes exactly one argument", command="path")

        new_path = command.arguments[0]
        if not is_directory(new_path):
            raise RepositoryError(f"Not a directory: {new_path}", path=new_path)

        logger.debug("Repository changed from %s to %s", self.session.repository_path, new_path)
        self.session.repository_path = new_path
        return True

    def handle_run(self, command: ParsedCommand) -> bool:
        """Run the command as a game from the active repository."""
        result = self.runner.run(
            self.session.repository_path,
            command.args,
            input_file=command.input_file,
        )
        if not result.success:
            logger.info("%s exited with status %d", command.name, result.return_code)
        return True
