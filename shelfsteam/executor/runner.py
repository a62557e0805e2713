"""
Process runner for shelf-steam.

Launches a repository entry as a child process:
- argv[0] is the entry's own name
- optional input redirection from a file
- stdout and stderr are inherited from the shell
- the parent blocks until the child exits
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from ..errors import ExecutionError

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of running one entry."""
    target: str
    args: List[str]
    return_code: int

    @property
    def success(self) -> bool:
        return self.return_code == 0


class ProcessRunner:
    """Runs repository entries synchronously."""

    def run(
        self,
        repository_path: str,
        args: List[str],
        input_file: Optional[str] = None
    ) -> RunResult:
        """
        Run ``repository_path/args[0]`` with argument vector ``args``.

        Args:
            repository_path: Directory holding the entry
            args: Argument vector, args[0] being the entry name
            input_file: Optional file bound to the child's stdin

        Returns:
            RunResult carrying the child's exit status

        Raises:
            ExecutionError: If the input file cannot be opened or the
                entry cannot be started
        """
        if not args:
            raise ExecutionError("Nothing to run")

        target = os.path.join(repository_path, args[0])

        stdin = None
        if input_file is not None:
            try:
                stdin = open(input_file, "rb")
            except OSError as e:
                raise ExecutionError(
                    f"Cannot open input file {input_file}: {e}", target=target
                ) from e

        try:
            return self._spawn_and_wait(target, args, stdin)
        finally:
            if stdin is not None:
                stdin.close()

    def _spawn_and_wait(self, target: str, args: List[str], stdin) -> RunResult:
        """Start the child and block until it exits."""
        logger.debug("Running %s with args %r", target, args[1:])

        try:
            process = subprocess.Popen(
                args,
                executable=target,
                stdin=stdin,
                close_fds=True,
            )
        except OSError as e:
            raise ExecutionError(f"Cannot execute {target}: {e}", target=target) from e

        try:
            return_code = process.wait()
        except KeyboardInterrupt:
            # The child shares our terminal and got the signal too; reap it.
            process.wait()
            raise

        logger.debug("%s exited with status %d", target, return_code)
        return RunResult(target=target, args=list(args), return_code=return_code)
