"""
Description probe for shelf-steam.

Derives a one-line description for a repository entry by running it with a
help flag and keeping the first line of its standard output. Output is
captured in an anonymous temporary file and read once the entry exits, so
background processes it leaves behind do not hold the probe up. Failures of
any kind collapse into the empty-description sentinel.
"""

import logging
import os
import subprocess
import tempfile
from typing import Optional

from ..config import ProbeConfig, get_config

logger = logging.getLogger(__name__)


class DescriptionProbe:
    """Runs entries with a help flag to describe them."""

    def __init__(self, config: Optional[ProbeConfig] = None):
        """Initialize the probe."""
        self.config = config if config is not None else get_config().probe

    @property
    def empty_description(self) -> str:
        return self.config.empty_description

    def is_describable(self, path: str) -> bool:
        """Check whether an entry is a non-directory the user may execute."""
        if os.path.isdir(path):
            return False
        if not os.path.exists(path):
            return False
        return os.access(path, os.X_OK)

    def describe(self, repository_path: str, name: str) -> str:
        """
        Describe a single entry.

        Args:
            repository_path: Directory holding the entry
            name: Entry name

        Returns:
            First line of the entry's help output, or the sentinel
        """
        path = os.path.join(repository_path, name)
        if not self.is_describable(path):
            return self.empty_description

        output = self._capture_help(path, name)
        first_line = first_line_of(output)
        return first_line or self.empty_description

    def _capture_help(self, path: str, name: str) -> bytes:
        """Run the entry with the help flag and return its stdout."""
        with tempfile.TemporaryFile(prefix="shelf-steam-") as capture:
            try:
                process = subprocess.Popen(
                    [name, self.config.help_flag],
                    executable=path,
                    stdin=subprocess.DEVNULL,
                    stdout=capture,
                    close_fds=True,
                )
            except OSError as e:
                logger.debug("Cannot probe %s: %s", path, e)
                return b""

            try:
                return_code = process.wait(timeout=self.config.timeout)
            except subprocess.TimeoutExpired:
                logger.debug("Probe of %s timed out after %ss", path, self.config.timeout)
                process.kill()
                process.wait()
                return b""
            except KeyboardInterrupt:
                process.kill()
                process.wait()
                raise

            logger.debug("Probe of %s exited with status %d", path, return_code)
            capture.seek(0)
            return capture.read()


def first_line_of(output: bytes) -> str:
    """Return the text before the first newline of *output*."""
    text = output.decode("utf-8", errors="replace")
    return text.partition("\n")[0]
