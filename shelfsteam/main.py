"""
shelf-steam main entry point.

Validates the single startup argument (the initial game repository),
configures logging and runs the interactive shell.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from .config import ShelfSteamConfig, get_config
from .errors import ShelfSteamError, StartupError
from .handlers.commands import is_directory

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class _StartupArgumentParser(argparse.ArgumentParser):
    """Argument parser that raises instead of printing usage and exiting."""

    def error(self, message: str) -> NoReturn:
        raise StartupError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _StartupArgumentParser(
        prog="shelf-steam",
        description="Browse and launch games from a repository directory",
        add_help=False,
    )
    parser.add_argument("repository", help="Directory holding the games")
    return parser


def configure_logging(config: ShelfSteamConfig) -> logging.Logger:
    """
    Set up the package logger.

    Debug mode logs to stderr; a configured path adds a file handler.
    Otherwise records are dropped so stderr carries only the error line.
    """
    logger = logging.getLogger("shelfsteam")
    logger.setLevel(_LEVELS.get(config.logging.level, logging.WARNING))
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    if config.logging.level == "debug":
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if config.logging.path:
        log_path = Path(config.logging.path).expanduser()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
        except OSError as e:
            raise StartupError(f"Cannot open log file {log_path}: {e}") from e
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def validate_repository(argv: List[str]) -> str:
    """
    Return the initial repository named by *argv*.

    Raises:
        StartupError: Wrong argument count or not a directory
    """
    if len(argv) != 1:
        raise StartupError(f"Expected exactly one argument, got {len(argv)}")
    args = build_parser().parse_args(argv)
    if not is_directory(args.repository):
        raise StartupError(f"Not a directory: {args.repository}")
    return args.repository


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for shelf-steam."""
    if argv is None:
        argv = sys.argv[1:]

    error_message = "An error has occurred"
    try:
        config = get_config()
        error_message = config.shell.error_message
        configure_logging(config)
        repository = validate_repository(argv)
    except ShelfSteamError as e:
        logging.getLogger(__name__).info("Startup failed: %s", e)
        sys.stderr.write(error_message + "\n")
        sys.stderr.flush()
        return 1

    from .shell import ShelfSteamShell
    shell = ShelfSteamShell(repository, config=config)
    return shell.run()


if __name__ == "__main__":
    sys.exit(main())
