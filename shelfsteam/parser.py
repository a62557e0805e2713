"""
Command line parsing for shelf-steam.

A line is split on runs of spaces and tabs. The only operator is ``<``,
which may appear once and must be followed by exactly one file name at the
end of the line. Tokens are otherwise literal: there is no quoting,
escaping or globbing.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import CommandParseError

REDIRECT_OPERATOR = "<"

_WHITESPACE = re.compile(r"[ \t]+")


@dataclass
class ParsedCommand:
    """A validated command: argument list plus optional input file."""
    args: List[str] = field(default_factory=list)
    input_file: Optional[str] = None

    @property
    def name(self) -> str:
        return self.args[0]

    @property
    def arguments(self) -> List[str]:
        """Arguments after the command name."""
        return self.args[1:]


def tokenize(line: str) -> List[str]:
    """Split a line on runs of spaces and tabs."""
    return [token for token in _WHITESPACE.split(line) if token]


def parse_command_line(line: str) -> Optional[ParsedCommand]:
    """
    Parse one input line.

    Args:
        line: Raw line without its trailing line terminator

    Returns:
        The parsed command, or None for an empty or whitespace-only line

    Raises:
        CommandParseError: If the redirection syntax is malformed
    """
    tokens = tokenize(line)
    if not tokens:
        return None

    args: List[str] = []
    input_file: Optional[str] = None

    for position, token in enumerate(tokens):
        if token != REDIRECT_OPERATOR:
            args.append(token)
            continue

        trailing = tokens[position + 1:]
        if not trailing:
            raise CommandParseError("no file after redirection", line=line)
        if trailing[0] == REDIRECT_OPERATOR:
            raise CommandParseError("multiple redirection operators", line=line)
        if len(trailing) > 1:
            raise CommandParseError("multiple arguments after redirection", line=line)
        input_file = trailing[0]
        break

    if not args:
        raise CommandParseError("missing command", line=line)

    return ParsedCommand(args=args, input_file=input_file)
