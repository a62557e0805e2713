"""User interface components."""

from .terminal import TerminalUI
from .completions import ShelfSteamCompleter, COMMAND_REGISTRY

__all__ = ["TerminalUI", "ShelfSteamCompleter", "COMMAND_REGISTRY"]
