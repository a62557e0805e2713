"""
Command handlers for shelf-steam.

This module provides the dispatcher for builtins and game execution.
"""

from .commands import CommandDispatcher

__all__ = ["CommandDispatcher"]
