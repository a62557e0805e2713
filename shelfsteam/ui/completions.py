"""
Tab-completion for the shelf-steam shell.

Provides:
- COMMAND_REGISTRY: single source of truth for the builtin commands
- ShelfSteamCompleter: prompt_toolkit Completer for builtins, repository
  entries and directory arguments of ``path``
"""

import os
from typing import Callable, Iterable, List

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document


COMMAND_REGISTRY = [
    {
        "name": "exit",
        "help": "Leave the shell",
        "has_arg": False,
    },
    {
        "name": "ls",
        "help": "List games with their descriptions",
        "has_arg": False,
    },
    {
        "name": "path",
        "help": "Switch to another game repository",
        "has_arg": True,
    },
]


def builtin_names() -> List[str]:
    """Return every builtin command name."""
    return [entry["name"] for entry in COMMAND_REGISTRY]


def _find_entry(name: str):
    """Find the registry entry for a builtin name."""
    for entry in COMMAND_REGISTRY:
        if entry["name"] == name:
            return entry
    return None


def _past_command_word(text: str, name: str) -> bool:
    """Check whether *text* is *name* followed by a space or tab."""
    stripped = text.lstrip(" \t")
    return stripped.startswith(name) and stripped[len(name):len(name) + 1] in (" ", "\t")


class ShelfSteamCompleter(Completer):
    """Tab-completer for shelf-steam.

    The first word completes to builtins and to entries of the active
    repository (fetched through *repository_getter* on every request, so
    ``path`` changes are picked up). The argument of ``path`` completes to
    directories.
    """

    def __init__(self, repository_getter: Callable[[], str]):
        self._repository_getter = repository_getter

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        words = text.split()

        if _past_command_word(text, "path"):
            if len(words) == 1:
                yield from self._directory_completions("")
            elif len(words) == 2 and not text[-1].isspace():
                yield from self._directory_completions(words[1])
            return

        if not text or any(ch in text for ch in " \t"):
            return

        for entry in COMMAND_REGISTRY:
            if entry["name"].startswith(text):
                yield Completion(
                    entry["name"],
                    start_position=-len(text),
                    display_meta=entry["help"],
                )

        builtins = set(builtin_names())
        for name in self._repository_entries():
            if name.startswith(text) and name not in builtins:
                yield Completion(name, start_position=-len(text), display_meta="game")

    def _repository_entries(self) -> List[str]:
        try:
            return sorted(os.listdir(self._repository_getter()), key=os.fsencode)
        except OSError:
            return []

    def _directory_completions(self, prefix: str) -> Iterable[Completion]:
        head, tail = os.path.split(prefix)
        base = os.path.expanduser(head) if head else "."
        try:
            names = sorted(os.listdir(base), key=os.fsencode)
        except OSError:
            return
        for name in names:
            if name.startswith(tail) and os.path.isdir(os.path.join(base, name)):
                yield Completion(
                    os.path.join(head, name) + os.sep,
                    start_position=-len(prefix),
                )
