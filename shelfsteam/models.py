"""
Shared data types for shelf-steam.
"""

from dataclasses import dataclass


@dataclass
class Session:
    """Mutable state of one shell session."""
    repository_path: str


@dataclass(frozen=True)
class ListingEntry:
    """One line of ``ls`` output."""
    name: str
    description: str

    def render(self) -> str:
        return f"{self.name}: {self.description}"
