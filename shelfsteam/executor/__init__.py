"""Game execution and description probing."""

from .runner import ProcessRunner, RunResult
from .probe import DescriptionProbe

__all__ = ["ProcessRunner", "RunResult", "DescriptionProbe"]
