"""Error types raised by the standup pipeline."""

from pathlib import Path
from typing import Optional


class StandupError(Exception):
    """Base class for every fatal standup-git error."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} ({self.path})"


class ConfigError(StandupError):
    """No usable configuration, e.g. no author could be resolved."""


class TraversalError(StandupError):
    """The directory walk failed."""


class ExtractionError(StandupError):
    """git log could not be run or exited non-zero."""


class ParseError(StandupError):
    """The git log output was not a valid record stream."""


class WriteError(StandupError):
    """The report file could not be written."""
