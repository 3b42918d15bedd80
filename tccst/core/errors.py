"""Exceptions raised by the tccst core."""

from __future__ import annotations


class TccstError(Exception):
    """Base class for every error the game reports to the user."""


class SamplingError(TccstError):
    """Picking words from the project failed; the session cannot start."""


class PathNotFoundError(SamplingError):
    def __init__(self, path) -> None:
        super().__init__(f"Project path does not exist or is not a directory: {path}")
        self.path = path


class NoMatchingFileError(SamplingError):
    def __init__(self, path, extension: str) -> None:
        super().__init__(f"No code files found (*.{extension} under {path})")
        self.path = path
        self.extension = extension


class UnreadableFileError(SamplingError):
    def __init__(self, path, reason: str) -> None:
        super().__init__(f"Could not read {path}: {reason}")
        self.path = path


class InsufficientWordsError(SamplingError):
    def __init__(self, available: int, requested: int) -> None:
        super().__init__(
            f"Not enough words to meet word count ({available} available, {requested} requested)"
        )
        self.available = available
        self.requested = requested


class InvalidStateError(TccstError):
    """The session was used in a way its current state does not allow."""


class ConfigError(TccstError, ValueError):
    """Settings from the command line or the settings file are invalid."""
