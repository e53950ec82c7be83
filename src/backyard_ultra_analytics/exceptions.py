"""Exceptions raised by the backyard ultra analytics package."""

from pathlib import Path
from typing import Optional


class AnalyticsError(Exception):
    """Base class for package errors."""


class UnknownEditionError(AnalyticsError):
    """Raised when an edition is requested that is not configured."""

    def __init__(self, edition: str, known: Optional[list] = None):
        self.edition = edition
        self.known = list(known or [])
        message = f"Unknown edition: {edition}"
        if self.known:
            message += f" (expected one of {', '.join(self.known)})"
        super().__init__(message)


class DataLoadError(AnalyticsError):
    """Raised when an edition's results or laps cannot be loaded."""

    def __init__(self, edition: str, path: Optional[Path], reason: str):
        self.edition = edition
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load {edition} data from {path}: {reason}")
