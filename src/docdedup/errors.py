"""Exception types raised by the duplicate-content pipeline."""
from __future__ import annotations


class DocdedupError(Exception):
    """Base class for all docdedup errors."""


class MalformedInputError(DocdedupError, ValueError):
    """Raised when a document is empty or cannot be read.

    Only the offending document is abandoned; the detector records the
    failure and keeps scanning the rest of the batch.
    """

    def __init__(self, identifier: str, reason: str) -> None:
        super().__init__(f"{identifier}: {reason}")
        self.identifier = identifier
        self.reason = reason


class ConfigError(DocdedupError, ValueError):
    """Raised when detector configuration is invalid."""
