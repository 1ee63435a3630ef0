"""Engine exceptions."""

from __future__ import annotations


class InvalidSessionError(ValueError):
    """A persisted blob is not a session at all and cannot be migrated."""

    def __init__(self, reason: str = "Invalid session") -> None:
        super().__init__(reason)
        self.reason = reason
