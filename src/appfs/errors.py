from __future__ import annotations


class AppFSError(Exception):
    """Base exception for errors raised by appfs itself."""


class PolicyViolation(AppFSError):
    """Raised when a mutating operation targets a read-only storage location."""

    def __init__(self, operation: str, uri: str, message: str) -> None:
        super().__init__(f"{message}: {uri}")
        self.operation = operation
        self.uri = uri


__all__ = ["AppFSError", "PolicyViolation"]
