"""Exceptions raised by fixture lifecycle operations."""

from typing import List, Optional, Tuple


class FixtureError(Exception):
    """Base class for fixture failures."""


class BindError(FixtureError):
    """Raised when a port cannot be bound or the server fails to listen."""

    def __init__(self, port: int, reason: str) -> None:
        super().__init__(f"Failed to listen on port {port}: {reason}")
        self.port = port
        self.reason = reason


class CloseError(FixtureError):
    """Raised when one or more listening sockets failed to close.

    ``failures`` holds ``(port, exception)`` pairs in the order the closes
    were attempted. ``port`` is ``None`` for handlers that are not tied to a
    single socket.
    """

    def __init__(self, failures: List[Tuple[Optional[int], BaseException]]) -> None:
        details = ", ".join(
            f"{port if port is not None else '?'}: {exc!r}" for port, exc in failures
        )
        super().__init__(f"{len(failures)} close operation(s) failed ({details})")
        self.failures = failures


class FixtureStateError(FixtureError):
    """Raised when an operation is not valid in the fixture's current state."""
