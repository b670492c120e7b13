from __future__ import annotations

from enum import Enum
from typing import Optional


class AccessKind(str, Enum):
    READ = "read"
    WRITE = "write"


class BrainfuckError(Exception):
    """Base class for the fatal conditions raised by the engine."""

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        return self.message


class BrainfuckSyntaxError(BrainfuckError):
    """An unmatched ``[`` or ``]``.

    ``missing`` names the bracket that could not be found. During
    interpretation ``position`` is the index of the offending bracket; after
    translation it is ``None`` and ``depth`` holds the final nesting
    imbalance instead.
    """

    def __init__(
        self,
        missing: str,
        position: Optional[int] = None,
        depth: Optional[int] = None,
    ) -> None:
        message = f"Syntax error: unenclosed loop detected. Missing '{missing}'."
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message, position)
        self.missing = missing
        self.depth = depth


class AccessViolation(BrainfuckError):
    """The cursor was dereferenced outside the tape bounds."""

    def __init__(self, access: AccessKind, address: int, position: Optional[int] = None) -> None:
        preposition = "from" if access is AccessKind.READ else "to"
        message = f"Access violation: attempt to {access.value} {preposition} an out-of-range address."
        if position is not None:
            message = f"{message} (address {address}, at position {position})"
        else:
            message = f"{message} (address {address})"
        super().__init__(message, position)
        self.access = access
        self.address = address


__all__ = [
    "AccessKind",
    "AccessViolation",
    "BrainfuckError",
    "BrainfuckSyntaxError",
]
