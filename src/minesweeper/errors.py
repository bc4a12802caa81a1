"""
Error types for the Minesweeper engine.

Recoverable errors derive from MinesweeperError. Internal invariant
violations raise InvalidProgramStateError, which callers are not
expected to handle.
"""


class MinesweeperError(Exception):
    """Base class for errors a caller may recover from."""


class InvalidParametersError(MinesweeperError, ValueError):
    """Game parameters are out of the accepted range."""


class InvalidStateError(MinesweeperError, RuntimeError):
    """Cell operation attempted in the wrong opened/closed state."""


class InvalidProgramStateError(AssertionError):
    """An internal invariant of the engine does not hold."""


def ensure(condition: bool, message: str) -> None:
    """Raise InvalidProgramStateError unless condition holds."""
    if not condition:
        raise InvalidProgramStateError(message)
