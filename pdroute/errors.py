"""Exceptions raised by the package and a helper to describe the call stack."""

from __future__ import annotations

import traceback

_MAX_FRAMES = 16


class AssertFailedError(AssertionError):
    """An internal consistency check did not hold."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class DataError(Exception):
    """The input data is not acceptable.

    ``hint`` carries extra detail, for example which record was at fault.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        return self.message


class InternalError(Exception):
    """A lookup inside a data structure failed; ``hint`` holds the details."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        return self.message


def _execution_path() -> str:
    frames = traceback.extract_stack()[:-2][-_MAX_FRAMES:]
    lines = "".join(
        f"[bt]{frame.filename}:{frame.lineno} in {frame.name}\n" for frame in frames
    )
    return "\n*** Execution path***\n" + lines


def get_backtrace(msg: str | None = None) -> str:
    """Describe the current call stack, preceded by ``msg`` when given."""
    path = _execution_path()
    if msg is None:
        return path
    return "\n" + msg + "\n" + path