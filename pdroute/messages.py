"""Collects log, notice and error text produced while solving."""

from __future__ import annotations

import io


class Messages:
    """Three text streams: ``log``, ``notice`` and ``error``."""

    def __init__(self) -> None:
        self.log = io.StringIO()
        self.notice = io.StringIO()
        self.error = io.StringIO()

    def get_log(self) -> str:
        return self.log.getvalue()

    def get_notice(self) -> str:
        return self.notice.getvalue()

    def has_error(self) -> bool:
        return bool(self.error.getvalue())

    def get_error(self) -> str:
        return self.error.getvalue()

    def clear(self) -> None:
        """Empty all three streams."""
        self.log = io.StringIO()
        self.notice = io.StringIO()
        self.error = io.StringIO()