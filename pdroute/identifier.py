"""An internal index paired with a user-facing identifier."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Identifier:
    """Holds the internal index ``idx`` and the original ``id``."""

    idx: int
    id: int

    def reset_id(self, id: int) -> None:
        self.id = id

    def __str__(self) -> str:
        return f"id(idx) = {self.id}({self.idx})"