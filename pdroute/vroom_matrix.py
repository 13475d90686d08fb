"""Duration and cost matrices for the vehicle routing optimizer."""

from __future__ import annotations

import math
from bisect import bisect_left
from collections.abc import Iterable
from dataclasses import dataclass

from pdroute.errors import DataError, InternalError

INFINITY = 2**63 - 1
"""Marks a pair of locations with no known duration or cost."""


@dataclass(frozen=True)
class VroomMatrixCell:
    """One row of matrix input between two locations."""

    start_id: int
    end_id: int
    duration: int
    cost: int


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class VroomMatrix:
    """Duration and cost matrices over selected locations.

    Locations are ordered by identifier; a location's position in that
    order is its row and column in both matrices.
    """

    def __init__(
        self,
        matrix: Iterable[VroomMatrixCell],
        location_ids: Iterable[int],
        scaling_factor: float = 1.0,
    ) -> None:
        self.ids: list[int] = sorted(set(location_ids))
        size = len(self.ids)
        cells: list[list[tuple[int, int]]] = [
            [(INFINITY, INFINITY)] * size for _ in range(size)
        ]

        for cell in matrix:
            if not (self.has_id(cell.start_id) and self.has_id(cell.end_id)):
                continue
            sid = self.get_index(cell.start_id)
            eid = self.get_index(cell.end_id)
            cells[sid][eid] = (
                _round_half_away(cell.duration / scaling_factor),
                int(cell.cost),
            )
            if cells[eid][sid][1] == INFINITY:
                cells[eid][sid] = cells[sid][eid]

        for i, row in enumerate(cells):
            row[i] = (0, 0)

        if any(d == INFINITY or c == INFINITY for row in cells for d, c in row):
            raise DataError(
                "An Infinity value was found on the Matrix. "
                "Might be missing information of a node"
            )

        self._durations = [[d for d, _ in row] for row in cells]
        self._costs = [[c for _, c in row] for row in cells]

    def has_id(self, id: int) -> bool:
        pos = bisect_left(self.ids, id)
        return pos != len(self.ids) and self.ids[pos] == id

    def get_index(self, id: int) -> int:
        """Internal index of an original location identifier."""
        pos = bisect_left(self.ids, id)
        if pos == len(self.ids):
            raise InternalError(
                "(INTERNAL) Matrix: Unable to find node on matrix", f"Not found {id}"
            )
        return pos

    def get_original_id(self, index: int) -> int:
        """Original location identifier at an internal index."""
        if index < 0 or index >= len(self.ids):
            raise InternalError(
                "(INTERNAL) Matrix: The given index is out of range",
                f"Out of range{index}",
            )
        return self.ids[index]

    def duration_matrix(self) -> list[list[int]]:
        """A copy of the duration matrix."""
        return [list(row) for row in self._durations]

    def cost_matrix(self) -> list[list[int]]:
        """A copy of the cost matrix."""
        return [list(row) for row in self._costs]