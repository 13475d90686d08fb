"""Travel-time matrix indexed by original node identifiers."""

from __future__ import annotations

import math
from bisect import bisect_left
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from itertools import product

from pdroute.errors import AssertFailedError, InternalError

INFINITY = 2**63 - 1
"""Marks a pair of nodes with no known travel time."""

Coordinate = float
Point = tuple[Coordinate, Coordinate]


@dataclass(frozen=True)
class MatrixCell:
    """One row of matrix input: travel cost from one node to another."""

    from_vid: int
    to_vid: int
    cost: int


def get_distance(p1: Point, p2: Point) -> float:
    """Euclidean distance between two points."""
    dx = p1[0] - p2[0]
    dy = p1[1] - p2[1]
    return math.sqrt(dx * dx + dy * dy)


class BaseMatrix:
    """Square matrix of travel times between selected nodes.

    ``ids`` holds the original identifiers; the position of an identifier
    in ``ids`` is its index in ``time_matrix``.
    """

    def __init__(
        self,
        data_costs: Iterable[MatrixCell] = (),
        node_ids: Iterable[int] = (),
        multiplier: float = 1.0,
    ) -> None:
        self.ids: list[int] = sorted(set(node_ids))
        size = len(self.ids)
        self.time_matrix: list[list[int]] = [[INFINITY] * size for _ in range(size)]

        for cell in data_costs:
            if not (self.has_id(cell.from_vid) and self.has_id(cell.to_vid)):
                continue
            i = self.get_index(cell.from_vid)
            j = self.get_index(cell.to_vid)
            self.time_matrix[i][j] = int(float(cell.cost) * multiplier)
            if self.time_matrix[j][i] == INFINITY:
                self.time_matrix[j][i] = self.time_matrix[i][j]

        self._zero_diagonal()

    @classmethod
    def from_euclidean(
        cls, euclidean_data: Mapping[Point, int], multiplier: float = 1.0
    ) -> "BaseMatrix":
        """Build the matrix from the coordinates of each node."""
        matrix = cls((), (), multiplier)
        points = sorted(euclidean_data.items())
        matrix.ids = [node_id for _, node_id in points]
        size = len(matrix.ids)
        matrix.time_matrix = [[INFINITY] * size for _ in range(size)]

        for (from_point, from_node), (to_point, to_node) in product(points, points):
            i = matrix.get_index(from_node)
            j = matrix.get_index(to_node)
            value = int(float(get_distance(from_point, to_point)) * multiplier)
            matrix.time_matrix[i][j] = value
            matrix.time_matrix[j][i] = value

        matrix._zero_diagonal()
        return matrix

    def _zero_diagonal(self) -> None:
        for i, row in enumerate(self.time_matrix):
            row[i] = 0

    def set_ids(self, data: Iterable[MatrixCell]) -> None:
        """Take the node identifiers from the matrix rows."""
        if self.ids:
            raise AssertFailedError("identifiers are already set")
        node_ids: set[int] = set()
        for cell in data:
            node_ids.add(cell.from_vid)
            node_ids.add(cell.to_vid)
        self.ids = sorted(node_ids)

    def has_id(self, id: int) -> bool:
        pos = bisect_left(self.ids, id)
        return pos != len(self.ids) and self.ids[pos] == id

    def get_index(self, id: int) -> int:
        """Internal index of an original node identifier."""
        pos = bisect_left(self.ids, id)
        if pos == len(self.ids):
            raise InternalError(
                "(INTERNAL) Base_Matrix: Unable to find node on matrix",
                f"{self}\nNot found{id}",
            )
        return pos

    def get_original_id(self, index: int) -> int:
        """Original node identifier at an internal index."""
        if index < 0 or index >= len(self.ids):
            raise InternalError(
                "(INTERNAL) Base_Matrix: The given index is out of range",
                f"{self}\nOut of range{index}",
            )
        return self.ids[index]

    def has_no_infinity(self) -> bool:
        return all(value != INFINITY for row in self.time_matrix for value in row)

    def _first_violation(self) -> tuple[int, int, int] | None:
        m = self.time_matrix
        size = len(m)
        for i, j, k in product(range(size), repeat=3):
            if m[i][k] > m[i][j] + m[j][k]:
                return i, j, k
        return None

    def obeys_triangle_inequality(self) -> bool:
        """True when no direct time exceeds a route through a third node."""
        return self._first_violation() is None

    def fix_triangle_inequality(self, depth: int = 0) -> int:
        """Shorten cells that break the triangle inequality.

        One cell is fixed per cycle; stops when none is left or after the
        number of cycles exceeds the matrix size. Returns the cycle count.
        """
        m = self.time_matrix
        while depth <= len(m):
            violation = self._first_violation()
            if violation is None:
                return depth
            i, j, k = violation
            m[i][k] = m[i][j] + m[j][k]
            depth += 1
        return depth

    def __str__(self) -> str:
        parts = ["".join(f"\t{node_id}" for node_id in self.ids), "\n"]
        for i, row in enumerate(self.time_matrix):
            for j, cost in enumerate(row):
                parts.append(
                    f"Internal({i},{j})"
                    f"\tOriginal({self.ids[i]},{self.ids[j]})"
                    f"\t = {cost}\n"
                )
        return "".join(parts)