"""
Grid primitives for Circuit Challenge puzzles.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class DiagonalDirection(Enum):
    """Which diagonal of a 2x2 block carries a connector"""
    DR = "DR"  # (row, col) to (row+1, col+1)
    DL = "DL"  # (row, col+1) to (row+1, col)


class ConnectorType(Enum):
    """Kinds of connector between two cells"""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"


@dataclass(frozen=True, order=True)
class Coordinate:
    """A (row, col) position in the grid"""
    row: int
    col: int

    @property
    def key(self) -> str:
        """Stable "row,col" key"""
        return f"{self.row},{self.col}"

    @classmethod
    def from_key(cls, key: str) -> 'Coordinate':
        """Parse a "row,col" key"""
        parts = key.split(',')
        if len(parts) != 2:
            raise ValueError(f"Invalid coordinate key: {key!r}")
        try:
            return cls(int(parts[0]), int(parts[1]))
        except ValueError:
            raise ValueError(f"Invalid coordinate key: {key!r}")

    def __repr__(self):
        return f"({self.row},{self.col})"


# All 8 movement directions: up, down, left, right, then the diagonals
DIRECTIONS: List[Tuple[int, int]] = [
    (-1, 0), (1, 0), (0, -1), (0, 1),
    (-1, -1), (-1, 1), (1, -1), (1, 1),
]

START = Coordinate(0, 0)


def in_bounds(pos: Coordinate, rows: int, cols: int) -> bool:
    return 0 <= pos.row < rows and 0 <= pos.col < cols


def get_adjacent(pos: Coordinate, rows: int, cols: int) -> List[Coordinate]:
    """All in-bounds 8-connected neighbours of a cell"""
    adjacent = []
    for dr, dc in DIRECTIONS:
        neighbour = Coordinate(pos.row + dr, pos.col + dc)
        if in_bounds(neighbour, rows, cols):
            adjacent.append(neighbour)
    return adjacent


def are_adjacent(a: Coordinate, b: Coordinate) -> bool:
    """True if two distinct cells touch, diagonals included"""
    row_diff = abs(a.row - b.row)
    col_diff = abs(a.col - b.col)
    return row_diff <= 1 and col_diff <= 1 and (row_diff + col_diff) > 0


def manhattan_distance(a: Coordinate, b: Coordinate) -> int:
    return abs(a.row - b.row) + abs(a.col - b.col)


def is_diagonal_move(src: Coordinate, dst: Coordinate) -> bool:
    return src.row != dst.row and src.col != dst.col


def block_key(a: Coordinate, b: Coordinate) -> str:
    """Key of the 2x2 block that a diagonal between a and b lies in"""
    return f"{min(a.row, b.row)},{min(a.col, b.col)}"


def diagonal_direction(src: Coordinate, dst: Coordinate) -> DiagonalDirection:
    """Direction of the diagonal a move from src to dst travels along"""
    row_diff = dst.row - src.row
    col_diff = dst.col - src.col
    if (row_diff > 0 and col_diff > 0) or (row_diff < 0 and col_diff < 0):
        return DiagonalDirection.DR
    return DiagonalDirection.DL


def finish_of(rows: int, cols: int) -> Coordinate:
    return Coordinate(rows - 1, cols - 1)
