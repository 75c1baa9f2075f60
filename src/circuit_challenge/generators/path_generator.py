"""
Solution path generation for Circuit Challenge puzzles.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

import numpy as np

from .. import config
from ..core.grid import (
    Coordinate, DiagonalDirection, START, finish_of, get_adjacent,
    manhattan_distance, is_diagonal_move, block_key, diagonal_direction
)
from ..core.utils import setup_logger, make_rng, random_choice, RandomSource


# Grids at or below this many cells walk mostly at random
SMALL_GRID_CELLS = 20


@dataclass
class PathResult:
    """Result of a path generation attempt"""
    success: bool
    path: List[Coordinate] = field(default_factory=list)
    diagonal_commitments: Dict[str, DiagonalDirection] = field(default_factory=dict)
    error: Optional[str] = None
    attempts: int = 0

    def __repr__(self):
        status = "Success" if self.success else "Failed"
        return f"PathResult({status}, length={len(self.path)}, attempts={self.attempts})"


def count_direction_changes(path: List[Coordinate]) -> int:
    """Number of times consecutive steps change direction"""
    if len(path) < 3:
        return 0

    changes = 0
    prev = (path[1].row - path[0].row, path[1].col - path[0].col)
    for a, b in zip(path[1:], path[2:]):
        delta = (b.row - a.row, b.col - a.col)
        if delta != prev:
            changes += 1
        prev = delta
    return changes


def is_interesting_path(path: List[Coordinate]) -> bool:
    """Reject near-straight paths; shorter paths need fewer turns"""
    if len(path) < 6:
        min_changes = 1
    elif len(path) < 8:
        min_changes = 2
    else:
        min_changes = 3
    return count_direction_changes(path) >= min_changes


def is_diagonal_move_valid(src: Coordinate, dst: Coordinate,
                           commitments: Dict[str, DiagonalDirection]) -> bool:
    """A diagonal may not cross a block already committed the other way"""
    if not is_diagonal_move(src, dst):
        return True
    existing = commitments.get(block_key(src, dst))
    return existing is None or existing == diagonal_direction(src, dst)


class PathGenerator:
    """Random walks from START to FINISH"""

    def __init__(self, rng: RandomSource = None):
        self.rng = make_rng(rng)
        self.logger = setup_logger(self.__class__.__name__)

    def generate_path(self, rows: int, cols: int, min_length: int, max_length: int,
                      max_attempts: int = config.PATH_MAX_ATTEMPTS) -> PathResult:
        """
        Generate a solution path from (0,0) to (rows-1, cols-1).

        Args:
            rows: Grid rows
            cols: Grid columns
            min_length: Minimum number of cells on the path
            max_length: Walks longer than this are abandoned
            max_attempts: Number of walks to try

        Returns:
            PathResult with the path and the diagonal direction each
            traversed 2x2 block is committed to
        """
        finish = finish_of(rows, cols)

        for attempt in range(1, max_attempts + 1):
            path, commitments = self._walk(rows, cols, finish, max_length)

            if (path[-1] == finish and len(path) >= min_length
                    and is_interesting_path(path)):
                self.logger.debug(f"Found path of length {len(path)} on attempt {attempt}")
                return PathResult(True, path, commitments, attempts=attempt)

        error = f"Failed to generate valid path after {max_attempts} attempts"
        self.logger.debug(error)
        return PathResult(False, error=error, attempts=max_attempts)

    def _walk(self, rows: int, cols: int, finish: Coordinate, max_length: int):
        """One random walk; may end anywhere"""
        path = [START]
        visited: Set[Coordinate] = {START}
        commitments: Dict[str, DiagonalDirection] = {}
        current = START
        small_grid = rows * cols <= SMALL_GRID_CELLS

        while current != finish:
            if len(path) > max_length:
                break

            moves = [
                move for move in get_adjacent(current, rows, cols)
                if move not in visited and is_diagonal_move_valid(current, move, commitments)
            ]
            if not moves:
                break

            progress = len(path) / max_length
            if small_grid:
                nxt = self._pick_small(moves, finish, progress)
            else:
                nxt = self._pick_scored(moves, current, finish, visited, progress, rows, cols)

            if is_diagonal_move(current, nxt):
                commitments[block_key(current, nxt)] = diagonal_direction(current, nxt)

            path.append(nxt)
            visited.add(nxt)
            current = nxt

        return path, commitments

    def _pick_small(self, moves: List[Coordinate], finish: Coordinate,
                    progress: float) -> Coordinate:
        """Mostly random, with a light pull towards FINISH late in the walk"""
        if progress > 0.6 and self.rng.random() < 0.4:
            return min(moves, key=lambda m: manhattan_distance(m, finish))
        return random_choice(self.rng, moves)

    def _pick_scored(self, moves: List[Coordinate], current: Coordinate, finish: Coordinate,
                     visited: Set[Coordinate], progress: float, rows: int, cols: int) -> Coordinate:
        """Score moves by finish bias, dead-end avoidance and jitter"""
        jitter = self.rng.uniform(0.0, 0.5, size=len(moves))
        scores = np.zeros(len(moves))

        for i, move in enumerate(moves):
            if progress > 0.7:
                scores[i] -= manhattan_distance(move, finish) * (progress - 0.5) * 2

            future_options = sum(
                1 for n in get_adjacent(move, rows, cols)
                if n not in visited and n != current
            )
            scores[i] += future_options * 0.5

        scores += jitter
        return moves[int(np.argmax(scores))]
