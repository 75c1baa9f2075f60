"""
Move checks for consumers walking a generated puzzle.
"""

from dataclasses import dataclass
from typing import List, Optional

from .grid import Coordinate, are_adjacent, get_adjacent
from .puzzle import Puzzle, Connector


@dataclass
class MoveCheckResult:
    """Outcome of checking a single move"""
    correct: bool
    connector: Optional[Connector] = None


def check_move(puzzle: Puzzle, from_cell: Coordinate, to_cell: Coordinate) -> MoveCheckResult:
    """
    Check a move from one cell to a neighbour.

    A move is correct when a connector joins the two cells and its value
    equals the source cell's answer.
    """
    if not are_adjacent(from_cell, to_cell):
        return MoveCheckResult(correct=False)

    connector = puzzle.connector_between(from_cell, to_cell)
    if connector is None:
        return MoveCheckResult(correct=False)

    cell = puzzle.cell_at(from_cell)
    if cell is None or cell.answer is None:
        return MoveCheckResult(correct=False, connector=connector)

    return MoveCheckResult(correct=cell.answer == connector.value, connector=connector)


def is_finish_cell(puzzle: Puzzle, coord: Coordinate) -> bool:
    return coord.row == puzzle.rows - 1 and coord.col == puzzle.cols - 1


def adjacent_cells(puzzle: Puzzle, coord: Coordinate) -> List[Coordinate]:
    return get_adjacent(coord, puzzle.rows, puzzle.cols)


def follow_answers(puzzle: Puzzle, max_steps: Optional[int] = None) -> List[Coordinate]:
    """
    Walk from START by always taking the connector that matches the answer.

    Stops at FINISH, at a cell with no matching connector, or when a cell
    would be revisited. Returns the cells visited in order.
    """
    current = Coordinate(0, 0)
    route = [current]
    seen = {current}
    limit = max_steps if max_steps is not None else puzzle.rows * puzzle.cols

    while not is_finish_cell(puzzle, current) and len(route) <= limit:
        cell = puzzle.cell_at(current)
        if cell is None or cell.answer is None:
            break
        matches = [c for c in puzzle.connectors_for(current) if c.value == cell.answer]
        if len(matches) != 1:
            break
        nxt = matches[0].other_cell(current)
        if nxt in seen:
            break
        route.append(nxt)
        seen.add(nxt)
        current = nxt

    return route
