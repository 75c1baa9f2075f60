"""
Derive cell answers from the solution path and connector values.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set

from ..core.grid import Coordinate
from ..core.puzzle import Cell, Connector
from ..core.utils import make_rng, random_choice, RandomSource
from .connector_builder import connector_between, connectors_for


@dataclass
class CellGrid:
    """Cells plus the keys of cells that should prefer a division expression"""
    cells: List[List[Cell]]
    rows: int
    cols: int
    division_cells: Set[str] = field(default_factory=set)


def empty_grid(rows: int, cols: int) -> List[List[Cell]]:
    return [
        [Cell(row, col, is_start=(row == 0 and col == 0),
              is_finish=(row == rows - 1 and col == cols - 1))
         for col in range(cols)]
        for row in range(rows)
    ]


def assign_cell_answers(rows: int, cols: int, solution_path: List[Coordinate],
                        connectors: List[Connector],
                        division_connector_indices: Optional[List[int]] = None,
                        rng: RandomSource = None) -> CellGrid:
    """
    Give every cell except FINISH its answer.

    A path cell's answer is the value of the connector to the next path
    cell; any other cell answers with a random touching connector.

    Raises:
        ValueError: if consecutive path cells have no connector between
            them, or a cell touches no connector at all
    """
    rng = make_rng(rng)
    division_set = set(division_connector_indices or [])
    division_cells: Set[str] = set()
    cells = empty_grid(rows, cols)

    for current, nxt in zip(solution_path, solution_path[1:]):
        index = connector_between(current, nxt, connectors)
        if index is None:
            raise ValueError(f"No connector found between {current.key} and {nxt.key}")

        cells[current.row][current.col].answer = connectors[index].value
        if index in division_set:
            division_cells.add(current.key)

    on_path = set(solution_path)
    for row in cells:
        for cell in row:
            if cell.is_finish or cell.coordinate in on_path:
                continue

            touching = connectors_for(cell.coordinate, connectors)
            if not touching:
                raise ValueError(f"No connectors found for cell {cell.coordinate.key}")
            cell.answer = random_choice(rng, touching).value

    return CellGrid(cells, rows, cols, division_cells)
