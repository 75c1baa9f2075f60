"""
Shared fixtures for the Circuit Challenge test suite.
"""

import numpy as np
import pytest

from circuit_challenge.core.grid import Coordinate, ConnectorType, DiagonalDirection
from circuit_challenge.core.puzzle import Puzzle, Cell, Connector, Solution, Operation
from circuit_challenge.core.expression import format_expression
from circuit_challenge.generators.difficulty import by_level


SAMPLE_PATH = [Coordinate(0, 0), Coordinate(0, 1), Coordinate(1, 2), Coordinate(2, 3)]


def build_sample_puzzle() -> Puzzle:
    """
    A hand-built 3x4 puzzle.

    Every diagonal runs down-right and every connector value is distinct
    (5 upwards), so each answer matches exactly one touching connector.
    """
    rows, cols = 3, 4
    connectors = []
    for r in range(rows):
        for c in range(cols - 1):
            connectors.append(Connector(ConnectorType.HORIZONTAL, Coordinate(r, c), Coordinate(r, c + 1)))
    for r in range(rows - 1):
        for c in range(cols):
            connectors.append(Connector(ConnectorType.VERTICAL, Coordinate(r, c), Coordinate(r + 1, c)))
    for r in range(rows - 1):
        for c in range(cols - 1):
            connectors.append(Connector(ConnectorType.DIAGONAL, Coordinate(r, c), Coordinate(r + 1, c + 1),
                                        direction=DiagonalDirection.DR))
    for i, connector in enumerate(connectors):
        connector.value = 5 + i

    grid = [[Cell(r, c, is_start=(r, c) == (0, 0), is_finish=(r, c) == (rows - 1, cols - 1))
             for c in range(cols)] for r in range(rows)]

    for current, nxt in zip(SAMPLE_PATH, SAMPLE_PATH[1:]):
        value = next(c.value for c in connectors if c.connects(current, nxt))
        grid[current.row][current.col].answer = value

    for row in grid:
        for cell in row:
            if cell.is_finish or cell.answer is not None:
                continue
            cell.answer = next(c.value for c in connectors if c.touches(cell.coordinate))

    for row in grid:
        for cell in row:
            if cell.answer is not None:
                cell.expression = format_expression(cell.answer - 3, Operation.ADDITION, 3)

    return Puzzle(grid, connectors, Solution(list(SAMPLE_PATH)), puzzle_id="sample")


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def sample_puzzle():
    return build_sample_puzzle()


@pytest.fixture
def tiny_tot():
    return by_level(1)


@pytest.fixture
def times_tables():
    return by_level(5)


@pytest.fixture
def division_intro():
    return by_level(8)
