"""
Connector graph construction and value assignment.
"""

import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from .. import config
from ..core.grid import Coordinate, ConnectorType, DiagonalDirection
from ..core.puzzle import Connector
from ..core.utils import setup_logger, make_rng, random_choice, RandomSource


# Index [row][col] for row in 0..rows-2, col in 0..cols-2
DiagonalGrid = List[List[DiagonalDirection]]


@dataclass(frozen=True)
class UnvaluedConnector:
    """Connector before value assignment"""
    type: ConnectorType
    cell_a: Coordinate
    cell_b: Coordinate
    direction: Optional[DiagonalDirection] = None

    def touches(self, cell: Coordinate) -> bool:
        return self.cell_a == cell or self.cell_b == cell

    def connects(self, a: Coordinate, b: Coordinate) -> bool:
        return (self.cell_a == a and self.cell_b == b) or (self.cell_a == b and self.cell_b == a)

    def with_value(self, value: int) -> Connector:
        return Connector(self.type, self.cell_a, self.cell_b, int(value), self.direction)


@dataclass
class ValueAssignmentResult:
    """Result of connector value assignment"""
    success: bool
    connectors: List[Connector] = field(default_factory=list)
    division_connector_indices: List[int] = field(default_factory=list)
    error: Optional[str] = None

    def __repr__(self):
        status = "Success" if self.success else "Failed"
        return f"ValueAssignmentResult({status}, {len(self.connectors)} connectors)"


def build_diagonal_grid(rows: int, cols: int, commitments: Dict[str, DiagonalDirection],
                        rng: RandomSource = None) -> DiagonalGrid:
    """
    Pick one diagonal per 2x2 block.

    Blocks the solution path crosses keep their committed direction, the
    rest are chosen at random. One direction per block means diagonals
    never cross.
    """
    rng = make_rng(rng)
    grid: DiagonalGrid = []

    for row in range(rows - 1):
        line = []
        for col in range(cols - 1):
            committed = commitments.get(f"{row},{col}")
            if committed is not None:
                line.append(committed)
            else:
                line.append(DiagonalDirection.DR if rng.random() < 0.5 else DiagonalDirection.DL)
        grid.append(line)

    return grid


def build_connector_graph(rows: int, cols: int, diagonal_grid: DiagonalGrid) -> List[UnvaluedConnector]:
    """Every horizontal, vertical and diagonal connector of the grid"""
    connectors: List[UnvaluedConnector] = []

    for row in range(rows):
        for col in range(cols - 1):
            connectors.append(UnvaluedConnector(
                ConnectorType.HORIZONTAL, Coordinate(row, col), Coordinate(row, col + 1)
            ))

    for row in range(rows - 1):
        for col in range(cols):
            connectors.append(UnvaluedConnector(
                ConnectorType.VERTICAL, Coordinate(row, col), Coordinate(row + 1, col)
            ))

    for row in range(rows - 1):
        for col in range(cols - 1):
            if diagonal_grid[row][col] == DiagonalDirection.DR:
                connectors.append(UnvaluedConnector(
                    ConnectorType.DIAGONAL, Coordinate(row, col), Coordinate(row + 1, col + 1),
                    DiagonalDirection.DR
                ))
            else:
                connectors.append(UnvaluedConnector(
                    ConnectorType.DIAGONAL, Coordinate(row, col + 1), Coordinate(row + 1, col),
                    DiagonalDirection.DL
                ))

    return connectors


def path_connector_indices(connectors: List[UnvaluedConnector], path: List[Coordinate]) -> List[int]:
    """Indices of the connectors joining consecutive path cells"""
    steps = {frozenset((a, b)) for a, b in zip(path, path[1:])}
    return [i for i, c in enumerate(connectors) if frozenset((c.cell_a, c.cell_b)) in steps]


class ConnectorValueAssigner:
    """Assigns values so no cell touches two connectors of equal value"""

    def __init__(self, rng: RandomSource = None,
                 division_ratio: float = config.DIVISION_CONNECTOR_RATIO,
                 repair_budget: int = config.VALUE_REPAIR_BUDGET):
        self.rng = make_rng(rng)
        self.division_ratio = division_ratio
        self.repair_budget = repair_budget
        self.logger = setup_logger(self.__class__.__name__)

    def assign(self, unvalued: List[UnvaluedConnector], min_value: int, max_value: int,
               division_enabled: bool = False, solution_path: Optional[List[Coordinate]] = None,
               mult_div_range: int = 12) -> ValueAssignmentResult:
        """
        Assign a value to every connector.

        When division is enabled a share of the solution path's connectors
        is assigned first from small values, so division expressions can
        target them.

        If the random pass runs out of values, the unreserved connectors are
        reassigned by a bounded backtracking search before giving up.

        Returns:
            ValueAssignmentResult; a failure means some connector had no
            legal value left and the attempt should be resampled.
        """
        solution_path = solution_path or []

        cell_map: Dict[Coordinate, List[int]] = defaultdict(list)
        for index, connector in enumerate(unvalued):
            cell_map[connector.cell_a].append(index)
            cell_map[connector.cell_b].append(index)

        values: List[Optional[int]] = [None] * len(unvalued)
        division_indices: List[int] = []

        if division_enabled and len(solution_path) > 1:
            on_path = path_connector_indices(unvalued, solution_path)
            count = max(1, math.floor(len(on_path) * self.division_ratio))
            order = self.rng.permutation(len(on_path))
            division_indices = [on_path[int(i)] for i in order[:count]]

            for index in division_indices:
                value = self._pick_value(index, unvalued, values, cell_map,
                                         max(1, min_value), min(mult_div_range, max_value))
                if value is None:
                    value = self._pick_value(index, unvalued, values, cell_map, min_value, max_value)
                if value is None:
                    return self._starved(unvalued[index], "division connector")
                values[index] = value

        reserved: Set[int] = set(division_indices)
        remaining = [i for i in range(len(unvalued)) if i not in reserved]
        for i in self.rng.permutation(len(remaining)):
            index = remaining[int(i)]
            value = self._pick_value(index, unvalued, values, cell_map, min_value, max_value)
            if value is None:
                repaired = self._repair(unvalued, values, cell_map, reserved, min_value, max_value)
                if repaired is None:
                    return self._starved(unvalued[index], "connector")
                values = repaired
                break
            values[index] = value

        connectors = [uv.with_value(value) for uv, value in zip(unvalued, values)]
        return ValueAssignmentResult(True, connectors, division_indices)

    def _pick_value(self, index: int, unvalued: List[UnvaluedConnector],
                    values: List[Optional[int]], cell_map: Dict[Coordinate, List[int]],
                    low: int, high: int) -> Optional[int]:
        """Uniform pick among values in [low, high] unused around both cells"""
        connector = unvalued[index]
        used = set()
        for i in cell_map[connector.cell_a] + cell_map[connector.cell_b]:
            if values[i] is not None:
                used.add(values[i])

        available = [v for v in range(low, high + 1) if v not in used]
        if not available:
            return None
        return random_choice(self.rng, available)

    def _repair(self, unvalued: List[UnvaluedConnector], values: List[Optional[int]],
                cell_map: Dict[Coordinate, List[int]], fixed: Set[int],
                low: int, high: int) -> Optional[List[int]]:
        """
        Backtracking over every connector not in fixed.

        Always expands the connector with the fewest free values and tries
        them in random order. Returns None if no assignment exists or the
        step budget runs out.
        """
        # A cell with more connectors than values can never be satisfied
        if any(len(indices) > high - low + 1 for indices in cell_map.values()):
            return None

        values = [v if i in fixed else None for i, v in enumerate(values)]
        open_indices = [i for i in range(len(unvalued)) if i not in fixed]
        budget = self.repair_budget

        def free_values(index: int) -> List[int]:
            connector = unvalued[index]
            used = {values[i] for i in cell_map[connector.cell_a] + cell_map[connector.cell_b]
                    if values[i] is not None}
            return [v for v in range(low, high + 1) if v not in used]

        def search() -> bool:
            nonlocal budget
            if not open_indices:
                return True
            budget -= 1
            if budget < 0:
                return False

            position = min(range(len(open_indices)), key=lambda p: len(free_values(open_indices[p])))
            index = open_indices.pop(position)
            candidates = free_values(index)
            for j in self.rng.permutation(len(candidates)):
                values[index] = candidates[int(j)]
                if search():
                    return True
            values[index] = None
            open_indices.insert(position, index)
            return False

        if not search():
            return None
        self.logger.debug(f"Value assignment repaired within {self.repair_budget - budget} steps")
        return values

    def _starved(self, connector: UnvaluedConnector, kind: str) -> ValueAssignmentResult:
        error = (f"No available values for {kind} between "
                 f"{connector.cell_a.key} and {connector.cell_b.key}")
        self.logger.debug(error)
        return ValueAssignmentResult(False, error=error)


def assign_connector_values(unvalued: List[UnvaluedConnector], min_value: int, max_value: int,
                            division_enabled: bool = False,
                            solution_path: Optional[List[Coordinate]] = None,
                            mult_div_range: int = 12,
                            rng: RandomSource = None) -> ValueAssignmentResult:
    """Functional wrapper around ConnectorValueAssigner"""
    return ConnectorValueAssigner(rng).assign(
        unvalued, min_value, max_value, division_enabled, solution_path, mult_div_range
    )


def connectors_for(cell: Coordinate, connectors: List[Connector]) -> List[Connector]:
    """All connectors touching a cell"""
    return [c for c in connectors if c.touches(cell)]


def connector_between(a: Coordinate, b: Coordinate, connectors: List[Connector]) -> Optional[int]:
    """Index of the connector joining two cells, or None"""
    for index, connector in enumerate(connectors):
        if connector.connects(a, b):
            return index
    return None
