"""
Validator for Circuit Challenge puzzle invariants.
"""

from collections import Counter
from typing import List

import networkx as nx

from .grid import Coordinate, ConnectorType, are_adjacent, block_key, in_bounds
from .puzzle import Puzzle, Cell, Connector
from .expression import evaluate_expression, parse_expression


class ValidationResult:
    """Result of puzzle validation"""

    def __init__(self):
        self.is_valid = True
        self.errors: List[str] = []
        self.warnings: List[str] = []

    @property
    def valid(self) -> bool:
        return self.is_valid

    def add_error(self, error: str):
        """Add an error message"""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str):
        """Add a warning message"""
        self.warnings.append(warning)

    def extend(self, other: 'ValidationResult'):
        """Fold another result's messages into this one"""
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)

    def __eq__(self, other):
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return (self.is_valid == other.is_valid and self.errors == other.errors
                and self.warnings == other.warnings)

    def __bool__(self):
        return self.is_valid

    def __repr__(self):
        status = "Valid" if self.is_valid else "Invalid"
        return f"ValidationResult({status}, {len(self.errors)} errors, {len(self.warnings)} warnings)"


def connector_multigraph(connectors: List[Connector], rows: int, cols: int) -> nx.MultiGraph:
    """
    Cell graph with one edge per connector.

    A MultiGraph keeps parallel connectors between the same pair of cells
    apart, so malformed puzzles still show every value a cell touches.
    """
    graph = nx.MultiGraph()
    graph.add_nodes_from(Coordinate(r, c) for r in range(rows) for c in range(cols))
    for index, connector in enumerate(connectors):
        graph.add_edge(connector.cell_a, connector.cell_b, key=index,
                       value=connector.value, type=connector.type)
    return graph


def _touching_values(graph: nx.MultiGraph, cell: Coordinate) -> List[int]:
    if cell not in graph:
        return []
    return [value for _, _, value in graph.edges(cell, data='value')]


class PuzzleValidator:
    """Validates Circuit Challenge puzzles from scratch"""

    @staticmethod
    def validate_path(path: List[Coordinate], rows: int, cols: int) -> ValidationResult:
        """Validate the path is correctly formed"""
        result = ValidationResult()

        if len(path) < 2:
            result.add_error("Path must have at least 2 elements")
            return result

        start = Coordinate(0, 0)
        if path[0] != start:
            result.add_error(f"Path must start at {start.key}, but starts at {path[0].key}")

        finish = Coordinate(rows - 1, cols - 1)
        if path[-1] != finish:
            result.add_error(f"Path must end at {finish.key}, but ends at {path[-1].key}")

        visited = set()
        for i, coord in enumerate(path):
            if not in_bounds(coord, rows, cols):
                result.add_error(f"Path coordinate {coord.key} is out of bounds")

            if coord in visited:
                result.add_error(f"Duplicate coordinate in path: {coord.key}")
            visited.add(coord)

            if i > 0 and not are_adjacent(path[i - 1], coord):
                result.add_error(f"Non-adjacent cells in path: {path[i - 1].key} to {coord.key}")

        return result

    @staticmethod
    def validate_connector_uniqueness(graph: nx.MultiGraph, rows: int, cols: int) -> ValidationResult:
        """Validate connector values are unique around every cell"""
        result = ValidationResult()

        for row in range(rows):
            for col in range(cols):
                cell = Coordinate(row, col)
                counts = Counter(_touching_values(graph, cell))
                duplicates = sorted(value for value, n in counts.items() if n > 1)
                if duplicates:
                    result.add_error(
                        f"Duplicate connector value at cell {cell.key}: {duplicates}"
                    )

        return result

    @staticmethod
    def validate_cell_answers(grid: List[List[Cell]], graph: nx.MultiGraph) -> ValidationResult:
        """Validate each answer matches exactly one touching connector"""
        result = ValidationResult()

        for row in grid:
            for cell in row:
                if cell.is_finish:
                    if cell.answer is not None:
                        result.add_error("FINISH cell should have no answer")
                    continue

                if cell.answer is None:
                    result.add_error(f"Cell {cell.coordinate.key} has no answer but is not FINISH")
                    continue

                matches = _touching_values(graph, cell.coordinate).count(cell.answer)
                if matches == 0:
                    result.add_error(
                        f"Cell {cell.coordinate.key} has answer {cell.answer} but no matching connector"
                    )
                elif matches > 1:
                    result.add_error(
                        f"Cell {cell.coordinate.key} has answer {cell.answer} matching {matches} connectors"
                    )

        return result

    @staticmethod
    def validate_solution_path(puzzle: Puzzle) -> ValidationResult:
        """Validate the solution path is arithmetically consistent"""
        result = ValidationResult()
        path = puzzle.solution.path

        for current, nxt in zip(path, path[1:]):
            cell = puzzle.cell_at(current)
            if cell is None:
                # Out of bounds, already reported by validate_path
                continue

            connector = puzzle.connector_between(current, nxt)
            if connector is None:
                result.add_error(f"No connector between path cells {current.key} and {nxt.key}")
                continue

            if cell.answer != connector.value:
                result.add_error(
                    f"Cell {current.key} answer {cell.answer} doesn't match "
                    f"connector value {connector.value}"
                )

        return result

    @staticmethod
    def validate_expressions(grid: List[List[Cell]]) -> ValidationResult:
        """Validate every expression evaluates to its cell's answer"""
        result = ValidationResult()

        for row in grid:
            for cell in row:
                if cell.is_finish:
                    continue

                key = cell.coordinate.key
                if not cell.expression:
                    result.add_error(f"Cell {key} has empty expression")
                    continue

                value = evaluate_expression(cell.expression)
                if value is None:
                    result.add_error(f"Cannot evaluate expression '{cell.expression}' at {key}")
                    continue

                if value != cell.answer:
                    result.add_error(
                        f"Expression '{cell.expression}' = {value}, but cell answer is "
                        f"{cell.answer} at {key}"
                    )

        return result

    @staticmethod
    def check_connector_geometry(puzzle: Puzzle) -> ValidationResult:
        """Warn about connectors that break the grid layout"""
        result = ValidationResult()
        diagonal_blocks = Counter()

        for connector in puzzle.connectors:
            if not are_adjacent(connector.cell_a, connector.cell_b):
                result.add_warning(
                    f"Connector {connector.cell_a.key}-{connector.cell_b.key} joins non-adjacent cells"
                )
            elif connector.type == ConnectorType.DIAGONAL:
                diagonal_blocks[block_key(connector.cell_a, connector.cell_b)] += 1

        for key, count in sorted(diagonal_blocks.items()):
            if count > 1:
                result.add_warning(f"Block {key} has crossing diagonal connectors")

        return result

    @staticmethod
    def validate_puzzle(puzzle: Puzzle) -> ValidationResult:
        """Run every check; all of them run even after a failure"""
        result = ValidationResult()
        rows, cols = puzzle.rows, puzzle.cols
        graph = connector_multigraph(puzzle.connectors, rows, cols)

        result.extend(PuzzleValidator.validate_path(puzzle.solution.path, rows, cols))
        result.extend(PuzzleValidator.validate_connector_uniqueness(graph, rows, cols))
        result.extend(PuzzleValidator.validate_cell_answers(puzzle.grid, graph))
        result.extend(PuzzleValidator.validate_solution_path(puzzle))
        result.extend(PuzzleValidator.validate_expressions(puzzle.grid))
        result.extend(PuzzleValidator.check_connector_geometry(puzzle))

        return result

    @staticmethod
    def get_puzzle_statistics(puzzle: Puzzle) -> dict:
        """Get various statistics about the puzzle"""
        graph = connector_multigraph(puzzle.connectors, puzzle.rows, puzzle.cols)
        type_counts = Counter(c.type.value for c in puzzle.connectors)
        values = [c.value for c in puzzle.connectors]

        operations = Counter()
        for cell in puzzle.cells():
            parsed = parse_expression(cell.expression)
            if parsed is not None:
                operations[parsed[1].name.lower()] += 1

        path = puzzle.solution.path
        stats = {
            'rows': puzzle.rows,
            'cols': puzzle.cols,
            'num_cells': puzzle.rows * puzzle.cols,
            'num_connectors': len(puzzle.connectors),
            'horizontal_connectors': type_counts.get(ConnectorType.HORIZONTAL.value, 0),
            'vertical_connectors': type_counts.get(ConnectorType.VERTICAL.value, 0),
            'diagonal_connectors': type_counts.get(ConnectorType.DIAGONAL.value, 0),
            'path_length': len(path),
            'path_coverage': len(path) / (puzzle.rows * puzzle.cols) if puzzle.grid else 0,
            'diagonal_steps': sum(1 for a, b in zip(path, path[1:])
                                  if a.row != b.row and a.col != b.col),
            'min_value': min(values) if values else 0,
            'max_value': max(values) if values else 0,
            'max_degree': max((d for _, d in graph.degree()), default=0),
            'operations': dict(operations),
        }

        return stats
