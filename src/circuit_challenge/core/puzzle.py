"""
Core data structures for Circuit Challenge puzzles.
"""

from dataclasses import dataclass, field, asdict, replace
from typing import List, Optional, Union
from enum import Enum
import json
from pathlib import Path
import uuid

import yaml

from .grid import Coordinate, ConnectorType, DiagonalDirection


class Operation(Enum):
    """Arithmetic operations used in cell expressions"""
    ADDITION = "+"
    SUBTRACTION = "−"  # unicode minus
    MULTIPLICATION = "×"
    DIVISION = "÷"

    @property
    def symbol(self) -> str:
        return self.value


class GameMode(Enum):
    """Game mode variants"""
    STANDARD = "standard"  # lives, feedback after each move
    HIDDEN = "hidden"      # no feedback until the end


@dataclass
class OperationWeights:
    """Relative weights for operation selection"""
    addition: int = 0
    subtraction: int = 0
    multiplication: int = 0
    division: int = 0

    @property
    def total(self) -> int:
        return self.addition + self.subtraction + self.multiplication + self.division

    def weight_for(self, operation: Operation) -> int:
        return {
            Operation.ADDITION: self.addition,
            Operation.SUBTRACTION: self.subtraction,
            Operation.MULTIPLICATION: self.multiplication,
            Operation.DIVISION: self.division,
        }[operation]


# Preset name -> level number
LEVEL_NUMBERS = {
    "Tiny Tot": 1,
    "Beginner": 2,
    "Easy": 3,
    "Getting There": 4,
    "Times Tables": 5,
    "Confident": 6,
    "Adventurous": 7,
    "Division Intro": 8,
    "Challenge": 9,
    "Expert": 10,
}


@dataclass
class DifficultySettings:
    """Parameters that drive puzzle generation"""
    name: str = "Custom"

    # Operations enabled
    addition_enabled: bool = True
    subtraction_enabled: bool = False
    multiplication_enabled: bool = False
    division_enabled: bool = False

    # Ranges
    add_sub_range: int = 10   # max operand for + and -
    mult_div_range: int = 0   # max factor / divisor for x and /

    # Connector values
    connector_min: int = 5
    connector_max: int = 10

    # Grid size
    grid_rows: int = 3
    grid_cols: int = 4

    # Path constraints, 0 means derive from grid area
    min_path_length: int = 0
    max_path_length: int = 0

    weights: OperationWeights = field(default_factory=lambda: OperationWeights(addition=100))

    hidden_mode: bool = False
    seconds_per_step: int = 10

    @property
    def level_number(self) -> int:
        """Preset level 1-10, or 0 for custom settings"""
        return LEVEL_NUMBERS.get(self.name, 0)

    @property
    def game_mode(self) -> GameMode:
        return GameMode.HIDDEN if self.hidden_mode else GameMode.STANDARD

    @property
    def enabled_operations(self) -> List[Operation]:
        flags = [
            (Operation.ADDITION, self.addition_enabled),
            (Operation.SUBTRACTION, self.subtraction_enabled),
            (Operation.MULTIPLICATION, self.multiplication_enabled),
            (Operation.DIVISION, self.division_enabled),
        ]
        return [op for op, enabled in flags if enabled]

    def is_enabled(self, operation: Operation) -> bool:
        return operation in self.enabled_operations

    def validate(self):
        """Raise ValueError if these settings cannot produce a puzzle"""
        if not self.enabled_operations:
            raise ValueError("At least one operation must be enabled")
        if self.grid_rows < 2 or self.grid_cols < 2:
            raise ValueError(f"Grid must be at least 2x2, got {self.grid_rows}x{self.grid_cols}")
        if self.connector_min < 1 or self.connector_max < self.connector_min:
            raise ValueError(
                f"Invalid connector range {self.connector_min}-{self.connector_max}"
            )
        if (self.min_path_length and self.max_path_length
                and self.min_path_length > self.max_path_length):
            raise ValueError(
                f"min_path_length ({self.min_path_length}) exceeds "
                f"max_path_length ({self.max_path_length})"
            )

    def copy(self, **changes) -> 'DifficultySettings':
        """Copy with optional field overrides"""
        changes.setdefault('weights', replace(self.weights))
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'DifficultySettings':
        data = dict(data)
        weights = data.pop('weights', None)
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown difficulty setting(s): {sorted(unknown)}")
        if weights is not None:
            data['weights'] = OperationWeights(**weights)
        return cls(**data)

    @classmethod
    def load_yaml(cls, filepath: Union[str, Path]) -> 'DifficultySettings':
        """Load custom settings from a YAML file"""
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Settings file not found: {filepath}")
        with open(filepath, 'r') as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {filepath} must contain a mapping")
        return cls.from_dict(data)

    def save_yaml(self, filepath: Union[str, Path]):
        with open(filepath, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)


@dataclass
class Connector:
    """A valued link between two adjacent cells"""
    type: ConnectorType
    cell_a: Coordinate
    cell_b: Coordinate
    value: int = 0
    direction: Optional[DiagonalDirection] = None

    def touches(self, cell: Coordinate) -> bool:
        return self.cell_a == cell or self.cell_b == cell

    def other_cell(self, cell: Coordinate) -> Coordinate:
        return self.cell_b if cell == self.cell_a else self.cell_a

    def connects(self, a: Coordinate, b: Coordinate) -> bool:
        """True if this connector joins a and b, in either order"""
        return (self.cell_a == a and self.cell_b == b) or (self.cell_a == b and self.cell_b == a)

    def to_dict(self) -> dict:
        return {
            'type': self.type.value,
            'cell_a': [self.cell_a.row, self.cell_a.col],
            'cell_b': [self.cell_b.row, self.cell_b.col],
            'value': self.value,
            'direction': self.direction.value if self.direction else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Connector':
        direction = data.get('direction')
        return cls(
            type=ConnectorType(data['type']),
            cell_a=Coordinate(*data['cell_a']),
            cell_b=Coordinate(*data['cell_b']),
            value=int(data['value']),
            direction=DiagonalDirection(direction) if direction else None,
        )

    def __repr__(self):
        return f"Connector({self.cell_a}-{self.cell_b}, {self.type.value}, value={self.value})"


@dataclass
class Cell:
    """A grid cell holding an expression and its answer"""
    row: int
    col: int
    expression: str = ""
    answer: Optional[int] = None
    is_start: bool = False
    is_finish: bool = False

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.row, self.col)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'Cell':
        return cls(**data)


@dataclass
class Solution:
    """The generated route from START to FINISH"""
    path: List[Coordinate] = field(default_factory=list)

    @property
    def steps(self) -> int:
        return max(0, len(self.path) - 1)


class Puzzle:
    """A complete Circuit Challenge puzzle"""

    def __init__(self, grid: List[List[Cell]], connectors: List[Connector],
                 solution: Solution, difficulty: int = 0,
                 puzzle_id: Optional[str] = None):
        """
        Initialize a puzzle.

        Args:
            grid: Cells indexed [row][col]
            connectors: All connectors of the grid
            solution: The solution path
            difficulty: Preset level number, 0 for custom settings
            puzzle_id: Identifier, generated if omitted
        """
        self.id = puzzle_id or str(uuid.uuid4())
        self.difficulty = difficulty
        self.grid = grid
        self.connectors = connectors
        self.solution = solution

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    def cell_at(self, coord: Coordinate) -> Optional[Cell]:
        """Cell at a coordinate, or None if out of bounds"""
        if not (0 <= coord.row < self.rows and 0 <= coord.col < self.cols):
            return None
        return self.grid[coord.row][coord.col]

    def connectors_for(self, cell: Coordinate) -> List[Connector]:
        """All connectors touching a cell"""
        return [c for c in self.connectors if c.touches(cell)]

    def connector_between(self, a: Coordinate, b: Coordinate) -> Optional[Connector]:
        """The connector joining two cells, if any"""
        for connector in self.connectors:
            if connector.connects(a, b):
                return connector
        return None

    def cells(self) -> List[Cell]:
        """All cells in row-major order"""
        return [cell for row in self.grid for cell in row]

    def to_dict(self) -> dict:
        """Convert puzzle to dictionary for serialization"""
        return {
            'id': self.id,
            'difficulty': self.difficulty,
            'rows': self.rows,
            'cols': self.cols,
            'grid': [[cell.to_dict() for cell in row] for row in self.grid],
            'connectors': [c.to_dict() for c in self.connectors],
            'solution': [[coord.row, coord.col] for coord in self.solution.path],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Puzzle':
        """Create puzzle from dictionary"""
        try:
            grid = [[Cell.from_dict(cell) for cell in row] for row in data['grid']]
            connectors = [Connector.from_dict(c) for c in data['connectors']]
            path = [Coordinate(int(r), int(c)) for r, c in data['solution']]
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed puzzle data: {e}")
        return cls(grid, connectors, Solution(path),
                   difficulty=data.get('difficulty', 0),
                   puzzle_id=data.get('id'))

    def save(self, filepath: Union[str, Path]):
        """Save puzzle to JSON file"""
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> 'Puzzle':
        """Load puzzle from JSON file"""
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)

    def __str__(self):
        """Plain-text grid of expressions (useful for debugging)"""
        labels: List[List[str]] = []
        for row in self.grid:
            line = []
            for cell in row:
                if cell.is_finish:
                    line.append("FINISH")
                elif cell.is_start:
                    line.append(f"S:{cell.expression}")
                else:
                    line.append(cell.expression or ".")
            labels.append(line)
        width = max((len(label) for line in labels for label in line), default=1)
        return '\n'.join(' | '.join(label.center(width) for label in line) for line in labels)

    def __repr__(self):
        return (f"Puzzle({self.rows}x{self.cols}, {len(self.connectors)} connectors, "
                f"path={len(self.solution.path)})")

