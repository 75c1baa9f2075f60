"""
Core data structures and utilities for Circuit Challenge puzzles.
"""

from .grid import (
    Coordinate, DiagonalDirection, ConnectorType, START,
    get_adjacent, are_adjacent, manhattan_distance, finish_of
)
from .puzzle import (
    Puzzle, Cell, Connector, Solution,
    Operation, OperationWeights, DifficultySettings, GameMode
)
from .expression import Expression, evaluate_expression, format_expression, parse_expression
from .validator import PuzzleValidator, ValidationResult
from .moves import MoveCheckResult, check_move, follow_answers
from .utils import (
    setup_logger, make_rng, timer,
    PuzzleConverter, save_puzzle_batch, load_puzzle_batch
)

__all__ = [
    # Grid primitives
    'Coordinate', 'DiagonalDirection', 'ConnectorType', 'START',
    'get_adjacent', 'are_adjacent', 'manhattan_distance', 'finish_of',

    # Data structures
    'Puzzle', 'Cell', 'Connector', 'Solution',
    'Operation', 'OperationWeights', 'DifficultySettings', 'GameMode',

    # Expressions
    'Expression', 'evaluate_expression', 'format_expression', 'parse_expression',

    # Validation
    'PuzzleValidator', 'ValidationResult',

    # Moves
    'MoveCheckResult', 'check_move', 'follow_answers',

    # Utilities
    'setup_logger', 'make_rng', 'timer',
    'PuzzleConverter', 'save_puzzle_batch', 'load_puzzle_batch'
]
