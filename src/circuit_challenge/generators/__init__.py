"""
Puzzle generators for Circuit Challenge.
"""

from .path_generator import PathGenerator, PathResult, is_interesting_path, count_direction_changes
from .connector_builder import (
    UnvaluedConnector, ValueAssignmentResult, ConnectorValueAssigner,
    build_diagonal_grid, build_connector_graph, assign_connector_values
)
from .cell_assigner import CellGrid, assign_cell_answers
from .expression_generator import ExpressionGenerator, generate_expression
from .puzzle_generator import (
    PuzzleGenerator, PuzzleGeneratorConfig,
    GenerationOptions, GenerationResult, GenerationFailure, GenerationExhaustedError,
    generate_puzzle, generate_batch
)
from .difficulty import (
    PRESETS, by_level, by_name, all_presets,
    calculate_min_path_length, calculate_max_path_length,
    StoryLevel, story_settings
)

__all__ = [
    # Main generator
    'PuzzleGenerator', 'PuzzleGeneratorConfig',
    'GenerationOptions', 'GenerationResult', 'GenerationFailure', 'GenerationExhaustedError',
    'generate_puzzle', 'generate_batch',

    # Pipeline stages
    'PathGenerator', 'PathResult', 'is_interesting_path', 'count_direction_changes',
    'UnvaluedConnector', 'ValueAssignmentResult', 'ConnectorValueAssigner',
    'build_diagonal_grid', 'build_connector_graph', 'assign_connector_values',
    'CellGrid', 'assign_cell_answers',
    'ExpressionGenerator', 'generate_expression',

    # Difficulty
    'PRESETS', 'by_level', 'by_name', 'all_presets',
    'calculate_min_path_length', 'calculate_max_path_length',
    'StoryLevel', 'story_settings'
]
