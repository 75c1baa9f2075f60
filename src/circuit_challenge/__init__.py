"""
Circuit Challenge: arithmetic path-puzzle generation and validation.
"""

__version__ = "0.1.0"

from .core import Puzzle, DifficultySettings, PuzzleValidator, ValidationResult
from .generators import (
    generate_puzzle, GenerationOptions, GenerationResult,
    GenerationExhaustedError, by_level, by_name
)

__all__ = [
    'Puzzle', 'DifficultySettings', 'PuzzleValidator', 'ValidationResult',
    'generate_puzzle', 'GenerationOptions', 'GenerationResult',
    'GenerationExhaustedError', 'by_level', 'by_name'
]
