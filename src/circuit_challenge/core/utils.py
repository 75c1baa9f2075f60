"""
Utility functions for Circuit Challenge generation.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union
import time
from functools import wraps

import numpy as np

from .. import config
from .grid import ConnectorType, DiagonalDirection
from .puzzle import Puzzle


RandomSource = Union[np.random.Generator, int, None]


def setup_logger(name: str, log_file: Optional[Path] = None, level: str = config.LOG_LEVEL) -> logging.Logger:
    """
    Set up a logger with console and optional file output.

    Args:
        name: Logger name
        log_file: Optional log file path
        level: Logging level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level.upper()))

    formatter = logging.Formatter(config.LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(getattr(logging, level.upper()))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def make_rng(source: RandomSource = None) -> np.random.Generator:
    """
    Normalise a seed or generator into a numpy Generator.

    Passing an existing Generator returns it unchanged so that callers
    share one stream; an int seeds a fresh one; None draws OS entropy.
    """
    if isinstance(source, np.random.Generator):
        return source
    return np.random.default_rng(source)


def random_choice(rng: np.random.Generator, items: list):
    """Uniform pick from a non-empty list, keeping the element's own type"""
    return items[int(rng.integers(len(items)))]


def timer(func):
    """Decorator to time function execution"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        execution_time = time.time() - start_time

        if args and hasattr(args[0], 'logger'):
            args[0].logger.debug(f"{func.__name__} took {execution_time:.3f} seconds")
        else:
            logging.getLogger(func.__module__).debug(
                f"{func.__name__} took {execution_time:.3f} seconds")

        return result
    return wrapper


class PuzzleConverter:
    """Convert puzzles to plain-text layouts"""

    @staticmethod
    def to_string(puzzle: Puzzle, show_connectors: bool = True) -> str:
        """
        Convert puzzle to a text grid.

        Cells sit on even rows/columns; connector values sit between them.
        Diagonal values are prefixed with '\\' (DR) or '/' (DL).
        """
        height = puzzle.rows * 2 - 1
        width = puzzle.cols * 2 - 1
        grid = [['' for _ in range(width)] for _ in range(height)]

        for cell in puzzle.cells():
            if cell.is_finish:
                label = 'FINISH'
            else:
                label = cell.expression or '?'
            grid[cell.row * 2][cell.col * 2] = label

        if show_connectors:
            for connector in puzzle.connectors:
                row = connector.cell_a.row + connector.cell_b.row
                col = connector.cell_a.col + connector.cell_b.col
                text = str(connector.value)
                if connector.type == ConnectorType.DIAGONAL:
                    prefix = '\\' if connector.direction == DiagonalDirection.DR else '/'
                    text = prefix + text
                grid[row][col] = text

        col_widths = [max(len(grid[r][c]) for r in range(height)) for c in range(width)]
        lines = []
        for r in range(height):
            line = ' '.join(grid[r][c].center(col_widths[c]) for c in range(width))
            lines.append(line.rstrip())
        return '\n'.join(lines)

    @staticmethod
    def solution_to_string(puzzle: Puzzle) -> str:
        """Render the solution path as step numbers on the grid"""
        order = {coord: i for i, coord in enumerate(puzzle.solution.path)}
        lines = []
        for row in puzzle.grid:
            lines.append(' '.join(
                f"{order[cell.coordinate]:>3}" if cell.coordinate in order else '  .'
                for cell in row
            ))
        return '\n'.join(lines)


def save_puzzle_batch(puzzles: List[Puzzle], directory: Path, prefix: str = "puzzle") -> List[Path]:
    """Save multiple puzzles to a directory"""
    directory.mkdir(parents=True, exist_ok=True)

    paths = []
    for i, puzzle in enumerate(puzzles):
        filename = directory / f"{prefix}_{i:04d}.json"
        puzzle.save(filename)
        paths.append(filename)
    return paths


def load_puzzle_batch(directory: Path, pattern: str = "*.json") -> List[Puzzle]:
    """Load multiple puzzles from a directory, skipping unreadable files"""
    logger = logging.getLogger(__name__)
    puzzles = []

    for filepath in sorted(directory.glob(pattern)):
        try:
            puzzles.append(Puzzle.load(filepath))
        except (ValueError, OSError) as e:
            logger.warning(f"Error loading {filepath}: {e}")

    return puzzles
