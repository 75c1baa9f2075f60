"""
Puzzle generator for Circuit Challenge.
"""

from dataclasses import dataclass
from typing import List, Optional

from .. import config
from ..core.puzzle import Puzzle, Solution, DifficultySettings
from ..core.validator import PuzzleValidator
from ..core.utils import setup_logger, make_rng, timer, RandomSource
from .path_generator import PathGenerator
from .connector_builder import build_diagonal_grid, build_connector_graph, ConnectorValueAssigner
from .cell_assigner import assign_cell_answers
from .expression_generator import ExpressionGenerator
from .difficulty import with_path_lengths


@dataclass
class GenerationOptions:
    """Options for a single generate_puzzle call"""
    max_attempts: int = config.GENERATION_MAX_ATTEMPTS
    validate: bool = True


@dataclass
class GenerationFailure:
    """Why generation gave up, with failure counts per stage"""
    message: str
    path_failures: int = 0
    connector_failures: int = 0
    validation_failures: int = 0

    @property
    def total_failures(self) -> int:
        return self.path_failures + self.connector_failures + self.validation_failures

    def __str__(self):
        return (f"{self.message} (path: {self.path_failures}, "
                f"connectors: {self.connector_failures}, "
                f"validation: {self.validation_failures})")


class GenerationExhaustedError(Exception):
    """Raised by GenerationResult.unwrap() when every attempt failed"""

    def __init__(self, failure: GenerationFailure):
        super().__init__(str(failure))
        self.failure = failure


@dataclass
class GenerationResult:
    """Result of puzzle generation"""
    success: bool
    puzzle: Optional[Puzzle] = None
    error: Optional[GenerationFailure] = None
    attempts: int = 0

    def unwrap(self) -> Puzzle:
        """Return the puzzle or raise GenerationExhaustedError"""
        if not self.success:
            raise GenerationExhaustedError(self.error)
        return self.puzzle

    def __repr__(self):
        status = "Success" if self.success else "Failed"
        return f"GenerationResult({status}, attempts={self.attempts})"


class PuzzleGeneratorConfig:
    """Configuration for puzzle generator"""

    def __init__(self, **kwargs):
        self.max_attempts: int = kwargs.get('max_attempts', config.GENERATION_MAX_ATTEMPTS)
        self.path_attempts: int = kwargs.get('path_attempts', config.PATH_MAX_ATTEMPTS)
        self.validate: bool = kwargs.get('validate', True)
        self.division_ratio: float = kwargs.get('division_ratio', config.DIVISION_CONNECTOR_RATIO)
        self.random_seed: Optional[int] = kwargs.get('random_seed', None)


class PuzzleGenerator:
    """Generate Circuit Challenge puzzles by retrying the full pipeline"""

    def __init__(self, config: Optional[PuzzleGeneratorConfig] = None,
                 rng: RandomSource = None):
        self.config = config or PuzzleGeneratorConfig()
        self.logger = setup_logger(self.__class__.__name__)

        # One stream shared by every stage, so a seed reproduces a puzzle
        self.rng = make_rng(rng if rng is not None else self.config.random_seed)
        self.path_generator = PathGenerator(self.rng)
        self.value_assigner = ConnectorValueAssigner(self.rng, self.config.division_ratio)
        self.expression_generator = ExpressionGenerator(self.rng)

    @timer
    def generate(self, settings: DifficultySettings) -> GenerationResult:
        """
        Generate a puzzle for the given settings.

        Args:
            settings: Difficulty settings; path lengths of 0 are derived
                from the grid size

        Returns:
            GenerationResult holding either a validated puzzle or a
            GenerationFailure with per-stage failure counts

        Raises:
            ValueError: if the settings cannot produce a puzzle at all
        """
        settings.validate()
        settings = with_path_lengths(settings)

        self.logger.debug(
            f"Generating {settings.grid_rows}x{settings.grid_cols} '{settings.name}' puzzle "
            f"(path {settings.min_path_length}-{settings.max_path_length})"
        )

        path_failures = connector_failures = validation_failures = 0

        for attempt in range(1, self.config.max_attempts + 1):
            path_result = self.path_generator.generate_path(
                settings.grid_rows, settings.grid_cols,
                settings.min_path_length, settings.max_path_length,
                max_attempts=self.config.path_attempts
            )
            if not path_result.success:
                path_failures += 1
                self.logger.debug(f"Attempt {attempt}: {path_result.error}")
                continue

            diagonal_grid = build_diagonal_grid(
                settings.grid_rows, settings.grid_cols,
                path_result.diagonal_commitments, self.rng
            )
            unvalued = build_connector_graph(settings.grid_rows, settings.grid_cols, diagonal_grid)

            values = self.value_assigner.assign(
                unvalued, settings.connector_min, settings.connector_max,
                division_enabled=settings.division_enabled,
                solution_path=path_result.path,
                mult_div_range=settings.mult_div_range,
            )
            if not values.success:
                connector_failures += 1
                self.logger.debug(f"Attempt {attempt}: {values.error}")
                continue

            cell_grid = assign_cell_answers(
                settings.grid_rows, settings.grid_cols, path_result.path,
                values.connectors, values.division_connector_indices, self.rng
            )
            self.expression_generator.apply_expressions(
                cell_grid.cells, settings, cell_grid.division_cells
            )

            puzzle = Puzzle(
                cell_grid.cells, values.connectors, Solution(path_result.path),
                difficulty=settings.level_number
            )

            if self.config.validate:
                validation = PuzzleValidator.validate_puzzle(puzzle)
                if not validation:
                    validation_failures += 1
                    self.logger.warning(f"Generated invalid puzzle: {validation.errors}")
                    continue

            self.logger.info(f"Successfully generated puzzle on attempt {attempt}")
            return GenerationResult(True, puzzle=puzzle, attempts=attempt)

        failure = GenerationFailure(
            f"Failed to generate puzzle after {self.config.max_attempts} attempts",
            path_failures, connector_failures, validation_failures
        )
        self.logger.error(str(failure))
        return GenerationResult(False, error=failure, attempts=self.config.max_attempts)

    def generate_batch(self, settings: DifficultySettings, count: int) -> List[GenerationResult]:
        """Generate several independent puzzles from the shared stream"""
        results = []
        for i in range(count):
            result = self.generate(settings)
            if not result.success:
                self.logger.warning(f"Puzzle {i + 1}/{count} failed: {result.error}")
            results.append(result)
        return results


def generate_puzzle(settings: DifficultySettings,
                    options: Optional[GenerationOptions] = None,
                    rng: RandomSource = None) -> GenerationResult:
    """
    Generate one puzzle.

    Equal seeds (or generators in equal states) produce equal puzzles.
    """
    options = options or GenerationOptions()
    generator = PuzzleGenerator(
        PuzzleGeneratorConfig(max_attempts=options.max_attempts, validate=options.validate),
        rng=rng
    )
    return generator.generate(settings)


def generate_batch(settings: DifficultySettings, count: int,
                   options: Optional[GenerationOptions] = None,
                   rng: RandomSource = None) -> List[Puzzle]:
    """Generate up to count puzzles, dropping any that exhausted their attempts"""
    options = options or GenerationOptions()
    generator = PuzzleGenerator(
        PuzzleGeneratorConfig(max_attempts=options.max_attempts, validate=options.validate),
        rng=rng
    )
    return [r.puzzle for r in generator.generate_batch(settings, count) if r.success]
