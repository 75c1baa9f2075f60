"""
Benchmark system for measuring puzzle generation across difficulty presets.
"""

import time
import json
import logging
import pandas as pd
from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass, asdict, field
from datetime import datetime
import multiprocessing as mp
from functools import partial
import traceback

import numpy as np
from tqdm import tqdm

from .. import config as project_config
from ..core.puzzle import Operation
from ..core.validator import PuzzleValidator
from ..core.utils import setup_logger
from ..generators.difficulty import by_level
from ..generators.puzzle_generator import PuzzleGenerator, PuzzleGeneratorConfig


@dataclass
class BenchmarkResult:
    """Result from generating a single puzzle"""
    level: int
    preset: str
    index: int
    seed: int
    success: bool
    attempts: int
    generation_time: float

    # Failure counts per pipeline stage
    path_failures: int = 0
    connector_failures: int = 0
    validation_failures: int = 0

    # Puzzle characteristics
    rows: int = 0
    cols: int = 0
    path_length: int = 0
    path_coverage: float = 0.0
    diagonal_steps: int = 0
    num_connectors: int = 0
    max_value: int = 0

    # Independent re-validation of the returned puzzle
    is_valid: bool = False
    error_message: str = ""

    timestamp: str = ""
    operations: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Flat dictionary, one column per operation count"""
        result = asdict(self)
        operations = result.pop('operations')
        for op in Operation:
            name = op.name.lower()
            result[f'op_{name}'] = operations.get(name, 0)
        return result


class BenchmarkConfig:
    """Configuration for generation benchmarks"""

    def __init__(self, **kwargs):
        # Test parameters
        self.levels: List[int] = kwargs.get('levels', list(range(1, 11)))
        self.puzzles_per_level: int = kwargs.get('puzzles_per_level', 10)
        self.max_attempts: int = kwargs.get('max_attempts', project_config.GENERATION_MAX_ATTEMPTS)
        self.seed: Optional[int] = kwargs.get('seed', None)

        # Execution parameters
        self.parallel: bool = kwargs.get('parallel', True)
        self.num_workers: int = kwargs.get('num_workers', max(1, mp.cpu_count() - 1))
        self.show_progress: bool = kwargs.get('show_progress', True)

        # Output parameters
        self.output_dir: Path = Path(kwargs.get('output_dir', project_config.RESULTS_BENCHMARKS_DIR))
        self.save_puzzles: bool = kwargs.get('save_puzzles', False)


class Benchmark:
    """Generate batches of puzzles per preset and record how generation went"""

    def __init__(self, config: BenchmarkConfig):
        self.config = config
        self.logger = setup_logger(self.__class__.__name__)

        # Results storage
        self.results: List[BenchmarkResult] = []

    def run(self) -> pd.DataFrame:
        """
        Run complete benchmark suite.

        Returns:
            DataFrame with one row per generated puzzle
        """
        self.logger.info("Starting benchmark suite")
        start_time = time.time()

        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        test_cases = self._prepare_test_cases()
        self.logger.info(f"Prepared {len(test_cases)} test cases")

        if self.config.parallel and self.config.num_workers > 1:
            self._run_parallel(test_cases)
        else:
            self._run_sequential(test_cases)

        results_df = pd.DataFrame([r.to_dict() for r in self.results])
        if not results_df.empty:
            results_df = results_df.sort_values(['level', 'index']).reset_index(drop=True)

        # Save results
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        results_file = self.config.output_dir / f"benchmark_results_{timestamp}.csv"
        results_df.to_csv(results_file, index=False)

        json_file = self.config.output_dir / f"benchmark_results_{timestamp}.json"
        with open(json_file, 'w') as f:
            json.dump({
                'config': {
                    'levels': self.config.levels,
                    'puzzles_per_level': self.config.puzzles_per_level,
                    'max_attempts': self.config.max_attempts,
                    'seed': self.config.seed
                },
                'summary': self.compute_summary(results_df)
            }, f, indent=2)

        total_time = time.time() - start_time
        self.logger.info(f"Benchmark completed in {total_time:.2f} seconds")
        self.logger.info(f"Results saved to {results_file}")

        return results_df

    def _prepare_test_cases(self) -> List[Tuple[int, int, int]]:
        """(level, index, seed) triples with an independent seed per puzzle"""
        total = len(self.config.levels) * self.config.puzzles_per_level
        seeds = np.random.SeedSequence(self.config.seed).generate_state(max(total, 1))

        pairs = [(level, index) for level in self.config.levels
                 for index in range(self.config.puzzles_per_level)]
        return [(level, index, int(seed)) for (level, index), seed in zip(pairs, seeds)]

    def _run_sequential(self, test_cases: List[Tuple[int, int, int]]):
        """Run benchmarks sequentially"""
        with tqdm(total=len(test_cases), desc="Generating puzzles",
                  disable=not self.config.show_progress) as pbar:
            for level, index, seed in test_cases:
                self.results.append(self._run_single_test(level, index, seed))
                pbar.update(1)

    def _run_parallel(self, test_cases: List[Tuple[int, int, int]]):
        """Run benchmarks in parallel"""
        self.logger.info(f"Running {len(test_cases)} tests with {self.config.num_workers} workers")

        with mp.Pool(processes=self.config.num_workers) as pool:
            worker_func = partial(run_single_test_wrapper, self.config)

            with tqdm(total=len(test_cases), desc="Generating puzzles",
                      disable=not self.config.show_progress) as pbar:
                for result in pool.imap_unordered(worker_func, test_cases):
                    self.results.append(result)
                    pbar.update(1)

    def _run_single_test(self, level: int, index: int, seed: int) -> BenchmarkResult:
        """Generate and re-validate a single puzzle"""
        settings = by_level(level)
        result = BenchmarkResult(
            level=level,
            preset=settings.name,
            index=index,
            seed=seed,
            success=False,
            attempts=0,
            generation_time=0.0,
            rows=settings.grid_rows,
            cols=settings.grid_cols,
            timestamp=datetime.now().isoformat()
        )

        try:
            generator = PuzzleGenerator(
                PuzzleGeneratorConfig(max_attempts=self.config.max_attempts),
                rng=seed
            )
            # Per-puzzle success lines would drown the progress bar
            generator.logger.setLevel(logging.WARNING)

            start = time.time()
            generation = generator.generate(settings)
            result.generation_time = time.time() - start
            result.attempts = generation.attempts

            if not generation.success:
                failure = generation.error
                result.path_failures = failure.path_failures
                result.connector_failures = failure.connector_failures
                result.validation_failures = failure.validation_failures
                result.error_message = failure.message
                return result

            puzzle = generation.puzzle
            result.success = True

            validation = PuzzleValidator.validate_puzzle(puzzle)
            result.is_valid = validation.is_valid
            if not validation.is_valid:
                result.error_message = "; ".join(validation.errors)

            stats = PuzzleValidator.get_puzzle_statistics(puzzle)
            result.path_length = stats['path_length']
            result.path_coverage = stats['path_coverage']
            result.diagonal_steps = stats['diagonal_steps']
            result.num_connectors = stats['num_connectors']
            result.max_value = stats['max_value']
            result.operations = stats['operations']

            if self.config.save_puzzles:
                puzzle_dir = self.config.output_dir / "puzzles" / f"level_{level:02d}"
                puzzle_dir.mkdir(parents=True, exist_ok=True)
                puzzle.save(puzzle_dir / f"puzzle_{index:04d}.json")

        except Exception as e:
            result.error_message = f"Exception: {str(e)}"
            self.logger.error(f"Error generating level {level} puzzle {index}: {str(e)}")
            self.logger.debug(traceback.format_exc())

        return result

    def compute_summary(self, results_df: pd.DataFrame) -> Dict[str, Any]:
        """Compute summary statistics"""
        summary: Dict[str, Any] = {'total_tests': int(len(results_df))}
        if results_df.empty:
            return summary

        summary['successful_tests'] = int(results_df['success'].sum())
        summary['success_rate'] = float(results_df['success'].mean())
        summary['valid_rate'] = float(results_df['is_valid'].mean())

        summary['by_level'] = {}
        for level in self.config.levels:
            level_data = results_df[results_df['level'] == level]
            if len(level_data) == 0:
                continue

            summary['by_level'][int(level)] = {
                'preset': str(level_data['preset'].iloc[0]),
                'success_rate': float(level_data['success'].mean()),
                'valid_rate': float(level_data['is_valid'].mean()),
                'avg_attempts': float(level_data['attempts'].mean()),
                'avg_time': float(level_data['generation_time'].mean()),
                'path_failures': int(level_data['path_failures'].sum()),
                'connector_failures': int(level_data['connector_failures'].sum()),
                'validation_failures': int(level_data['validation_failures'].sum()),
                'total_tests': int(len(level_data))
            }

        return summary


def run_single_test_wrapper(config: BenchmarkConfig,
                            test_case: Tuple[int, int, int]) -> BenchmarkResult:
    """Wrapper function for parallel execution"""
    level, index, seed = test_case

    benchmark = Benchmark(config)
    return benchmark._run_single_test(level, index, seed)


class BenchmarkAnalyzer:
    """Analyze benchmark results"""

    def __init__(self, results: pd.DataFrame):
        self.results_df = results
        self.logger = setup_logger(self.__class__.__name__)

    @classmethod
    def from_csv(cls, results_file: Path) -> 'BenchmarkAnalyzer':
        """Load benchmark results from file"""
        return cls(pd.read_csv(results_file))

    def get_summary_statistics(self) -> pd.DataFrame:
        """Get summary statistics by preset level"""
        summary = self.results_df.groupby(['level', 'preset']).agg({
            'success': ['count', 'sum', 'mean'],
            'is_valid': ['mean'],
            'attempts': ['mean', 'max'],
            'generation_time': ['mean', 'median', 'max'],
            'path_coverage': ['mean']
        }).round(3)

        # Flatten column names
        summary.columns = ['_'.join(col).strip() for col in summary.columns.values]

        return summary

    def get_failure_breakdown(self) -> pd.DataFrame:
        """Total failures per pipeline stage for each level"""
        return self.results_df.groupby('level')[
            ['path_failures', 'connector_failures', 'validation_failures']
        ].sum()

    def get_operation_mix(self) -> pd.DataFrame:
        """Share of each operation among generated expressions per level"""
        columns = [c for c in self.results_df.columns if c.startswith('op_')]
        totals = self.results_df.groupby('level')[columns].sum()
        return totals.div(totals.sum(axis=1).replace(0, 1), axis=0).round(3)
