"""
Command-line interface for Circuit Challenge.

Usage:
    circuit-challenge generate --level 5 --count 10 --seed 42
    circuit-challenge generate --story 3-C --show
    circuit-challenge generate --settings-file custom.yaml
    circuit-challenge validate data/puzzles/*.json
    circuit-challenge presets
    circuit-challenge benchmark --levels 1 5 10 --puzzles-per-level 20
"""

import sys
import json
from pathlib import Path
from datetime import datetime

import click

from . import config
from .core.puzzle import Puzzle, DifficultySettings
from .core.validator import PuzzleValidator
from .core.utils import PuzzleConverter, save_puzzle_batch
from .generators.difficulty import by_level, by_name, all_presets, StoryLevel, story_settings
from .generators.puzzle_generator import PuzzleGenerator, PuzzleGeneratorConfig
from .analysis.benchmark import Benchmark, BenchmarkConfig, BenchmarkAnalyzer


def _resolve_settings(level, name, story, settings_file) -> DifficultySettings:
    """Pick settings from exactly one of the selection options"""
    chosen = [opt for opt in (level, name, story, settings_file) if opt is not None]
    if len(chosen) > 1:
        raise click.UsageError("Use only one of --level, --name, --story or --settings-file")

    if name is not None:
        settings = by_name(name)
        if settings is None:
            raise click.BadParameter(f"Unknown preset '{name}'", param_hint='--name')
        return settings
    if story is not None:
        try:
            return story_settings(StoryLevel.parse(story))
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint='--story')
    if settings_file is not None:
        try:
            return DifficultySettings.load_yaml(settings_file)
        except (ValueError, TypeError) as e:
            raise click.BadParameter(str(e), param_hint='--settings-file')
    return by_level(level if level is not None else 1)


def _slug(name: str) -> str:
    return ''.join(ch if ch.isalnum() else '_' for ch in name.lower()).strip('_')


@click.group()
@click.version_option(package_name='circuit-challenge')
def cli():
    """Generate and validate Circuit Challenge puzzles."""


@cli.command()
@click.option('--level', '-l', type=int, default=None,
              help='Preset level 1-10')
@click.option('--name', type=str, default=None,
              help='Preset name, e.g. "Times Tables"')
@click.option('--story', type=str, default=None,
              help='Story level, e.g. 3-C')
@click.option('--settings-file', type=click.Path(exists=True, dir_okay=False), default=None,
              help='YAML file with custom difficulty settings')
@click.option('--count', '-n', type=int, default=1,
              help='Number of puzzles to generate')
@click.option('--seed', type=int, default=None,
              help='Random seed for reproducibility')
@click.option('--max-attempts', type=int, default=config.GENERATION_MAX_ATTEMPTS,
              help='Generation attempts per puzzle')
@click.option('--output-dir', '-o', type=click.Path(), default=str(config.PUZZLES_DIR),
              help='Output directory for puzzles')
@click.option('--show', is_flag=True,
              help='Print the first puzzle and its solution')
def generate(level, name, story, settings_file, count, seed, max_attempts, output_dir, show):
    """Generate puzzles and save them as JSON."""
    settings = _resolve_settings(level, name, story, settings_file)
    try:
        settings.validate()
    except ValueError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    click.echo(f"Generating {count} '{settings.name}' puzzle(s) "
               f"on a {settings.grid_rows}x{settings.grid_cols} grid")

    generator = PuzzleGenerator(PuzzleGeneratorConfig(max_attempts=max_attempts), rng=seed)

    puzzles = []
    failures = []
    with click.progressbar(length=count, label='Generating puzzles') as bar:
        for _ in range(count):
            result = generator.generate(settings)
            if result.success:
                puzzles.append(result.puzzle)
            else:
                failures.append(result.error)
            bar.update(1)

    click.echo(f"Successfully generated {len(puzzles)}/{count} puzzles")
    for failure in failures:
        click.echo(f"  failed: {failure}")

    if not puzzles:
        sys.exit(1)

    output_path = Path(output_dir)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    paths = save_puzzle_batch(puzzles, output_path, prefix=f"{_slug(settings.name)}_{timestamp}")

    summary = {
        'timestamp': timestamp,
        'settings': settings.to_dict(),
        'requested': count,
        'generated': len(puzzles),
        'seed': seed,
        'files': [p.name for p in paths],
    }
    summary_path = output_path / f"generation_summary_{timestamp}.json"
    with open(summary_path, 'w', encoding='utf-8') as f:
        json.dump(summary, f, indent=2, ensure_ascii=False)

    click.echo(f"Puzzles saved to: {output_path}")

    if show:
        sample = puzzles[0]
        click.echo(f"\nPuzzle {sample.id}:")
        click.echo(PuzzleConverter.to_string(sample))
        click.echo("\nSolution:")
        click.echo(PuzzleConverter.solution_to_string(sample))

        stats = PuzzleValidator.get_puzzle_statistics(sample)
        click.echo("\nPuzzle statistics:")
        for key, value in stats.items():
            click.echo(f"  {key}: {value}")


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--warnings/--no-warnings', default=True,
              help='Also print warnings')
def validate(files, warnings):
    """Re-validate saved puzzle files."""
    failed = 0

    for filepath in files:
        try:
            puzzle = Puzzle.load(filepath)
        except ValueError as e:
            click.echo(f"{filepath}: UNREADABLE ({e})")
            failed += 1
            continue

        result = PuzzleValidator.validate_puzzle(puzzle)
        status = "OK" if result.is_valid else "INVALID"
        click.echo(f"{filepath}: {status}")
        for error in result.errors:
            click.echo(f"  error: {error}")
        if warnings:
            for warning in result.warnings:
                click.echo(f"  warning: {warning}")
        if not result.is_valid:
            failed += 1

    click.echo(f"\n{len(files) - failed}/{len(files)} puzzles valid")
    if failed:
        sys.exit(1)


@cli.command()
def presets():
    """List the difficulty presets."""
    header = f"{'#':>2}  {'Name':<15} {'Ops':<8} {'Grid':<6} {'Values':<8} {'Path':<7} {'Sec':>3}"
    click.echo(header)
    click.echo('-' * len(header))

    for i, settings in enumerate(all_presets(), 1):
        ops = ''.join(op.symbol for op in settings.enabled_operations)
        grid = f"{settings.grid_rows}x{settings.grid_cols}"
        values = f"{settings.connector_min}-{settings.connector_max}"
        path = f"{settings.min_path_length}-{settings.max_path_length}"
        click.echo(f"{i:>2}  {settings.name:<15} {ops:<8} {grid:<6} {values:<8} "
                   f"{path:<7} {settings.seconds_per_step:>3}")


@cli.command()
@click.option('--levels', '-l', type=int, multiple=True,
              help='Preset levels to benchmark (default: all)')
@click.option('--puzzles-per-level', '-n', type=int, default=10,
              help='Number of puzzles per level')
@click.option('--seed', type=int, default=None,
              help='Random seed for reproducibility')
@click.option('--parallel/--sequential', default=True,
              help='Run benchmarks in parallel')
@click.option('--workers', '-w', type=int, default=None,
              help='Number of parallel workers')
@click.option('--save-puzzles', is_flag=True,
              help='Keep every generated puzzle')
@click.option('--output-dir', '-o', type=click.Path(), default=str(config.RESULTS_BENCHMARKS_DIR),
              help='Output directory for results')
def benchmark(levels, puzzles_per_level, seed, parallel, workers, save_puzzles, output_dir):
    """Measure generation success and speed per preset."""
    kwargs = dict(
        levels=list(levels) or list(range(1, 11)),
        puzzles_per_level=puzzles_per_level,
        seed=seed,
        parallel=parallel,
        save_puzzles=save_puzzles,
        output_dir=output_dir,
    )
    if workers is not None:
        kwargs['num_workers'] = workers

    results = Benchmark(BenchmarkConfig(**kwargs)).run()
    if results.empty:
        click.echo("No results")
        sys.exit(1)

    analyzer = BenchmarkAnalyzer(results)
    click.echo("\nSummary by level:")
    click.echo(analyzer.get_summary_statistics().to_string())
    click.echo("\nFailures by stage:")
    click.echo(analyzer.get_failure_breakdown().to_string())


def main():
    cli()


if __name__ == '__main__':
    main()
