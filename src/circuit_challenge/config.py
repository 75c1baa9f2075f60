from pathlib import Path

# Project root directory (the working directory by default)
PROJECT_ROOT = Path.cwd()

# Output directories, created by the writers when needed
DATA_DIR = PROJECT_ROOT / "data"
PUZZLES_DIR = DATA_DIR / "puzzles"

RESULTS_DIR = PROJECT_ROOT / "results"
RESULTS_BENCHMARKS_DIR = RESULTS_DIR / "benchmarks"

# Generation parameters
GENERATION_MAX_ATTEMPTS = 30
PATH_MAX_ATTEMPTS = 200
EXPRESSION_MAX_TRIES = 10

# Share of solution-path connectors reserved for division-friendly values
DIVISION_CONNECTOR_RATIO = 0.25

# Division expression limits
MAX_DIVISOR = 14
MAX_DIVIDEND = 1000

# Probability a division cell is forced to a division expression
DIVISION_PRIORITY = 0.8

# Search steps allowed when the random value pass runs out of values
VALUE_REPAIR_BUDGET = 2000

# Path length as a share of the grid area
MAX_PATH_RATIO = 0.85
MIN_PATH_FLOOR = 4

# Logging configuration
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
