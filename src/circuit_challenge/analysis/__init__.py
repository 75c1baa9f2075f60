"""
Analysis and benchmarking tools for Circuit Challenge generation.
"""

from .benchmark import (
    Benchmark, BenchmarkConfig, BenchmarkResult,
    BenchmarkAnalyzer
)

__all__ = [
    'Benchmark', 'BenchmarkConfig', 'BenchmarkResult',
    'BenchmarkAnalyzer'
]
