"""Benchmark modules registered with the suite."""

from .mapper_comparison import BenchmarkState, ItemCase, bench_registry

__all__ = ["BenchmarkState", "ItemCase", "bench_registry"]
