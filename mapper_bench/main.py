"""Benchmark suite for the mapper comparison."""

from typing import Optional

from mapper_bench import __version__
from mapper_bench.benchmarks import BenchmarkState, ItemCase, bench_registry
from mapper_bench.registry import BenchmarkSuite

suite = BenchmarkSuite(
    title="Mapper Benchmark",
    description="Throughput of old- and new-generation DynamoDB mappers over stub clients",
    version=__version__,
)

# Include registries
suite.include_registry(bench_registry)


def benchmark_id(bench_name: str, case: ItemCase) -> str:
    """Test id of one (benchmark, case) pair, as used in pytest node ids."""
    return f"{bench_name}-{case.name}"


def benchmark_cases(name_filter: Optional[str] = None) -> list[tuple[str, ItemCase]]:
    """Every (benchmark name, item case) pair to measure."""
    return [(name, case) for case in ItemCase for name in suite.discover(name_filter)]


def smoke_run() -> int:
    """Run every benchmark once per item case; return the number of failures."""
    failures = 0
    for case in ItemCase:
        state = BenchmarkState.create(case)
        for name, info in suite.benchmarks.items():
            try:
                result = info.function(state)
            except Exception as e:
                failures += 1
                print(f"❌ {name}[{case.label}]: {e!r}")
                continue
            summary = type(result).__name__ if result is not None else "None"
            print(f"✅ {name}[{case.label}] -> {summary}")
    return failures


if __name__ == "__main__":
    raise SystemExit(1 if smoke_run() else 0)
