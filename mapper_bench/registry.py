"""Registration of benchmark functions so the runner can discover them."""

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class BenchmarkInfo:
    """A registered benchmark and what it measures."""

    name: str
    function: Callable
    generation: str
    operation: str
    group: str


class BenchmarkRegistry:
    """Collects benchmark functions declared in one module."""

    def __init__(self, group: str):
        self.group = group
        self.benchmarks: dict[str, BenchmarkInfo] = {}

    def benchmark(self, name: Optional[str] = None, *, generation: str, operation: str) -> Callable:
        def decorator(func: Callable) -> Callable:
            bench_name = name or func.__name__
            if bench_name in self.benchmarks:
                raise ValueError(f"Benchmark {bench_name!r} is already registered in {self.group}")
            self.benchmarks[bench_name] = BenchmarkInfo(bench_name, func, generation, operation, self.group)
            return func

        return decorator


class BenchmarkSuite:
    """Top-level collection of registries, in the order they were included."""

    def __init__(self, title: str, description: str = "", version: str = ""):
        self.title = title
        self.description = description
        self.version = version
        self._registries: list[BenchmarkRegistry] = []

    def include_registry(self, registry: BenchmarkRegistry) -> None:
        self._registries.append(registry)

    @property
    def benchmarks(self) -> dict[str, BenchmarkInfo]:
        found: dict[str, BenchmarkInfo] = {}
        for registry in self._registries:
            for name, info in registry.benchmarks.items():
                if name in found:
                    raise ValueError(f"Benchmark {name!r} is registered by both {found[name].group} and {info.group}")
                found[name] = info
        return found

    def discover(self, name_filter: Optional[str] = None) -> dict[str, BenchmarkInfo]:
        """Registered benchmarks, optionally only those whose name starts with ``name_filter``."""
        return {
            name: info
            for name, info in self.benchmarks.items()
            if not name_filter or name.startswith(name_filter)
        }
