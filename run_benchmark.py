#!/usr/bin/env python3
"""
Mapper Benchmark Runner - Runs every benchmark in fresh pytest processes (forks).

Each (benchmark, item case, fork) combination gets its own child process so
state left behind by one measurement never leaks into the next.
pytest-benchmark does the timing; this script handles forking, CPU/memory
monitoring and the summary.
"""

import argparse
import atexit
import json
import signal
import subprocess
import sys
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from mapper_bench.benchmarks import BenchmarkState, ItemCase
from mapper_bench.main import benchmark_id, suite
from mapper_bench.settings import BENCHMARK_MODULE, BENCHMARK_TEST_NAME, RunSettings

PROJECT_ROOT = Path(__file__).resolve().parent

# Global process tracking for cleanup
active_processes = []
cleanup_done = False


def cleanup_all_processes():
    """Terminate every fork process that is still running."""
    global cleanup_done

    if cleanup_done:
        return

    cleanup_done = True
    if not active_processes:
        return
    print("\n🧹 Cleaning up processes...")

    for proc in active_processes:
        if proc and proc.poll() is None:
            try:
                print(f"  🛑 Terminating process {proc.pid}")
                proc.terminate()
                proc.wait(timeout=3)
            except subprocess.TimeoutExpired:
                try:
                    print(f"  💀 Force killing process {proc.pid}")
                    proc.kill()
                except ProcessLookupError:
                    pass  # Process already dead
            except ProcessLookupError:
                pass

    active_processes.clear()
    print("  ✅ Cleanup complete")


def signal_handler(signum, frame):
    """Handle interrupt signals gracefully."""
    print(f"\n🛑 Received signal {signum}, cleaning up...")
    cleanup_all_processes()
    sys.exit(0)


def register_cleanup():
    """Register cleanup handlers."""
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
    atexit.register(cleanup_all_processes)


def discover_benchmarks(name_filter: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """Discover registered benchmarks, optionally filtered by name prefix."""
    return {
        name: {
            "function": info.function,
            "generation": info.generation,
            "operation": info.operation,
            "group": info.group,
        }
        for name, info in suite.discover(name_filter).items()
    }


def select_cases(names: Optional[List[str]] = None) -> List[ItemCase]:
    """Item cases to run; all of them when no names are given."""
    if not names:
        return list(ItemCase)
    return [ItemCase.from_name(name) for name in names]


def smoke_test(func, case: ItemCase) -> Any:
    """Run one benchmark once in-process; raises if the integration is broken."""
    return func(BenchmarkState.create(case))


def benchmark_node_id(bench_name: str, case: ItemCase) -> str:
    return f"{BENCHMARK_MODULE}::{BENCHMARK_TEST_NAME}[{benchmark_id(bench_name, case)}]"


def build_pytest_command(bench_name: str, case: ItemCase, json_path: Path, settings: RunSettings) -> List[str]:
    """Command line for one fork of one benchmark."""
    return [
        sys.executable, "-m", "pytest",
        benchmark_node_id(bench_name, case),
        "--benchmark-only",
        f"--benchmark-json={json_path}",
        "--benchmark-warmup=on",
        f"--benchmark-warmup-iterations={settings.warmup_iterations}",
        f"--benchmark-min-rounds={settings.min_rounds}",
        f"--benchmark-max-time={settings.max_time}",
        "-p", "no:cacheprovider",
        "-q",
    ]


def start_fork(command: List[str]) -> subprocess.Popen:
    """Start a fresh pytest process for one measurement."""
    proc = subprocess.Popen(command, cwd=PROJECT_ROOT, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    active_processes.append(proc)
    return proc


def stop_fork(proc: subprocess.Popen) -> None:
    """Stop a fork process gracefully, then forcefully if needed."""
    if proc is None:
        return

    if proc in active_processes:
        active_processes.remove(proc)

    if proc.poll() is not None:
        return
    try:
        proc.terminate()
        proc.wait(timeout=5)
    except subprocess.TimeoutExpired:
        try:
            proc.kill()
            proc.wait(timeout=2)
        except Exception as e:
            print(f"⚠️  Error killing fork: {e}")
    except ProcessLookupError:
        pass  # Process already dead


def monitor_process(pid: int, output_file: Path, interval: float = 0.5) -> None:
    """Sample CPU and RSS of a process with psutil until it exits."""
    samples = []
    try:
        proc = psutil.Process(pid)
        proc.cpu_percent(interval=None)  # prime the counter
        while proc.is_running() and proc.status() != psutil.STATUS_ZOMBIE:
            time.sleep(interval)
            with proc.oneshot():
                samples.append({
                    "timestamp": time.time(),
                    "cpu_percent": proc.cpu_percent(interval=None),
                    "rss_mb": proc.memory_info().rss / (1024 * 1024),
                })
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        pass  # Process finished between samples

    with open(output_file, "w") as f:
        json.dump(samples, f, indent=2)


def analyze_cpu_data(cpu_data: List[Dict]) -> Dict[str, float]:
    """Analyze CPU monitoring data."""
    if not cpu_data:
        return {
            "avg_cpu": 0.0,
            "max_cpu": 0.0,
            "avg_memory_mb": 0.0,
            "max_memory_mb": 0.0,
        }

    cpu_values = [s["cpu_percent"] for s in cpu_data]
    memory_values = [s["rss_mb"] for s in cpu_data]

    return {
        "avg_cpu": sum(cpu_values) / len(cpu_values),
        "max_cpu": max(cpu_values),
        "avg_memory_mb": sum(memory_values) / len(memory_values),
        "max_memory_mb": max(memory_values),
    }


def load_fork_report(json_path: Path) -> Dict[str, float]:
    """Read the stats of the single benchmark in a pytest-benchmark JSON report."""
    with open(json_path) as f:
        report = json.load(f)

    benchmarks = report.get("benchmarks", [])
    if len(benchmarks) != 1:
        raise ValueError(f"Expected one benchmark in {json_path}, found {len(benchmarks)}")

    stats = benchmarks[0]["stats"]
    return {
        "ops": stats["ops"],
        "mean_us": stats["mean"] * 1e6,
        "median_us": stats["median"] * 1e6,
        "stddev_us": stats["stddev"] * 1e6,
        "rounds": stats["rounds"],
    }


def aggregate_forks(fork_stats: List[Dict[str, float]]) -> Dict[str, float]:
    """Combine per-fork stats into one measurement."""
    if not fork_stats:
        raise ValueError("No fork results to aggregate")

    ops = [s["ops"] for s in fork_stats]
    return {
        "ops_per_sec": sum(ops) / len(ops),
        "ops_min": min(ops),
        "ops_max": max(ops),
        "mean_us": sum(s["mean_us"] for s in fork_stats) / len(fork_stats),
        "median_us": sum(s["median_us"] for s in fork_stats) / len(fork_stats),
        "rounds": sum(s["rounds"] for s in fork_stats),
        "forks": len(fork_stats),
    }


def compare_generations(case_results: Dict[str, Dict[str, Any]], benchmarks: Dict[str, Dict[str, Any]]) -> Dict[str, float]:
    """New/old throughput ratio per operation, for operations measured in both generations."""
    by_operation: Dict[str, Dict[str, float]] = {}
    for name, metrics in case_results.items():
        if metrics.get("failed") or name not in benchmarks:
            continue
        info = benchmarks[name]
        by_operation.setdefault(info["operation"], {})[info["generation"]] = metrics["ops_per_sec"]

    return {
        operation: generations["v2"] / generations["v1"]
        for operation, generations in by_operation.items()
        if generations.get("v1") and "v2" in generations
    }


def run_fork(bench_name: str, case: ItemCase, fork: int, out_dir: Path, settings: RunSettings) -> Dict[str, Any]:
    """Run one fork and return its stats merged with CPU usage."""
    json_path = out_dir / f"{bench_name}_{case.name}_fork{fork}.json"
    cpu_path = out_dir / f"{bench_name}_{case.name}_fork{fork}_cpu.json"

    proc = start_fork(build_pytest_command(bench_name, case, json_path, settings))
    cpu_thread = threading.Thread(target=monitor_process, args=(proc.pid, cpu_path))
    cpu_thread.daemon = True
    cpu_thread.start()

    try:
        _, stderr = proc.communicate(timeout=settings.timeout)
    except subprocess.TimeoutExpired:
        raise RuntimeError(f"fork timed out after {settings.timeout}s") from None
    finally:
        stop_fork(proc)
        cpu_thread.join(timeout=5)

    if proc.returncode != 0:
        raise RuntimeError(f"pytest exited with {proc.returncode}: {stderr.strip()[-500:]}")

    stats = load_fork_report(json_path)
    cpu_data = []
    if cpu_path.exists():
        with open(cpu_path) as f:
            cpu_data = json.load(f)
    stats.update(analyze_cpu_data(cpu_data))
    return stats


def main():
    """Main benchmark function with one fresh process per fork."""
    register_cleanup()

    defaults = RunSettings()
    parser = argparse.ArgumentParser(description="DynamoDB mapper comparison benchmark")
    parser.add_argument("--forks", type=int, default=defaults.forks, help=f"Processes per benchmark (default: {defaults.forks})")
    parser.add_argument("--warmup-iterations", type=int, default=defaults.warmup_iterations,
                        help=f"Max warmup iterations per fork (default: {defaults.warmup_iterations})")
    parser.add_argument("--min-rounds", type=int, default=defaults.min_rounds,
                        help=f"Minimum measured rounds per fork (default: {defaults.min_rounds})")
    parser.add_argument("--max-time", type=float, default=defaults.max_time,
                        help=f"Target measuring time per fork in seconds (default: {defaults.max_time})")
    parser.add_argument("--timeout", type=int, default=defaults.timeout, help=f"Fork timeout in seconds (default: {defaults.timeout})")
    parser.add_argument("--filter", help="Filter benchmarks by name prefix (e.g., 'v2_' for new-generation only)")
    parser.add_argument("--cases", nargs="+", help="Item cases to run (default: all; e.g. tiny huge-flat)")
    parser.add_argument("--output-dir", default=".tmp", help="Directory for results (default: .tmp)")

    args = parser.parse_args()
    settings = RunSettings(
        forks=args.forks,
        warmup_iterations=args.warmup_iterations,
        min_rounds=args.min_rounds,
        max_time=args.max_time,
        timeout=args.timeout,
    )

    print("🚀 Mapper Benchmark (fresh process per fork)")
    print("=" * 70)
    print(f"🍴 Forks: {settings.forks}")
    print(f"🔥 Warmup iterations: {settings.warmup_iterations}")
    print(f"📏 Min rounds: {settings.min_rounds}, max time: {settings.max_time}s")
    if args.filter:
        print(f"🔍 Filter: {args.filter}")

    try:
        cases = select_cases(args.cases)
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_dir = Path(args.output_dir) / f"bench_{timestamp}"
    out_dir.mkdir(parents=True, exist_ok=True)
    print(f"📁 Output: {out_dir}")

    print("🔍 Discovering benchmarks...")
    benchmarks = discover_benchmarks(args.filter)
    if not benchmarks:
        print("❌ No benchmarks found")
        return 1
    print(f"✅ Found {len(benchmarks)} benchmarks: {list(benchmarks.keys())}")
    print(f"🧩 Item cases: {[case.label for case in cases]}")

    total_tests = len(cases) * len(benchmarks)
    current_test = 0
    benchmark_results: Dict[str, Dict[str, Any]] = {}

    print(f"\n🏃 Running {total_tests} benchmarks x {settings.forks} forks...")
    start_time = time.time()

    for case in cases:
        benchmark_results[case.name] = {}

        for bench_name, info in benchmarks.items():
            current_test += 1
            print(f"\n📊 Test {current_test}/{total_tests}: {bench_name}[{case.label}]")

            print("  🧪 Smoke test...")
            try:
                smoke_test(info["function"], case)
            except Exception as e:
                print(f"  ❌ Smoke test failed: {e!r}")
                benchmark_results[case.name][bench_name] = {"failed": True, "error": repr(e)}
                continue

            fork_stats = []
            for fork in range(1, settings.forks + 1):
                print(f"  🍴 Fork {fork}/{settings.forks}...")
                try:
                    stats = run_fork(bench_name, case, fork, out_dir, settings)
                except Exception as e:
                    print(f"  ❌ Fork {fork} failed: {e}")
                    continue
                print(f"    {stats['ops']:,.0f} ops/s, mean {stats['mean_us']:.1f}µs, CPU {stats['avg_cpu']:.1f}% avg")
                fork_stats.append(stats)

            if not fork_stats:
                benchmark_results[case.name][bench_name] = {"failed": True, "error": "all forks failed"}
                continue

            metrics = aggregate_forks(fork_stats)
            metrics["cpu_avg"] = sum(s["avg_cpu"] for s in fork_stats) / len(fork_stats)
            metrics["memory_max_mb"] = max(s["max_memory_mb"] for s in fork_stats)
            metrics["generation"] = info["generation"]
            metrics["operation"] = info["operation"]
            benchmark_results[case.name][bench_name] = metrics

            elapsed = time.time() - start_time
            print(f"  ✅ {metrics['ops_per_sec']:,.0f} ops/s over {metrics['forks']} forks ({elapsed:.1f}s elapsed)")

    # Generate summary
    print("\n" + "=" * 100)
    print("📊 MAPPER BENCHMARK RESULTS")
    print("=" * 100)

    for case_name, data in benchmark_results.items():
        print(f"\n📈 {ItemCase[case_name].label}:")

        max_name_length = max(len(name) for name in data.keys()) if data else 0
        name_width = max(12, max_name_length + 2)
        total_width = name_width + 14 + 14 + 14 + 10 + 10

        print(f"{'Benchmark':<{name_width}} {'Ops/s':<14} {'Min ops/s':<14} {'Max ops/s':<14} {'Mean(µs)':<10} {'CPU Avg%':<10}")
        print("-" * total_width)

        for name, metrics in data.items():
            if metrics.get("failed"):
                print(f"{name:<{name_width}} FAILED: {metrics['error']}")
                continue
            print(f"{name:<{name_width}} {metrics['ops_per_sec']:<14,.0f} {metrics['ops_min']:<14,.0f} "
                  f"{metrics['ops_max']:<14,.0f} {metrics['mean_us']:<10.2f} {metrics['cpu_avg']:<10.1f}")

    # Old vs new analysis
    print("\n" + "=" * 80)
    print("🏆 NEW vs OLD GENERATION (throughput ratio v2/v1)")
    print("=" * 80)
    comparisons = {}
    for case_name, data in benchmark_results.items():
        ratios = compare_generations(data, benchmarks)
        comparisons[case_name] = ratios
        for operation, ratio in ratios.items():
            verdict = "faster" if ratio >= 1 else "slower"
            print(f"  {ItemCase[case_name].label:<12} {operation:<6}: {ratio:.2f}x ({verdict})")

    results_data = {
        "metadata": {
            "title": suite.title,
            "version": suite.version,
            "forks": settings.forks,
            "warmup_iterations": settings.warmup_iterations,
            "min_rounds": settings.min_rounds,
            "max_time": settings.max_time,
            "python": sys.version.split()[0],
            "timestamp": datetime.now().isoformat(),
        },
        "results": benchmark_results,
        "comparisons": comparisons,
    }

    results_path = out_dir / "results.json"
    with open(results_path, "w") as f:
        json.dump(results_data, f, indent=2)

    print(f"\n💾 Results saved: {results_path}")
    print(f"\n🎉 Benchmark completed in {time.time() - start_time:.1f}s")
    print(f"📊 Generate interactive HTML report: `python plot_results.py --dir {out_dir}`")

    cleanup_all_processes()
    failed = sum(1 for data in benchmark_results.values() for m in data.values() if m.get("failed"))
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
