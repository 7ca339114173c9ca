"""Tests for the fork runner's helpers."""

import json
import sys

import pytest

import run_benchmark
from mapper_bench.benchmarks import ItemCase
from mapper_bench.settings import RunSettings


def write_report(path, ops, mean, rounds=5):
    report = {
        "machine_info": {},
        "benchmarks": [
            {
                "name": "test_mapper_benchmark[v2_get-TINY]",
                "params": {},
                "stats": {
                    "min": mean * 0.9,
                    "max": mean * 1.1,
                    "mean": mean,
                    "stddev": mean * 0.05,
                    "median": mean,
                    "rounds": rounds,
                    "ops": ops,
                },
            }
        ],
    }
    path.write_text(json.dumps(report))
    return path


def test_build_pytest_command_targets_one_benchmark(tmp_path):
    settings = RunSettings(forks=1, warmup_iterations=50, min_rounds=7, max_time=0.5)

    command = run_benchmark.build_pytest_command("v1_put", ItemCase.HUGE, tmp_path / "out.json", settings)

    assert command[:3] == [sys.executable, "-m", "pytest"]
    assert command[3] == "tests/benchmarks/test_mapper_comparison.py::test_mapper_benchmark[v1_put-HUGE]"
    assert "--benchmark-only" in command
    assert f"--benchmark-json={tmp_path / 'out.json'}" in command
    assert "--benchmark-warmup-iterations=50" in command
    assert "--benchmark-min-rounds=7" in command
    assert "--benchmark-max-time=0.5" in command


def test_discover_benchmarks_reports_generation_and_operation():
    benchmarks = run_benchmark.discover_benchmarks("v2_")

    assert set(benchmarks) == {"v2_get", "v2_put"}
    assert benchmarks["v2_put"]["generation"] == "v2"
    assert benchmarks["v2_put"]["operation"] == "put"
    assert callable(benchmarks["v2_put"]["function"])


def test_select_cases():
    assert run_benchmark.select_cases(None) == list(ItemCase)
    assert run_benchmark.select_cases(["tiny", "huge-flat"]) == [ItemCase.TINY, ItemCase.HUGE_FLAT]
    with pytest.raises(ValueError):
        run_benchmark.select_cases(["enormous"])


def test_smoke_test_runs_benchmark_once():
    benchmarks = run_benchmark.discover_benchmarks()

    item = run_benchmark.smoke_test(benchmarks["v1_get"]["function"], ItemCase.TINY)

    assert item == {"hashKey": "hashKey"}


def test_load_fork_report_converts_to_microseconds(tmp_path):
    path = write_report(tmp_path / "fork.json", ops=200000.0, mean=5e-6)

    stats = run_benchmark.load_fork_report(path)

    assert stats["ops"] == 200000.0
    assert stats["mean_us"] == pytest.approx(5.0)
    assert stats["median_us"] == pytest.approx(5.0)
    assert stats["rounds"] == 5


def test_load_fork_report_requires_exactly_one_benchmark(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text(json.dumps({"benchmarks": []}))

    with pytest.raises(ValueError, match="Expected one benchmark"):
        run_benchmark.load_fork_report(path)


def test_aggregate_forks():
    metrics = run_benchmark.aggregate_forks([
        {"ops": 100.0, "mean_us": 10.0, "median_us": 9.0, "rounds": 5},
        {"ops": 300.0, "mean_us": 4.0, "median_us": 3.0, "rounds": 6},
    ])

    assert metrics["ops_per_sec"] == 200.0
    assert metrics["ops_min"] == 100.0
    assert metrics["ops_max"] == 300.0
    assert metrics["mean_us"] == 7.0
    assert metrics["rounds"] == 11
    assert metrics["forks"] == 2


def test_aggregate_forks_rejects_empty_input():
    with pytest.raises(ValueError):
        run_benchmark.aggregate_forks([])


def test_compare_generations_pairs_operations():
    benchmarks = run_benchmark.discover_benchmarks()
    case_results = {
        "v2_get": {"ops_per_sec": 300.0},
        "v1_get": {"ops_per_sec": 100.0},
        "v2_put": {"ops_per_sec": 50.0},
        "v1_put": {"failed": True, "error": "boom"},
    }

    assert run_benchmark.compare_generations(case_results, benchmarks) == {"get": 3.0}


def test_analyze_cpu_data():
    assert run_benchmark.analyze_cpu_data([]) == {
        "avg_cpu": 0.0,
        "max_cpu": 0.0,
        "avg_memory_mb": 0.0,
        "max_memory_mb": 0.0,
    }

    stats = run_benchmark.analyze_cpu_data([
        {"timestamp": 0, "cpu_percent": 50.0, "rss_mb": 100.0},
        {"timestamp": 1, "cpu_percent": 100.0, "rss_mb": 120.0},
    ])
    assert stats == {"avg_cpu": 75.0, "max_cpu": 100.0, "avg_memory_mb": 110.0, "max_memory_mb": 120.0}


def test_run_fork_measures_one_benchmark_in_a_child_process(tmp_path):
    settings = RunSettings(forks=1, warmup_iterations=1, min_rounds=1, max_time=0.01, timeout=120)

    stats = run_benchmark.run_fork("v2_get", ItemCase.TINY, 0, tmp_path, settings)

    assert (tmp_path / "v2_get_TINY_fork0.json").exists()
    assert stats["ops"] > 0
    assert stats["rounds"] >= 1
    assert stats["mean_us"] > 0
    assert "avg_cpu" in stats
    assert run_benchmark.active_processes == []


def test_monitor_process_writes_samples_for_finished_process(tmp_path):
    output = tmp_path / "cpu.json"

    # A pid that cannot exist: psutil raises NoSuchProcess straight away.
    run_benchmark.monitor_process(2 ** 22 + 1, output, interval=0.01)

    assert json.loads(output.read_text()) == []
