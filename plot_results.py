#!/usr/bin/env python3
"""Plot mapper benchmark results with interactive HTML charts."""

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

CASE_ORDER = ["TINY", "SMALL", "HUGE", "HUGE_FLAT"]
COLORS = ['#FF6384', '#36A2EB', '#FFCE56', '#4BC0C0', '#9966FF', '#FF9F40']


def case_label(case_name: str) -> str:
    return case_name.lower().replace("_", "-")


def case_sort_key(case_name: str):
    return (CASE_ORDER.index(case_name) if case_name in CASE_ORDER else len(CASE_ORDER), case_name)


def find_latest_benchmark_dir(base_dir: Path = Path(".tmp")) -> Path:
    """Find the latest benchmark directory."""
    if not base_dir.exists():
        raise FileNotFoundError(f"No {base_dir} directory found")

    benchmark_dirs = [d for d in base_dir.glob("bench_*") if d.is_dir()]
    if not benchmark_dirs:
        raise FileNotFoundError("No benchmark directories found")

    # Sort by modification time, newest first
    return max(benchmark_dirs, key=lambda p: p.stat().st_mtime)


def load_benchmark_data(results_dir: Path) -> Dict[str, Any]:
    """Load benchmark data from the consolidated results file."""
    results_file = results_dir / "results.json"

    if not results_file.exists():
        raise FileNotFoundError(f"No results.json found in {results_dir}")

    with open(results_file) as f:
        data = json.load(f)

    if "results" not in data:
        raise ValueError(f"{results_file} has no 'results' section")
    data.setdefault("metadata", {})
    data.setdefault("comparisons", {})
    return data


def flatten_results(results: Dict[str, Dict[str, Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """One row per successful (case, benchmark) measurement."""
    flat_data = []
    for case_name in sorted(results, key=case_sort_key):
        for bench_name, metrics in results[case_name].items():
            if metrics.get("failed"):
                continue
            flat_data.append({
                'benchmark': bench_name,
                'case': case_label(case_name),
                'generation': metrics.get('generation', ''),
                'operation': metrics.get('operation', ''),
                'ops_per_sec': metrics['ops_per_sec'],
                'ops_min': metrics.get('ops_min', metrics['ops_per_sec']),
                'ops_max': metrics.get('ops_max', metrics['ops_per_sec']),
                'mean_us': metrics['mean_us'],
                'median_us': metrics.get('median_us', 0),
                'cpu_avg': metrics.get('cpu_avg', 0),
                'memory_max_mb': metrics.get('memory_max_mb', 0),
            })
    return flat_data


def collect_failures(results: Dict[str, Dict[str, Dict[str, Any]]]) -> List[str]:
    return [
        f"{bench_name}[{case_label(case_name)}]: {metrics.get('error', 'unknown error')}"
        for case_name, data in results.items()
        for bench_name, metrics in data.items()
        if metrics.get("failed")
    ]


def generation_ratios(flat_data: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """v2/v1 throughput ratio for every (case, operation) measured in both generations."""
    pairs: Dict[tuple, Dict[str, float]] = {}
    for item in flat_data:
        pairs.setdefault((item['case'], item['operation']), {})[item['generation']] = item['ops_per_sec']

    ratios = []
    for (case, operation), generations in pairs.items():
        if generations.get('v1') and 'v2' in generations:
            ratios.append({
                'case': case,
                'operation': operation,
                'v1_ops': generations['v1'],
                'v2_ops': generations['v2'],
                'ratio': generations['v2'] / generations['v1'],
            })
    return ratios


def print_ascii_chart(data: List[Dict], title: str, group_key: str, label_key: str, value_key: str, max_width: int = 50):
    """Print ASCII chart."""
    if not data:
        return

    print(f"\n📊 {title}")
    print("=" * 80)

    groups: Dict[str, List[Dict]] = {}
    for item in data:
        groups.setdefault(item[group_key], []).append(item)

    max_value = max(item[value_key] for item in data) or 1

    for group, items in groups.items():
        for item in sorted(items, key=lambda x: x[label_key]):
            value = item[value_key]
            bar_length = int((value / max_value) * max_width)
            bar = '█' * bar_length + '░' * (max_width - bar_length)
            name = f"{item[label_key]}@{group}"
            print(f"{name:<24} {bar} {value:,.0f}")


def print_table(data: List[Dict], title: str, columns: List[Dict]):
    """Print formatted table."""
    print(f"\n📋 {title}")
    print("=" * 100)

    header = " | ".join(f"{col['name']:<{col['width']}}" for col in columns)
    print(header)
    print("-" * len(header))

    for item in data:
        row_parts = []
        for col in columns:
            value = item.get(col['key'], 0)
            if isinstance(value, float):
                value = f"{value:,.{col['precision']}f}"
            else:
                value = str(value)
            row_parts.append(f"{value:<{col['width']}}")

        print(" | ".join(row_parts))


def create_html_chart(data: List[Dict], title: str, x_key: str, y_key: str, group_key: str,
                      chart_type: str = "bar") -> str:
    """Create Chart.js HTML chart with one dataset per group over categorical x values."""
    if not data:
        return ""

    labels = []
    for item in data:
        if item[x_key] not in labels:
            labels.append(item[x_key])

    groups: Dict[str, Dict[str, float]] = {}
    for item in data:
        groups.setdefault(item[group_key], {})[item[x_key]] = item[y_key]

    datasets = []
    for i, (group, values) in enumerate(sorted(groups.items())):
        datasets.append({
            'label': group,
            'data': [values.get(label) for label in labels],
            'borderColor': COLORS[i % len(COLORS)],
            'backgroundColor': COLORS[i % len(COLORS)] + '80',
        })

    chart_config = {
        'type': chart_type,
        'data': {'labels': labels, 'datasets': datasets},
        'options': {
            'responsive': True,
            'scales': {
                'x': {'title': {'display': True, 'text': x_key.replace('_', ' ').title()}},
                'y': {'title': {'display': True, 'text': y_key.replace('_', ' ').title()}, 'beginAtZero': True},
            },
            'plugins': {
                'title': {'display': True, 'text': title}
            }
        }
    }

    chart_id = f"chart_{abs(hash(title))}"
    return f"""
    <div style="width: 100%; height: 400px; margin: 20px 0;">
        <canvas id="{chart_id}"></canvas>
    </div>
    <script>
        new Chart(document.getElementById('{chart_id}'), {json.dumps(chart_config)});
    </script>
    """


def generate_html_report(flat_data: List[Dict], ratios: List[Dict], output_file: Path,
                         metadata: Optional[Dict[str, Any]] = None):
    """Generate HTML report with charts."""
    metadata = metadata or {}
    meta_line = ", ".join(f"{key}: {value}" for key, value in metadata.items())

    html_content = f"""
<!DOCTYPE html>
<html>
<head>
    <title>Mapper Benchmark Report</title>
    <script src="https://cdn.jsdelivr.net/npm/chart.js"></script>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 20px; }}
        .header {{ text-align: center; margin-bottom: 30px; }}
        .chart-container {{ margin: 30px 0; }}
        .summary {{ background: #f5f5f5; padding: 20px; border-radius: 5px; margin: 20px 0; }}
        table {{ width: 100%; border-collapse: collapse; margin: 20px 0; }}
        th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
        th {{ background-color: #f2f2f2; }}
    </style>
</head>
<body>
    <div class="header">
        <h1>🚀 DynamoDB Mapper Benchmark Results</h1>
        <p>{meta_line}</p>
    </div>

    <div class="chart-container">
        <h2>📈 Throughput</h2>
        {create_html_chart(flat_data, "Throughput (ops/s) per Item Case", "case", "ops_per_sec", "benchmark")}
        {create_html_chart(flat_data, "Mean Latency (µs) per Item Case", "case", "mean_us", "benchmark")}
        {create_html_chart(ratios, "New/Old Throughput Ratio", "case", "ratio", "operation")}
    </div>

    <div class="chart-container">
        <h2>📋 Detailed Results Table</h2>
        <table>
            <tr>
                <th>Case</th>
                <th>Benchmark</th>
                <th>Ops/s</th>
                <th>Min Ops/s</th>
                <th>Max Ops/s</th>
                <th>Mean (µs)</th>
                <th>CPU Avg %</th>
                <th>Memory Max (MB)</th>
            </tr>
"""

    for item in flat_data:
        html_content += f"""
            <tr>
                <td>{item['case']}</td>
                <td>{item['benchmark']}</td>
                <td>{item['ops_per_sec']:,.0f}</td>
                <td>{item['ops_min']:,.0f}</td>
                <td>{item['ops_max']:,.0f}</td>
                <td>{item['mean_us']:.2f}</td>
                <td>{item['cpu_avg']:.1f}</td>
                <td>{item['memory_max_mb']:.1f}</td>
            </tr>
"""

    html_content += """
        </table>
    </div>

    <div class="summary">
        <h2>🏆 New vs Old Generation</h2>
"""

    for ratio in ratios:
        html_content += f"""
        <p><strong>{ratio['case']} {ratio['operation']}:</strong> {ratio['ratio']:.2f}x
           ({ratio['v2_ops']:,.0f} vs {ratio['v1_ops']:,.0f} ops/s)</p>
"""

    html_content += """
    </div>
</body>
</html>
"""

    with open(output_file, 'w') as f:
        f.write(html_content)


def main():
    """Main plotting function."""
    parser = argparse.ArgumentParser(description="Plot mapper benchmark results")
    parser.add_argument("--dir", help="Specific benchmark directory to use")
    parser.add_argument("--no-html", action="store_true", help="Skip HTML report generation")
    parser.add_argument("--output", default="benchmark_report.html", help="HTML output filename")

    args = parser.parse_args()

    try:
        if args.dir:
            results_dir = Path(args.dir)
            if not results_dir.exists():
                print(f"❌ Directory {results_dir} does not exist")
                return 1
        else:
            results_dir = find_latest_benchmark_dir()

        print(f"📁 Using data from: {results_dir}")

        print("📊 Loading benchmark data...")
        full_data = load_benchmark_data(results_dir)
        metadata = full_data['metadata']
        results = full_data['results']

        flat_data = flatten_results(results)
        failures = collect_failures(results)
        if not flat_data:
            print("❌ No successful benchmark results found")
            return 1

        print(f"✅ Loaded {len(flat_data)} benchmark results")
        for failure in failures:
            print(f"⚠️  Failed: {failure}")

        benchmarks = sorted(set(item['benchmark'] for item in flat_data))
        cases = list(dict.fromkeys(item['case'] for item in flat_data))
        print(f"\n🎯 Found {len(benchmarks)} benchmarks: {', '.join(benchmarks)}")
        print(f"🎯 Found {len(cases)} item cases: {', '.join(cases)}")

        print_ascii_chart(flat_data, "Throughput (ops/s)", 'case', 'benchmark', 'ops_per_sec')

        print_table(flat_data, "Performance Results", [
            {'name': 'Case', 'key': 'case', 'width': 10, 'precision': 0},
            {'name': 'Benchmark', 'key': 'benchmark', 'width': 10, 'precision': 0},
            {'name': 'Ops/s', 'key': 'ops_per_sec', 'width': 12, 'precision': 0},
            {'name': 'Min Ops/s', 'key': 'ops_min', 'width': 12, 'precision': 0},
            {'name': 'Max Ops/s', 'key': 'ops_max', 'width': 12, 'precision': 0},
            {'name': 'Mean(µs)', 'key': 'mean_us', 'width': 10, 'precision': 2},
            {'name': 'CPU Avg%', 'key': 'cpu_avg', 'width': 10, 'precision': 1},
        ])

        ratios = generation_ratios(flat_data)
        print("\n" + "=" * 80)
        print("🏆 NEW vs OLD GENERATION")
        print("=" * 80)
        for ratio in ratios:
            verdict = "faster" if ratio['ratio'] >= 1 else "slower"
            print(f"  {ratio['case']:<12} {ratio['operation']:<6}: {ratio['ratio']:.2f}x {verdict} "
                  f"({ratio['v2_ops']:,.0f} vs {ratio['v1_ops']:,.0f} ops/s)")

        if not args.no_html:
            output_file = Path(args.output)
            print(f"\n🌐 Generating HTML report: {output_file}")
            generate_html_report(flat_data, ratios, output_file, metadata)
            print(f"✅ HTML report saved to: {output_file}")
            print(f"🔗 Open report: file://{output_file.absolute()}")
        else:
            print("\n⏭️  Skipping HTML report generation (--no-html specified)")

        print(f"\n🎉 Analysis complete! Data from: {results_dir}")
        return 0

    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
