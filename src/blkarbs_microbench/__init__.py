"""blkarbs-microbench: Adaptive micro-benchmark harness.

Provides:
- Benchmark: Base class for benchmarked units (operate + optional hooks)
- StatelessBenchmark / StatefulBenchmark: Function-based units
- Runner / RunnerConfig: Adaptive iteration search over N repetitions
- ResultSet / Result: Accepted measurements of one run
- summarize: Mean, median and sample standard deviation of a ResultSet
- BenchmarkRegistry: Named factories for running many small benchmarks

Usage:
    from blkarbs_microbench import Runner, RunnerConfig, StatelessBenchmark

    runner = Runner(RunnerConfig(repetitions=10, log_level=1))
    results = runner.execute(StatelessBenchmark(time.monotonic_ns))

    summary = results.summary()
    print(f"median: {summary.median.ns_per_op:.3f} ns/op")
"""

from blkarbs_microbench._catalog import default_registry
from blkarbs_microbench._errors import (
    BenchmarkError,
    ConstructionError,
    OperationError,
    SetupError,
    TeardownError,
)
from blkarbs_microbench._registry import BenchmarkRegistry
from blkarbs_microbench._result import Result, ResultSet
from blkarbs_microbench._runner import (
    HostContext,
    Runner,
    RunnerConfig,
    collect_host_context,
    describe_host,
    execute,
    format_header,
    format_result,
    format_summary,
    next_iterations,
)
from blkarbs_microbench._stats import Summary, mean_ns, median_ns, stddev_ns, summarize
from blkarbs_microbench._unit import Benchmark, StatefulBenchmark, StatelessBenchmark

__all__ = [
    "Benchmark",
    "BenchmarkError",
    "BenchmarkRegistry",
    "ConstructionError",
    "HostContext",
    "OperationError",
    "Result",
    "ResultSet",
    "Runner",
    "RunnerConfig",
    "SetupError",
    "StatefulBenchmark",
    "StatelessBenchmark",
    "Summary",
    "TeardownError",
    "collect_host_context",
    "default_registry",
    "describe_host",
    "execute",
    "format_header",
    "format_result",
    "format_summary",
    "mean_ns",
    "median_ns",
    "next_iterations",
    "stddev_ns",
    "summarize",
]

__version__ = "0.1.0"
