"""Adaptive benchmark runner.

Design by Contract (P1 - MANDATORY):
- min_runtime_ns MUST be > 0, max_iterations MUST be >= 1
- Elapsed time MUST be non-negative (crash if negative - clock went backwards)
- Every accepted Result has run_time_ns >= min_runtime_ns
  OR iterations == max_iterations
- Iteration counts strictly increase within one repetition's search
- Hook failures abort the run immediately (no retry, no partial repetition)

A single call is far too fast to time against clock resolution, so the runner
grows the iteration count geometrically until one block of back-to-back calls
spans ``min_runtime_ns``:

    run_time_ns < 1000                    -> x1000
    run_time_ns < min_runtime_ns / 10     -> x10
    otherwise                             -> x1.4

The count found by one repetition carries over to the next, which then only
has to re-verify it.

Verbose runs log a host-context banner and fixed-width report rows, both
rendered by the helpers in this module.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass

import psutil
from beartype import beartype
from loguru import logger

from blkarbs_microbench._errors import (
    BenchmarkError,
    ConstructionError,
    OperationError,
    SetupError,
    TeardownError,
)
from blkarbs_microbench._result import Result, ResultSet
from blkarbs_microbench._stats import Summary, summarize
from blkarbs_microbench._unit import Benchmark

NS_PER_S = 1_000_000_000

# Below this a block is assumed to be under the timer's resolution floor.
TIMER_FLOOR_NS = 1_000

LABEL_WIDTH = 22
ITERATIONS_WIDTH = 14
TIME_WIDTH = 12
PER_OP_WIDTH = 18


@dataclass(frozen=True)
class HostContext:
    """CPU and memory state sampled via psutil.

    Timings are only comparable between runs on similar, similarly loaded
    hosts, so a verbose run logs this before measuring.

    Attributes:
        cpu_count: Logical CPUs (0 if psutil cannot tell)
        cpu_freq_mhz: Current CPU frequency in MHz (0.0 if unavailable)
        load_average: 1, 5 and 15 minute load averages
        memory_percent: System memory usage %
    """

    cpu_count: int
    cpu_freq_mhz: float
    load_average: tuple[float, float, float]
    memory_percent: float


@beartype
def collect_host_context() -> HostContext:
    freq = psutil.cpu_freq()
    load_1, load_5, load_15 = psutil.getloadavg()
    return HostContext(
        cpu_count=psutil.cpu_count(logical=True) or 0,
        cpu_freq_mhz=float(freq.current) if freq is not None else 0.0,
        load_average=(float(load_1), float(load_5), float(load_15)),
        memory_percent=float(psutil.virtual_memory().percent),
    )


@beartype
def describe_host(context: HostContext) -> list[str]:
    """Render host context as report lines.

    Example output:
        Run on (8 X 3000 MHz CPU s)
        Load Average: 0.52, 0.58, 0.59
        Memory: 41.3% used
    """
    load = ", ".join(f"{value:.2f}" for value in context.load_average)
    return [
        f"Run on ({context.cpu_count} X {context.cpu_freq_mhz:.0f} MHz CPU s)",
        f"Load Average: {load}",
        f"Memory: {context.memory_percent:.1f}% used",
    ]


@beartype
def format_header() -> str:
    return (
        f"{'Benchmark':<{LABEL_WIDTH}}"
        f"{'Iterations':>{ITERATIONS_WIDTH}}"
        f"{'Time':>{TIME_WIDTH}}"
        f"{'Time/op':>{PER_OP_WIDTH}}"
    )


@beartype
def format_result(label: str, result: Result) -> str:
    """Format one row: label, iterations, elapsed seconds, ns per operation.

    Human-readable only; the layout is not a stable machine format.
    """
    seconds = f"{result.run_time_ns / NS_PER_S:.3f} s"
    per_op = f"{result.ns_per_op:.3f} ns/op"
    return (
        f"{label:<{LABEL_WIDTH}}"
        f"{result.iterations:>{ITERATIONS_WIDTH}}"
        f"{seconds:>{TIME_WIDTH}}"
        f"{per_op:>{PER_OP_WIDTH}}"
    )


@beartype
def format_summary(label: str, summary: Summary) -> list[str]:
    """Format mean/median/stddev rows, labelled ``<label>_mean`` etc."""
    return [
        format_result(f"{label}_{statistic}", result)
        for statistic, result in zip(Summary._fields, summary)
    ]


@beartype
@dataclass(frozen=True)
class RunnerConfig:
    """Runner thresholds, fixed for the duration of a run.

    Args:
        min_runtime_ns: Nanoseconds a timed block must span to be accepted
        repetitions: Independent measurements to take (0 returns immediately)
        max_iterations: Hard ceiling on iterations per block
        log_level: 0 = silent, 1 = attempt/repetition/summary rows,
            2 = additionally every scaling decision
    """

    min_runtime_ns: int = NS_PER_S // 2
    repetitions: int = 1
    max_iterations: int = 100_000_000_000
    log_level: int = 0

    def __post_init__(self) -> None:
        assert self.min_runtime_ns > 0, f"min_runtime_ns must be positive: {self.min_runtime_ns}"
        assert self.max_iterations >= 1, f"max_iterations must be >= 1: {self.max_iterations}"
        assert self.repetitions >= 0, f"repetitions must be non-negative: {self.repetitions}"
        assert self.log_level >= 0, f"log_level must be non-negative: {self.log_level}"


def _growth_factor(run_time_ns: int, min_runtime_ns: int) -> tuple[int, int]:
    if run_time_ns < TIMER_FLOOR_NS:
        return 1000, 1
    if run_time_ns < min_runtime_ns // 10:
        return 10, 1
    return 14, 10


@beartype
def next_iterations(
    run_time_ns: int,
    iterations: int,
    min_runtime_ns: int,
    max_iterations: int,
) -> int:
    """Iteration count for the next attempt after a block fell short.

    The result is strictly greater than ``iterations`` (x1.4 alone would leave
    1 and 2 unchanged) and never exceeds ``max_iterations``.

    Args:
        run_time_ns: Elapsed time of the rejected block
        iterations: Iterations of the rejected block (MUST be < max_iterations)
        min_runtime_ns: Acceptance threshold
        max_iterations: Hard ceiling
    """
    assert 1 <= iterations < max_iterations, (
        f"iterations must be in [1, {max_iterations}): {iterations}"
    )
    numer, denom = _growth_factor(run_time_ns, min_runtime_ns)
    scaled = max(iterations * numer // denom, iterations + 1)
    return min(scaled, max_iterations)


def _call_hook(
    hook: Callable[[], None],
    error_type: type[BenchmarkError],
    label: str,
) -> None:
    try:
        hook()
    except Exception as exc:
        raise error_type(label, exc) from exc


class Runner:
    """Runs a benchmarked unit through repeated adaptive measurements.

    Args:
        config: Thresholds for the run (defaults to ``RunnerConfig()``)
        clock: Monotonic clock returning integer nanoseconds

    Example:
        runner = Runner(RunnerConfig(repetitions=10, log_level=1))
        results = runner.execute(StatelessBenchmark(noop))
        print(results.summary().median.ns_per_op)
    """

    @beartype
    def __init__(
        self,
        config: RunnerConfig | None = None,
        clock: Callable[[], int] = time.perf_counter_ns,
    ) -> None:
        self.config = config if config is not None else RunnerConfig()
        self._clock = clock

    @beartype
    def execute(self, unit: Benchmark, name: str | None = None) -> ResultSet:
        """Measure ``unit`` for ``config.repetitions`` repetitions.

        Args:
            unit: The benchmarked unit
            name: Label for reports (defaults to ``unit.name``)

        Returns:
            ResultSet with exactly ``config.repetitions`` accepted results.

        Raises:
            ConstructionError: construct hook raised
            SetupError: setup hook raised
            OperationError: operate raised during a timed block
            TeardownError: teardown hook raised
        """
        config = self.config
        label = name or unit.name
        results = ResultSet(label)
        if config.repetitions == 0:
            return results

        if config.log_level >= 1:
            logger.info(
                f"run: {label} log_level={config.log_level} "
                f"min_runtime_ns={config.min_runtime_ns} "
                f"max_iterations={config.max_iterations} "
                f"repetitions={config.repetitions}"
            )
            for line in describe_host(collect_host_context()):
                logger.info(line)
            logger.info(format_header())

        _call_hook(unit.construct, ConstructionError, label)

        iterations = 1
        for repetition in range(config.repetitions):
            _call_hook(unit.setup, SetupError, label)
            accepted = self._search(unit, label, iterations, repetition, results)
            iterations = accepted.iterations
            _call_hook(unit.teardown, TeardownError, label)

            if config.log_level >= 1:
                logger.info(format_result(label, accepted))

        if config.log_level >= 1:
            for line in format_summary(label, summarize(results)):
                logger.info(line)

        return results

    def _search(
        self,
        unit: Benchmark,
        label: str,
        iterations: int,
        repetition: int,
        results: ResultSet,
    ) -> Result:
        """Grow iterations until a timed block is accepted, then record it."""
        config = self.config
        while True:
            run_time_ns = self._time_block(unit, label, iterations)
            measured = Result(run_time_ns=run_time_ns, iterations=iterations)

            if run_time_ns >= config.min_runtime_ns or iterations >= config.max_iterations:
                results.append(measured)
                return measured

            results.record_attempt(repetition, measured)
            if config.log_level >= 1:
                logger.info(format_result(label, measured))

            iterations = next_iterations(
                run_time_ns, iterations, config.min_runtime_ns, config.max_iterations
            )
            if config.log_level >= 2:
                numer, denom = _growth_factor(run_time_ns, config.min_runtime_ns)
                logger.debug(f"iterations:{iterations} numer:{numer} denom:{denom}")

    def _time_block(self, unit: Benchmark, label: str, iterations: int) -> int:
        """Time ``iterations`` back-to-back calls to ``unit.operate``."""
        operate = unit.operate
        clock = self._clock

        start = clock()
        try:
            for _ in range(iterations):
                operate()
        except Exception as exc:
            raise OperationError(label, exc) from exc
        elapsed = clock() - start

        assert elapsed >= 0, (
            f"Elapsed time cannot be negative: {elapsed}ns. "
            f"Clock went backwards or timing bug."
        )
        return elapsed


@beartype
def execute(
    unit: Benchmark,
    config: RunnerConfig | None = None,
    *,
    name: str | None = None,
    clock: Callable[[], int] = time.perf_counter_ns,
) -> ResultSet:
    """Convenience wrapper: ``Runner(config, clock).execute(unit, name)``."""
    return Runner(config, clock).execute(unit, name)
