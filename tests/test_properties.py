"""Property-based tests for blkarbs_microbench using Hypothesis.

These tests verify the invariants of the adaptive search (termination,
monotonic growth, one result per repetition) for arbitrary operation costs and
thresholds, and the statistics reducer against the standard library's
reference implementations.
"""

import statistics

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from _fakes import FakeClock, SteppingBenchmark
from blkarbs_microbench import (
    Result,
    Runner,
    RunnerConfig,
    mean_ns,
    median_ns,
    next_iterations,
    stddev_ns,
)

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

# Cost of one fake operate call, including free operations
cost_ns = st.integers(min_value=0, max_value=5_000)

# Acceptance thresholds
min_runtime_ns = st.integers(min_value=1, max_value=2_000_000)

# Ceilings kept small so each example stays fast
max_iterations = st.integers(min_value=1, max_value=5_000)

repetitions = st.integers(min_value=1, max_value=4)

# Run times bounded so float means stay exact enough to compare
run_times = st.lists(st.integers(min_value=0, max_value=10**9), min_size=1, max_size=20)


def as_results(values: list[int]) -> list[Result]:
    return [Result(run_time_ns=value, iterations=1) for value in values]


# ---------------------------------------------------------------------------
# Iteration scaling
# ---------------------------------------------------------------------------

class TestNextIterationsProperties:
    @given(
        run_time=st.integers(min_value=0, max_value=10**10),
        iterations=st.integers(min_value=1, max_value=10**9),
        min_runtime=st.integers(min_value=1, max_value=10**10),
        headroom=st.integers(min_value=1, max_value=10**9),
    )
    def test_strictly_grows_within_ceiling(self, run_time, iterations, min_runtime, headroom):
        """The next count is always larger and never past the ceiling."""
        ceiling = iterations + headroom
        grown = next_iterations(run_time, iterations, min_runtime, ceiling)
        assert iterations < grown <= ceiling


# ---------------------------------------------------------------------------
# Runner invariants
# ---------------------------------------------------------------------------

class TestRunnerProperties:
    @given(
        cost=cost_ns,
        min_runtime=min_runtime_ns,
        ceiling=max_iterations,
        reps=repetitions,
    )
    @settings(max_examples=50, deadline=None)
    def test_search_invariants(self, cost, min_runtime, ceiling, reps):
        clock = FakeClock()
        config = RunnerConfig(min_runtime_ns=min_runtime, max_iterations=ceiling, repetitions=reps)
        results = Runner(config, clock=clock).execute(SteppingBenchmark(clock, cost_ns=cost))

        # One accepted result per repetition
        assert len(results) == reps

        for repetition, accepted in enumerate(results):
            # Termination: threshold met or ceiling reached
            assert accepted.run_time_ns >= min_runtime or accepted.iterations == ceiling
            assert accepted.run_time_ns == accepted.iterations * cost

            attempts = results.attempts.get(repetition, ())
            for attempt in attempts:
                assert attempt.run_time_ns < min_runtime
                assert attempt.iterations < ceiling

            # Strictly increasing within the repetition's search
            sequence = [attempt.iterations for attempt in attempts] + [accepted.iterations]
            assert all(a < b for a, b in zip(sequence, sequence[1:]))

    @given(cost=cost_ns, min_runtime=min_runtime_ns, ceiling=max_iterations)
    @settings(max_examples=30, deadline=None)
    def test_later_repetitions_start_from_accepted_count(self, cost, min_runtime, ceiling):
        clock = FakeClock()
        config = RunnerConfig(min_runtime_ns=min_runtime, max_iterations=ceiling, repetitions=3)
        results = Runner(config, clock=clock).execute(SteppingBenchmark(clock, cost_ns=cost))

        # A deterministic cost means the first accepted count is re-accepted as is
        assert results.iterations == [results[0].iterations] * 3
        assert set(results.attempts) <= {0}


# ---------------------------------------------------------------------------
# Statistics reducer
# ---------------------------------------------------------------------------

class TestStatisticsProperties:
    @given(values=run_times)
    def test_mean_is_within_range(self, values):
        assert min(values) <= mean_ns(as_results(values)) <= max(values)

    @given(values=run_times)
    def test_mean_matches_reference(self, values):
        assert mean_ns(as_results(values)) == pytest.approx(statistics.fmean(values), rel=1e-9)

    @given(values=st.lists(st.integers(min_value=0, max_value=10**9), min_size=3, max_size=20))
    def test_median_matches_reference(self, values):
        assert median_ns(as_results(values)) == pytest.approx(statistics.median(values))

    @given(values=run_times, seed=st.randoms())
    def test_median_ignores_input_order(self, values, seed):
        shuffled = list(values)
        seed.shuffle(shuffled)
        assert median_ns(as_results(shuffled)) == median_ns(as_results(values))

    @given(values=st.lists(st.integers(min_value=0, max_value=10**9), min_size=2, max_size=20))
    def test_stddev_matches_reference(self, values):
        expected = statistics.stdev(values)
        assert stddev_ns(as_results(values)) == pytest.approx(expected, rel=1e-6, abs=1e-6)

    @given(value=st.integers(min_value=0, max_value=10**9), count=st.integers(min_value=1, max_value=20))
    def test_stddev_of_constant_is_zero(self, value, count):
        assert stddev_ns(as_results([value] * count)) == 0.0
