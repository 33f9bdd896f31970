"""Statistics over a set of accepted measurements.

The reducers work on raw ``run_time_ns`` values and return floats.
``summarize`` packs them back into synthetic ``Result`` records so the
same row formatting can report them.
"""

import math
from collections.abc import Sequence
from operator import attrgetter
from typing import NamedTuple

from beartype import beartype
from loguru import logger

from blkarbs_microbench._result import Result


class Summary(NamedTuple):
    mean: Result
    median: Result
    stddev: Result


@beartype
def mean_ns(results: Sequence[Result]) -> float:
    """Arithmetic mean of run_time_ns. Empty input yields 0.0."""
    if not results:
        return 0.0
    return sum(result.run_time_ns for result in results) / len(results)


@beartype
def median_ns(results: Sequence[Result]) -> float:
    """Median of run_time_ns.

    With fewer than three results the median is not meaningful and the mean
    is returned instead. Ties keep their original order (stable sort).
    """
    if len(results) < 3:
        return mean_ns(results)

    ordered = sorted(results, key=attrgetter("run_time_ns"))
    center = len(ordered) // 2
    if len(ordered) % 2 == 1:
        return float(ordered[center].run_time_ns)
    return (ordered[center - 1].run_time_ns + ordered[center].run_time_ns) / 2


@beartype
def stddev_ns(results: Sequence[Result]) -> float:
    """Sample standard deviation of run_time_ns (n - 1 denominator).

    Zero for empty and single-element inputs.
    """
    if len(results) <= 1:
        return 0.0

    mean = mean_ns(results)
    sum_of_squares = sum((result.run_time_ns - mean) ** 2 for result in results)
    return math.sqrt(sum_of_squares / (len(results) - 1))


@beartype
def summarize(results: Sequence[Result]) -> Summary:
    """Reduce results to mean, median and stddev as synthetic Results.

    Each synthetic Result carries the truncated statistic as run_time_ns and
    the iteration count of the first result. That count is only representative
    when every result shares it, so a warning is logged otherwise.

    Args:
        results: Accepted measurements (MUST be non-empty)

    Returns:
        Summary(mean, median, stddev)
    """
    assert results, "Cannot summarize an empty result set"

    iterations = results[0].iterations
    if any(result.iterations != iterations for result in results):
        logger.warning(
            f"Results have mixed iteration counts "
            f"{sorted({result.iterations for result in results})}; "
            f"summary reports {iterations} iterations"
        )

    return Summary(
        mean=Result(run_time_ns=int(mean_ns(results)), iterations=iterations),
        median=Result(run_time_ns=int(median_ns(results)), iterations=iterations),
        stddev=Result(run_time_ns=int(stddev_ns(results)), iterations=iterations),
    )
