"""Measurement records.

Design by Contract:
- run_time_ns MUST be >= 0 (crash if negative)
- iterations MUST be >= 0 (crash if negative)
- ResultSet is append-only
"""

from collections import defaultdict
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from beartype import beartype

if TYPE_CHECKING:
    from blkarbs_microbench._stats import Summary


@beartype
@dataclass(frozen=True)
class Result:
    """One timed block: ``iterations`` back-to-back calls took ``run_time_ns``.

    Example:
        result = Result(run_time_ns=1_500_000, iterations=1000)
        print(f"{result.ns_per_op:.3f} ns/op")
    """

    run_time_ns: int
    iterations: int

    def __post_init__(self) -> None:
        assert self.run_time_ns >= 0, f"run_time_ns must be non-negative: {self.run_time_ns}"
        assert self.iterations >= 0, f"iterations must be non-negative: {self.iterations}"

    @property
    def ns_per_op(self) -> float:
        if self.iterations == 0:
            return 0.0
        return self.run_time_ns / self.iterations


class ResultSet(Sequence):
    """Accepted measurements of one benchmark execution, one per repetition.

    Rejected attempts made while searching for a stable iteration count are
    kept apart in ``attempts``, keyed by repetition index, so they never
    leak into the statistics.

    Example:
        results = runner.execute(unit)
        for result in results:
            print(result.iterations, result.run_time_ns)
        print(results.summary().median)
    """

    @beartype
    def __init__(self, name: str) -> None:
        self.name: str = name
        self._results: list[Result] = []
        self._attempts: dict[int, list[Result]] = defaultdict(list)

    @beartype
    def append(self, result: Result) -> None:
        self._results.append(result)

    @beartype
    def record_attempt(self, repetition: int, result: Result) -> None:
        """Record a measurement that fell short of the acceptance criteria."""
        assert repetition >= 0, f"Repetition must be non-negative: {repetition}"
        self._attempts[repetition].append(result)

    @property
    def attempts(self) -> dict[int, tuple[Result, ...]]:
        """Rejected attempts by repetition index (a copy; repetitions without any are absent)."""
        return {repetition: tuple(found) for repetition, found in self._attempts.items()}

    @property
    def results(self) -> tuple[Result, ...]:
        return tuple(self._results)

    @property
    def iterations(self) -> list[int]:
        return [result.iterations for result in self._results]

    def summary(self) -> "Summary":
        """Reduce the accepted results to mean/median/stddev.

        Raises:
            AssertionError: if the set is empty
        """
        from blkarbs_microbench._stats import summarize

        return summarize(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[Result]:
        return iter(self._results)

    def __getitem__(self, index: int) -> Result:
        return self._results[index]

    def __repr__(self) -> str:
        return f"ResultSet(name={self.name!r}, results={self._results!r})"
