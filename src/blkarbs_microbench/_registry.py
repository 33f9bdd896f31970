"""Name-to-benchmark registry.

Holds factories rather than units so every run starts from fresh state.
"""

from collections.abc import Callable, Iterable

from beartype import beartype

from blkarbs_microbench._result import ResultSet
from blkarbs_microbench._runner import Runner
from blkarbs_microbench._unit import Benchmark

BenchmarkFactory = Callable[[], Benchmark]


class BenchmarkRegistry:
    """Table of named benchmark factories.

    Example:
        registry = BenchmarkRegistry()

        @registry.benchmark("dict_lookup")
        class DictLookup(Benchmark):
            ...

        registry.register("noop", lambda: StatelessBenchmark(lambda: None))
        all_results = registry.run_all(Runner(RunnerConfig(repetitions=5)))

    Design by Contract:
        - names must be non-empty and unique
    """

    def __init__(self) -> None:
        self._factories: dict[str, BenchmarkFactory] = {}

    @beartype
    def register(self, name: str, factory: BenchmarkFactory) -> None:
        assert name, "Benchmark name must be non-empty"
        assert name not in self._factories, f"Benchmark already registered: {name}"
        self._factories[name] = factory

    @beartype
    def benchmark(self, name: str | None = None) -> Callable[[BenchmarkFactory], BenchmarkFactory]:
        """Decorator form of ``register``; defaults to the factory's ``__name__``."""

        def decorator(factory: BenchmarkFactory) -> BenchmarkFactory:
            self.register(name or factory.__name__, factory)
            return factory

        return decorator

    def names(self) -> list[str]:
        return list(self._factories)

    @beartype
    def create(self, name: str) -> Benchmark:
        """Build a fresh unit for ``name``.

        Raises:
            KeyError: if no benchmark is registered under ``name``
        """
        if name not in self._factories:
            raise KeyError(f"Unknown benchmark: {name}")
        return self._factories[name]()

    @beartype
    def run(self, name: str, runner: Runner) -> ResultSet:
        return runner.execute(self.create(name), name=name)

    @beartype
    def run_all(
        self,
        runner: Runner,
        names: Iterable[str] | None = None,
    ) -> dict[str, ResultSet]:
        """Run each named benchmark in turn (all registered ones by default).

        The first failing benchmark aborts the sweep with its BenchmarkError.
        """
        selected = list(names) if names is not None else self.names()
        unknown = [name for name in selected if name not in self._factories]
        if unknown:
            raise KeyError(f"Unknown benchmarks: {', '.join(unknown)}")

        results: dict[str, ResultSet] = {}
        for name in selected:
            results[name] = self.run(name, runner)
        return results

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)
