"""Benchmarked units.

A unit exposes ``operate`` (required) plus optional ``construct``, ``setup``
and ``teardown`` hooks. The runner calls them as:

    construct()                      once per execute
    setup()                          once per repetition
    operate() x iterations           inside the timed block
    teardown()                       once per repetition

Two forms are supported:
- Stateful: subclass ``Benchmark`` and keep state on ``self``, or hand a
  state factory to ``StatefulBenchmark``.
- Stateless: wrap a zero-argument function in ``StatelessBenchmark``.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from beartype import beartype


class Benchmark(ABC):
    """Base class for benchmarked units.

    Only ``operate`` must be implemented; the lifecycle hooks default to
    no-ops. Any hook may raise to abort the run.

    Example:
        class DictLookup(Benchmark):
            def setup(self) -> None:
                self.table = {i: i for i in range(1024)}

            def operate(self) -> None:
                self.table[512]
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    def construct(self) -> None:
        """Called once before the first repetition."""

    def setup(self) -> None:
        """Called at the start of every repetition, outside the timed block."""

    @abstractmethod
    def operate(self) -> None:
        """One iteration of the work being measured."""

    def teardown(self) -> None:
        """Called at the end of every repetition, outside the timed block."""


class StatelessBenchmark(Benchmark):
    """Unit wrapping a free function that takes no arguments.

    Suited to measuring the raw cost of a single call where no operands need
    preparing. Hooks are optional zero-argument callables.

    Example:
        unit = StatelessBenchmark(time.monotonic_ns)
    """

    @beartype
    def __init__(
        self,
        operation: Callable[[], Any],
        *,
        name: str | None = None,
        construct: Callable[[], Any] | None = None,
        setup: Callable[[], Any] | None = None,
        teardown: Callable[[], Any] | None = None,
    ) -> None:
        self._name = name or getattr(operation, "__name__", type(self).__name__)
        self._operation = operation
        self._construct = construct
        self._setup = setup
        self._teardown = teardown

    @property
    def name(self) -> str:
        return self._name

    def construct(self) -> None:
        if self._construct is not None:
            self._construct()

    def setup(self) -> None:
        if self._setup is not None:
            self._setup()

    def operate(self) -> None:
        self._operation()

    def teardown(self) -> None:
        if self._teardown is not None:
            self._teardown()


class StatefulBenchmark(Benchmark):
    """Unit whose operation works on state built once by a factory.

    ``factory`` runs as the construct hook. ``operation``, ``setup`` and
    ``teardown`` each receive the state it returned.

    Example:
        unit = StatefulBenchmark(
            factory=lambda: [0] * 64,
            operation=lambda buf: buf.reverse(),
            name="list_reverse",
        )
    """

    @beartype
    def __init__(
        self,
        factory: Callable[[], Any],
        operation: Callable[[Any], Any],
        *,
        name: str | None = None,
        setup: Callable[[Any], Any] | None = None,
        teardown: Callable[[Any], Any] | None = None,
    ) -> None:
        self._name = name or getattr(operation, "__name__", type(self).__name__)
        self._factory = factory
        self._operation = operation
        self._setup = setup
        self._teardown = teardown
        self.state: Any = None

    @property
    def name(self) -> str:
        return self._name

    def construct(self) -> None:
        self.state = self._factory()

    def setup(self) -> None:
        if self._setup is not None:
            self._setup(self.state)

    def operate(self) -> None:
        self._operation(self.state)

    def teardown(self) -> None:
        if self._teardown is not None:
            self._teardown(self.state)
