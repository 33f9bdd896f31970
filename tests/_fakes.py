"""Deterministic clock and units shared by the test modules."""

from blkarbs_microbench import Benchmark


class FakeClock:
    """Clock that only moves when a unit advances it."""

    def __init__(self) -> None:
        self.now = 0

    def __call__(self) -> int:
        return self.now


class SteppingBenchmark(Benchmark):
    """Each operate call costs exactly ``cost_ns`` on the fake clock."""

    def __init__(self, clock: FakeClock, cost_ns: int) -> None:
        self.clock = clock
        self.cost_ns = cost_ns

    def operate(self) -> None:
        self.clock.now += self.cost_ns


class RecordingBenchmark(Benchmark):
    """Records hook calls and raises from the hooks named in ``fail_on``."""

    def __init__(
        self,
        clock: FakeClock,
        cost_ns: int = 0,
        fail_on: str | None = None,
        fail_after_operates: int = 0,
    ) -> None:
        self.clock = clock
        self.cost_ns = cost_ns
        self.fail_on = fail_on
        self.fail_after_operates = fail_after_operates
        self.events: list[str] = []
        self.operates = 0
        self.error = RuntimeError(f"{fail_on} exploded")

    def construct(self) -> None:
        self.events.append("construct")
        if self.fail_on == "construct":
            raise self.error

    def setup(self) -> None:
        self.events.append("setup")
        if self.fail_on == "setup":
            raise self.error

    def operate(self) -> None:
        if self.fail_on == "operate" and self.operates >= self.fail_after_operates:
            raise self.error
        self.operates += 1
        self.clock.now += self.cost_ns

    def teardown(self) -> None:
        self.events.append("teardown")
        if self.fail_on == "teardown":
            raise self.error
