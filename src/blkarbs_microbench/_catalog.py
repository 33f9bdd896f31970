"""Built-in example benchmarks, registered on ``default_registry``."""

import itertools
import random
import threading
import time

from blkarbs_microbench._registry import BenchmarkRegistry
from blkarbs_microbench._unit import Benchmark, StatefulBenchmark, StatelessBenchmark

default_registry = BenchmarkRegistry()


class IntegerAdd(Benchmark):
    """Add two random 64-bit operands.

    Operands are drawn fresh every repetition and the sum is checked in
    teardown, so a broken operation fails the run instead of reporting a time.
    """

    def __init__(self) -> None:
        self.a: int = 0
        self.b: int = 0
        self.r: int = 0

    @property
    def name(self) -> str:
        return "integer_add"

    def setup(self) -> None:
        rng = random.Random(time.perf_counter_ns())
        self.a = rng.getrandbits(64)
        self.b = rng.getrandbits(64)

    def operate(self) -> None:
        self.r = self.a + self.b

    def teardown(self) -> None:
        if self.r != self.a + self.b:
            raise ValueError(f"Sum mismatch: {self.a} + {self.b} != {self.r}")


def noop() -> None:
    """Does nothing; measures bare call overhead."""


default_registry.register("integer_add", IntegerAdd)
default_registry.register("noop", lambda: StatelessBenchmark(noop))


@default_registry.benchmark()
def lock_acquire_release() -> Benchmark:
    lock = threading.Lock()

    def round_trip() -> None:
        lock.acquire()
        lock.release()

    return StatelessBenchmark(round_trip, name="lock_acquire_release")


@default_registry.benchmark()
def counter_increment() -> Benchmark:
    return StatefulBenchmark(itertools.count, next, name="counter_increment")
