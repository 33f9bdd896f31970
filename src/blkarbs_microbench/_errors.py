"""Error taxonomy for benchmark runs.

Every lifecycle hook failure is wrapped in the error matching the hook that
failed. The original exception is kept on ``cause`` and chained as
``__cause__`` so callers can inspect exactly what the unit raised.
"""


class BenchmarkError(Exception):
    """Base class for failures raised by a benchmarked unit's hooks.

    Attributes:
        benchmark: Label of the benchmark that failed
        hook: Lifecycle hook that raised ("construct", "setup", ...)
        cause: The exception raised by the hook
    """

    hook: str = "benchmark"

    def __init__(self, benchmark: str, cause: Exception) -> None:
        super().__init__(f"{self.hook} failed for benchmark '{benchmark}': {cause!r}")
        self.benchmark = benchmark
        self.cause = cause


class ConstructionError(BenchmarkError):
    hook = "construct"


class SetupError(BenchmarkError):
    hook = "setup"


class OperationError(BenchmarkError):
    hook = "operate"


class TeardownError(BenchmarkError):
    hook = "teardown"
