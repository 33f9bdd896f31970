"""Command-line entry point for the built-in benchmarks.

Usage:
    python -m blkarbs_microbench --list
    python -m blkarbs_microbench integer_add noop -r 10
    python -m blkarbs_microbench --min-runtime-ns 100000000 -l 2
"""

import argparse
import sys
from collections.abc import Sequence

from loguru import logger

from blkarbs_microbench._catalog import default_registry
from blkarbs_microbench._errors import BenchmarkError
from blkarbs_microbench._registry import BenchmarkRegistry
from blkarbs_microbench._runner import Runner, RunnerConfig

EXIT_SUCCESS = 0
EXIT_BENCHMARK_FAILED = 1
EXIT_UNKNOWN_BENCHMARK = 2


def build_parser() -> argparse.ArgumentParser:
    defaults = RunnerConfig()
    parser = argparse.ArgumentParser(
        prog="blkarbs-microbench",
        description="Run registered micro-benchmarks with adaptive iteration counts.",
    )
    parser.add_argument(
        "names",
        nargs="*",
        help="Benchmarks to run (default: all registered)",
    )
    parser.add_argument(
        "--min-runtime-ns",
        type=int,
        default=defaults.min_runtime_ns,
        help=f"Minimum nanoseconds per accepted block (default: {defaults.min_runtime_ns:,})",
    )
    parser.add_argument(
        "--repetitions",
        "-r",
        type=int,
        default=defaults.repetitions,
        help=f"Independent measurements per benchmark (default: {defaults.repetitions})",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=defaults.max_iterations,
        help=f"Iteration ceiling per block (default: {defaults.max_iterations:,})",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        type=int,
        default=1,
        help="0 = silent, 1 = rows and summary, 2 = scaling decisions (default: 1)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List registered benchmarks and exit",
    )
    return parser


def main(
    argv: Sequence[str] | None = None,
    registry: BenchmarkRegistry = default_registry,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        for name in registry.names():
            print(name)
        return EXIT_SUCCESS

    unknown = [name for name in args.names if name not in registry]
    if unknown:
        print(f"Unknown benchmarks: {', '.join(unknown)}", file=sys.stderr)
        return EXIT_UNKNOWN_BENCHMARK

    try:
        config = RunnerConfig(
            min_runtime_ns=args.min_runtime_ns,
            repetitions=args.repetitions,
            max_iterations=args.max_iterations,
            log_level=args.log_level,
        )
    except AssertionError as exc:
        parser.error(str(exc))

    handler_id = logger.add(sys.stderr, format="{message}", level="DEBUG")
    try:
        registry.run_all(Runner(config), args.names or None)
    except BenchmarkError as exc:
        logger.error(str(exc))
        return EXIT_BENCHMARK_FAILED
    finally:
        logger.remove(handler_id)

    return EXIT_SUCCESS


def run() -> None:
    """Console entry point.

    The process belongs to the CLI, so loguru's default timestamped handler is
    dropped and the report table prints through the bare sink ``main`` adds.
    """
    logger.remove()
    sys.exit(main())
