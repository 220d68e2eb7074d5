"""Throughput benchmarks for storage drivers.

Benchmarks share the conformance suite's discipline: everything is written
below a random parent directory, removed through its top-level segment, and
the root must be empty when a benchmark finishes. Results are only checked
for basic success, not correctness.
"""

import io
import logging
import time
from contextlib import closing
from typing import Callable, Dict, Iterable, List, Optional

from pydantic import BaseModel, computed_field
from rich.table import Table

from ..base import StorageDriver
from ..paths import first_part, join
from ..utils import humanize_rate, humanize_size
from .generators import ContentGenerator
from .suite import assert_root_empty, delete_quietly

logger = logging.getLogger(__name__)

KiB = 1024
MiB = 1024 * KiB
GiB = 1024 * MiB

CATEGORIES = ("put_get", "stream", "list", "delete")

DEFAULT_SIZES: Dict[str, List[int]] = {
    "put_get": [0, KiB, MiB, GiB],
    "stream": [0, KiB, MiB, GiB],
    "list": [5, 50],
    "delete": [5, 50],
}


class BenchmarkResult(BaseModel):
    """Timing for one benchmark case."""
    name: str
    category: str
    size: int                   # payload bytes, or file count for list/delete
    iterations: int
    elapsed: float              # seconds spent in the measured operations
    bytes_per_op: int = 0

    @computed_field
    @property
    def ops_per_second(self) -> float:
        return self.iterations / self.elapsed if self.elapsed > 0 else 0.0

    @computed_field
    @property
    def bytes_per_second(self) -> float:
        if self.elapsed <= 0:
            return 0.0
        return self.bytes_per_op * self.iterations / self.elapsed


class BenchmarkRunner:
    """
    Runs benchmark cases against one driver instance.

    Args:
        driver: Driver under test
        generator: Random source for paths and payloads
        iterations: Measured repetitions per case
    """

    def __init__(
        self,
        driver: StorageDriver,
        generator: Optional[ContentGenerator] = None,
        iterations: int = 10,
    ):
        if iterations < 1:
            raise ValueError("iterations must be at least 1")
        self.driver = driver
        self.generator = generator or ContentGenerator()
        self.iterations = iterations

    def put_get(self, size: int) -> BenchmarkResult:
        """put_content followed by get_content of ``size`` bytes."""
        parent = self.generator.path(8)
        elapsed = 0.0
        try:
            for _ in range(self.iterations):
                filename = join(parent, self.generator.path(32))
                contents = self.generator.contents(size)
                start = time.perf_counter()
                self.driver.put_content(filename, contents)
                received = self.driver.get_content(filename)
                elapsed += time.perf_counter() - start
                if len(received) != size:
                    raise AssertionError(f"read {len(received)} bytes back, wrote {size}")
        finally:
            delete_quietly(self.driver, first_part(parent))
        return self._result("put_get", size, elapsed, bytes_per_op=size)

    def stream(self, size: int) -> BenchmarkResult:
        """write_stream of ``size`` bytes followed by opening a read stream."""
        parent = self.generator.path(8)
        elapsed = 0.0
        try:
            for _ in range(self.iterations):
                filename = join(parent, self.generator.path(32))
                source = self.generator.reader(size) if size else io.BytesIO()
                start = time.perf_counter()
                written = self.driver.write_stream(filename, 0, source)
                with closing(self.driver.read_stream(filename, 0)):
                    pass
                elapsed += time.perf_counter() - start
                if written != size:
                    raise AssertionError(f"wrote {written} bytes, expected {size}")
        finally:
            delete_quietly(self.driver, first_part(parent))
        return self._result("stream", size, elapsed, bytes_per_op=size)

    def list_files(self, count: int) -> BenchmarkResult:
        """list of a directory holding ``count`` empty files."""
        parent = self.generator.path(8)
        elapsed = 0.0
        try:
            for _ in range(count):
                self.driver.put_content(join(parent, self.generator.path(32)), b"")
            for _ in range(self.iterations):
                start = time.perf_counter()
                files = self.driver.list(parent)
                elapsed += time.perf_counter() - start
                if len(files) != count:
                    raise AssertionError(f"listed {len(files)} entries, expected {count}")
        finally:
            delete_quietly(self.driver, first_part(parent))
        return self._result("list", count, elapsed)

    def delete_files(self, count: int) -> BenchmarkResult:
        """Recursive delete of a directory holding ``count`` empty files."""
        elapsed = 0.0
        for _ in range(self.iterations):
            parent = self.generator.path(8)
            try:
                for _ in range(count):
                    self.driver.put_content(join(parent, self.generator.path(32)), b"")
                start = time.perf_counter()
                self.driver.delete(first_part(parent))
                elapsed += time.perf_counter() - start
            finally:
                delete_quietly(self.driver, first_part(parent))
        return self._result("delete", count, elapsed)

    def run(
        self,
        categories: Iterable[str] = CATEGORIES,
        sizes: Optional[Dict[str, List[int]]] = None,
        on_result: Optional[Callable[[BenchmarkResult], None]] = None,
    ) -> List[BenchmarkResult]:
        """
        Run a benchmark matrix.

        Args:
            categories: Subset of CATEGORIES
            sizes: Per-category payload sizes / file counts (DEFAULT_SIZES)
            on_result: Called after each case, e.g. for progress output

        Returns:
            One result per case, in run order

        Raises:
            ValueError: For an unknown category
            LeakedStateError: If the root is not empty afterwards
        """
        sizes = sizes or DEFAULT_SIZES
        cases = {
            "put_get": self.put_get,
            "stream": self.stream,
            "list": self.list_files,
            "delete": self.delete_files,
        }
        results = []
        for category in categories:
            if category not in cases:
                raise ValueError(f"Unknown benchmark category '{category}'. Choose from {', '.join(CATEGORIES)}")
            for size in sizes.get(category, DEFAULT_SIZES[category]):
                result = cases[category](size)
                logger.info(
                    "%s: %.1f ops/s, %s", result.name, result.ops_per_second,
                    humanize_rate(result.bytes_per_second),
                )
                results.append(result)
                if on_result is not None:
                    on_result(result)
        assert_root_empty(self.driver)
        return results

    def _result(self, category: str, size: int, elapsed: float, bytes_per_op: int = 0) -> BenchmarkResult:
        label = humanize_size(size) if category in ("put_get", "stream") else f"{size} files"
        return BenchmarkResult(
            name=f"{self.driver.name}/{category}/{label}",
            category=category,
            size=size,
            iterations=self.iterations,
            elapsed=elapsed,
            bytes_per_op=bytes_per_op,
        )


def render_results(results: List[BenchmarkResult], title: str = "Storage driver benchmarks") -> Table:
    """Build a rich table of benchmark results."""
    table = Table(title=title)
    table.add_column("Benchmark", style="cyan")
    table.add_column("Iterations", justify="right")
    table.add_column("Elapsed", justify="right")
    table.add_column("Ops/s", justify="right")
    table.add_column("Throughput", justify="right", style="green")

    for result in results:
        throughput = humanize_rate(result.bytes_per_second) if result.bytes_per_op else "-"
        table.add_row(
            result.name,
            str(result.iterations),
            f"{result.elapsed:.3f}s",
            f"{result.ops_per_second:.1f}",
            throughput,
        )
    return table
