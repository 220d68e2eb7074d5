"""Conformance and benchmark harnesses for storage drivers."""

from .benchmarks import BenchmarkResult, BenchmarkRunner
from .generators import ContentGenerator, HashingReader, RandReader
from .suite import (
    INVALID_PATHS,
    VALID_PATHS,
    DriverSuite,
    assert_root_empty,
    cleanup,
    delete_quietly,
    make_suite,
    never_skip,
)

__all__ = [
    "BenchmarkResult",
    "BenchmarkRunner",
    "ContentGenerator",
    "DriverSuite",
    "HashingReader",
    "INVALID_PATHS",
    "RandReader",
    "VALID_PATHS",
    "assert_root_empty",
    "cleanup",
    "delete_quietly",
    "make_suite",
    "never_skip",
]
