"""Shared test fixtures and utilities."""

import pytest

from storagedriver.config import SuiteSettings
from storagedriver.drivers import FilesystemDriver, InMemoryDriver
from storagedriver.testsuites import ContentGenerator

KiB = 1024
MiB = 1024 * KiB

# Scaled-down suite settings so the reference drivers run the whole
# conformance suite in seconds
FAST_SETTINGS = SuiteSettings(
    large_stream_size=8 * MiB,
    concurrent_read_size=2 * MiB,
    concurrent_readers=8,
    concurrent_streams=4,
    stream_unit=64 * KiB,
    append_chunk_sizes=[32, 256 * KiB],
    modtime_delay=0.1,
    propagation_delay=1.0,
    consistency_iterations=128,
    list_children=20,
)


@pytest.fixture
def memory_driver():
    """Fresh in-memory driver."""
    return InMemoryDriver()


@pytest.fixture
def fs_driver(tmp_path):
    """Filesystem driver rooted in a temp directory."""
    return FilesystemDriver(tmp_path / "storage")


@pytest.fixture(params=["inmemory", "filesystem"])
def any_driver(request, tmp_path):
    """Each reference driver in turn."""
    if request.param == "inmemory":
        return InMemoryDriver()
    return FilesystemDriver(tmp_path / "storage")


@pytest.fixture
def generator():
    """Deterministic content generator."""
    return ContentGenerator(seed=1234)
