"""pytest plugin shipped with storagedriver.

Registered through the ``pytest11`` entry point, so any project that
installs storagedriver can run its DriverSuite subclasses with ``--short``.
"""


def pytest_addoption(parser):
    group = parser.getgroup("storagedriver", "storage driver conformance suite")
    group.addoption(
        "--short",
        action="store_true",
        dest="storagedriver_short",
        default=False,
        help="Shrink concurrency scenarios and skip multi-gigabyte and "
             "eventual-consistency scenarios.",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "benchmark: Storage driver throughput benchmarks"
    )
