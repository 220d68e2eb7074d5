"""Conformance suite for storage drivers.

Any driver package can reuse the suite by subclassing DriverSuite in a test
module (or calling make_suite) and supplying a zero-argument constructor:

    class TestMyDriver(DriverSuite):
        constructor = staticmethod(lambda: MyDriver())

One driver instance is built per test class and shared by every scenario.
After each scenario the root listing must be empty again; a driver that
leaks entries aborts the whole run.
"""

import contextlib
import hashlib
import io
import logging
import tempfile
import time
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator, Optional, Type

import pytest

from ..base import StorageDriver, url_for
from ..config import SuiteSettings
from ..context import RequestContext
from ..errors import (
    DriverError,
    InvalidOffsetError,
    InvalidPathError,
    LeakedStateError,
    PathNotFoundError,
    RequestCancelledError,
    UnsupportedMethodError,
)
from ..paths import ROOT, first_part, join
from .generators import ContentGenerator, HashingReader

logger = logging.getLogger(__name__)

DriverConstructor = Callable[[], StorageDriver]
DriverTeardown = Callable[[], None]
SkipCheck = Callable[[], str]

VALID_PATHS = [
    "/a",
    "/2",
    "/aa",
    "/a.a",
    "/0-9/abcdefg",
    "/abcdefg/z.75",
    "/abc/1.2.3.4.5-6_zyx/123.z/4",
    "/docker/docker-registry",
    "/123.abc",
    "/abc./abc",
    "/.abc",
    "/a--b",
    "/a-.b",
    "/_.abc",
    "/Docker/docker-registry",
    "/Abc/Cba",
]

INVALID_PATHS = [
    "",
    "/",
    "abc",
    "123.abc",
    "//bcd",
    "/abc_123/",
]

# (id, content factory) pairs for the write/read equivalence scenarios
CONTENT_CASES = [
    ("one-byte", lambda rand: b"a"),
    ("unicode", lambda rand: b"\xc3\x9f"),
    ("small", lambda rand: rand.contents(32)),
    ("one-mib", lambda rand: rand.contents(1024 * 1024)),
    ("non-utf8", lambda rand: b"\x80\x80\x80\x80"),
]


def never_skip() -> str:
    """Default skip check: always run."""
    return ""


def assert_root_empty(driver: StorageDriver) -> None:
    """
    Check that nothing is left at the driver root.

    Raises:
        LeakedStateError: If the root listing is not empty
    """
    leftover = driver.list(ROOT)
    if leftover:
        raise LeakedStateError(driver.name, leftover)


def delete_quietly(driver: StorageDriver, path: str) -> None:
    """Best-effort delete; a path that is already gone is fine."""
    try:
        driver.delete(path)
    except PathNotFoundError:
        pass


@contextlib.contextmanager
def cleanup(driver: StorageDriver, *paths: str) -> Iterator[None]:
    """Delete the top-level segment of every path when the block exits."""
    try:
        yield
    finally:
        for top in dict.fromkeys(first_part(p) for p in paths):
            delete_quietly(driver, top)


def read_all(driver: StorageDriver, path: str, offset: int = 0, ctx: Optional[RequestContext] = None) -> bytes:
    with contextlib.closing(driver.read_stream(path, offset, ctx=ctx)) as reader:
        return reader.read()


def assert_driver_error(excinfo, error_type: Type[DriverError], driver: StorageDriver) -> None:
    """Error has the expected type and names the driver that raised it."""
    assert isinstance(excinfo.value, error_type), (
        f"expected {error_type.__name__}, got {type(excinfo.value).__name__}: {excinfo.value}"
    )
    assert driver.name in str(excinfo.value)


class _CancellingReader:
    """Source that cancels ``ctx`` after handing out its first piece."""

    def __init__(self, ctx: RequestContext, piece: bytes, pieces: int):
        self._ctx = ctx
        self._piece = piece
        self._left = pieces

    def read(self, size: int = -1) -> bytes:
        if self._left <= 0:
            return b""
        self._left -= 1
        data = self._piece if size is None or size < 0 else self._piece[:size]
        self._ctx.cancel("cancelled by test source")
        return data


class DriverSuite:
    """
    Behavioral contract for StorageDriver implementations.

    Subclasses provide ``constructor`` (and optionally ``driver_teardown``,
    ``skip_check`` and ``settings``) as static attributes. The teardown hook
    is not named ``teardown``: pytest runs a method of that name after every
    test.
    """

    constructor: Optional[DriverConstructor] = None
    driver_teardown: Optional[DriverTeardown] = None
    skip_check: SkipCheck = staticmethod(never_skip)
    settings: SuiteSettings = SuiteSettings()

    # -- lifecycle ---------------------------------------------------------

    @pytest.fixture(scope="class")
    def driver(self):
        """One driver per test class; teardown runs once after all scenarios."""
        reason = type(self).skip_check()
        if reason:
            pytest.skip(reason)
        constructor = type(self).constructor
        if constructor is None:
            pytest.fail(f"{type(self).__name__} does not define a driver constructor")

        driver = constructor()
        logger.info("Running storage driver suite against %s", driver.name)
        yield driver

        teardown = type(self).driver_teardown
        if teardown is not None:
            teardown()

    @pytest.fixture(scope="class")
    def suite_settings(self, request) -> SuiteSettings:
        short = request.config.getoption("storagedriver_short", default=False)
        return type(self).settings.effective(short=bool(short))

    @pytest.fixture(autouse=True)
    def _root_stays_clean(self, driver):
        yield
        try:
            assert_root_empty(driver)
        except LeakedStateError as e:
            pytest.exit(str(e), returncode=1)

    @pytest.fixture
    def rand(self, request) -> ContentGenerator:
        generator = ContentGenerator()
        logger.info("%s: random seed %d", request.node.nodeid, generator.seed)
        return generator

    # -- path grammar ------------------------------------------------------

    def test_root_exists(self, driver):
        """The root path always exists, even when empty."""
        assert isinstance(driver.list(ROOT), list)

    def test_valid_paths(self, driver, rand):
        contents = rand.contents(64)
        for filename in VALID_PATHS:
            with cleanup(driver, filename):
                driver.put_content(filename, contents)
                assert driver.get_content(filename) == contents

    def test_invalid_paths(self, driver, rand):
        contents = rand.contents(64)
        for filename in INVALID_PATHS:
            with pytest.raises(InvalidPathError) as exc:
                driver.put_content(filename, contents)
            assert_driver_error(exc, InvalidPathError, driver)

            with pytest.raises(InvalidPathError) as exc:
                driver.get_content(filename)
            assert_driver_error(exc, InvalidPathError, driver)

            with pytest.raises(InvalidPathError) as exc:
                driver.stat(filename)
            assert_driver_error(exc, InvalidPathError, driver)

    # -- write/read equivalence --------------------------------------------

    @pytest.mark.parametrize("make_contents", [c for _, c in CONTENT_CASES], ids=[i for i, _ in CONTENT_CASES])
    def test_write_read(self, driver, rand, make_contents):
        self._write_read_compare(driver, rand.path(32), make_contents(rand))

    @pytest.mark.parametrize("make_contents", [c for _, c in CONTENT_CASES], ids=[i for i, _ in CONTENT_CASES])
    def test_write_read_streams(self, driver, rand, make_contents):
        self._write_read_compare_streams(driver, rand.path(32), make_contents(rand))

    def test_write_read_large_stream(self, driver, rand, suite_settings):
        """A multi-gigabyte stream round-trips with an identical digest."""
        if suite_settings.short:
            pytest.skip("Skipping test in short mode")

        filename = rand.path(32)
        size = suite_settings.large_stream_size
        with cleanup(driver, filename):
            source = HashingReader(rand.reader(size), hashlib.sha256())
            written = driver.write_stream(filename, 0, source)
            assert written == size

            stored = hashlib.sha256()
            with contextlib.closing(driver.read_stream(filename, 0)) as reader:
                for chunk in iter(lambda: reader.read(1024 * 1024), b""):
                    stored.update(chunk)
            assert stored.hexdigest() == source.hasher.hexdigest()

    def test_truncate(self, driver, rand):
        """Shorter content after longer content leaves no excess."""
        filename = rand.path(32)
        self._write_read_compare(driver, filename, rand.contents(1024 * 1024))
        self._write_read_compare(driver, filename, rand.contents(1024))

    def test_read_nonexistent(self, driver, rand):
        with pytest.raises(PathNotFoundError) as exc:
            driver.get_content(rand.path(32))
        assert_driver_error(exc, PathNotFoundError, driver)

    def test_read_nonexistent_stream(self, driver, rand):
        filename = rand.path(32)
        for offset in (0, 64):
            with pytest.raises(PathNotFoundError) as exc:
                driver.read_stream(filename, offset)
            assert_driver_error(exc, PathNotFoundError, driver)

    # -- offsets -----------------------------------------------------------

    def test_read_stream_with_offset(self, driver, rand):
        filename = rand.path(32)
        chunk_size = 32
        chunk1 = rand.contents(chunk_size)
        chunk2 = rand.contents(chunk_size)
        chunk3 = rand.contents(chunk_size)

        with cleanup(driver, filename):
            driver.put_content(filename, chunk1 + chunk2 + chunk3)

            assert read_all(driver, filename, 0) == chunk1 + chunk2 + chunk3
            assert read_all(driver, filename, chunk_size) == chunk2 + chunk3
            assert read_all(driver, filename, chunk_size * 2) == chunk3

            with pytest.raises(InvalidOffsetError) as exc:
                driver.read_stream(filename, -1)
            assert_driver_error(exc, InvalidOffsetError, driver)
            assert exc.value.offset == -1
            assert exc.value.path == filename

            # Past the end: zero bytes and EOF, not an error
            with contextlib.closing(driver.read_stream(filename, chunk_size * 3)) as reader:
                assert reader.read(chunk_size) == b""

            # One byte before the end: that byte, then EOF (possibly on the same read)
            with contextlib.closing(driver.read_stream(filename, chunk_size * 3 - 1)) as reader:
                assert reader.read(chunk_size) == chunk3[-1:]
                assert reader.read(chunk_size) == b""
                assert reader.read(chunk_size) == b""

    def test_continue_stream_append_small(self, driver, rand, suite_settings):
        """Resumable append with tiny chunks (corner cases for cloud drivers)."""
        self._continue_stream_append(driver, rand, min(suite_settings.append_chunk_sizes))

    def test_continue_stream_append_large(self, driver, rand, suite_settings):
        self._continue_stream_append(driver, rand, max(suite_settings.append_chunk_sizes))

    def test_write_stream_fills_gap_with_zeros(self, driver, rand):
        filename = rand.path(32)
        with cleanup(driver, filename):
            assert driver.write_stream(filename, 0, _bytes_reader(b"AAAA")) == 4
            assert driver.write_stream(filename, 8, _bytes_reader(b"BBBB")) == 4
            assert driver.get_content(filename) == b"AAAA\x00\x00\x00\x00BBBB"
            assert driver.stat(filename).size == 12

    # -- listing -----------------------------------------------------------

    def test_list(self, driver, rand, suite_settings):
        root_directory = "/" + rand.filename(rand.randint(8, 15))
        parent_directory = join(root_directory, rand.filename(rand.randint(8, 15)))

        with cleanup(driver, root_directory):
            child_files = set()
            while len(child_files) < suite_settings.list_children:
                child_files.add(join(parent_directory, rand.filename(rand.randint(8, 15))))
            for child in child_files:
                driver.put_content(child, rand.contents(32))

            assert sorted(driver.list(ROOT)) == [root_directory]
            assert sorted(driver.list(root_directory)) == [parent_directory]
            keys = sorted(driver.list(parent_directory))
            assert keys == sorted(child_files)
            assert all(key.startswith("/") for key in keys)

    # -- move --------------------------------------------------------------

    def test_move(self, driver, rand):
        contents = rand.contents(32)
        source_path = rand.path(32)
        dest_path = rand.path(32)

        with cleanup(driver, source_path, dest_path):
            driver.put_content(source_path, contents)
            driver.move(source_path, dest_path)

            assert driver.get_content(dest_path) == contents
            with pytest.raises(PathNotFoundError) as exc:
                driver.get_content(source_path)
            assert_driver_error(exc, PathNotFoundError, driver)

    def test_move_overwrite(self, driver, rand):
        source_path = rand.path(32)
        dest_path = rand.path(32)
        source_contents = rand.contents(32)
        dest_contents = rand.contents(64)

        with cleanup(driver, source_path, dest_path):
            driver.put_content(source_path, source_contents)
            driver.put_content(dest_path, dest_contents)
            driver.move(source_path, dest_path)

            assert driver.get_content(dest_path) == source_contents
            with pytest.raises(PathNotFoundError) as exc:
                driver.get_content(source_path)
            assert_driver_error(exc, PathNotFoundError, driver)

    def test_move_nonexistent(self, driver, rand):
        """A failed move leaves the destination untouched."""
        contents = rand.contents(32)
        source_path = rand.path(32)
        dest_path = rand.path(32)

        with cleanup(driver, dest_path):
            driver.put_content(dest_path, contents)

            with pytest.raises(PathNotFoundError) as exc:
                driver.move(source_path, dest_path)
            assert_driver_error(exc, PathNotFoundError, driver)

            assert driver.get_content(dest_path) == contents

    def test_move_invalid(self, driver, rand):
        """Content cannot be moved beneath a plain content entry."""
        not_a_dir = "/" + rand.filename(16)
        source_path = rand.path(32)

        with cleanup(driver, not_a_dir, source_path):
            driver.put_content(not_a_dir, rand.contents(32))

            with pytest.raises(DriverError):
                driver.move(join(not_a_dir, "foo"), join(not_a_dir, "bar"))

            driver.put_content(source_path, rand.contents(32))
            with pytest.raises(DriverError) as exc:
                driver.move(source_path, join(not_a_dir, "bar"))
            assert driver.name in str(exc.value)

    # -- delete ------------------------------------------------------------

    def test_delete(self, driver, rand):
        filename = rand.path(32)
        with cleanup(driver, filename):
            driver.put_content(filename, rand.contents(32))
            driver.delete(filename)

            with pytest.raises(PathNotFoundError) as exc:
                driver.get_content(filename)
            assert_driver_error(exc, PathNotFoundError, driver)

    def test_delete_nonexistent(self, driver, rand):
        with pytest.raises(PathNotFoundError) as exc:
            driver.delete(rand.path(32))
        assert_driver_error(exc, PathNotFoundError, driver)

    def test_delete_folder(self, driver, rand):
        dirname = rand.path(32)
        filenames = [join(dirname, rand.path(32)) for _ in range(3)]
        contents = rand.contents(32)

        with cleanup(driver, dirname):
            for filename in filenames:
                driver.put_content(filename, contents)

            driver.delete(filenames[0])
            with pytest.raises(PathNotFoundError) as exc:
                driver.get_content(filenames[0])
            assert_driver_error(exc, PathNotFoundError, driver)
            assert driver.get_content(filenames[1]) == contents
            assert driver.get_content(filenames[2]) == contents

            driver.delete(dirname)
            for filename in filenames:
                with pytest.raises(PathNotFoundError) as exc:
                    driver.get_content(filename)
                assert_driver_error(exc, PathNotFoundError, driver)

    # -- optional URL capability -------------------------------------------

    def test_url_for(self, driver, rand):
        """Checked only when the driver provides URLs."""
        filename = rand.path(32)
        contents = rand.contents(32)

        with cleanup(driver, filename):
            driver.put_content(filename, contents)

            try:
                url = url_for(driver, filename)
            except UnsupportedMethodError:
                return
            with urllib.request.urlopen(url, timeout=30) as response:
                assert response.read() == contents

            try:
                url = url_for(driver, filename, {"method": "HEAD"})
            except UnsupportedMethodError:
                return
            request = urllib.request.Request(url, method="HEAD")
            with urllib.request.urlopen(request, timeout=30) as response:
                # file:// responses carry no status code
                assert getattr(response, "status", None) in (None, 200)
                assert int(response.headers["Content-Length"]) == len(contents)

    # -- stat --------------------------------------------------------------

    def test_stat_call(self, driver, rand, suite_settings):
        content = rand.contents(4096)
        dir_path = rand.path(32)
        file_path = join(dir_path, rand.filename(32))

        with cleanup(driver, dir_path):
            # Neither the directory nor the file exist yet
            for missing in (dir_path, file_path):
                with pytest.raises(PathNotFoundError) as exc:
                    driver.stat(missing)
                assert_driver_error(exc, PathNotFoundError, driver)

            driver.put_content(file_path, content)
            fi = driver.stat(file_path)
            assert fi.path == file_path
            assert fi.size == len(content)
            assert fi.is_dir is False
            assert fi.mod_time is not None
            created_time = fi.mod_time

            time.sleep(suite_settings.modtime_delay)
            driver.put_content(file_path, rand.contents(4096))

            # Tolerate a bounded propagation delay on eventually consistent backends
            deadline = time.monotonic() + suite_settings.propagation_delay
            fi = driver.stat(file_path)
            while fi.mod_time <= created_time and time.monotonic() < deadline:
                time.sleep(min(0.5, suite_settings.propagation_delay))
                fi = driver.stat(file_path)
            assert fi.mod_time > created_time, (
                f"modtime ({fi.mod_time}) is not after the creation time ({created_time})"
            )

            # Directories need not report a meaningful modtime
            fi = driver.stat(dir_path)
            assert fi.path == dir_path
            assert fi.size == 0
            assert fi.is_dir is True

    def test_put_content_multiple_times(self, driver, rand):
        """A second put replaces the content instead of writing at offset 0."""
        filename = rand.path(32)
        with cleanup(driver, filename):
            driver.put_content(filename, rand.contents(4096))
            contents = rand.contents(2048)
            driver.put_content(filename, contents)
            assert driver.get_content(filename) == contents

    # -- concurrency -------------------------------------------------------

    def test_concurrent_stream_reads(self, driver, rand, suite_settings):
        """Readers at random offsets of one object all see the right suffix."""
        filename = rand.path(32)
        contents = rand.contents(suite_settings.concurrent_read_size)
        readers = suite_settings.concurrent_readers

        def read_contents(offset: int) -> None:
            assert read_all(driver, filename, offset) == contents[offset:]

        with cleanup(driver, filename):
            driver.put_content(filename, contents)
            offsets = [rand.offset(len(contents)) for _ in range(readers)]
            with ThreadPoolExecutor(max_workers=readers) as executor:
                futures = [executor.submit(read_contents, offset) for offset in offsets]
                for future in futures:
                    future.result()

    def test_concurrent_file_streams(self, driver, rand, suite_settings):
        """Real file objects can be streamed concurrently without hanging."""
        streams = suite_settings.concurrent_streams
        size = suite_settings.concurrent_stream_size

        with ThreadPoolExecutor(max_workers=streams) as executor:
            futures = [executor.submit(self._file_stream, driver, rand, size) for _ in range(streams)]
            for future in futures:
                future.result()

    def test_eventual_consistency(self, driver, rand, suite_settings):
        """Once stat reports a write, reading at its offset returns the write."""
        if suite_settings.short:
            pytest.skip("Skipping test in short mode")

        filename = rand.path(32)
        chunk_size = suite_settings.consistency_chunk_size
        iterations = suite_settings.consistency_iterations
        offset = 0
        misswrites = 0

        with cleanup(driver, filename):
            for _ in range(iterations):
                contents = rand.contents(chunk_size)
                read = driver.write_stream(filename, offset, _bytes_reader(contents))

                fi = driver.stat(filename)
                if fi.size == offset + chunk_size:
                    assert read_all(driver, filename, offset) == contents
                    offset += read
                else:
                    misswrites += 1

        if misswrites > 0:
            logger.warning(
                "There were %d occurrences of a write not being instantly available.", misswrites
            )
        assert misswrites != iterations, "no write ever became visible; the scenario itself is broken"

    # -- cancellation ------------------------------------------------------

    def test_cancelled_context(self, driver, rand):
        """Operations under a cancelled context fail instead of proceeding."""
        filename = rand.path(32)
        ctx = RequestContext()
        ctx.cancel()

        with pytest.raises(RequestCancelledError):
            driver.put_content(filename, rand.contents(32), ctx=ctx)
        with pytest.raises(RequestCancelledError):
            driver.get_content(filename, ctx=ctx)

        expired = RequestContext(timeout=0)
        with pytest.raises(RequestCancelledError):
            driver.stat(filename, ctx=expired)

    def test_cancel_interrupts_stream_write(self, driver, rand):
        filename = rand.path(32)
        ctx = RequestContext()
        source = _CancellingReader(ctx, rand.contents(64 * 1024), pieces=64)

        with cleanup(driver, filename):
            with pytest.raises(RequestCancelledError):
                driver.write_stream(filename, 0, source, ctx=ctx)

    def test_cancel_interrupts_stream_read(self, driver, rand):
        filename = rand.path(32)
        contents = rand.contents(1024)
        ctx = RequestContext()

        with cleanup(driver, filename):
            driver.put_content(filename, contents)
            with contextlib.closing(driver.read_stream(filename, 0, ctx=ctx)) as reader:
                assert reader.read(16) == contents[:16]
                ctx.cancel()
                with pytest.raises(RequestCancelledError):
                    reader.read(16)

    # -- helpers -----------------------------------------------------------

    def _write_read_compare(self, driver, filename: str, contents: bytes) -> None:
        with cleanup(driver, filename):
            driver.put_content(filename, contents)
            assert driver.get_content(filename) == contents

    def _write_read_compare_streams(self, driver, filename: str, contents: bytes) -> None:
        with cleanup(driver, filename):
            written = driver.write_stream(filename, 0, _bytes_reader(contents))
            assert written == len(contents)
            assert read_all(driver, filename) == contents

    def _continue_stream_append(self, driver, rand, chunk_size: int) -> None:
        filename = rand.path(32)
        chunk1 = rand.contents(chunk_size)
        chunk2 = rand.contents(chunk_size)
        chunk3 = rand.contents(chunk_size)
        chunk4 = rand.contents(chunk_size)
        zero_chunk = bytes(chunk_size)
        full_contents = chunk1 + chunk2 + chunk3

        with cleanup(driver, filename):
            assert driver.write_stream(filename, 0, _bytes_reader(chunk1)) == chunk_size
            fi = driver.stat(filename)
            assert fi.size == chunk_size

            assert driver.write_stream(filename, fi.size, _bytes_reader(chunk2)) == chunk_size
            fi = driver.stat(filename)
            assert fi.size == 2 * chunk_size

            # Re-writing the last chunk changes nothing
            assert driver.write_stream(filename, fi.size - chunk_size, _bytes_reader(chunk2)) == chunk_size
            fi = driver.stat(filename)
            assert fi.size == 2 * chunk_size

            rest = full_contents[fi.size:]
            assert driver.write_stream(filename, fi.size, _bytes_reader(rest)) == len(rest)
            assert driver.get_content(filename) == full_contents

            # Writing one chunk past the end extends the content with zeros
            full_contents += zero_chunk + chunk4
            written = driver.write_stream(filename, len(full_contents) - chunk_size, _bytes_reader(chunk4))
            assert written == chunk_size

            fi = driver.stat(filename)
            assert fi.size == len(full_contents)
            received = driver.get_content(filename)
            assert len(received) == len(full_contents)
            assert received[chunk_size * 3:chunk_size * 4] == zero_chunk
            assert received[chunk_size * 4:chunk_size * 5] == chunk4
            assert received == full_contents

            with pytest.raises(InvalidOffsetError) as exc:
                driver.write_stream(filename, -1, _bytes_reader(zero_chunk))
            assert_driver_error(exc, InvalidOffsetError, driver)
            assert exc.value.path == filename
            assert exc.value.offset == -1

    def _file_stream(self, driver, rand, size: int) -> None:
        filename = rand.path(32)
        contents = rand.contents(size)

        with cleanup(driver, filename), tempfile.TemporaryFile() as tf:
            tf.write(contents)
            tf.flush()
            tf.seek(0)

            assert driver.write_stream(filename, 0, tf) == size
            assert read_all(driver, filename) == contents


def _bytes_reader(data: bytes) -> io.BytesIO:
    return io.BytesIO(data)


def make_suite(
    constructor: DriverConstructor,
    skip_check: SkipCheck = never_skip,
    teardown: Optional[DriverTeardown] = None,
    settings: Optional[SuiteSettings] = None,
    name: str = "TestStorageDriver",
) -> type:
    """
    Build a DriverSuite subclass for a driver constructor.

    Bind the result to a ``Test*`` name in a test module so pytest collects it:

        TestFilesystem = make_suite(lambda: FilesystemDriver(root), teardown=cleanup_root)
    """
    attrs = {
        "constructor": staticmethod(constructor),
        "skip_check": staticmethod(skip_check),
        "driver_teardown": staticmethod(teardown) if teardown is not None else None,
        "settings": settings or SuiteSettings(),
        "__module__": getattr(constructor, "__module__", __name__),
    }
    return type(name, (DriverSuite,), attrs)
