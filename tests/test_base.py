"""Tests for DriverBase: validation, context checks and error translation."""

import errno
import io

import pytest

from storagedriver.base import ContextReader, DriverBase, StorageDriver, url_for
from storagedriver.context import RequestContext
from storagedriver.errors import (
    DeadlineExceededError,
    InvalidOffsetError,
    InvalidPathError,
    PathNotFoundError,
    RequestCancelledError,
    StorageBackendError,
    UnsupportedMethodError,
)


class FailingDriver(DriverBase):
    """Every hook raises the configured exception and records the call."""

    name = "failing"

    def __init__(self, exc=None):
        self.exc = exc
        self.calls = []

    def _hook(self, *args):
        self.calls.append(args)
        if self.exc is not None:
            raise self.exc
        return b""

    def _get_content(self, path, ctx):
        return self._hook("get_content", path)

    def _put_content(self, path, content, ctx):
        self._hook("put_content", path)

    def _read_stream(self, path, offset, ctx):
        self._hook("read_stream", path)
        return io.BytesIO(b"stream data")

    def _list(self, path, ctx):
        self._hook("list", path)
        return []


class TestValidation:

    def test_invalid_path_never_reaches_storage(self):
        driver = FailingDriver()
        with pytest.raises(InvalidPathError) as exc:
            driver.get_content("relative/path")
        assert "failing" in str(exc.value)
        assert driver.calls == []

    def test_negative_offset(self):
        driver = FailingDriver()
        with pytest.raises(InvalidOffsetError) as exc:
            driver.read_stream("/p", -1)
        assert "-1" in str(exc.value)
        assert driver.calls == []

    def test_move_validates_destination(self):
        driver = FailingDriver()
        with pytest.raises(InvalidPathError):
            driver.move("/src", "/dest/")

    def test_list_accepts_root(self):
        driver = FailingDriver()
        assert driver.list("/") == []
        assert driver.calls == [("list", "/")]

    def test_put_rejects_non_bytes(self):
        driver = FailingDriver()
        for content in (5, "text", None):
            with pytest.raises(TypeError):
                driver.put_content("/p", content)
        assert driver.calls == []

    def test_put_accepts_bytes_like(self, memory_driver):
        memory_driver.put_content("/p", bytearray(b"abc"))
        memory_driver.put_content("/q", memoryview(b"xyz"))
        assert memory_driver.get_content("/p") == b"abc"
        assert memory_driver.get_content("/q") == b"xyz"
        memory_driver.delete("/p")
        memory_driver.delete("/q")

    def test_unimplemented_hook(self):
        with pytest.raises(NotImplementedError):
            FailingDriver().stat("/p")


class TestContextChecks:

    def test_cancelled_before_call(self):
        driver = FailingDriver()
        ctx = RequestContext()
        ctx.cancel()
        with pytest.raises(RequestCancelledError):
            driver.put_content("/p", b"x", ctx=ctx)
        assert driver.calls == []

    def test_expired_before_call(self):
        driver = FailingDriver()
        with pytest.raises(DeadlineExceededError):
            driver.get_content("/p", ctx=RequestContext(timeout=0))

    def test_reader_checks_context(self):
        ctx = RequestContext()
        reader = FailingDriver().read_stream("/p", 0, ctx=ctx)
        assert reader.read(6) == b"stream"
        ctx.cancel()
        with pytest.raises(RequestCancelledError):
            reader.read()

    def test_context_reader_close_closes_stream(self):
        stream = io.BytesIO(b"x")
        reader = ContextReader(stream, RequestContext.background())
        reader.close()
        assert stream.closed


class TestErrorTranslation:

    def test_file_not_found(self):
        driver = FailingDriver(FileNotFoundError(errno.ENOENT, "gone"))
        with pytest.raises(PathNotFoundError) as exc:
            driver.get_content("/p")
        assert "failing" in str(exc.value)
        assert "/p" in str(exc.value)

    def test_other_os_error(self):
        cause = PermissionError(errno.EACCES, "denied")
        driver = FailingDriver(cause)
        with pytest.raises(StorageBackendError) as exc:
            driver.put_content("/p", b"x")
        assert exc.value.__cause__ is cause
        assert "failing" in str(exc.value)
        assert "PermissionError" in str(exc.value)

    def test_contract_errors_pass_through(self):
        original = PathNotFoundError("failing", "/other")
        driver = FailingDriver(original)
        with pytest.raises(PathNotFoundError) as exc:
            driver.get_content("/p")
        assert exc.value is original

    def test_unrelated_errors_propagate(self):
        driver = FailingDriver(KeyError("boom"))
        with pytest.raises(KeyError):
            driver.get_content("/p")


class TestURLCapability:

    def test_driver_without_url_for(self):
        with pytest.raises(UnsupportedMethodError) as exc:
            url_for(FailingDriver(), "/p")
        assert "failing" in str(exc.value)

    def test_driver_satisfies_protocol_shape(self):
        driver: StorageDriver = FailingDriver()
        assert repr(driver) == "FailingDriver(name='failing')"
