"""Storage driver contract.

The contract is expressed as a Protocol (what callers may rely on) plus a
reusable DriverBase that enforces the parts every implementation shares:
path and offset validation, request-context checks and translation of
native errors into the driver error taxonomy.
"""

import contextlib
import io
import logging
from typing import Any, BinaryIO, Dict, List, Optional, Protocol, runtime_checkable

from .context import RequestContext
from .errors import (
    InvalidOffsetError,
    PathNotFoundError,
    StorageBackendError,
    StorageError,
    UnsupportedMethodError,
)
from .paths import validate_listing_path, validate_path
from .storage_models import FileInfo

logger = logging.getLogger(__name__)


class StorageDriver(Protocol):
    """
    Protocol for storage driver implementations.

    Every method accepts an optional keyword ``ctx``. Content paths are
    validated before storage is touched; invalid ones raise InvalidPathError.
    Every error message contains ``name``.
    """

    name: str

    def get_content(self, path: str, *, ctx: Optional[RequestContext] = None) -> bytes:
        """
        Read the full current content at ``path``.

        Raises:
            InvalidPathError: If path is malformed
            PathNotFoundError: If nothing is stored at path
        """
        ...

    def put_content(self, path: str, content: bytes, *, ctx: Optional[RequestContext] = None) -> None:
        """
        Replace the entire content at ``path``.

        Readers observe either the old content or the new content in full,
        never a mix, even when the new content is shorter.

        Raises:
            TypeError: If content is not bytes-like
        """
        ...

    def read_stream(self, path: str, offset: int, *, ctx: Optional[RequestContext] = None) -> BinaryIO:
        """
        Open a sequential reader positioned at ``offset``.

        Reading past the end yields EOF rather than an error.

        Raises:
            InvalidOffsetError: If offset is negative
            PathNotFoundError: If nothing is stored at path
        """
        ...

    def write_stream(self, path: str, offset: int, reader: Any, *, ctx: Optional[RequestContext] = None) -> int:
        """
        Write bytes consumed from ``reader`` starting at ``offset``.

        Writing past the end zero-fills the gap. Bytes beyond the end of the
        new write that existed before are preserved.

        Returns:
            Number of bytes consumed from reader

        Raises:
            InvalidOffsetError: If offset is negative
        """
        ...

    def stat(self, path: str, *, ctx: Optional[RequestContext] = None) -> FileInfo:
        """
        Fetch metadata for a content path or directory prefix.

        Raises:
            PathNotFoundError: If neither content nor descendants exist
        """
        ...

    def list(self, path: str, *, ctx: Optional[RequestContext] = None) -> List[str]:
        """
        Direct children of ``path`` as absolute paths, in no particular order.

        The root is always listable, even when empty.
        """
        ...

    def move(self, source_path: str, dest_path: str, *, ctx: Optional[RequestContext] = None) -> None:
        """
        Move content, fully replacing any content at the destination.

        Raises:
            PathNotFoundError: If source does not exist (destination untouched)
        """
        ...

    def delete(self, path: str, *, ctx: Optional[RequestContext] = None) -> None:
        """
        Delete content, or every descendant of a directory prefix.

        Raises:
            PathNotFoundError: If nothing exists at path
        """
        ...


@runtime_checkable
class URLProvider(Protocol):
    """Optional capability: direct-access URLs for stored content."""

    name: str

    def url_for(
        self,
        path: str,
        options: Optional[Dict[str, Any]] = None,
        *,
        ctx: Optional[RequestContext] = None,
    ) -> str:
        """
        Return a URL serving the content at ``path``.

        Args:
            path: Content path
            options: Provider options, e.g. {"method": "HEAD"}

        Raises:
            UnsupportedMethodError: If these options cannot be honoured
        """
        ...


def url_for(
    driver: StorageDriver,
    path: str,
    options: Optional[Dict[str, Any]] = None,
    *,
    ctx: Optional[RequestContext] = None,
) -> str:
    """
    Capability query plus call.

    Raises:
        UnsupportedMethodError: If the driver does not provide URLs at all
    """
    if not isinstance(driver, URLProvider):
        raise UnsupportedMethodError(driver.name, "url_for")
    return driver.url_for(path, options, ctx=ctx)


class ContextReader(io.RawIOBase):
    """Readable stream that checks a request context before every read."""

    def __init__(self, stream: BinaryIO, ctx: RequestContext):
        super().__init__()
        self._stream = stream
        self._ctx = ctx

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        self._ctx.check()
        readinto = getattr(self._stream, "readinto", None)
        if readinto is not None:
            return readinto(buffer) or 0
        data = self._stream.read(len(buffer))
        buffer[:len(data)] = data
        return len(data)

    def close(self) -> None:
        if not self.closed:
            try:
                self._stream.close()
            finally:
                super().close()


class DriverBase:
    """
    Base class implementing the public contract on top of protected hooks.

    Subclasses set ``name`` and implement ``_get_content``, ``_put_content``,
    ``_read_stream``, ``_write_stream``, ``_stat``, ``_list``, ``_move`` and
    ``_delete``. Hooks receive already-validated arguments and a live
    context. They may raise contract errors directly; a native
    FileNotFoundError becomes PathNotFoundError and any other OSError becomes
    StorageBackendError.
    """

    name = "base"

    def get_content(self, path: str, *, ctx: Optional[RequestContext] = None) -> bytes:
        ctx = self._begin("get_content", path, ctx)
        with self._translate_errors(path):
            return self._get_content(path, ctx)

    def put_content(self, path: str, content: bytes, *, ctx: Optional[RequestContext] = None) -> None:
        ctx = self._begin("put_content", path, ctx)
        # memoryview rejects ints, which bytes() would turn into zero-filled buffers
        content = bytes(memoryview(content))
        with self._translate_errors(path):
            self._put_content(path, content, ctx)

    def read_stream(self, path: str, offset: int, *, ctx: Optional[RequestContext] = None) -> BinaryIO:
        ctx = self._begin("read_stream", path, ctx)
        self._validate_offset(path, offset)
        with self._translate_errors(path):
            stream = self._read_stream(path, offset, ctx)
        return ContextReader(stream, ctx)

    def write_stream(self, path: str, offset: int, reader: Any, *, ctx: Optional[RequestContext] = None) -> int:
        ctx = self._begin("write_stream", path, ctx)
        self._validate_offset(path, offset)
        with self._translate_errors(path):
            written = self._write_stream(path, offset, reader, ctx)
        logger.debug("%s: wrote %d bytes to %s at offset %d", self.name, written, path, offset)
        return written

    def stat(self, path: str, *, ctx: Optional[RequestContext] = None) -> FileInfo:
        ctx = self._begin("stat", path, ctx)
        with self._translate_errors(path):
            return self._stat(path, ctx)

    def list(self, path: str, *, ctx: Optional[RequestContext] = None) -> List[str]:
        ctx = self._context(ctx)
        validate_listing_path(path, self.name)
        logger.debug("%s: list %s", self.name, path)
        with self._translate_errors(path):
            return self._list(path, ctx)

    def move(self, source_path: str, dest_path: str, *, ctx: Optional[RequestContext] = None) -> None:
        ctx = self._begin("move", source_path, ctx)
        validate_path(dest_path, self.name)
        with self._translate_errors(source_path):
            self._move(source_path, dest_path, ctx)

    def delete(self, path: str, *, ctx: Optional[RequestContext] = None) -> None:
        ctx = self._begin("delete", path, ctx)
        with self._translate_errors(path):
            self._delete(path, ctx)

    # ---- hooks --------------------------------------------------------------

    def _get_content(self, path: str, ctx: RequestContext) -> bytes:
        raise NotImplementedError

    def _put_content(self, path: str, content: bytes, ctx: RequestContext) -> None:
        raise NotImplementedError

    def _read_stream(self, path: str, offset: int, ctx: RequestContext) -> BinaryIO:
        raise NotImplementedError

    def _write_stream(self, path: str, offset: int, reader: Any, ctx: RequestContext) -> int:
        raise NotImplementedError

    def _stat(self, path: str, ctx: RequestContext) -> FileInfo:
        raise NotImplementedError

    def _list(self, path: str, ctx: RequestContext) -> List[str]:
        raise NotImplementedError

    def _move(self, source_path: str, dest_path: str, ctx: RequestContext) -> None:
        raise NotImplementedError

    def _delete(self, path: str, ctx: RequestContext) -> None:
        raise NotImplementedError

    # ---- helpers ------------------------------------------------------------

    def _context(self, ctx: Optional[RequestContext]) -> RequestContext:
        if ctx is None:
            ctx = RequestContext.background()
        ctx.check()
        return ctx

    def _begin(self, operation: str, path: str, ctx: Optional[RequestContext]) -> RequestContext:
        """Validate the path and the context before any storage access."""
        validate_path(path, self.name)
        ctx = self._context(ctx)
        logger.debug("%s: %s %s", self.name, operation, path)
        return ctx

    def _validate_offset(self, path: str, offset: int) -> None:
        if offset < 0:
            raise InvalidOffsetError(self.name, path, offset)

    @contextlib.contextmanager
    def _translate_errors(self, path: str):
        """Map native errors onto the driver error taxonomy."""
        try:
            yield
        except StorageError:
            raise
        except FileNotFoundError as exc:
            raise PathNotFoundError(self.name, path) from exc
        except OSError as exc:
            raise StorageBackendError(
                self.name, f"{type(exc).__name__} on {path}: {exc}", exc
            ) from exc

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
