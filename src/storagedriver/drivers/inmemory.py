"""In-memory storage driver.

Content lives in a dict keyed by path. Directories are implicit: a path is a
directory prefix when some stored key lies beneath it. Stored values are
immutable ``bytes`` replaced wholesale on every write, so readers holding a
snapshot never observe a partial update.
"""

import io
import threading
from datetime import datetime, timezone
from typing import Any, BinaryIO, Dict, List

from ..base import DriverBase
from ..context import RequestContext
from ..errors import PathNotFoundError, StorageBackendError
from ..paths import ROOT, ancestors, child_of
from ..storage_models import FileInfo
from ..utils import copy_stream


class InMemoryDriver(DriverBase):
    """
    Thread-safe in-memory driver, used by the package's own test-suite.

    Does not provide direct-access URLs.
    """

    name = "inmemory"

    def __init__(self):
        self._files: Dict[str, bytes] = {}
        self._mod_times: Dict[str, datetime] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_parameters(cls, parameters: Dict[str, Any]) -> "InMemoryDriver":
        """Factory hook; the in-memory driver takes no parameters."""
        return cls()

    def _get_content(self, path: str, ctx: RequestContext) -> bytes:
        with self._lock:
            try:
                return self._files[path]
            except KeyError:
                raise PathNotFoundError(self.name, path) from None

    def _put_content(self, path: str, content: bytes, ctx: RequestContext) -> None:
        with self._lock:
            self._check_writable(path)
            self._store(path, content)

    def _read_stream(self, path: str, offset: int, ctx: RequestContext) -> BinaryIO:
        stream = io.BytesIO(self._get_content(path, ctx))
        stream.seek(offset)
        return stream

    def _write_stream(self, path: str, offset: int, reader: Any, ctx: RequestContext) -> int:
        # Drain the reader outside the lock so slow sources don't block others
        buffer = io.BytesIO()
        written = copy_stream(reader, buffer, ctx)
        chunk = buffer.getvalue()

        with self._lock:
            self._check_writable(path)
            existing = self._files.get(path, b"")
            if offset > len(existing):
                existing += b"\x00" * (offset - len(existing))
            self._store(path, existing[:offset] + chunk + existing[offset + len(chunk):])
        return written

    def _stat(self, path: str, ctx: RequestContext) -> FileInfo:
        with self._lock:
            if path in self._files:
                return FileInfo(
                    path=path,
                    size=len(self._files[path]),
                    is_dir=False,
                    mod_time=self._mod_times[path],
                )
            if self._is_dir(path):
                return FileInfo(path=path, size=0, is_dir=True)
        raise PathNotFoundError(self.name, path)

    def _list(self, path: str, ctx: RequestContext) -> List[str]:
        with self._lock:
            children = {child_of(path, key) for key in self._files}
        children.discard("")
        if path != ROOT and not children:
            raise PathNotFoundError(self.name, path)
        return sorted(children)

    def _move(self, source_path: str, dest_path: str, ctx: RequestContext) -> None:
        with self._lock:
            if source_path not in self._files:
                raise PathNotFoundError(self.name, source_path)
            if source_path == dest_path:
                return
            self._check_writable(dest_path)
            self._store(dest_path, self._files.pop(source_path))
            del self._mod_times[source_path]

    def _delete(self, path: str, ctx: RequestContext) -> None:
        with self._lock:
            if path in self._files:
                victims = [path]
            else:
                prefix = path + "/"
                victims = [key for key in self._files if key.startswith(prefix)]
            if not victims:
                raise PathNotFoundError(self.name, path)
            for key in victims:
                del self._files[key]
                del self._mod_times[key]

    # ---- internals ----------------------------------------------------------

    def _store(self, path: str, content: bytes) -> None:
        self._files[path] = content
        self._mod_times[path] = datetime.now(timezone.utc)

    def _is_dir(self, path: str) -> bool:
        prefix = path + "/"
        return any(key.startswith(prefix) for key in self._files)

    def _check_writable(self, path: str) -> None:
        """A content entry and a directory prefix cannot share a location."""
        if self._is_dir(path):
            raise StorageBackendError(self.name, f"{path} is a directory")
        for ancestor in ancestors(path):
            if ancestor in self._files:
                raise StorageBackendError(
                    self.name, f"{ancestor} is not a directory (writing {path})"
                )
