"""Filesystem storage driver.

Paths map onto a tree below a root directory: ``/a/b/c`` is stored at
``<root>/a/b/c``. Directories are created on demand and pruned again when the
last entry below them goes away, so the on-disk tree mirrors the implicit
directory structure of the stored paths.
"""

import logging
import os
import shutil
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional

import platformdirs
import portalocker

from ..base import DriverBase
from ..context import RequestContext
from ..errors import (
    InvalidPathError,
    PathNotFoundError,
    StorageBackendError,
    UnsupportedMethodError,
)
from ..paths import ROOT, join, validate_path
from ..storage_models import FileInfo
from ..utils import copy_stream

logger = logging.getLogger(__name__)

URL_METHODS = ("GET", "HEAD")

# Holds in-flight put_content temp files. Dot-prefixed names are outside the
# path grammar, so nothing below the root that starts with "." is ever listed.
STAGING_DIR = ".staging"


def default_root() -> Path:
    """Platform-appropriate default root for the filesystem driver."""
    return Path(platformdirs.user_data_dir("storagedriver", "storagedriver")) / "filesystem"


def _fsync_dir(path: Path) -> None:
    """Best-effort fsync of a directory entry update."""
    try:
        flags = os.O_RDONLY
        if hasattr(os, "O_DIRECTORY"):
            flags |= os.O_DIRECTORY
        fd = os.open(str(path), flags)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
    except OSError:
        logger.debug("Directory fsync not supported for %s", path)


class FilesystemDriver(DriverBase):
    """
    Local filesystem driver.

    put_content is atomic (temp file + rename in the target directory).
    write_stream takes an exclusive portalocker lock on the target file for
    the duration of the write. Provides file:// URLs for GET and HEAD.
    """

    name = "filesystem"

    def __init__(self, root_directory: Path):
        """
        Initialize filesystem driver.

        Args:
            root_directory: Directory holding all stored content
        """
        self.root = Path(root_directory).absolute()
        self.root.mkdir(parents=True, exist_ok=True)
        self.staging = self.root / STAGING_DIR
        self.staging.mkdir(exist_ok=True)
        # Serializes directory creation against pruning of empty directories
        self._tree_lock = threading.RLock()

    @classmethod
    def from_parameters(cls, parameters: Dict[str, Any]) -> "FilesystemDriver":
        """Build from config parameters (``rootdirectory`` optional)."""
        root = parameters.get("rootdirectory")
        return cls(Path(root) if root else default_root())

    # ---- contract hooks -----------------------------------------------------

    def _get_content(self, path: str, ctx: RequestContext) -> bytes:
        return self._existing_file(path).read_bytes()

    def _put_content(self, path: str, content: bytes, ctx: RequestContext) -> None:
        target = self._full_path(path)
        if target.is_dir():
            raise StorageBackendError(self.name, f"{path} is a directory")

        tmp = tempfile.NamedTemporaryFile(
            mode="wb",
            delete=False,
            dir=self.staging,
            prefix=f"{target.name}.tmp-",
        )

        tmppath = Path(tmp.name)
        try:
            with tmp as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            with self._tree_lock:
                if target.is_dir():
                    raise StorageBackendError(self.name, f"{path} is a directory")
                target.parent.mkdir(parents=True, exist_ok=True)
                os.replace(tmppath, target)
        except Exception:
            tmppath.unlink(missing_ok=True)
            raise
        _fsync_dir(target.parent)

    def _read_stream(self, path: str, offset: int, ctx: RequestContext) -> BinaryIO:
        f = self._existing_file(path).open("rb")
        f.seek(offset)
        return f

    def _write_stream(self, path: str, offset: int, reader: Any, ctx: RequestContext) -> int:
        target = self._full_path(path)
        if target.is_dir():
            raise StorageBackendError(self.name, f"{path} is a directory")

        with self._tree_lock:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(target, os.O_RDWR | os.O_CREAT, 0o644)

        with os.fdopen(fd, "r+b") as f:
            portalocker.lock(f, portalocker.LOCK_EX)
            try:
                size = f.seek(0, os.SEEK_END)
                if offset > size:
                    f.truncate(offset)
                f.seek(offset)
                written = copy_stream(reader, f, ctx)
                f.flush()
            finally:
                portalocker.unlock(f)
        return written

    def _stat(self, path: str, ctx: RequestContext) -> FileInfo:
        full = self._full_path(path)
        try:
            st = full.stat()
        except (FileNotFoundError, NotADirectoryError):
            raise PathNotFoundError(self.name, path) from None

        mod_time = datetime.fromtimestamp(st.st_mtime_ns / 1e9, tz=timezone.utc)
        if full.is_dir():
            return FileInfo(path=path, size=0, is_dir=True, mod_time=mod_time)
        return FileInfo(path=path, size=st.st_size, is_dir=False, mod_time=mod_time)

    def _list(self, path: str, ctx: RequestContext) -> List[str]:
        full = self.root if path == ROOT else self._full_path(path)
        if not full.is_dir():
            raise PathNotFoundError(self.name, path)
        with os.scandir(full) as entries:
            return sorted(
                join(path, entry.name) for entry in entries if not entry.name.startswith(".")
            )

    def _move(self, source_path: str, dest_path: str, ctx: RequestContext) -> None:
        source = self._full_path(source_path)
        dest = self._full_path(dest_path)
        if not source.exists():
            raise PathNotFoundError(self.name, source_path)
        if dest.is_dir():
            raise StorageBackendError(self.name, f"{dest_path} is a directory")

        with self._tree_lock:
            dest.parent.mkdir(parents=True, exist_ok=True)
            os.replace(source, dest)
            self._prune(source.parent)

    def _delete(self, path: str, ctx: RequestContext) -> None:
        full = self._full_path(path)
        with self._tree_lock:
            if not full.exists():
                raise PathNotFoundError(self.name, path)
            if full.is_dir():
                shutil.rmtree(full)
            else:
                full.unlink()
            self._prune(full.parent)

    # ---- optional capability ------------------------------------------------

    def url_for(
        self,
        path: str,
        options: Optional[Dict[str, Any]] = None,
        *,
        ctx: Optional[RequestContext] = None,
    ) -> str:
        """
        Return a file:// URL for the content at ``path``.

        Args:
            path: Content path
            options: Only ``method`` is honoured (GET or HEAD)

        Raises:
            UnsupportedMethodError: For any other method
            PathNotFoundError: If nothing is stored at path
        """
        validate_path(path, self.name)
        ctx = self._context(ctx)
        method = str((options or {}).get("method", "GET")).upper()
        if method not in URL_METHODS:
            raise UnsupportedMethodError(self.name, f"url_for method {method}")
        with self._translate_errors(path):
            return self._existing_file(path).resolve().as_uri()

    # ---- internals ----------------------------------------------------------

    def _full_path(self, path: str) -> Path:
        """
        Map a storage path onto the root directory.

        Raises:
            InvalidPathError: For dot segments, which would escape the tree
        """
        segments = path.lstrip("/").split("/")
        if any(segment in (".", "..") for segment in segments):
            raise InvalidPathError(self.name, path)
        return self.root.joinpath(*segments)

    def _existing_file(self, path: str) -> Path:
        full = self._full_path(path)
        if not full.is_file():
            raise PathNotFoundError(self.name, path)
        return full

    def _prune(self, directory: Path) -> None:
        """Remove empty directories from ``directory`` up to (not including) root."""
        while directory != self.root and self.root in directory.parents:
            try:
                directory.rmdir()
            except OSError:
                break
            directory = directory.parent
