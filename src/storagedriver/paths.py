"""Path grammar for storage driver paths.

Paths are opaque keys, not filesystem paths. A content path starts with a
single ``/``, has no empty segments and no trailing ``/``. The root ``/`` is a
valid listing target but never a valid content target.
"""

import posixpath
from typing import List

from .errors import InvalidPathError

ROOT = "/"


def is_valid_path(path: str) -> bool:
    """Check whether ``path`` is a valid content path."""
    if not path or not path.startswith("/"):
        return False
    if path == ROOT or path.endswith("/"):
        return False
    return "//" not in path


def is_valid_listing_path(path: str) -> bool:
    """Check whether ``path`` may be listed (the root or a content path)."""
    return path == ROOT or is_valid_path(path)


def validate_path(path: str, driver_name: str) -> str:
    """Return ``path`` unchanged or raise InvalidPathError.

    Args:
        path: Candidate content path
        driver_name: Name of the driver performing the check

    Raises:
        InvalidPathError: If the path violates the grammar
    """
    if not isinstance(path, str) or not is_valid_path(path):
        raise InvalidPathError(driver_name, path)
    return path


def validate_listing_path(path: str, driver_name: str) -> str:
    """Like validate_path, but also accepts the root."""
    if not isinstance(path, str) or not is_valid_listing_path(path):
        raise InvalidPathError(driver_name, path)
    return path


def first_part(path: str) -> str:
    """Return the top-level segment of a path.

    Examples:
        "/a/b/c" -> "/a"
        "/a" -> "/a"
        "" -> "/"
        "/" -> "/"
    """
    stripped = path.strip("/")
    if not stripped:
        return ROOT
    return "/" + stripped.split("/", 1)[0]


def join(*parts: str) -> str:
    """Join path segments, always producing an absolute path."""
    joined = posixpath.join(ROOT, *[p.lstrip("/") for p in parts if p])
    if joined != ROOT:
        joined = joined.rstrip("/")
    return joined


def dirname(path: str) -> str:
    """Parent of a content path (the root for top-level entries)."""
    return posixpath.dirname(path) or ROOT


def ancestors(path: str) -> List[str]:
    """Proper ancestors of ``path``, nearest first, excluding the root."""
    result = []
    parent = dirname(path)
    while parent != ROOT:
        result.append(parent)
        parent = dirname(parent)
    return result


def child_of(parent: str, path: str) -> str:
    """Direct child of ``parent`` on the way to ``path``.

    Returns an empty string when ``path`` is not a descendant of ``parent``.
    """
    prefix = ROOT if parent == ROOT else parent + "/"
    if not path.startswith(prefix) or path == parent:
        return ""
    remainder = path[len(prefix):]
    return prefix + remainder.split("/", 1)[0]
