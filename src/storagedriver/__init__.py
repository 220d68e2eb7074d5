"""Storage driver contract, reference drivers and conformance harness."""

from .base import DriverBase, StorageDriver, URLProvider, url_for
from .constants import STORAGEDRIVER_VERSION
from .context import RequestContext
from .errors import (
    DriverError,
    InvalidOffsetError,
    InvalidPathError,
    PathNotFoundError,
    StorageBackendError,
    StorageError,
    UnsupportedMethodError,
)
from .paths import first_part, is_valid_path, validate_path
from .storage_models import FileInfo

__version__ = STORAGEDRIVER_VERSION

__all__ = [
    "__version__",
    "DriverBase",
    "DriverError",
    "FileInfo",
    "InvalidOffsetError",
    "InvalidPathError",
    "PathNotFoundError",
    "RequestContext",
    "StorageBackendError",
    "StorageDriver",
    "StorageError",
    "URLProvider",
    "UnsupportedMethodError",
    "first_part",
    "is_valid_path",
    "url_for",
    "validate_path",
]
