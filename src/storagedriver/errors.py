"""Custom exceptions for storagedriver.

Every driver error carries the name of the driver that raised it, and the
name appears verbatim in the message so that callers (and the conformance
suite) can tell which backend produced an error without a typed channel
across backends.
"""

from typing import List


class StorageError(RuntimeError):
    """Base class for all storagedriver errors."""
    pass


# Driver Errors
class DriverError(StorageError):
    """Base class for errors raised by a storage driver."""

    def __init__(self, driver_name: str, message: str):
        self.driver_name = driver_name
        super().__init__(f"{driver_name}: {message}")


class InvalidPathError(DriverError):
    """Path does not satisfy the path grammar."""

    def __init__(self, driver_name: str, path: str):
        self.path = path
        super().__init__(driver_name, f"invalid path: {path!r}")


class PathNotFoundError(DriverError):
    """No content or directory exists at the path."""

    def __init__(self, driver_name: str, path: str):
        self.path = path
        super().__init__(driver_name, f"path not found: {path}")


class InvalidOffsetError(DriverError):
    """Negative offset passed to a streaming operation."""

    def __init__(self, driver_name: str, path: str, offset: int):
        self.path = path
        self.offset = offset
        super().__init__(driver_name, f"invalid offset {offset} for path {path}")


class UnsupportedMethodError(DriverError):
    """Optional capability not implemented by the driver."""

    def __init__(self, driver_name: str, method: str = "url_for"):
        self.method = method
        super().__init__(driver_name, f"unsupported method: {method}")


class StorageBackendError(DriverError):
    """Transport, permission or I/O failure inside the backend."""

    def __init__(self, driver_name: str, detail: str, cause: Exception = None):
        self.detail = detail
        self.cause = cause
        super().__init__(driver_name, detail)


# Request Errors
class RequestCancelledError(StorageError):
    """The request context was cancelled while an operation was in flight."""

    def __init__(self, reason: str = "request cancelled"):
        self.reason = reason
        super().__init__(reason)


class DeadlineExceededError(RequestCancelledError):
    """The request context deadline passed."""

    def __init__(self, timeout: float = None):
        self.timeout = timeout
        detail = f" after {timeout:.3f}s" if timeout is not None else ""
        super().__init__(f"request deadline exceeded{detail}")


# Harness Errors
class LeakedStateError(StorageError):
    """Driver root still holds entries after a scenario cleaned up."""

    def __init__(self, driver_name: str, paths: List[str]):
        self.driver_name = driver_name
        self.paths = sorted(paths)
        shown = ", ".join(self.paths[:5])
        if len(self.paths) > 5:
            shown += f" and {len(self.paths) - 5} more"
        super().__init__(
            f"Storage driver {driver_name} did not clean up properly. "
            f"Offending files: {shown}"
        )


# Configuration Errors
class ConfigError(StorageError):
    """Base class for configuration errors."""
    pass


class UnknownDriverError(ConfigError):
    """No driver registered under the requested name."""

    def __init__(self, name: str, available: List[str]):
        self.name = name
        self.available = available
        choices = ", ".join(sorted(available)) or "(none registered)"
        super().__init__(f"Unknown storage driver '{name}'. Available: {choices}")
