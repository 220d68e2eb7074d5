"""Tests for the error taxonomy."""

import pytest

from storagedriver.errors import (
    ConfigError,
    DeadlineExceededError,
    DriverError,
    InvalidOffsetError,
    InvalidPathError,
    LeakedStateError,
    PathNotFoundError,
    RequestCancelledError,
    StorageBackendError,
    StorageError,
    UnknownDriverError,
    UnsupportedMethodError,
)


class TestDriverErrors:
    """Every driver error names its driver."""

    @pytest.mark.parametrize("error", [
        InvalidPathError("s3aws", "//x"),
        PathNotFoundError("s3aws", "/missing"),
        InvalidOffsetError("s3aws", "/file", -1),
        UnsupportedMethodError("s3aws"),
        StorageBackendError("s3aws", "permission denied"),
    ])
    def test_message_contains_driver_name(self, error):
        assert isinstance(error, DriverError)
        assert isinstance(error, StorageError)
        assert "s3aws" in str(error)
        assert error.driver_name == "s3aws"

    def test_invalid_offset_carries_path_and_offset(self):
        error = InvalidOffsetError("inmemory", "/a/b", -1)
        assert error.path == "/a/b"
        assert error.offset == -1
        assert "-1" in str(error)

    def test_backend_error_keeps_cause(self):
        cause = PermissionError("denied")
        error = StorageBackendError("filesystem", "cannot write", cause)
        assert error.cause is cause


class TestOtherErrors:
    def test_deadline_is_a_cancellation(self):
        error = DeadlineExceededError(1.5)
        assert isinstance(error, RequestCancelledError)
        assert "1.500s" in str(error)

    def test_leaked_state_lists_paths(self):
        error = LeakedStateError("inmemory", [f"/f{i}" for i in range(7)])
        message = str(error)
        assert "inmemory" in message
        assert "/f0" in message
        assert "and 2 more" in message

    def test_unknown_driver_lists_choices(self):
        error = UnknownDriverError("gcs", ["inmemory", "filesystem"])
        assert isinstance(error, ConfigError)
        assert "filesystem, inmemory" in str(error)
