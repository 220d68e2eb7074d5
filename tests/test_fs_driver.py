"""Tests for FilesystemDriver: on-disk layout, atomic puts and path security."""

import io
import os
import urllib.request
from pathlib import Path
from unittest.mock import patch

import pytest

from storagedriver.base import URLProvider, url_for
from storagedriver.drivers import FilesystemDriver
from storagedriver.drivers.fs import default_root
from storagedriver.errors import (
    InvalidPathError,
    PathNotFoundError,
    StorageBackendError,
    UnsupportedMethodError,
)


class TestFilesystemLayout:
    """Paths map onto the root directory."""

    def test_put_creates_file_under_root(self, fs_driver):
        fs_driver.put_content("/a/b/c", b"data")
        assert (fs_driver.root / "a" / "b" / "c").read_bytes() == b"data"

    def test_delete_prunes_empty_directories(self, fs_driver):
        fs_driver.put_content("/a/b/c", b"data")
        fs_driver.delete("/a/b/c")
        assert not (fs_driver.root / "a").exists()
        assert fs_driver.root.exists()
        assert fs_driver.list("/") == []

    def test_delete_keeps_non_empty_parents(self, fs_driver):
        fs_driver.put_content("/a/b/c", b"1")
        fs_driver.put_content("/a/d", b"2")
        fs_driver.delete("/a/b/c")
        assert fs_driver.list("/a") == ["/a/d"]

    def test_move_prunes_source_directories(self, fs_driver):
        fs_driver.put_content("/src/deep/file", b"x")
        fs_driver.move("/src/deep/file", "/dst/file")
        assert fs_driver.list("/") == ["/dst"]
        assert fs_driver.get_content("/dst/file") == b"x"

    def test_stat_directory(self, fs_driver):
        fs_driver.put_content("/dir/file", b"abc")
        fi = fs_driver.stat("/dir")
        assert fi.is_dir is True
        assert fi.size == 0

    def test_stat_under_content_is_not_found(self, fs_driver):
        fs_driver.put_content("/file", b"abc")
        with pytest.raises(PathNotFoundError):
            fs_driver.stat("/file/child")

    def test_write_under_content_fails(self, fs_driver):
        fs_driver.put_content("/file", b"abc")
        with pytest.raises(StorageBackendError) as exc:
            fs_driver.put_content("/file/child", b"x")
        assert "filesystem" in str(exc.value)

    def test_default_root_from_parameters(self, tmp_path):
        driver = FilesystemDriver.from_parameters({"rootdirectory": str(tmp_path / "r")})
        assert driver.root == (tmp_path / "r").absolute()
        assert default_root().name == "filesystem"


class TestAtomicPut:
    """put_content never leaves partial files behind."""

    def test_put_overwrites(self, fs_driver):
        fs_driver.put_content("/f", b"a much longer original content")
        fs_driver.put_content("/f", b"short")
        assert fs_driver.get_content("/f") == b"short"

    def test_no_partial_files_on_error(self, fs_driver):
        with patch("os.replace", side_effect=IOError("Simulated rename failure")):
            with pytest.raises(StorageBackendError):
                fs_driver.put_content("/dir/f", b"content")

        assert not (fs_driver.root / "dir" / "f").exists()
        assert list(fs_driver.staging.iterdir()) == []

    def test_failed_put_keeps_old_content(self, fs_driver):
        fs_driver.put_content("/f", b"old")
        with patch("os.replace", side_effect=IOError("Simulated rename failure")):
            with pytest.raises(StorageBackendError):
                fs_driver.put_content("/f", b"new")
        assert fs_driver.get_content("/f") == b"old"

    def test_listing_hides_in_flight_put(self, fs_driver):
        fs_driver.put_content("/dir/existing", b"x")
        listings = []
        real_fsync = os.fsync

        def fsync_and_list(fd):
            listings.append((fs_driver.list("/"), fs_driver.list("/dir")))
            real_fsync(fd)

        with patch("os.fsync", side_effect=fsync_and_list):
            fs_driver.put_content("/dir/new", b"y")

        assert listings[0] == (["/dir"], ["/dir/existing"])
        assert fs_driver.list("/dir") == ["/dir/existing", "/dir/new"]

    def test_delete_during_put_keeps_put(self, fs_driver):
        """A recursive delete racing a put cannot remove the put's temp file."""
        fs_driver.put_content("/dir/existing", b"x")
        real_fsync = os.fsync
        deleted = []

        def fsync_and_delete(fd):
            if not deleted:
                deleted.append(True)
                fs_driver.delete("/dir")
            real_fsync(fd)

        with patch("os.fsync", side_effect=fsync_and_delete):
            fs_driver.put_content("/dir/new", b"y")

        assert deleted
        assert fs_driver.list("/dir") == ["/dir/new"]
        assert fs_driver.get_content("/dir/new") == b"y"

    def test_staging_not_listed(self, fs_driver):
        assert fs_driver.staging.is_dir()
        assert fs_driver.list("/") == []


class TestStreamWrites:

    def test_gap_is_zero_filled(self, fs_driver):
        fs_driver.write_stream("/p", 0, io.BytesIO(b"AAAA"))
        fs_driver.write_stream("/p", 8, io.BytesIO(b"BBBB"))
        assert fs_driver.get_content("/p") == b"AAAA\0\0\0\0BBBB"

    def test_empty_write_past_end_extends(self, fs_driver):
        fs_driver.put_content("/p", b"ab")
        assert fs_driver.write_stream("/p", 5, io.BytesIO(b"")) == 0
        assert fs_driver.get_content("/p") == b"ab\0\0\0"

    def test_write_takes_file_lock(self, fs_driver):
        with patch("storagedriver.drivers.fs.portalocker") as locker:
            fs_driver.write_stream("/p", 0, io.BytesIO(b"data"))
        assert locker.lock.called
        assert locker.unlock.called


class TestPathSecurity:
    """Dot segments cannot escape the root directory."""

    @pytest.mark.parametrize("path", ["/..", "/a/../../etc/passwd", "/./a", "/a/."])
    def test_reject_dot_segments(self, fs_driver, path):
        with pytest.raises(InvalidPathError) as exc:
            fs_driver.put_content(path, b"x")
        assert "filesystem" in str(exc.value)

    def test_nothing_written_outside_root(self, fs_driver):
        with pytest.raises(InvalidPathError):
            fs_driver.put_content("/../outside", b"x")
        assert not (fs_driver.root.parent / "outside").exists()


class TestURLFor:

    def test_is_url_provider(self, fs_driver):
        assert isinstance(fs_driver, URLProvider)

    def test_get_url_serves_content(self, fs_driver):
        fs_driver.put_content("/u/file", b"served")
        url = url_for(fs_driver, "/u/file")
        assert url.startswith("file://")
        with urllib.request.urlopen(url) as response:
            assert response.read() == b"served"

    def test_head_url(self, fs_driver):
        fs_driver.put_content("/u/file", b"12345")
        url = fs_driver.url_for("/u/file", {"method": "HEAD"})
        assert Path(urllib.request.url2pathname(url[len("file://"):])).name == "file"

    def test_unsupported_method(self, fs_driver):
        fs_driver.put_content("/u/file", b"x")
        with pytest.raises(UnsupportedMethodError) as exc:
            fs_driver.url_for("/u/file", {"method": "PUT"})
        assert "filesystem" in str(exc.value)

    def test_missing_content(self, fs_driver):
        with pytest.raises(PathNotFoundError):
            fs_driver.url_for("/missing")
