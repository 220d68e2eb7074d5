"""Tests for the driver registry and factory."""

import pytest

from storagedriver.config import DriverConfig
from storagedriver.drivers import FilesystemDriver, InMemoryDriver
from storagedriver.errors import ConfigError, UnknownDriverError
from storagedriver.factory import available_drivers, make_driver, register_driver, unregister_driver


class TestFactory:

    def test_builtin_drivers_registered(self):
        assert {"inmemory", "filesystem"} <= set(available_drivers())

    def test_make_inmemory(self):
        driver = make_driver(DriverConfig(name="inmemory"))
        assert isinstance(driver, InMemoryDriver)

    def test_make_filesystem(self, tmp_path):
        driver = make_driver(DriverConfig(name="filesystem", parameters={"rootdirectory": str(tmp_path)}))
        assert isinstance(driver, FilesystemDriver)
        assert driver.root == tmp_path

    def test_each_call_is_fresh(self):
        assert make_driver(DriverConfig()) is not make_driver(DriverConfig())

    def test_unknown_driver(self):
        with pytest.raises(UnknownDriverError) as exc:
            make_driver(DriverConfig(name="s3"))
        assert "s3" in str(exc.value)
        assert "inmemory" in str(exc.value)
        assert isinstance(exc.value, ConfigError)

    def test_factory_rejection_is_config_error(self):
        def picky(parameters):
            raise ValueError("bucket is required")

        register_driver("picky", picky)
        try:
            with pytest.raises(ConfigError, match="bucket is required"):
                make_driver(DriverConfig(name="picky"))
        finally:
            unregister_driver("picky")
        assert "picky" not in available_drivers()

    def test_conflicting_registration(self):
        register_driver("dup", InMemoryDriver.from_parameters)
        try:
            register_driver("dup", InMemoryDriver.from_parameters)
            with pytest.raises(ValueError, match="already registered"):
                register_driver("dup", lambda parameters: InMemoryDriver())
        finally:
            unregister_driver("dup")
