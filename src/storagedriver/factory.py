"""Factory for creating storage driver instances."""

import logging
import threading
from typing import Any, Callable, Dict, List

from .base import StorageDriver
from .config import DriverConfig
from .drivers import FilesystemDriver, InMemoryDriver
from .errors import ConfigError, UnknownDriverError

logger = logging.getLogger(__name__)

DriverFactory = Callable[[Dict[str, Any]], StorageDriver]

_registry: Dict[str, DriverFactory] = {}
_registry_lock = threading.Lock()


def register_driver(name: str, factory: DriverFactory) -> None:
    """
    Register a driver factory under ``name``.

    Args:
        name: Driver name used in configuration
        factory: Callable taking the parameters mapping

    Raises:
        ValueError: If a different factory is already registered for name
    """
    with _registry_lock:
        existing = _registry.get(name)
        if existing is not None and existing is not factory:
            raise ValueError(f"Storage driver '{name}' is already registered")
        _registry[name] = factory


def unregister_driver(name: str) -> None:
    with _registry_lock:
        _registry.pop(name, None)


def available_drivers() -> List[str]:
    with _registry_lock:
        return sorted(_registry)


def make_driver(config: DriverConfig) -> StorageDriver:
    """
    Create a driver instance from configuration.

    Args:
        config: Driver configuration

    Returns:
        Fresh driver instance

    Raises:
        UnknownDriverError: If no factory is registered for config.name
        ConfigError: If the factory rejects the parameters
    """
    with _registry_lock:
        factory = _registry.get(config.name)
        names = list(_registry)
    if factory is None:
        raise UnknownDriverError(config.name, names)

    logger.debug("Creating storage driver %s with parameters %s", config.name, sorted(config.parameters))
    try:
        return factory(dict(config.parameters))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid parameters for storage driver '{config.name}': {e}") from e


register_driver(InMemoryDriver.name, InMemoryDriver.from_parameters)
register_driver(FilesystemDriver.name, FilesystemDriver.from_parameters)
