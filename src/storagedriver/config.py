"""Configuration for drivers and the conformance/benchmark harnesses.

Configuration lives in a YAML file (``storagedriver.yaml`` by default):

    driver:
      name: filesystem
      parameters:
        rootdirectory: /tmp/storagedriver
    suite:
      short: true
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import CONFIG_ENV, CONFIG_FILE, DEFAULT_DRIVER, DRIVER_ENV
from .errors import ConfigError

MiB = 1024 * 1024
GiB = 1024 * MiB


class DriverConfig(BaseModel):
    """Which driver to build, and the parameters handed to its factory."""
    name: str = DEFAULT_DRIVER
    parameters: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("driver name cannot be empty")
        return v


class SuiteSettings(BaseModel):
    """
    Sizing knobs for the conformance suite.

    Defaults exercise a driver at full scale. ``short`` trims the
    concurrency scenarios and skips the multi-gigabyte and eventual
    consistency scenarios.
    """
    short: bool = False
    large_stream_size: int = 5 * GiB
    concurrent_read_size: int = 128 * MiB
    short_concurrent_read_size: int = 10 * MiB
    concurrent_readers: int = 10
    concurrent_streams: int = 32
    short_concurrent_streams: int = 8
    stream_unit: int = MiB                  # each concurrent stream is streams * unit bytes
    append_chunk_sizes: List[int] = Field(default_factory=lambda: [32, 10 * MiB])
    modtime_delay: float = 10.0             # seconds between writes in the stat scenario
    propagation_delay: float = 5.0          # bound on modtime visibility lag
    consistency_iterations: int = 1024
    consistency_chunk_size: int = 32
    list_children: int = 50

    @field_validator("append_chunk_sizes")
    @classmethod
    def validate_chunk_sizes(cls, v: List[int]) -> List[int]:
        if not v or any(size <= 0 for size in v):
            raise ValueError("append_chunk_sizes must be positive")
        return v

    def effective(self, short: bool = False) -> "SuiteSettings":
        """Settings with short mode applied if either flag requests it."""
        if not (short or self.short):
            return self
        return self.model_copy(update={
            "short": True,
            "concurrent_read_size": min(self.concurrent_read_size, self.short_concurrent_read_size),
            "concurrent_streams": min(self.concurrent_streams, self.short_concurrent_streams),
        })

    @property
    def concurrent_stream_size(self) -> int:
        return self.concurrent_streams * self.stream_unit


class HarnessConfig(BaseModel):
    """Top-level configuration file contents."""
    driver: DriverConfig = Field(default_factory=DriverConfig)
    suite: SuiteSettings = Field(default_factory=SuiteSettings)


def resolve_config_path(path: Optional[Path] = None) -> Path:
    """Explicit path > $STORAGEDRIVER_CONFIG > ./storagedriver.yaml."""
    if path is not None:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)
    return Path.cwd() / CONFIG_FILE


def load_config(path: Optional[Path] = None) -> HarnessConfig:
    """
    Load harness configuration.

    Missing file means defaults. ``$STORAGEDRIVER_DRIVER`` overrides the
    driver name from the file.

    Args:
        path: Config file path (see resolve_config_path)

    Returns:
        Validated HarnessConfig

    Raises:
        ConfigError: If the file is not valid YAML or fails validation
    """
    cfg_path = resolve_config_path(path)
    data: Dict[str, Any] = {}
    if cfg_path.exists():
        try:
            data = yaml.safe_load(cfg_path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {cfg_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{cfg_path} must contain a mapping, got {type(data).__name__}")

    driver_override = os.environ.get(DRIVER_ENV)
    if driver_override:
        driver = dict(data.get("driver") or {})
        driver["name"] = driver_override
        data["driver"] = driver

    try:
        return HarnessConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {cfg_path}: {e}") from e


def save_config(config: HarnessConfig, path: Path) -> None:
    """Write configuration as YAML."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config.model_dump(), sort_keys=False))
