"""
Configuration management for vSphere clone builds.

This module defines the declarative build document and handles loading it
from YAML files and environment variables.
"""

import os
import posixpath
import yaml
from typing import Any, Dict, List, Optional
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
)

from .exceptions import ConfigurationError
from .logging import logger


class _FrozenModel(BaseModel):
    # Reject unknown fields; immutable once loaded
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


class StorageEntry(_FrozenModel):
    """One declared disk."""

    disk_size: int = Field(default=0, ge=0, description="Disk size in MiB")
    disk_eagerly_scrub: bool = Field(
        default=False,
        validation_alias=AliasChoices("disk_eagerly_scrub", "eager_scrub"),
    )
    disk_thin_provisioned: bool = Field(
        default=False,
        validation_alias=AliasChoices("disk_thin_provisioned", "thin_provisioned"),
    )
    disk_controller_index: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("disk_controller_index", "controller_index"),
    )


class StorageConfig(_FrozenModel):
    """Disk controllers and the ordered list of disks attached to them."""

    disk_controller_type: List[str] = Field(default_factory=list)
    storage: List[StorageEntry] = Field(default_factory=list)


class VAppConfig(_FrozenModel):
    """vApp property overrides.

    Keys must already exist on the template; they are passed through as-is.
    """

    properties: Dict[str, str] = Field(default_factory=dict)


class CloneConfig(StorageConfig):
    """What to clone and how.

    Storage keys live at the same level as the clone keys.
    """

    template: str = Field(default="", description="Name or path of the source VM")
    disk_size: int = Field(default=0, ge=0, description="Primary disk size in MiB")
    linked_clone: bool = False
    network: str = ""
    mac_address: str = ""
    notes: str = ""
    destroy: bool = Field(
        default=False, description="Destroy the VM once the build completes"
    )
    vapp: VAppConfig = Field(default_factory=VAppConfig)


class LocationConfig(_FrozenModel):
    """Where the clone is placed."""

    vm_name: str = ""
    folder: str = ""
    cluster: str = ""
    host: str = ""
    resource_pool: str = ""
    datastore: str = ""

    @property
    def vm_path(self) -> str:
        """Inventory path of the clone: folder joined with the VM name."""
        return posixpath.join(self.folder, self.vm_name)


class BuildConfig(_FrozenModel):
    """Top-level build document.

    Configuration can be loaded from:
    1. Explicit config file path
    2. Default config file locations
    3. Environment variables (highest priority)

    Environment variables:
    - VSPHERE_CLONE_TIMEOUT: Build timeout in seconds
    - VSPHERE_CLONE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - VSPHERE_CLONE_FORCE: Remove a conflicting VM at the target path (true/false)
    - VSPHERE_CLONE_DRIVER: Driver import path ("module:attribute")
    """

    clone: CloneConfig = Field(default_factory=CloneConfig)
    location: LocationConfig = Field(default_factory=LocationConfig)
    force: bool = Field(
        default=False, description="Remove an existing VM at the target path"
    )
    timeout: int = Field(default=3600, gt=0, description="Build timeout in seconds")
    log_level: str = Field(default="INFO", description="Logging level")
    driver: Optional[str] = Field(
        default=None, pattern=r"^[\w.]+:[\w.]+$", description="Driver import path"
    )
    driver_options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        v = v.upper()
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v


DEFAULT_CONFIG_PATHS = [
    "~/.config/vsphere-clone/build.yaml",
    "/etc/vsphere-clone/build.yaml",
    "build.yaml",
]


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


class ConfigLoader:
    """Loads and validates build configuration."""

    ENV_MAPPINGS = {
        "VSPHERE_CLONE_TIMEOUT": ("timeout", int),
        "VSPHERE_CLONE_LOG_LEVEL": "log_level",
        "VSPHERE_CLONE_FORCE": ("force", _parse_bool),
        "VSPHERE_CLONE_DRIVER": "driver",
    }

    def __init__(self) -> None:
        self.logger = logger

    def load_config(self, config_path: Optional[str] = None) -> BuildConfig:
        """
        Load configuration from file and environment variables.

        Priority (highest to lowest):
        1. Environment variables
        2. Config file (explicit path or default locations)
        3. Default values

        Args:
            config_path: Path to configuration file. If None, looks in default locations.

        Returns:
            BuildConfig: Loaded configuration

        Raises:
            ConfigurationError: If the file cannot be read or fails schema validation
        """
        if config_path:
            config_data = self._load_data_from_file(config_path)
        else:
            config_data = {}
            for path in DEFAULT_CONFIG_PATHS:
                path = os.path.expanduser(path)
                if os.path.exists(path):
                    self.logger.info(f"Loading configuration from {path}", path=path)
                    config_data = self._load_data_from_file(path)
                    break

            if not config_data:
                self.logger.info(
                    "No configuration file found, using defaults and environment variables"
                )

        config_data = self._apply_env_overrides(config_data)
        return self.parse(config_data)

    def parse(self, config_data: Dict[str, Any]) -> BuildConfig:
        """Build a validated ``BuildConfig`` from raw data."""
        try:
            return BuildConfig.model_validate(config_data)
        except PydanticValidationError as e:
            violations = [
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            self.logger.error(
                f"Invalid configuration: {e}", violations=violations, exc_info=True
            )
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(violations)}", violations
            )

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to config data."""
        config_data = dict(config_data)
        for env_var, mapping in self.ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue

            if isinstance(mapping, tuple):
                config_key, converter = mapping
                try:
                    config_data[config_key] = converter(env_value)
                except (ValueError, TypeError) as e:
                    self.logger.warning(
                        f"Invalid value for {env_var}: {env_value}, ignoring. Error: {e}"
                    )
                    continue
            else:
                config_key = mapping
                config_data[config_key] = env_value
            self.logger.debug(f"Applied environment override: {env_var}={env_value}")

        return config_data

    def _load_data_from_file(self, path: str) -> Dict[str, Any]:
        """Load configuration data from a specific file."""
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)

            if data is None:
                # Empty file
                return {}

            if not isinstance(data, dict):
                raise ConfigurationError(f"Invalid configuration format in {path}")

            return data

        except ConfigurationError:
            raise
        except yaml.YAMLError as e:
            self.logger.error(
                f"Failed to parse configuration file {path}: {e}",
                path=path,
                exc_info=True,
            )
            raise ConfigurationError(f"Failed to parse configuration file: {e}")
        except OSError as e:
            self.logger.error(
                f"Failed to load configuration from {path}: {e}",
                path=path,
                exc_info=True,
            )
            raise ConfigurationError(f"Failed to load configuration: {e}")


# Global config loader
config_loader = ConfigLoader()
