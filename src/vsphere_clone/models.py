"""
Data models for vSphere clone operations.

This module defines the driver-facing records derived from the declarative
configuration, plus the results reported back to callers.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum


class StepAction(Enum):
    """Outcome of a pipeline step."""

    CONTINUE = "continue"
    HALT = "halt"


@dataclass
class Disk:
    """A single disk in the driver's vocabulary."""

    disk_size: int  # MiB
    disk_eagerly_scrub: bool = False
    disk_thin_provisioned: bool = False
    controller_index: int = 0


@dataclass
class DriverStorageConfig:
    """Storage layout handed to the driver.

    The order of ``storage`` decides controller/unit assignment.
    """

    disk_controller_type: List[str] = field(default_factory=list)
    storage: List[Disk] = field(default_factory=list)


@dataclass
class CloneRequest:
    """Everything a clone needs, consumed by ``VirtualMachine.clone``."""

    name: str
    folder: str = ""
    cluster: str = ""
    host: str = ""
    resource_pool: str = ""
    datastore: str = ""
    linked_clone: bool = False
    network: str = ""
    mac_address: str = ""
    annotation: str = ""
    vapp_properties: Dict[str, str] = field(default_factory=dict)
    primary_disk_size: int = 0  # MiB
    storage_config: DriverStorageConfig = field(default_factory=DriverStorageConfig)


@dataclass
class ValidationResult:
    """Result of configuration validation."""

    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class CloneResult:
    """Result of a clone build."""

    operation_id: str
    success: bool
    template: str
    vm_name: str
    vm_path: str
    duration: float  # seconds
    vm: Optional[Any] = None
    destroy_vm: bool = False
    cancelled: bool = False
    error: Optional[str] = None
    validation: Optional[ValidationResult] = None
