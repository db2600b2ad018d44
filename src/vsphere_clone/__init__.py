"""vSphere Clone - the clone stage of a VM provisioning pipeline."""

__version__ = "0.1.0"
__description__ = "Clone a vSphere template as one stage of a build pipeline"

# Import main classes for easy access
from .client import CloneClient
from .config import (
    BuildConfig,
    CloneConfig,
    LocationConfig,
    StorageConfig,
    StorageEntry,
    VAppConfig,
)
from .models import (
    CloneRequest,
    CloneResult,
    Disk,
    StepAction,
    ValidationResult,
)
from .exceptions import (
    VSphereCloneError,
    ConfigurationError,
    PreCleanError,
    TemplateResolutionError,
    VMNotFoundError,
    CloneExecutionError,
    UnsignaledCloneFailure,
    OperationTimeoutError,
    DriverError,
)
from .driver import Driver, VirtualMachine, load_driver
from .disks import map_disks
from .pipeline import Runner, Step
from .state import BuildState
from .step_clone import StepCloneVM, build_clone_request, normalize_mac_address
from .validation import validate_build_config, validate_clone_config

__all__ = [
    "__version__",
    "__description__",
    "CloneClient",
    "BuildConfig",
    "CloneConfig",
    "LocationConfig",
    "StorageConfig",
    "StorageEntry",
    "VAppConfig",
    "CloneRequest",
    "CloneResult",
    "Disk",
    "StepAction",
    "ValidationResult",
    "VSphereCloneError",
    "ConfigurationError",
    "PreCleanError",
    "TemplateResolutionError",
    "VMNotFoundError",
    "CloneExecutionError",
    "UnsignaledCloneFailure",
    "OperationTimeoutError",
    "DriverError",
    "Driver",
    "VirtualMachine",
    "load_driver",
    "map_disks",
    "Runner",
    "Step",
    "BuildState",
    "StepCloneVM",
    "build_clone_request",
    "normalize_mac_address",
    "validate_build_config",
    "validate_clone_config",
]
