"""
Configuration validation for clone builds.

Every validator returns the complete list of problems it found and never
raises, so a single call reports every violation at once.
"""

from typing import List

from .config import BuildConfig, CloneConfig, LocationConfig, StorageConfig
from .models import ValidationResult

DISK_CONTROLLER_TYPES = ("lsilogic", "lsilogic-sas", "pvscsi", "nvme", "scsi", "sata")


def validate_storage_config(config: StorageConfig) -> List[str]:
    """Check the storage layout: disk sizes, controller types and references."""
    errors = []

    for controller in config.disk_controller_type:
        if controller not in DISK_CONTROLLER_TYPES:
            errors.append(
                f"'disk_controller_type' {controller!r} is not one of "
                f"{', '.join(DISK_CONTROLLER_TYPES)}"
            )

    # No declared controller means the driver adds a single default one
    controller_count = max(len(config.disk_controller_type), 1)
    for i, entry in enumerate(config.storage):
        if entry.disk_size == 0:
            errors.append(f"storage[{i}].'disk_size' is required")
        if entry.disk_controller_index >= controller_count:
            errors.append(
                f"storage[{i}].'disk_controller_index' references an unknown disk controller"
            )

    return errors


def validate_clone_config(config: CloneConfig) -> List[str]:
    """
    Check a clone configuration for internal consistency.

    Storage violations come first, followed by one message per broken clone
    invariant.

    Args:
        config: Clone configuration to check

    Returns:
        List of violation messages, empty when the configuration is valid
    """
    errors = validate_storage_config(config)

    if config.template == "":
        errors.append("'template' is required")

    if config.linked_clone and config.disk_size != 0:
        errors.append("'linked_clone' and 'disk_size' cannot be used together")

    if config.mac_address != "" and config.network == "":
        errors.append("'network' is required when 'mac_address' is specified")

    return errors


def validate_location_config(config: LocationConfig) -> List[str]:
    """Check that the clone has a name and a compute placement."""
    errors = []

    if config.vm_name == "":
        errors.append("'vm_name' is required")

    if config.cluster == "" and config.host == "":
        errors.append("'host' or 'cluster' is required")

    return errors


def validate_build_config(config: BuildConfig) -> ValidationResult:
    """Validate a whole build document."""
    errors = validate_clone_config(config.clone) + validate_location_config(
        config.location
    )
    warnings = []

    if config.clone.destroy:
        warnings.append(
            f"VM '{config.location.vm_name}' will be destroyed when the build completes"
        )

    return ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)
