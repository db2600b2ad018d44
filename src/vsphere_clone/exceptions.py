"""
Custom exceptions for vSphere clone operations.

This module defines all custom exceptions used by the clone step, its drivers
and the surrounding client and CLI.
"""

from typing import List, Optional


class VSphereCloneError(Exception):
    """Base exception for vSphere clone operations."""

    def __init__(self, message: str, error_code: int = 1000) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.message = message

    @property
    def exit_code(self) -> int:
        """Process exit status for this error.

        POSIX keeps only the low byte of an exit status, so the 1000-range
        codes are shifted down: 1000 exits 10, 1001 exits 11, and so on.
        """
        return self.error_code - 990


class ConfigurationError(VSphereCloneError):
    """Configuration-related errors.

    ``violations`` holds every individual problem found, so callers can show
    them all at once instead of one per attempt.
    """

    def __init__(self, message: str, violations: Optional[List[str]] = None) -> None:
        super().__init__(message, error_code=1001)
        self.violations = list(violations or [])


class PreCleanError(VSphereCloneError):
    """Removing a stale object at the target path failed."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(f"Pre-clean of '{path}' failed: {message}", error_code=1002)
        self.path = path


class TemplateResolutionError(VSphereCloneError):
    """Looking up the source template failed."""

    def __init__(self, template: str, cause: Exception) -> None:
        super().__init__(f"Error finding vm to clone: {cause}", error_code=1003)
        self.template = template
        self.cause = cause
        self.__cause__ = cause


class VMNotFoundError(VSphereCloneError):
    """VM not found errors."""

    def __init__(self, vm_name: str) -> None:
        super().__init__(f"VM '{vm_name}' not found", error_code=1004)
        self.vm_name = vm_name


class CloneExecutionError(VSphereCloneError):
    """Driver-level failure while cloning."""

    def __init__(self, message: str, vm_name: str) -> None:
        super().__init__(f"Clone of '{vm_name}' failed: {message}", error_code=1005)
        self.vm_name = vm_name


class UnsignaledCloneFailure(VSphereCloneError):
    """The driver returned neither a VM handle nor an error."""

    def __init__(self, template: str) -> None:
        super().__init__(
            f"Cloning '{template}' returned no virtual machine and no error",
            error_code=1006,
        )
        self.template = template


class OperationTimeoutError(VSphereCloneError):
    """Timeout errors."""

    def __init__(self, operation: str, timeout: int) -> None:
        super().__init__(
            f"Timeout during {operation} after {timeout}s", error_code=1007
        )
        self.operation = operation
        self.timeout = timeout


class DriverError(VSphereCloneError):
    """Driver loading or generic driver errors."""

    def __init__(self, message: str, operation: str = "unknown") -> None:
        super().__init__(
            f"Driver error during {operation}: {message}", error_code=1008
        )
        self.operation = operation
