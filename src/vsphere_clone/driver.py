"""
Driver boundary for the hypervisor management plane.

The clone step only talks to these interfaces; concrete drivers are loaded
by import path so the orchestration never hardwires a remote client.
"""

import importlib
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .exceptions import DriverError
from .models import CloneRequest


class VirtualMachine(ABC):
    """Handle to a virtual machine owned by a driver."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Inventory name of the VM."""

    @abstractmethod
    async def clone(self, request: CloneRequest) -> Optional["VirtualMachine"]:
        """
        Clone this VM.

        Awaited inside the caller's task, so cancelling that task must abort
        the in-flight clone.

        Args:
            request: Everything the hypervisor needs to create the clone

        Returns:
            Handle to the new VM

        Raises:
            CloneExecutionError: If the hypervisor rejects or fails the clone
        """

    @abstractmethod
    async def destroy(self) -> None:
        """Power off and delete this VM."""


class Driver(ABC):
    """Capability set the clone step needs from a hypervisor driver."""

    @abstractmethod
    async def find_vm(self, name: str) -> VirtualMachine:
        """
        Look up a VM by name or inventory path.

        Raises:
            VMNotFoundError: If no VM matches
        """

    @abstractmethod
    async def pre_clean_vm(
        self,
        path: str,
        force: bool,
        cluster: str,
        host: str,
        resource_pool: str,
    ) -> None:
        """
        Make sure nothing occupies ``path`` before a clone lands there.

        With ``force`` an existing VM is destroyed; without it, a conflict is
        reported as an error.

        Raises:
            PreCleanError: If the path is occupied and cannot be cleared
        """

    async def close(self) -> None:
        """Release any session held with the management plane."""


def load_driver(import_path: str, options: Optional[Dict[str, Any]] = None) -> Driver:
    """
    Instantiate a driver from a ``"module:attribute"`` import path.

    The attribute may be a ``Driver`` subclass or any factory returning one;
    ``options`` are passed as keyword arguments.
    """
    module_name, sep, attr = import_path.partition(":")
    if not sep or not module_name or not attr:
        raise DriverError(
            f"'{import_path}' is not of the form 'module:attribute'", "load"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise DriverError(f"cannot import '{module_name}': {e}", "load") from e

    factory: Any = module
    for part in attr.split("."):
        try:
            factory = getattr(factory, part)
        except AttributeError as e:
            raise DriverError(
                f"'{module_name}' has no attribute '{attr}'", "load"
            ) from e

    driver = factory(**(options or {}))
    if not isinstance(driver, Driver):
        raise DriverError(
            f"'{import_path}' produced {type(driver).__name__}, not a Driver", "load"
        )
    return driver
