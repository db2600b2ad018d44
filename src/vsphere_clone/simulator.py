"""
In-memory driver.

Keeps a small VM inventory keyed by inventory path. Used for dry runs, where
the whole clone sequence executes without touching a hypervisor.
"""

import asyncio
import posixpath
from typing import Dict, Iterable, List, Optional

from .driver import Driver, VirtualMachine
from .exceptions import CloneExecutionError, PreCleanError, VMNotFoundError
from .logging import logger
from .models import CloneRequest


class SimulatedVM(VirtualMachine):
    """A VM living in an ``InMemoryDriver`` inventory."""

    def __init__(
        self,
        driver: "InMemoryDriver",
        path: str,
        request: Optional[CloneRequest] = None,
    ) -> None:
        self.driver = driver
        self.path = path
        self.request = request

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    async def clone(self, request: CloneRequest) -> Optional[VirtualMachine]:
        path = posixpath.join(request.folder, request.name)
        # Yield like a real network call would, so cancellation can land here
        await asyncio.sleep(self.driver.clone_delay)
        if path in self.driver.inventory:
            raise CloneExecutionError(f"'{path}' already exists", self.name)

        vm = SimulatedVM(self.driver, path, request)
        self.driver.inventory[path] = vm
        logger.debug(f"Simulated clone {self.path} -> {path}", source=self.path, path=path)
        return vm

    async def destroy(self) -> None:
        self.driver.inventory.pop(self.path, None)

    def __repr__(self) -> str:
        return f"SimulatedVM({self.path!r})"


class InMemoryDriver(Driver):
    """
    Driver backed by a dict of VMs.

    Args:
        templates: Inventory paths of VMs that exist up front
        clone_delay: Seconds each clone pretends to take
    """

    def __init__(self, templates: Iterable[str] = (), clone_delay: float = 0.0) -> None:
        self.clone_delay = clone_delay
        self.inventory: Dict[str, SimulatedVM] = {}
        for path in templates:
            self.add_vm(path)

    def add_vm(self, path: str) -> SimulatedVM:
        vm = SimulatedVM(self, path)
        self.inventory[path] = vm
        return vm

    def list_vms(self) -> List[str]:
        return sorted(self.inventory)

    async def find_vm(self, name: str) -> VirtualMachine:
        if name in self.inventory:
            return self.inventory[name]
        for vm in self.inventory.values():
            if vm.name == name:
                return vm
        raise VMNotFoundError(name)

    async def pre_clean_vm(
        self,
        path: str,
        force: bool,
        cluster: str,
        host: str,
        resource_pool: str,
    ) -> None:
        existing = self.inventory.get(path)
        if existing is None:
            return
        if not force:
            raise PreCleanError("a VM already exists at this path, use force", path)

        logger.info(f"Removing existing VM at {path}", path=path)
        await existing.destroy()
