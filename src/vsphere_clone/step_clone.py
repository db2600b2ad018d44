"""
Clone step.

This module turns a validated clone configuration into a running VM:
pre-cleaning the target path, resolving the template, building the clone
request and recording the outcome on the build state.
"""

from typing import List

from .cleanup import cleanup_vm
from .config import CloneConfig, LocationConfig
from .disks import map_disks
from .exceptions import TemplateResolutionError
from .logging import logger
from .models import CloneRequest, Disk, DriverStorageConfig, StepAction
from .pipeline import Step
from .state import BuildState


def normalize_mac_address(mac_address: str) -> str:
    """Lower-case a MAC address; the hypervisor compares them case-sensitively."""
    return mac_address.lower()


def build_clone_request(
    config: CloneConfig, location: LocationConfig, disks: List[Disk]
) -> CloneRequest:
    """Assemble the driver-facing clone request."""
    return CloneRequest(
        name=location.vm_name,
        folder=location.folder,
        cluster=location.cluster,
        host=location.host,
        resource_pool=location.resource_pool,
        datastore=location.datastore,
        linked_clone=config.linked_clone,
        network=config.network,
        mac_address=normalize_mac_address(config.mac_address),
        annotation=config.notes,
        vapp_properties=dict(config.vapp.properties),
        primary_disk_size=config.disk_size,
        storage_config=DriverStorageConfig(
            disk_controller_type=list(config.disk_controller_type),
            storage=disks,
        ),
    )


class StepCloneVM(Step):
    """
    Clone the template into the target location.

    Args:
        config: Validated clone configuration
        location: Target placement
        force: Destroy a VM already occupying the target path
    """

    def __init__(
        self, config: CloneConfig, location: LocationConfig, force: bool = False
    ) -> None:
        self.config = config
        self.location = location
        self.force = force

    async def run(self, state: BuildState) -> StepAction:
        ui = state.ui
        driver = state.driver
        vm_path = self.location.vm_path

        try:
            await driver.pre_clean_vm(
                vm_path,
                self.force,
                self.location.cluster,
                self.location.host,
                self.location.resource_pool,
            )
        except Exception as e:
            logger.error(f"Pre-clean of {vm_path} failed: {e}", vm_path=vm_path)
            state.error = e
            return StepAction.HALT

        ui.say("Cloning VM...")
        try:
            template = await driver.find_vm(self.config.template)
        except Exception as e:
            err = TemplateResolutionError(self.config.template, e)
            logger.error(err.message, template=self.config.template)
            state.error = err
            return StepAction.HALT

        disks = map_disks(self.config.storage)
        request = build_clone_request(self.config, self.location, disks)

        logger.info(
            f"Cloning {self.config.template} to {vm_path}",
            template=self.config.template,
            vm_path=vm_path,
            linked_clone=request.linked_clone,
            disks=len(disks),
        )
        try:
            vm = await template.clone(request)
        except Exception as e:
            logger.error(f"Clone of {self.config.template} failed: {e}", vm_path=vm_path)
            state.error = e
            return StepAction.HALT

        if vm is None:
            # Driver broke its contract; halt without recording a diagnostic
            logger.warning(
                f"Clone of {self.config.template} returned no VM and no error",
                template=self.config.template,
            )
            return StepAction.HALT

        if self.config.destroy:
            state.destroy_vm = True
        state.vm = vm
        logger.info(f"Cloned VM {vm_path}", vm_path=vm_path)
        return StepAction.CONTINUE

    async def cleanup(self, state: BuildState) -> None:
        await cleanup_vm(state)
