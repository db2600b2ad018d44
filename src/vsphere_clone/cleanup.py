"""Disposal of a VM recorded in the build state."""

from .logging import logger
from .state import BuildState


async def cleanup_vm(state: BuildState) -> None:
    """
    Destroy the recorded VM when the build failed or asked for it.

    Nothing happens on a successful build unless ``destroy_vm`` was set.
    A failed destroy is reported, not raised: cleanup must not mask the
    build's own outcome.
    """
    if not (state.cancelled or state.halted or state.destroy_vm):
        return

    vm = state.vm
    if vm is None:
        return

    state.ui.say("Destroying VM...")
    try:
        await vm.destroy()
    except Exception as e:
        state.ui.error(str(e))
        logger.error(f"Failed to destroy VM '{vm.name}': {e}", vm_name=vm.name)
        return

    logger.info(f"Destroyed VM '{vm.name}'", vm_name=vm.name)
    state.vm = None
