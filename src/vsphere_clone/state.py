"""
Per-build state shared between pipeline steps.

One ``BuildState`` exists per build run; steps read their inputs from it and
record their outputs on it. Nothing here is shared across builds.
"""

from dataclasses import dataclass
from typing import Optional

from .driver import Driver, VirtualMachine
from .ui import Ui


@dataclass
class BuildState:
    """Typed channel between steps of one build."""

    # Inputs
    ui: Ui
    driver: Driver

    # Outputs
    vm: Optional[VirtualMachine] = None
    error: Optional[Exception] = None
    destroy_vm: bool = False  # only ever set to True

    # Set by the runner
    halted: bool = False
    cancelled: bool = False
