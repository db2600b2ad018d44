"""
Main client class for vSphere clone builds.

This module implements the primary interface for running the clone step
against a driver: validate the build, run the pipeline under a timeout, and
report the outcome as a ``CloneResult``.
"""

import asyncio
import uuid
from datetime import datetime
from typing import Optional

from .config import BuildConfig
from .driver import Driver
from .exceptions import OperationTimeoutError, UnsignaledCloneFailure
from .logging import logger
from .models import CloneResult, ValidationResult
from .pipeline import Runner
from .state import BuildState
from .step_clone import StepCloneVM
from .ui import NullUi, Ui
from .validation import validate_build_config


class CloneClient:
    """
    Main client for clone builds.

    Args:
        driver (Driver): Hypervisor driver used by the clone step
        ui (Optional[Ui]): Presentation sink; output is discarded if omitted
        timeout (int): Build timeout in seconds

    Attributes:
        driver (Driver): Current driver
        timeout (int): Build timeout
    """

    def __init__(
        self,
        driver: Driver,
        ui: Optional[Ui] = None,
        timeout: int = 3600,
    ) -> None:
        """Initialize the clone client."""
        self.driver = driver
        self.ui = ui or NullUi()
        self.timeout = timeout

    def validate(self, build: BuildConfig) -> ValidationResult:
        """Validate a build without touching the driver."""
        return validate_build_config(build)

    async def clone_vm(self, build: BuildConfig) -> CloneResult:
        """
        Clone the configured template into the configured location.

        Args:
            build: Build configuration

        Returns:
            CloneResult: Result of the clone build
        """
        operation_id = str(uuid.uuid4())
        start_time = datetime.now()
        template = build.clone.template
        location = build.location

        def result(success: bool, **kwargs) -> CloneResult:
            return CloneResult(
                operation_id=operation_id,
                success=success,
                template=template,
                vm_name=location.vm_name,
                vm_path=location.vm_path,
                duration=(datetime.now() - start_time).total_seconds(),
                **kwargs,
            )

        logger.info(
            f"Starting clone operation {operation_id}: {template} -> {location.vm_path}",
            operation_id=operation_id,
            template=template,
            vm_path=location.vm_path,
        )

        validation = self.validate(build)
        if not validation.valid:
            error_msg = f"Validation failed: {'; '.join(validation.errors)}"
            logger.error(
                error_msg,
                operation_id=operation_id,
                validation_errors=validation.errors,
            )
            return result(False, error=error_msg, validation=validation)

        for warning in validation.warnings:
            self.ui.message(f"Warning: {warning}")

        state = BuildState(ui=self.ui, driver=self.driver)
        runner = Runner([StepCloneVM(build.clone, location, force=build.force)])

        try:
            await asyncio.wait_for(runner.run(state), timeout=self.timeout)
        except asyncio.TimeoutError:
            error = OperationTimeoutError("clone", self.timeout)
            logger.error(error.message, operation_id=operation_id)
            return result(
                False,
                cancelled=True,
                error=error.message,
                validation=validation,
            )

        if state.halted:
            error = state.error or UnsignaledCloneFailure(template)
            logger.error(
                f"Clone operation {operation_id} failed: {error}",
                operation_id=operation_id,
            )
            return result(
                False,
                vm=state.vm,
                destroy_vm=state.destroy_vm,
                error=str(error),
                validation=validation,
            )

        logger.info(
            f"Clone operation {operation_id} completed successfully",
            operation_id=operation_id,
        )
        return result(
            True,
            vm=state.vm,
            destroy_vm=state.destroy_vm,
            validation=validation,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.driver.close()
