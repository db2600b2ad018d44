"""
Sequential step runner.

Steps implement ``Step``; the runner owns the loop, marks the build halted or
cancelled, and unwinds cleanup callbacks in reverse order.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Sequence

from .logging import logger
from .models import StepAction
from .state import BuildState


class Step(ABC):
    """A single stage of a build."""

    @abstractmethod
    async def run(self, state: BuildState) -> StepAction:
        """Execute the step and report whether the build may continue."""

    async def cleanup(self, state: BuildState) -> None:
        """Undo whatever ``run`` left behind, if the build requires it."""


class Runner:
    """Runs steps one after another against a single build state."""

    def __init__(self, steps: Sequence[Step]) -> None:
        self.steps = list(steps)

    async def run(self, state: BuildState) -> None:
        """
        Run all steps until one halts.

        Cleanup runs for every step that started, last first, whether the
        build succeeded, halted or was cancelled.

        Raises:
            asyncio.CancelledError: If the build was cancelled mid-step
        """
        started: List[Step] = []
        try:
            for step in self.steps:
                started.append(step)
                action = await step.run(state)
                if action is StepAction.HALT:
                    state.halted = True
                    logger.info(
                        f"Build halted by {type(step).__name__}",
                        step=type(step).__name__,
                        error=str(state.error) if state.error else None,
                    )
                    break
        except asyncio.CancelledError:
            state.cancelled = True
            logger.warning("Build cancelled", steps_started=len(started))
            raise
        finally:
            await self._cleanup(started, state)

    async def _cleanup(self, started: List[Step], state: BuildState) -> None:
        for step in reversed(started):
            try:
                await step.cleanup(state)
            except Exception as e:
                logger.error(
                    f"Cleanup of {type(step).__name__} failed: {e}",
                    step=type(step).__name__,
                    exc_info=True,
                )
