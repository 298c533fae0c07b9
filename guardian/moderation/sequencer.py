"""
Stage Sequencer
Runs named processing stages strictly in order with progress reporting
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable

from .errors import StageFailedError
from .notifications import INFO, Notification

logger = logging.getLogger(__name__)


ProgressCallback = Callable[[int, int, float], None]
NotificationCallback = Callable[[Notification], None]


class Scheduler(ABC):
    """Decides how long a stage actually waits."""

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Wait (or pretend to wait) for a stage's minimum duration"""


class RealtimeScheduler(Scheduler):
    """Waits the full stage duration on the event loop"""

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class ImmediateScheduler(Scheduler):
    """
    Yields to the event loop without waiting.

    Requested durations are recorded so tests can assert on them.
    """

    def __init__(self):
        self.requested: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.requested.append(seconds)
        await asyncio.sleep(0)


@dataclass(frozen=True)
class Stage:
    """A single named pipeline stage"""

    name: str
    min_duration: float = 0.0  # seconds
    notification: Notification | None = None
    action: Callable[[], Awaitable[None] | None] | None = None


class StageSequencer:
    """
    Sequential stage runner.

    For each stage, in order:
    1. Wait the stage's minimum duration via the scheduler
    2. Run the stage action (if any); an exception aborts the sequence
    3. Report progress (index + 1) / count
    4. Emit the stage's side-channel notification (if any)
    """

    def __init__(self, scheduler: Scheduler | None = None):
        self.scheduler = scheduler or RealtimeScheduler()

    async def run(
        self,
        stages: list[Stage],
        on_progress: ProgressCallback | None = None,
        on_notification: NotificationCallback | None = None,
    ) -> None:
        """
        Execute stages sequentially.

        Args:
            stages: Ordered stage list
            on_progress: Called as (stage_index, stage_count, fraction) after each stage
            on_notification: Receives notifications attached to stages

        Raises:
            StageFailedError: if a stage action raises
        """
        count = len(stages)
        for index, stage in enumerate(stages):
            logger.debug(f"Stage {index + 1}/{count}: {stage.name}")
            await self.scheduler.sleep(stage.min_duration)

            if stage.action is not None:
                try:
                    outcome = stage.action()
                    if asyncio.iscoroutine(outcome):
                        await outcome
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.warning(f"Stage '{stage.name}' failed: {e}")
                    raise StageFailedError(index, stage.name, e) from e

            if on_progress is not None:
                on_progress(index, count, (index + 1) / count)

            if stage.notification is not None and on_notification is not None:
                on_notification(stage.notification)


STAGE_NAMES: tuple[str, ...] = (
    "Validating URL and extracting metadata...",
    "Scraping content using advanced libraries...",
    "Preprocessing content for AI analysis...",
    "Running abuse detection models...",
    "Analyzing sexual content patterns...",
    "Calculating threat confidence scores...",
    "Generating final assessment...",
)

# Stage that surfaces long-running model status to the user
MODEL_STAGE_INDEX = 3

MODEL_PROCESSING_NOTICE = Notification(
    title="AI Model Processing",
    description="Advanced neural networks analyzing content patterns...",
    severity=INFO,
)


def default_stages(stage_delay_s: float = 0.8) -> list[Stage]:
    """Build the standard seven-stage analysis sequence."""
    return [
        Stage(
            name=name,
            min_duration=stage_delay_s,
            notification=MODEL_PROCESSING_NOTICE if index == MODEL_STAGE_INDEX else None,
        )
        for index, name in enumerate(STAGE_NAMES)
    ]
