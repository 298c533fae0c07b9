"""
Content Moderation Pipeline
Orchestrates stages, classification, result storage, blocklisting and stats
"""

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Callable

from guardian.config import config
from .blocklist import BlocklistManager
from .classifier import CancellationToken, ContentClassifier, build_classifier
from .errors import InvalidInputError, ModerationError, PipelineBusyError
from .models import AnalysisResult, BlocklistItem, Stats
from .notifications import NotificationCenter
from .sequencer import Scheduler, Stage, StageSequencer, default_stages
from .state import ModerationState
from .stats import StatsAggregator

logger = logging.getLogger(__name__)

# Pipeline states
IDLE = "idle"
VALIDATING = "validating"
RUNNING = "running"
COMPLETED = "completed"

ProgressListener = Callable[[float, int, int], None]


def _configured_seed() -> int | None:
    seed = (config.MOCK_SEED or "").strip()
    try:
        return int(seed) if seed else None
    except ValueError:
        logger.warning(f"Ignoring non-integer MOCK_SEED={seed!r}")
        return None


class ContentModerationPipeline:
    """
    Content Moderation Pipeline

    States per submission:
        idle -> validating -> running -> completed -> idle

    Flow:
    1. Validation: blank URLs are rejected (InvalidInputError), and so is any
       submission while another one runs (PipelineBusyError). Neither touches
       results, blocklist or stats.
    2. Stages: the fixed stage list runs in order; ``progress`` goes 0 -> 1.
    3. Classification: the classifier produces a verdict under a timeout and
       the run's cancellation token.
    4. Completion, in this order:
       - result prepended to the result store
       - harmful result promoted to the blocklist
       - stats updated

    A classifier or stage failure aborts the run before step 4, reports an
    error notification and returns the pipeline to idle.
    """

    def __init__(
        self,
        classifier: ContentClassifier | None = None,
        state: ModerationState | None = None,
        scheduler: Scheduler | None = None,
        stages: list[Stage] | None = None,
        notifications: NotificationCenter | None = None,
        classify_timeout: float | None = None,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the moderation pipeline.

        Args:
            classifier: Verdict producer (default: from CLASSIFIER_BACKEND)
            state: Result store, blocklist and stats container
            scheduler: Controls stage timing (default: real time)
            stages: Stage list (default: the standard seven stages)
            notifications: Notification center for user-facing toasts
            classify_timeout: Classifier deadline in seconds (default: CLASSIFY_TIMEOUT_S)
            id_factory: Result id generator (default: uuid4 hex)
            clock: Time source for timestamps
        """
        self.classifier = classifier or build_classifier(config.CLASSIFIER_BACKEND, seed=_configured_seed())
        self.state = state or ModerationState(
            blocklist=BlocklistManager(clock=clock),
            stats=StatsAggregator(accuracy=config.MODEL_ACCURACY),
        )
        self.sequencer = StageSequencer(scheduler)
        self.stages = list(stages) if stages is not None else default_stages(config.STAGE_DELAY_MS / 1000.0)
        self.notifications = notifications or NotificationCenter(history=config.NOTIFICATION_HISTORY, clock=clock)
        self.classify_timeout = config.CLASSIFY_TIMEOUT_S if classify_timeout is None else classify_timeout
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._clock = clock

        self.phase = IDLE
        self.progress = 0.0
        self.stages_completed = 0
        self.current_url: str | None = None
        self._cancel_token: CancellationToken | None = None
        self._progress_listeners: list[ProgressListener] = []

    # -- observation -----------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        return self.phase != IDLE

    @property
    def results(self) -> list[AnalysisResult]:
        return self.state.results.items()

    @property
    def blocklist(self) -> list[BlocklistItem]:
        return self.state.blocklist.items()

    @property
    def stats(self) -> Stats:
        return self.state.stats.snapshot()

    @property
    def current_stage(self) -> str | None:
        if self.phase != RUNNING or self.stages_completed >= len(self.stages):
            return None
        return self.stages[self.stages_completed].name

    def add_progress_listener(self, listener: ProgressListener) -> None:
        """Register ``listener(progress, stages_completed, stage_count)``"""
        self._progress_listeners.append(listener)

    def snapshot(self) -> dict:
        """Full view for the presentation layer"""
        return {
            "state": self.phase,
            "progress": self.progress,
            "current_stage": self.current_stage,
            "stages_completed": self.stages_completed,
            "stage_count": len(self.stages),
            "current_url": self.current_url,
            **self.state.to_dict(),
        }

    # -- operations ------------------------------------------------------------

    async def submit(self, url: str) -> AnalysisResult:
        """
        Analyze a URL end to end.

        Returns:
            The stored AnalysisResult

        Raises:
            InvalidInputError: URL is blank
            PipelineBusyError: another submission is running
            ClassificationError / StageFailedError: the run was aborted
        """
        cleaned = self._admit(url)
        return await self._execute(cleaned)

    def start(self, url: str) -> "asyncio.Task[AnalysisResult]":
        """
        Admit a URL and run the analysis as a background task.

        Must be called from inside the running event loop. Admission errors
        are raised immediately; run errors surface on the returned task.
        """
        loop = asyncio.get_running_loop()
        cleaned = self._admit(url)
        return loop.create_task(self._execute(cleaned))

    def cancel(self) -> bool:
        """Cancel the in-flight classification. Returns False when nothing is running."""
        if self._cancel_token is None or self.phase != RUNNING:
            return False
        self._cancel_token.cancel()
        logger.info(f"Cancellation requested for {self.current_url}")
        return True

    def remove_from_blocklist(self, item_id: str) -> bool:
        """
        Remove a blocklist entry. Missing ids are a no-op.

        Returns:
            True if an entry was removed
        """
        removed = self.state.blocklist.remove(item_id)
        self.notifications.info("Removed from Blocklist", "Item successfully removed from blocklist")
        return removed

    # -- internals -------------------------------------------------------------

    def _admit(self, url: str) -> str:
        """Idle -> validating -> running, synchronously (no await between check and transition)"""
        if self.phase != IDLE:
            error = PipelineBusyError(f"Already analyzing {self.current_url}")
            self.notifications.error(error.title, "Please wait for the current analysis to finish")
            raise error

        self.phase = VALIDATING
        cleaned = (url or "").strip()
        if not cleaned:
            self.phase = IDLE
            self.notifications.error(InvalidInputError.title, "Please enter a valid social media URL")
            raise InvalidInputError("URL must not be empty")

        self.phase = RUNNING
        self.progress = 0.0
        self.stages_completed = 0
        self.current_url = cleaned
        self._cancel_token = CancellationToken()
        logger.info(f"Analyzing {cleaned}")
        return cleaned

    async def _execute(self, url: str) -> AnalysisResult:
        try:
            await self.sequencer.run(
                self.stages,
                on_progress=self._on_progress,
                on_notification=self.notifications.publish,
            )
            verdict = await self.classifier.classify(
                url,
                cancel_token=self._cancel_token,
                timeout=self.classify_timeout,
            )
            result = AnalysisResult.from_verdict(self._id_factory(), url, verdict, self._clock())

            self.state.results.add(result)
            item = self.state.blocklist.on_result(result)
            self.state.stats.on_result(result)
        except ModerationError as e:
            logger.warning(f"Analysis of {url} aborted: {e}")
            self._reset()
            self.notifications.error(e.title, str(e))
            raise
        except asyncio.CancelledError:
            logger.info(f"Analysis of {url} cancelled")
            self._reset()
            raise
        except Exception as e:
            logger.exception(f"Unexpected error analyzing {url}")
            self._reset()
            self.notifications.error("Analysis Failed", str(e))
            raise

        self.phase = COMPLETED
        description = (
            f"{result.platform} content classified as {result.status.upper()} "
            f"({result.confidence}% confidence)"
        )
        if item is not None:
            description += f", added to blocklist as {item.severity.upper()}"
        self.notifications.info("Analysis Complete", description)
        self._reset()
        return result

    def _on_progress(self, index: int, count: int, fraction: float) -> None:
        self.stages_completed = index + 1
        self.progress = fraction
        for listener in list(self._progress_listeners):
            listener(fraction, index + 1, count)

    def _reset(self) -> None:
        self.phase = IDLE
        self.progress = 0.0
        self.stages_completed = 0
        self.current_url = None
        self._cancel_token = None
