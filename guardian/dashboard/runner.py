"""
Background event loop that owns the moderation pipeline for the web server
"""

import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable

from guardian.moderation import AnalysisResult, ContentModerationPipeline

logger = logging.getLogger(__name__)


class PipelineRunner:
    """
    Runs the pipeline on one dedicated asyncio loop thread.

    Flask request threads never touch pipeline state directly; every call is
    marshalled onto the loop so the single-submission invariant holds.
    """

    def __init__(self, pipeline: ContentModerationPipeline, call_timeout: float = 5.0):
        self.pipeline = pipeline
        self.call_timeout = call_timeout
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run_loop, name="pipeline-loop", daemon=True)
        self._thread.start()

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def call(self, fn: Callable[..., Any], *args: Any) -> Any:
        """Run a synchronous pipeline method on the loop thread and return its result"""

        async def invoke():
            return fn(*args)

        future = asyncio.run_coroutine_threadsafe(invoke(), self._loop)
        return future.result(timeout=self.call_timeout)

    def start_analysis(self, url: str) -> "asyncio.Task[AnalysisResult]":
        """
        Admit a URL on the loop thread and let the analysis continue in the background.

        Raises:
            InvalidInputError / PipelineBusyError: admission failed
        """

        def start() -> "asyncio.Task[AnalysisResult]":
            task = self.pipeline.start(url)
            task.add_done_callback(self._log_outcome)
            return task

        return self.call(start)

    def submit(self, url: str) -> "Future[AnalysisResult]":
        """Run a full analysis and return a future for its result"""
        return asyncio.run_coroutine_threadsafe(self.pipeline.submit(url), self._loop)

    @staticmethod
    def _log_outcome(task: "asyncio.Task[AnalysisResult]") -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            # Already surfaced as a notification by the pipeline
            logger.info(f"Background analysis ended with {error.__class__.__name__}: {error}")
        else:
            result = task.result()
            logger.info(f"Background analysis finished: {result.url} -> {result.status}")

    def stop(self) -> None:
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=self.call_timeout)
