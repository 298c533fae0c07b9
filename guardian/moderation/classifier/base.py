"""
Base classifier with deadline and cancellation handling
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from ..errors import (
    ClassificationCancelledError,
    ClassificationError,
    ClassificationFailedError,
    ClassificationTimeoutError,
)
from ..models import Verdict

logger = logging.getLogger(__name__)


class CancellationToken:
    """Signals an in-flight classification to stop."""

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


class ContentClassifier(ABC):
    """
    Base class for all content classifiers.

    Subclasses implement ``_classify``; ``classify`` wraps it with the
    timeout and cancellation contract and validates the verdict.
    """

    name = "base"

    @abstractmethod
    async def _classify(self, url: str) -> Verdict:
        """Produce a verdict for the URL"""

    async def classify(
        self,
        url: str,
        cancel_token: CancellationToken | None = None,
        timeout: float | None = None,
    ) -> Verdict:
        """
        Classify content behind a URL.

        Args:
            url: Non-empty URL (validated by the caller)
            cancel_token: Optional token that aborts the classification
            timeout: Seconds before giving up, None for no deadline

        Returns:
            A validated Verdict

        Raises:
            ClassificationTimeoutError: deadline expired
            ClassificationCancelledError: token was cancelled
            ClassificationFailedError: classifier raised or returned an invalid verdict
        """
        if cancel_token is not None and cancel_token.cancelled:
            raise ClassificationCancelledError("Classification cancelled before start")

        work = asyncio.ensure_future(self._classify(url))
        waiters = {work}
        cancel_waiter = None
        if cancel_token is not None:
            cancel_waiter = asyncio.ensure_future(cancel_token.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            work.cancel()
            raise
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()

        if work not in done:
            work.cancel()
            await asyncio.gather(work, return_exceptions=True)
            if cancel_token is not None and cancel_token.cancelled:
                logger.info(f"{self.name} classification cancelled for {url}")
                raise ClassificationCancelledError("Classification cancelled")
            logger.warning(f"{self.name} classification timed out after {timeout}s for {url}")
            raise ClassificationTimeoutError(f"Classification did not finish within {timeout}s")

        try:
            verdict = work.result()
        except ClassificationError:
            raise
        except Exception as e:
            logger.error(f"{self.name} classifier error: {e}")
            raise ClassificationFailedError(str(e)) from e

        verdict.validate()
        return verdict
