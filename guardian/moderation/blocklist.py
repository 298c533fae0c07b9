"""
Blocklist Manager - Promotes harmful results into blocklist entries
"""

import logging
from datetime import datetime
from typing import Callable

from .models import (
    AnalysisResult,
    BlocklistItem,
    SEVERITY_CRITICAL,
    SEVERITY_HIGH,
    SEVERITY_MEDIUM,
    STATUS_SAFE,
)

logger = logging.getLogger(__name__)


class BlocklistManager:
    """
    Blocklist of harmful content, most recent first.

    Severity from classifier confidence:
    - confidence > 85: critical
    - confidence > 70: high
    - otherwise: medium

    "low" is a valid severity but automatic classification never assigns it.
    """

    CRITICAL_THRESHOLD = 85
    HIGH_THRESHOLD = 70

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._items: list[BlocklistItem] = []
        self._clock = clock

    @classmethod
    def derive_severity(cls, confidence: int) -> str:
        if confidence > cls.CRITICAL_THRESHOLD:
            return SEVERITY_CRITICAL
        if confidence > cls.HIGH_THRESHOLD:
            return SEVERITY_HIGH
        return SEVERITY_MEDIUM

    def on_result(self, result: AnalysisResult) -> BlocklistItem | None:
        """
        Create a blocklist entry for a harmful result.

        Returns:
            The new BlocklistItem, or None for safe results
        """
        if result.status == STATUS_SAFE:
            return None

        item = BlocklistItem(
            id=result.id,
            url=result.url,
            platform=result.platform,
            reason=", ".join(result.threats),
            severity=self.derive_severity(result.confidence),
            date_added=self._clock(),
        )
        self._items.insert(0, item)
        logger.info(f"Blocklisted {item.url} ({item.severity}): {item.reason}")
        return item

    def remove(self, item_id: str) -> bool:
        """
        Remove an entry by id.

        Returns:
            True if an entry was removed, False if no entry had that id
        """
        for index, item in enumerate(self._items):
            if item.id == item_id:
                del self._items[index]
                logger.info(f"Removed {item.url} from blocklist")
                return True

        logger.debug(f"Blocklist remove: no entry with id {item_id}")
        return False

    def items(self) -> list[BlocklistItem]:
        return list(self._items)

    def get(self, item_id: str) -> BlocklistItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)
