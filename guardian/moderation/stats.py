"""
Stats Aggregator - running counters over completed analyses
"""

from .models import AnalysisResult, Stats, STATUS_SAFE


class StatsAggregator:
    """
    Session counters.

    ``threats_blocked`` counts harmful results ever blocked; removing an
    entry from the blocklist does not decrement it.
    """

    def __init__(self, accuracy: float = 0.0):
        self.total_scanned = 0
        self.threats_blocked = 0
        self.safe_content = 0
        self.accuracy = accuracy

    def on_result(self, result: AnalysisResult) -> None:
        self.total_scanned += 1
        if result.status == STATUS_SAFE:
            self.safe_content += 1
        else:
            self.threats_blocked += 1

    def snapshot(self) -> Stats:
        return Stats(
            total_scanned=self.total_scanned,
            threats_blocked=self.threats_blocked,
            safe_content=self.safe_content,
            accuracy=self.accuracy,
        )
