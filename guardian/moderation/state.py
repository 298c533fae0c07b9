"""
Moderation state container - owns the result store, blocklist and stats
"""

from dataclasses import dataclass, field

from .blocklist import BlocklistManager
from .results import ResultStore
from .stats import StatsAggregator


@dataclass
class ModerationState:
    """All session state mutated by a pipeline run"""

    results: ResultStore = field(default_factory=ResultStore)
    blocklist: BlocklistManager = field(default_factory=BlocklistManager)
    stats: StatsAggregator = field(default_factory=StatsAggregator)

    def check_invariants(self) -> list[str]:
        """Returns a list of violated invariants (empty when consistent)."""
        problems = []
        stats = self.stats.snapshot()

        harmful = self.results.count_harmful()
        if stats.total_scanned != stats.safe_content + harmful:
            problems.append(
                f"total_scanned ({stats.total_scanned}) != safe_content ({stats.safe_content})"
                f" + harmful results ({harmful})"
            )
        if stats.total_scanned != len(self.results):
            problems.append(
                f"total_scanned ({stats.total_scanned}) != stored results ({len(self.results)})"
            )

        for item in self.blocklist.items():
            result = self.results.get(item.id)
            if result is None:
                problems.append(f"blocklist entry {item.id} has no originating result")
            elif result.is_safe:
                problems.append(f"blocklist entry {item.id} originates from a safe result")

        return problems

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results.items()],
            "blocklist": [i.to_dict() for i in self.blocklist.items()],
            "stats": self.stats.snapshot().to_dict(),
            "blocklist_size": len(self.blocklist),
        }
