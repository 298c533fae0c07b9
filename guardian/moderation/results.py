"""
Result Store - append-only history of analysis results, most recent first
"""

from .models import AnalysisResult, STATUS_SAFE


class ResultStore:
    """Session history of AnalysisResults. Results are never mutated or removed."""

    def __init__(self):
        self._results: list[AnalysisResult] = []
        self._ids: set[str] = set()

    def add(self, result: AnalysisResult) -> None:
        """Prepend a result. Ids must be unique."""
        if result.id in self._ids:
            raise ValueError(f"Duplicate result id: {result.id}")
        self._results.insert(0, result)
        self._ids.add(result.id)

    def items(self) -> list[AnalysisResult]:
        return list(self._results)

    def latest(self) -> AnalysisResult | None:
        return self._results[0] if self._results else None

    def get(self, result_id: str) -> AnalysisResult | None:
        if result_id not in self._ids:
            return None
        for result in self._results:
            if result.id == result_id:
                return result
        return None

    def count_harmful(self) -> int:
        return sum(1 for r in self._results if r.status != STATUS_SAFE)

    def count_by_status(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for result in self._results:
            counts[result.status] = counts.get(result.status, 0) + 1
        return counts

    def __len__(self) -> int:
        return len(self._results)

    def __contains__(self, result_id: object) -> bool:
        return result_id in self._ids

    def __iter__(self):
        return iter(list(self._results))
