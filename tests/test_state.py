"""Tests for the result store, blocklist manager, stats aggregator and state checks."""

from datetime import datetime

import pytest

from guardian.moderation.blocklist import BlocklistManager
from guardian.moderation.models import AnalysisResult
from guardian.moderation.results import ResultStore
from guardian.moderation.state import ModerationState
from guardian.moderation.stats import StatsAggregator

NOW = datetime(2024, 5, 1, 12, 0, 0)


def _result(result_id, status="abusive", confidence=90, threats=None, url=None):
    if threats is None:
        threats = () if status == "safe" else ("Harassment and bullying language", "Hate speech patterns")
    return AnalysisResult(
        id=result_id,
        url=url or f"https://instagram.com/p/{result_id}",
        platform="Instagram",
        status=status,
        confidence=confidence,
        threats=tuple(threats),
        timestamp=NOW,
    )


@pytest.mark.parametrize(
    "confidence, severity",
    [
        (100, "critical"),
        (90, "critical"),
        (86, "critical"),
        (85, "high"),
        (75, "high"),
        (71, "high"),
        (70, "medium"),
        (50, "medium"),
        (0, "medium"),
    ],
)
def test_derive_severity(confidence, severity):
    assert BlocklistManager.derive_severity(confidence) == severity


def test_safe_result_is_not_blocklisted():
    blocklist = BlocklistManager(clock=lambda: NOW)
    assert blocklist.on_result(_result("a", status="safe")) is None
    assert len(blocklist) == 0


def test_harmful_result_creates_entry():
    blocklist = BlocklistManager(clock=lambda: NOW)
    item = blocklist.on_result(_result("a", status="mixed", confidence=75))

    assert item.id == "a"
    assert item.url == "https://instagram.com/p/a"
    assert item.platform == "Instagram"
    assert item.reason == "Harassment and bullying language, Hate speech patterns"
    assert item.severity == "high"
    assert item.date_added == NOW
    assert "a" in blocklist


def test_blocklist_is_most_recent_first():
    blocklist = BlocklistManager()
    for result_id in ("a", "b", "c"):
        blocklist.on_result(_result(result_id))
    assert [i.id for i in blocklist.items()] == ["c", "b", "a"]


def test_remove_is_idempotent():
    blocklist = BlocklistManager()
    blocklist.on_result(_result("a"))
    blocklist.on_result(_result("b"))

    assert blocklist.remove("a") is True
    assert blocklist.remove("a") is False
    assert blocklist.remove("missing") is False
    assert [i.id for i in blocklist.items()] == ["b"]
    assert blocklist.get("a") is None


def test_result_store_prepends_and_rejects_duplicates():
    store = ResultStore()
    store.add(_result("a", status="safe"))
    store.add(_result("b"))

    assert [r.id for r in store] == ["b", "a"]
    assert store.latest().id == "b"
    assert store.get("a").status == "safe"
    assert store.count_harmful() == 1
    assert store.count_by_status() == {"safe": 1, "abusive": 1}

    with pytest.raises(ValueError):
        store.add(_result("a"))
    assert len(store) == 2


def test_stats_counters():
    stats = StatsAggregator(accuracy=94.7)
    for status in ("safe", "abusive", "safe", "sexual", "mixed"):
        stats.on_result(_result(status + str(stats.total_scanned), status=status))

    snapshot = stats.snapshot()
    assert snapshot.total_scanned == 5
    assert snapshot.safe_content == 2
    assert snapshot.threats_blocked == 3
    assert snapshot.accuracy == 94.7
    assert snapshot.to_dict() == {
        "total_scanned": 5,
        "threats_blocked": 3,
        "safe_content": 2,
        "accuracy": 94.7,
    }


def _state_with(*results):
    state = ModerationState()
    for result in results:
        state.results.add(result)
        state.blocklist.on_result(result)
        state.stats.on_result(result)
    return state


def test_consistent_state_has_no_problems():
    state = _state_with(_result("a", status="safe"), _result("b"), _result("c", status="sexual"))
    assert state.check_invariants() == []

    state.blocklist.remove("b")
    assert state.check_invariants() == []

    data = state.to_dict()
    assert [r["id"] for r in data["results"]] == ["c", "b", "a"]
    assert [i["id"] for i in data["blocklist"]] == ["c"]
    assert data["blocklist_size"] == 1
    assert data["stats"]["threats_blocked"] == 2


def test_orphan_blocklist_entry_is_reported():
    state = _state_with(_result("a"))
    state.blocklist.on_result(_result("ghost"))

    problems = state.check_invariants()
    assert len(problems) == 1
    assert "ghost" in problems[0]


def test_counter_drift_is_reported():
    state = _state_with(_result("a", status="safe"))
    state.stats.on_result(_result("b"))

    assert len(state.check_invariants()) == 2
