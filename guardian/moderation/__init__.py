"""
Content Moderation Module
Staged analysis pipeline with blocklist promotion and session stats:
1. Stage Sequencer
2. Content Classifier (mock or model-backed)
3. Result Store, Blocklist Manager, Stats Aggregator
"""

from .blocklist import BlocklistManager
from .classifier import (
    CancellationToken,
    ContentClassifier,
    LLMClassifier,
    RandomClassifier,
    ScriptedClassifier,
    build_classifier,
    detect_platform,
)
from .errors import (
    ClassificationCancelledError,
    ClassificationError,
    ClassificationFailedError,
    ClassificationTimeoutError,
    InvalidInputError,
    ModerationError,
    PipelineBusyError,
    StageFailedError,
)
from .models import AnalysisResult, BlocklistItem, Stats, Verdict
from .notifications import Notification, NotificationCenter
from .pipeline import ContentModerationPipeline
from .results import ResultStore
from .sequencer import ImmediateScheduler, RealtimeScheduler, Stage, StageSequencer, default_stages
from .state import ModerationState
from .stats import StatsAggregator

__all__ = [
    "AnalysisResult",
    "BlocklistItem",
    "BlocklistManager",
    "CancellationToken",
    "ClassificationCancelledError",
    "ClassificationError",
    "ClassificationFailedError",
    "ClassificationTimeoutError",
    "ContentClassifier",
    "ContentModerationPipeline",
    "ImmediateScheduler",
    "InvalidInputError",
    "LLMClassifier",
    "ModerationError",
    "ModerationState",
    "Notification",
    "NotificationCenter",
    "PipelineBusyError",
    "RandomClassifier",
    "RealtimeScheduler",
    "ResultStore",
    "ScriptedClassifier",
    "Stage",
    "StageFailedError",
    "StageSequencer",
    "Stats",
    "StatsAggregator",
    "Verdict",
    "build_classifier",
    "default_stages",
    "detect_platform",
]
