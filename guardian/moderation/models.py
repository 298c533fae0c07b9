"""
Moderation data model
Analysis results, blocklist entries, stats and classifier verdicts
"""

from dataclasses import dataclass, field
from datetime import datetime

from .errors import ClassificationFailedError

# Supported platforms
PLATFORMS: tuple[str, ...] = ("Instagram", "Twitter", "Facebook", "TikTok", "YouTube")

# Classification verdicts (mutually exclusive)
STATUS_SAFE = "safe"
STATUS_ABUSIVE = "abusive"
STATUS_SEXUAL = "sexual"
STATUS_MIXED = "mixed"
STATUSES: tuple[str, ...] = (STATUS_SAFE, STATUS_ABUSIVE, STATUS_SEXUAL, STATUS_MIXED)

# Blocklist severity levels, lowest first
SEVERITY_LOW = "low"
SEVERITY_MEDIUM = "medium"
SEVERITY_HIGH = "high"
SEVERITY_CRITICAL = "critical"
SEVERITIES: tuple[str, ...] = (SEVERITY_LOW, SEVERITY_MEDIUM, SEVERITY_HIGH, SEVERITY_CRITICAL)

# Threat taxonomy, in the order the mock classifier draws from it
THREAT_EXPLICIT_SEXUAL = "Explicit sexual content detected"
THREAT_HARASSMENT = "Harassment and bullying language"
THREAT_VIOLENT_IMAGERY = "Violent imagery present"
THREAT_HATE_SPEECH = "Hate speech patterns"
THREAT_MINOR_SAFETY = "Inappropriate minor content"
THREAT_CYBERBULLYING = "Cyberbullying indicators"
THREAT_TAXONOMY: tuple[str, ...] = (
    THREAT_EXPLICIT_SEXUAL,
    THREAT_HARASSMENT,
    THREAT_VIOLENT_IMAGERY,
    THREAT_HATE_SPEECH,
    THREAT_MINOR_SAFETY,
    THREAT_CYBERBULLYING,
)

DEFAULT_CONTENT_PREVIEW = "Content analysis completed using advanced ML models..."


@dataclass(frozen=True)
class Verdict:
    """Classifier output, before the pipeline turns it into an AnalysisResult"""

    platform: str
    status: str
    confidence: int  # percent, 0-100
    threats: tuple[str, ...] = ()
    content_preview: str = DEFAULT_CONTENT_PREVIEW

    def validate(self) -> None:
        """
        Check the verdict is internally consistent.

        Raises:
            ClassificationFailedError: if any field is out of its allowed set
        """
        if self.platform not in PLATFORMS:
            raise ClassificationFailedError(f"Unsupported platform: {self.platform!r}")
        if self.status not in STATUSES:
            raise ClassificationFailedError(f"Unknown status: {self.status!r}")
        if isinstance(self.confidence, bool) or not isinstance(self.confidence, int):
            raise ClassificationFailedError(f"Confidence must be an integer, got {self.confidence!r}")
        if not 0 <= self.confidence <= 100:
            raise ClassificationFailedError(f"Confidence out of range: {self.confidence}")
        if self.status == STATUS_SAFE and self.threats:
            raise ClassificationFailedError("Safe verdict must not carry threats")
        if self.status != STATUS_SAFE and not self.threats:
            raise ClassificationFailedError(f"{self.status!r} verdict must carry at least one threat")

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "status": self.status,
            "confidence": self.confidence,
            "threats": list(self.threats),
            "content_preview": self.content_preview,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """A completed analysis of one submitted URL"""

    id: str
    url: str
    platform: str
    status: str  # safe, abusive, sexual, mixed
    confidence: int
    threats: tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=datetime.now)
    content_preview: str = DEFAULT_CONTENT_PREVIEW

    @property
    def is_safe(self) -> bool:
        return self.status == STATUS_SAFE

    @classmethod
    def from_verdict(cls, result_id: str, url: str, verdict: Verdict, timestamp: datetime) -> "AnalysisResult":
        return cls(
            id=result_id,
            url=url,
            platform=verdict.platform,
            status=verdict.status,
            confidence=verdict.confidence,
            threats=tuple(verdict.threats),
            timestamp=timestamp,
            content_preview=verdict.content_preview,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "url": self.url,
            "platform": self.platform,
            "status": self.status,
            "confidence": self.confidence,
            "threats": list(self.threats),
            "timestamp": self.timestamp.isoformat(),
            "content_preview": self.content_preview,
        }


@dataclass(frozen=True)
class BlocklistItem:
    """Blocklist entry derived from a harmful AnalysisResult (shares its id)"""

    id: str
    url: str
    platform: str
    reason: str
    severity: str  # low, medium, high, critical
    date_added: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "platform": self.platform,
            "reason": self.reason,
            "severity": self.severity,
            "date_added": self.date_added.isoformat(),
        }


@dataclass(frozen=True)
class Stats:
    """Point-in-time view of the session counters"""

    total_scanned: int = 0
    threats_blocked: int = 0
    safe_content: int = 0
    accuracy: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_scanned": self.total_scanned,
            "threats_blocked": self.threats_blocked,
            "safe_content": self.safe_content,
            "accuracy": self.accuracy,
        }
