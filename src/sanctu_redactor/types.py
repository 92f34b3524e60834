"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class RedactionCategory(Enum):
    """Why a span was redacted.  Values are the display/audit labels."""
    PII = "Personal Identifiable Information"
    SYMPTOM = "Mental Health Symptom"
    EMOTION = "Emotional Reference"
    TRAUMA = "Trauma Reference"          # reserved, no detector emits it yet
    RELATION = "Relationship Reference"
    MEDICAL = "Medical Information"

    @property
    def label(self) -> str:
        return self.value


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True, slots=True)
class Candidate:
    """A provisional detection, before overlap resolution."""
    start: int
    end: int               # exclusive
    text: str
    category: RedactionCategory
    risk_score: float      # 0.0–1.0
    context: str           # symptom category, fixed subtype, or text window


@dataclass(frozen=True, slots=True)
class RedactionEntry:
    """One applied redaction.  Offsets refer to the text of the call that made it."""
    original_text: str
    redacted_text: str     # the tag that replaced original_text
    start: int
    end: int
    category: RedactionCategory
    risk_score: float
    context: str
    consent_given: bool = False
    timestamp: str = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "original_text": self.original_text,
            "redacted_text": self.redacted_text,
            "start_pos": self.start,
            "end_pos": self.end,
            "reason": self.category.label,
            "risk_score": self.risk_score,
            "context": self.context,
            "consent_given": self.consent_given,
            "timestamp": self.timestamp,
        }


@dataclass(slots=True)
class RedactionResult:
    """Result of redacting a piece of text."""
    text: str                                              # redacted text with tags
    entries: list[RedactionEntry] = field(default_factory=list)
    # True when the person-name recognizer failed and only the gazetteer ran
    name_detection_degraded: bool = False


@dataclass(frozen=True, slots=True)
class AuditSummary:
    """Snapshot of a session log.  Always recomputed, never stored."""
    session_id: str
    timestamp: str
    total_redactions: int = 0
    risk_distribution: dict[str, int] = field(
        default_factory=lambda: {"low": 0, "medium": 0, "high": 0}
    )
    privacy_score: int = 100
    redaction_summary: dict[str, int] = field(
        default_factory=lambda: {c.name: 0 for c in RedactionCategory}
    )
    consent_status: dict[str, int] = field(
        default_factory=lambda: {"consented": 0, "not_consented": 0}
    )
    detailed_entries: list[dict[str, Any]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.total_redactions == 0

    @property
    def high_risk_redactions(self) -> int:
        return self.risk_distribution["high"]

    def to_dict(self) -> dict[str, Any]:
        """Plain-record form.  An empty summary renders as ``{}``."""
        if self.is_empty:
            return {}
        return {
            "session_id": self.session_id,
            "timestamp": self.timestamp,
            "total_redactions": self.total_redactions,
            "risk_distribution": dict(self.risk_distribution),
            "privacy_score": self.privacy_score,
            "redaction_summary": dict(self.redaction_summary),
            "high_risk_redactions": self.high_risk_redactions,
            "consent_status": dict(self.consent_status),
            "detailed_entries": list(self.detailed_entries),
        }
