"""Audit aggregation over a session log."""

from __future__ import annotations
from collections import Counter

from .session_log import SessionLog
from .types import AuditSummary, RedactionCategory, utc_now

LOW_RISK_MAX = 0.5
MEDIUM_RISK_MAX = 0.8


def risk_tier(score: float) -> str:
    """'low' (<= 0.5), 'medium' (<= 0.8) or 'high'."""
    if score > MEDIUM_RISK_MAX:
        return "high"
    if score > LOW_RISK_MAX:
        return "medium"
    return "low"


def privacy_score(total: int, high: int) -> int:
    """0–100.  Deliberately simple: only the high-risk count moves it."""
    if total == 0:
        return 100
    return min(100, 80 + high * 2)


def summarize(log: SessionLog) -> AuditSummary:
    """Compute an AuditSummary from the log as it stands now."""
    entries = log.entries
    if not entries:
        return AuditSummary(session_id=log.session_id, timestamp=utc_now())

    tiers = Counter(risk_tier(e.risk_score) for e in entries)
    distribution = {t: tiers.get(t, 0) for t in ("low", "medium", "high")}
    by_category = Counter(e.category for e in entries)
    consented = sum(1 for e in entries if e.consent_given)

    return AuditSummary(
        session_id=log.session_id,
        timestamp=utc_now(),
        total_redactions=len(entries),
        risk_distribution=distribution,
        privacy_score=privacy_score(len(entries), distribution["high"]),
        redaction_summary={c.name: by_category.get(c, 0) for c in RedactionCategory},
        consent_status={
            "consented": consented,
            "not_consented": len(entries) - consented,
        },
        detailed_entries=[e.to_dict() for e in entries],
    )
