"""Tests for sessions — log lifecycle, audit aggregation, core API."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from sanctu_redactor import (
    RedactionCategory,
    RedactionEntry,
    RedactionSession,
    RedactorConfig,
    SessionLog,
    summarize,
)
from sanctu_redactor.audit import privacy_score, risk_tier

SCENARIO_A = "My therapist said I have anxiety and panic attacks."
SCENARIO_B = "John hit me and I was terrified."


def _session() -> RedactionSession:
    return RedactionSession.create(config=RedactorConfig(use_presidio=False))


def _entry(risk, category=RedactionCategory.EMOTION, consent=False):
    return RedactionEntry(
        original_text="x", redacted_text="[tag]", start=0, end=1,
        category=category, risk_score=risk, context="c", consent_given=consent,
    )


# ── SessionLog ───────────────────────────────────────────────────────

def test_log_starts_empty_with_id():
    log = SessionLog()
    assert log.size == 0
    assert len(log.session_id) == 32


def test_log_reset_new_id():
    log = SessionLog()
    log.append([_entry(0.6)])
    old = log.session_id
    new = log.reset()
    assert log.size == 0
    assert new == log.session_id != old


def test_log_dump_plain_records():
    log = SessionLog()
    log.append([_entry(0.6, RedactionCategory.RELATION, consent=True)])
    record = log.dump()[0]
    assert record["reason"] == "Relationship Reference"
    assert record["start_pos"] == 0 and record["end_pos"] == 1
    assert record["consent_given"] is True


# ── Audit ────────────────────────────────────────────────────────────

def test_risk_tier_boundaries():
    assert risk_tier(0.5) == "low"
    assert risk_tier(0.51) == "medium"
    assert risk_tier(0.8) == "medium"
    assert risk_tier(0.81) == "high"


def test_privacy_score():
    assert privacy_score(0, 0) == 100
    assert privacy_score(3, 0) == 80
    assert privacy_score(5, 4) == 88
    assert privacy_score(20, 15) == 100


def test_summary_of_empty_log_is_neutral():
    summary = summarize(SessionLog())
    assert summary.is_empty
    assert summary.privacy_score == 100
    assert summary.to_dict() == {}


def test_summary_counts():
    log = SessionLog()
    log.append([
        _entry(0.3, RedactionCategory.PII),
        _entry(0.7, RedactionCategory.SYMPTOM, consent=True),
        _entry(0.9, RedactionCategory.SYMPTOM),
        _entry(0.95, RedactionCategory.EMOTION, consent=True),
    ])
    summary = summarize(log)
    assert summary.risk_distribution == {"low": 1, "medium": 1, "high": 2}
    assert summary.privacy_score == 84
    assert summary.high_risk_redactions == 2
    assert summary.redaction_summary == {
        "PII": 1, "SYMPTOM": 2, "EMOTION": 1, "TRAUMA": 0, "RELATION": 0, "MEDICAL": 0,
    }
    assert summary.consent_status == {"consented": 2, "not_consented": 2}
    d = summary.to_dict()
    assert d["session_id"] == log.session_id
    assert d["total_redactions"] == 4
    assert len(d["detailed_entries"]) == 4


# ── RedactionSession ─────────────────────────────────────────────────

def test_audit_accumulates_across_calls():
    session = _session()
    session.redact(SCENARIO_A, consent_given=True)
    session.redact(SCENARIO_B)
    summary = session.summarize_audit()
    assert summary.total_redactions == 5
    assert summary.risk_distribution == {"low": 0, "medium": 4, "high": 1}
    assert summary.privacy_score == 82
    assert summary.redaction_summary == {
        "PII": 1, "SYMPTOM": 2, "EMOTION": 1, "TRAUMA": 0, "RELATION": 1, "MEDICAL": 0,
    }
    assert summary.consent_status == {"consented": 3, "not_consented": 2}


def test_empty_input_on_fresh_session():
    session = _session()
    result = session.redact("")
    assert result.text == ""
    assert result.entries == []
    assert session.summarize_audit().to_dict() == {}


def test_reset_session():
    session = _session()
    session.redact(SCENARIO_B)
    old = session.session_id
    session.reset_session()
    summary = session.summarize_audit()
    assert summary.total_redactions == 0
    assert summary.session_id == session.session_id != old


def test_export_clean_text_records_consent():
    session = _session()
    clean = session.export_clean_text(SCENARIO_B)
    assert "John" not in clean and "terrified" not in clean
    assert session.summarize_audit().consent_status == {"consented": 2, "not_consented": 0}


def test_sessions_do_not_share_logs():
    a, b = _session(), _session()
    a.redact(SCENARIO_B)
    assert b.summarize_audit().is_empty
    assert a.session_id != b.session_id


def test_stats():
    session = _session()
    session.redact(SCENARIO_A)
    assert session.stats == {"session_id": session.session_id, "log_size": 3}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
