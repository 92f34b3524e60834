"""Tests for the redactor — detectors, risk scoring, planner, applier."""

import sys, os, time
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from sanctu_redactor import (
    Candidate,
    Lexicon,
    LexiconError,
    RedactionCategory,
    Redactor,
    RedactorConfig,
    SessionLog,
    apply_plan,
    plan,
    redaction_tag,
)
from sanctu_redactor.detectors import (
    detect_emotions,
    detect_medical,
    detect_names,
    detect_relationships,
    detect_symptoms,
)
from sanctu_redactor.risk import (
    adjust_emotion,
    adjust_relation,
    context_window,
    escalate_symptom,
    name_risk,
)

LEX = Lexicon.default()


def _redactor(**kw) -> Redactor:
    return Redactor(RedactorConfig(use_presidio=False, **kw))


def _cand(start, end, risk, category=RedactionCategory.SYMPTOM, text="x"):
    return Candidate(start=start, end=end, text=text, category=category,
                     risk_score=risk, context="test")


# ── Lexicon ──────────────────────────────────────────────────────────

def test_whole_word_case_insensitive():
    hits = detect_emotions("Sad, so SAD. Sadness is different.", LEX)
    assert [h.text for h in hits] == ["Sad", "SAD"]
    assert [h.start for h in hits] == [0, 8]


def test_hyphenated_terms_match_as_one_span():
    hits = detect_symptoms("thoughts of self-harm", LEX)
    assert [h.text for h in hits] == ["self-harm"]


def test_bad_weight_rejected_at_build():
    with pytest.raises(LexiconError):
        Lexicon.build(emotion_weights={"sad": 1.5})


def test_empty_term_rejected_at_build():
    with pytest.raises(LexiconError):
        Lexicon.build(medical_terms=["therapy", ""])


def test_symptom_category_must_be_list():
    with pytest.raises(LexiconError):
        Lexicon.build(symptom_patterns={"anxiety_disorders": "panic"})


def test_bad_extra_name_fails_at_construction():
    with pytest.raises(LexiconError):
        _redactor(extra_names=["  "])


# ── Risk adjustment ──────────────────────────────────────────────────

def test_context_window_clamped():
    text = "a" * 10 + "NAME" + "b" * 100
    assert context_window(text, 10, 14) == "a" * 10 + "NAME" + "b" * 50


def test_symptom_escalation_is_sequential_and_capped():
    text = "I think about suicide, I was abused, ended up in hospital"
    assert escalate_symptom(0.7, text) == 1.0
    assert escalate_symptom(0.7, "assault") == pytest.approx(0.85)
    assert escalate_symptom(0.7, "the EMERGENCY room") == pytest.approx(0.8)
    assert escalate_symptom(0.7, "nothing here") == 0.7


def test_emotion_tiers_first_match_wins():
    assert adjust_emotion(0.5, "i could die") == pytest.approx(0.8)
    # "abuse" would give +0.2, but "kill" is checked first
    assert adjust_emotion(0.5, "abuse and kill") == pytest.approx(0.8)
    assert adjust_emotion(0.5, "I can't go on") == pytest.approx(0.65)
    assert adjust_emotion(0.9, "kill") == 1.0


def test_relation_tiers():
    assert adjust_relation(0.6, "he would yell") == pytest.approx(0.9)
    assert adjust_relation(0.6, "she left me") == pytest.approx(0.8)
    assert adjust_relation(0.6, "I fear him") == pytest.approx(0.75)
    assert adjust_relation(0.95, "hit") == 1.0


def test_name_risk_adjustments():
    assert name_risk("John hit me") == pytest.approx(0.8)
    assert name_risk("Mark hit me, I'm afraid") == pytest.approx(1.0)
    assert name_risk("my therapist Sarah") == pytest.approx(0.3)
    assert name_risk("Dr. Mark hurt me") == pytest.approx(0.6)
    assert name_risk("lunch with Amy") == 0.5


# ── Detectors ────────────────────────────────────────────────────────

def test_symptom_context_is_category():
    hits = detect_symptoms("my anxiety is back", LEX)
    assert len(hits) == 1
    assert hits[0].context == "anxiety_disorders"
    assert hits[0].risk_score == 0.7


def test_high_risk_symptom_category():
    hits = detect_symptoms("I have been depressed", LEX)
    assert hits[0].risk_score == 0.9


def test_every_occurrence_reported():
    hits = detect_relationships("my mom and my Mom", LEX)
    assert [(h.start, h.end) for h in hits] == [(3, 6), (14, 17)]


def test_medical_fixed_weight():
    hits = detect_medical("My psychiatrist changed my medication dosage after a suicide attempt.", LEX)
    assert {h.text for h in hits} == {"psychiatrist", "medication", "dosage"}
    assert all(h.risk_score == 0.7 for h in hits)
    assert all(h.category is RedactionCategory.MEDICAL for h in hits)


def test_gazetteer_names_all_occurrences_share_first_score():
    text = "John hit me. Later john apologised."
    hits = detect_names(text, LEX)
    assert [h.text for h in hits] == ["John", "john"]
    assert all(h.risk_score == pytest.approx(0.8) for h in hits)
    assert hits[0].context == hits[1].context


def test_extracted_names_dedupe_against_gazetteer():
    hits = detect_names("john and John", LEX, extracted=["John"])
    assert len(hits) == 2


def test_extracted_name_not_in_text_skipped():
    hits = detect_names("nobody here", LEX, extracted=["Priya Sharma"])
    assert hits == []


def test_extracted_full_name():
    hits = detect_names("Priya Sharma hurt me", LEX, extracted=["Priya Sharma"])
    assert len(hits) == 1
    assert hits[0].text == "Priya Sharma"
    assert hits[0].risk_score == pytest.approx(0.8)
    assert hits[0].category is RedactionCategory.PII


def test_extra_gazetteer_names():
    r = _redactor(extra_names=["Tomasz"])
    result = r.redact("Tomasz called.", SessionLog())
    assert result.text == "[ANONYMIZED:Personal Identifiable Information] called."


FAR_ESCALATORS = (
    "John is coming over and mom is sad. "
    + "." * 60
    + " He would hit me, I was afraid, I think about suicide. My anxiety is back."
)


def _score(hits, text):
    return [h.risk_score for h in hits if h.text == text]


def test_local_adjustments_ignore_phrases_outside_window():
    assert _score(detect_emotions(FAR_ESCALATORS, LEX), "sad") == [0.5]
    assert _score(detect_relationships(FAR_ESCALATORS, LEX), "mom") == [0.7]
    assert _score(detect_names(FAR_ESCALATORS, LEX), "John") == [0.5]


def test_symptom_escalation_sees_whole_text():
    assert _score(detect_symptoms(FAR_ESCALATORS, LEX), "anxiety") == [pytest.approx(0.9)]


def test_symptom_scan_is_linear_in_matches():
    text = "anxiety " * 32000 + "hospital"
    started = time.perf_counter()
    hits = detect_symptoms(text, LEX)
    elapsed = time.perf_counter() - started
    assert len(hits) == 32000
    assert all(h.risk_score == pytest.approx(0.8) for h in hits)
    assert elapsed < 5.0


# ── Planner ──────────────────────────────────────────────────────────

def test_plan_empty():
    assert plan([]) == []


def test_plan_higher_risk_replaces_last():
    a, b, c = _cand(0, 5, 0.5), _cand(3, 10, 0.9), _cand(8, 12, 0.7)
    assert plan([c, b, a]) == [b]


def test_plan_tie_keeps_earlier():
    a, b = _cand(0, 5, 0.7, text="a"), _cand(0, 3, 0.7, text="b")
    assert plan([a, b]) == [a]


def test_plan_is_greedy_not_optimal():
    # a + c would retain more risk, but a is displaced by b and never revisited
    a, b, c = _cand(0, 5, 0.6), _cand(4, 8, 0.7), _cand(6, 20, 0.65)
    assert plan([a, b, c]) == [b]


def test_plan_non_overlapping_sorted():
    cands = [_cand(12, 15, 0.6), _cand(0, 10, 0.9), _cand(2, 4, 0.5), _cand(10, 12, 0.3)]
    result = plan(cands)
    assert [(c.start, c.end) for c in result] == [(0, 10), (10, 12), (12, 15)]
    for left, right in zip(result, result[1:]):
        assert left.end <= right.start


# ── Applier ──────────────────────────────────────────────────────────

def test_tag_tier_boundaries():
    cat = RedactionCategory.SYMPTOM
    assert redaction_tag(cat, 0.81) == "[REDACTED_HIGH_RISK:Mental Health Symptom]"
    assert redaction_tag(cat, 0.8) == "[REDACTED:Mental Health Symptom]"
    assert redaction_tag(cat, 0.51) == "[REDACTED:Mental Health Symptom]"
    assert redaction_tag(cat, 0.5) == "[ANONYMIZED:Mental Health Symptom]"


def test_apply_right_to_left():
    text = "aaa bbb ccc"
    text_out, entries = apply_plan(text, [_cand(0, 3, 0.9, text="aaa"), _cand(8, 11, 0.3, text="ccc")],
                                   consent_given=True)
    assert text_out == "[REDACTED_HIGH_RISK:Mental Health Symptom] bbb [ANONYMIZED:Mental Health Symptom]"
    assert [e.start for e in entries] == [8, 0]
    assert all(e.consent_given for e in entries)


# ── Redactor scenarios ───────────────────────────────────────────────

def test_therapist_anxiety_panic_attacks():
    text = "My therapist said I have anxiety and panic attacks."
    result = _redactor().redact(text, SessionLog())
    found = {(e.original_text, e.category, e.risk_score) for e in result.entries}
    assert found == {
        ("therapist", RedactionCategory.RELATION, 0.8),
        ("anxiety", RedactionCategory.SYMPTOM, 0.7),
        ("panic attacks", RedactionCategory.SYMPTOM, 0.7),
    }
    assert all(e.redacted_text.startswith("[REDACTED:") for e in result.entries)
    assert {e.context for e in result.entries if e.category is RedactionCategory.SYMPTOM} == {
        "anxiety_disorders"
    }
    assert result.text == (
        "My [REDACTED:Relationship Reference] said I have "
        "[REDACTED:Mental Health Symptom] and [REDACTED:Mental Health Symptom]."
    )


def test_name_and_emotion():
    text = "John hit me and I was terrified."
    result = _redactor().redact(text, SessionLog())
    by_text = {e.original_text: e for e in result.entries}
    assert set(by_text) == {"John", "terrified"}
    assert by_text["John"].risk_score == pytest.approx(0.8)
    assert by_text["John"].redacted_text == "[REDACTED:Personal Identifiable Information]"
    assert by_text["terrified"].risk_score == 0.9
    assert by_text["terrified"].redacted_text == "[REDACTED_HIGH_RISK:Emotional Reference]"
    assert result.text == (
        "[REDACTED:Personal Identifiable Information] hit me and I was "
        "[REDACTED_HIGH_RISK:Emotional Reference]."
    )


def test_overlap_keeps_longer_higher_risk_relation():
    result = _redactor().redact("My ex-boyfriend scared me", SessionLog())
    texts = [e.original_text for e in result.entries]
    assert "ex-boyfriend" in texts
    assert "boyfriend" not in texts
    assert result.text.startswith("My [REDACTED_HIGH_RISK:Relationship Reference] ")


def test_empty_text():
    log = SessionLog()
    result = _redactor().redact("", log)
    assert result.text == ""
    assert result.entries == []
    assert log.size == 0


def test_no_matches_is_identity():
    text = "The weather is nice today in Melbourne."
    result = _redactor().redact(text, SessionLog())
    assert result.text == text
    assert result.entries == []


def test_entries_reconstruct_redacted_text():
    text = ("Sarah said my husband would yell when I was depressed, and my "
            "psychiatrist upped the medication. I feel hopeless and ashamed.")
    result = _redactor().redact(text, SessionLog())
    assert result.entries
    rebuilt = text
    for e in sorted(result.entries, key=lambda e: e.start, reverse=True):
        assert text[e.start:e.end] == e.original_text
        rebuilt = rebuilt[:e.start] + e.redacted_text + rebuilt[e.end:]
    assert rebuilt == result.text
    spans = sorted((e.start, e.end) for e in result.entries)
    for (_, end), (start, _) in zip(spans, spans[1:]):
        assert end <= start
    assert all(0.0 <= e.risk_score <= 1.0 for e in result.entries)


def test_entries_in_descending_order():
    result = _redactor().redact("mom, dad and my sister", SessionLog())
    starts = [e.start for e in result.entries]
    assert starts == sorted(starts, reverse=True)


def test_non_string_rejected():
    with pytest.raises(TypeError):
        _redactor().redact(None, SessionLog())


def test_recognizer_names_used():
    class Fixed:
        def extract(self, text):
            return ["Priya"]

    r = _redactor(name_extractor=Fixed())
    result = r.redact("Priya yelled at me", SessionLog())
    assert result.name_detection_degraded is False
    assert result.entries[0].original_text == "Priya"
    assert result.entries[0].risk_score == pytest.approx(0.8)


def test_recognizer_failure_degrades_to_gazetteer():
    class Broken:
        def extract(self, text):
            raise RuntimeError("model not loaded")

    r = _redactor(name_extractor=Broken())
    result = r.redact("John hit me", SessionLog())
    assert result.name_detection_degraded is True
    assert [e.original_text for e in result.entries] == ["John"]


def test_redact_messages_does_not_mutate():
    r = _redactor()
    log = SessionLog()
    messages = [
        {"role": "system", "content": "You are a supportive listener."},
        {"role": "user", "content": "I feel hopeless"},
    ]
    safe = r.redact_messages(messages, log)
    assert safe[0] == messages[0]
    assert safe[1]["content"] == "I feel [REDACTED_HIGH_RISK:Mental Health Symptom]"
    assert messages[1]["content"] == "I feel hopeless"
    assert log.size == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
