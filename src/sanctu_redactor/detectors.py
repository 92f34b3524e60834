"""Category detectors.

Each detector scans the full text for every entry of its lexicon table and
returns one Candidate per occurrence, with offsets into the text it was
given.  Candidates may overlap; the planner sorts that out.
"""

from __future__ import annotations
from collections.abc import Callable, Iterable

from .lexicon import Lexicon, Term, whole_word
from .risk import (
    adjust_emotion,
    adjust_relation,
    apply_symptom_escalation,
    context_window,
    name_risk,
    symptom_escalators,
)
from .types import Candidate, RedactionCategory

EMOTION_CONTEXT = "emotional_expression"
RELATION_CONTEXT = "relationship_reference"
MEDICAL_CONTEXT = "medical_information"


def detect_symptoms(text: str, lexicon: Lexicon) -> list[Candidate]:
    """Mental-health symptom language, scored against the whole text."""
    out: list[Candidate] = []
    escalators = symptom_escalators(text)
    for term in lexicon.symptoms:
        score = apply_symptom_escalation(term.weight, escalators)
        for m in term.pattern.finditer(text):
            out.append(Candidate(
                start=m.start(),
                end=m.end(),
                text=m.group(),
                category=RedactionCategory.SYMPTOM,
                risk_score=score,
                context=term.group,
            ))
    return out


def detect_emotions(text: str, lexicon: Lexicon) -> list[Candidate]:
    return _scan_windowed(
        text, lexicon.emotions, RedactionCategory.EMOTION, EMOTION_CONTEXT, adjust_emotion,
    )


def detect_relationships(text: str, lexicon: Lexicon) -> list[Candidate]:
    return _scan_windowed(
        text, lexicon.relations, RedactionCategory.RELATION, RELATION_CONTEXT, adjust_relation,
    )


def detect_medical(text: str, lexicon: Lexicon) -> list[Candidate]:
    """Medical terminology.  Fixed weight, no context adjustment."""
    return [
        Candidate(
            start=m.start(),
            end=m.end(),
            text=m.group(),
            category=RedactionCategory.MEDICAL,
            risk_score=term.weight,
            context=MEDICAL_CONTEXT,
        )
        for term in lexicon.medical
        for m in term.pattern.finditer(text)
    ]


def detect_names(
    text: str,
    lexicon: Lexicon,
    extracted: Iterable[str] = (),
) -> list[Candidate]:
    """Person names from the recognizer plus the gazetteer.

    A name is scored once, on the window around its first occurrence, and
    every whole-word occurrence is then reported with that score.
    Gazetteer names already returned by the recognizer are skipped
    (case-insensitive).
    """
    # lowercased name -> (pattern, risk, context)
    found: dict[str, tuple] = {}

    for name in extracted:
        key = name.lower()
        if key in found:
            continue
        pattern = whole_word(name)
        first = pattern.search(text)
        if first is None:
            continue
        window = context_window(text, first.start(), first.end())
        found[key] = (pattern, name_risk(window), window)

    for term in lexicon.names:
        if term.text in found:
            continue
        first = term.pattern.search(text)
        if first is None:
            continue
        window = context_window(text, first.start(), first.end())
        found[term.text] = (term.pattern, name_risk(window), window)

    out: list[Candidate] = []
    for pattern, risk, window in found.values():
        for m in pattern.finditer(text):
            out.append(Candidate(
                start=m.start(),
                end=m.end(),
                text=m.group(),
                category=RedactionCategory.PII,
                risk_score=risk,
                context=window,
            ))
    return out


def detect_all(
    text: str,
    lexicon: Lexicon,
    extracted_names: Iterable[str] = (),
) -> list[Candidate]:
    """Pool every detector's output: symptoms, emotions, relations, names, medical."""
    return [
        *detect_symptoms(text, lexicon),
        *detect_emotions(text, lexicon),
        *detect_relationships(text, lexicon),
        *detect_names(text, lexicon, extracted_names),
        *detect_medical(text, lexicon),
    ]


def _scan_windowed(
    text: str,
    terms: tuple[Term, ...],
    category: RedactionCategory,
    context: str,
    adjust: Callable[[float, str], float],
) -> list[Candidate]:
    out: list[Candidate] = []
    for term in terms:
        for m in term.pattern.finditer(text):
            window = context_window(text, m.start(), m.end())
            out.append(Candidate(
                start=m.start(),
                end=m.end(),
                text=m.group(),
                category=category,
                risk_score=adjust(term.weight, window),
                context=context,
            ))
    return out
