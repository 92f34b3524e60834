"""Lexicon store — static term tables for every detector.

Every entry is compiled once into a case-insensitive whole-word pattern:
a match may not touch another word character on either side.  Tables are
validated when the lexicon is built, so a bad entry fails at startup and
not in the middle of a request.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from functools import lru_cache
from collections.abc import Iterable, Mapping


class LexiconError(ValueError):
    """A lexicon table is malformed."""


SYMPTOM_PATTERNS: dict[str, list[str]] = {
    "anxiety_disorders": [
        "panic attack", "panic attacks", "anxiety", "panic disorder", "social anxiety",
        "phobia", "generalized anxiety", "GAD", "agoraphobia", "panic", "anxious",
        "nervous breakdown", "hyperventilation", "heart palpitations",
    ],
    "mood_disorders": [
        "depression", "depressed", "bipolar", "manic", "mania", "mood swings",
        "suicidal thoughts", "suicide", "self-harm", "cutting", "hopeless",
        "worthless", "empty inside", "emotional numbness", "self-loathing",
    ],
    "trauma_ptsd": [
        "PTSD", "trauma", "flashback", "nightmare", "triggered", "dissociation",
        "hypervigilant", "avoidance", "intrusive thoughts", "emotional flashback",
        "complex PTSD", "CPTSD", "abuse survivor", "rape survivor",
    ],
    "eating_disorders": [
        "anorexia", "bulimia", "binge eating", "purging", "body dysmorphia",
        "eating disorder", "restrict", "binge", "body image issues",
        "calorie counting", "food anxiety",
    ],
    "ocd_related": [
        "OCD", "obsessive", "compulsive", "intrusive thoughts", "ritual",
        "checking", "contamination", "hoarding", "pure O", "harm OCD",
    ],
    "substance_related": [
        "addiction", "alcoholism", "substance abuse", "withdrawal", "relapse",
        "sober", "clean", "recovery", "drinking problem", "drug problem",
    ],
    "psychotic_disorders": [
        "psychosis", "hallucination", "delusion", "paranoia", "hearing voices",
        "schizophrenia", "schizoaffective", "disorganized thinking",
    ],
}

HIGH_RISK_SYMPTOM_CATEGORIES = frozenset({
    "trauma_ptsd", "mood_disorders", "psychotic_disorders",
})

HIGH_RISK_SYMPTOMS = frozenset({
    "suicide", "self-harm", "cutting", "ptsd", "trauma",
    "psychosis", "hallucination", "delusion", "rape survivor",
})

SYMPTOM_HIGH_RISK = 0.9
SYMPTOM_BASE_RISK = 0.7

RELATIONSHIP_WEIGHTS: dict[str, float] = {
    "boyfriend": 0.6, "girlfriend": 0.6, "husband": 0.7, "wife": 0.7,
    "partner": 0.6, "ex-boyfriend": 0.8, "ex-girlfriend": 0.8, "ex-husband": 0.9,
    "ex-wife": 0.9, "mother": 0.7, "father": 0.7, "mom": 0.7, "dad": 0.7,
    "parent": 0.7, "child": 0.5, "son": 0.5, "daughter": 0.5, "sibling": 0.6,
    "brother": 0.6, "sister": 0.6, "friend": 0.5, "colleague": 0.4, "boss": 0.7,
    "therapist": 0.8, "doctor": 0.8, "counselor": 0.8, "abuser": 0.95, "rapist": 0.95,
}

EMOTION_WEIGHTS: dict[str, float] = {
    "afraid": 0.7, "scared": 0.7, "terrified": 0.9, "angry": 0.6, "furious": 0.8,
    "sad": 0.5, "devastated": 0.9, "ashamed": 0.8, "guilty": 0.8, "hopeless": 0.9,
    "overwhelmed": 0.7, "numb": 0.6, "empty": 0.7, "abandoned": 0.8, "rejected": 0.8,
    "betrayed": 0.9, "violated": 0.95, "helpless": 0.8, "worthless": 0.9, "suicidal": 0.95,
}

MEDICAL_TERMS: list[str] = [
    "medication", "prescription", "antidepressant", "SSRI", "SNRI", "benzodiazepine",
    "therapy", "counseling", "psychiatrist", "psychologist", "diagnosis", "treatment",
    "dosage", "side effects", "withdrawal symptoms", "mental health", "psych ward",
    "hospitalization", "inpatient", "outpatient",
]
MEDICAL_RISK = 0.7

# Gazetteer of first names, used on top of the name recognizer
COMMON_NAMES: list[str] = [
    "john", "jane", "michael", "sarah", "david", "lisa", "robert", "mary",
    "james", "patricia", "william", "jennifer", "richard", "elizabeth",
    "charles", "linda", "joseph", "barbara", "thomas", "susan", "kevin",
    "jessica", "matthew", "emily", "christopher", "amanda", "daniel", "ashley",
    "mark", "michelle", "paul", "kimberly", "steven", "melissa", "andrew",
    "rebecca", "kenneth", "laura", "joshua", "heather", "ryan", "amy",
]
NAME_BASE_RISK = 0.5


def whole_word(term: str) -> re.Pattern:
    """Compile a case-insensitive pattern matching ``term`` as a whole word."""
    return re.compile(r"(?<!\w)" + re.escape(term) + r"(?!\w)", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Term:
    """A compiled lexicon entry."""
    text: str
    pattern: re.Pattern
    weight: float          # base risk before context adjustment
    group: str = ""        # symptom category key, empty elsewhere


@dataclass(frozen=True)
class Lexicon:
    """All detector tables, compiled."""
    symptoms: tuple[Term, ...]
    emotions: tuple[Term, ...]
    relations: tuple[Term, ...]
    medical: tuple[Term, ...]
    names: tuple[Term, ...]

    @classmethod
    def build(
        cls,
        *,
        symptom_patterns: Mapping[str, Iterable[str]] = SYMPTOM_PATTERNS,
        emotion_weights: Mapping[str, float] = EMOTION_WEIGHTS,
        relationship_weights: Mapping[str, float] = RELATIONSHIP_WEIGHTS,
        medical_terms: Iterable[str] = MEDICAL_TERMS,
        names: Iterable[str] = COMMON_NAMES,
    ) -> Lexicon:
        """Validate and compile the tables.  Raises LexiconError."""
        symptoms: list[Term] = []
        for category, terms in symptom_patterns.items():
            if isinstance(terms, str) or not isinstance(terms, Iterable):
                raise LexiconError(f"symptom category {category!r} must be a list of terms")
            for term in terms:
                _check_term(term, f"symptom category {category!r}")
                symptoms.append(Term(term, whole_word(term), symptom_base_risk(term, category), category))

        return cls(
            symptoms=tuple(symptoms),
            emotions=_weighted(emotion_weights, "emotion"),
            relations=_weighted(relationship_weights, "relationship"),
            medical=tuple(
                Term(t, whole_word(t), MEDICAL_RISK)
                for t in _checked(medical_terms, "medical terms")
            ),
            names=tuple(
                Term(n.lower(), whole_word(n), NAME_BASE_RISK)
                for n in _dedupe_names(_checked(names, "name gazetteer"))
            ),
        )

    @classmethod
    def default(cls) -> Lexicon:
        return _default_lexicon()

    def extended(
        self,
        *,
        names: Iterable[str] = (),
        medical_terms: Iterable[str] = (),
    ) -> Lexicon:
        """Return a copy with extra gazetteer names and medical terms."""
        names = _checked(names, "name gazetteer")
        medical_terms = _checked(medical_terms, "medical terms")
        if not names and not medical_terms:
            return self
        known = {t.text for t in self.names}
        extra_names = tuple(
            Term(n.lower(), whole_word(n), NAME_BASE_RISK)
            for n in _dedupe_names(names)
            if n.lower() not in known
        )
        extra_medical = tuple(
            Term(t, whole_word(t), MEDICAL_RISK)
            for t in medical_terms
        )
        return Lexicon(
            symptoms=self.symptoms,
            emotions=self.emotions,
            relations=self.relations,
            medical=self.medical + extra_medical,
            names=self.names + extra_names,
        )


def symptom_base_risk(term: str, category: str) -> float:
    if category in HIGH_RISK_SYMPTOM_CATEGORIES or term.lower() in HIGH_RISK_SYMPTOMS:
        return SYMPTOM_HIGH_RISK
    return SYMPTOM_BASE_RISK


@lru_cache(maxsize=1)
def _default_lexicon() -> Lexicon:
    return Lexicon.build()


def _check_term(term: object, where: str) -> None:
    if not isinstance(term, str) or not term.strip():
        raise LexiconError(f"{where}: empty or non-string term {term!r}")


def _checked(terms: Iterable[str], where: str) -> list[str]:
    if isinstance(terms, str):
        raise LexiconError(f"{where} must be a list of terms, not a string")
    out = list(terms)
    for term in out:
        _check_term(term, where)
    return out


def _weighted(table: Mapping[str, float], where: str) -> tuple[Term, ...]:
    terms: list[Term] = []
    for term, weight in table.items():
        _check_term(term, f"{where} table")
        if isinstance(weight, bool) or not isinstance(weight, (int, float)) or not 0.0 <= weight <= 1.0:
            raise LexiconError(f"{where} table: weight for {term!r} must be in [0, 1], got {weight!r}")
        terms.append(Term(term, whole_word(term), float(weight)))
    return tuple(terms)


def _dedupe_names(names: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for n in names:
        if n.lower() not in seen:
            seen.add(n.lower())
            out.append(n)
    return out
