"""Context risk adjustment.

Each detector starts from a base weight and raises (or, for names, lowers)
it according to phrases found near the match.  All scores stay in [0, 1].
"""

from __future__ import annotations

CONTEXT_RADIUS = 50

# Symptoms look at the whole text; each check is independent
SUICIDE_PHRASES = ("suicide", "kill myself", "end it all")
ABUSE_PHRASES = ("abuse", "assault", "rape", "violence")
CRISIS_PHRASES = ("hospital", "emergency")

# Emotions and relationships look at the local window; first tier wins
EMOTION_TIERS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("suicide", "kill", "die", "end my life"), 0.3),
    (("abuse", "trauma", "assault"), 0.2),
    (("can't take it", "can't go on"), 0.15),
)
RELATION_TIERS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("abuse", "hit", "yell", "hurt", "violence"), 0.3),
    (("left me", "cheat", "betray"), 0.2),
    (("scared", "afraid", "fear"), 0.15),
)

NAME_BASE = 0.5
NAME_FLOOR = 0.3
TRAUMA_INDICATORS = (
    "hurt", "abuse", "violence", "assault", "attack", "yelled",
    "hit", "rape", "molest", "trauma", "trigger",
)
NEGATIVE_INDICATORS = (
    "ex-", "afraid", "scared", "angry", "hate", "avoid",
    "fear", "nightmare",
)
PROFESSIONAL_TITLES = ("dr.", "doctor", "therapist", "counselor")


def context_window(text: str, start: int, end: int, radius: int = CONTEXT_RADIUS) -> str:
    """Return up to ``radius`` characters either side of ``text[start:end]``."""
    return text[max(0, start - radius):min(len(text), end + radius)]


def _contains_any(haystack: str, needles: tuple[str, ...]) -> bool:
    return any(n in haystack for n in needles)


def symptom_escalators(text: str) -> tuple[bool, bool, bool]:
    """Which of the suicide / abuse / crisis phrase groups occur in ``text``.

    Depends on the text only, so detectors compute it once per call.
    """
    lowered = text.lower()
    return (
        _contains_any(lowered, SUICIDE_PHRASES),
        _contains_any(lowered, ABUSE_PHRASES),
        _contains_any(lowered, CRISIS_PHRASES),
    )


def apply_symptom_escalation(base: float, escalators: tuple[bool, bool, bool]) -> float:
    suicide, abuse, crisis = escalators
    score = base
    if suicide:
        score = min(score + 0.2, 1.0)
    if abuse:
        score = min(score + 0.15, 1.0)
    if crisis:
        score = min(score + 0.1, 1.0)
    return score


def escalate_symptom(base: float, text: str) -> float:
    """Raise a symptom's base risk from phrases anywhere in ``text``."""
    return apply_symptom_escalation(base, symptom_escalators(text))


def _tiered(base: float, window: str, tiers: tuple[tuple[tuple[str, ...], float], ...]) -> float:
    lowered = window.lower()
    for phrases, bump in tiers:
        if _contains_any(lowered, phrases):
            return min(base + bump, 1.0)
    return base


def adjust_emotion(base: float, window: str) -> float:
    return _tiered(base, window, EMOTION_TIERS)


def adjust_relation(base: float, window: str) -> float:
    return _tiered(base, window, RELATION_TIERS)


def name_risk(window: str) -> float:
    """Score a person name from the text around it.

    Trauma words add 0.3 and negative words add 0.2 (one hit per list
    counts).  A professional title nearby takes 0.2 off, never below 0.3.
    """
    lowered = window.lower()
    score = NAME_BASE
    if _contains_any(lowered, TRAUMA_INDICATORS):
        score = min(score + 0.3, 1.0)
    if _contains_any(lowered, NEGATIVE_INDICATORS):
        score = min(score + 0.2, 1.0)
    if _contains_any(lowered, PROFESSIONAL_TITLES):
        score = max(score - 0.2, NAME_FLOOR)
    return score
