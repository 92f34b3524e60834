"""Redactor — the detection engine.  Five detectors, one planner, one applier.

Usage:
    from sanctu_redactor import Redactor, SessionLog

    log = SessionLog()           # one per session/conversation
    redactor = Redactor()        # reusable, holds no session state

    result = redactor.redact("John hit me and I was terrified.", log)
    print(result.text)
    # "[REDACTED:Personal Identifiable Information] hit me and I was
    #  [REDACTED_HIGH_RISK:Emotional Reference]."
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .detectors import detect_all
from .lexicon import Lexicon
from .names import GazetteerOnly, NameExtractor, PresidioNameExtractor, extract_names
from .planner import plan
from .session_log import SessionLog
from .types import Candidate, RedactionCategory, RedactionEntry, RedactionResult, utc_now

logger = logging.getLogger(__name__)

HIGH_RISK_THRESHOLD = 0.8
REDACT_THRESHOLD = 0.5


@dataclass
class RedactorConfig:
    """Configuration for the Redactor."""
    use_presidio: bool = True         # person-name recognizer on top of the gazetteer
    language: str = "en"
    score_threshold: float = 0.35     # minimum confidence for Presidio
    # Additions to the built-in gazetteer and medical term list
    extra_names: list[str] = field(default_factory=list)
    extra_medical_terms: list[str] = field(default_factory=list)
    # Overrides use_presidio when set
    name_extractor: NameExtractor | None = None


def redaction_tag(category: RedactionCategory, risk_score: float) -> str:
    """Pick the tag tier.  Boundaries are exclusive below, inclusive above."""
    if risk_score > HIGH_RISK_THRESHOLD:
        return f"[REDACTED_HIGH_RISK:{category.label}]"
    if risk_score > REDACT_THRESHOLD:
        return f"[REDACTED:{category.label}]"
    return f"[ANONYMIZED:{category.label}]"


def apply_plan(
    text: str,
    redaction_plan: list[Candidate],
    *,
    consent_given: bool = False,
) -> tuple[str, list[RedactionEntry]]:
    """Splice tags into text, right-to-left so offsets stay valid.

    Entries are returned in the order applied (descending start).
    """
    entries: list[RedactionEntry] = []
    result = text
    for c in sorted(redaction_plan, key=lambda c: c.start, reverse=True):
        tag = redaction_tag(c.category, c.risk_score)
        entries.append(RedactionEntry(
            original_text=c.text,
            redacted_text=tag,
            start=c.start,
            end=c.end,
            category=c.category,
            risk_score=c.risk_score,
            context=c.context,
            consent_given=consent_given,
            timestamp=utc_now(),
        ))
        result = result[:c.start] + tag + result[c.end:]
    return result, entries


class Redactor:
    """Rule-based sensitive-disclosure redactor.

    Detectors: symptoms, emotions, relationships, person names (recognizer
    + gazetteer), medical terms.  The lexicon is compiled once here, so a
    malformed table raises LexiconError at construction.
    """

    def __init__(self, config: RedactorConfig | None = None) -> None:
        self.config = config or RedactorConfig()
        self.lexicon = Lexicon.default().extended(
            names=self.config.extra_names,
            medical_terms=self.config.extra_medical_terms,
        )
        self.name_extractor = self.config.name_extractor or _default_extractor(self.config)

    def detect(self, text: str) -> tuple[list[Candidate], bool]:
        """Run every detector.  Returns (candidates, name_detection_degraded)."""
        names, degraded = extract_names(self.name_extractor, text) if text else ([], False)
        return detect_all(text, self.lexicon, names), degraded

    def redact(
        self,
        text: str,
        log: SessionLog,
        *,
        consent_given: bool = False,
    ) -> RedactionResult:
        """Redact sensitive spans, appending one entry per span to the log."""
        if not isinstance(text, str):
            raise TypeError(f"text must be a string, got {type(text).__name__}")

        candidates, degraded = self.detect(text)
        redaction_plan = plan(candidates)
        logger.debug(
            "session %s: %d candidates, %d planned",
            log.session_id, len(candidates), len(redaction_plan),
        )

        redacted, entries = apply_plan(text, redaction_plan, consent_given=consent_given)
        log.append(entries)
        return RedactionResult(text=redacted, entries=entries, name_detection_degraded=degraded)

    def redact_messages(
        self,
        messages: list[dict],
        log: SessionLog,
        *,
        content_key: str = "content",
        consent_given: bool = False,
    ) -> list[dict]:
        """Redact a list of chat-format messages.

        Returns new message dicts with content redacted.  Does NOT
        mutate the originals.
        """
        out: list[dict] = []
        for msg in messages:
            content = msg.get(content_key)
            if isinstance(content, str) and content:
                result = self.redact(content, log, consent_given=consent_given)
                out.append({**msg, content_key: result.text})
            else:
                out.append(msg)
        return out


def _default_extractor(config: RedactorConfig) -> NameExtractor:
    if not config.use_presidio:
        return GazetteerOnly()
    return PresidioNameExtractor(
        language=config.language,
        score_threshold=config.score_threshold,
    )
