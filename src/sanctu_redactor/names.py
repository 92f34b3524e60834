"""Person-name extraction — an NER model in front of the gazetteer.

The recognizer is a black box: anything with ``extract(text) -> list[str]``
will do.  The default wraps Presidio (spaCy under the hood).  When the
recognizer cannot be loaded or blows up, detection carries on with the
gazetteer alone and the caller is told coverage was reduced.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from presidio_analyzer import AnalyzerEngine

logger = logging.getLogger(__name__)

# Lazy singletons — don't load spaCy until first use
_engines: dict[str, AnalyzerEngine] = {}


class NameExtractor(Protocol):
    def extract(self, text: str) -> list[str]:
        """Return substrings of ``text`` that plausibly name a person."""
        ...


def _get_engine(language: str = "en") -> AnalyzerEngine:
    """Lazy-init the Presidio analyzer engine for a language."""
    if language not in _engines:
        from presidio_analyzer import AnalyzerEngine
        from presidio_analyzer.nlp_engine import NlpEngineProvider

        provider = NlpEngineProvider(nlp_configuration={
            "nlp_engine_name": "spacy",
            "models": [{"lang_code": language, "model_name": f"{language}_core_web_sm"}],
        })
        _engines[language] = AnalyzerEngine(
            nlp_engine=provider.create_engine(),
            supported_languages=[language],
        )
    return _engines[language]


class PresidioNameExtractor:
    """PERSON entities from Presidio's analyzer."""

    __slots__ = ("language", "score_threshold", "_engine")

    def __init__(
        self,
        *,
        language: str = "en",
        score_threshold: float = 0.35,
        engine: Any = None,
    ) -> None:
        self.language = language
        self.score_threshold = score_threshold
        self._engine = engine       # injected engine skips the lazy load

    def extract(self, text: str) -> list[str]:
        if not text:
            return []
        engine = self._engine or _get_engine(self.language)
        results = engine.analyze(
            text=text,
            language=self.language,
            entities=["PERSON"],
            score_threshold=self.score_threshold,
        )
        return [text[r.start:r.end] for r in sorted(results, key=lambda r: r.start)]


class GazetteerOnly:
    """Null recognizer: name detection relies on the gazetteer alone."""

    def extract(self, text: str) -> list[str]:
        return []


def extract_names(extractor: NameExtractor, text: str) -> tuple[list[str], bool]:
    """Run the recognizer.  Returns (names, degraded).

    Any failure of the collaborator, including a missing library or spaCy
    model, is logged and reported as ``degraded=True`` with no names.
    """
    try:
        names = extractor.extract(text)
    except Exception as e:
        logger.warning(
            "name recognizer %s failed (%s: %s); falling back to gazetteer only",
            type(extractor).__name__, type(e).__name__, e,
        )
        return [], True
    return [n for n in names if isinstance(n, str) and n.strip()], False
