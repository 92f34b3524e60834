"""sanctu-redactor — rule-based redaction of sensitive disclosures in free text."""

from .redactor import Redactor, RedactorConfig, apply_plan, redaction_tag
from .session_log import SessionLog
from .session import RedactionSession
from .lexicon import Lexicon, LexiconError
from .names import GazetteerOnly, NameExtractor, PresidioNameExtractor
from .planner import plan
from .audit import summarize
from .config import create_session, load_config, load_from_yaml
from .types import AuditSummary, Candidate, RedactionCategory, RedactionEntry, RedactionResult

__all__ = [
    "Redactor", "RedactorConfig", "apply_plan", "redaction_tag",
    "SessionLog", "RedactionSession",
    "Lexicon", "LexiconError",
    "GazetteerOnly", "NameExtractor", "PresidioNameExtractor",
    "plan", "summarize",
    "create_session", "load_config", "load_from_yaml",
    "AuditSummary", "Candidate", "RedactionCategory", "RedactionEntry", "RedactionResult",
]
__version__ = "0.1.0"
