"""RedactionSession — a redactor bound to one session log.

Usage:

    session = RedactionSession.create(config=RedactorConfig(use_presidio=False))

    result = session.redact("My therapist said I have anxiety.", consent_given=True)
    safe_text = result.text

    audit = session.summarize_audit()   # covers every call so far
    session.reset_session()             # empty log, new session id

One session per logical caller.  Sharing a session between concurrent
requests needs external locking around redact/summarize/reset.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .audit import summarize
from .redactor import Redactor, RedactorConfig
from .session_log import SessionLog
from .types import AuditSummary, RedactionResult


@dataclass
class RedactionSession:
    """The core API: redact, summarize, reset, export clean text."""

    redactor: Redactor
    log: SessionLog = field(default_factory=SessionLog)

    @classmethod
    def create(cls, *, config: RedactorConfig | None = None) -> "RedactionSession":
        """Factory — creates a fresh session with its own log."""
        return cls(redactor=Redactor(config), log=SessionLog())

    @property
    def session_id(self) -> str:
        return self.log.session_id

    def redact(self, text: str, consent_given: bool = False) -> RedactionResult:
        return self.redactor.redact(text, self.log, consent_given=consent_given)

    def summarize_audit(self) -> AuditSummary:
        """Summary of the whole session log, not just the last call."""
        return summarize(self.log)

    def reset_session(self) -> None:
        self.log.reset()

    def export_clean_text(self, text: str) -> str:
        """Redact with consent and return only the redacted text."""
        return self.redact(text, consent_given=True).text

    def redact_messages(self, messages: list[dict], consent_given: bool = False) -> list[dict]:
        return self.redactor.redact_messages(messages, self.log, consent_given=consent_given)

    @property
    def stats(self) -> dict:
        return {
            "session_id": self.session_id,
            "log_size": self.log.size,
        }
