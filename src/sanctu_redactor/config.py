"""YAML/dict config loader for sanctu-redactor.

Supports loading from a YAML file or a plain dict (for embedding
in a larger application config).

Example YAML:

    sanctu_redactor:
      enabled: true
      use_presidio: true
      language: en
      score_threshold: 0.35
      extra_names:
        - priya
        - tomasz
      extra_medical_terms:
        - lithium
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

from .redactor import RedactorConfig
from .session import RedactionSession
from .session_log import SessionLog
from .audit import summarize
from .types import AuditSummary, RedactionResult


class _NoopSession:
    """Pass-through session when redaction is disabled.  Records nothing."""

    def __init__(self) -> None:
        self.log = SessionLog()

    @property
    def session_id(self) -> str:
        return self.log.session_id

    def redact(self, text: str, consent_given: bool = False) -> RedactionResult:
        return RedactionResult(text=text)

    def summarize_audit(self) -> AuditSummary:
        return summarize(self.log)

    def reset_session(self) -> None:
        self.log.reset()

    def export_clean_text(self, text: str) -> str:
        return text

    def redact_messages(self, messages: list[dict], consent_given: bool = False) -> list[dict]:
        return messages

    @property
    def stats(self) -> dict:
        return {"session_id": self.session_id, "log_size": 0}


def load_config(data: dict[str, Any]) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    # Support nested under "sanctu_redactor" key or flat
    if "sanctu_redactor" in data:
        data = data["sanctu_redactor"] or {}

    return {
        "enabled": bool(data.get("enabled", True)),
        "use_presidio": bool(data.get("use_presidio", True)),
        "language": data.get("language", "en"),
        "score_threshold": float(data.get("score_threshold", 0.35)),
        "extra_names": list(data.get("extra_names") or []),
        "extra_medical_terms": list(data.get("extra_medical_terms") or []),
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml  # optional dependency
    with open(Path(path).expanduser()) as f:
        return load_config(yaml.safe_load(f) or {})


def redactor_config(cfg: dict[str, Any]) -> RedactorConfig:
    """Build a RedactorConfig from a normalized config dict."""
    return RedactorConfig(
        use_presidio=cfg["use_presidio"],
        language=cfg["language"],
        score_threshold=cfg["score_threshold"],
        extra_names=cfg["extra_names"],
        extra_medical_terms=cfg["extra_medical_terms"],
    )


def create_session(config: dict[str, Any]) -> RedactionSession:
    """Create a fully configured session from a config dict."""
    cfg = load_config(config)

    if not cfg["enabled"]:
        # Return a pass-through session (no redaction)
        return _NoopSession()

    return RedactionSession.create(config=redactor_config(cfg))
