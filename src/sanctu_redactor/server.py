"""HTTP sidecar server for sanctu-redactor.

Runs as a lightweight stdlib HTTP server on localhost.  Applications that
must not store raw user text call it before persisting anything.

Endpoints:
    POST /redact   — Redact text, return redacted text + audit + entries
    POST /audit    — Audit summary of a named session
    POST /reset    — Reset a named session
    GET  /health   — Health check

Audit and reset answer 404 for a session_id no redact call has created.

All endpoints expect/return JSON.
Redact body: {"text": "...", "consent_given": false, "session_id": "..."}

Without a session_id every request gets a fresh session, so the audit
covers that request only.  With one, the session is kept in memory and
accumulates across requests.
"""

from __future__ import annotations
import json
import logging
import os
import threading
from http.server import HTTPServer, BaseHTTPRequestHandler
from typing import Any

from .config import load_config, load_from_yaml, redactor_config
from .redactor import Redactor, RedactorConfig
from .session import RedactionSession

logger = logging.getLogger(__name__)

DEFAULT_PORT = int(os.environ.get("SANCTU_REDACTOR_PORT", "18792"))
MAX_SESSIONS = int(os.environ.get("SANCTU_REDACTOR_MAX_SESSIONS", "1024"))

# Shared state
_redactor: Redactor | None = None
_sessions: dict[str, RedactionSession] = {}
_lock = threading.Lock()


class SessionNotFound(LookupError):
    """Audit or reset named a session this sidecar has never seen."""


def _settings() -> dict[str, Any]:
    path = os.environ.get("SANCTU_REDACTOR_CONFIG", "")
    cfg = load_from_yaml(path) if path else load_config({})
    if os.environ.get("SANCTU_REDACTOR_NO_PRESIDIO", ""):
        cfg["use_presidio"] = False
    if os.environ.get("SANCTU_REDACTOR_THRESHOLD", ""):
        cfg["score_threshold"] = float(os.environ["SANCTU_REDACTOR_THRESHOLD"])
    return cfg


def _get_redactor() -> Redactor:
    global _redactor
    if _redactor is None:
        _redactor = Redactor(redactor_config(_settings()))
    return _redactor


def _get_session(session_id: str) -> RedactionSession:
    if session_id not in _sessions:
        while len(_sessions) >= MAX_SESSIONS:
            evicted = next(iter(_sessions))
            del _sessions[evicted]
            logger.info("evicted session %s (cap %d)", evicted, MAX_SESSIONS)
        _sessions[session_id] = RedactionSession(redactor=_get_redactor())
    return _sessions[session_id]


def _existing_session(session_id: str) -> RedactionSession:
    try:
        return _sessions[session_id]
    except KeyError:
        raise SessionNotFound(f"unknown session: {session_id}") from None


def handle_redact(body: dict[str, Any]) -> dict[str, Any]:
    """Redact ``body["text"]`` and report the session audit."""
    text = body.get("text")
    consent_given = body.get("consent_given", False)
    if not isinstance(consent_given, bool):
        raise ValueError("consent_given must be a boolean")
    session_id = body.get("session_id")

    if session_id is None:
        session = RedactionSession(redactor=_get_redactor())
        result = session.redact(text, consent_given)
        audit = session.summarize_audit()
    else:
        with _lock:
            session = _get_session(str(session_id))
            result = session.redact(text, consent_given)
            audit = session.summarize_audit()

    return {
        "redacted_text": result.text,
        "audit_log": audit.to_dict(),
        "redaction_entries": [e.to_dict() for e in result.entries],
        "name_detection_degraded": result.name_detection_degraded,
    }


def handle_audit(body: dict[str, Any]) -> dict[str, Any]:
    with _lock:
        session = _existing_session(str(body.get("session_id", "default")))
        return {"audit_log": session.summarize_audit().to_dict()}


def handle_reset(body: dict[str, Any]) -> dict[str, Any]:
    handle = str(body.get("session_id", "default"))
    with _lock:
        session = _existing_session(handle)
        session.reset_session()
        return {"status": "reset", "session_id": handle, "audit_session_id": session.session_id}


class RedactionHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the redaction sidecar."""

    routes = {
        "/redact": handle_redact,
        "/audit": handle_audit,
        "/reset": handle_reset,
    }

    def _read_json(self) -> dict[str, Any]:
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length).decode("utf-8")
        data = json.loads(body) if body else {}
        if not isinstance(data, dict):
            raise ValueError("request body must be a JSON object")
        return data

    def _respond(self, status: int, data: Any) -> None:
        body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:
        if self.path == "/health":
            self._respond(200, {"status": "ok", "sessions": len(_sessions)})
        else:
            self._respond(404, {"error": "not found"})

    def do_POST(self) -> None:
        handler = self.routes.get(self.path)
        if handler is None:
            self._respond(404, {"error": "not found"})
            return
        try:
            self._respond(200, handler(self._read_json()))
        except SessionNotFound as e:
            self._respond(404, {"error": str(e.args[0])})
        except Exception as e:
            logger.exception("request to %s failed", self.path)
            self._respond(500, {"error": str(e)})


def make_server(port: int = DEFAULT_PORT, host: str = "127.0.0.1") -> HTTPServer:
    return HTTPServer((host, port), RedactionHandler)


def serve(
    port: int = DEFAULT_PORT,
    host: str = "127.0.0.1",
    config: RedactorConfig | None = None,
) -> None:
    """Start the redaction HTTP sidecar.

    ``config`` replaces the environment-driven settings for the shared
    redactor; the CLI passes the one built from its flags.
    """
    global _redactor
    if config is not None:
        _redactor = Redactor(config)
    server = make_server(port, host)
    redactor = _get_redactor()
    print(f"sanctu-redactor sidecar listening on http://{host}:{server.server_port}")
    print(f"  presidio: {'enabled' if redactor.config.use_presidio else 'disabled'}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down...")
        server.shutdown()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="sanctu-redactor HTTP sidecar")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--host", default="127.0.0.1")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)
    serve(port=args.port, host=args.host)
