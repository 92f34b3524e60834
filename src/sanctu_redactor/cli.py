"""CLI interface for sanctu-redactor.

Usage:
    # Redact text (stdin: text, stdout: JSON with redacted text, audit, entries)
    echo 'John hit me and I was terrified.' | \
        python -m sanctu_redactor.cli redact --consent

    # Clean text only (stdin: text, stdout: redacted text)
    echo 'My therapist said I have anxiety.' | \
        python -m sanctu_redactor.cli clean

    # Run the HTTP sidecar
    python -m sanctu_redactor.cli serve --port 18792

Each invocation is its own session; nothing is persisted.
"""

from __future__ import annotations
import argparse
import json
import logging
import sys

from . import server
from .config import load_config, load_from_yaml, redactor_config
from .redactor import RedactorConfig
from .session import RedactionSession


def _build_config(args: argparse.Namespace) -> RedactorConfig:
    cfg = load_from_yaml(args.config) if args.config else load_config({})
    if args.no_presidio:
        cfg["use_presidio"] = False
    if args.language:
        cfg["language"] = args.language
    if args.threshold is not None:
        cfg["score_threshold"] = args.threshold
    if args.names:
        cfg["extra_names"] = cfg["extra_names"] + args.names.split(",")
    return redactor_config(cfg)


def cmd_redact(args: argparse.Namespace) -> None:
    """Redact plain text on stdin and print the full result as JSON."""
    session = RedactionSession.create(config=_build_config(args))
    result = session.redact(sys.stdin.read(), consent_given=args.consent)

    output = {
        "redacted_text": result.text,
        "audit_log": session.summarize_audit().to_dict(),
        "redaction_entries": [e.to_dict() for e in result.entries],
        "name_detection_degraded": result.name_detection_degraded,
    }
    json.dump(output, sys.stdout, indent=2 if args.pretty else None, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_clean(args: argparse.Namespace) -> None:
    """Print only the redacted text."""
    session = RedactionSession.create(config=_build_config(args))
    sys.stdout.write(session.export_clean_text(sys.stdin.read()))


def cmd_serve(args: argparse.Namespace) -> None:
    server.serve(port=args.port, host=args.host, config=_build_config(args))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="sanctu_redactor",
        description="Redact sensitive disclosures from free-form text",
    )
    parser.add_argument("--config", default="", help="YAML config file")
    parser.add_argument("--no-presidio", action="store_true", help="Gazetteer-only name detection")
    parser.add_argument("--language", default="", help="Language code for the name recognizer")
    parser.add_argument("--threshold", type=float, default=None, help="Name recognizer score threshold")
    parser.add_argument("--names", default="", help="Comma-separated extra gazetteer names")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    sub = parser.add_subparsers(dest="command", required=True)
    p_redact = sub.add_parser("redact", help="Redact text (stdin), JSON out")
    p_redact.add_argument("--consent", action="store_true", help="Record consent as given")
    p_redact.add_argument("--pretty", action="store_true", help="Indent JSON output")
    sub.add_parser("clean", help="Redact text (stdin), clean text out")
    p_serve = sub.add_parser("serve", help="Run the HTTP sidecar")
    p_serve.add_argument("--port", type=int, default=server.DEFAULT_PORT)
    p_serve.add_argument("--host", default="127.0.0.1")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
    )

    cmds = {
        "redact": cmd_redact,
        "clean": cmd_clean,
        "serve": cmd_serve,
    }
    cmds[args.command](args)


if __name__ == "__main__":
    main()
