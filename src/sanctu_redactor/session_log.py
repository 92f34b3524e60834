"""Session log — the ordered record of every redaction made in a session.

Design goals:
  - Append-only: entries are never edited, only cleared by an explicit reset
  - Private: one log per session, owned by a single caller (not thread-safe)
  - Offsets in an entry refer to the text of the call that produced it
"""

from __future__ import annotations
import uuid
from collections.abc import Iterable, Iterator
from typing import Any

from .types import RedactionEntry


def new_session_id() -> str:
    return uuid.uuid4().hex


class SessionLog:
    """Redaction entries for one session, plus its identifier."""

    __slots__ = ("_entries", "_session_id")

    def __init__(self, session_id: str | None = None) -> None:
        self._entries: list[RedactionEntry] = []
        self._session_id = session_id or new_session_id()

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    @property
    def session_id(self) -> str:
        return self._session_id

    def append(self, entries: Iterable[RedactionEntry]) -> None:
        self._entries.extend(entries)

    def reset(self) -> str:
        """Drop all entries and start over under a fresh identifier."""
        self._entries.clear()
        self._session_id = new_session_id()
        return self._session_id

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def entries(self) -> tuple[RedactionEntry, ...]:
        return tuple(self._entries)

    @property
    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RedactionEntry]:
        return iter(tuple(self._entries))

    def dump(self) -> list[dict[str, Any]]:
        """Return the entries as plain records (for debugging)."""
        return [e.to_dict() for e in self._entries]
