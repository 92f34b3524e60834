"""Redaction planner — turn overlapping candidates into a redaction plan."""

from __future__ import annotations

from .types import Candidate


def plan(candidates: list[Candidate]) -> list[Candidate]:
    """Resolve overlaps greedily, left to right.

    Candidates are sorted by start (stable, so ties keep detector order).
    Each one is compared only with the last accepted candidate: on overlap
    it replaces it if its risk is strictly higher, otherwise it is dropped.
    A candidate displaced this way is never reconsidered, so the result is
    locally greedy rather than the maximum-risk selection.

    Returns non-overlapping candidates in ascending start order.
    """
    if not candidates:
        return []
    ordered = sorted(candidates, key=lambda c: c.start)
    kept: list[Candidate] = [ordered[0]]
    for current in ordered[1:]:
        last = kept[-1]
        if current.start < last.end:
            if current.risk_score > last.risk_score:
                kept[-1] = current
        else:
            kept.append(current)
    return kept
