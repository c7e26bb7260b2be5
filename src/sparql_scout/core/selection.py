"""Preferred endpoint selection."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence, TypeVar

from sparql_scout.core.models import CandidateSource, DerivedRow, PortalProjection, PortalRecord


class _HasSource(Protocol):
    source: CandidateSource


T = TypeVar("T", bound=_HasSource)


def choose_preferred(entries: Iterable[T]) -> Optional[T]:
    """
    Pick one endpoint from a candidate or verified list.
    
    The first explicit entry wins; otherwise the first entry in iteration
    order. For verified sets that order is arrival order, so with several
    successful guessed URLs the choice can differ between runs.
    """
    first: Optional[T] = None
    for entry in entries:
        if entry.source == CandidateSource.EXPLICIT:
            return entry
        if first is None:
            first = entry
    return first


def derive_rows(records: Sequence[PortalRecord], strict: bool = False) -> list[DerivedRow]:
    """Build output rows without probing anything."""
    rows: list[DerivedRow] = []
    
    for record in records:
        if not record.candidates:
            continue
        if strict and not record.has_explicit:
            continue
        
        chosen = choose_preferred(record.candidates)
        rows.append(DerivedRow(
            **PortalProjection.project(record.raw),
            sparql_endpoint=chosen.url if chosen else None,
            sparql_guessed=(not chosen.is_explicit) if chosen else None,
            sparql_candidates=list(record.candidates),
        ))
    
    return rows
