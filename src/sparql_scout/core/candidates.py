"""Candidate endpoint derivation from portal records."""

from __future__ import annotations

from typing import Any, Iterable, Sequence
from urllib.parse import urlparse

from sparql_scout.core.models import Candidate, CandidateSource, PortalRecord


# Suffixes appended to a portal's base URL, in probe order.
COMMON_ENDPOINT_PATHS: tuple[str, ...] = (
    "/sparql",
    "/sparql/",
    "/sparql-endpoint",
    "/sparqlendpoint",
    "/sparqlEndpoint",
    "/sparql/endpoint",
    "/sparql/query",
    "/endpoint/sparql",
    "/api/sparql",
    "/rdf/sparql",
    "/query",
    "/query/sparql",
    "/virtuoso/sparql",
    "/blazegraph/sparql",
    "/bigdata/sparql",
    "/fuseki/sparql",
)

EXPLICIT_FIELDS: tuple[str, ...] = ("endpoint", "url", "details")


def is_http_url(value: Any) -> bool:
    """Check whether a value is an absolute http(s) URL string."""
    if not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    # A host after "//" is required: "http:x.org" and "http:/x.org" are rejected
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def normalize_base_url(value: Any) -> str | None:
    """Trim a base URL and strip its trailing slashes."""
    if not is_http_url(value):
        return None
    return value.strip().rstrip("/")


def unique_candidates(candidates: Iterable[Candidate]) -> list[Candidate]:
    """Drop repeated URLs, keeping the first occurrence and order."""
    seen: set[str] = set()
    unique: list[Candidate] = []
    
    for candidate in candidates:
        url = candidate.url.strip()
        if not url or url in seen:
            continue
        seen.add(url)
        unique.append(Candidate(url=url, source=candidate.source))
    
    return unique


def collect_candidates(
    raw: Any,
    suffixes: Sequence[str] = COMMON_ENDPOINT_PATHS,
) -> list[Candidate]:
    """
    Derive the candidate endpoints for one raw portal record.
    
    Explicit URLs come from the ``sparql`` block (``endpoint``, ``url``,
    ``details``); guessed URLs append each suffix to the portal ``url``.
    Explicit candidates always precede guessed ones.
    """
    data = raw if isinstance(raw, dict) else {}
    candidates: list[Candidate] = []
    
    sparql = data.get("sparql")
    if isinstance(sparql, dict):
        for key in EXPLICIT_FIELDS:
            value = sparql.get(key)
            if is_http_url(value):
                candidates.append(
                    Candidate(url=value.strip(), source=CandidateSource.EXPLICIT)
                )
    
    base = normalize_base_url(data.get("url"))
    if base:
        for suffix in suffixes:
            candidates.append(
                Candidate(url=f"{base}{suffix}", source=CandidateSource.GUESSED)
            )
    
    return unique_candidates(candidates)


def prepare_records(raw_records: Sequence[Any]) -> list[PortalRecord]:
    """Attach candidate lists to raw records."""
    return [
        PortalRecord(index=i, raw=raw, candidates=collect_candidates(raw))
        for i, raw in enumerate(raw_records)
    ]
