"""Tests for candidate derivation."""

import pytest

from sparql_scout.core.candidates import (
    COMMON_ENDPOINT_PATHS,
    collect_candidates,
    is_http_url,
    normalize_base_url,
    prepare_records,
    unique_candidates,
)
from sparql_scout.core.models import Candidate, CandidateSource


class TestUrlHelpers:
    """Tests for URL validation helpers."""
    
    @pytest.mark.parametrize("value", [
        "http://example.org",
        "https://example.org/sparql",
        "  https://example.org/  ",
    ])
    def test_http_urls(self, value):
        assert is_http_url(value) is True
    
    @pytest.mark.parametrize("value", [
        "ftp://example.org",
        "example.org/sparql",
        "",
        None,
        42,
        "https://",
        "http:x.org",
        "http:/x.org/sparql",
    ])
    def test_non_http_values(self, value):
        assert is_http_url(value) is False
    
    def test_normalize_strips_trailing_slashes(self):
        assert normalize_base_url(" https://example.org/portal/// ") == "https://example.org/portal"
    
    def test_normalize_rejects_non_urls(self):
        assert normalize_base_url("mailto:someone@example.org") is None


class TestCollectCandidates:
    """Tests for per-record candidate derivation."""
    
    def test_explicit_before_guessed(self):
        raw = {
            "url": "https://data.example.org/",
            "sparql": {
                "endpoint": "https://lod.example.org/sparql",
                "details": "https://lod.example.org/about",
            },
        }
        
        candidates = collect_candidates(raw)
        
        assert candidates[0] == Candidate(
            url="https://lod.example.org/sparql", source=CandidateSource.EXPLICIT,
        )
        assert candidates[1].url == "https://lod.example.org/about"
        assert candidates[1].source == CandidateSource.EXPLICIT
        assert [c.source for c in candidates[2:]] == [CandidateSource.GUESSED] * len(COMMON_ENDPOINT_PATHS)
        assert candidates[2].url == "https://data.example.org/sparql"
    
    def test_explicit_duplicate_of_guessed_stays_explicit(self):
        raw = {
            "url": "https://data.example.org",
            "sparql": {"url": " https://data.example.org/sparql "},
        }
        
        candidates = collect_candidates(raw)
        urls = [c.url for c in candidates]
        
        assert urls.count("https://data.example.org/sparql") == 1
        assert candidates[0].source == CandidateSource.EXPLICIT
        assert len(candidates) == len(COMMON_ENDPOINT_PATHS)
    
    def test_non_http_explicit_values_ignored(self):
        raw = {"sparql": {"endpoint": "yes", "url": None, "details": "see website"}}
        
        assert collect_candidates(raw) == []
    
    def test_non_dict_records(self):
        assert collect_candidates("just a string") == []
        assert collect_candidates(None) == []
    
    def test_case_sensitive_uniqueness(self):
        raw = {"url": "https://x.org"}
        urls = [c.url for c in collect_candidates(raw)]
        
        assert "https://x.org/sparqlendpoint" in urls
        assert "https://x.org/sparqlEndpoint" in urls


class TestHelpers:
    
    def test_unique_candidates_first_wins(self):
        candidates = [
            Candidate(url="https://x.org/a", source=CandidateSource.GUESSED),
            Candidate(url="https://x.org/a ", source=CandidateSource.EXPLICIT),
            Candidate(url="https://x.org/b", source=CandidateSource.GUESSED),
        ]
        
        unique = unique_candidates(candidates)
        
        assert [(c.url, c.source) for c in unique] == [
            ("https://x.org/a", CandidateSource.GUESSED),
            ("https://x.org/b", CandidateSource.GUESSED),
        ]
    
    def test_prepare_records_indexes(self, raw_portals):
        records = prepare_records(raw_portals)
        
        assert [r.index for r in records] == [0, 1, 2]
        assert records[0].has_explicit is True
        assert records[1].has_explicit is False
        assert records[2].candidates == []
