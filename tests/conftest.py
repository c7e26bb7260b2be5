"""Test configuration and fixtures for sparql-scout."""

import asyncio
import json
import random
from pathlib import Path
from typing import Callable

import httpx
import pytest

from sparql_scout.core.config import Settings
from sparql_scout.core.models import (
    Candidate,
    CandidateSource,
    PortalRecord,
    ProbeMode,
    ProbeOutcome,
)


class FakeProber:
    """Prober with fixed outcomes per URL and optional random delays."""
    
    def __init__(
        self,
        outcomes: dict[str, ProbeOutcome],
        jitter: float = 0.0,
        seed: int = 0,
        errors: set[str] | None = None,
    ):
        self.outcomes = outcomes
        self.jitter = jitter
        self.random = random.Random(seed)
        self.errors = errors or set()
        self.calls: list[str] = []
    
    async def probe(self, url: str) -> ProbeOutcome:
        self.calls.append(url)
        if self.jitter:
            await asyncio.sleep(self.random.uniform(0, self.jitter))
        else:
            await asyncio.sleep(0)
        if url in self.errors:
            raise RuntimeError(f"probe exploded for {url}")
        return self.outcomes.get(url, ProbeOutcome.failed())


def explicit(url: str) -> Candidate:
    return Candidate(url=url, source=CandidateSource.EXPLICIT)


def guessed(url: str) -> Candidate:
    return Candidate(url=url, source=CandidateSource.GUESSED)


def ok(mode: ProbeMode = ProbeMode.ASK_GET) -> ProbeOutcome:
    return ProbeOutcome.confirmed(mode)


@pytest.fixture
def settings() -> Settings:
    """Default settings for testing."""
    return Settings()


@pytest.fixture
def raw_portals() -> list[dict]:
    """Portal records in the shape of the open data portal list."""
    return [
        {
            "name": "Offene Daten Berlin",
            "nameEn": "Berlin Open Data",
            "inCountry": "Deutschland",
            "inCountryEn": "Germany",
            "inCity": "Berlin",
            "inCityEn": "Berlin",
            "url": "https://daten.berlin.de/",
            "datasetsCount": 3200,
            "portalSoftware": "CKAN",
            "levelInEu": 3,
            "sparql": {"endpoint": "https://daten.berlin.de/sparql"},
        },
        {
            "name": "data.gouv.fr",
            "nameEn": "data.gouv.fr",
            "inCountryEn": "France",
            "url": "https://www.data.gouv.fr",
            "datasetsCount": "many",
        },
        {
            "name": "No URL portal",
            "inCountryEn": "germany ",
        },
    ]


@pytest.fixture
def input_file(tmp_path: Path, raw_portals: list[dict]) -> Path:
    """Input document with portals under 'openDataPortals'."""
    path = tmp_path / "input.json"
    path.write_text(json.dumps({"openDataPortals": raw_portals}), encoding="utf-8")
    return path


@pytest.fixture
def sample_record() -> PortalRecord:
    """The explicit + guessed record used by the end-to-end scenarios."""
    return PortalRecord(
        index=0,
        raw={"name": "X", "url": "https://x.org"},
        candidates=[
            explicit("https://x.org/sparql"),
            guessed("https://x.org/query"),
        ],
    )


@pytest.fixture
def mock_client() -> Callable[[Callable], httpx.AsyncClient]:
    """Build an AsyncClient backed by an httpx.MockTransport handler."""
    def factory(handler: Callable) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            follow_redirects=True,
        )
    return factory
