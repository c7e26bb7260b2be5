"""Data models for sparql-scout."""

from __future__ import annotations

from enum import Enum
from numbers import Number
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CandidateSource(str, Enum):
    """How a candidate endpoint URL was discovered."""
    
    EXPLICIT = "explicit"
    GUESSED = "guessed"


class ProbeMode(str, Enum):
    """Probe strategy that confirmed an endpoint."""
    
    ASK_GET = "ask_get"
    ASK_POST = "ask_post"
    SERVICE_DESCRIPTION = "service_description"


class Candidate(BaseModel):
    """A URL considered as a possible SPARQL endpoint."""
    
    model_config = ConfigDict(frozen=True)
    
    url: str = Field(..., description="Absolute HTTP(S) URL")
    source: CandidateSource = Field(..., description="Where this URL came from")
    
    @property
    def is_explicit(self) -> bool:
        return self.source == CandidateSource.EXPLICIT


class ProbeOutcome(BaseModel):
    """Result of running the probe strategies against one URL."""
    
    model_config = ConfigDict(frozen=True)
    
    success: bool
    mode: ProbeMode | None = None
    
    @classmethod
    def failed(cls) -> "ProbeOutcome":
        return cls(success=False, mode=None)
    
    @classmethod
    def confirmed(cls, mode: ProbeMode) -> "ProbeOutcome":
        return cls(success=True, mode=mode)


class VerifiedEndpoint(BaseModel):
    """A candidate confirmed by one of the probe strategies."""
    
    model_config = ConfigDict(frozen=True)
    
    url: str
    source: CandidateSource
    mode: ProbeMode
    
    @property
    def is_explicit(self) -> bool:
        return self.source == CandidateSource.EXPLICIT


class PortalRecord(BaseModel):
    """An input portal with its derived candidate list.
    
    ``raw`` is the untouched input entry; only the display attributes in
    :class:`PortalProjection` are ever read from it.
    """
    
    index: int = Field(..., description="Position in the selected input records")
    raw: Any = None
    candidates: list[Candidate] = Field(default_factory=list)
    
    @property
    def has_explicit(self) -> bool:
        return any(c.is_explicit for c in self.candidates)


def _number_or_none(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, Number):
        return None
    return value


class OutputModel(BaseModel):
    """Base for models written to the result document (camelCase keys)."""
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PortalProjection(OutputModel):
    """Display attributes copied from a raw portal record."""
    
    name: Any = None
    name_en: Any = None
    in_country: Any = None
    in_country_en: Any = None
    in_federal_state: Any = None
    in_federal_state_en: Any = None
    in_city: Any = None
    in_city_en: Any = None
    url: Any = None
    datasets_count: Any = None
    portal_software: Any = None
    level_in_eu: Any = None
    
    @classmethod
    def project(cls, raw: Any) -> dict[str, Any]:
        """Extract projection fields from a raw record as keyword arguments."""
        data = raw if isinstance(raw, dict) else {}
        fields = {
            name: data.get(to_camel(name))
            for name in PortalProjection.model_fields
        }
        fields["datasets_count"] = _number_or_none(fields["datasets_count"])
        fields["level_in_eu"] = _number_or_none(fields["level_in_eu"])
        return fields


class DerivedRow(PortalProjection):
    """Output row for derivation-only runs."""
    
    sparql_endpoint: str | None = None
    sparql_guessed: bool | None = None
    sparql_candidates: list[Candidate] = Field(default_factory=list)


class VerifiedRow(PortalProjection):
    """Output row for verification runs."""
    
    sparql_endpoint: str
    sparql_guessed: bool
    sparql_verified: bool = True
    sparql_verified_by: ProbeMode
    sparql_endpoints_verified: list[str] = Field(default_factory=list)
    sparql_endpoints_verified_meta: list[VerifiedEndpoint] = Field(default_factory=list)


class RunStats(BaseModel):
    """Summary of a filter run."""
    
    total_in: int = 0
    total_selected: int = 0
    country: str | None = None
    exported: int = 0
    checked: bool = False
    strict: bool = False
