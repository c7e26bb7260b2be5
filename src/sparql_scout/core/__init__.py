"""Core module - Configuration, models, candidate derivation, and documents."""

from sparql_scout.core.config import Settings
from sparql_scout.core.models import (
    Candidate,
    CandidateSource,
    PortalRecord,
    ProbeMode,
    ProbeOutcome,
    VerifiedEndpoint,
)
from sparql_scout.core.selection import choose_preferred

__all__ = [
    "Settings",
    "Candidate",
    "CandidateSource",
    "PortalRecord",
    "ProbeMode",
    "ProbeOutcome",
    "VerifiedEndpoint",
    "choose_preferred",
]
