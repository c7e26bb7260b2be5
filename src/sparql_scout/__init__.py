"""sparql-scout - Find and verify SPARQL endpoints of open data portals.

Library users get WARNING-level structlog output by default; call
``sparql_scout.core.logging.configure_logging`` or configure structlog
before use to change it.
"""

__version__ = "1.0.0"

from sparql_scout.core.config import Settings
from sparql_scout.core.models import Candidate, ProbeOutcome, VerifiedEndpoint, VerifiedRow

__all__ = [
    "Settings",
    "Candidate",
    "ProbeOutcome",
    "VerifiedEndpoint",
    "VerifiedRow",
]
