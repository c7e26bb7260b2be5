"""Prober module - Live SPARQL endpoint verification."""

from sparql_scout.prober.engine import VerificationEngine
from sparql_scout.prober.heuristics import ResponseClassifier
from sparql_scout.prober.scanner import EndpointProber

__all__ = [
    "VerificationEngine",
    "ResponseClassifier",
    "EndpointProber",
]
