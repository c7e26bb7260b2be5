"""Custom exceptions for sparql-scout.

Expected negative outcomes (failed probes, timeouts, malformed response
bodies) are never raised; they are reported as unsuccessful probe
outcomes. The exceptions here cover the failures that stop a run.
"""

from __future__ import annotations


class SparqlScoutError(Exception):
    """Base exception for all sparql-scout errors.
    
    Callers can catch every sparql-scout specific failure with a
    single except clause.
    """
    pass


class ConfigError(SparqlScoutError):
    """Raised when a configuration file cannot be read or parsed."""
    pass


class InputError(SparqlScoutError):
    """Raised when the input document cannot be loaded.
    
    This includes failures in:
    - Reading the input file
    - Parsing it as JSON
    - Locating the portal array inside it
    """
    pass


class InputParseError(InputError):
    """Raised when the input document is not valid JSON."""
    pass


class InputShapeError(InputError):
    """Raised when the input document holds no recognizable record array."""
    pass


class OutputError(SparqlScoutError):
    """Raised when the result document cannot be written."""
    pass
