"""Response classification heuristics for SPARQL probes.

The module-level functions are pure and work on a content type and body
text; :class:`ResponseClassifier` applies them to ``httpx`` responses.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

import httpx


HTML_SNIFF_CHARS = 500
XML_ASK_SCAN_CHARS = 200_000
DESCRIPTION_SCAN_CHARS = 300_000

SPARQL_JSON_RESULTS = "application/sparql-results+json"
SPARQL_XML_RESULTS = "application/sparql-results+xml"

XML_ASK_PATTERN = re.compile(
    r"<sparql\b[^>]*>[\s\S]*<boolean>(true|false)</boolean>[\s\S]*</sparql>",
    re.IGNORECASE,
)

RDF_CONTENT_TYPES: tuple[str, ...] = (
    "text/turtle",
    "application/rdf+xml",
    "application/ld+json",
    "application/n-triples",
    "application/n-quads",
    "text/n3",
    "application/trig",
)

SERVICE_DESCRIPTION_MARKERS: tuple[str, ...] = (
    "http://www.w3.org/ns/sparql-service-description#",
    "sd:service",
    "sd:endpoint",
    "void:sparqlendpoint",
)


def looks_like_html(content_type: str | None, text: str | None) -> bool:
    """Detect HTML pages by content type or a leading doctype/html tag."""
    if "text/html" in (content_type or "").lower():
        return True
    head = (text or "").strip()[:HTML_SNIFF_CHARS].lower()
    return head.startswith("<!doctype html") or head.startswith("<html")


def looks_like_json_ask(text: str | None) -> bool:
    """Check for a SPARQL JSON ASK result (a bool ``boolean`` member)."""
    try:
        value = json.loads(text or "")
    except (ValueError, RecursionError):
        return False
    return isinstance(value, dict) and isinstance(value.get("boolean"), bool)


def looks_like_xml_ask(text: str | None) -> bool:
    """Check for a SPARQL XML ASK result."""
    return XML_ASK_PATTERN.search((text or "")[:XML_ASK_SCAN_CHARS]) is not None


def is_rdf_content_type(content_type: str | None) -> bool:
    ct = (content_type or "").lower()
    return any(rdf_type in ct for rdf_type in RDF_CONTENT_TYPES)


def looks_like_service_description(text: str | None) -> bool:
    """Check for SPARQL service description or VoID endpoint markers."""
    body = (text or "")[:DESCRIPTION_SCAN_CHARS].lower()
    return any(marker in body for marker in SERVICE_DESCRIPTION_MARKERS)


def is_ask_response(content_type: str | None, text: str | None) -> bool:
    """
    Decide whether a body is a SPARQL ASK answer.
    
    A declared SPARQL results type must carry the matching boolean; as a
    fallback for mislabeled servers, either boolean form is accepted
    under any content type. HTML is never checked here.
    """
    ct = (content_type or "").lower()
    if SPARQL_JSON_RESULTS in ct and looks_like_json_ask(text):
        return True
    if SPARQL_XML_RESULTS in ct and looks_like_xml_ask(text):
        return True
    return looks_like_json_ask(text) or looks_like_xml_ask(text)


@dataclass
class ResponseClassification:
    """Verdict on one probe response."""
    
    accepted: bool
    reason: str


class ResponseClassifier:
    """
    Classifies HTTP responses for the ASK and service description probes.
    
    HTML responses are always rejected: they are login walls, error
    pages or portal front pages rather than SPARQL answers.
    """
    
    def classify_ask(self, response: httpx.Response) -> ResponseClassification:
        """Classify the response to an ``ASK {}`` query."""
        content_type = response.headers.get("content-type", "")
        text = response.text
        
        if not response.is_success:
            return ResponseClassification(False, f"status {response.status_code}")
        if looks_like_html(content_type, text):
            return ResponseClassification(False, "html")
        if is_ask_response(content_type, text):
            return ResponseClassification(True, "ask result")
        return ResponseClassification(False, "no boolean result")
    
    def classify_description(self, response: httpx.Response) -> ResponseClassification:
        """Classify the response to a service description request."""
        content_type = response.headers.get("content-type", "")
        
        if not response.is_success:
            return ResponseClassification(False, f"status {response.status_code}")
        if not is_rdf_content_type(content_type):
            return ResponseClassification(False, "not rdf")
        
        text = response.text
        if looks_like_html(content_type, text):
            return ResponseClassification(False, "html")
        if not looks_like_service_description(text):
            return ResponseClassification(False, "no description marker")
        return ResponseClassification(True, "service description")
