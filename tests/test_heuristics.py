"""Tests for response classification heuristics."""

import json

import httpx
import pytest

from sparql_scout.prober.heuristics import (
    ResponseClassifier,
    is_ask_response,
    is_rdf_content_type,
    looks_like_html,
    looks_like_json_ask,
    looks_like_service_description,
    looks_like_xml_ask,
)

XML_ASK = (
    '<?xml version="1.0"?>\n'
    '<sparql xmlns="http://www.w3.org/2005/sparql-results#">\n'
    "  <head></head>\n"
    "  <boolean>true</boolean>\n"
    "</sparql>"
)


class TestHtmlDetection:
    """Tests for HTML sniffing."""
    
    def test_html_content_type(self):
        assert looks_like_html("text/html; charset=utf-8", "") is True
    
    def test_doctype_in_body(self):
        assert looks_like_html("text/plain", "  \n<!DOCTYPE html><html></html>") is True
    
    def test_html_tag_in_body(self):
        assert looks_like_html("", "<HTML><body>login</body></HTML>") is True
    
    def test_html_content_type_beats_json_body(self):
        assert looks_like_html("text/html", '{"boolean": true}') is True
    
    def test_json_is_not_html(self):
        assert looks_like_html("application/json", '{"boolean": true}') is False
    
    def test_none_values(self):
        assert looks_like_html(None, None) is False


class TestAskDetection:
    """Tests for SPARQL ASK result detection."""
    
    @pytest.mark.parametrize("value", [True, False])
    def test_json_ask(self, value):
        assert looks_like_json_ask(json.dumps({"head": {}, "boolean": value})) is True
    
    @pytest.mark.parametrize("body", [
        '{"head": {}, "results": {"bindings": []}}',
        '{"boolean": "true"}',
        '{"boolean": 1}',
        "[true]",
        "{not json",
        "",
    ])
    def test_json_not_ask(self, body):
        assert looks_like_json_ask(body) is False
    
    def test_deeply_nested_json_is_not_ask(self):
        body = "[" * 100_000 + "]" * 100_000
        
        assert looks_like_json_ask(body) is False
        assert is_ask_response("application/json", body) is False
    
    def test_xml_ask(self):
        assert looks_like_xml_ask(XML_ASK) is True
    
    def test_xml_ask_nested_and_case_insensitive(self):
        body = "<SPARQL><results><BOOLEAN>false</BOOLEAN></results></SPARQL>"
        assert looks_like_xml_ask(body) is True
    
    def test_xml_without_boolean(self):
        assert looks_like_xml_ask("<sparql><results></results></sparql>") is False
    
    def test_xml_ask_beyond_scan_window(self):
        body = " " * 200_000 + XML_ASK
        assert looks_like_xml_ask(body) is False
    
    def test_declared_type_with_matching_body(self):
        assert is_ask_response("application/sparql-results+xml", XML_ASK) is True
    
    def test_mislabeled_type_falls_back(self):
        assert is_ask_response("text/plain", '{"boolean": true}') is True
        assert is_ask_response("application/sparql-results+json", XML_ASK) is True
    
    def test_no_boolean_anywhere(self):
        assert is_ask_response("application/sparql-results+json", "{}") is False


class TestServiceDescription:
    """Tests for RDF content type and description marker detection."""
    
    @pytest.mark.parametrize("content_type", [
        "text/turtle; charset=utf-8",
        "application/rdf+xml",
        "application/ld+json",
        "application/n-triples",
        "application/n-quads",
        "text/n3",
        "application/trig",
    ])
    def test_rdf_content_types(self, content_type):
        assert is_rdf_content_type(content_type) is True
    
    def test_non_rdf_content_type(self):
        assert is_rdf_content_type("application/json") is False
        assert is_rdf_content_type(None) is False
    
    @pytest.mark.parametrize("marker", [
        "@prefix sd: <http://www.w3.org/ns/sparql-service-description#> .",
        "[] a SD:Service .",
        "<> sd:endpoint <https://x.org/sparql> .",
        "<> void:sparqlEndpoint <https://x.org/sparql> .",
    ])
    def test_description_markers(self, marker):
        assert looks_like_service_description(marker) is True
    
    def test_plain_turtle_is_not_description(self):
        assert looks_like_service_description("<a> <b> <c> .") is False


class TestResponseClassifier:
    """Tests for classification of httpx responses."""
    
    def test_accepts_json_ask(self):
        classifier = ResponseClassifier()
        response = httpx.Response(
            200,
            headers={"content-type": "application/sparql-results+json"},
            text='{"head": {}, "boolean": true}',
        )
        
        assert classifier.classify_ask(response).accepted is True
    
    def test_rejects_html_even_with_boolean(self):
        classifier = ResponseClassifier()
        response = httpx.Response(
            200,
            headers={"content-type": "text/html"},
            text='{"boolean": true}',
        )
        
        result = classifier.classify_ask(response)
        
        assert result.accepted is False
        assert result.reason == "html"
    
    def test_rejects_error_status(self):
        classifier = ResponseClassifier()
        response = httpx.Response(
            500,
            headers={"content-type": "application/sparql-results+json"},
            text='{"boolean": true}',
        )
        
        result = classifier.classify_ask(response)
        
        assert result.accepted is False
        assert "500" in result.reason
    
    def test_accepts_service_description(self):
        classifier = ResponseClassifier()
        response = httpx.Response(
            200,
            headers={"content-type": "text/turtle"},
            text="@prefix sd: <http://www.w3.org/ns/sparql-service-description#> .\n[] a sd:Service .",
        )
        
        assert classifier.classify_description(response).accepted is True
    
    def test_description_requires_rdf_type(self):
        classifier = ResponseClassifier()
        response = httpx.Response(
            200,
            headers={"content-type": "text/plain"},
            text="[] a sd:Service .",
        )
        
        result = classifier.classify_description(response)
        
        assert result.accepted is False
        assert result.reason == "not rdf"
    
    def test_description_rejects_html_body(self):
        classifier = ResponseClassifier()
        response = httpx.Response(
            200,
            headers={"content-type": "application/rdf+xml"},
            text="<!doctype html><p>sd:Service</p>",
        )
        
        assert classifier.classify_description(response).accepted is False
