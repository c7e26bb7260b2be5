"""Async HTTP prober for SPARQL endpoint verification."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import httpx

from sparql_scout.core.config import ProberSettings
from sparql_scout.core.logging import get_logger
from sparql_scout.core.models import ProbeMode, ProbeOutcome
from sparql_scout.prober.heuristics import ResponseClassification, ResponseClassifier

logger = get_logger("sparql_scout.prober")

ASK_QUERY = "ASK {}"

ASK_ACCEPT = (
    "application/sparql-results+json, "
    "application/sparql-results+xml;q=0.9, "
    "application/json;q=0.8, "
    "application/xml;q=0.8, "
    "text/xml;q=0.8, "
    "*/*;q=0.1"
)

DESCRIPTION_ACCEPT = (
    "text/turtle, "
    "application/rdf+xml;q=0.9, "
    "application/ld+json;q=0.9, "
    "application/n-triples;q=0.8, "
    "text/n3;q=0.7, "
    "*/*;q=0.1"
)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class EndpointProber:
    """
    Checks whether a URL answers SPARQL.
    
    Three strategies run in order and the first success wins:
    - ``ask_get``: GET with ``query=ASK {}``
    - ``ask_post``: form-encoded POST of the same query
    - ``service_description``: GET asking for RDF, looking for a
      service description
    
    Every request is bounded by the configured timeout. Transport errors,
    timeouts, error statuses and unrecognized bodies only fail the current
    strategy; :meth:`probe` never raises for them.
    
    Use as an async context manager to own the HTTP client, or pass an
    existing ``httpx.AsyncClient``.
    """
    
    def __init__(
        self,
        settings: ProberSettings,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self.classifier = ResponseClassifier()
        self._client = client
        self._owns_client = client is None
    
    async def __aenter__(self) -> "EndpointProber":
        if self._client is None:
            self._client = self._build_client()
        return self
    
    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
    
    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            http2=self.settings.http2,
            timeout=httpx.Timeout(self.settings.timeout_seconds),
            follow_redirects=self.settings.follow_redirects,
            max_redirects=self.settings.max_redirects,
            verify=self.settings.verify_ssl,
            headers={
                "User-Agent": self.settings.user_agent,
            },
        )
    
    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
    
    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("EndpointProber used outside of 'async with'")
        return self._client
    
    async def probe(self, url: str) -> ProbeOutcome:
        """
        Run the probe strategies against one URL.
        
        Args:
            url: Candidate endpoint URL
            
        Returns:
            ProbeOutcome naming the first strategy that succeeded, or a
            failed outcome when none did
        """
        strategies = (
            (ProbeMode.ASK_GET, self._try_ask_get),
            (ProbeMode.ASK_POST, self._try_ask_post),
            (ProbeMode.SERVICE_DESCRIPTION, self._try_service_description),
        )
        
        for mode, strategy in strategies:
            verdict = await strategy(url)
            logger.debug(
                "probe_strategy",
                url=url,
                mode=mode.value,
                accepted=verdict.accepted,
                reason=verdict.reason,
            )
            if verdict.accepted:
                return ProbeOutcome.confirmed(mode)
        
        return ProbeOutcome.failed()
    
    async def _try_ask_get(self, url: str) -> ResponseClassification:
        try:
            target = httpx.URL(url).copy_set_param("query", ASK_QUERY)
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            return ResponseClassification(False, f"invalid url: {e}")
        
        response, error = await self._fetch(
            "GET", target, headers={"Accept": ASK_ACCEPT},
        )
        if response is None:
            return ResponseClassification(False, error)
        return self.classifier.classify_ask(response)
    
    async def _try_ask_post(self, url: str) -> ResponseClassification:
        response, error = await self._fetch(
            "POST",
            url,
            headers={
                "Accept": ASK_ACCEPT,
                "Content-Type": FORM_CONTENT_TYPE,
            },
            data={"query": ASK_QUERY},
        )
        if response is None:
            return ResponseClassification(False, error)
        return self.classifier.classify_ask(response)
    
    async def _try_service_description(self, url: str) -> ResponseClassification:
        response, error = await self._fetch(
            "GET", url, headers={"Accept": DESCRIPTION_ACCEPT},
        )
        if response is None:
            return ResponseClassification(False, error)
        return self.classifier.classify_description(response)
    
    async def _fetch(
        self,
        method: str,
        url: httpx.URL | str,
        **kwargs: Any,
    ) -> tuple[Optional[httpx.Response], str]:
        """Issue one request; return the response or a failure reason."""
        try:
            response = await asyncio.wait_for(
                self.client.request(method, url, **kwargs),
                timeout=self.settings.timeout_seconds,
            )
            return response, ""
            
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return None, "Request timeout"
        except httpx.ConnectError as e:
            return None, f"Connection error: {e}"
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return None, f"{type(e).__name__}: {e}"
