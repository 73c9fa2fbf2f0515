"""Cartola FC API client with timeout handling and short-lived caching."""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, Optional

import httpx

from .config import get_settings

logger = logging.getLogger(__name__)

# Upstream error bodies are truncated to this many characters
ERROR_BODY_LIMIT = 200


class UpstreamError(Exception):
    """Raised when the Cartola API cannot be reached or answers with an error."""


class CartolaClient:
    """Async client for the Cartola FC public API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        cache_ttl: int = 0,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self._headers = {"User-Agent": user_agent} if user_agent else {}
        self._transport = transport
        self._cache: Dict[str, Any] = {}
        self._cache_time: Dict[str, datetime] = {}

    def clear_cache(self) -> None:
        """Drop every cached upstream payload."""
        self._cache.clear()
        self._cache_time.clear()

    async def fetch_json(self, path: str) -> Any:
        """
        GET a path from the upstream API and decode its JSON body.

        The whole request, body included, must finish within
        ``self.timeout`` seconds or it is cancelled. Any failure (deadline,
        connection problem, non-2xx status, undecodable body) is raised as
        UpstreamError. Successful payloads are reused for ``cache_ttl`` seconds.
        """
        url = f"{self.base_url}{path}"
        now = datetime.now()

        if self.cache_ttl > 0 and url in self._cache:
            cache_age = (now - self._cache_time[url]).total_seconds()
            if cache_age < self.cache_ttl:
                return self._cache[url]

        logger.debug("GET %s", url)
        try:
            data = await asyncio.wait_for(self._request(url), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.warning("Deadline of %ss exceeded fetching %s", self.timeout, url)
            raise UpstreamError(f"Upstream request exceeded {self.timeout}s and was aborted") from e

        if self.cache_ttl > 0:
            self._cache[url] = data
            self._cache_time[url] = now
        return data

    async def _request(self, url: str) -> Any:
        """Single GET with httpx errors mapped to UpstreamError."""
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=self._headers,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                if not response.is_success:
                    raise UpstreamError(
                        f"HTTP {response.status_code} - {_body_excerpt(response)}"
                    )
                return response.json()
        except httpx.TimeoutException as e:
            logger.warning("Timeout after %ss fetching %s", self.timeout, url)
            raise UpstreamError(str(e) or "The operation was aborted due to timeout") from e
        except httpx.HTTPError as e:
            logger.warning("Request to %s failed: %s", url, e)
            raise UpstreamError(str(e) or e.__class__.__name__) from e
        except ValueError as e:
            logger.warning("Invalid JSON from %s: %s", url, e)
            raise UpstreamError(f"Invalid JSON from upstream: {e}") from e

    async def get_market_status(self) -> Any:
        """Get the current round and market status."""
        return await self.fetch_json("/mercado/status")

    async def get_matches(self) -> Any:
        """Get the matches of the current round."""
        return await self.fetch_json("/partidas")

    async def get_clubs(self) -> Any:
        """Get all clubs keyed by club id."""
        return await self.fetch_json("/clubes")

    async def get_market_athletes(self) -> Any:
        """Get every athlete on the market (large payload)."""
        return await self.fetch_json("/atletas/mercado")


def _body_excerpt(response: httpx.Response) -> str:
    """First characters of an error body, empty if it cannot be decoded."""
    try:
        text = response.text
    except (UnicodeDecodeError, LookupError):
        return ""
    return text[:ERROR_BODY_LIMIT]


def build_client() -> CartolaClient:
    """Create a client from the current settings."""
    settings = get_settings()
    return CartolaClient(
        base_url=settings.cartola_api_base,
        timeout=settings.request_timeout,
        cache_ttl=settings.upstream_cache_ttl,
        user_agent=settings.user_agent,
    )


# Singleton instance
cartola_client = build_client()
