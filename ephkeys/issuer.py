"""Async HTTP issuer for ephemeral keys minted by an integrator backend."""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from ephkeys.config import IssuerSettings
from ephkeys.exceptions import INTERNAL_ERROR_CODE, IssuerError, IssuerUnavailableError
from ephkeys.types import KeyArgs

logger = structlog.get_logger(__name__)


class HTTPKeyIssuer:
    """Fetch raw ephemeral keys by POSTing to the backend key endpoint."""

    def __init__(
        self,
        base_url: str,
        api_version: str,
        endpoint: str = "/ephemeral_keys",
        timeout: httpx.Timeout | float | None = None,
        headers: dict[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Create issuer with optional injected transport."""
        self._api_version = api_version
        self._endpoint = endpoint
        self._headers = {"Content-Type": "application/json", **(headers or {})}
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout or 5.0,
        )

    @classmethod
    def from_settings(
        cls, settings: IssuerSettings, http_client: httpx.AsyncClient | None = None
    ) -> HTTPKeyIssuer:
        """Build issuer from configured settings."""
        headers = None
        if settings.api_key is not None:
            headers = {"Authorization": f"Bearer {settings.api_key.get_secret_value()}"}
        return cls(
            base_url=settings.base_url,
            api_version=settings.api_version,
            endpoint=settings.endpoint,
            timeout=settings.timeout_seconds,
            headers=headers,
            http_client=http_client,
        )

    async def create_key(self, action: str | None, args: KeyArgs | None) -> str | None:
        """Request a new key and return the response body unmodified."""
        body: dict[str, Any] = {"api_version": self._api_version}
        if args:
            body.update(args)
        try:
            content = json.dumps(body)
        except (TypeError, ValueError, RecursionError) as exc:
            raise IssuerError(
                INTERNAL_ERROR_CODE,
                f"Ephemeral key request arguments could not be JSON encoded: {exc}",
            ) from exc
        response = await self._request(
            "POST", self._endpoint, content=content, headers=self._headers
        )
        logger.debug("ephemeral_key_fetched", action=action, status_code=response.status_code)
        return response.text

    async def aclose(self) -> None:
        """Close underlying HTTP client if owned by this instance."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HTTPKeyIssuer:
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        """Exit async context manager and close managed resources."""
        del exc_type, exc, tb
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Execute request and normalize upstream failures."""
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise IssuerUnavailableError() from exc

        if response.status_code >= 400:
            raise IssuerError(
                response.status_code,
                response.text
                or f"Ephemeral key issuer request failed with status {response.status_code}.",
            )
        return response
