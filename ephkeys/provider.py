"""Bridge callback-style key providers onto the async ``KeyIssuer`` port.

Integrators that already mint keys through their own networking layer
implement ``EphemeralKeyProvider`` and report the raw response body (or a
failure) on the listener they are handed. ``ProviderKeyIssuer`` turns that
callback into an awaitable result. Listener methods may be called from any
thread; only the first call for a given request has any effect.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import structlog

from ephkeys.exceptions import IssuerError
from ephkeys.types import KeyArgs

logger = structlog.get_logger(__name__)


class EphemeralKeyUpdateListener:
    """One-shot callback handed to a provider for a single key request."""

    def __init__(self, future: asyncio.Future[str | None]) -> None:
        self._future = future
        self._loop = future.get_loop()

    def on_key_update(self, raw_key: str | None) -> None:
        """Deliver the raw key response body."""
        self._loop.call_soon_threadsafe(self._resolve, raw_key, None)

    def on_key_update_failure(self, response_code: int, message: str) -> None:
        """Deliver a failure from the provider's transport."""
        self._loop.call_soon_threadsafe(self._resolve, None, IssuerError(response_code, message))

    def _resolve(self, raw_key: str | None, error: IssuerError | None) -> None:
        if self._future.done():
            logger.warning(
                "ephemeral_key_listener_called_twice",
                failure_code=error.code if error is not None else None,
            )
            return
        if error is not None:
            self._future.set_exception(error)
        else:
            self._future.set_result(raw_key)


class EphemeralKeyProvider(Protocol):
    """Integrator hook that mints an ephemeral key on its backend."""

    def create_ephemeral_key(
        self, api_version: str, key_update_listener: EphemeralKeyUpdateListener
    ) -> None:
        """Start a key request and report the outcome on ``key_update_listener``."""
        ...


class ProviderKeyIssuer:
    """``KeyIssuer`` backed by a callback-style ``EphemeralKeyProvider``."""

    def __init__(self, provider: EphemeralKeyProvider, api_version: str) -> None:
        self._provider = provider
        self._api_version = api_version

    async def create_key(self, action: str | None, args: KeyArgs | None) -> str | None:
        """Ask the provider for a key and wait for its single callback."""
        del action, args
        future: asyncio.Future[str | None] = asyncio.get_running_loop().create_future()
        self._provider.create_ephemeral_key(
            self._api_version, EphemeralKeyUpdateListener(future)
        )
        return await future
