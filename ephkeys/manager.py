"""Ephemeral key manager for refresh-on-demand key reuse."""

from __future__ import annotations

import asyncio
from typing import Generic

import structlog

from ephkeys.clock import Clock, SystemClock
from ephkeys.exceptions import INTERNAL_ERROR_CODE, IssuerError, KeyParseError
from ephkeys.policy import should_refresh
from ephkeys.types import K, KeyArgs, KeyIssuer, KeyManagerListener, KeyParser

logger = structlog.get_logger(__name__)


class EphemeralKeyManager(Generic[K]):
    """Hold at most one ephemeral key and replace it when it nears expiry.

    Construction has no side effects. Call ``start()`` once the listener is
    ready to receive the first key. Refreshes are not serialized internally;
    callers must not overlap ``retrieve_ephemeral_key`` calls. Cancelling a
    refresh drops the current key without notifying the listener.
    """

    def __init__(
        self,
        issuer: KeyIssuer,
        listener: KeyManagerListener[K],
        buffer_seconds: int,
        parser: KeyParser[K],
        clock: Clock | None = None,
    ) -> None:
        """Create an unstarted manager holding no key."""
        if buffer_seconds < 0:
            raise ValueError("buffer_seconds must be non-negative.")
        self._issuer = issuer
        self._listener = listener
        self._buffer_seconds = buffer_seconds
        self._parser = parser
        self._clock = clock or SystemClock()
        self._key: K | None = None
        self._in_flight = 0

    @property
    def ephemeral_key(self) -> K | None:
        """Return the current key, or None when no valid key is held."""
        return self._key

    @property
    def buffer_seconds(self) -> int:
        """Return the pre-expiry window in which keys are treated as due."""
        return self._buffer_seconds

    async def start(self) -> None:
        """Fetch the initial key and notify the listener exactly once."""
        await self._update_key(action=None, args=None)

    async def retrieve_ephemeral_key(
        self, action: str | None = None, args: KeyArgs | None = None
    ) -> None:
        """Refresh the key when due, passing ``action`` and ``args`` to the listener."""
        now = self._clock.now()
        if not should_refresh(self._key, self._buffer_seconds, now):
            return
        await self._update_key(action=action, args=args)

    async def _update_key(self, action: str | None, args: KeyArgs | None) -> None:
        """Run one fetch, parse and notify cycle."""
        if self._in_flight:
            logger.warning(
                "ephemeral_key_refresh_overlap", action=action, in_flight=self._in_flight
            )
        self._in_flight += 1
        try:
            raw_key = await self._issuer.create_key(action, args)
        except IssuerError as exc:
            self._fail(exc.code, exc.message, action=action)
            return
        except asyncio.CancelledError:
            self._key = None
            raise
        except Exception as exc:
            self._fail_unexpected(exc, action=action)
            return
        finally:
            self._in_flight -= 1

        try:
            key = self._parser(raw_key)
        except KeyParseError as exc:
            self._fail(exc.code, exc.message, action=action)
            return
        except Exception as exc:
            self._fail_unexpected(exc, action=action)
            return

        self._key = key
        logger.info(
            "ephemeral_key_updated",
            key_id=key.id,
            expires=key.expires,
            action=action,
        )
        self._listener.on_key_update(key, action, args)

    def _fail(self, code: int, message: str, action: str | None) -> None:
        """Drop the current key and report the failure."""
        self._key = None
        logger.warning("ephemeral_key_update_failed", code=code, detail=message, action=action)
        self._listener.on_key_error(code, message)

    def _fail_unexpected(self, exc: Exception, action: str | None) -> None:
        """Report an error raised outside the issuer and parser contracts."""
        logger.error("ephemeral_key_update_crashed", error=repr(exc), action=action)
        self._fail(INTERNAL_ERROR_CODE, str(exc) or type(exc).__name__, action=action)
