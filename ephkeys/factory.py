"""Wiring helpers that build a key manager from settings."""

from __future__ import annotations

from ephkeys.clock import Clock
from ephkeys.config import Settings, configure_structlog, get_settings
from ephkeys.issuer import HTTPKeyIssuer
from ephkeys.keys import CustomerEphemeralKey, EphemeralKey, K
from ephkeys.manager import EphemeralKeyManager
from ephkeys.types import KeyIssuer, KeyManagerListener


def create_key_manager(
    listener: KeyManagerListener[K],
    key_type: type[K] = CustomerEphemeralKey,  # type: ignore[assignment]
    settings: Settings | None = None,
    issuer: KeyIssuer | None = None,
    clock: Clock | None = None,
    configure_logging: bool = False,
) -> EphemeralKeyManager[K]:
    """Return an unstarted manager for ``key_type``.

    Without an explicit ``issuer`` an ``HTTPKeyIssuer`` is built from
    ``settings.issuer``; the caller owns closing it. Pass ``configure_logging=True``
    to install the JSON structlog setup from ``settings.logging``.
    """
    if not issubclass(key_type, EphemeralKey):
        raise TypeError("key_type must be an EphemeralKey subclass.")
    settings = settings or get_settings()
    if configure_logging:
        configure_structlog(settings)
    return EphemeralKeyManager(
        issuer=issuer or HTTPKeyIssuer.from_settings(settings.issuer),
        listener=listener,
        buffer_seconds=settings.manager.buffer_seconds,
        parser=key_type.from_raw,
        clock=clock,
    )
