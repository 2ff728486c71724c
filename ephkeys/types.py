"""Ephemeral key collaborator contracts."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol, TypeVar

KeyArgs = Mapping[str, Any]


class KeyLike(Protocol):
    """Capabilities the key manager needs from any key variant."""

    @property
    def id(self) -> str:
        """Return the key identifier."""
        ...

    @property
    def expires(self) -> int:
        """Return the expiry instant as Unix epoch seconds."""
        ...


K = TypeVar("K", bound=KeyLike)
K_contra = TypeVar("K_contra", bound=KeyLike, contravariant=True)

KeyParser = Callable[[str | None], K]


class KeyIssuer(Protocol):
    """Port that fetches a raw ephemeral key from the issuing backend.

    ``create_key`` either returns the raw response body or raises
    ``IssuerError``; it never does both.
    """

    async def create_key(self, action: str | None, args: KeyArgs | None) -> str | None:
        """Return the raw key payload for the given caller context."""
        ...


class KeyManagerListener(Protocol[K_contra]):
    """Observer notified once per key update cycle."""

    def on_key_update(self, key: K_contra, action: str | None, args: KeyArgs | None) -> None:
        """Handle a freshly issued key."""
        ...

    def on_key_error(self, code: int, message: str) -> None:
        """Handle a failed key update."""
        ...
