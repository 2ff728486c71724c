"""Key refresh policy."""

from __future__ import annotations

from ephkeys.types import KeyLike


def should_refresh(key: KeyLike | None, buffer_seconds: int, now: float) -> bool:
    """Return True when ``key`` is absent or within ``buffer_seconds`` of expiry.

    The boundary is inclusive: a key whose expiry minus the buffer equals
    ``now`` is already due. Keys that expired long ago are due as well.
    """
    if buffer_seconds < 0:
        raise ValueError("buffer_seconds must be non-negative.")
    if key is None:
        return True
    return key.expires - buffer_seconds <= now
