"""Wall-clock source used for key expiry decisions."""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of the current instant as Unix epoch seconds."""

    def now(self) -> float:
        """Return the current Unix time in seconds."""
        ...


class SystemClock:
    """Production clock wrapping ``time.time()``.

    Key expiry is an absolute epoch timestamp issued by a remote server, so
    this clock is wall-clock based rather than monotonic.
    """

    def now(self) -> float:
        """Return the current Unix time in seconds."""
        return time.time()
