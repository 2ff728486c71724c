"""Ephemeral key exception hierarchy."""

from __future__ import annotations

INTERNAL_ERROR_CODE = 500
SERVICE_UNAVAILABLE_CODE = 503

_LISTENER_PREFIX = "EphemeralKeyUpdateListener.on_key_update"
_RAW_BODY_HINT = "The raw body from the issuer's response should be passed"


class EphemeralKeyError(Exception):
    """Base class for all ephemeral key exceptions."""


class IssuerError(EphemeralKeyError):
    """Raised when the key issuer fails to produce a raw key."""

    def __init__(self, code: int, message: str) -> None:
        """Initialize with the transport status code and message."""
        super().__init__(message)
        self.code = code
        self.message = message


class IssuerUnavailableError(IssuerError):
    """Raised when the key issuer is temporarily unreachable."""

    def __init__(self, message: str = "Ephemeral key issuer unavailable.") -> None:
        super().__init__(SERVICE_UNAVAILABLE_CODE, message)


class KeyParseError(EphemeralKeyError):
    """Raised when a raw key payload cannot be turned into a key."""

    code = INTERNAL_ERROR_CODE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NullPayloadError(KeyParseError):
    """Raised when the issuer returned no payload at all."""

    def __init__(self) -> None:
        super().__init__(f"{_LISTENER_PREFIX} was called with a null value")


class MalformedPayloadError(KeyParseError):
    """Raised when the payload is not a JSON object."""

    def __init__(self, detail: str) -> None:
        """Initialize with the decoder diagnostic text."""
        super().__init__(
            f"{_LISTENER_PREFIX} was passed a value that could not be JSON parsed: "
            f"[{detail}]. {_RAW_BODY_HINT}"
        )
        self.detail = detail


class InvalidSchemaError(KeyParseError):
    """Raised when the payload is a JSON object missing a required field."""

    def __init__(self, field: str, key_type: str, reason: str | None = None) -> None:
        """Initialize with the offending field and the key type being parsed."""
        reason = reason or f"No value for {field}"
        super().__init__(
            f"{_LISTENER_PREFIX} was passed a JSON String that was invalid: "
            f"[Improperly formatted JSON for ephemeral key {key_type} - {reason}]. "
            f"{_RAW_BODY_HINT}"
        )
        self.field = field
        self.key_type = key_type
        self.reason = reason
