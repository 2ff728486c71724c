"""Public ephemeral key exports."""

from ephkeys.clock import Clock, SystemClock
from ephkeys.exceptions import (
    INTERNAL_ERROR_CODE,
    EphemeralKeyError,
    InvalidSchemaError,
    IssuerError,
    IssuerUnavailableError,
    KeyParseError,
    MalformedPayloadError,
    NullPayloadError,
)
from ephkeys.factory import create_key_manager
from ephkeys.issuer import HTTPKeyIssuer
from ephkeys.keys import (
    CustomerEphemeralKey,
    EphemeralKey,
    IssuingCardEphemeralKey,
    parse_ephemeral_key,
)
from ephkeys.manager import EphemeralKeyManager
from ephkeys.policy import should_refresh
from ephkeys.provider import EphemeralKeyProvider, EphemeralKeyUpdateListener, ProviderKeyIssuer

__all__ = [
    "INTERNAL_ERROR_CODE",
    "Clock",
    "CustomerEphemeralKey",
    "EphemeralKey",
    "EphemeralKeyError",
    "EphemeralKeyManager",
    "EphemeralKeyProvider",
    "EphemeralKeyUpdateListener",
    "HTTPKeyIssuer",
    "InvalidSchemaError",
    "IssuerError",
    "IssuerUnavailableError",
    "IssuingCardEphemeralKey",
    "KeyParseError",
    "MalformedPayloadError",
    "NullPayloadError",
    "ProviderKeyIssuer",
    "SystemClock",
    "create_key_manager",
    "parse_ephemeral_key",
    "should_refresh",
]
