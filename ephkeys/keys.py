"""Ephemeral key models and raw payload parsing."""

from __future__ import annotations

import json
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ephkeys.exceptions import InvalidSchemaError, MalformedPayloadError, NullPayloadError

K = TypeVar("K", bound="EphemeralKey")


class AssociatedObject(BaseModel):
    """Backend object the ephemeral key is scoped to."""

    model_config = ConfigDict(frozen=True)

    type: str
    id: str


class EphemeralKey(BaseModel):
    """Immutable ephemeral key as issued by the backend.

    Field order matters: when several required fields are absent, the first
    one declared here is the one reported in ``InvalidSchemaError``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    associated_object_type: ClassVar[str | None] = None

    created: int
    expires: int
    id: str = Field(min_length=1)
    livemode: bool
    object: str
    secret: str = Field(repr=False)
    associated_objects: tuple[AssociatedObject, ...] = Field(min_length=1)

    @field_validator("associated_objects")
    @classmethod
    def validate_associated_object_type(
        cls, value: tuple[AssociatedObject, ...]
    ) -> tuple[AssociatedObject, ...]:
        """Ensure the primary associated object matches this key variant."""
        expected = cls.associated_object_type
        if expected is not None and value[0].type != expected:
            raise ValueError(f"expected associated object of type {expected!r}")
        return value

    @property
    def object_id(self) -> str:
        """Return the id of the primary associated object."""
        return self.associated_objects[0].id

    @classmethod
    def from_raw(cls: type[K], raw: str | None) -> K:
        """Parse a raw issuer response body into this key variant."""
        return parse_ephemeral_key(raw, cls)


class CustomerEphemeralKey(EphemeralKey):
    """Ephemeral key scoped to a single customer."""

    associated_object_type: ClassVar[str | None] = "customer"

    @property
    def customer_id(self) -> str:
        """Return the customer id this key acts for."""
        return self.object_id


class IssuingCardEphemeralKey(EphemeralKey):
    """Ephemeral key scoped to a single issued card."""

    associated_object_type: ClassVar[str | None] = "issuing.card"

    @property
    def issuing_card_id(self) -> str:
        """Return the issued card id this key acts for."""
        return self.object_id


def _decode_object(raw: str) -> dict[str, Any]:
    """Decode raw text into a JSON object."""
    try:
        payload = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise MalformedPayloadError(str(exc)) from exc
    if not isinstance(payload, dict):
        raise MalformedPayloadError(
            f"Value {raw} of type {type(payload).__name__} cannot be converted to a JSON object"
        )
    return payload


def _schema_error(exc: ValidationError, key_type: type[EphemeralKey]) -> InvalidSchemaError:
    """Map the first pydantic validation error onto ``InvalidSchemaError``."""
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "payload"
    if first["type"] == "missing":
        return InvalidSchemaError(field, key_type.__name__)
    return InvalidSchemaError(
        field, key_type.__name__, reason=f"Invalid value for {field}: {first['msg']}"
    )


def parse_ephemeral_key(raw: str | None, key_type: type[K]) -> K:
    """Parse and validate a raw key payload.

    The payload must be the issuer's response body exactly as received.
    """
    if raw is None:
        raise NullPayloadError()
    payload = _decode_object(raw)
    try:
        return key_type.model_validate(payload)
    except ValidationError as exc:
        raise _schema_error(exc, key_type) from exc
