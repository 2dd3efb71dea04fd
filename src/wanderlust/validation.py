"""Payload schemas and validation for submitted forms."""

from collections.abc import Mapping
from typing import TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from wanderlust.domain.errors import FieldIssue, InvalidIdentifier, ValidationError


class _Payload(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True, frozen=True, allow_inf_nan=False
    )


class ImagePayload(_Payload):
    """Image fields of a listing form."""

    filename: str | None = None
    url: str | None = None


class ListingPayload(_Payload):
    """Fields accepted when creating or updating a listing."""

    title: str = Field(min_length=1)
    description: str | None = None
    image: ImagePayload | None = None
    price: float | None = Field(default=None, ge=0)
    location: str | None = None
    country: str | None = None

    @field_validator("description", "price", "location", "country", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ReviewPayload(_Payload):
    """Fields accepted when posting a review."""

    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)
    author: str | None = None

    @field_validator("author", mode="before")
    @classmethod
    def _blank_author(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SignupPayload(_Payload):
    """Fields accepted by the signup form."""

    username: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=1)


class LoginPayload(_Payload):
    """Fields accepted by the login form."""

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


_PayloadT = TypeVar("_PayloadT", bound=_Payload)


def validate_listing(raw: object) -> ListingPayload:
    """Validate the ``listing`` section of a request body."""
    return _validate(ListingPayload, raw, "listing")


def validate_review(raw: object) -> ReviewPayload:
    """Validate the ``review`` section of a request body."""
    return _validate(ReviewPayload, raw, "review")


def validate_signup(raw: object) -> SignupPayload:
    """Validate a signup form."""
    return _validate(SignupPayload, raw, "user")


def validate_login(raw: object) -> LoginPayload:
    """Validate a login form."""
    return _validate(LoginPayload, raw, "user")


def parse_identifier(entity: str, raw: str) -> UUID:
    """Parse a store identifier, raising InvalidIdentifier when malformed."""
    try:
        return UUID(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidIdentifier(entity, raw) from exc


def _validate(model: type[_PayloadT], raw: object, prefix: str) -> _PayloadT:
    if not isinstance(raw, Mapping):
        raise ValidationError([FieldIssue(prefix, "is required")])
    try:
        return model.model_validate(dict(raw))
    except PydanticValidationError as exc:
        raise ValidationError(
            [
                FieldIssue(
                    field=".".join(str(part) for part in (prefix, *error["loc"])),
                    reason=error["msg"],
                )
                for error in exc.errors()
            ]
        ) from exc
