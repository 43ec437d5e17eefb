"""Domain and request models for URL Shortener Service."""

from dataclasses import dataclass
from typing import Optional
from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

_url_adapter = TypeAdapter(AnyUrl)


def check_url(value: str) -> str:
    """Validate value as an absolute URL and return it unchanged."""
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError(f"invalid url: {value!r}") from None
    return value


class URL(BaseModel):
    """A shortened URL record.

    The record id is exposed as ``uuid`` in serialized form, which is the key
    used by the JSON file mirror.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="uuid")
    original_url: str
    short_url: str
    user_id: str = ""
    is_deleted: bool = False


@dataclass(frozen=True)
class DeleteRequest:
    """A pending request to soft delete short URLs owned by one user."""

    short_urls: tuple[str, ...]
    user_id: str


class ShortenRequest(BaseModel):
    """Model for shortening a single URL."""

    url: str = Field(..., min_length=1, description="The original long URL to shorten")

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        return check_url(value)


class BatchShortenItem(BaseModel):
    """Model for one entry of a batch shorten request."""

    correlation_id: str = Field(..., min_length=1, description="Client-side id echoed in the response")
    original_url: str = Field(..., min_length=1, description="The original long URL to shorten")

    @field_validator("original_url")
    @classmethod
    def validate_original_url(cls, value: str) -> str:
        return check_url(value)


class ErrorResponse(BaseModel):
    """Model for error responses."""

    detail: str
    error_code: Optional[str] = None
