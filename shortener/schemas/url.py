"""Response schemas for URL Shortener Service."""

from pydantic import BaseModel


class ShortenResponse(BaseModel):
    """Response model for a shortened URL."""

    result: str


class BatchShortenResponse(BaseModel):
    """Response model for one entry of a batch shorten request."""

    correlation_id: str
    short_url: str


class UserURLResponse(BaseModel):
    """Response model for a URL owned by the current user."""

    short_url: str
    original_url: str


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
