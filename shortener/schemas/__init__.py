"""Schemas package for URL Shortener Service."""

from .url import (
    ShortenResponse,
    BatchShortenResponse,
    UserURLResponse,
    HealthResponse,
)

__all__ = [
    "ShortenResponse",
    "BatchShortenResponse",
    "UserURLResponse",
    "HealthResponse",
]
