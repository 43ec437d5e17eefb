"""Models package for URL Shortener Service."""

from .url import URL, DeleteRequest, ShortenRequest, BatchShortenItem, ErrorResponse

__all__ = ["URL", "DeleteRequest", "ShortenRequest", "BatchShortenItem", "ErrorResponse"]
