"""Utils package for URL Shortener Service."""

from .shortener import (
    URL_SAFE_ALPHABET,
    generate_short_code,
    build_short_url,
)

__all__ = [
    "URL_SAFE_ALPHABET",
    "generate_short_code",
    "build_short_url",
]
