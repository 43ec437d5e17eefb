"""URL shortening utilities module.

This module handles the generation of short codes and the short URLs built
from them.
"""

import base64
import secrets
import string
from typing import Optional

from ..core.config import settings


# Characters produced by URL-safe base64
URL_SAFE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_"


def generate_short_code(length: Optional[int] = None) -> str:
    """Generate a random short code.

    Random bytes come from the operating system CSPRNG and are encoded with
    URL-safe base64, so every character is in URL_SAFE_ALPHABET.

    Args:
        length: Length of the generated code. Defaults to settings value.

    Returns:
        Random short code string of exactly ``length`` characters.

    Raises:
        ValueError: If length is not positive.
    """
    if length is None:
        length = settings.short_code_length
    if length < 1:
        raise ValueError(f"Short code length must be positive (given value: {length})")
    encoded = base64.urlsafe_b64encode(secrets.token_bytes(length)).decode("ascii")
    return encoded.rstrip("=")[:length]


def build_short_url(base_url: str, short_code: str) -> str:
    """Create full short URL from base URL and short code.

    Args:
        base_url: Base URL of the service.
        short_code: Short code.

    Returns:
        Full short URL string.
    """
    return f"{base_url.rstrip('/')}/{short_code}"
