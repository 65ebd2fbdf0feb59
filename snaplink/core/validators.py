"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.
These functions help prevent security issues and ensure data integrity.

Security Considerations:
- Input validation prevents injection attacks
- Length limits prevent DoS attacks
"""

import re
from typing import Optional

from snaplink.services.code_generator import is_well_formed


def sanitize_short_code(short_code: str) -> Optional[str]:
    """
    Sanitize and validate short code format.

    Short codes only contain the URL-safe alphabet [A-Za-z0-9_-].
    Anything else cannot have been issued by this service, so it is
    rejected before it reaches a query.

    Args:
        short_code: The short code to sanitize

    Returns:
        Sanitized short code if valid, None otherwise
    """
    if not short_code or not isinstance(short_code, str):
        return None

    short_code = short_code.strip()

    if not is_well_formed(short_code):
        return None

    return short_code


def validate_url_length(url: str, max_length: int = 2048) -> bool:
    """
    Validate URL length to prevent DoS attacks.

    Args:
        url: The URL to validate
        max_length: Maximum allowed length (default: 2048 per RFC 7230)

    Returns:
        True if URL length is valid, False otherwise
    """
    return bool(url) and len(url) <= max_length


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty and whitespace-only strings."""
    return value is None or not str(value).strip()


_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")


def is_valid_scheme(scheme: str) -> bool:
    """RFC 3986 scheme syntax: ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )."""
    return bool(scheme) and bool(_SCHEME_RE.match(scheme))
