"""
Short Code Generator

Mints random short codes from a 64-symbol URL-safe alphabet using the
``secrets`` CSPRNG, so codes are unpredictable and cannot be enumerated.

With the default length of 10 there are 64**10 (about 1.15e18) possible
codes; even at tens of millions of links the chance that a fresh code is
already taken is negligible. It is not zero, which is why the store's
unique index stays the source of truth and callers retry on collision.
"""

import secrets
import string
from typing import Optional

from snaplink.core.setting import settings

URL_SAFE_ALPHABET = string.ascii_letters + string.digits + "-_"
_ALPHABET_SET = frozenset(URL_SAFE_ALPHABET)

MAX_CODE_LENGTH = 32


def generate(length: Optional[int] = None) -> str:
    """
    Generate a new random short code.

    Args:
        length: Code length; defaults to ``settings.SHORT_CODE_LENGTH``

    Returns:
        A string of ``length`` characters drawn from URL_SAFE_ALPHABET
    """
    if length is None:
        length = settings.SHORT_CODE_LENGTH
    if length < 1:
        raise ValueError("short code length must be positive")
    return "".join(secrets.choice(URL_SAFE_ALPHABET) for _ in range(length))


def is_well_formed(code: str) -> bool:
    """Whether ``code`` could have been produced by :func:`generate`."""
    return (
        0 < len(code) <= MAX_CODE_LENGTH
        and all(char in _ALPHABET_SET for char in code)
    )
