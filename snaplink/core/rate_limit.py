"""
Rate Limiting Configuration

This module provides rate limiting functionality for API endpoints.
Rate limiting prevents abuse and ensures fair usage.

Design Decisions:
- Uses slowapi for rate limiting (lightweight, FastAPI-compatible)
- Different limits for different endpoints
- IP-based limiting
- Can be switched off with RATE_LIMIT_ENABLED=false (tests, trusted networks)
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from snaplink.core.setting import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# Rate limit configurations per endpoint
# Format: "count/period" (e.g., "10/minute" means 10 requests per minute)
RATE_LIMITS = {
    "shorten": "10/minute",  # URL creation: 10 per minute per IP
    "redirect": "100/minute",  # Redirects: 100 per minute per IP
    "qrcode": "30/minute",  # QR rendering is CPU bound
    "auth": "20/minute",  # Register/login: slows down credential stuffing
}
