"""
Custom Exceptions

This module defines the error taxonomy of the service. Every exception
carries the HTTP status it maps to and a message that is safe to show
to API consumers; the handlers registered in ``snaplink.main`` turn them
into the uniform ``{"success": false, "error": ...}`` body.
"""

from typing import Optional


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInputError(URLShortenerException):
    """Raised when a required field is missing or blank."""

    status_code = 400


class InvalidURLError(URLShortenerException):
    """Raised when URL validation fails."""

    status_code = 400

    def __init__(self, url: str, reason: str = "Invalid URL format provided."):
        self.url = url
        self.reason = reason
        super().__init__(reason)


class EmailAlreadyRegisteredError(URLShortenerException):
    """Raised when registering with an email that already has an account."""

    status_code = 400

    def __init__(self, email: str):
        self.email = email
        super().__init__("A user with this email already exists.")


class UnauthorizedError(URLShortenerException):
    """Raised when a request lacks valid credentials."""

    status_code = 401

    def __init__(self, message: str = "Authorization denied."):
        super().__init__(message)


class InvalidCredentialsError(UnauthorizedError):
    """Raised when login credentials do not match a user."""

    def __init__(self):
        super().__init__("Invalid email or password.")


class ForbiddenError(URLShortenerException):
    """Raised when an authenticated user may not touch a resource."""

    status_code = 403

    def __init__(self, message: str = "You are not authorized to modify this link."):
        super().__init__(message)


class NotFoundError(URLShortenerException):
    """Base for missing resources."""

    status_code = 404


class ShortCodeNotFoundError(NotFoundError):
    """Raised when a short code is not found in the database."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"No URL found for short code '{short_code}'.")


class LinkNotFoundError(NotFoundError):
    """Raised when a link id is not found in the database."""

    def __init__(self, link_id: int):
        self.link_id = link_id
        super().__init__("URL not found.")


class DatabaseError(URLShortenerException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")


class DuplicateCodeError(DatabaseError):
    """Raised when the unique index on short_code rejects an insert."""

    def __init__(self, short_code: str, original_error: Optional[Exception] = None):
        self.short_code = short_code
        super().__init__(f"short code '{short_code}' already exists", original_error)


class StorageExhaustedError(DatabaseError):
    """Raised when every attempt to mint a unique short code collided."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"could not allocate a unique short code after {attempts} attempts")
