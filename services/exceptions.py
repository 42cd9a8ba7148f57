"""
Error taxonomy for the auth core.

Every store, hashing and signing failure is translated into one of these
before it leaves the service layer. The HTTP layer maps them onto the
uniform error envelope in api/errors.py.
"""
from __future__ import annotations


class AuthError(Exception):
    """Base class: carries a stable code, a short message and a status."""

    code = "AUTH_ERROR"
    status = 400
    message = "Request could not be processed"
    retryable = False

    def __init__(self, message: str | None = None, *, reason: str | None = None):
        self.message = message or self.message
        # internal diagnostic only; never put on the wire
        self.reason = reason
        super().__init__(self.message)


class ValidationError(AuthError):
    code = "VALIDATION_ERROR"
    status = 422
    message = "Invalid input"


class DuplicateEmail(AuthError):
    code = "BAD_REQUEST"
    status = 400
    message = "Email already registered"


class InvalidCredentials(AuthError):
    # unknown email and wrong password share this message
    code = "UNAUTHORIZED"
    status = 401
    message = "Invalid email or password"


class MissingToken(AuthError):
    code = "BAD_REQUEST"
    status = 400
    message = "No token provided"


class TokenInvalid(AuthError):
    code = "UNAUTHORIZED"
    status = 401
    message = "Invalid or expired token"


class InvalidSignature(TokenInvalid):
    pass


class TokenExpired(TokenInvalid):
    pass


class TokenRevoked(TokenInvalid):
    pass


class StoreUnavailable(AuthError):
    code = "SERVICE_UNAVAILABLE"
    status = 503
    message = "Storage temporarily unavailable"
    retryable = True


class InternalError(AuthError):
    code = "INTERNAL_ERROR"
    status = 500
    message = "An unexpected error occurred"


class MalformedHash(InternalError):
    pass


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""
