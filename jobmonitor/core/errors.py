"""Authentication, authorization and user-administration error taxonomy.

Every error carries the HTTP status and short error label it maps to at the
edge; the exception handlers in ``jobmonitor.api.errors`` turn them into the
JSON error body. ``message`` is what the client sees; anything more specific
belongs in the server log.
"""


class AuthError(Exception):
    """Base class for failures that end a request with 401/403."""

    status_code = 401
    error = "Unauthorized"
    default_message = "Access denied. Please login to access this resource."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(AuthError):
    """Password does not match the stored hash."""

    default_message = "Invalid username or password"


class UserNotFound(InvalidCredentials):
    """No user with the submitted username. Reported exactly like InvalidCredentials."""


class AccountDisabled(AuthError):
    default_message = "User account is disabled"


class AccountLocked(AuthError):
    default_message = "User account is locked"


class AccountExpired(AuthError):
    default_message = "User account has expired"


class CredentialsExpired(AuthError):
    default_message = "User credentials have expired"


class InvalidTokenError(AuthError):
    """Malformed token, bad signature, missing claim or wrong token type."""

    default_message = "Invalid token"


class ExpiredTokenError(AuthError):
    """Token is past its expiry; the client should refresh or log in again."""

    default_message = "Token has expired"


class RevokedTokenError(AuthError):
    """Refresh token was revoked (logout, rotation or forced logout)."""

    default_message = "Refresh token has been revoked. Please login again."


class InsufficientRole(AuthError):
    status_code = 403
    error = "Forbidden"
    default_message = "You do not have permission to access this resource."


class TokenConfigurationError(Exception):
    """Signing key or algorithm is unusable. Raised at startup, never per request."""


class UserServiceError(Exception):
    """Base class for user administration failures."""

    status_code = 400
    error = "Bad Request"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserNotFoundError(UserServiceError):
    status_code = 404
    error = "Not Found"


class DuplicateUserError(UserServiceError):
    status_code = 409
    error = "Conflict"


class InvalidPasswordError(UserServiceError):
    """Current password did not match during a password change."""
