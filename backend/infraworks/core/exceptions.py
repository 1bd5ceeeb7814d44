"""
Application error types.

WHY: Services raise these and nothing else; the HTTP shell turns each one
into the same JSON envelope ({error, message, status_code, details}) with
the status code the class declares. Categories: NotFound, Authorization,
Validation, BackendUnavailable, plus the profile-provisioning conflicts.
"""

from typing import Any, Dict, Optional

_SENSITIVE_KEYS = {"password", "token", "secret", "key", "api_key", "authorization"}


class AppException(Exception):
    """
    Root of the error hierarchy.

    Keyword arguments become the error context (ids, limits, the required
    role). Context is for logs and the response details; keys that look
    like credentials are dropped before anything leaves the process.
    """

    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        **context: Any,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Response envelope for this error."""
        details = {k: v for k, v in self.context.items() if k.lower() not in _SENSITIVE_KEYS}
        return {
            "error": type(self).__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": details or None,
        }


# ============================================================================
# Authentication & Authorization Exceptions
# ============================================================================


class AuthenticationError(AppException):
    """
    Raised when the caller cannot be identified.

    WHY: Covers a missing or invalid bearer token, and a principal that the
    identity provider accepts but that has no stored profile. Without a
    profile the caller is unauthenticated for business purposes.

    HTTP Status: 401 Unauthorized
    """

    status_code = 401
    default_message = "Authentication failed"


class AuthorizationError(AppException):
    """
    Raised when the caller lacks permissions for an action.

    HTTP Status: 403 Forbidden
    """

    status_code = 403
    default_message = "You do not have permission to perform this action"


class InsufficientPermissionsError(AuthorizationError):
    """
    Raised when the caller's role level is below an operation's required role.

    WHY: Raised by the access gate before the gated operation runs, so a
    rejected call never reaches the repository.

    HTTP Status: 403 Forbidden
    """

    default_message = "Insufficient permissions"


class TokenExpiredError(AuthenticationError):
    """
    Raised when an identity token has expired.

    WHY: Lets the front-end refresh the provider session instead of
    showing a generic login failure.

    HTTP Status: 401 Unauthorized
    """

    default_message = "Token has expired"


class TokenInvalidError(AuthenticationError):
    """
    Raised when an identity token is malformed or has an invalid signature.

    HTTP Status: 401 Unauthorized
    """

    default_message = "Token is invalid"


# ============================================================================
# Validation & Input Exceptions
# ============================================================================


class ValidationError(AppException):
    """
    Raised when input validation fails.

    WHY: Required-field checks happen at the caller (API schemas) before a
    store operation is invoked. The store trusts its input.

    HTTP Status: 400 Bad Request
    """

    status_code = 400
    default_message = "Validation failed"


# ============================================================================
# Resource Exceptions
# ============================================================================


class ResourceNotFoundError(AppException):
    """
    Raised when an id does not resolve to a document.

    HTTP Status: 404 Not Found
    """

    status_code = 404
    default_message = "Resource not found"


class ResourceAlreadyExistsError(AppException):
    """
    Raised when attempting to create a resource that already exists.

    WHY: Profiles are keyed by principal id; provisioning the same principal
    twice is a conflict, not an update.

    HTTP Status: 409 Conflict
    """

    status_code = 409
    default_message = "Resource already exists"


# ============================================================================
# Business Logic Exceptions
# ============================================================================


class BusinessRuleViolation(AppException):
    """
    Raised when a business rule is violated.

    HTTP Status: 422 Unprocessable Entity
    """

    status_code = 422
    default_message = "Business rule violation"


class AdminSetupDisabledError(BusinessRuleViolation):
    """
    Raised when first-admin bootstrap is attempted while it is not allowed.

    WHY: Bootstrap must only be reachable while ENABLE_ADMIN_SETUP is on and
    before any admin exists; afterwards admins provision other profiles.

    HTTP Status: 422 Unprocessable Entity
    """

    default_message = "Admin setup is disabled"


# ============================================================================
# Backend Availability Exceptions
# ============================================================================


class BackendUnavailableError(AppException):
    """
    Raised when the database, blob store or identity provider cannot be reached.

    WHY: These failures are retryable by the user. The core never retries
    on its own; it logs and surfaces a generic 503.

    HTTP Status: 503 Service Unavailable
    """

    status_code = 503
    default_message = "Service temporarily unavailable, please try again"


class StorageError(BackendUnavailableError):
    """
    Raised when object storage (image upload/delete) fails.

    HTTP Status: 503 Service Unavailable
    """

    default_message = "File storage error"


class ImageUploadError(ValidationError):
    """
    Raised when an uploaded image is rejected before reaching storage.

    WHY: Oversized or non-image uploads are a caller error (400), unlike a
    storage outage (503).

    HTTP Status: 400 Bad Request
    """

    default_message = "Image upload rejected"
