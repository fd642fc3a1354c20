"""Storefront-Engine exception hierarchy.

Every failure a caller can observe maps to one of these classes. Routers
translate them into HTTP responses with ``status_code`` and the stable
``message`` as the detail.
"""


class StorefrontError(Exception):
    """Base exception for all Storefront errors."""

    status_code = 500

    def __init__(self, message: str = "", code: str = "STOREFRONT_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationFailure(StorefrontError):
    """Malformed input or schema violation; the client can correct it."""

    status_code = 400

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message, code="VALIDATION_FAILED")


class AttributeValidationError(ValidationFailure):
    """A product attribute map does not satisfy its category schema."""

    def __init__(self, attribute: str, reason: str):
        self.attribute = attribute
        super().__init__(f"Attribute '{attribute}' {reason}.")


class AuthenticationFailure(StorefrontError):
    """Missing, invalid or expired credential."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="UNAUTHENTICATED")


class AuthorizationFailure(StorefrontError):
    """Authenticated, but not permitted to perform the operation."""

    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, code="FORBIDDEN")


class NotFoundError(StorefrontError):
    """Referenced entity does not exist (or is not visible to the caller)."""

    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message, code="NOT_FOUND")


class ConflictError(StorefrontError):
    """Uniqueness or referential conflict (subdomain, slug, API key, in-use rows)."""

    status_code = 409

    def __init__(self, message: str = "Conflict"):
        super().__init__(message, code="CONFLICT")


class UpstreamError(StorefrontError):
    """Identity provider or store unreachable or failing.

    The detail is kept for logs; callers only ever see ``public_message``.
    """

    status_code = 502
    public_message = "Upstream service unavailable"

    def __init__(self, message: str = "Upstream service unavailable"):
        super().__init__(message, code="UPSTREAM_FAILURE")


class StoreCapabilityError(StorefrontError):
    """A privileged store operation was attempted through a scoped handle."""

    def __init__(self, message: str = "Operation requires the privileged store"):
        super().__init__(message, code="STORE_CAPABILITY")
