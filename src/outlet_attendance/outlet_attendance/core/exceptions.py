class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidCoordinate(ValidationError):
    """Raised when a GPS coordinate is missing, NaN or outside the valid range."""


class AuthenticationError(DomainError):
    """Raised when the session is missing, expired or rejected by the identity provider."""


class IdentityUnavailable(DomainError):
    """Raised when the identity provider cannot be reached (network, timeout, 5xx)."""


class ShiftLookupUnavailable(DomainError):
    """Raised when the active shift cannot be looked up because the backend failed."""


class StaleProgress(DomainError):
    """Raised when a progress record bound to another login session reaches a consumer."""


class ResolutionCancelled(DomainError):
    """Raised when a side effect is attempted after its mount was cancelled."""
