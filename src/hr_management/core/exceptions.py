class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class HierarchyCycleError(DomainError):
    """Raised when a reassignment would make the manager relation circular."""


class DataStoreError(DomainError):
    """Raised when the underlying database call fails."""


class OperationError(DomainError):
    """Raised when a multi-step operation was rolled back."""
