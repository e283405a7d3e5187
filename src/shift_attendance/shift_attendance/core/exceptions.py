class DomainError(Exception):
    """Base exception for attendance rule violations."""


class ValidationError(DomainError):
    """Raised when input data (coordinates, times, dates) is malformed."""


class PolicyRejected(DomainError):
    """Raised when an action falls outside the allowed window or geofence."""


class Conflict(DomainError):
    """Raised when the ledger already holds what the caller tried to write."""


class NotFound(DomainError):
    """Raised when no record matches, e.g. checkout without an open check-in."""


class StoreUnavailable(DomainError):
    """Raised when the persistence layer fails."""
