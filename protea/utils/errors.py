"""Error handling utilities."""

from typing import Optional


class ProteaError(Exception):
    """Base exception for the Protea listing backend."""
    pass


class SupabaseError(ProteaError):
    """Supabase operation error (network or backend failure)."""
    pass


class ListingValidationError(ProteaError):
    """Listing form input is incomplete or invalid."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ListingNotFoundError(ProteaError):
    """No listing row matches the requested id."""
    pass


class AccessDeniedError(ProteaError):
    """User lacks the privileges required for the operation."""
    pass


class AuthenticationError(ProteaError):
    """Missing or invalid user session."""
    pass


class ExtractionError(ProteaError):
    """LLM listing extraction error."""
    pass


class StorageError(ProteaError):
    """Object storage (image upload/removal) error."""
    pass
