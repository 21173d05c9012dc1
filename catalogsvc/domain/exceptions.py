"""Domain exceptions.

All domain-level errors raised by the catalog core. The HTTP boundary maps
each family to a transport status; inside the core they propagate unchanged.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Lookup Errors
# ============================================================================


class CatalogItemNotFoundError(DomainError):
    """Raised when no catalog item exists for a public identifier."""

    def __init__(self, public_id: Any) -> None:
        """Initialize not found error.

        Args:
            public_id: The public identifier that was looked up.
        """
        super().__init__(
            f"Catalog item {public_id} not found",
            details={"public_id": str(public_id)},
        )
        self.public_id = public_id


# ============================================================================
# Validation Errors
# ============================================================================


class CatalogValidationError(DomainError):
    """Raised when field values are malformed or out of range.

    Detected at construction time, before any store interaction.
    """

    def __init__(self, errors: list[dict[str, str]]) -> None:
        """Initialize validation error.

        Args:
            errors: One ``{"field": ..., "reason": ...}`` entry per violation.
        """
        summary = "; ".join(f"{e['field']}: {e['reason']}" for e in errors)
        super().__init__(
            f"Invalid catalog data: {summary}",
            details={"errors": errors},
        )
        self.errors = errors

    @classmethod
    def single(cls, field: str, reason: str) -> "CatalogValidationError":
        """Build an error for a single field.

        Args:
            field: Offending field name.
            reason: Why the value was rejected.

        Returns:
            CatalogValidationError with one entry.
        """
        return cls([{"field": field, "reason": reason}])


# ============================================================================
# Store Errors
# ============================================================================


class StoreError(DomainError):
    """Raised when the record store fails (transport, connectivity, integrity).

    Never retried inside the core.
    """

    pass


class RecordConflictError(StoreError):
    """Raised when a write violates a uniqueness constraint."""

    def __init__(self, message: str, public_id: Any = None) -> None:
        """Initialize conflict error.

        Args:
            message: Human-readable error message.
            public_id: Conflicting public identifier, when known.
        """
        super().__init__(
            message,
            details={"public_id": str(public_id)} if public_id is not None else None,
        )


# ============================================================================
# Cache Errors
# ============================================================================


class CacheEvictionError(DomainError):
    """Best-effort eviction failure.

    Recorded as a soft fault by the cache layer and never raised to
    the caller of the mutation that triggered it.
    """

    def __init__(self, cache_name: str, key: Any, cause: Exception) -> None:
        """Initialize eviction error.

        Args:
            cache_name: Name of the cache that failed to evict.
            key: Key being evicted, or None for a full clear.
            cause: Underlying exception.
        """
        super().__init__(
            f"Failed to evict {key!r} from cache {cache_name}: {cause}",
            details={"cache": cache_name, "key": str(key), "error": str(cause)},
        )
        self.cache_name = cache_name
        self.key = key
        self.cause = cause
