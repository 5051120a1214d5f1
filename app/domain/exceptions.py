"""Domain exceptions for the catalog search service.

Defines domain-level exceptions that represent business rule violations
and store failures. These exceptions are independent of infrastructure
concerns. Presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class CatalogException(Exception):
    """Base exception for all catalog service errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for an error response body."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CatalogException):
    """Raised when input validation fails (e.g. blank name or negative price)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class IndexStoreException(CatalogException):
    """Raised when a call to the search index store fails (connection, API error)."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Search index {operation} failed",
            "INDEX_STORE_ERROR",
            {"operation": operation, "reason": reason},
        )


class IndexSynchronizationException(CatalogException):
    """Raised when applying a committed change to the search index fails.

    The authoritative mutation is already durable when this is raised, so
    details always carry persisted=True. Callers use it to tell "item not
    persisted" apart from "item persisted but not yet searchable".
    """

    def __init__(self, item_id: str, operation: str, reason: str) -> None:
        """Initialize with the affected item and index operation.

        Args:
            item_id: Catalog item whose index document could not be written.
            operation: 'upsert' or 'delete'.
            reason: Underlying store error message.
        """
        super().__init__(
            f"Catalog item {item_id} was saved but the search index {operation} failed",
            "INDEX_SYNC_FAILED",
            {
                "item_id": item_id,
                "operation": operation,
                "persisted": True,
                "reason": reason,
            },
        )
