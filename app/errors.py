"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
VALIDATION_ERROR = "VALIDATION_ERROR"
DATE_CONFLICT = "DATE_CONFLICT"
RESOURCE_IN_USE = "RESOURCE_IN_USE"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class DuplicateResourceError(DomainError):
    """Raised when attempting to create or update a resource that would violate a uniqueness constraint."""

    pass


class DomainValidationError(DomainError):
    """Raised when business rules or domain validation fail (e.g. invalid filter bounds, malformed search terms)."""

    pass


class DateConflictError(DomainError):
    """Raised when linking a right to an item whose existing rights overlap its validity window."""

    def __init__(self, message: str, metadata_id: str, right_id: str, conflicting_right_ids: list[str]):
        super().__init__(message)
        self.metadata_id = metadata_id
        self.right_id = right_id
        self.conflicting_right_ids = conflicting_right_ids


class ReferentialGuardError(DomainError):
    """Raised when deleting a resource that is still referenced (item links, templates)."""

    def __init__(self, message: str, referenced_by: list[str] | None = None):
        super().__init__(message)
        self.referenced_by = referenced_by or []
