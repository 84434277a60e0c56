"""Domain-specific exceptions. Pure domain layer; no infrastructure."""


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """Raised when domain validation rules are violated."""


class InvalidStatusTransitionError(DomainError):
    """Raised when a task status change is not allowed (e.g. same status)."""
