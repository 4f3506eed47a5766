"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist (or is not available)."""


class ForbiddenError(DomainException):
    """The caller's role or ownership does not permit the operation."""


class InsufficientStockError(DomainException):
    """A product does not have enough stock for the requested quantity."""

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for {product_name} "
            f"(requested {requested}, available {available})"
        )
        self.product_name = product_name
        self.requested = requested
        self.available = available


class ConflictError(DomainException):
    """A concurrent transaction won the race; the whole operation may be retried."""
