"""Domain error taxonomy."""


class DomainError(Exception):
    """Base class for errors raised by the domain and service layers."""


class ValidationError(DomainError):
    """An entity invariant or request rule was violated."""


class InvalidArgumentError(ValidationError):
    """A precondition on an operation argument failed."""


class NotFoundError(DomainError):
    """A lookup by identifier yielded nothing."""


class PersistenceError(DomainError):
    """The underlying store failed to complete an operation."""
