"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Running out of free units is *not* an exception: the allocator and the
order handlers return result objects the caller branches on.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class OrderAlreadyProcessedError(DomainException):
    """A state transition was attempted on an order that is no longer pending."""


class StoreError(DomainException):
    """The backing store failed (lock timeout, lost connection, conflict).

    The transaction has been rolled back; the caller may retry.
    """

    retryable = True


class ConfirmationChannelError(DomainException):
    """The confirmation channel could not deliver or update a message."""
