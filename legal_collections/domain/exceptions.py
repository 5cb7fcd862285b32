"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    status_code = 500
    kind = "DomainError"


class ValidationError(DomainException):
    """Required input is missing or malformed"""

    status_code = 400
    kind = "ValidationError"


class ConflictError(DomainException):
    """Uniqueness violation or dependent rows blocking a delete"""

    status_code = 400
    kind = "ConflictError"


class InvalidReferenceError(DomainException):
    """A debtor or instrument reference does not resolve"""

    status_code = 400
    kind = "ReferenceError"


class NotFoundError(DomainException):
    """Record id does not resolve"""

    status_code = 404
    kind = "NotFoundError"


class InternalError(DomainException):
    """Storage or unexpected failure"""

    status_code = 500
    kind = "InternalError"
