"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ChainAPIError(DomainException):
    """Chain state API returned an error or is unavailable"""

    pass


class InvalidTransitionError(DomainException):
    """Event not allowed in the current transaction step"""

    pass


class FlowNotFoundError(DomainException):
    """Transaction flow does not exist"""

    pass
