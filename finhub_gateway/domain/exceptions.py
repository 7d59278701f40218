"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input rejected before any computation (bad window, goal, or user)"""

    pass


class UpstreamUnavailableError(DomainException):
    """Transaction or account store query failed"""

    pass
