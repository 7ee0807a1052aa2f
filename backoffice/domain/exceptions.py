"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidArgumentError(DomainException):
    """Input violates a calculator precondition (negative amount, bad fee schedule)"""

    pass


class UnsupportedCurrencyError(InvalidArgumentError):
    """Currency code has no known minor-unit precision"""

    pass


class CurrencyMismatchError(InvalidArgumentError):
    """Monetary values in different currencies were combined"""

    pass
