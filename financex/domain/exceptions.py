"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class TransactionNotFoundError(DomainException):
    """Transaction does not exist for this user"""

    pass


class DebtNotFoundError(DomainException):
    """Debt does not exist for this user"""

    pass


class PaymentNotFoundError(DomainException):
    """Debt payment does not exist for this user"""

    pass
