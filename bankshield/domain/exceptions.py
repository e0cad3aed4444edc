"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class OracleError(DomainException):
    """An external judgment service failed, timed out or answered malformed data"""

    pass


class InvalidRequestError(DomainException):
    """Input rejected before any oracle call or state change"""

    pass


class AccountNotFoundError(DomainException):
    """No account is registered under the given email"""

    pass


class AccountExistsError(DomainException):
    """Registration attempted for an email that already has an account"""

    pass


class SessionTerminatedError(DomainException):
    """Session is missing, expired, or points at an unreadable account record"""

    pass


class InsufficientFundsError(DomainException):
    """Requested amount exceeds the savings balance"""

    pass


class AccountFrozenError(DomainException):
    """Operation refused because the account has been frozen"""

    pass


class FixedDepositNotFoundError(DomainException):
    """Fixed deposit does not exist for this account"""

    pass
