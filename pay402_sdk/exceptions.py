"""
Exceptions for the pay402 SDK.

Every failure raised by :class:`pay402_sdk.PaymentClient` is a subclass of
:class:`PaymentServiceError`. Callers can catch the base class for a single
error shape and still branch on ``category`` or ``funds_spent``.
"""
from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    """
    Failure categories reported by the payment flow.
    """
    CONFIGURATION = "CONFIGURATION"
    TRANSPORT = "TRANSPORT"
    UNEXPECTED_STATUS = "UNEXPECTED_STATUS"
    MALFORMED_CHALLENGE = "MALFORMED_CHALLENGE"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    RETRY_REJECTED = "RETRY_REJECTED"
    UNKNOWN = "UNKNOWN"


class PaymentServiceError(Exception):
    """Base exception for all pay402 SDK errors."""

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message)

    @property
    def funds_spent(self) -> bool:
        """Whether an on-chain payment may have been made before the failure."""
        return self.tx_hash is not None

    @property
    def cause(self) -> Optional[BaseException]:
        """The underlying exception, if this error wraps one."""
        return self.__cause__


class ConfigurationError(PaymentServiceError):
    """Raised when the client cannot be configured (network, RPC URL, key)."""
    category = ErrorCategory.CONFIGURATION


class TransportError(PaymentServiceError):
    """Raised when an HTTP request could not be completed."""
    category = ErrorCategory.TRANSPORT


class UnexpectedStatusError(PaymentServiceError):
    """Raised when the initial response is neither 2xx nor 402."""
    category = ErrorCategory.UNEXPECTED_STATUS

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or f"Unexpected status code: {status_code}")


class MalformedChallengeError(PaymentServiceError):
    """Raised when a 402 body or payment data cannot be used to pay."""
    category = ErrorCategory.MALFORMED_CHALLENGE


class PaymentFailedError(PaymentServiceError):
    """
    Raised when an on-chain approval or payment did not confirm.

    ``tx_hash`` is set once the transaction was broadcast, in which case gas
    (and possibly funds) were spent.
    """
    category = ErrorCategory.PAYMENT_FAILED


class RetryRejectedError(PaymentServiceError):
    """Raised when the request retried with proof of payment was not accepted."""
    category = ErrorCategory.RETRY_REJECTED

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: str = "",
        tx_hash: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message, tx_hash=tx_hash)

    @property
    def funds_spent(self) -> bool:
        return True
