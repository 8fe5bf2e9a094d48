"""
pay402 SDK - client for HTTP 402 pay-per-request APIs settled on EVM chains.
"""
from .version import __version__
from .client import PaymentClient
from .config import NetworkConfig, ServiceConfig
from .flows import EndpointFlow, PaymentMode
from .ledger import LedgerClient
from .models import PaymentChallenge, PaymentData, PaymentProof, NetworkProfile, TxReceipt
from .signer import LocalSigner, Signer
from .transport import HttpResponse, HttpTransport
from .exceptions import (
    ErrorCategory,
    PaymentServiceError,
    ConfigurationError,
    TransportError,
    UnexpectedStatusError,
    MalformedChallengeError,
    PaymentFailedError,
    RetryRejectedError,
)

__all__ = [
    "PaymentClient",
    "LedgerClient",
    "HttpTransport",
    "HttpResponse",
    "NetworkConfig",
    "ServiceConfig",
    "EndpointFlow",
    "PaymentMode",
    "PaymentChallenge",
    "PaymentData",
    "PaymentProof",
    "NetworkProfile",
    "TxReceipt",
    "LocalSigner",
    "Signer",
    "ErrorCategory",
    "PaymentServiceError",
    "ConfigurationError",
    "TransportError",
    "UnexpectedStatusError",
    "MalformedChallengeError",
    "PaymentFailedError",
    "RetryRejectedError",
    "__version__",
]
