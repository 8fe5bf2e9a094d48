"""
Transaction signers for the pay402 SDK.
"""
from typing import Any, Dict, Protocol

from .local import LocalSigner


class Signer(Protocol):
    """Protocol for custom signers"""
    address: str

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        """Sign transaction and return signed tx object"""
        ...


__all__ = ["Signer", "LocalSigner"]
