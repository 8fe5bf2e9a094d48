"""
Private-key signer backed by eth-account.
"""
from typing import Any, Dict

from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..exceptions import ConfigurationError


class LocalSigner:
    """Signs transactions with an in-memory private key."""

    def __init__(self, private_key: str):
        """
        Args:
            private_key: Hex-encoded secp256k1 private key

        Raises:
            ConfigurationError: If the key cannot be parsed
        """
        try:
            self._account: LocalAccount = Account.from_key(private_key)
        except Exception as e:
            raise ConfigurationError("Invalid private key provided.") from e

    @property
    def address(self) -> str:
        return self._account.address

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        return self._account.sign_transaction(transaction_dict)

    def __repr__(self) -> str:
        return f"LocalSigner(address={self.address})"
