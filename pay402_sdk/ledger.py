"""
LedgerClient - signs, broadcasts and confirms payment transactions.
"""
import logging
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from web3 import Web3
from web3.exceptions import TimeExhausted
from web3.types import TxReceipt as Web3TxReceipt

from .exceptions import ConfigurationError, PaymentFailedError
from .models import TxReceipt
from .signer import Signer
from .utils import normalize_tx_hash, to_checksum


class LedgerClient:
    """
    Key-holding account on an EVM network.

    Every write goes through the same pipeline: build, sign, broadcast,
    wait for one receipt, check its status. A failed transaction is never
    rebroadcast.
    """

    # Settlement token (ERC-20) subset
    ERC20_ABI = (
        {
            "inputs": [
                {"internalType": "address", "name": "spender", "type": "address"},
                {"internalType": "uint256", "name": "amount", "type": "uint256"}
            ],
            "name": "approve",
            "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
            "stateMutability": "nonpayable",
            "type": "function"
        },
        {
            "inputs": [
                {"internalType": "address", "name": "to", "type": "address"},
                {"internalType": "uint256", "name": "amount", "type": "uint256"}
            ],
            "name": "transfer",
            "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
            "stateMutability": "nonpayable",
            "type": "function"
        },
    )

    ESCROW_ABI = (
        {
            "inputs": [
                {"internalType": "string", "name": "txId", "type": "string"},
                {"internalType": "address", "name": "creator", "type": "address"},
                {"internalType": "uint256", "name": "amount", "type": "uint256"}
            ],
            "name": "createTx",
            "outputs": [],
            "stateMutability": "payable",
            "type": "function"
        },
    )

    DEFAULT_GAS_LIMIT = 300000
    NATIVE_TRANSFER_GAS = 21000

    def __init__(
        self,
        rpc_url: str,
        signer: Signer,
        receipt_timeout: float = 120,
        poll_interval: float = 0.1,
        erc20_abi: Optional[Sequence[Dict[str, Any]]] = None,
        escrow_abi: Optional[Sequence[Dict[str, Any]]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the LedgerClient

        Args:
            rpc_url: JSON-RPC endpoint of the network
            signer: Signer holding the payer key
            receipt_timeout: Seconds to wait for a transaction receipt
            poll_interval: Seconds between receipt polls
            erc20_abi: Override for the settlement token ABI
            escrow_abi: Override for the escrow contract ABI
            logger: Optional logger instance
        """
        if signer is None:
            raise ConfigurationError("signer must be provided")

        self.rpc_url = rpc_url
        self.signer = signer
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval
        self.erc20_abi = list(erc20_abi or self.ERC20_ABI)
        self.escrow_abi = list(escrow_abi or self.ESCROW_ABI)
        self.logger = logger or logging.getLogger(__name__)

        self.w3 = Web3(Web3.HTTPProvider(rpc_url))

    @property
    def address(self) -> str:
        """Payer account address"""
        return self.signer.address

    @property
    def chain_id(self) -> int:
        return self.w3.eth.chain_id

    def assert_chain_id(self, expected: int) -> None:
        """
        Verify the RPC endpoint serves the expected chain.

        Raises:
            ConfigurationError: On mismatch
        """
        actual = self.chain_id
        if actual != expected:
            raise ConfigurationError(f"Chain ID mismatch: expected {expected}, RPC returned {actual}")

    def send_native(self, to: str, value_wei: int) -> TxReceipt:
        """
        Transfer native currency and wait for confirmation.

        Args:
            to: Recipient address
            value_wei: Amount in wei

        Returns:
            Confirmed transaction receipt
        """
        description = f"native transfer of {value_wei} wei to {to}"
        from_address = self.address
        try:
            tx: Dict[str, Any] = {
                'from': from_address,
                'to': to_checksum(to),
                'value': int(value_wei),
                'nonce': self.w3.eth.get_transaction_count(from_address),
                'gasPrice': self.w3.eth.gas_price,
                'chainId': self.w3.eth.chain_id,
            }
            try:
                tx['gas'] = self.w3.eth.estimate_gas({'from': from_address, 'to': tx['to'], 'value': tx['value']})
            except Exception as e:
                tx['gas'] = self.NATIVE_TRANSFER_GAS
                self.logger.warning(f"Gas estimation failed, using default: {tx['gas']}. Error: {e}")
        except Exception as e:
            self.logger.error(f"Failed to build transaction for {description}: {e}")
            raise PaymentFailedError(f"Failed to build transaction for {description}: {e}") from e

        return self._sign_and_confirm(tx, description)

    def approve(self, token_address: str, spender: str, amount: int) -> TxReceipt:
        """Approve ``spender`` to pull ``amount`` base units of the token."""
        return self._transact(
            token_address, self.erc20_abi, "approve",
            lambda: (to_checksum(spender), int(amount)),
            f"approve {amount} for {spender}"
        )

    def transfer(self, token_address: str, to: str, amount: int) -> TxReceipt:
        """Transfer ``amount`` base units of the token to ``to``."""
        return self._transact(
            token_address, self.erc20_abi, "transfer",
            lambda: (to_checksum(to), int(amount)),
            f"token transfer of {amount} to {to}"
        )

    def create_escrow_tx(
        self,
        contract_address: str,
        transaction_id: str,
        creator: str,
        amount: int
    ) -> TxReceipt:
        """Open an escrow transaction for ``creator`` on the escrow contract."""
        return self._transact(
            contract_address, self.escrow_abi, "createTx",
            lambda: (transaction_id, to_checksum(creator), int(amount)),
            f"escrow createTx {transaction_id} for {creator}"
        )

    def _transact(
        self,
        contract_address: str,
        abi: Sequence[Dict[str, Any]],
        function_name: str,
        build_args: Callable[[], Tuple[Any, ...]],
        description: str
    ) -> TxReceipt:
        """
        Build a contract call transaction and confirm it.

        Args:
            contract_address: Address of the called contract
            abi: Contract ABI
            function_name: Contract function to call
            build_args: Returns the call arguments; evaluated inside the
                build step so argument errors surface as PaymentFailedError
            description: Human-readable label for logs and errors
        """
        from_address = self.address
        try:
            contract = self.w3.eth.contract(address=to_checksum(contract_address), abi=abi)
            fn = getattr(contract.functions, function_name)(*build_args())
            nonce = self.w3.eth.get_transaction_count(from_address)

            try:
                gas = fn.estimate_gas({'from': from_address})
                # Add 10% buffer to gas estimate
                gas = int(gas * 1.1)
                self.logger.debug(f"Estimated gas for {description}: {gas}")
            except Exception as e:
                gas = self.DEFAULT_GAS_LIMIT
                self.logger.warning(f"Gas estimation failed, using default: {gas}. Error: {e}")

            tx = fn.build_transaction({
                'from': from_address,
                'nonce': nonce,
                'gas': gas,
                'gasPrice': self.w3.eth.gas_price,
            })
        except Exception as e:
            self.logger.error(f"Failed to build transaction for {description}: {e}")
            raise PaymentFailedError(f"Failed to build transaction for {description}: {e}") from e

        return self._sign_and_confirm(tx, description)

    def _sign_and_confirm(self, tx: Dict[str, Any], description: str) -> TxReceipt:
        try:
            signed_tx = self.signer.sign_transaction(tx)
        except Exception as e:
            self.logger.error(f"Transaction signing failed: {e}")
            raise PaymentFailedError(f"Failed to sign transaction: {e}") from e

        try:
            raw_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except Exception as e:
            self.logger.error(f"Failed to send transaction: {e}")
            raise PaymentFailedError(f"Failed to send transaction for {description}: {e}") from e

        tx_hash = normalize_tx_hash(raw_hash)
        self.logger.info(f"Transaction sent ({description}): {tx_hash}")

        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                raw_hash,
                timeout=self.receipt_timeout,
                poll_latency=self.poll_interval
            )
        except TimeExhausted as e:
            self.logger.error(f"No receipt for {tx_hash} after {self.receipt_timeout}s")
            raise PaymentFailedError(f"Transaction {tx_hash} was not confirmed", tx_hash=tx_hash) from e
        except Exception as e:
            self.logger.error(f"Failed waiting for receipt of {tx_hash}: {e}")
            raise PaymentFailedError(f"Failed waiting for receipt of {tx_hash}: {e}", tx_hash=tx_hash) from e

        if not receipt:
            raise PaymentFailedError(f"Transaction {tx_hash} produced no receipt", tx_hash=tx_hash)

        converted = self._convert_receipt(receipt)
        if not converted.succeeded:
            self.logger.error(f"Transaction {tx_hash} reverted ({description})")
            raise PaymentFailedError(
                f"Transaction failed or was reverted on-chain: {description}",
                tx_hash=converted.tx_hash
            )

        self.logger.debug(f"Transaction {converted.tx_hash} confirmed in block {converted.block_number}")
        return converted

    def _convert_receipt(self, web3_receipt: Web3TxReceipt) -> TxReceipt:
        """
        Convert Web3 receipt to our TxReceipt model

        Args:
            web3_receipt: The Web3 transaction receipt

        Returns:
            Our TxReceipt model
        """
        receipt_dict = dict(web3_receipt)

        # Convert bytes to hex strings
        for key, value in list(receipt_dict.items()):
            if isinstance(value, bytes):
                receipt_dict[key] = Web3.to_hex(value)

        receipt_dict["logs"] = [dict(log) for log in receipt_dict.get("logs") or []]
        return TxReceipt.model_validate(receipt_dict)
