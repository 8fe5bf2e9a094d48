"""
Utility functions for creating test clients.
"""
from typing import Optional
from unittest.mock import MagicMock

from pay402_sdk import PaymentClient, ServiceConfig, LedgerClient, TxReceipt

# Test constants used throughout tests
TEST_RPC_URL = "https://rpc.example.com"
TEST_BASE_URL = "https://api.example.com"
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_PAYER = "0x1234567890123456789012345678901234567890"
TEST_TOKEN = "0x4dabf45c8cf333ef1e874c3fdfc3c86799af80c8"
TEST_RECEIVER = "0x5c5c5c5c5c5c5c5c5c5c5c5c5c5c5c5c5c5c5c5c"
TEST_ESCROW_CONTRACT = "0xe5e5e5e5e5e5e5e5e5e5e5e5e5e5e5e5e5e5e5e5"


def make_receipt(tx_hash: str = "0xHash1", status: int = 1) -> TxReceipt:
    """Build a confirmed (or reverted) receipt for a fake ledger."""
    return TxReceipt(
        transactionHash=tx_hash,
        blockNumber=12345,
        blockHash="0x" + "ab" * 32,
        status=status,
        gasUsed=50000,
        **{"from": TEST_PAYER},
        to=TEST_TOKEN,
        logs=[]
    )


def create_test_client(
    ledger: Optional[LedgerClient] = None,
    base_url: str = TEST_BASE_URL,
    network: str = "localhost",
    rpc_url: Optional[str] = TEST_RPC_URL,
    **kwargs
) -> PaymentClient:
    """
    Create a client instance for testing with consistent defaults.

    Args:
        ledger: Ledger double; a MagicMock spec'd on LedgerClient if omitted
        base_url: API base URL
        network: Network name
        rpc_url: RPC URL override
        **kwargs: Additional ServiceConfig fields

    Returns:
        Configured PaymentClient instance
    """
    if ledger is None:
        ledger = MagicMock(spec=LedgerClient)
        ledger.address = TEST_PAYER

    config = ServiceConfig(
        private_key=TEST_PRIV_KEY,
        network=network,
        rpc_url=rpc_url,
        api_base_url=base_url,
        token_address=TEST_TOKEN,
        **kwargs
    )
    return PaymentClient(config, ledger=ledger)
