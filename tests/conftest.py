"""
Pytest fixtures for the pay402 SDK tests.
"""
import pytest
from unittest.mock import MagicMock
from web3.providers.rpc import HTTPProvider

from pay402_sdk import LedgerClient, NetworkConfig
from tests.test_helpers import (
    create_test_client, make_receipt, TEST_PAYER, TEST_RPC_URL
)

TX_HASH_BYTES = bytes.fromhex("ab" * 32)
TX_HASH_HEX = "0x" + "ab" * 32


@pytest.fixture(autouse=True)
def _patch_http_provider(monkeypatch):
    """
    Stub every Web3 HTTP call so no DNS / network traffic is triggered.
    Works for all tests because it is autouse.
    """
    def _dummy(self, method, params=None, _=None):      # signature match
        if method in {"eth_chainId"}:
            return {"jsonrpc": "2.0", "id": 1, "result": "0x138b"}      # 5003
        if method in {"eth_gasPrice"}:
            return {"jsonrpc": "2.0", "id": 1, "result": "0x3b9aca00"}  # 1 gwei
        return {"jsonrpc": "2.0", "id": 1, "result": "0x0"}

    monkeypatch.setattr(HTTPProvider, "make_request", _dummy, raising=True)


@pytest.fixture(autouse=True)
def _reset_network_cache():
    NetworkConfig._networks_cache = None
    yield
    NetworkConfig._networks_cache = None


def _web3_receipt(tx_hash, status=1):
    return {
        'transactionHash': tx_hash,
        'blockNumber': 12345,
        'blockHash': bytes.fromhex('abcdef1234567890' * 4),
        'status': status,
        'gasUsed': 85000,
        'from': TEST_PAYER,
        'to': '0x0987654321098765432109876543210987654321',
        'logs': []
    }


@pytest.fixture
def web3_receipt():
    """Factory for raw web3 receipts"""
    return _web3_receipt


@pytest.fixture
def mock_w3():
    """
    Mock Web3 instance with realistic eth behaviour.

    Every contract function returns a mock whose ``build_transaction``
    echoes the tx params, and every transaction confirms with status 1.
    """
    w3 = MagicMock()
    w3.eth.chain_id = 5003
    w3.eth.gas_price = 1000000000
    w3.eth.get_transaction_count = MagicMock(return_value=12)
    w3.eth.estimate_gas = MagicMock(return_value=21000)
    w3.eth.send_raw_transaction = MagicMock(return_value=TX_HASH_BYTES)
    w3.eth.wait_for_transaction_receipt = MagicMock(
        side_effect=lambda tx_hash, **kwargs: _web3_receipt(tx_hash)
    )

    contracts = {}

    def contract(address, abi):
        if address in contracts:
            return contracts[address]
        contract_mock = MagicMock()
        contract_mock.address = address
        for name in ("approve", "transfer", "createTx"):
            fn = MagicMock()
            fn.estimate_gas = MagicMock(return_value=50000)
            fn.build_transaction = MagicMock(
                side_effect=lambda params, _address=address: {**params, 'to': _address, 'data': '0x1234'}
            )
            getattr(contract_mock.functions, name).return_value = fn
        contracts[address] = contract_mock
        return contract_mock

    w3.eth.contract = MagicMock(side_effect=contract)
    w3.contracts = contracts
    return w3


@pytest.fixture
def mock_signer():
    """Signer double that returns a fixed raw transaction"""
    signer = MagicMock()
    signer.address = TEST_PAYER
    signer.sign_transaction = MagicMock(return_value=MagicMock(raw_transaction=b'signed_transaction'))
    return signer


@pytest.fixture
def ledger(mock_w3, mock_signer):
    """LedgerClient wired to the mock Web3 instance"""
    client = LedgerClient(rpc_url=TEST_RPC_URL, signer=mock_signer, poll_interval=0)
    client.w3 = mock_w3
    return client


@pytest.fixture
def fake_ledger():
    """Ledger double for orchestration tests"""
    fake = MagicMock(spec=LedgerClient)
    fake.address = TEST_PAYER
    fake.transfer.return_value = make_receipt("0xHash1")
    fake.approve.return_value = make_receipt("0xApproveHash")
    fake.create_escrow_tx.return_value = make_receipt("0xCreateTxHash")
    fake.send_native.return_value = make_receipt("0xNativeHash")
    return fake


@pytest.fixture
def client(fake_ledger):
    """PaymentClient with a fake ledger and the real HTTP transport"""
    return create_test_client(ledger=fake_ledger)
