from .client_creator import (
    create_test_client,
    make_receipt,
    TEST_RPC_URL,
    TEST_BASE_URL,
    TEST_PRIV_KEY,
    TEST_PAYER,
    TEST_TOKEN,
    TEST_RECEIVER,
    TEST_ESCROW_CONTRACT,
)

__all__ = [
    "create_test_client",
    "make_receipt",
    "TEST_RPC_URL",
    "TEST_BASE_URL",
    "TEST_PRIV_KEY",
    "TEST_PAYER",
    "TEST_TOKEN",
    "TEST_RECEIVER",
    "TEST_ESCROW_CONTRACT",
]
