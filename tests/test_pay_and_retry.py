"""
Tests for the generic pay-and-retry primitive.
"""
import pytest
import requests
from unittest.mock import MagicMock

from pay402_sdk import PaymentData, MalformedChallengeError, PaymentFailedError, RetryRejectedError
from tests.test_helpers import create_test_client, TEST_RECEIVER


def test_pay_and_retry_success(client, fake_ledger):
    """Test payment followed by the caller's retry"""
    retry = MagicMock(return_value={"success": True})

    result = client.pay_and_retry(PaymentData(amount="1000", recipient=TEST_RECEIVER), retry)

    assert result == {"success": True}
    fake_ledger.send_native.assert_called_once_with(TEST_RECEIVER, 1000)
    retry.assert_called_once_with({
        "X-Payment-Tx": "0xNativeHash",
        "Content-Type": "application/json",
    })
    fake_ledger.transfer.assert_not_called()


@pytest.mark.parametrize("recipient", ["0xInvalid", "", "0x12345"])
def test_invalid_recipient_fails_before_network(client, fake_ledger, recipient):
    retry = MagicMock()

    with pytest.raises(MalformedChallengeError, match="Invalid recipient address"):
        client.pay_and_retry(PaymentData(amount="1000", recipient=recipient), retry)

    assert fake_ledger.mock_calls == []
    retry.assert_not_called()


@pytest.mark.parametrize("amount", ["abc", "0", "-5", "1.5"])
def test_invalid_amount_fails_before_network(client, fake_ledger, amount):
    with pytest.raises(MalformedChallengeError):
        client.pay_and_retry(PaymentData(amount=amount, recipient=TEST_RECEIVER), MagicMock())

    assert fake_ledger.mock_calls == []


def test_failed_payment_skips_retry(client, fake_ledger):
    fake_ledger.send_native.side_effect = PaymentFailedError("Transaction failed or was reverted on-chain.")
    retry = MagicMock()

    with pytest.raises(PaymentFailedError):
        client.pay_and_retry(PaymentData(amount="1000", recipient=TEST_RECEIVER), retry)

    retry.assert_not_called()


def test_retry_callback_error_is_wrapped(client):
    """Errors from the callback keep their cause and the payment hash"""
    retry = MagicMock(side_effect=RuntimeError("server exploded"))

    with pytest.raises(RetryRejectedError, match="server exploded") as exc_info:
        client.pay_and_retry(PaymentData(amount="1000", recipient=TEST_RECEIVER), retry)

    assert exc_info.value.tx_hash == "0xNativeHash"
    assert exc_info.value.funds_spent is True
    assert isinstance(exc_info.value.cause, RuntimeError)


def test_rpc_failure_is_payment_failed(ledger, mock_w3):
    """An unreachable RPC node surfaces as a typed error, with nothing spent"""
    client = create_test_client(ledger=ledger)
    mock_w3.eth.get_transaction_count.side_effect = requests.ConnectionError("rpc down")
    retry = MagicMock()

    with pytest.raises(PaymentFailedError, match="Failed to build transaction") as exc_info:
        client.pay_and_retry(PaymentData(amount="1000", recipient=TEST_RECEIVER), retry)

    assert isinstance(exc_info.value.cause, requests.ConnectionError)
    assert exc_info.value.funds_spent is False
    mock_w3.eth.send_raw_transaction.assert_not_called()
    retry.assert_not_called()
