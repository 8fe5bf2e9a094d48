"""
PaymentClient - Main client for HTTP 402 pay-per-request APIs.
"""
import logging
from typing import Any, Callable, Dict, Optional, TypeVar

from pydantic import ValidationError

from .config import ServiceConfig
from .exceptions import (
    MalformedChallengeError, PaymentServiceError, RetryRejectedError,
    UnexpectedStatusError
)
from .flows import (
    AGENT_CHAT, AGENT_CHAT_ESCROW, RESOURCE, RESOURCE_ESCROW,
    EndpointFlow, PaymentMode
)
from .ledger import LedgerClient
from .models import PaymentChallenge, PaymentData, PaymentProof
from .signer import LocalSigner, Signer
from .transport import HttpResponse, HttpTransport
from .utils import is_valid_address, sanitize_for_log, scale_amount

# Type variable for improved type hinting
T = TypeVar('T')


class PaymentClient:
    """
    Client for APIs that answer ``402 Payment Required``.

    Each call:
    1. Requests the endpoint without payment
    2. Returns the body directly if no payment is required
    3. Otherwise settles the 402 challenge on-chain (token transfer or escrow)
    4. Retries the request with the ``x-payment-tx`` proof header

    A call either returns content or raises a
    :class:`~pay402_sdk.exceptions.PaymentServiceError`. On-chain payments are
    never retried.
    """

    PAYMENT_HEADER = "x-payment-tx"

    def __init__(
        self,
        config: ServiceConfig,
        ledger: Optional[LedgerClient] = None,
        transport: Optional[HttpTransport] = None,
        signer: Optional[Signer] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the PaymentClient

        Args:
            config: Service configuration
            ledger: Ledger client (built from config if omitted)
            transport: HTTP transport (built from config if omitted)
            signer: Custom signer used instead of ``config.private_key``
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ConfigurationError: If the network is unknown with no RPC URL,
                or the private key is invalid
        """
        self.config = config
        self.base_url = config.api_base_url.rstrip('/')
        self.logger = logger or logging.getLogger(__name__)

        if ledger is None:
            rpc_url = config.resolve_rpc_url()
            ledger = LedgerClient(
                rpc_url=rpc_url,
                signer=signer or LocalSigner(config.private_key),
                receipt_timeout=config.receipt_timeout,
                poll_interval=config.poll_interval,
                logger=self.logger
            )
        self.ledger = ledger
        self.transport = transport or HttpTransport(timeout=config.http_timeout, logger=self.logger)

    @classmethod
    def from_network(
        cls,
        network: str,
        private_key: str,
        rpc_url: Optional[str] = None,
        api_base_url: Optional[str] = None,
        **kwargs: Any
    ) -> "PaymentClient":
        """
        Create a client for a named network.

        Args:
            network: Network name (e.g. "mantle", "mantle-testnet", "localhost")
            private_key: Payer private key
            rpc_url: Optional RPC URL override
            api_base_url: Optional API base URL override
            **kwargs: Additional arguments passed to the constructor
        """
        values: Dict[str, Any] = {"private_key": private_key, "network": network, "rpc_url": rpc_url}
        if api_base_url:
            values["api_base_url"] = api_base_url
        return cls(ServiceConfig(**values), **kwargs)

    @property
    def address(self) -> str:
        """Payer account address"""
        return self.ledger.address

    def fetch_protected_resource(self, slug: str) -> Any:
        """GET ``{base}/{slug}``, paying by direct token transfer if challenged."""
        return self.request_with_payment(RESOURCE, {"slug": slug})

    def fetch_protected_resource_escrow(self, slug: str) -> Any:
        """GET ``{base}/escrow/{slug}``, paying through the escrow contract if challenged."""
        return self.request_with_payment(RESOURCE_ESCROW, {"slug": slug})

    def fetch_agent_reply(self, agent_slug: str, message: str) -> Any:
        """POST a chat message to an agent, paying by direct token transfer if challenged."""
        return self.request_with_payment(AGENT_CHAT, {"agent_slug": agent_slug}, message=message)

    def fetch_agent_reply_escrow(self, agent_slug: str, message: str) -> Any:
        """POST a chat message to an agent, paying through the escrow contract if challenged."""
        return self.request_with_payment(AGENT_CHAT_ESCROW, {"agent_slug": agent_slug}, message=message)

    def request_with_payment(
        self,
        flow: EndpointFlow,
        path_params: Optional[Dict[str, str]] = None,
        **body_params: Any
    ) -> Any:
        """
        Run the challenge/pay/retry algorithm for one endpoint flow.

        Args:
            flow: Endpoint description
            path_params: Values for the flow's path template
            **body_params: Arguments for the flow's body builder

        Returns:
            Parsed response body

        Raises:
            TransportError: If a request could not be completed
            UnexpectedStatusError: If the first response is neither 2xx nor 402
            MalformedChallengeError: If the 402 body cannot be paid
            PaymentFailedError: If an on-chain transaction did not confirm
            RetryRejectedError: If the paid retry was not accepted
        """
        url = flow.url(self.base_url, **(path_params or {}))
        body = flow.build_body(**body_params)
        self.logger.debug(f"{flow.name}: {flow.method} {url} body={sanitize_for_log(body)}")

        # 1. Initial request
        response = self.transport.request(flow.method, url, headers=flow.headers(), json=body)

        # 2. Free content
        if response.ok:
            self.logger.debug(f"{flow.name}: no payment required")
            return response.body

        if not response.payment_required:
            raise UnexpectedStatusError(response.status_code)

        # 3. Settle the challenge
        proof = self._settle(flow, self._parse_challenge(response))

        # 4. Retry with proof
        headers = {**flow.headers(), **proof.as_headers()}
        try:
            retry_response = self.transport.request(flow.method, url, headers=headers, json=body)
        except PaymentServiceError as e:
            e.tx_hash = proof.tx_hash
            raise

        if not retry_response.ok:
            self.logger.error(
                f"{flow.name}: retry rejected with {retry_response.status_code} "
                f"after payment {proof.tx_hash}"
            )
            raise RetryRejectedError(
                f"Retry failed: {retry_response.status_code} - {retry_response.text}",
                status_code=retry_response.status_code,
                body=retry_response.text,
                tx_hash=proof.tx_hash
            )

        return retry_response.body

    def pay_and_retry(
        self,
        payment_data: PaymentData,
        retry_request: Callable[[Dict[str, str]], T]
    ) -> T:
        """
        Pay in native currency and retry a request with proof of payment.

        Args:
            payment_data: Amount (wei) and recipient
            retry_request: Callback performing the request; receives the
                headers to attach

        Returns:
            Whatever ``retry_request`` returns

        Raises:
            MalformedChallengeError: If the recipient or amount is invalid
            PaymentFailedError: If the transfer did not confirm
            RetryRejectedError: If the callback raised
        """
        if not is_valid_address(payment_data.recipient):
            raise MalformedChallengeError(f"Invalid recipient address: {payment_data.recipient}")
        try:
            value_wei = int(payment_data.amount)
        except (TypeError, ValueError) as e:
            raise MalformedChallengeError(f"Invalid payment amount: {payment_data.amount}") from e
        if value_wei <= 0:
            raise MalformedChallengeError(f"Payment amount must be positive: {payment_data.amount}")

        receipt = self.ledger.send_native(payment_data.recipient, value_wei)
        headers = {
            'X-Payment-Tx': receipt.tx_hash,
            'Content-Type': 'application/json',
        }

        try:
            return retry_request(headers)
        except PaymentServiceError as e:
            if e.tx_hash is None:
                e.tx_hash = receipt.tx_hash
            raise
        except Exception as e:
            self.logger.error(f"Retry callback failed after payment {receipt.tx_hash}: {e}")
            raise RetryRejectedError(
                f"Retry request failed: {e}",
                body=str(e),
                tx_hash=receipt.tx_hash
            ) from e

    def _parse_challenge(self, response: HttpResponse) -> PaymentChallenge:
        if not isinstance(response.body, dict):
            raise MalformedChallengeError(f"402 response body is not a JSON object: {response.text[:200]}")
        try:
            challenge = PaymentChallenge.model_validate(response.body)
        except ValidationError as e:
            raise MalformedChallengeError(f"Invalid payment details: {e}") from e

        self.logger.debug(f"Payment challenge: {challenge.model_dump(exclude_none=True)}")
        return challenge

    def _settle(self, flow: EndpointFlow, challenge: PaymentChallenge) -> PaymentProof:
        """
        Validate a challenge and pay it.

        Returns:
            Proof carrying the hash of the confirmed payment transaction
        """
        payee = challenge.payee
        if not payee:
            raise MalformedChallengeError("Receiver address not found in payment details.")
        if not is_valid_address(payee):
            raise MalformedChallengeError(f"Invalid receiver address: {payee}")

        if challenge.amount is None:
            raise MalformedChallengeError("Payment amount not found in payment details.")
        try:
            amount = scale_amount(challenge.amount, self.config.token_decimals)
        except ValueError as e:
            raise MalformedChallengeError(str(e)) from e

        token = self.config.token_address

        if flow.payment_mode is PaymentMode.ESCROW:
            contract = challenge.escrow_contract
            if not contract:
                raise MalformedChallengeError("Contract address not found in payment details.")
            if not is_valid_address(contract):
                raise MalformedChallengeError(f"Invalid contract address: {contract}")
            if not challenge.transaction_id:
                raise MalformedChallengeError("Transaction id not found in payment details.")

            self.logger.info(f"Approving {amount} for escrow {contract}")
            approval = self.ledger.approve(token, contract, amount)

            self.logger.info(f"Creating escrow transaction {challenge.transaction_id} for {payee} ({amount})")
            try:
                receipt = self.ledger.create_escrow_tx(contract, challenge.transaction_id, payee, amount)
            except PaymentServiceError as e:
                # The approval is already mined
                if e.tx_hash is None:
                    e.tx_hash = approval.tx_hash
                raise
        else:
            self.logger.info(f"Transferring {amount} to {payee}")
            receipt = self.ledger.transfer(token, payee, amount)

        return PaymentProof(tx_hash=receipt.tx_hash)
