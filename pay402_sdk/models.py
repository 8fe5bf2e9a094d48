"""
Data models for the pay402 SDK.
"""
from typing import Dict, Any, Optional, List
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PaymentChallenge(BaseModel):
    """Payment instructions carried by a 402 response body"""
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    transaction_id: Optional[str] = Field(None, alias="transactionId")
    amount: Optional[str] = Field(
        None, validation_alias=AliasChoices("amountPayment", "amount", "amount_payment")
    )
    receiver_address: Optional[str] = Field(None, alias="receiverAddress")
    escrow_address: Optional[str] = Field(None, alias="escrowAddress")
    contract_address: Optional[str] = Field(None, alias="contractAddress")

    @property
    def payee(self) -> Optional[str]:
        """Address that ultimately receives the payment."""
        return self.receiver_address or self.escrow_address

    @property
    def escrow_contract(self) -> Optional[str]:
        """
        Escrow contract to pay through.

        ``contractAddress`` wins. Otherwise ``escrowAddress`` names the
        contract only when a separate ``receiverAddress`` is the payee.
        """
        if self.contract_address:
            return self.contract_address
        if self.receiver_address and self.escrow_address:
            return self.escrow_address
        return None


class PaymentProof(BaseModel):
    """Proof of payment attached to the retried request"""
    model_config = ConfigDict(frozen=True)

    tx_hash: str

    def as_headers(self) -> Dict[str, str]:
        return {"x-payment-tx": self.tx_hash}


class PaymentData(BaseModel):
    """Explicit payment details for the generic pay-and-retry primitive"""
    amount: str  # Amount in wei
    recipient: str
    currency: Optional[str] = None  # Defaults to the native coin


class NetworkProfile(BaseModel):
    """Static description of a supported network"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    rpc: str
    chain_id: int = Field(..., alias="chainId")
    explorer: Optional[str] = None


class TxReceipt(BaseModel):
    """Transaction receipt from the blockchain"""
    model_config = ConfigDict(populate_by_name=True)

    tx_hash: str = Field(..., alias="transactionHash")
    block_number: int = Field(..., alias="blockNumber")
    block_hash: str = Field(..., alias="blockHash")
    status: int
    gas_used: int = Field(..., alias="gasUsed")
    from_address: str = Field(..., alias="from")
    to_address: Optional[str] = Field(None, alias="to")
    logs: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == 1
