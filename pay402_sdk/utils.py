"""
Utility helpers for the pay402 SDK.
"""
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Union

from web3 import Web3

# Settlement token precision
TOKEN_DECIMALS = 6

# Largest value a uint256 argument can carry
MAX_UINT256 = 2**256 - 1

_SENSITIVE_KEYS = ("private_key", "privateKey", "priv_key", "secret")


def is_valid_address(address: Any) -> bool:
    """
    Check that a value is a syntactically valid EVM address.

    Mixed-case addresses must carry a valid EIP-55 checksum.
    """
    if not isinstance(address, str) or not Web3.is_address(address):
        return False
    hex_part = address[2:] if address[:2].lower() == "0x" else address
    if hex_part.lower() != hex_part and hex_part.upper() != hex_part:
        return Web3.is_checksum_address(address)
    return True


def to_checksum(address: str) -> str:
    """Return the EIP-55 checksummed form of an address."""
    return Web3.to_checksum_address(address)


def scale_amount(amount: Union[str, int, Decimal], decimals: int = TOKEN_DECIMALS) -> int:
    """
    Convert a human-readable token amount into base units.

    Args:
        amount: Decimal amount, e.g. "1.5"
        decimals: Token precision (6 for the settlement token)

    Returns:
        Integer amount in base units, e.g. 1500000

    Raises:
        ValueError: If the amount is not a positive number representable
            at the given precision and within the uint256 range
    """
    if isinstance(amount, float):
        # floats lose precision before we ever see them
        amount = repr(amount)
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid payment amount: {amount!r}") from e

    if not value.is_finite() or value <= 0:
        raise ValueError(f"Payment amount must be positive: {amount!r}")

    if value > MAX_UINT256:
        raise ValueError(f"Payment amount {amount!r} exceeds the uint256 range")

    # scaleb only moves the exponent; keep every coefficient digit
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits))
        scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Payment amount {amount!r} has more than {decimals} decimal places")
    if scaled > MAX_UINT256:
        raise ValueError(f"Payment amount {amount!r} exceeds the uint256 range")
    return int(scaled)


def normalize_tx_hash(tx_hash: Union[str, bytes]) -> str:
    """Return a transaction hash as a 0x-prefixed hex string."""
    if isinstance(tx_hash, (bytes, bytearray)):
        return Web3.to_hex(tx_hash)
    if not tx_hash.startswith("0x"):
        return "0x" + tx_hash
    return tx_hash


def sanitize_for_log(data: Any) -> Any:
    """
    Remove sensitive data from a payload before logging it.

    Args:
        data: Payload to sanitize

    Returns:
        A copy safe to log
    """
    if not isinstance(data, dict):
        return data

    result: Dict[str, Any] = {}
    for key, value in data.items():
        if key in _SENSITIVE_KEYS:
            result[key] = f"[REDACTED - {len(str(value))} chars]"
        elif key == "message" and isinstance(value, str):
            result[key] = f"[{len(value)} chars]"
        else:
            result[key] = value
    return result
