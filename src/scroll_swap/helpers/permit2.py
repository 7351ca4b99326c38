"""
Permit2 signing and calldata assembly for 0x ``/swap/permit2/quote``.

The quote's ``permit2.eip712`` payload is signed by the taker and the
signature travels inside the swap calldata:

    calldata ++ uint256(len(signature)) ++ signature

where the length is a 32-byte big-endian word.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from eth_abi import encode
from eth_utils import to_bytes, to_hex

from ..errors import AssemblyError, SigningError
from .web3_setup import SigningClient

__all__ = ["normalize_typed_data", "sign_permit", "encode_signature_length", "append_signature"]

logger = logging.getLogger(__name__)


def _is_int_type(type_: str) -> bool:
    return type_.startswith(("uint", "int"))


def _normalize_value(types: dict[str, list[dict[str, str]]], type_: str, value: Any) -> Any:
    if type_.endswith("[]") and isinstance(value, list):
        return [_normalize_value(types, type_[:-2], item) for item in value]
    if type_ in types and isinstance(value, dict):
        return _normalize_struct(types, type_, value)
    if _is_int_type(type_) and isinstance(value, str):
        return int(value, 16) if value.startswith("0x") else int(value)
    return value


def _normalize_struct(types: dict[str, list[dict[str, str]]], type_: str, value: dict[str, Any]) -> dict[str, Any]:
    out = dict(value)
    for member in types[type_]:
        name = member["name"]
        if name in out:
            out[name] = _normalize_value(types, member["type"], out[name])
    return out


def normalize_typed_data(typed_data: dict[str, Any]) -> dict[str, Any]:
    """Copy of *typed_data* with decimal / hex strings in integer fields turned into ints.

    The API serialises uint256 amounts, nonces and deadlines as strings; the
    ABI encoder needs Python ints.
    """
    normalized = copy.deepcopy(typed_data)
    types = normalized["types"]
    normalized["message"] = _normalize_struct(types, normalized["primaryType"], normalized["message"])
    domain = normalized["domain"]
    if "EIP712Domain" in types:
        normalized["domain"] = _normalize_struct(types, "EIP712Domain", domain)
    elif isinstance(domain.get("chainId"), str):
        domain["chainId"] = int(domain["chainId"])
    return normalized


def sign_permit(client: SigningClient, typed_data: dict[str, Any]) -> bytes:
    """Sign the EIP-712 permit with the client's key.

    Raises:
        SigningError: if the payload cannot be encoded or signed.
    """
    try:
        signature = client.sign_typed_data(normalize_typed_data(typed_data))
    except Exception as exc:
        raise SigningError(f"Could not sign Permit2 message: {exc}") from exc
    logger.debug("Permit2 signature: %s", to_hex(signature))
    return bytes(signature)


def encode_signature_length(signature: bytes) -> bytes:
    """Byte length of *signature* as an unsigned 32-byte big-endian word."""
    return encode(["uint256"], [len(signature)])


def append_signature(data: str, signature: bytes | None) -> str:
    """
    Return *data* (0x-hex calldata) with the length-prefixed signature appended.

    Raises:
        AssemblyError: if either the signature or the calldata is missing.
    """
    if not signature or not data:
        raise AssemblyError("Failed to obtain signature or transaction data")
    try:
        calldata = to_bytes(hexstr=data)
    except ValueError as exc:
        raise AssemblyError(f"transaction data is not hex: {exc}") from exc
    signature = bytes(signature)
    return to_hex(calldata + encode_signature_length(signature) + signature)
