"""
Token configurations for the Scroll swap client.

Addresses are Scroll mainnet deployments.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

# Token configurations
TOKEN_CONFIG: dict[str, dict[str, Any]] = {
    "weth": {
        "name": "Wrapped Ether",
        "symbol": "WETH",
        "address": "0x5300000000000000000000000000000000000004",
        "decimals": 18,
    },
    "wsteth": {
        "name": "Wrapped liquid staked Ether 2.0",
        "symbol": "wstETH",
        "address": "0xf610A9dfB7C89644979b4A0f27063E9e7d7Cda32",
        "decimals": 18,
    },
}

# Default swap parameters
DEFAULT_SWAP_CONFIG: dict[str, Any] = {
    "sell_token": "weth",
    "buy_token": "wsteth",
    "sell_amount": Decimal("0.1"),
    "affiliate_fee_bps": 100,  # 1% affiliate fee
    "surplus_collection": True,
}

# Largest uint256, used for unlimited Permit2 approvals
MAX_UINT256 = (1 << 256) - 1


def get_token_info(token: str) -> dict[str, Any]:
    """Look a token up by config key, symbol or address (case-insensitive).

    Unknown addresses are returned as a bare entry so arbitrary tokens can
    still be swapped; their symbol and decimals are read on-chain.
    """
    key = token.lower()
    if key in TOKEN_CONFIG:
        return TOKEN_CONFIG[key]
    for info in TOKEN_CONFIG.values():
        if info["symbol"].lower() == key or info["address"].lower() == key:
            return info
    if key.startswith("0x") and len(key) == 42:
        return {"name": token, "symbol": None, "address": token, "decimals": None}
    raise ValueError(f"Unknown token: {token}. Known: {list(TOKEN_CONFIG.keys())}")


def to_base_units(amount: Decimal, decimals: int) -> int:
    """Convert a human amount to the token's smallest unit (like parseUnits)."""
    scaled = Decimal(amount) * (Decimal(10) ** decimals)
    return int(scaled.to_integral_value(rounding=ROUND_HALF_UP))
