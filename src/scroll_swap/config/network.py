"""
Network configuration for the Scroll swap client.

Contains the chain table, block explorer links and the 0x API endpoints.
"""

import os
from typing import Any


# =============================================================================
# CHAIN CONFIGURATIONS
# =============================================================================

CHAINS: dict[str, dict[str, Any]] = {
    "scroll": {
        "chain_id": 534352,
        "name": "Scroll",
        "currency": "ETH",
        "rpc_urls": [
            "https://rpc.scroll.io",
            "https://scroll.drpc.org",
        ],
        "explorer": {
            "name": "Scrollscan",
            "url": "https://scrollscan.com",
        },
    },
}

# Chain ID to name mapping
CHAIN_ID_TO_NAME: dict[int, str] = {
    config["chain_id"]: name for name, config in CHAINS.items()
}

DEFAULT_CHAIN = "scroll"


# =============================================================================
# 0x SWAP API
# =============================================================================

ZERO_EX_API_URL: str = "https://api.0x.org"
ZERO_EX_API_VERSION: str = "v2"

SOURCES_PATH = "/swap/v1/sources"
PRICE_PATH = "/swap/permit2/price"
QUOTE_PATH = "/swap/permit2/quote"

# Network timeouts
HTTP_TIMEOUT: int = 30  # seconds


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_chain_config(chain: str | int | None = None) -> dict[str, Any]:
    """Get configuration for a specific chain.

    Args:
        chain: Chain name (e.g., 'scroll') or chain ID.
               If None, uses CHAIN environment variable or defaults to 'scroll'.

    Returns:
        Chain configuration dictionary.

    Raises:
        ValueError: If chain is not supported.
    """
    if chain is None:
        chain = os.getenv("CHAIN", DEFAULT_CHAIN)

    if isinstance(chain, int):
        name = CHAIN_ID_TO_NAME.get(chain)
        if name is None:
            raise ValueError(f"Unsupported chain ID: {chain}")
        chain = name

    chain = chain.lower()
    if chain not in CHAINS:
        raise ValueError(f"Unsupported chain: {chain}. Supported: {list(CHAINS.keys())}")

    return CHAINS[chain]


def get_explorer_url(chain: str | int | None = None) -> str:
    """Get the block explorer URL for a chain."""
    config = get_chain_config(chain)
    return config["explorer"]["url"]


def get_tx_url(tx_hash: str, chain: str | int | None = None) -> str:
    """Link to a transaction on the chain's block explorer."""
    return f"{get_explorer_url(chain)}/tx/{tx_hash}"
