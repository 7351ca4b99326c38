"""
Configuration package for the Scroll swap client.
"""

from scroll_swap.config.network import (
    CHAINS,
    DEFAULT_CHAIN,
    ZERO_EX_API_URL,
    ZERO_EX_API_VERSION,
    get_chain_config,
    get_explorer_url,
    get_tx_url,
)

from scroll_swap.config.tokens import (
    TOKEN_CONFIG,
    DEFAULT_SWAP_CONFIG,
    MAX_UINT256,
    get_token_info,
    to_base_units,
)

from scroll_swap.config.settings import Settings

from scroll_swap.config.abis import ERC20_ABI

__all__ = [
    # Network
    'CHAINS',
    'DEFAULT_CHAIN',
    'ZERO_EX_API_URL',
    'ZERO_EX_API_VERSION',
    'get_chain_config',
    'get_explorer_url',
    'get_tx_url',

    # Tokens
    'TOKEN_CONFIG',
    'DEFAULT_SWAP_CONFIG',
    'MAX_UINT256',
    'get_token_info',
    'to_base_units',

    # Settings
    'Settings',

    # ABIs
    'ERC20_ABI',
]
