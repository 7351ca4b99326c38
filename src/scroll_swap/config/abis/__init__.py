"""
Contract ABI package for the Scroll swap client.
"""

from .erc20 import ERC20_ABI

__all__ = [
    'ERC20_ABI',
]
