"""
scroll_swap - 0x Swap API (Permit2) client for Scroll.

Lists liquidity sources, reports route / tax / monetization breakdowns,
approves Permit2 when needed and submits the permit-signed swap.
"""

from .errors import (
    SwapError,
    ConfigError,
    UpstreamAPIError,
    ApprovalError,
    SigningError,
    AssemblyError,
    SubmissionError,
)

__version__ = "0.1.0"

__all__ = [
    "SwapError",
    "ConfigError",
    "UpstreamAPIError",
    "ApprovalError",
    "SigningError",
    "AssemblyError",
    "SubmissionError",
]
