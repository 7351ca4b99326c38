"""
Error types for the Scroll swap workflow.

Each failure mode of a run has its own exception so the workflow can decide
explicitly whether to recover or abort:

    ConfigError       fatal      missing / malformed environment
    UpstreamAPIError  fatal      0x API returned non-2xx or an unexpected body
    ApprovalError     recovered  Permit2 approval could not be simulated or sent
    SigningError      recovered  permit EIP-712 payload could not be signed
    AssemblyError     fatal      permit required but signature / calldata missing
    SubmissionError   fatal      nonce lookup, signing or broadcast failed
"""

from __future__ import annotations

__all__ = [
    "SwapError",
    "ConfigError",
    "UpstreamAPIError",
    "ApprovalError",
    "SigningError",
    "AssemblyError",
    "SubmissionError",
]


class SwapError(Exception):
    """Base exception for every error raised by scroll_swap."""
    pass


class ConfigError(SwapError):
    """Required configuration is missing or invalid."""
    pass


class UpstreamAPIError(SwapError):
    """The 0x API answered with an error status or a body we cannot use."""

    def __init__(self, message: str, *, endpoint: str | None = None, status_code: int | None = None):
        self.endpoint = endpoint
        self.status_code = status_code
        prefix = ""
        if endpoint:
            prefix = f"{endpoint}: "
        if status_code is not None:
            prefix = f"{prefix}HTTP {status_code}: "
        super().__init__(f"{prefix}{message}")


class ApprovalError(SwapError):
    pass


class SigningError(SwapError):
    pass


class AssemblyError(SwapError):
    pass


class SubmissionError(SwapError):
    pass
