"""
Runtime settings read from the environment.

Required
--------
PRIVATE_KEY                  signer key, with or without ``0x`` prefix
ZERO_EX_API_KEY              0x dashboard API key
ALCHEMY_HTTP_TRANSPORT_URL   JSON-RPC endpoint (``RPC_URL`` is accepted too)

Optional
--------
ZERO_EX_API_URL   defaults to https://api.0x.org
ZERO_EX_TIMEOUT   HTTP timeout in seconds, default 30
LOG_DIR           log directory, default ./logs
LOG_LEVEL         default INFO
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

from ..errors import ConfigError
from .network import HTTP_TIMEOUT, ZERO_EX_API_URL

__all__ = ["Settings"]


@dataclass(frozen=True)
class Settings:
    private_key: str = field(repr=False)
    zero_ex_api_key: str = field(repr=False)
    rpc_url: str
    zero_ex_api_url: str = ZERO_EX_API_URL
    http_timeout: float = HTTP_TIMEOUT
    log_dir: str = "logs"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from *env* (defaults to ``os.environ``).

        Raises:
            ConfigError: naming every required variable that is missing.
        """
        if env is None:
            env = os.environ

        private_key = (env.get("PRIVATE_KEY") or "").strip()
        api_key = (env.get("ZERO_EX_API_KEY") or "").strip()
        rpc_url = (env.get("ALCHEMY_HTTP_TRANSPORT_URL") or env.get("RPC_URL") or "").strip()

        missing = []
        if not private_key:
            missing.append("PRIVATE_KEY")
        if not api_key:
            missing.append("ZERO_EX_API_KEY")
        if not rpc_url:
            missing.append("ALCHEMY_HTTP_TRANSPORT_URL")
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        if not private_key.startswith("0x"):
            private_key = "0x" + private_key

        timeout_raw = env.get("ZERO_EX_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else float(HTTP_TIMEOUT)
        except ValueError:
            raise ConfigError(f"ZERO_EX_TIMEOUT must be a number, got {timeout_raw!r}") from None

        return cls(
            private_key=private_key,
            zero_ex_api_key=api_key,
            rpc_url=rpc_url,
            zero_ex_api_url=(env.get("ZERO_EX_API_URL") or ZERO_EX_API_URL).rstrip("/"),
            http_timeout=timeout,
            log_dir=env.get("LOG_DIR") or "logs",
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )
