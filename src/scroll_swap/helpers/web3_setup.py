"""
Web3 setup helper - the signing client used by every on-chain step.

Public API
----------
SigningClient
    Web3 connection + local account + chain descriptor. Reads contracts,
    signs EIP-712 payloads and transactions, broadcasts raw transactions.
make_signing_client(settings, chain=None)
    Build a SigningClient from Settings.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from web3 import Web3

from ..config.network import get_chain_config
from ..config.settings import Settings
from ..errors import ConfigError

__all__ = ["SigningClient", "make_signing_client"]

logger = logging.getLogger(__name__)


@dataclass
class SigningClient:
    """Everything a run needs to talk to the chain as one account.

    Built once at process entry and passed to each step; nothing here is
    mutated after construction.
    """

    w3: Web3
    account: LocalAccount
    chain: dict[str, Any]

    @property
    def address(self) -> ChecksumAddress:
        return self.account.address

    @property
    def chain_id(self) -> int:
        return self.chain["chain_id"]

    def contract(self, address: str, abi: list[dict]):
        """Return a contract handle bound to this client's connection."""
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def get_transaction_count(self) -> int:
        # "pending" counts our own unmined approval
        return self.w3.eth.get_transaction_count(self.address, "pending")

    def sign_typed_data(self, typed_data: dict[str, Any]) -> HexBytes:
        """Sign a full EIP-712 message (types, domain, primaryType, message)."""
        encoded = encode_typed_data(full_message=typed_data)
        signed = self.account.sign_message(encoded)
        return HexBytes(signed.signature)

    def sign_transaction(self, tx: dict[str, Any]) -> HexBytes:
        signed_tx = self.account.sign_transaction(tx)
        return HexBytes(signed_tx.raw_transaction)

    def send_raw_transaction(self, raw_tx: bytes) -> str:
        """Broadcast signed bytes and return the transaction hash as 0x-hex."""
        tx_hash = self.w3.eth.send_raw_transaction(raw_tx)
        return Web3.to_hex(tx_hash)


def make_signing_client(settings: Settings, chain: str | int | None = None) -> SigningClient:
    """
    Connect to ``settings.rpc_url`` and derive the account from the private key.

    Args:
        settings: Loaded runtime settings.
        chain: Chain name or id; defaults to Scroll.

    Returns:
        SigningClient
    """
    chain_config = get_chain_config(chain)
    w3 = Web3(Web3.HTTPProvider(settings.rpc_url))
    try:
        account = Account.from_key(settings.private_key)
    except (ValueError, TypeError) as exc:
        raise ConfigError(f"PRIVATE_KEY is not a valid private key: {exc}") from None
    logger.debug("Signing client ready for %s on %s", account.address, chain_config["name"])
    return SigningClient(w3=w3, account=account, chain=chain_config)
