"""
Sign and broadcast the 0x swap transaction.

Fields ``gas``, ``gasPrice`` and ``value`` are only set when the quote
provides them. No receipt wait and no retry: any failure is a
SubmissionError.
"""

from __future__ import annotations

import logging
from typing import Any

from web3 import Web3

from ..config.network import get_tx_url
from ..errors import SubmissionError
from .web3_setup import SigningClient
from .zerox_models import SwapTransaction

__all__ = ["build_swap_tx", "send_swap_transaction"]

logger = logging.getLogger(__name__)


def build_swap_tx(client: SigningClient, transaction: SwapTransaction, nonce: int) -> dict[str, Any]:
    """Transaction dict ready for ``Account.sign_transaction``."""
    tx: dict[str, Any] = {
        "to": Web3.to_checksum_address(transaction.to),
        "data": transaction.data,
        "nonce": nonce,
        "chainId": client.chain_id,
    }
    if transaction.gas is not None:
        tx["gas"] = transaction.gas
    if transaction.gas_price is not None:
        tx["gasPrice"] = transaction.gas_price
    if transaction.value is not None:
        tx["value"] = transaction.value
    return tx


def send_swap_transaction(client: SigningClient, transaction: SwapTransaction) -> str:
    """
    Sign *transaction* with a fresh nonce and broadcast it.

    Parameters
    ----------
    client : SigningClient
        Sender.
    transaction : SwapTransaction
        Quote transaction, calldata already carrying the permit signature.

    Returns
    -------
    str
        The transaction hash as a hex string.
    """
    try:
        nonce = client.get_transaction_count()
        tx = build_swap_tx(client, transaction, nonce)
        logger.debug("Swap tx: %s", tx)
        raw_tx = client.sign_transaction(tx)
        tx_hash = client.send_raw_transaction(raw_tx)
    except Exception as exc:
        raise SubmissionError(f"Swap transaction failed: {exc}") from exc

    print("Transaction sent, hash:", tx_hash)
    print(f"View transaction at {get_tx_url(tx_hash, client.chain_id)}")
    return tx_hash
