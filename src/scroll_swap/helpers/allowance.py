"""
Permit2 allowance handling.

The price endpoint reports ``issues.allowance`` when the Permit2 contract
cannot yet spend the sell token. In that case an unlimited ERC-20
``approve(spender, 2**256 - 1)`` is simulated with ``eth_call`` and, if it
would succeed, signed locally and broadcast. No receipt wait.
"""

from __future__ import annotations

import logging

from web3 import Web3

from ..config.abis import ERC20_ABI
from ..config.tokens import MAX_UINT256
from ..errors import ApprovalError
from .web3_setup import SigningClient
from .zerox_models import AllowanceIssue

__all__ = ["approve_spender", "ensure_allowance"]

logger = logging.getLogger(__name__)


def approve_spender(
    client: SigningClient,
    token_address: str,
    spender: str,
    amount: int = MAX_UINT256,
    *,
    send: bool = True,
) -> str | None:
    """
    Simulate then send ``token.approve(spender, amount)``.

    Parameters
    ----------
    client : SigningClient
        Owner of the tokens.
    token_address : str
        ERC-20 being approved.
    spender : str
        Address allowed to pull the token (the Permit2 contract).
    amount : int, optional
        Defaults to the maximum uint256.
    send : bool, optional
        When False only the simulation runs and None is returned.

    Returns
    -------
    str | None
        Approval transaction hash, or None when *send* is False.

    Raises
    ------
    ApprovalError
        If the simulation reverts or the transaction cannot be built,
        signed or broadcast.
    """
    try:
        token = client.contract(token_address, ERC20_ABI)
        spender = Web3.to_checksum_address(spender)
        fn = token.functions.approve(spender, amount)

        # eth_call first so a revert never costs gas
        fn.call({"from": client.address})
        if not send:
            return None

        print("Approving Permit2...")
        tx = fn.build_transaction(
            {
                "from": client.address,
                "nonce": client.get_transaction_count(),
                "chainId": client.chain_id,
            }
        )
        raw_tx = client.sign_transaction(tx)
        return client.send_raw_transaction(raw_tx)
    except ApprovalError:
        raise
    except Exception as exc:
        raise ApprovalError(f"approve({spender}) on {token_address} failed: {exc}") from exc


def ensure_allowance(
    client: SigningClient,
    token_address: str,
    issue: AllowanceIssue | None,
    *,
    send: bool = True,
) -> str | None:
    """Approve the spender named in *issue*; no-op when *issue* is None.

    Returns the approval hash when one was sent. ApprovalError propagates;
    the caller decides whether that is fatal.
    """
    if issue is None:
        print("Permit2 already has the required approval.")
        return None

    logger.info("Allowance required for spender %s (current: %s)", issue.spender, issue.actual)
    tx_hash = approve_spender(client, token_address, issue.spender, send=send)
    if tx_hash is None:
        print(f"Dry run: approval for {issue.spender} simulated, not sent.")
    else:
        print(f"Permit2 approved, transaction hash: {tx_hash}")
    return tx_hash
