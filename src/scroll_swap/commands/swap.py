"""
swap.py
=======
Swap a token pair on Scroll through the 0x Swap API (Permit2 flow).

The run is one linear pass:

1. list the liquidity sources available on the chain
2. fetch an indicative price (with affiliate fee / surplus collection)
3. approve Permit2 for the sell token if the price reports an allowance issue
4. fetch a firm quote and print the route, token tax and fee breakdowns
5. sign the quote's Permit2 EIP-712 payload and append it to the calldata
6. sign and broadcast the swap transaction

Failure policy
--------------
ApprovalError and SigningError are logged and the run continues; a missing
signature then stops the run at calldata assembly (AssemblyError). Config,
upstream API, assembly and submission errors end the run with exit code 1.

A quote without a Permit2 payload is never submitted: this tool only
executes the permit-signed swap path.

Usage
-----
    PRIVATE_KEY=… ZERO_EX_API_KEY=… ALCHEMY_HTTP_TRANSPORT_URL=… \
    python -m scroll_swap.commands.swap [--amount 0.1] [--sell-token weth] \
        [--buy-token wsteth] [--affiliate-fee-bps 100] [--no-surplus-collection] [--dry-run]
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

from ..config.abis import ERC20_ABI
from ..config.logging_config import get_swap_logger
from ..config.settings import Settings
from ..config.tokens import DEFAULT_SWAP_CONFIG, get_token_info, to_base_units
from ..errors import ApprovalError, ConfigError, SigningError, SwapError
from ..helpers.allowance import ensure_allowance
from ..helpers.permit2 import append_signature, sign_permit
from ..helpers.reporting import display_quote_breakdown, display_sources
from ..helpers.tx_sender import send_swap_transaction
from ..helpers.web3_setup import SigningClient, make_signing_client
from ..helpers.zerox_api import SwapParams, ZeroExClient
from ..helpers.zerox_models import PriceResponse, QuoteResponse

logger = logging.getLogger(__name__)


@dataclass
class SwapOutcome:
    """What a run produced; hashes are None when that step did not send."""

    price: PriceResponse
    quote: QuoteResponse
    approval_hash: str | None = None
    signature: bytes | None = None
    swap_hash: str | None = None


# --------------------------------------------------------------------------- #
# helpers                                                                     #
# --------------------------------------------------------------------------- #


def resolve_token(client: SigningClient, token: str) -> tuple[str, str]:
    """Return (address, symbol) for a config key, symbol or raw address."""
    try:
        info = get_token_info(token)
    except ValueError as exc:
        raise ConfigError(str(exc)) from None
    symbol = info.get("symbol")
    if not symbol:
        symbol = client.contract(info["address"], ERC20_ABI).functions.symbol().call()
    return info["address"], symbol


def read_decimals(client: SigningClient, token_address: str) -> int:
    return int(client.contract(token_address, ERC20_ABI).functions.decimals().call())


def list_liquidity_sources(client: SigningClient, api: ZeroExClient) -> list[str]:
    sources = api.get_sources(client.chain_id)
    display_sources(sources.names, client.chain["name"])
    return sources.names


# --------------------------------------------------------------------------- #
# workflow                                                                    #
# --------------------------------------------------------------------------- #


def run_swap(
    client: SigningClient,
    api: ZeroExClient,
    *,
    sell_token: str = DEFAULT_SWAP_CONFIG["sell_token"],
    buy_token: str = DEFAULT_SWAP_CONFIG["buy_token"],
    amount: Decimal = DEFAULT_SWAP_CONFIG["sell_amount"],
    affiliate_fee_bps: int = DEFAULT_SWAP_CONFIG["affiliate_fee_bps"],
    surplus_collection: bool = DEFAULT_SWAP_CONFIG["surplus_collection"],
    dry_run: bool = False,
) -> SwapOutcome:
    """Run sources -> price -> approval -> quote -> permit -> submit once."""
    list_liquidity_sources(client, api)

    sell_address, sell_symbol = resolve_token(client, sell_token)
    buy_address, buy_symbol = resolve_token(client, buy_token)
    decimals = read_decimals(client, sell_address)
    sell_amount = to_base_units(amount, decimals)

    params = SwapParams(
        chain_id=client.chain_id,
        sell_token=sell_address,
        buy_token=buy_address,
        sell_amount=sell_amount,
        taker=client.address,
        affiliate_fee_bps=affiliate_fee_bps,
        surplus_collection=surplus_collection,
    )

    # --- price ---------------------------------------------------------------
    price = api.get_price(params)
    print(f"Price to swap {amount} {sell_symbol} for {buy_symbol}: buyAmount={price.buy_amount}")
    if price.issues.balance:
        logger.warning("Insufficient %s balance reported: %s", sell_symbol, price.issues.balance)
    if price.issues.simulation_incomplete:
        logger.warning("0x could not fully simulate this swap")

    # --- allowance (recoverable) ---------------------------------------------
    approval_hash = None
    try:
        approval_hash = ensure_allowance(client, sell_address, price.issues.allowance, send=not dry_run)
    except ApprovalError as exc:
        logger.error("Error approving Permit2: %s", exc, exc_info=exc)

    # --- quote ---------------------------------------------------------------
    quote = api.get_quote(params)
    print(
        f"Quote for swapping {amount} {sell_symbol} for {buy_symbol}: "
        f"buyAmount={quote.buy_amount}, minBuyAmount={quote.min_buy_amount}"
    )
    display_quote_breakdown(quote)

    outcome = SwapOutcome(price=price, quote=quote, approval_hash=approval_hash)

    # --- permit2 signature (recoverable, assembly is not) ---------------------
    typed_data = quote.permit_typed_data
    if typed_data is not None:
        try:
            outcome.signature = sign_permit(client, typed_data)
            print("Permit2 signed successfully.")
        except SigningError as exc:
            logger.error("Error signing Permit2 message: %s", exc, exc_info=exc)

        data = quote.transaction.data if quote.transaction is not None else ""
        assembled = append_signature(data, outcome.signature)
        quote.transaction.data = assembled

    # --- submit --------------------------------------------------------------
    if not (outcome.signature and quote.transaction is not None and quote.transaction.data):
        print("Transaction not sent, signature or data missing.")
        return outcome

    if dry_run:
        print(f"Dry run: swap to {quote.transaction.to} not sent ({len(quote.transaction.data) // 2 - 1} bytes calldata).")
        return outcome

    outcome.swap_hash = send_swap_transaction(client, quote.transaction)
    return outcome


# --------------------------------------------------------------------------- #
# CLI                                                                         #
# --------------------------------------------------------------------------- #


def _decimal(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from None
    if amount <= 0:
        raise argparse.ArgumentTypeError("amount must be positive")
    return amount


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Swap tokens on Scroll via the 0x Swap API (Permit2).")
    p.add_argument("--sell-token", default=DEFAULT_SWAP_CONFIG["sell_token"],
                   help="Token key, symbol or address to sell (default: weth)")
    p.add_argument("--buy-token", default=DEFAULT_SWAP_CONFIG["buy_token"],
                   help="Token key, symbol or address to buy (default: wsteth)")
    p.add_argument("--amount", type=_decimal, default=DEFAULT_SWAP_CONFIG["sell_amount"],
                   help="Human-readable sell amount (default: 0.1)")
    p.add_argument("--affiliate-fee-bps", type=int, default=DEFAULT_SWAP_CONFIG["affiliate_fee_bps"],
                   help="Affiliate fee in basis points (default: 100 = 1%%)")
    p.add_argument("--no-surplus-collection", action="store_true",
                   help="Do not ask 0x to collect trade surplus")
    p.add_argument("--dry-run", action="store_true",
                   help="Sign everything but broadcast nothing")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = parse_args(argv)

    try:
        settings = Settings.from_env()
    except SwapError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    get_swap_logger(settings.log_dir, settings.log_level, debug=args.debug)

    try:
        client = make_signing_client(settings)
        api = ZeroExClient.from_settings(settings)
        run_swap(
            client,
            api,
            sell_token=args.sell_token,
            buy_token=args.buy_token,
            amount=args.amount,
            affiliate_fee_bps=args.affiliate_fee_bps,
            surplus_collection=not args.no_surplus_collection,
            dry_run=args.dry_run,
        )
    except SwapError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
