"""
Console reports for a swap run.

Each ``format_*`` returns the lines to show (empty when there is nothing to
report) and each ``display_*`` prints them, so callers and tests can use
either.
"""

from __future__ import annotations

from decimal import Decimal

from .zerox_models import QuoteResponse, Route, TokenMetadata, TokenTax

__all__ = [
    "bps_to_percent",
    "format_sources",
    "format_liquidity_sources",
    "format_token_taxes",
    "format_monetization",
    "display_sources",
    "display_liquidity_sources",
    "display_token_taxes",
    "display_monetization",
    "display_quote_breakdown",
]


def bps_to_percent(bps: int) -> str:
    """Basis points as a percentage string with two decimals (150 -> '1.50')."""
    return f"{Decimal(bps) / Decimal(100):.2f}"


def _print_lines(lines: list[str]) -> list[str]:
    for line in lines:
        print(line)
    return lines


# --------------------------------------------------------------------------- #
# Available sources                                                           #
# --------------------------------------------------------------------------- #

def format_sources(names: list[str], chain_name: str = "Scroll") -> list[str]:
    return [f"Available liquidity sources on {chain_name}:", ", ".join(names)]


def display_sources(names: list[str], chain_name: str = "Scroll") -> list[str]:
    return _print_lines(format_sources(names, chain_name))


# --------------------------------------------------------------------------- #
# Quote breakdowns                                                            #
# --------------------------------------------------------------------------- #

def format_liquidity_sources(route: Route) -> list[str]:
    fills = route.fills
    lines = [f"{len(fills)} liquidity sources:"]
    for fill in fills:
        lines.append(f"{fill.source}: {bps_to_percent(fill.proportion_bps)}%")
    return lines


def _format_tax_line(label: str, tax: TokenTax) -> list[str]:
    # compare raw bps; formatted strings like "0.00" must not decide the gate
    if not tax.is_taxed:
        return []
    return [
        f"{label} Token Taxes -> Buy: {bps_to_percent(tax.buy_tax_bps)}%, "
        f"Sell: {bps_to_percent(tax.sell_tax_bps)}%"
    ]


def format_token_taxes(metadata: TokenMetadata) -> list[str]:
    return _format_tax_line("Buy", metadata.buy_token) + _format_tax_line("Sell", metadata.sell_token)


def format_monetization(affiliate_fee_bps: int | None, trade_surplus: str | None) -> list[str]:
    lines = []
    if affiliate_fee_bps is not None:
        lines.append(f"Affiliate Fee: {bps_to_percent(affiliate_fee_bps)}%")
    if trade_surplus is not None:
        try:
            surplus = Decimal(trade_surplus)
        except ArithmeticError:
            surplus = Decimal(0)
        if surplus > 0:
            lines.append(f"Trade Surplus Collected: {trade_surplus}")
    return lines


def display_liquidity_sources(route: Route) -> list[str]:
    return _print_lines(format_liquidity_sources(route))


def display_token_taxes(metadata: TokenMetadata) -> list[str]:
    return _print_lines(format_token_taxes(metadata))


def display_monetization(affiliate_fee_bps: int | None, trade_surplus: str | None) -> list[str]:
    return _print_lines(format_monetization(affiliate_fee_bps, trade_surplus))


def display_quote_breakdown(quote: QuoteResponse) -> list[str]:
    """Print every breakdown the quote has data for; absent sections are skipped."""
    lines = []
    if quote.route is not None:
        lines += display_liquidity_sources(quote.route)
    if quote.token_metadata is not None:
        lines += display_token_taxes(quote.token_metadata)
    lines += display_monetization(quote.affiliate_fee_bps, quote.trade_surplus)
    return lines
