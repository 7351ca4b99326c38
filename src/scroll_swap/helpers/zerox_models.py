"""
Response schemas for the 0x Swap API endpoints used by a swap run.

Each ``from_dict`` validates the fields the workflow reads and raises
UpstreamAPIError naming the endpoint and the missing / malformed field, so a
changed API shape surfaces as a typed error instead of a KeyError deep inside
the workflow. Unknown extra fields are kept in ``raw``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..errors import UpstreamAPIError

__all__ = [
    "SourcesResponse",
    "Fill",
    "Route",
    "TokenTax",
    "TokenMetadata",
    "AllowanceIssue",
    "Issues",
    "Permit2Data",
    "SwapTransaction",
    "PriceResponse",
    "QuoteResponse",
]


# --------------------------------------------------------------------------- #
# Field helpers                                                               #
# --------------------------------------------------------------------------- #

def _expect_mapping(value: Any, name: str, endpoint: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise UpstreamAPIError(f"expected object for '{name}', got {type(value).__name__}", endpoint=endpoint)
    return value


def _require(data: Mapping[str, Any], key: str, endpoint: str, path: str = "") -> Any:
    if key not in data:
        raise UpstreamAPIError(f"missing field '{path}{key}'", endpoint=endpoint)
    return data[key]


def _to_int(value: Any, name: str, endpoint: str) -> int:
    """Integer from an int or a decimal string (the API sends amounts as strings)."""
    if isinstance(value, bool):
        raise UpstreamAPIError(f"field '{name}' is not an integer: {value!r}", endpoint=endpoint)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 10)
        except ValueError:
            pass
    raise UpstreamAPIError(f"field '{name}' is not an integer: {value!r}", endpoint=endpoint)


def _optional_int(value: Any, name: str, endpoint: str) -> int | None:
    if value is None or value == "":
        return None
    return _to_int(value, name, endpoint)


# --------------------------------------------------------------------------- #
# GET /swap/v1/sources                                                        #
# --------------------------------------------------------------------------- #

@dataclass
class SourcesResponse:
    names: list[str]

    @classmethod
    def from_dict(cls, data: Any, endpoint: str = "sources") -> "SourcesResponse":
        data = _expect_mapping(data, "<body>", endpoint)
        sources = _expect_mapping(_require(data, "sources", endpoint), "sources", endpoint)
        return cls(names=list(sources.keys()))


# --------------------------------------------------------------------------- #
# Shared price / quote pieces                                                 #
# --------------------------------------------------------------------------- #

@dataclass
class Fill:
    source: str
    proportion_bps: int
    from_token: str | None = None
    to_token: str | None = None

    @classmethod
    def from_dict(cls, data: Any, endpoint: str) -> "Fill":
        data = _expect_mapping(data, "route.fills[]", endpoint)
        return cls(
            source=str(_require(data, "source", endpoint, "route.fills[].")),
            proportion_bps=_to_int(
                _require(data, "proportionBps", endpoint, "route.fills[]."),
                "route.fills[].proportionBps",
                endpoint,
            ),
            from_token=data.get("from"),
            to_token=data.get("to"),
        )


@dataclass
class Route:
    fills: list[Fill]

    @classmethod
    def from_dict(cls, data: Any, endpoint: str) -> "Route":
        data = _expect_mapping(data, "route", endpoint)
        fills = _require(data, "fills", endpoint, "route.")
        if not isinstance(fills, list):
            raise UpstreamAPIError("field 'route.fills' is not a list", endpoint=endpoint)
        return cls(fills=[Fill.from_dict(item, endpoint) for item in fills])


@dataclass
class TokenTax:
    """Transfer tax of one token, in basis points. Missing values mean 0."""

    buy_tax_bps: int = 0
    sell_tax_bps: int = 0

    @classmethod
    def from_dict(cls, data: Any, name: str, endpoint: str) -> "TokenTax":
        if data is None:
            return cls()
        data = _expect_mapping(data, name, endpoint)
        return cls(
            buy_tax_bps=_optional_int(data.get("buyTaxBps"), f"{name}.buyTaxBps", endpoint) or 0,
            sell_tax_bps=_optional_int(data.get("sellTaxBps"), f"{name}.sellTaxBps", endpoint) or 0,
        )

    @property
    def is_taxed(self) -> bool:
        return self.buy_tax_bps > 0 or self.sell_tax_bps > 0


@dataclass
class TokenMetadata:
    buy_token: TokenTax
    sell_token: TokenTax

    @classmethod
    def from_dict(cls, data: Any, endpoint: str) -> "TokenMetadata":
        data = _expect_mapping(data, "tokenMetadata", endpoint)
        return cls(
            buy_token=TokenTax.from_dict(data.get("buyToken"), "tokenMetadata.buyToken", endpoint),
            sell_token=TokenTax.from_dict(data.get("sellToken"), "tokenMetadata.sellToken", endpoint),
        )


@dataclass
class AllowanceIssue:
    spender: str
    actual: int | None = None

    @classmethod
    def from_dict(cls, data: Any, endpoint: str) -> "AllowanceIssue":
        data = _expect_mapping(data, "issues.allowance", endpoint)
        return cls(
            spender=str(_require(data, "spender", endpoint, "issues.allowance.")),
            actual=_optional_int(data.get("actual"), "issues.allowance.actual", endpoint),
        )


@dataclass
class Issues:
    allowance: AllowanceIssue | None = None
    balance: dict[str, Any] | None = None
    simulation_incomplete: bool = False

    @classmethod
    def from_dict(cls, data: Any, endpoint: str) -> "Issues":
        data = _expect_mapping(data, "issues", endpoint)
        allowance = data.get("allowance")
        return cls(
            allowance=AllowanceIssue.from_dict(allowance, endpoint) if allowance is not None else None,
            balance=data.get("balance"),
            simulation_incomplete=bool(data.get("simulationIncomplete", False)),
        )


@dataclass
class Permit2Data:
    eip712: dict[str, Any] | None

    @classmethod
    def from_dict(cls, data: Any, endpoint: str) -> "Permit2Data":
        data = _expect_mapping(data, "permit2", endpoint)
        eip712 = data.get("eip712")
        if eip712 is not None:
            eip712 = dict(_expect_mapping(eip712, "permit2.eip712", endpoint))
            for key in ("types", "domain", "message", "primaryType"):
                _require(eip712, key, endpoint, "permit2.eip712.")
        return cls(eip712=eip712)


@dataclass
class SwapTransaction:
    """Executable swap call; ``data`` is replaced once the permit is appended."""

    to: str
    data: str
    value: int | None = None
    gas: int | None = None
    gas_price: int | None = None

    @classmethod
    def from_dict(cls, data: Any, endpoint: str) -> "SwapTransaction":
        data = _expect_mapping(data, "transaction", endpoint)
        return cls(
            to=str(_require(data, "to", endpoint, "transaction.")),
            data=str(data.get("data") or ""),
            value=_optional_int(data.get("value"), "transaction.value", endpoint),
            gas=_optional_int(data.get("gas"), "transaction.gas", endpoint),
            gas_price=_optional_int(data.get("gasPrice"), "transaction.gasPrice", endpoint),
        )


def _check_liquidity(data: Mapping[str, Any], endpoint: str) -> None:
    if data.get("liquidityAvailable") is False:
        raise UpstreamAPIError("no liquidity available for this pair and amount", endpoint=endpoint)


# --------------------------------------------------------------------------- #
# GET /swap/permit2/price                                                     #
# --------------------------------------------------------------------------- #

@dataclass
class PriceResponse:
    buy_amount: int
    sell_amount: int
    issues: Issues
    min_buy_amount: int | None = None
    route: Route | None = None
    token_metadata: TokenMetadata | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any, endpoint: str = "price") -> "PriceResponse":
        data = _expect_mapping(data, "<body>", endpoint)
        _check_liquidity(data, endpoint)
        route = data.get("route")
        metadata = data.get("tokenMetadata")
        return cls(
            buy_amount=_to_int(_require(data, "buyAmount", endpoint), "buyAmount", endpoint),
            sell_amount=_to_int(_require(data, "sellAmount", endpoint), "sellAmount", endpoint),
            issues=Issues.from_dict(_require(data, "issues", endpoint), endpoint),
            min_buy_amount=_optional_int(data.get("minBuyAmount"), "minBuyAmount", endpoint),
            route=Route.from_dict(route, endpoint) if route else None,
            token_metadata=TokenMetadata.from_dict(metadata, endpoint) if metadata else None,
            raw=dict(data),
        )


# --------------------------------------------------------------------------- #
# GET /swap/permit2/quote                                                     #
# --------------------------------------------------------------------------- #

@dataclass
class QuoteResponse(PriceResponse):
    transaction: SwapTransaction | None = None
    permit2: Permit2Data | None = None
    affiliate_fee_bps: int | None = None
    trade_surplus: str | None = None

    @classmethod
    def from_dict(cls, data: Any, endpoint: str = "quote") -> "QuoteResponse":
        price = PriceResponse.from_dict(data, endpoint)
        transaction = data.get("transaction")
        permit2 = data.get("permit2")
        surplus = data.get("tradeSurplus")
        return cls(
            buy_amount=price.buy_amount,
            sell_amount=price.sell_amount,
            issues=price.issues,
            min_buy_amount=price.min_buy_amount,
            route=price.route,
            token_metadata=price.token_metadata,
            raw=price.raw,
            transaction=SwapTransaction.from_dict(transaction, endpoint) if transaction else None,
            permit2=Permit2Data.from_dict(permit2, endpoint) if permit2 else None,
            affiliate_fee_bps=_optional_int(data.get("affiliateFeeBps"), "affiliateFeeBps", endpoint),
            trade_surplus=str(surplus) if surplus not in (None, "") else None,
        )

    @property
    def permit_typed_data(self) -> dict[str, Any] | None:
        if self.permit2 is None:
            return None
        return self.permit2.eip712
