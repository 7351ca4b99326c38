import copy
import sys
from pathlib import Path
from typing import Any, Dict
from unittest.mock import MagicMock

import pytest
from eth_account import Account
from hexbytes import HexBytes

# Ensure "src" is on sys.path when running without an editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from scroll_swap.config.network import CHAINS
from scroll_swap.helpers.web3_setup import SigningClient
from scroll_swap.helpers.zerox_models import PriceResponse, QuoteResponse, SourcesResponse

# Well-known local dev key (anvil / hardhat account #0).
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

WETH = "0x5300000000000000000000000000000000000004"
WSTETH = "0xf610A9dfB7C89644979b4A0f27063E9e7d7Cda32"
PERMIT2 = "0x000000000022d473030f116ddee9f6b43ac78ba3"
SETTLER = "0x0000000000001ff3684f28c67538d4d072c22734"

BROADCAST_HASH = HexBytes("0x" + "ab" * 32)
SWAP_CALLDATA = "0x1fff991f" + "00" * 64

PERMIT_TYPED_DATA: Dict[str, Any] = {
    "types": {
        "EIP712Domain": [
            {"name": "name", "type": "string"},
            {"name": "chainId", "type": "uint256"},
            {"name": "verifyingContract", "type": "address"},
        ],
        "PermitTransferFrom": [
            {"name": "permitted", "type": "TokenPermissions"},
            {"name": "spender", "type": "address"},
            {"name": "nonce", "type": "uint256"},
            {"name": "deadline", "type": "uint256"},
        ],
        "TokenPermissions": [
            {"name": "token", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
    },
    "domain": {
        "name": "Permit2",
        "chainId": 534352,
        "verifyingContract": PERMIT2,
    },
    "message": {
        "permitted": {"token": WETH, "amount": "100000000000000000"},
        "spender": SETTLER,
        "nonce": "2241959297937691820908574931991575",
        "deadline": "1718669420",
    },
    "primaryType": "PermitTransferFrom",
}


def make_price_body(allowance: Any = None, **overrides: Any) -> Dict[str, Any]:
    body = {
        "liquidityAvailable": True,
        "blockNumber": "7000000",
        "buyAmount": "84317716863148090",
        "buyToken": WSTETH,
        "sellAmount": "100000000000000000",
        "sellToken": WETH,
        "minBuyAmount": "83474539694516609",
        "issues": {
            "allowance": allowance,
            "balance": None,
            "simulationIncomplete": False,
            "invalidSourcesPassed": [],
        },
        "route": {
            "fills": [
                {"from": WETH, "to": WSTETH, "source": "Uniswap_V3", "proportionBps": "6000"},
                {"from": WETH, "to": WSTETH, "source": "Ambient", "proportionBps": "4000"},
            ],
            "tokens": [],
        },
        "tokenMetadata": {
            "buyToken": {"buyTaxBps": "0", "sellTaxBps": "0"},
            "sellToken": {"buyTaxBps": "0", "sellTaxBps": "0"},
        },
    }
    body.update(overrides)
    return body


def make_quote_body(with_permit: bool = True, **overrides: Any) -> Dict[str, Any]:
    body = make_price_body()
    body.update(
        {
            "transaction": {
                "to": SETTLER,
                "data": SWAP_CALLDATA,
                "gas": "300000",
                "gasPrice": "50000000",
                "value": "0",
            },
            "permit2": {
                "type": "Permit2",
                "hash": "0x" + "cd" * 32,
                "eip712": copy.deepcopy(PERMIT_TYPED_DATA),
            } if with_permit else None,
            "affiliateFeeBps": "100",
            "tradeSurplus": "0",
        }
    )
    body.update(overrides)
    return body


@pytest.fixture
def w3() -> MagicMock:
    w3 = MagicMock()
    w3.eth.get_transaction_count.return_value = 7
    w3.eth.send_raw_transaction.return_value = BROADCAST_HASH

    token = w3.eth.contract.return_value
    token.functions.decimals.return_value.call.return_value = 18
    token.functions.symbol.return_value.call.return_value = "TKN"
    token.functions.approve.return_value.call.return_value = True
    token.functions.approve.return_value.build_transaction.side_effect = lambda params: {
        "to": WETH,
        "data": "0x095ea7b3" + "00" * 64,
        "value": 0,
        "gas": 60000,
        "gasPrice": 50000000,
        **params,
    }
    return w3


@pytest.fixture
def signing_client(w3: MagicMock) -> SigningClient:
    return SigningClient(w3=w3, account=Account.from_key(TEST_PRIVATE_KEY), chain=CHAINS["scroll"])


@pytest.fixture
def api() -> MagicMock:
    api = MagicMock()
    api.get_sources.return_value = SourcesResponse(names=["Uniswap_V3", "Ambient", "SyncSwap"])
    api.get_price.return_value = PriceResponse.from_dict(make_price_body())
    api.get_quote.return_value = QuoteResponse.from_dict(make_quote_body())
    return api
