from decimal import Decimal

import pytest
from eth_account import Account
from eth_utils import to_bytes

from scroll_swap.commands import swap
from scroll_swap.commands.swap import run_swap
from scroll_swap.errors import AssemblyError, ConfigError, SubmissionError, UpstreamAPIError
from scroll_swap.helpers.zerox_models import PriceResponse, QuoteResponse

from conftest import SETTLER, SWAP_CALLDATA, TEST_ADDRESS, WETH, WSTETH, make_price_body, make_quote_body


def _broadcasts(w3) -> int:
    return w3.eth.send_raw_transaction.call_count


def test_full_run_signs_permit_and_broadcasts_swap(signing_client, w3, api, capsys) -> None:
    outcome = run_swap(signing_client, api)

    out = capsys.readouterr().out
    assert "Available liquidity sources on Scroll:" in out
    assert "Uniswap_V3, Ambient, SyncSwap" in out
    assert "Permit2 already has the required approval." in out
    assert "2 liquidity sources:" in out
    assert "Uniswap_V3: 60.00%" in out
    assert "Affiliate Fee: 1.00%" in out
    assert "Permit2 signed successfully." in out
    assert f"View transaction at https://scrollscan.com/tx/0x{'ab' * 32}" in out

    assert outcome.swap_hash == "0x" + "ab" * 32
    assert _broadcasts(w3) == 1

    raw = to_bytes(hexstr=outcome.quote.transaction.data)
    original = to_bytes(hexstr=SWAP_CALLDATA)
    assert len(raw) == len(original) + 32 + 65
    assert raw[-65:] == outcome.signature


def test_price_and_quote_share_parameters(signing_client, api) -> None:
    run_swap(signing_client, api, amount=Decimal("0.25"), affiliate_fee_bps=50, surplus_collection=False)

    price_params = api.get_price.call_args.args[0]
    assert api.get_quote.call_args.args[0] == price_params
    assert price_params.chain_id == 534352
    assert price_params.sell_token == WETH
    assert price_params.buy_token == WSTETH
    assert price_params.sell_amount == 25 * 10**16
    assert price_params.taker == TEST_ADDRESS
    assert price_params.affiliate_fee_bps == 50
    assert price_params.surplus_collection is False


def test_broadcast_tx_carries_quote_fields(signing_client, w3, api) -> None:
    run_swap(signing_client, api)

    raw_tx = w3.eth.send_raw_transaction.call_args.args[0]
    assert Account.recover_transaction(raw_tx) == TEST_ADDRESS


def test_swap_tx_optional_fields(signing_client) -> None:
    from scroll_swap.helpers.tx_sender import build_swap_tx

    quote = QuoteResponse.from_dict(make_quote_body())
    tx = build_swap_tx(signing_client, quote.transaction, nonce=3)
    assert tx["gas"] == 300000
    assert tx["gasPrice"] == 50000000
    assert tx["value"] == 0
    assert tx["nonce"] == 3
    assert tx["chainId"] == 534352
    assert tx["to"].lower() == SETTLER

    bare = QuoteResponse.from_dict(
        make_quote_body(transaction={"to": SETTLER, "data": SWAP_CALLDATA})
    ).transaction
    tx = build_swap_tx(signing_client, bare, nonce=3)
    assert "gas" not in tx and "gasPrice" not in tx and "value" not in tx


def test_failed_approval_still_fetches_quote(signing_client, w3, api, caplog) -> None:
    api.get_price.return_value = PriceResponse.from_dict(make_price_body(allowance={"spender": "0xABC"}))
    w3.eth.contract.return_value.functions.approve.return_value.call.side_effect = Exception("reverted")

    outcome = run_swap(signing_client, api)

    api.get_quote.assert_called_once()
    assert outcome.approval_hash is None
    assert "Error approving Permit2" in caplog.text
    # only the swap itself went out
    assert _broadcasts(w3) == 1


def test_successful_approval_is_sent_before_quote(signing_client, w3, api, monkeypatch) -> None:
    api.get_price.return_value = PriceResponse.from_dict(make_price_body(allowance={"spender": SETTLER}))
    # the node's pending count moves on once the approval is in the mempool
    w3.eth.get_transaction_count.side_effect = [7, 8]
    signed = []
    sign = signing_client.sign_transaction

    def _record(tx):
        signed.append(tx)
        return sign(tx)

    monkeypatch.setattr(signing_client, "sign_transaction", _record)

    outcome = run_swap(signing_client, api)

    assert outcome.approval_hash == "0x" + "ab" * 32
    assert _broadcasts(w3) == 2
    for call in w3.eth.get_transaction_count.call_args_list:
        assert call.args == (TEST_ADDRESS, "pending")
    approval_tx, swap_tx = signed
    assert approval_tx["to"] == WETH
    assert swap_tx["to"].lower() == SETTLER
    assert (approval_tx["nonce"], swap_tx["nonce"]) == (7, 8)


def test_signing_failure_blocks_submission(signing_client, w3, api, monkeypatch, caplog) -> None:
    def _fail(_typed):
        raise RuntimeError("key unavailable")

    monkeypatch.setattr(signing_client, "sign_typed_data", _fail)

    with pytest.raises(AssemblyError):
        run_swap(signing_client, api)

    assert "Error signing Permit2 message" in caplog.text
    assert _broadcasts(w3) == 0


def test_quote_without_permit_is_never_submitted(signing_client, w3, api, capsys) -> None:
    api.get_quote.return_value = QuoteResponse.from_dict(make_quote_body(with_permit=False))

    outcome = run_swap(signing_client, api)

    assert outcome.signature is None
    assert outcome.swap_hash is None
    assert _broadcasts(w3) == 0
    assert "Transaction not sent, signature or data missing." in capsys.readouterr().out


def test_permit_without_transaction_data_is_fatal(signing_client, w3, api) -> None:
    api.get_quote.return_value = QuoteResponse.from_dict(
        make_quote_body(transaction={"to": SETTLER, "data": ""})
    )

    with pytest.raises(AssemblyError):
        run_swap(signing_client, api)
    assert _broadcasts(w3) == 0


def test_upstream_error_stops_before_quote(signing_client, api) -> None:
    api.get_price.side_effect = UpstreamAPIError("bad gateway", endpoint="/swap/permit2/price", status_code=502)

    with pytest.raises(UpstreamAPIError):
        run_swap(signing_client, api)
    api.get_quote.assert_not_called()


def test_broadcast_failure_is_submission_error(signing_client, w3, api) -> None:
    w3.eth.send_raw_transaction.side_effect = ValueError("insufficient funds for gas")

    with pytest.raises(SubmissionError, match="insufficient funds"):
        run_swap(signing_client, api)


def test_dry_run_sends_nothing(signing_client, w3, api, capsys) -> None:
    api.get_price.return_value = PriceResponse.from_dict(make_price_body(allowance={"spender": SETTLER}))

    outcome = run_swap(signing_client, api, dry_run=True)

    assert outcome.signature is not None
    assert outcome.swap_hash is None
    assert _broadcasts(w3) == 0
    assert "Dry run: swap to" in capsys.readouterr().out


def test_unknown_token_is_config_error(signing_client, api) -> None:
    with pytest.raises(ConfigError):
        run_swap(signing_client, api, sell_token="DOGE")


def test_main_exits_when_env_missing(monkeypatch, capsys) -> None:
    for name in ("PRIVATE_KEY", "ZERO_EX_API_KEY", "ALCHEMY_HTTP_TRANSPORT_URL", "RPC_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(swap, "load_dotenv", lambda: None)

    with pytest.raises(SystemExit) as exit_info:
        swap.main([])

    assert exit_info.value.code == 1
    assert "Missing required environment variables" in capsys.readouterr().err
