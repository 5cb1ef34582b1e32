from __future__ import annotations

import json

import pytest

from tools.pool_quote import main, run


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PAIRSWAP_FEE_POINTS", raising=False)
    monkeypatch.delenv("PAIRSWAP_LOG_EFFECTS", raising=False)


def test_create_reports_initial_mint() -> None:
    code, payload = run(["--amount-a", "1000", "--amount-b", "5000", "create"])
    assert code == 0
    assert payload["result"] == {"lp_minted": 2236}
    assert payload["balances"] == {"reserve_low": 1000, "reserve_high": 5000, "lp_supply": 2236}
    assert [e["event"] for e in payload["effects"]] == ["PoolCreated"]


def test_swap_worked_example() -> None:
    code, payload = run(["--amount-a", "1000", "--amount-b", "5000", "swap", "--amount-in", "100"])
    assert code == 0
    assert payload["result"] == {"amount_out": 450}
    assert payload["balances"]["reserve_low"] == 1100
    assert payload["effects"][-1]["direction"] == "low_to_high"


def test_add_and_remove() -> None:
    code, payload = run(["--amount-a", "1000", "--amount-b", "5000", "add", "--low", "100", "--high", "200"])
    assert code == 0
    assert payload["result"] == {"low_returned": 60, "high_returned": 0, "lp_minted": 89}

    code, payload = run(["--amount-a", "1000", "--amount-b", "5000", "remove", "--lp", "2236"])
    assert code == 0
    assert payload["result"] == {"low_out": 1000, "high_out": 5000}
    assert payload["balances"]["lp_supply"] == 0


def test_reversed_assets_keep_amounts_with_their_asset() -> None:
    code, payload = run(["--asset-a", "USDC", "--asset-b", "ETH", "--amount-a", "5000", "--amount-b", "1000", "create"])
    assert code == 0
    assert payload["pair"] == {"low": "ETH", "high": "USDC"}
    assert payload["balances"]["reserve_low"] == 1000


def test_amm_error_exits_one_with_code(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--amount-a", "1000", "--amount-b", "5000", "swap", "--amount-in", "100", "--min-out", "451"])
    assert rc == 1
    out = json.loads(capsys.readouterr().out)
    assert out["error"] == "excessive_slippage"


def test_fee_override_and_bad_config(monkeypatch: pytest.MonkeyPatch) -> None:
    code, payload = run(["--amount-a", "1000", "--amount-b", "5000", "--fee-points", "0", "swap", "--amount-in", "100"])
    assert code == 0
    assert payload["result"] == {"amount_out": 454}

    monkeypatch.setenv("PAIRSWAP_FEE_POINTS", "abc")
    code, payload = run(["--amount-a", "1000", "--amount-b", "5000", "create"])
    assert code == 2
    assert payload["error"] == "config"


def test_missing_pool_after_create_is_reported_as_error(monkeypatch: pytest.MonkeyPatch) -> None:
    from pairswap.core.engine import AmmEngine

    monkeypatch.setattr(AmmEngine, "get_pool", lambda self, a, b: None)
    code, payload = run(["--amount-a", "1000", "--amount-b", "5000", "create"])
    assert code == 1
    assert payload["error"] == "pool_not_found"
