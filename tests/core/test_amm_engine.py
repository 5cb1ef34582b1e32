# [TESTER] v1

from __future__ import annotations

import logging
import threading

import pytest

from pairswap import AmmConfig, AmmEngine, Event, PairKey
from pairswap.core import liquidity as liquidity_mod
from pairswap.core.effects import Direction, Effect
from pairswap.errors import (
    ArithmeticOverflow,
    ExcessiveSlippage,
    InvalidPair,
    InvariantViolation,
    PoolAlreadyExists,
    PoolNotFound,
    ZeroInput,
)
from pairswap.kernels.python.wide_math_v1 import U64_MAX
from pairswap.state.pools import Pool


def _engine(**cfg) -> tuple[AmmEngine, list[Effect]]:
    effects: list[Effect] = []
    return AmmEngine(AmmConfig(**cfg), effect_sink=effects.append), effects


def test_create_add_remove_swap_sequence() -> None:
    engine, effects = _engine()
    assert engine.create_pool("A", "B", 1000, 5000) == 2236
    pool = engine.get_pool("B", "A")
    assert pool is not None

    added = engine.add_liquidity(pool, 100, 200, 0)
    assert (added.low_returned, added.high_returned, added.lp_minted) == (60, 0, 89)
    assert engine.pool_balances(pool) == (1040, 5200, 2325)

    removed = engine.remove_liquidity(pool, 89, 0, 0)
    assert (removed.low_out, removed.high_out) == (39, 199)
    assert engine.pool_balances(pool) == (1001, 5001, 2236)

    assert [e.event for e in effects] == [Event.POOL_CREATED, Event.LIQUIDITY_ADDED, Event.LIQUIDITY_REMOVED]


def test_swap_emits_deltas_from_applied_state() -> None:
    engine, effects = _engine()
    engine.create_pool("A", "B", 1000, 5000)
    key = PairKey(low="A", high="B")

    assert engine.quote_exact_in(key, 100, True) == 450
    assert engine.swap_exact_low_for_high(key, 100, 450) == 450
    assert engine.pool_balances(key) == (1100, 4550, 2236)

    eff = effects[-1]
    assert eff.event is Event.SWAPPED
    assert eff.direction is Direction.LOW_TO_HIGH
    assert (eff.reserve_low_delta, eff.reserve_high_delta, eff.lp_supply_delta) == (100, -450, 0)
    assert (eff.amount_in, eff.amount_out) == (100, 450)
    assert eff.pool_id == key.pool_id


def test_swap_high_for_low() -> None:
    engine, effects = _engine()
    engine.create_pool("A", "B", 5000, 1000)
    key = PairKey(low="A", high="B")
    assert engine.swap_exact_high_for_low(key, 100, 0) == 450
    assert engine.pool_balances(key) == (4550, 1100, 2236)
    assert effects[-1].to_dict()["direction"] == "high_to_low"


def test_create_errors_leave_registry_untouched() -> None:
    engine, effects = _engine()
    with pytest.raises(ZeroInput):
        engine.create_pool("A", "B", 0, 10)
    with pytest.raises(InvalidPair):
        engine.create_pool("A", "A", 10, 10)
    assert len(engine.registry) == 0

    engine.create_pool("A", "B", 10, 10)
    with pytest.raises(PoolAlreadyExists):
        engine.create_pool("B", "A", 99, 99)
    assert engine.pool_balances(PairKey(low="A", high="B")) == (10, 10, 10)
    assert len(effects) == 1


def test_failed_operations_do_not_change_state_or_emit() -> None:
    engine, effects = _engine()
    engine.create_pool("A", "B", 1000, 5000)
    key = PairKey(low="A", high="B")
    n_effects = len(effects)

    with pytest.raises(ExcessiveSlippage):
        engine.swap_exact_low_for_high(key, 100, 451)
    with pytest.raises(ExcessiveSlippage):
        engine.add_liquidity(key, 100, 200, 90)
    with pytest.raises(ExcessiveSlippage):
        engine.remove_liquidity(key, 89, 40, 0)
    with pytest.raises(ZeroInput):
        engine.swap_exact_high_for_low(key, 0, 0)
    with pytest.raises(ZeroInput):
        engine.swap_exact_low_for_high(key, 0, 0)
    with pytest.raises(ZeroInput):
        engine.add_liquidity(key, 0, 200, 0)
    with pytest.raises(ZeroInput):
        engine.add_liquidity(key, 100, 0, 0)
    with pytest.raises(ZeroInput):
        engine.remove_liquidity(key, 0, 0, 0)

    assert engine.pool_balances(key) == (1000, 5000, 2236)
    assert len(effects) == n_effects


def test_overflowing_add_is_rejected_atomically() -> None:
    engine, _ = _engine()
    engine.create_pool("A", "B", U64_MAX, U64_MAX)
    key = PairKey(low="A", high="B")
    with pytest.raises(ArithmeticOverflow):
        engine.add_liquidity(key, 1, 1, 0)
    assert engine.pool_balances(key) == (U64_MAX, U64_MAX, U64_MAX)


def test_invariant_violation_blocks_commit(monkeypatch: pytest.MonkeyPatch) -> None:
    engine, effects = _engine()
    engine.create_pool("A", "B", 1000, 5000)
    key = PairKey(low="A", high="B")

    def broken_add(pool: Pool, *_args):
        bad = Pool(pair=pool.pair, reserve_low=0, reserve_high=pool.reserve_high, lp_supply=pool.lp_supply + 1, fee_points=pool.fee_points)
        return bad, liquidity_mod.AddLiquidityResult(low_returned=0, high_returned=0, lp_minted=1)

    monkeypatch.setattr(liquidity_mod, "add_liquidity", broken_add)
    with pytest.raises(InvariantViolation) as ei:
        engine.add_liquidity(key, 1, 1, 0)
    assert "inv_reserves_positive_when_supplied" in ei.value.violations
    assert engine.pool_balances(key) == (1000, 5000, 2236)
    assert len(effects) == 1


def test_unknown_pool_and_bad_refs() -> None:
    engine, _ = _engine()
    with pytest.raises(PoolNotFound):
        engine.swap_exact_low_for_high(PairKey(low="A", high="B"), 1, 0)
    with pytest.raises(TypeError):
        engine.pool_balances(("A", "B"))  # type: ignore[arg-type]
    assert engine.get_pool("A", "B") is None


def test_max_amount_caps_operands() -> None:
    engine, _ = _engine(max_amount=1_000_000)
    with pytest.raises(ArithmeticOverflow):
        engine.create_pool("A", "B", 1_000_001, 10)
    engine.create_pool("A", "B", 1_000_000, 10)
    with pytest.raises(ArithmeticOverflow):
        engine.swap_exact_low_for_high(PairKey(low="A", high="B"), 1_000_001, 0)


def test_engine_fee_applies_to_new_pools() -> None:
    engine, _ = _engine(fee_points=0)
    engine.create_pool("A", "B", 1000, 5000)
    assert engine.swap_exact_low_for_high(PairKey(low="A", high="B"), 100, 0) == 454


def test_drained_pool_can_be_reseeded() -> None:
    engine, _ = _engine()
    lp = engine.create_pool("A", "B", 1000, 5000)
    key = PairKey(low="A", high="B")
    engine.remove_liquidity(key, lp, 0, 0)
    assert engine.pool_balances(key) == (0, 0, 0)

    res = engine.add_liquidity(key, 50, 70, 0)
    assert res.lp_minted == 50
    assert engine.pool_balances(key) == (50, 70, 50)


def test_effects_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="pairswap.core.engine")
    engine = AmmEngine()
    engine.create_pool("A", "B", 1000, 5000)
    engine.swap_exact_low_for_high(PairKey(low="A", high="B"), 100, 0)

    records = [r for r in caplog.records if r.name == "pairswap.core.engine"]
    assert [r.getMessage() for r in records] == ["PoolCreated", "Swapped"]
    assert records[1].amount_out == 450
    assert records[1].reserve_high_after == 4550


def test_log_effects_off_still_feeds_sink(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="pairswap.core.engine")
    engine, effects = _engine(log_effects=False)
    engine.create_pool("A", "B", 1000, 5000)
    assert [r for r in caplog.records if r.name == "pairswap.core.engine"] == []
    assert len(effects) == 1


def test_failing_sink_does_not_fail_committed_operation(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="pairswap.core.engine")
    calls: list[Effect] = []

    def sink(effect: Effect) -> None:
        calls.append(effect)
        if len(calls) == 2:
            raise RuntimeError("indexer down")

    engine = AmmEngine(effect_sink=sink)
    engine.create_pool("A", "B", 1000, 5000)
    key = PairKey(low="A", high="B")

    assert engine.swap_exact_low_for_high(key, 100, 0) == 450
    assert engine.pool_balances(key) == (1100, 4550, 2236)

    failures = [r for r in caplog.records if r.name == "pairswap.core.engine" and r.levelno == logging.ERROR]
    assert len(failures) == 1
    assert failures[0].exc_info is not None
    assert failures[0].exc_info[0] is RuntimeError

    # Later operations still reach the sink.
    engine.swap_exact_high_for_low(key, 10, 0)
    assert [e.event for e in calls] == [Event.POOL_CREATED, Event.SWAPPED, Event.SWAPPED]


def test_concurrent_create_has_one_winner() -> None:
    engine = AmmEngine()
    n = 12
    barrier = threading.Barrier(n)
    outcomes: list[str] = []
    guard = threading.Lock()

    def worker(i: int) -> None:
        barrier.wait()
        try:
            engine.create_pool("A", "B", 100 + i, 100 + i)
        except PoolAlreadyExists:
            result = "dup"
        else:
            result = "ok"
        with guard:
            outcomes.append(result)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("dup") == n - 1


def test_concurrent_swaps_on_one_pool_are_serialized() -> None:
    engine = AmmEngine()
    engine.create_pool("A", "B", 10**12, 10**12)
    key = PairKey(low="A", high="B")
    n_threads, n_swaps, amount_in = 8, 50, 1_000
    outs: list[int] = []
    guard = threading.Lock()

    def worker() -> None:
        for _ in range(n_swaps):
            out = engine.swap_exact_low_for_high(key, amount_in, 0)
            with guard:
                outs.append(out)

    threads = [threading.Thread(target=worker) for _ in range(n_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    low, high, supply = engine.pool_balances(key)
    assert low == 10**12 + n_threads * n_swaps * amount_in
    assert high == 10**12 - sum(outs)
    assert supply == 10**12


def test_engine_snapshot_roundtrip() -> None:
    engine = AmmEngine()
    engine.create_pool("ETH", "USDC", 1000, 5000)
    engine.create_pool("DAI", "ETH", 7, 9)
    snap = engine.snapshot()

    restored = AmmEngine.from_snapshot(snap.data)
    assert restored.snapshot().canonical_bytes() == snap.canonical_bytes()
    assert restored.pool_balances(PairKey(low="ETH", high="USDC")) == (1000, 5000, 2236)
