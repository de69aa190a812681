"""Tests for the cascading allocation resolver."""
import logging
import math

from moneymap.models.graph import Allocation, AllocationRule, Inflow, NodeKind, SimulationNode
from moneymap.models.simulation import SimulationSettings
from moneymap.simulation.allocation import build_allocation_map, resolve_allocations
from moneymap.simulation.engine import simulate
from moneymap.simulation.state import NodeState

_ONE_MONTH = SimulationSettings(horizon_years=1 / 12)


def _income(node_id: str, amount: float) -> SimulationNode:
    return SimulationNode(id=node_id, kind=NodeKind.income, inflow=Inflow(amount=amount), return_rate=0.0)


def _account(node_id: str, balance: float = 0.0, **overrides) -> SimulationNode:
    return SimulationNode(id=node_id, kind=NodeKind.account, balance=balance, return_rate=0.0, **overrides)


def _rule(source: str, *targets: tuple[str, float]) -> AllocationRule:
    return AllocationRule(
        source_node_id=source,
        allocations=[Allocation(target_node_id=t, percentage=p) for t, p in targets],
    )


# --- Rule keying ---


def test_allocation_map_converts_percentages_to_weights():
    allocation_map = build_allocation_map([_rule("inc", ("a", 25), ("b", 75))])
    assert [(t.target_id, t.weight) for t in allocation_map["inc"]] == [("a", 0.25), ("b", 0.75)]


def test_allocation_map_drops_blank_and_non_finite_entries():
    allocation_map = build_allocation_map([
        _rule("inc", ("", 50), ("a", float("nan")), ("b", -20), ("c", 10)),
    ])
    assert [(t.target_id, t.weight) for t in allocation_map["inc"]] == [("b", 0.0), ("c", 0.1)]


def test_rule_without_usable_allocations_is_not_keyed():
    assert build_allocation_map([_rule("inc"), _rule("a", ("", 100))]) == {}


def test_duplicate_source_last_rule_wins_first_position():
    allocation_map = build_allocation_map([
        _rule("inc", ("a", 100)),
        _rule("acc", ("b", 100)),
        _rule("inc", ("c", 100)),
    ])
    assert list(allocation_map) == ["inc", "acc"]
    assert allocation_map["inc"][0].target_id == "c"


# --- Cascading ---


def test_cascade_income_to_a_to_b():
    nodes = [_income("inc", 1000), _account("a", balance=500.0), _account("b")]
    rules = [_rule("inc", ("a", 100)), _rule("a", ("b", 100))]
    result = simulate(nodes, rules, _ONE_MONTH)
    assert result.final_balances["b"] == 1000.0
    assert result.final_balances["a"] == 500.0
    assert result.final_balances["inc"] == 0.0


def test_cascade_splits_received_amount_only():
    # A forwards half of what it received, not half of its whole balance
    nodes = [_income("inc", 1000), _account("a", balance=10_000.0), _account("b")]
    rules = [_rule("inc", ("a", 100)), _rule("a", ("b", 50))]
    result = simulate(nodes, rules, _ONE_MONTH)
    assert result.final_balances["b"] == 500.0
    assert result.final_balances["a"] == 10_500.0


def test_account_with_own_inflow_allocates_it():
    nodes = [_account("a", inflow=Inflow(amount=800)), _account("b")]
    result = simulate(nodes, [_rule("a", ("b", 100))], _ONE_MONTH)
    assert result.final_balances == {"a": 0.0, "b": 800.0}


def test_self_allocation_is_skipped():
    nodes = [_account("a", inflow=Inflow(amount=1000)), _account("b")]
    result = simulate(nodes, [_rule("a", ("a", 50), ("b", 50))], _ONE_MONTH)
    assert result.final_balances == {"a": 500.0, "b": 500.0}


def test_unknown_references_are_no_ops(caplog):
    nodes = [_income("inc", 1000), _account("a")]
    rules = [_rule("ghost", ("a", 100)), _rule("inc", ("missing", 40), ("a", 60))]
    with caplog.at_level(logging.WARNING, logger="moneymap.simulation.allocation"):
        result = simulate(nodes, rules, _ONE_MONTH)
    assert caplog.records == []
    assert math.isclose(result.final_balances["a"], 600.0)
    assert math.isclose(result.final_balances["inc"], 400.0)
    assert "ghost" not in result.final_balances


def test_rules_with_only_unknown_sources_emit_no_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="moneymap.simulation.allocation"):
        result = simulate([_account("a", balance=40.0)], [_rule("ghost", ("a", 100))], _ONE_MONTH)
    assert caplog.records == []
    assert result.final_balances == {"a": 40.0}


def test_over_allocation_is_not_normalised():
    nodes = [_income("inc", 1000), _account("a"), _account("b")]
    result = simulate(nodes, [_rule("inc", ("a", 100), ("b", 50))], _ONE_MONTH)
    assert result.final_balances == {"inc": -500.0, "a": 1000.0, "b": 500.0}
    assert result.final_total == 1000.0


def test_duplicate_rules_only_last_is_used():
    nodes = [_income("inc", 1000), _account("a"), _account("b")]
    rules = [_rule("inc", ("a", 100)), _rule("inc", ("b", 100))]
    result = simulate(nodes, rules, _ONE_MONTH)
    assert result.final_balances["a"] == 0.0
    assert result.final_balances["b"] == 1000.0


def test_income_with_zero_inflow_allocates_nothing():
    nodes = [_income("inc", 0), _account("a", balance=5.0)]
    result = simulate(nodes, [_rule("inc", ("a", 100))], _ONE_MONTH)
    assert result.final_balances == {"inc": 0.0, "a": 5.0}


# --- Cycles and known limitations ---


def test_cycle_fires_each_rule_once_per_month(caplog):
    nodes = [_income("inc", 1000), _account("a"), _account("b")]
    rules = [_rule("inc", ("a", 100)), _rule("a", ("b", 50)), _rule("b", ("a", 50))]
    with caplog.at_level(logging.WARNING, logger="moneymap.simulation.allocation"):
        result = simulate(nodes, rules, _ONE_MONTH)
    # inc -> a 1000; a -> b 500; b -> a 250; a has already fired this month
    assert result.final_balances == {"inc": 0.0, "a": 750.0, "b": 250.0}
    assert caplog.records == []


def test_pure_cycle_terminates_over_full_horizon():
    nodes = [_account("a", balance=100.0), _account("b", balance=100.0)]
    rules = [_rule("a", ("b", 60)), _rule("b", ("a", 60))]
    result = simulate(nodes, rules, SimulationSettings(horizon_years=30))
    assert len(result.points) == 361
    assert result.final_balances == {"a": 100.0, "b": 100.0}


def test_rule_visited_before_its_source_is_funded_is_done_for_the_month():
    # Known limitation: rules fire in keying order, so a downstream rule
    # listed ahead of its upstream one sees nothing to forward.
    nodes = [_income("inc", 1000), _account("a"), _account("b")]
    rules = [_rule("a", ("b", 100)), _rule("inc", ("a", 100))]
    result = simulate(nodes, rules, _ONE_MONTH)
    assert result.final_balances == {"inc": 0.0, "a": 1000.0, "b": 0.0}


def test_resolve_allocations_marks_every_source_processed():
    state = {
        "inc": NodeState(kind=NodeKind.income, balance=1000.0, inflow_monthly=1000.0, return_rate=0.0),
        "a": NodeState(kind=NodeKind.account, balance=0.0, inflow_monthly=0.0, return_rate=0.0),
    }
    allocation_map = build_allocation_map([
        _rule("inc", ("a", 100)),
        _rule("a", ("inc", 10)),
        _rule("ghost", ("a", 100)),
    ])
    received = {"inc": 1000.0}
    processed = resolve_allocations(state, allocation_map, received, month=1)
    assert processed == {"inc", "a", "ghost"}
    assert received == {"inc": 1100.0, "a": 1000.0}
    assert math.isclose(state["a"].balance, 900.0)
    assert math.isclose(state["inc"].balance, 100.0)


def test_ledger_resets_each_month():
    nodes = [_income("inc", 1000), _account("a"), _account("b")]
    rules = [_rule("inc", ("a", 100)), _rule("a", ("b", 100))]
    result = simulate(nodes, rules, SimulationSettings(horizon_years=1))
    assert [p.balances["b"] for p in result.points[1:4]] == [1000.0, 2000.0, 3000.0]
    assert all(p.balances["a"] == 0.0 for p in result.points)
