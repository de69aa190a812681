"""Money map projection engine.

Projects a graph of nodes and allocation rules forward one month at a time:
compound every balance, inject recurring inflows, cascade allocations, then
snapshot. Pure and deterministic: no I/O, no randomness, no shared state.
"""
from __future__ import annotations

import logging

from moneymap.models.graph import AllocationRule, SimulationNode
from moneymap.models.simulation import SimulationPoint, SimulationResult, SimulationSettings
from moneymap.simulation.allocation import build_allocation_map, resolve_allocations
from moneymap.simulation.conversions import horizon_months, monthly_rate_from_apy
from moneymap.simulation.milestones import evaluate_milestones
from moneymap.simulation.state import NodeState, build_state, capture_balances, compute_total

logger = logging.getLogger(__name__)


def _apply_growth(state: dict[str, NodeState]) -> None:
    """Compound each balance by its monthly-equivalent APY."""
    for node in state.values():
        if node.return_rate == 0:
            continue
        node.balance *= 1.0 + monthly_rate_from_apy(node.return_rate)


def _inject_inflows(state: dict[str, NodeState]) -> dict[str, float]:
    """Credit recurring inflows and start the month's received ledger."""
    received: dict[str, float] = {}
    for node_id, node in state.items():
        if node.inflow_monthly > 0:
            node.balance += node.inflow_monthly
            received[node_id] = node.inflow_monthly
    return received


def _snapshot(month: int, state: dict[str, NodeState]) -> SimulationPoint:
    return SimulationPoint(month=month, total=compute_total(state), balances=capture_balances(state))


def simulate(
    nodes: list[SimulationNode],
    rules: list[AllocationRule],
    settings: SimulationSettings,
) -> SimulationResult:
    """Project balances over the settings horizon.

    Returns one point per month from 0 (the starting snapshot) through the
    horizon inclusive, the wealth ladder with first-crossing months, and the
    last point's balances and total.

    Malformed graphs never raise: unknown ids and self-allocations are
    ignored, and a stalled allocation pass is logged and dropped for that
    month.
    """
    months = horizon_months(settings.horizon_years)
    state = build_state(nodes)
    allocation_map = build_allocation_map(rules)
    logger.debug(
        "Simulating %d node(s), %d keyed rule(s) over %d month(s)",
        len(state), len(allocation_map), months,
    )

    points = [_snapshot(0, state)]
    for month in range(1, months + 1):
        _apply_growth(state)
        received = _inject_inflows(state)
        resolve_allocations(state, allocation_map, received, month=month)
        points.append(_snapshot(month, state))

    final_point = points[-1]
    return SimulationResult(
        points=points,
        milestones=evaluate_milestones(points),
        final_balances=dict(final_point.balances),
        final_total=final_point.total,
    )
