"""Working state for one projection run.

The engine never mutates caller-owned models; it copies what it needs into
an id-keyed map of NodeState and discards it when the run returns.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from moneymap.models.graph import NodeKind, SimulationNode
from moneymap.simulation.conversions import cadence_to_monthly


@dataclass
class NodeState:
    """Mutable per-node balance tracked across the month loop."""
    kind: NodeKind
    balance: float
    inflow_monthly: float
    return_rate: float


def _finite_or_zero(value: float | None) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return value


_TOTAL_LOSS_RATE = -1.0


def _growth_rate(value: float | None) -> float:
    # Below -100% a year there is nothing left to lose; the monthly root of a
    # negative base would otherwise be complex.
    return max(_TOTAL_LOSS_RATE, _finite_or_zero(value))


def build_state(nodes: list[SimulationNode]) -> dict[str, NodeState]:
    """Build the id-keyed working copy. Duplicate ids: last one wins."""
    state: dict[str, NodeState] = {}
    for node in nodes:
        state[node.id] = NodeState(
            kind=node.kind,
            balance=_finite_or_zero(node.balance),
            inflow_monthly=cadence_to_monthly(node.inflow),
            return_rate=_growth_rate(node.return_rate),
        )
    return state


def capture_balances(state: dict[str, NodeState]) -> dict[str, float]:
    return {node_id: node.balance for node_id, node in state.items()}


def compute_total(state: dict[str, NodeState]) -> float:
    total = 0.0
    for node in state.values():
        total += node.balance
    return total
