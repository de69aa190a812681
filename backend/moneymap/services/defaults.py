"""Fallback annual return rates for nodes the editor left unset."""
from __future__ import annotations

from moneymap.models.graph import AccountCategory, NodeKind, PodType, SimulationNode

_ACCOUNT_CATEGORY_RATES: dict[AccountCategory, float] = {
    AccountCategory.brokerage: 0.10,
    AccountCategory.savings: 0.04,
}
_GOAL_POD_RATE = 0.04


def default_return_rate(node: SimulationNode) -> float:
    """APY assumed for a node with no explicit return rate."""
    if node.kind == NodeKind.account and node.category is not None:
        return _ACCOUNT_CATEGORY_RATES.get(node.category, 0.0)
    if node.kind == NodeKind.goal and node.pod_type == PodType.goal:
        return _GOAL_POD_RATE
    return 0.0


def with_default_return_rates(nodes: list[SimulationNode]) -> list[SimulationNode]:
    """Return copies of ``nodes`` with missing return rates filled in."""
    return [
        node if node.return_rate is not None
        else node.model_copy(update={"return_rate": default_return_rate(node)})
        for node in nodes
    ]
