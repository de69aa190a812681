"""Cascading allocation resolver.

Funds an account receives through one rule can feed that account's own
outgoing rule in the same month. Rules are settled with a bounded
fixed-point loop: each pass fires every rule that has not fired yet this
month, and the loop stops when all rules are done, when a pass makes no
progress, or after 2 x (number of rules) passes.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from moneymap.models.graph import AllocationRule, NodeKind
from moneymap.simulation.state import NodeState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeightedTarget:
    """Allocation target with its percentage converted to a fraction."""
    target_id: str
    weight: float


def build_allocation_map(rules: list[AllocationRule]) -> dict[str, list[WeightedTarget]]:
    """Key rules by source node id.

    Entries with an empty target or a non-finite percentage are dropped and
    negative percentages clamp to zero. A later rule for the same source
    replaces the earlier allocations but keeps the earlier position in the
    processing order.
    """
    allocation_map: dict[str, list[WeightedTarget]] = {}
    for rule in rules:
        targets = [
            WeightedTarget(target_id=alloc.target_node_id, weight=max(0.0, alloc.percentage / 100.0))
            for alloc in rule.allocations
            if alloc.target_node_id and math.isfinite(alloc.percentage)
        ]
        if targets:
            allocation_map[rule.source_node_id] = targets
    return allocation_map


def _amount_to_allocate(source_id: str, source: NodeState, received: dict[str, float]) -> float:
    # Income nodes always split their fixed inflow; everything else splits
    # only what reached it this month.
    if source.kind == NodeKind.income:
        return source.inflow_monthly
    return received.get(source_id, 0.0)


def resolve_allocations(
    state: dict[str, NodeState],
    allocation_map: dict[str, list[WeightedTarget]],
    received: dict[str, float],
    month: int | None = None,
) -> set[str]:
    """Fire every keyed rule at most once for the current month.

    Mutates balances in ``state`` and the ``received`` ledger in place.
    Returns the source ids that were processed; rules missing from the
    returned set were dropped for this month.
    """
    processed: set[str] = set()
    max_iterations = len(allocation_map) * 2
    iteration = 0

    while len(processed) < len(allocation_map) and iteration < max_iterations:
        iteration += 1
        made_progress = False

        for source_id, targets in allocation_map.items():
            if source_id in processed:
                continue

            source = state.get(source_id)
            if source is None:
                processed.add(source_id)
                made_progress = True
                continue

            available = _amount_to_allocate(source_id, source, received)
            if available <= 0:
                processed.add(source_id)
                made_progress = True
                continue

            for target in targets:
                if target.target_id == source_id:
                    continue
                target_state = state.get(target.target_id)
                if target_state is None:
                    continue
                amount = available * target.weight
                if amount <= 0:
                    continue
                source.balance -= amount
                target_state.balance += amount
                received[target.target_id] = received.get(target.target_id, 0.0) + amount

            processed.add(source_id)
            made_progress = True

        if not made_progress:
            logger.warning(
                "Circular dependency detected in allocation rules at month %s; "
                "%d rule(s) skipped",
                month, len(allocation_map) - len(processed),
            )
            break

    return processed
