"""Allocation coverage checks.

Reports whether each income, account and pod node routes exactly 100% of
its funds. Unlike the engine, coverage sums every rule declared for a
source, so duplicate rules show up as over-allocation here.
"""
from __future__ import annotations

from moneymap.models.graph import AllocationRule, NodeKind, SimulationNode
from moneymap.models.projection import (
    AllocationHealth,
    AllocationIssue,
    AllocationStatus,
    CoverageReport,
    IncomingAllocation,
)

ALLOCATION_TOLERANCE = 0.001

_ALLOCATABLE_KINDS = {NodeKind.income, NodeKind.account, NodeKind.pod}


def allocation_statuses(
    nodes: list[SimulationNode], rules: list[AllocationRule],
) -> dict[str, AllocationStatus]:
    """Allocation health keyed by node id, for allocatable nodes only."""
    totals: dict[str, float] = {}
    has_rule: set[str] = set()
    for node in nodes:
        if node.kind in _ALLOCATABLE_KINDS:
            totals[node.id] = 0.0

    for rule in rules:
        if rule.source_node_id not in totals:
            continue
        has_rule.add(rule.source_node_id)
        totals[rule.source_node_id] += sum(alloc.percentage for alloc in rule.allocations)

    statuses: dict[str, AllocationStatus] = {}
    for node_id, total in totals.items():
        if node_id not in has_rule:
            state = AllocationHealth.missing
        elif total > 100 + ALLOCATION_TOLERANCE:
            state = AllocationHealth.over
        elif total < 100 - ALLOCATION_TOLERANCE:
            state = AllocationHealth.under
        else:
            state = AllocationHealth.complete
        statuses[node_id] = AllocationStatus(node_id=node_id, state=state, total=total)
    return statuses


def allocation_issues(
    nodes: list[SimulationNode], rules: list[AllocationRule],
) -> list[AllocationIssue]:
    """Income nodes that would leave money unrouted or over-routed."""
    statuses = allocation_statuses(nodes, rules)
    issues = []
    for node in nodes:
        if node.kind != NodeKind.income:
            continue
        status = statuses.get(node.id)
        total = status.total if status else 0.0
        state = status.state if status else AllocationHealth.missing
        if state != AllocationHealth.complete:
            issues.append(AllocationIssue(node_id=node.id, label=node.label, total=total, state=state))
    return issues


def incoming_allocations(
    nodes: list[SimulationNode], rules: list[AllocationRule],
) -> dict[str, list[IncomingAllocation]]:
    """For each target id, the percentages routed into it and from where."""
    by_id = {node.id: node for node in nodes}
    incoming: dict[str, list[IncomingAllocation]] = {}
    for rule in rules:
        source = by_id.get(rule.source_node_id)
        if source is None:
            continue
        for alloc in rule.allocations:
            incoming.setdefault(alloc.target_node_id, []).append(IncomingAllocation(
                percentage=alloc.percentage,
                source_label=source.label or source.id,
            ))
    return incoming


def coverage_report(nodes: list[SimulationNode], rules: list[AllocationRule]) -> CoverageReport:
    return CoverageReport(
        statuses=list(allocation_statuses(nodes, rules).values()),
        issues=allocation_issues(nodes, rules),
        incoming=incoming_allocations(nodes, rules),
    )
