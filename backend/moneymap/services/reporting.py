"""Projection summaries: formatted milestone timings and top balances."""
from __future__ import annotations

from typing import Optional

from moneymap.models.graph import SimulationNode
from moneymap.models.projection import BalanceEntry, MilestoneProgress, ProjectionSummary
from moneymap.models.simulation import SimulationMilestone, SimulationResult


def format_months(value: Optional[int]) -> str:
    """Human readable duration, e.g. 27 -> '2 yrs 3 mos'."""
    if value is None:
        return "Not reached"
    if value == 0:
        return "Now"
    years, months = divmod(value, 12)
    segments = []
    if years > 0:
        segments.append(f"{years} yr{'' if years == 1 else 's'}")
    if months > 0:
        segments.append(f"{months} mo{'' if months == 1 else 's'}")
    return " ".join(segments)


def top_balances(
    result: SimulationResult, labels: dict[str, str], limit: int = 5,
) -> list[BalanceEntry]:
    """Largest final balances, labelled by node label (falls back to id)."""
    entries = [
        BalanceEntry(node_id=node_id, label=labels.get(node_id, node_id), balance=balance)
        for node_id, balance in result.final_balances.items()
    ]
    entries.sort(key=lambda e: e.balance, reverse=True)
    return entries[:limit]


def _progress(milestone: SimulationMilestone) -> MilestoneProgress:
    return MilestoneProgress(
        label=milestone.label,
        threshold=milestone.threshold,
        reached_at_month=milestone.reached_at_month,
        time_to_reach=format_months(milestone.reached_at_month),
    )


def next_milestone(result: SimulationResult) -> Optional[MilestoneProgress]:
    """First rung of the wealth ladder not reached within the horizon."""
    for milestone in result.milestones:
        if milestone.reached_at_month is None:
            return _progress(milestone)
    return None


def summarize(result: SimulationResult, nodes: list[SimulationNode]) -> ProjectionSummary:
    labels = {node.id: node.label for node in nodes if node.label}
    return ProjectionSummary(
        horizon_months=result.points[-1].month,
        final_total=result.final_total,
        top_balances=top_balances(result, labels),
        milestones=[_progress(m) for m in result.milestones],
        next_milestone=next_milestone(result),
    )
