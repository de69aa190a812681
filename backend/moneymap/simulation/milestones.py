"""Wealth ladder: fixed total-wealth thresholds tracked for first crossing."""
from __future__ import annotations

from moneymap.models.simulation import SimulationMilestone, SimulationPoint

WEALTH_LADDER: tuple[tuple[str, float], ...] = (
    ("Level 1: $10k", 10_000.0),
    ("Level 2: $100k", 100_000.0),
    ("Level 3: $1M", 1_000_000.0),
    ("Level 4: $10M", 10_000_000.0),
    ("Level 5: $100M", 100_000_000.0),
)


def evaluate_milestones(points: list[SimulationPoint]) -> list[SimulationMilestone]:
    """Mark the first month whose total reaches each threshold.

    A milestone is never revisited once reached, so a later dip below the
    threshold does not move it.
    """
    milestones = [
        SimulationMilestone(label=label, threshold=threshold)
        for label, threshold in WEALTH_LADDER
    ]
    for point in points:
        for milestone in milestones:
            if milestone.reached_at_month is not None:
                continue
            if point.total >= milestone.threshold:
                milestone.reached_at_month = point.month
    return milestones
