from typing import Optional

from pydantic import BaseModel


class SimulationSettings(BaseModel):
    """Projection horizon requested by the caller."""
    horizon_years: float = 10.0


class SimulationPoint(BaseModel):
    """Running total and per-node balances at the end of a month."""
    month: int
    total: float
    balances: dict[str, float]


class SimulationMilestone(BaseModel):
    label: str
    threshold: float
    reached_at_month: Optional[int] = None


class SimulationResult(BaseModel):
    """Monthly balance series plus wealth ladder attainment."""
    points: list[SimulationPoint]
    milestones: list[SimulationMilestone]
    final_balances: dict[str, float]
    final_total: float
