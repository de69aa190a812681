from enum import Enum
from typing import Optional

from pydantic import BaseModel

from moneymap.models.simulation import SimulationResult


class AllocationHealth(str, Enum):
    """How completely a node's outgoing rules cover 100%."""
    missing = "missing"
    under = "under"
    over = "over"
    complete = "complete"


class AllocationStatus(BaseModel):
    node_id: str
    state: AllocationHealth
    total: float


class AllocationIssue(BaseModel):
    """Income node whose allocations do not add up to 100%."""
    node_id: str
    label: Optional[str] = None
    total: float
    state: AllocationHealth


class IncomingAllocation(BaseModel):
    percentage: float
    source_label: str


class CoverageReport(BaseModel):
    statuses: list[AllocationStatus]
    issues: list[AllocationIssue]
    incoming: dict[str, list[IncomingAllocation]]


class BalanceEntry(BaseModel):
    node_id: str
    label: str
    balance: float


class MilestoneProgress(BaseModel):
    label: str
    threshold: float
    reached_at_month: Optional[int] = None
    time_to_reach: str


class ProjectionSummary(BaseModel):
    """Display-ready digest of a projection for the charting layer."""
    horizon_months: int
    final_total: float
    top_balances: list[BalanceEntry]
    milestones: list[MilestoneProgress]
    next_milestone: Optional[MilestoneProgress] = None


class ProjectionResponse(BaseModel):
    result: SimulationResult
    summary: ProjectionSummary
