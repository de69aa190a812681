from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class NodeKind(str, Enum):
    """Vertex type on the money map."""
    income = "income"
    account = "account"
    pod = "pod"
    goal = "goal"
    liability = "liability"


class InflowCadence(str, Enum):
    """Recurrence period of a node's inflow."""
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class AccountCategory(str, Enum):
    checking = "checking"
    savings = "savings"
    brokerage = "brokerage"
    credit_card = "creditCard"
    other = "other"
    cd = "cd"
    retirement_401k = "401k"
    ira = "ira"
    education = "education"
    mortgage = "mortgage"
    auto_loan = "auto-loan"
    student_loan = "student-loan"
    business_loan = "business-loan"


class PodType(str, Enum):
    goal = "goal"
    category = "category"
    envelope = "envelope"
    custom = "custom"


class Inflow(BaseModel):
    amount: float
    cadence: InflowCadence = InflowCadence.monthly


class SimulationNode(BaseModel):
    """One vertex of the flow graph as supplied by the graph editor."""
    id: str
    kind: NodeKind
    balance: float = 0.0
    inflow: Optional[Inflow] = None
    return_rate: Optional[float] = None  # APY as a decimal fraction
    label: Optional[str] = None
    category: Optional[AccountCategory] = None
    pod_type: Optional[PodType] = None


class Allocation(BaseModel):
    target_node_id: str
    percentage: float


class AllocationRule(BaseModel):
    """Outgoing distribution policy for a single source node."""
    source_node_id: str
    allocations: list[Allocation] = Field(default_factory=list)
