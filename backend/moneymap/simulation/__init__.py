"""Projection engine: conversions, working state, allocation cascade, milestones."""
from moneymap.simulation.conversions import cadence_to_monthly, horizon_months, monthly_rate_from_apy
from moneymap.simulation.allocation import build_allocation_map, resolve_allocations
from moneymap.simulation.milestones import WEALTH_LADDER, evaluate_milestones
from moneymap.simulation.engine import simulate

__all__ = [
    "cadence_to_monthly",
    "horizon_months",
    "monthly_rate_from_apy",
    "build_allocation_map",
    "resolve_allocations",
    "WEALTH_LADDER",
    "evaluate_milestones",
    "simulate",
]
