from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from moneymap.config import settings
from moneymap.models.graph import AllocationRule, SimulationNode
from moneymap.models.projection import CoverageReport, ProjectionResponse
from moneymap.models.simulation import SimulationSettings
from moneymap.services.coverage import coverage_report
from moneymap.services.simulation_service import run_projection_with_summary

router = APIRouter(tags=["simulations"])


class GraphSnapshot(BaseModel):
    """Nodes and rules captured from the money map editor."""
    nodes: list[SimulationNode] = Field(default_factory=list)
    rules: list[AllocationRule] = Field(default_factory=list)


class ProjectionRequest(GraphSnapshot):
    settings: Optional[SimulationSettings] = None


@router.get("/simulations/horizons")
def get_horizon_options():
    """Horizon choices offered by the projection panel."""
    return {
        "options": settings.HORIZON_OPTIONS,
        "default": settings.DEFAULT_HORIZON_YEARS,
    }


@router.post("/simulations/run", response_model=ProjectionResponse)
def run_projection_endpoint(request: ProjectionRequest):
    """Project a graph snapshot forward.

    Returns the monthly balance series, wealth ladder and a display summary.
    An empty graph or an income source without full allocation coverage is
    rejected with 422.
    """
    if request.settings is not None and request.settings.horizon_years > settings.MAX_HORIZON_YEARS:
        raise HTTPException(
            status_code=422,
            detail=f"Horizon cannot exceed {settings.MAX_HORIZON_YEARS:g} years",
        )
    try:
        return run_projection_with_summary(request.nodes, request.rules, request.settings)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/simulations/coverage", response_model=CoverageReport)
def get_coverage(snapshot: GraphSnapshot):
    """Allocation health for every allocatable node, without simulating."""
    return coverage_report(snapshot.nodes, snapshot.rules)
