"""Projection orchestration service.

Checks the preconditions the graph editor enforces before a run, fills in
default return rates, runs the engine and builds the display summary.
"""
from __future__ import annotations

import logging
from typing import Optional

from moneymap.config import settings as app_settings
from moneymap.models.graph import AllocationRule, SimulationNode
from moneymap.models.projection import ProjectionResponse
from moneymap.models.simulation import SimulationResult, SimulationSettings
from moneymap.services.coverage import allocation_issues
from moneymap.services.defaults import with_default_return_rates
from moneymap.services.reporting import summarize
from moneymap.simulation.engine import simulate

logger = logging.getLogger(__name__)


def check_preconditions(nodes: list[SimulationNode], rules: list[AllocationRule]) -> None:
    """Raise ValueError when the graph is not ready to project."""
    if not nodes:
        raise ValueError("Add nodes before running a simulation.")
    issues = allocation_issues(nodes, rules)
    if issues:
        logger.info(
            "Projection blocked by allocation issues: %s",
            ", ".join(f"{i.node_id}={i.state.value}" for i in issues),
        )
        raise ValueError("Resolve allocation coverage for every income source before simulating.")


def run_projection(
    nodes: list[SimulationNode],
    rules: list[AllocationRule],
    sim_settings: Optional[SimulationSettings] = None,
) -> SimulationResult:
    """Validate the snapshot and project it over the requested horizon."""
    check_preconditions(nodes, rules)
    if sim_settings is None:
        sim_settings = SimulationSettings(horizon_years=app_settings.DEFAULT_HORIZON_YEARS)

    result = simulate(with_default_return_rates(nodes), rules, sim_settings)
    logger.info(
        "Projection complete: %d node(s), %d rule(s), %d month(s), final total %.2f",
        len(nodes), len(rules), len(result.points) - 1, result.final_total,
    )
    return result


def run_projection_with_summary(
    nodes: list[SimulationNode],
    rules: list[AllocationRule],
    sim_settings: Optional[SimulationSettings] = None,
) -> ProjectionResponse:
    result = run_projection(nodes, rules, sim_settings)
    return ProjectionResponse(result=result, summary=summarize(result, nodes))
