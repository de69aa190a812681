"""Rate and cadence conversions used by the monthly projection loop."""
from __future__ import annotations

import math

from moneymap.models.graph import Inflow, InflowCadence

_DAYS_PER_MONTH = 30
_WEEKS_PER_MONTH = 4


def monthly_rate_from_apy(apy: float) -> float:
    """Geometric monthly equivalent of an annual percentage yield.

    (1 + apy)^(1/12) - 1, so twelve monthly compounds reproduce the APY
    exactly instead of overshooting it the way apy / 12 would.
    """
    return (1.0 + apy) ** (1.0 / 12.0) - 1.0


def cadence_to_monthly(inflow: Inflow | None) -> float:
    """Normalize an inflow to the amount received per simulated month."""
    if inflow is None or not math.isfinite(inflow.amount):
        return 0.0
    if inflow.cadence == InflowCadence.daily:
        return inflow.amount * _DAYS_PER_MONTH
    if inflow.cadence == InflowCadence.weekly:
        return inflow.amount * _WEEKS_PER_MONTH
    return inflow.amount


def horizon_months(horizon_years: float) -> int:
    """Whole months covered by a horizon, never fewer than one.

    Halves round up (2.5 months -> 3) and non-finite input falls back to
    the one-month minimum.
    """
    if not math.isfinite(horizon_years):
        return 1
    return max(1, math.floor(horizon_years * 12 + 0.5))
