"""stockrecruit: stock-recruitment relationships for age-structured fisheries models.

Scalar stock-recruit curves evaluated in two numeric modes:
  - Plain floats for reporting and reference-point calculations
  - JAX differentiable values for gradient-based fitting of R0 and steepness

Curves: Beverton-Holt (saturating), Ricker (overcompensating), constant.
The equilibrium inverter gives the recruitment consistent with a
spawning-biomass-per-recruit ratio relative to unfished.
"""

__version__ = "0.1.0"

from stockrecruit.types import (
    InvalidParameter,
    SingularSteepness,
    SRParameters,
    SRType,
    StockRecruitError,
    UnknownStockRecruitType,
)
from stockrecruit.recruitment import (
    calc_beverton_holt,
    calc_eq_rec,
    calc_ricker,
    calc_sr_function,
    equilibrium_spawning_biomass,
    sr_parameters,
)

__all__ = [
    "InvalidParameter",
    "SingularSteepness",
    "SRParameters",
    "SRType",
    "StockRecruitError",
    "UnknownStockRecruitType",
    "calc_beverton_holt",
    "calc_eq_rec",
    "calc_ricker",
    "calc_sr_function",
    "equilibrium_spawning_biomass",
    "sr_parameters",
]
