"""Core data types for stockrecruit.

This module is the SINGLE SOURCE OF TRUTH for:
  - SRType: stock-recruit functional-form selector (integer contract)
  - SRParameters: curve coefficients handed to reporting code
  - The error taxonomy raised on bad caller input

The integer values of SRType are shared with the surrounding population
model's configuration and must not be renumbered.
"""

from dataclasses import dataclass
from enum import IntEnum


# ═══════════════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════════════

class SRType(IntEnum):
    """Stock-recruit functional forms.

    CONSTANT: recruitment fixed at R0, independent of spawning biomass
    RICKER:   overcompensating, R = α·S·exp(−β·S)
    BEVHOLT:  saturating, R = α·S / (β + S)
    """
    CONSTANT = 0
    RICKER   = 1
    BEVHOLT  = 2


# Steepness values that zero a curve's denominator
BEVHOLT_SINGULAR_H = 0.2
RICKER_SINGULAR_H = 2.0


# ═══════════════════════════════════════════════════════════════════════
# ERRORS
# ═══════════════════════════════════════════════════════════════════════

class StockRecruitError(ValueError):
    """Base class for invalid stock-recruit inputs."""


class SingularSteepness(StockRecruitError):
    """Steepness sits on a value that zeroes a formula's denominator."""

    def __init__(self, h, singular_value, form):
        self.h = h
        self.singular_value = singular_value
        self.form = form
        super().__init__(
            f"steepness h={h} is singular for {form} "
            f"(denominator vanishes at h={singular_value})"
        )


class InvalidParameter(StockRecruitError):
    """Non-positive R0/phi0, negative spB, or xx outside [0, 1]."""


class UnknownStockRecruitType(StockRecruitError):
    """sr_type is not one of the recognised SRType values."""

    def __init__(self, sr_type):
        self.sr_type = sr_type
        valid = {t.name: int(t) for t in SRType}
        super().__init__(f"unknown stock-recruit type {sr_type!r}; expected one of {valid}")


# ═══════════════════════════════════════════════════════════════════════
# DATA TRANSFER OBJECTS
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SRParameters:
    """Coefficients of a stock-recruit curve.

    For CONSTANT, alpha is R0 and beta is 0 (no density dependence).
    """
    sr_type: SRType
    alpha: float
    beta: float


def as_sr_type(sr_type) -> SRType:
    """Coerce an int or SRType to SRType.

    Raises:
        UnknownStockRecruitType: If the value is not a recognised type.
    """
    if isinstance(sr_type, bool):
        raise UnknownStockRecruitType(sr_type)
    try:
        return SRType(sr_type)
    except (ValueError, TypeError):
        raise UnknownStockRecruitType(sr_type) from None
