"""Stock-recruit curves and the equilibrium-recruitment inverter.

Each curve is written once as a generic function over a numeric backend
``xp`` (a module exposing ``power``, ``exp`` and ``log``):
  - ``numpy`` for the plain-float operations in this module
  - ``jax.numpy`` for the differentiable forms in stockrecruit.differentiable

Curves (R0 = unfished recruitment, h = steepness, phi0 = unfished spawning
biomass per recruit, S = spawning biomass):

  Beverton-Holt:  α = 0.8·R0·h/(h − 0.2)
                  β = 0.2·R0·phi0·(1 − h)/(h − 0.2)
                  R = α·S / (β + S)

  Ricker:         α = (5h)^1.25 / phi0
                  β = 0.2·R0·phi0·(1 − h)/(h − 2.0)
                  R = α·S·exp(−β·S)

  Constant:       R = R0

Dispatch of the RICKER/BEVHOLT tags is crossed by default: RICKER evaluates
the Beverton-Holt curve and BEVHOLT evaluates the Ricker curve, which is how
the stock assessment model this module serves has always behaved. Pass
``legacy_dispatch=False`` for the name-consistent mapping. The equilibrium
inverter always uses the name-consistent mapping.
"""

from __future__ import annotations

import numpy as np

from stockrecruit.types import (
    BEVHOLT_SINGULAR_H,
    RICKER_SINGULAR_H,
    InvalidParameter,
    SingularSteepness,
    SRParameters,
    SRType,
    UnknownStockRecruitType,
    as_sr_type,
)


_FORM_NAMES = {
    SRType.BEVHOLT: "Beverton-Holt",
    SRType.RICKER: "Ricker",
    SRType.CONSTANT: "constant",
}


# ═══════════════════════════════════════════════════════════════════════
# GENERIC CURVES (backend-agnostic)
# ═══════════════════════════════════════════════════════════════════════

def beverton_holt_coefficients(xp, R0, h, phi0):
    """(α, β) of the Beverton-Holt curve."""
    alpha = 0.8 * R0 * h / (h - 0.2)
    beta = 0.2 * R0 * phi0 * (1.0 - h) / (h - 0.2)
    return alpha, beta


def ricker_coefficients(xp, R0, h, phi0):
    """(α, β) of the Ricker curve."""
    alpha = xp.power(5.0 * h, 1.25) / phi0
    beta = 0.2 * R0 * phi0 * (1.0 - h) / (h - 2.0)
    return alpha, beta


def beverton_holt(xp, R0, h, phi0, spB):
    alpha, beta = beverton_holt_coefficients(xp, R0, h, phi0)
    return alpha * spB / (beta + spB)


def ricker(xp, R0, h, phi0, spB):
    alpha, beta = ricker_coefficients(xp, R0, h, phi0)
    return alpha * spB * xp.exp(-beta * spB)


def curve(xp, form: SRType, R0, h, phi0, spB):
    """Evaluate the curve for an already-resolved functional form."""
    if form == SRType.BEVHOLT:
        return beverton_holt(xp, R0, h, phi0, spB)
    if form == SRType.RICKER:
        return ricker(xp, R0, h, phi0, spB)
    if form == SRType.CONSTANT:
        return R0
    raise UnknownStockRecruitType(form)


def resolve_form(sr_type, legacy_dispatch: bool = True) -> SRType:
    """Functional form the dispatcher evaluates for an sr_type tag.

    Args:
        sr_type: SRType or its integer value.
        legacy_dispatch: If True, RICKER and BEVHOLT are crossed.

    Returns:
        The SRType whose formula is evaluated.

    Raises:
        UnknownStockRecruitType: If sr_type is not recognised.
    """
    sr_type = as_sr_type(sr_type)
    if legacy_dispatch:
        if sr_type == SRType.RICKER:
            return SRType.BEVHOLT
        if sr_type == SRType.BEVHOLT:
            return SRType.RICKER
    return sr_type


# ═══════════════════════════════════════════════════════════════════════
# VALIDATION
# ═══════════════════════════════════════════════════════════════════════

def _require_finite(name: str, value: float) -> None:
    if not np.isfinite(value):
        raise InvalidParameter(f"{name} must be finite, got {value}")


def validate_inputs(R0: float | None, phi0: float, spB: float | None = None) -> None:
    """Check the curve-independent inputs. A None R0 or spB is not checked.

    Raises:
        InvalidParameter: If R0 or phi0 is not positive, or spB is negative.
    """
    if R0 is not None:
        _require_finite("R0", R0)
        if R0 <= 0:
            raise InvalidParameter(f"R0 must be positive, got {R0}")
    _require_finite("phi0", phi0)
    if phi0 <= 0:
        raise InvalidParameter(f"phi0 must be positive, got {phi0}")
    if spB is not None:
        _require_finite("spB", spB)
        if spB < 0:
            raise InvalidParameter(f"spB must be non-negative, got {spB}")


def validate_steepness(h: float, form: SRType) -> None:
    """Check steepness against the singularity of the given form.

    Raises:
        InvalidParameter: If h is non-finite or not positive.
        SingularSteepness: If h zeroes the form's denominator.
    """
    if form == SRType.CONSTANT:
        return
    _require_finite("h", h)
    if h <= 0:
        raise InvalidParameter(f"h must be positive, got {h}")
    if form == SRType.BEVHOLT and h == BEVHOLT_SINGULAR_H:
        raise SingularSteepness(h, BEVHOLT_SINGULAR_H, _FORM_NAMES[form])
    if form == SRType.RICKER and h == RICKER_SINGULAR_H:
        raise SingularSteepness(h, RICKER_SINGULAR_H, _FORM_NAMES[form])


def validate_ratio(xx: float) -> None:
    """Check a spawning-biomass-per-recruit ratio lies in [0, 1]."""
    _require_finite("xx", xx)
    if not 0.0 <= xx <= 1.0:
        raise InvalidParameter(f"xx must be in [0, 1], got {xx}")


def check_result(value: float, form: SRType) -> float:
    """Reject NaN/Inf produced at a pole of the curve."""
    if not np.isfinite(value):
        raise InvalidParameter(
            f"{_FORM_NAMES[form]} recruitment is not finite ({value}) "
            f"for the given inputs"
        )
    return value


# ═══════════════════════════════════════════════════════════════════════
# PLAIN-FLOAT OPERATIONS
# ═══════════════════════════════════════════════════════════════════════

def _evaluate(form: SRType, R0: float, h: float, phi0: float, spB: float) -> float:
    validate_inputs(R0, phi0, spB)
    validate_steepness(h, form)
    if form == SRType.CONSTANT:
        return float(R0)
    # Poles surface as inf/nan and are rejected by check_result
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        rec = curve(np, form, np.float64(R0), np.float64(h),
                    np.float64(phi0), np.float64(spB))
    return check_result(float(rec), form)


def calc_beverton_holt(R0: float, h: float, phi0: float, spB: float) -> float:
    """Recruitment from the Beverton-Holt curve.

    Args:
        R0: Recruitment for the unfished stock (> 0).
        h: Steepness (typically in (0.2, 1); 0.2 is singular).
        phi0: Unfished spawning biomass per recruit (> 0).
        spB: Spawning biomass (>= 0).

    Returns:
        Recruitment α·spB/(β + spB). Zero at spB = 0, rising towards α.

    Raises:
        SingularSteepness: If h == 0.2.
        InvalidParameter: For out-of-domain R0, phi0, spB or h.
    """
    return _evaluate(SRType.BEVHOLT, R0, h, phi0, spB)


def calc_ricker(R0: float, h: float, phi0: float, spB: float) -> float:
    """Recruitment from the Ricker curve.

    Args:
        R0: Recruitment for the unfished stock (> 0).
        h: Steepness (> 0; 2.0 is singular).
        phi0: Unfished spawning biomass per recruit (> 0).
        spB: Spawning biomass (>= 0).

    Returns:
        Recruitment α·spB·exp(−β·spB). Zero at spB = 0; decays to zero at
        large spB when β > 0 (1 < h < 2).

    Raises:
        SingularSteepness: If h == 2.0.
        InvalidParameter: For out-of-domain R0, phi0, spB or h.
    """
    return _evaluate(SRType.RICKER, R0, h, phi0, spB)


def calc_sr_function(
    R0: float,
    h: float,
    phi0: float,
    spB: float,
    sr_type,
    legacy_dispatch: bool = True,
) -> float:
    """Recruitment at spawning biomass spB for the selected stock-recruit type.

    With legacy_dispatch (default) RICKER evaluates Beverton-Holt and
    BEVHOLT evaluates Ricker. CONSTANT returns R0 whatever spB is.

    Raises:
        UnknownStockRecruitType: If sr_type is not an SRType value.
        SingularSteepness, InvalidParameter: As for the individual curves.
    """
    form = resolve_form(sr_type, legacy_dispatch)
    return _evaluate(form, R0, h, phi0, spB)


def sr_parameters(R0: float, h: float, phi0: float, sr_type) -> SRParameters:
    """Curve coefficients (α, β) for the named stock-recruit type.

    Uses the name-consistent mapping (RICKER → Ricker coefficients).
    """
    form = as_sr_type(sr_type)
    validate_inputs(R0, phi0)
    validate_steepness(h, form)
    if form == SRType.BEVHOLT:
        alpha, beta = beverton_holt_coefficients(np, R0, h, phi0)
    elif form == SRType.RICKER:
        alpha, beta = ricker_coefficients(np, R0, h, phi0)
    else:
        alpha, beta = R0, 0.0
    return SRParameters(sr_type=form, alpha=float(alpha), beta=float(beta))


# ═══════════════════════════════════════════════════════════════════════
# EQUILIBRIUM RECRUITMENT
# ═══════════════════════════════════════════════════════════════════════

def calc_eq_rec(R0: float, h: float, phi0: float, xx: float, sr_type) -> float:
    """Equilibrium recruitment when spawning biomass per recruit is xx·phi0.

    Solves R = f(R·xx·phi0) in closed form for the named curve f:

      RICKER:   R_eq = −ln(1/(α·xx·phi0)) / (xx·phi0·β)
      BEVHOLT:  R_eq = (α·xx·phi0 − β) / (xx·phi0)
      CONSTANT: R_eq = R0

    For BEVHOLT at xx = 1 this reduces to R0. The result is not
    bias-adjusted.

    Args:
        R0: Recruitment for the unfished stock (> 0).
        h: Steepness.
        phi0: Unfished spawning biomass per recruit (> 0).
        xx: Spawning biomass per recruit relative to unfished, in [0, 1].
        sr_type: SRType or its integer value.

    Raises:
        UnknownStockRecruitType: If sr_type is not recognised.
        InvalidParameter: xx outside [0, 1], xx == 0 for RICKER/BEVHOLT, or
            a non-positive logarithm argument for RICKER.
        SingularSteepness: h on a denominator singularity (including
            h == 1 for RICKER, where β vanishes).
    """
    form = as_sr_type(sr_type)
    validate_inputs(R0, phi0)
    validate_ratio(xx)
    validate_steepness(h, form)
    if form == SRType.CONSTANT:
        return float(R0)
    if xx == 0:
        raise InvalidParameter(
            f"xx must be > 0 for {_FORM_NAMES[form]} equilibrium recruitment"
        )

    spr = xx * phi0
    if form == SRType.RICKER:
        alpha, beta = ricker_coefficients(np, R0, h, phi0)
        if alpha * spr <= 0:
            raise InvalidParameter(
                f"Ricker equilibrium undefined: α·xx·phi0 = {alpha * spr} <= 0"
            )
        if beta == 0:
            raise SingularSteepness(h, 1.0, "Ricker equilibrium")
        R_eq = -np.log(1.0 / (alpha * spr)) / (spr * beta)
    else:
        alpha, beta = beverton_holt_coefficients(np, R0, h, phi0)
        R_eq = (alpha * spr - beta) / spr
    return check_result(float(R_eq), form)


def equilibrium_spawning_biomass(
    R0: float, h: float, phi0: float, xx: float, sr_type
) -> float:
    """Spawning biomass at equilibrium, R_eq·xx·phi0.

    Divide by B0 = R0·phi0 for depletion relative to unfished.
    """
    return calc_eq_rec(R0, h, phi0, xx, sr_type) * xx * phi0
