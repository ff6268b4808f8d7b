"""Differentiable stock-recruit curves (JAX).

Same formulas as stockrecruit.recruitment, instantiated over ``jax.numpy``
so an objective function can take gradients of recruitment with respect to
R0 and steepness. phi0 and spB are data and are not differentiated.

Importing this module enables 64-bit floats in JAX; plain and
differentiable results then agree to floating-point round-off.

Each evaluation builds its intermediates (α, β, the curve value) inside a
``jax.named_scope`` entered before the first intermediate and released on
every exit path. JAX traces are functional, so those intermediates belong
to the trace of the call and only the returned value reaches the caller's
graph. The caller's transformation (``jax.grad``, ``jax.jit``) owns the
graph's lifetime; nothing here is global or needs resetting.

Input checks:
  - Concrete R0/h (eager calls) raise the stockrecruit error taxonomy
  - Traced R0/h emit ``checkify`` checks (R0 > 0, h > 0, h off the
    evaluated form's singularity, finite recruitment). Wrap the objective
    in ``checkify.checkify`` and call ``err.throw()``; jit without
    checkify refuses to lower the checks:

        from jax.experimental import checkify
        err, grads = checkify.checkify(jax.grad(objective))(params)
        err.throw()

  - phi0 and spB are data and are always checked eagerly
"""

from __future__ import annotations

from typing import Tuple

import jax
import jax.numpy as jnp
from jax.experimental import checkify

from stockrecruit.recruitment import (
    check_result,
    curve,
    resolve_form,
    validate_inputs,
    validate_steepness,
)
from stockrecruit.types import BEVHOLT_SINGULAR_H, RICKER_SINGULAR_H, SRType

jax.config.update("jax_enable_x64", True)

_SINGULAR_H = {
    SRType.BEVHOLT: BEVHOLT_SINGULAR_H,
    SRType.RICKER: RICKER_SINGULAR_H,
}


def _is_traced(x) -> bool:
    return isinstance(x, jax.core.Tracer)


def _check_traced_inputs(form: SRType, R0, h) -> None:
    """checkify equivalents of validate_inputs/validate_steepness for tracers."""
    if _is_traced(R0):
        checkify.check(R0 > 0, "InvalidParameter: R0 must be positive, got {}", R0)
    if _is_traced(h) and form != SRType.CONSTANT:
        checkify.check(h > 0, "InvalidParameter: h must be positive, got {}", h)
        checkify.check(
            h != _SINGULAR_H[form],
            f"SingularSteepness: h={{}} zeroes the {form.name} denominator",
            h,
        )


def _evaluate_dv(form: SRType, R0, h, phi0: float, spB: float) -> jax.Array:
    R0 = jnp.asarray(R0, dtype=jnp.float64)
    h = jnp.asarray(h, dtype=jnp.float64)

    validate_inputs(None if _is_traced(R0) else float(R0), phi0, spB)
    if not _is_traced(h):
        validate_steepness(float(h), form)
    _check_traced_inputs(form, R0, h)

    with jax.named_scope(f"stockrecruit_{form.name.lower()}"):
        rec = curve(jnp, form, R0, h, phi0, spB)

    if _is_traced(rec):
        checkify.check(
            jnp.isfinite(rec),
            f"InvalidParameter: {form.name} recruitment is not finite ({{}})",
            rec,
        )
    else:
        check_result(float(rec), form)
    return rec


def calc_beverton_holt_dv(R0, h, phi0: float, spB: float) -> jax.Array:
    """Differentiable Beverton-Holt recruitment; see calc_beverton_holt."""
    return _evaluate_dv(SRType.BEVHOLT, R0, h, phi0, spB)


def calc_ricker_dv(R0, h, phi0: float, spB: float) -> jax.Array:
    """Differentiable Ricker recruitment; see calc_ricker."""
    return _evaluate_dv(SRType.RICKER, R0, h, phi0, spB)


def calc_sr_function_dv(
    R0, h, phi0: float, spB: float, sr_type, legacy_dispatch: bool = True
) -> jax.Array:
    """Differentiable dispatcher; see calc_sr_function.

    For CONSTANT the returned value is R0 itself (dR/dR0 = 1, dR/dh = 0).
    """
    form = resolve_form(sr_type, legacy_dispatch)
    return _evaluate_dv(form, R0, h, phi0, spB)


def recruitment_value_and_grad(
    R0: float,
    h: float,
    phi0: float,
    spB: float,
    sr_type,
    legacy_dispatch: bool = True,
) -> Tuple[float, float, float]:
    """Recruitment and its partial derivatives with respect to R0 and h.

    Args:
        R0: Trial unfished recruitment.
        h: Trial steepness.
        phi0: Unfished spawning biomass per recruit.
        spB: Spawning biomass for the year.
        sr_type: SRType or its integer value.
        legacy_dispatch: Crossed RICKER/BEVHOLT mapping if True.

    Returns:
        (R, dR/dR0, dR/dh) as floats.

    Raises:
        UnknownStockRecruitType, SingularSteepness, InvalidParameter:
            On bad input (checked before tracing) or non-finite recruitment.
    """
    form = resolve_form(sr_type, legacy_dispatch)
    validate_inputs(R0, phi0, spB)
    validate_steepness(h, form)

    def _rec(R0_, h_):
        return _evaluate_dv(form, R0_, h_, phi0, spB)

    err, (value, (d_R0, d_h)) = checkify.checkify(
        jax.value_and_grad(_rec, argnums=(0, 1))
    )(jnp.float64(R0), jnp.float64(h))
    # Inputs were validated above, so the only traced check left is finiteness
    value = check_result(float(value), form)
    err.throw()
    return value, float(d_R0), float(d_h)
