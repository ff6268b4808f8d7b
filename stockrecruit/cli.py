"""Command-line report of a stock's recruitment curve.

Usage:
    python -m stockrecruit stock.yaml --spb 0 50 100 --xx 0.35 0.4 1.0
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from stockrecruit.config import load_config
from stockrecruit.recruitment import (
    calc_eq_rec,
    calc_sr_function,
    equilibrium_spawning_biomass,
    resolve_form,
    sr_parameters,
)
from stockrecruit.types import StockRecruitError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='stockrecruit',
        description='Report stock-recruit curve values and equilibrium recruitment',
    )
    parser.add_argument('config', help='Stock configuration YAML')
    parser.add_argument('--scenario', default=None,
                        help='Optional scenario override YAML')
    parser.add_argument('--spb', type=float, nargs='*', default=[],
                        help='Spawning biomass values to evaluate')
    parser.add_argument('--xx', type=float, nargs='*', default=[],
                        help='Spawning biomass per recruit ratios (0-1) for equilibrium recruitment')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config, scenario_path=args.scenario)
    except (FileNotFoundError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    s = config.stock
    legacy = config.recruitment.legacy_dispatch
    form = resolve_form(s.sr_type, legacy)

    print(f"Stock: R0={s.R0:g}  h={s.h:g}  phi0={s.phi0:g}  sr_type={s.sr_type.name}")
    print(f"  Curve evaluated: {form.name}"
          f"{' (legacy dispatch)' if legacy and form != s.sr_type else ''}")

    try:
        params = sr_parameters(s.R0, s.h, s.phi0, form)
        print(f"  alpha={params.alpha:.6g}  beta={params.beta:.6g}")

        if args.spb:
            print(f"\n{'spB':>12} {'recruits':>14}")
            for spB in args.spb:
                rec = calc_sr_function(s.R0, s.h, s.phi0, spB, s.sr_type,
                                       legacy_dispatch=legacy)
                print(f"{spB:>12.4g} {rec:>14.6g}")

        if args.xx:
            B0 = s.R0 * s.phi0
            print(f"\n{'xx':>8} {'R_eq':>14} {'B_eq/B0':>10}")
            for xx in args.xx:
                R_eq = calc_eq_rec(s.R0, s.h, s.phi0, xx, s.sr_type)
                B_eq = equilibrium_spawning_biomass(s.R0, s.h, s.phi0, xx, s.sr_type)
                print(f"{xx:>8.3f} {R_eq:>14.6g} {B_eq / B0:>10.4f}")
    except StockRecruitError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0
