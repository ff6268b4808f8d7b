"""Configuration system for stockrecruit.

Hierarchical YAML configuration with deep-merge support:
  base.yaml → scenario override → dict overrides

Example:
    stock:
      R0: 1000.0
      h: 0.7
      phi0: 2.0
      sr_type: BEVHOLT      # name or integer value
    recruitment:
      legacy_dispatch: true
"""

from __future__ import annotations

import dataclasses
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml

from stockrecruit.types import (
    BEVHOLT_SINGULAR_H,
    RICKER_SINGULAR_H,
    SRType,
    UnknownStockRecruitType,
    as_sr_type,
)


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION DATACLASSES
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class StockSection:
    """Stock-recruit parameters for one stock."""
    R0: float = 1000.0           # Unfished recruitment
    h: float = 0.7               # Steepness
    phi0: float = 1.0            # Unfished spawning biomass per recruit
    sr_type: Any = SRType.BEVHOLT


@dataclass
class RecruitmentSection:
    """Dispatcher behaviour.

    legacy_dispatch: True keeps the crossed RICKER/BEVHOLT mapping of the
                     assessment model; False uses the names as written.
    """
    legacy_dispatch: bool = True


@dataclass
class ModelConfig:
    """Complete configuration. Sections map 1:1 to YAML top-level keys."""
    stock: StockSection = field(default_factory=StockSection)
    recruitment: RecruitmentSection = field(default_factory=RecruitmentSection)


# ═══════════════════════════════════════════════════════════════════════
# YAML LOADING & MERGING
# ═══════════════════════════════════════════════════════════════════════

def deep_merge(base: Dict, override: Dict) -> Dict:
    """Merge override into base in place, descending into nested mappings.

    A mapping in override extends a mapping already in base; any other value
    (including a mapping replacing a scalar) overwrites. Returns base.
    """
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            deep_merge(current, value)
        else:
            base[key] = value
    return base


def _section_from_dict(section_cls, data: Dict) -> Any:
    """Build a section dataclass from the keys it declares; others are dropped."""
    known = {f.name for f in dataclasses.fields(section_cls)}
    return section_cls(**{k: data[k] for k in data.keys() & known})


def parse_sr_type(value) -> SRType:
    """SRType from a YAML value: a name ('RICKER', 'bevholt') or an integer."""
    if isinstance(value, str):
        try:
            return SRType[value.strip().upper()]
        except KeyError:
            raise UnknownStockRecruitType(value) from None
    return as_sr_type(value)


def _yaml_to_config(data: Dict) -> ModelConfig:
    """Convert a merged YAML dict to a ModelConfig."""
    section_map = {
        'stock': StockSection,
        'recruitment': RecruitmentSection,
    }
    sections = {}
    for key, cls in section_map.items():
        if key in data and isinstance(data[key], dict):
            sections[key] = _section_from_dict(cls, data[key])
        else:
            sections[key] = cls()

    config = ModelConfig(**sections)
    config.stock.sr_type = parse_sr_type(config.stock.sr_type)
    return config


def validate_config(config: ModelConfig) -> None:
    """Validate a configuration.

    Raises:
        ValueError: On an invalid parameter (UnknownStockRecruitType is a
            ValueError too).
    """
    s = config.stock
    s.sr_type = parse_sr_type(s.sr_type)

    for name in ('R0', 'h', 'phi0'):
        value = getattr(s, name)
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"stock.{name} must be a number, got {value!r}") from None
        if not np.isfinite(number):
            raise ValueError(f"stock.{name} must be finite, got {value!r}")
        setattr(s, name, number)

    if s.R0 <= 0:
        raise ValueError(f"stock.R0 must be positive, got {s.R0}")
    if s.phi0 <= 0:
        raise ValueError(f"stock.phi0 must be positive, got {s.phi0}")

    if s.sr_type != SRType.CONSTANT:
        if s.h <= 0:
            raise ValueError(f"stock.h must be positive, got {s.h}")
        # Either tag can reach either formula depending on legacy_dispatch
        if s.h in (BEVHOLT_SINGULAR_H, RICKER_SINGULAR_H):
            raise ValueError(
                f"stock.h={s.h} is a singular steepness value"
            )
        if not (0.2 < s.h <= 1.0):
            warnings.warn(
                f"stock.h={s.h} is outside the conventional steepness "
                f"range (0.2, 1]",
                stacklevel=2,
            )

    if not isinstance(config.recruitment.legacy_dispatch, bool):
        raise ValueError(
            f"recruitment.legacy_dispatch must be true or false, "
            f"got {config.recruitment.legacy_dispatch!r}"
        )


def _read_layer(path: Path) -> Dict:
    with open(path) as f:
        layer = yaml.safe_load(f) or {}
    if not isinstance(layer, dict):
        raise ValueError(f"{path}: top level must be a mapping of sections")
    return layer


def load_config(
    base_path: Union[str, Path],
    scenario_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict] = None,
) -> ModelConfig:
    """Load a stock configuration, layering base → scenario → overrides.

    Args:
        base_path: Path to base configuration YAML.
        scenario_path: Optional scenario override YAML (skipped if missing).
        overrides: Optional dict of overrides applied last.

    Returns:
        Validated ModelConfig.

    Raises:
        FileNotFoundError: If base_path doesn't exist.
        ValueError: If a layer is malformed or validation fails.
    """
    base_path = Path(base_path)
    if not base_path.exists():
        raise FileNotFoundError(f"Config file not found: {base_path}")

    layers = [_read_layer(base_path)]
    if scenario_path is not None and Path(scenario_path).exists():
        layers.append(_read_layer(Path(scenario_path)))
    if overrides:
        layers.append(overrides)

    merged: Dict = {}
    for layer in layers:
        deep_merge(merged, layer)

    config = _yaml_to_config(merged)
    validate_config(config)
    return config


def default_config() -> ModelConfig:
    """Return a ModelConfig with all default values."""
    config = ModelConfig()
    validate_config(config)
    return config
