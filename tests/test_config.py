"""Tests for stockrecruit.config — configuration loading and validation."""

import pytest
import yaml

from stockrecruit.config import (
    ModelConfig,
    RecruitmentSection,
    StockSection,
    deep_merge,
    default_config,
    load_config,
    parse_sr_type,
    validate_config,
)
from stockrecruit.types import SRType, UnknownStockRecruitType


def _write_yaml(path, content):
    with open(path, 'w') as f:
        yaml.dump(content, f)
    return path


# ── deep_merge tests ──────────────────────────────────────────────────

class TestDeepMerge:
    def test_simple_override(self):
        assert deep_merge({'a': 1, 'b': 2}, {'b': 3}) == {'a': 1, 'b': 3}

    def test_nested_merge(self):
        base = {'stock': {'R0': 1000.0, 'h': 0.7}, 'recruitment': {}}
        result = deep_merge(base, {'stock': {'h': 0.5}})
        assert result == {'stock': {'R0': 1000.0, 'h': 0.5}, 'recruitment': {}}

    def test_override_dict_with_scalar(self):
        assert deep_merge({'a': {'nested': 1}}, {'a': 'replaced'}) == {'a': 'replaced'}

    def test_empty_override(self):
        assert deep_merge({'a': 1}, {}) == {'a': 1}


# ── default_config tests ─────────────────────────────────────────────

class TestDefaultConfig:
    def test_creates_valid_config(self):
        assert isinstance(default_config(), ModelConfig)

    def test_default_values(self):
        config = default_config()
        assert config.stock.R0 == 1000.0
        assert config.stock.h == 0.7
        assert config.stock.sr_type is SRType.BEVHOLT
        assert config.recruitment.legacy_dispatch is True


# ── sr_type parsing ──────────────────────────────────────────────────

class TestParseSRType:
    @pytest.mark.parametrize("value,expected", [
        ('RICKER', SRType.RICKER),
        ('bevholt', SRType.BEVHOLT),
        (' Constant ', SRType.CONSTANT),
        (1, SRType.RICKER),
        (SRType.BEVHOLT, SRType.BEVHOLT),
    ])
    def test_valid(self, value, expected):
        assert parse_sr_type(value) is expected

    @pytest.mark.parametrize("value", ['SHEPHERD', 7])
    def test_invalid(self, value):
        with pytest.raises(UnknownStockRecruitType):
            parse_sr_type(value)


# ── YAML loading tests ───────────────────────────────────────────────

class TestLoadConfig:
    def test_load_from_yaml(self, tmp_path):
        path = _write_yaml(tmp_path / "stock.yaml", {
            'stock': {'R0': 500.0, 'h': 0.6, 'phi0': 3.0, 'sr_type': 'RICKER'},
        })
        config = load_config(path)
        assert config.stock.R0 == 500.0
        assert config.stock.phi0 == 3.0
        assert config.stock.sr_type is SRType.RICKER
        # Unspecified sections get defaults
        assert config.recruitment.legacy_dispatch is True

    def test_integer_sr_type(self, tmp_path):
        path = _write_yaml(tmp_path / "stock.yaml", {'stock': {'sr_type': 0}})
        assert load_config(path).stock.sr_type is SRType.CONSTANT

    def test_scenario_override(self, tmp_path):
        base = _write_yaml(tmp_path / "base.yaml", {
            'stock': {'R0': 1000.0, 'h': 0.7, 'phi0': 2.0},
        })
        scenario = _write_yaml(tmp_path / "scenario.yaml", {
            'stock': {'h': 0.5},
            'recruitment': {'legacy_dispatch': False},
        })
        config = load_config(base, scenario_path=scenario)
        assert config.stock.h == 0.5
        assert config.stock.R0 == 1000.0  # unchanged
        assert config.recruitment.legacy_dispatch is False

    def test_missing_scenario_ignored(self, tmp_path):
        base = _write_yaml(tmp_path / "base.yaml", {'stock': {'h': 0.6}})
        config = load_config(base, scenario_path=tmp_path / "nope.yaml")
        assert config.stock.h == 0.6

    def test_overrides_applied_last(self, tmp_path):
        base = _write_yaml(tmp_path / "base.yaml", {'stock': {'R0': 1000.0}})
        config = load_config(base, overrides={'stock': {'R0': 42.0}})
        assert config.stock.R0 == 42.0

    def test_unknown_keys_ignored(self, tmp_path):
        path = _write_yaml(tmp_path / "stock.yaml", {
            'stock': {'R0': 800.0, 'sigma_r': 0.6},
            'fishery': {'F': 0.2},
        })
        assert load_config(path).stock.R0 == 800.0

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path).stock.R0 == 1000.0

    def test_layer_order(self, tmp_path):
        """Overrides beat the scenario, which beats the base."""
        base = _write_yaml(tmp_path / "base.yaml", {
            'stock': {'R0': 1000.0, 'h': 0.7, 'phi0': 2.0},
        })
        scenario = _write_yaml(tmp_path / "scenario.yaml", {
            'stock': {'R0': 500.0, 'h': 0.5},
        })
        config = load_config(base, scenario_path=scenario,
                             overrides={'stock': {'h': 0.9}})
        assert (config.stock.R0, config.stock.h, config.stock.phi0) == (500.0, 0.9, 2.0)

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- R0\n- h\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    @pytest.mark.parametrize("field_name", ['R0', 'h', 'phi0'])
    def test_non_numeric_value(self, tmp_path, field_name):
        path = _write_yaml(tmp_path / "stock.yaml", {'stock': {field_name: 'abc'}})
        with pytest.raises(ValueError, match=f"stock.{field_name} must be a number"):
            load_config(path)

    def test_numeric_strings_coerced(self, tmp_path):
        path = _write_yaml(tmp_path / "stock.yaml", {'stock': {'R0': '750', 'phi0': '2.5'}})
        config = load_config(path)
        assert config.stock.R0 == 750.0
        assert config.stock.phi0 == 2.5

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")


# ── validation tests ─────────────────────────────────────────────────

class TestValidateConfig:
    def _config(self, **stock):
        return ModelConfig(stock=StockSection(**stock), recruitment=RecruitmentSection())

    @pytest.mark.parametrize("stock", [
        {'R0': 0.0},
        {'R0': -10.0},
        {'phi0': 0.0},
        {'h': 0.0},
        {'h': 0.2},
        {'h': 2.0},
    ])
    def test_invalid(self, stock):
        with pytest.raises(ValueError):
            validate_config(self._config(**stock))

    def test_unknown_type(self):
        with pytest.raises(UnknownStockRecruitType):
            validate_config(self._config(sr_type='SHEPHERD'))

    def test_constant_skips_steepness(self):
        validate_config(self._config(h=0.2, sr_type=SRType.CONSTANT))

    def test_high_steepness_warns(self):
        with pytest.warns(UserWarning, match="steepness"):
            validate_config(self._config(h=1.5))

    def test_legacy_dispatch_must_be_bool(self):
        config = default_config()
        config.recruitment.legacy_dispatch = "yes"
        with pytest.raises(ValueError):
            validate_config(config)
