"""
Unit tests for configuration loading and validation.

Tests:
- Loading base + environment + secrets with deep merge
- Defaults when sections are missing
- Validation failures raise ConfigurationError
"""

from pathlib import Path

import pytest
import yaml

from config.config_manager import ConfigManager, parse_config, validate_config
from config.models import AppConfig, EncodingConfig, MetricDomain
from cityscape.domain.exceptions import ConfigurationError, FatalError

REPO_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


def write_yaml(path: Path, data: dict) -> None:
    path.write_text(yaml.safe_dump(data))


class TestConfigManager:
    """Tests for ConfigManager.load()."""

    def test_repository_config_matches_defaults(self) -> None:
        """Shipped base.yaml parses to the dataclass defaults."""
        config = ConfigManager(config_dir=REPO_CONFIG_DIR, env="none").load()
        defaults = AppConfig()

        assert config.layout == defaults.layout
        assert config.encoding == defaults.encoding
        assert config.render == defaults.render
        assert config.presentation == defaults.presentation

    def test_dev_override(self) -> None:
        """dev.yaml raises the log level only."""
        config = ConfigManager(config_dir=REPO_CONFIG_DIR, env="dev").load()
        assert config.logging.level == "DEBUG"
        assert config.layout.extent == 100.0

    def test_missing_base_raises(self, tmp_path) -> None:
        """No base.yaml is a hard error."""
        with pytest.raises(FileNotFoundError):
            ConfigManager(config_dir=tmp_path).load()

    def test_deep_merge_order(self, tmp_path) -> None:
        """env overrides base, secrets override env, siblings survive."""
        write_yaml(tmp_path / "base.yaml", {"layout": {"extent": 50.0, "padding": 0.01}})
        write_yaml(tmp_path / "test.yaml", {"layout": {"extent": 80.0}})
        write_yaml(tmp_path / "secrets.yaml", {"layout": {"padding": 0.02}})

        config = ConfigManager(config_dir=tmp_path, env="test").load()

        assert config.layout.extent == 80.0
        assert config.layout.padding == 0.02
        assert config.raw["layout"] == {"extent": 80.0, "padding": 0.02}

    def test_empty_base_uses_defaults(self, tmp_path) -> None:
        """An empty file yields the default config."""
        (tmp_path / "base.yaml").write_text("")
        config = ConfigManager(config_dir=tmp_path).load()
        assert config.layout == AppConfig().layout


class TestParseConfig:
    """Tests for parse_config()."""

    def test_domain_forms(self) -> None:
        """Domains accept pairs and min/max mappings."""
        config = parse_config({
            "encoding": {
                "domains": {"pe": [0, 100], "pb": {"min": 1, "max": 5}},
                "market_cap_domain": {"min": 1e8, "max": 1e12},
            }
        })
        assert config.encoding.domains["pe"] == MetricDomain(0.0, 100.0)
        assert config.encoding.domains["pb"] == MetricDomain(1.0, 5.0)
        assert config.encoding.domains["relative_volume"] == MetricDomain(0.5, 10.0)
        assert config.encoding.market_cap_domain == MetricDomain(1e8, 1e12)

    def test_partial_palette_keeps_other_colors(self) -> None:
        """Overriding one color leaves the rest."""
        config = parse_config({"encoding": {"palette": {"neutral": "#000000"}}})
        assert config.encoding.palette["neutral"] == "#000000"
        assert config.encoding.palette["strong_positive"] == "#16a34a"

    @pytest.mark.parametrize(
        "raw",
        [
            {"layout": {"extent": 0}},
            {"layout": {"extent": -1}},
            {"layout": {"extent": "wide"}},
            {"layout": {"padding": 0.5}},
            {"layout": {"epsilon": 0}},
            {"encoding": {"height_range": [20, 1]}},
            {"encoding": {"domains": {"pe": [60, 5]}}},
            {"encoding": {"domains": {"pe": [1]}}},
            {"encoding": {"market_cap_scale": "sqrt"}},
            {"encoding": {"market_cap_scale": "log", "market_cap_domain": [0, 1e12]}},
            {"encoding": {"default_height_metric": "ev"}},
            {"encoding": {"default_color_metric": "beta"}},
            {"encoding": {"medium_threshold": 0.05, "strong_threshold": 0.03}},
            {"encoding": {"palette": {"neutral": "grey"}}},
            {"render": {"shrink": 0}},
            {"render": {"shrink": 1.5}},
            {"presentation": {"nested_levels": 0}},
        ],
    )
    def test_invalid_values_raise(self, raw) -> None:
        """Configuration misuse fails fast."""
        with pytest.raises(ConfigurationError):
            parse_config(raw)

    def test_configuration_error_is_fatal(self) -> None:
        """ConfigurationError sits under FatalError."""
        with pytest.raises(FatalError):
            parse_config({"layout": {"extent": 0}})


class TestValidateConfig:
    """Tests for validate_config() on directly built configs."""

    def test_defaults_pass(self) -> None:
        """The default config is valid."""
        validate_config(AppConfig())

    @pytest.mark.parametrize("metric", ["pe", "pb", "yield", "relative_volume"])
    def test_missing_height_domain_raises(self, metric) -> None:
        """Each clamped height metric must have a domain."""
        domains = dict(EncodingConfig().domains)
        del domains[metric]
        with pytest.raises(ConfigurationError, match=metric):
            validate_config(AppConfig(encoding=EncodingConfig(domains=domains)))

    def test_degenerate_domain_raises(self) -> None:
        """min == max is rejected."""
        domains = dict(EncodingConfig().domains, pb=MetricDomain(2.0, 2.0))
        with pytest.raises(ConfigurationError):
            validate_config(AppConfig(encoding=EncodingConfig(domains=domains)))
