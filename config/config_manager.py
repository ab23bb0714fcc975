"""
Configuration manager with environment-based loading.

Supports:
- Base configuration (base.yaml)
- Environment-specific overrides (dev.yaml, test.yaml, ...)
- Secrets loading (secrets.yaml - gitignored)
"""

from __future__ import annotations
import math
from pathlib import Path
from typing import Dict, Any, Tuple
import yaml
import logging

from cityscape.domain.encoding.metrics import ColorMetric, HeightMetric, PerformanceTier
from cityscape.domain.exceptions import ConfigurationError
from cityscape.models.color import Color

from .models import (
    AppConfig,
    EncodingConfig,
    LayoutConfig,
    LoggingConfig,
    MetricDomain,
    PresentationConfig,
    RenderConfig,
)


logger = logging.getLogger(__name__)

VALID_MARKET_CAP_SCALES = ("linear", "log")


class ConfigManager:
    """
    Configuration manager with environment support.

    Loads configuration in this order:
    1. base.yaml (default config)
    2. {env}.yaml (environment-specific, e.g., dev.yaml)
    3. secrets.yaml (if exists, gitignored)

    Later configs override earlier ones.
    """

    def __init__(self, config_dir: str | Path = "config", env: str = "dev"):
        """
        Initialize config manager.

        Args:
            config_dir: Directory containing config files.
            env: Environment name (dev, prod, etc).
        """
        self.config_dir = Path(config_dir)
        self.env = env
        self.config: Dict[str, Any] = {}

    def load(self) -> AppConfig:
        """
        Load configuration from YAML files.

        Returns:
            AppConfig object.

        Raises:
            FileNotFoundError: If base config not found.
            ConfigurationError: If config is invalid.
        """
        base_path = self.config_dir / "base.yaml"
        if not base_path.exists():
            raise FileNotFoundError(f"Base config not found: {base_path}")

        self.config = self._load_yaml(base_path)
        logger.info(f"Loaded base config from {base_path}")

        env_path = self.config_dir / f"{self.env}.yaml"
        if env_path.exists():
            env_config = self._load_yaml(env_path)
            self.config = self._merge_dicts(self.config, env_config)
            logger.info(f"Loaded {self.env} config from {env_path}")

        secrets_path = self.config_dir / "secrets.yaml"
        if secrets_path.exists():
            secrets = self._load_yaml(secrets_path)
            self.config = self._merge_dicts(self.config, secrets)
            logger.info("Loaded secrets")

        return parse_config(self.config)

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load YAML file."""
        with open(path, "r") as f:
            return yaml.safe_load(f) or {}

    def _merge_dicts(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts (override wins)."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result


def parse_config(raw: Dict[str, Any]) -> AppConfig:
    """
    Parse a raw (merged) config dict into AppConfig.

    Missing sections and keys fall back to the dataclass defaults.

    Raises:
        ConfigurationError: If any value has the wrong shape or is out of range.
    """
    try:
        layout_raw = raw.get("layout", {}) or {}
        layout_defaults = LayoutConfig()
        layout = LayoutConfig(
            extent=float(layout_raw.get("extent", layout_defaults.extent)),
            padding=float(layout_raw.get("padding", layout_defaults.padding)),
            epsilon=float(layout_raw.get("epsilon", layout_defaults.epsilon)),
        )

        enc_raw = raw.get("encoding", {}) or {}
        enc_defaults = EncodingConfig()
        domains = dict(enc_defaults.domains)
        for name, bounds in (enc_raw.get("domains", {}) or {}).items():
            domains[name] = _parse_domain(bounds)

        palette = dict(enc_defaults.palette)
        palette.update(enc_raw.get("palette", {}) or {})

        encoding = EncodingConfig(
            height_range=_parse_pair(enc_raw.get("height_range", enc_defaults.height_range)),
            domains=domains,
            market_cap_domain=_parse_domain(
                enc_raw.get("market_cap_domain", enc_defaults.market_cap_domain)
            ),
            market_cap_height_range=_parse_pair(
                enc_raw.get("market_cap_height_range", enc_defaults.market_cap_height_range)
            ),
            market_cap_scale=str(enc_raw.get("market_cap_scale", enc_defaults.market_cap_scale)),
            default_height_metric=str(
                enc_raw.get("default_height_metric", enc_defaults.default_height_metric)
            ),
            default_color_metric=str(
                enc_raw.get("default_color_metric", enc_defaults.default_color_metric)
            ),
            medium_threshold=float(enc_raw.get("medium_threshold", enc_defaults.medium_threshold)),
            strong_threshold=float(enc_raw.get("strong_threshold", enc_defaults.strong_threshold)),
            palette=palette,
            yield_hue=float(enc_raw.get("yield_hue", enc_defaults.yield_hue)),
            yield_saturation=float(enc_raw.get("yield_saturation", enc_defaults.yield_saturation)),
            yield_domain=_parse_domain(enc_raw.get("yield_domain", enc_defaults.yield_domain)),
            yield_lightness=_parse_pair(enc_raw.get("yield_lightness", enc_defaults.yield_lightness)),
            debt_domain=_parse_domain(enc_raw.get("debt_domain", enc_defaults.debt_domain)),
            debt_hue=_parse_pair(enc_raw.get("debt_hue", enc_defaults.debt_hue)),
            debt_saturation=float(enc_raw.get("debt_saturation", enc_defaults.debt_saturation)),
            debt_lightness=float(enc_raw.get("debt_lightness", enc_defaults.debt_lightness)),
        )

        render_raw = raw.get("render", {}) or {}
        render = RenderConfig(shrink=float(render_raw.get("shrink", RenderConfig().shrink)))

        pres_raw = raw.get("presentation", {}) or {}
        pres_defaults = PresentationConfig()
        presentation = PresentationConfig(
            min_label_size=float(pres_raw.get("min_label_size", pres_defaults.min_label_size)),
            label_font_divisor=float(
                pres_raw.get("label_font_divisor", pres_defaults.label_font_divisor)
            ),
            hover_lift=float(pres_raw.get("hover_lift", pres_defaults.hover_lift)),
            nested_levels=int(pres_raw.get("nested_levels", pres_defaults.nested_levels)),
            header_height=float(pres_raw.get("header_height", pres_defaults.header_height)),
        )

        logging_raw = raw.get("logging", {}) or {}
        log_defaults = LoggingConfig()
        logging_config = LoggingConfig(
            level=str(logging_raw.get("level", log_defaults.level)),
            json=bool(logging_raw.get("json", log_defaults.json)),
            file=str(logging_raw.get("file", log_defaults.file) or ""),
            console=bool(logging_raw.get("console", log_defaults.console)),
            timezone=str(logging_raw.get("timezone", log_defaults.timezone)),
        )
    except ConfigurationError:
        raise
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigurationError(f"Failed to parse config: {e}") from e

    config = AppConfig(
        layout=layout,
        encoding=encoding,
        render=render,
        presentation=presentation,
        logging=logging_config,
        raw=raw,
    )
    validate_config(config)
    return config


def validate_config(config: AppConfig) -> None:
    """
    Check value ranges that cannot be recovered from at render time.

    Raises:
        ConfigurationError: On the first invalid value.
    """
    layout = config.layout
    if not math.isfinite(layout.extent) or layout.extent <= 0:
        raise ConfigurationError(f"layout.extent must be positive (got: {layout.extent!r})")
    if not 0.0 <= layout.padding < 0.5:
        raise ConfigurationError(f"layout.padding must be in [0, 0.5) (got: {layout.padding!r})")
    if layout.epsilon <= 0:
        raise ConfigurationError(f"layout.epsilon must be positive (got: {layout.epsilon!r})")

    enc = config.encoding
    _check_range("encoding.height_range", enc.height_range)
    _check_range("encoding.market_cap_height_range", enc.market_cap_height_range)
    for metric in HeightMetric:
        if metric is not HeightMetric.MARKET_CAP and metric.value not in enc.domains:
            raise ConfigurationError(f"encoding.domains is missing {metric.value!r}")
    for name, domain in enc.domains.items():
        _check_domain(f"encoding.domains.{name}", domain)
    _check_domain("encoding.market_cap_domain", enc.market_cap_domain)
    _check_domain("encoding.yield_domain", enc.yield_domain)
    _check_domain("encoding.debt_domain", enc.debt_domain)
    if enc.market_cap_scale not in VALID_MARKET_CAP_SCALES:
        raise ConfigurationError(
            f"encoding.market_cap_scale must be one of {VALID_MARKET_CAP_SCALES} "
            f"(got: {enc.market_cap_scale!r})"
        )
    if enc.market_cap_scale == "log" and enc.market_cap_domain.min <= 0:
        raise ConfigurationError("encoding.market_cap_domain.min must be positive for log scale")
    if enc.default_height_metric not in {m.value for m in HeightMetric}:
        raise ConfigurationError(
            f"encoding.default_height_metric is not a height metric (got: {enc.default_height_metric!r})"
        )
    if enc.default_color_metric not in {m.value for m in ColorMetric}:
        raise ConfigurationError(
            f"encoding.default_color_metric is not a color metric (got: {enc.default_color_metric!r})"
        )
    if not 0 <= enc.medium_threshold < enc.strong_threshold:
        raise ConfigurationError(
            "encoding thresholds must satisfy 0 <= medium_threshold < strong_threshold"
        )
    for tier in PerformanceTier:
        hex_color = enc.palette.get(tier.value)
        if hex_color is None:
            raise ConfigurationError(f"encoding.palette is missing {tier.value!r}")
        try:
            Color.from_hex(str(hex_color))
        except ValueError as e:
            raise ConfigurationError(f"encoding.palette.{tier.value}: {e}") from e

    if not 0 < config.render.shrink <= 1:
        raise ConfigurationError(f"render.shrink must be in (0, 1] (got: {config.render.shrink!r})")
    if config.presentation.nested_levels < 1:
        raise ConfigurationError("presentation.nested_levels must be at least 1")


def _parse_domain(value: Any) -> MetricDomain:
    if isinstance(value, MetricDomain):
        return value
    if isinstance(value, dict):
        return MetricDomain(float(value["min"]), float(value["max"]))
    low, high = _parse_pair(value)
    return MetricDomain(low, high)


def _parse_pair(value: Any) -> Tuple[float, float]:
    low, high = value
    return float(low), float(high)


def _check_range(path: str, bounds: Tuple[float, float]) -> None:
    low, high = bounds
    if not (math.isfinite(low) and math.isfinite(high)) or low >= high:
        raise ConfigurationError(f"{path} must satisfy min < max (got: {bounds!r})")


def _check_domain(path: str, domain: MetricDomain) -> None:
    _check_range(path, (domain.min, domain.max))
