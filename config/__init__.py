"""Configuration management."""

from .config_manager import ConfigManager, parse_config, validate_config
from .models import (
    AppConfig,
    EncodingConfig,
    LayoutConfig,
    LoggingConfig,
    MetricDomain,
    PresentationConfig,
    RenderConfig,
)

__all__ = [
    "ConfigManager",
    "parse_config",
    "validate_config",
    "AppConfig",
    "EncodingConfig",
    "LayoutConfig",
    "LoggingConfig",
    "MetricDomain",
    "PresentationConfig",
    "RenderConfig",
]
