"""Configuration loading, schema, and defaults."""

from greatreview.config.loader import ConfigError, load_config
from greatreview.config.schema import GreatReviewConfig

__all__ = [
    "ConfigError",
    "GreatReviewConfig",
    "load_config",
]
