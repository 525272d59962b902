"""Configuration loading for the sheet engine."""

import os

import yaml

from .models import (
    DEFAULT_COLOR,
    DEFAULT_COLUMN_WIDTH,
    DEFAULT_FONT_SIZE,
    DEFAULT_ROW_HEIGHT,
    MIN_COLUMN_WIDTH,
    MIN_ROW_HEIGHT,
)

DEFAULT_CONFIG = {
    "default_column_width": DEFAULT_COLUMN_WIDTH,
    "min_column_width": MIN_COLUMN_WIDTH,
    "default_row_height": DEFAULT_ROW_HEIGHT,
    "min_row_height": MIN_ROW_HEIGHT,
    "default_font_size": DEFAULT_FONT_SIZE,
    "default_color": DEFAULT_COLOR,
    "log_level": "INFO",
}


def load_config(config_path=None):
    """Load configuration from a YAML file, falling back to defaults."""
    config = dict(DEFAULT_CONFIG)
    if config_path and os.path.exists(config_path):
        with open(config_path, "r") as f:
            user_config = yaml.safe_load(f) or {}
        unknown = set(user_config) - set(DEFAULT_CONFIG)
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        config.update(user_config)
    return config
