"""Configuration management.

This module handles configuration loading and validation.
"""

from __future__ import annotations

from magnetize.config.config import ConfigManager, get_config, init_config
from magnetize.models import Config

__all__ = [
    "Config",
    "ConfigManager",
    "get_config",
    "init_config",
]
