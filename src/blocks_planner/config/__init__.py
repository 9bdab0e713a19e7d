"""Configuration management for the block-world planner.

This module provides Hydra-based configuration management with runtime
override capabilities. Components fall back to built-in defaults while no
configuration is loaded.
"""

from .config_manager import ConfigManager, load_config, get_config, get_parameter, reset_config
from .validators import validate_config, ConfigValidationError

__all__ = [
    'ConfigManager',
    'load_config',
    'get_config',
    'get_parameter',
    'reset_config',
    'validate_config',
    'ConfigValidationError'
]
