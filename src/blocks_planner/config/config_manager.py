"""Hydra-backed loading of the planner configuration.

One composed configuration is kept module-wide. Planner, searcher and
heuristic factories look their settings up through ``get_parameter`` and use
their built-in defaults while nothing has been loaded.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra
from omegaconf import DictConfig, OmegaConf

from .validators import validate_config

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[3] / "conf"

_active_config: Optional[DictConfig] = None


class ConfigManager:
    """Composes a configuration from a directory of YAML files."""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Args:
            config_dir: Directory holding ``config.yaml``; the bundled ``conf``
                directory when omitted.

        Raises:
            FileNotFoundError: If the directory does not exist.
        """
        self.config_dir = Path(config_dir or DEFAULT_CONFIG_DIR).resolve()
        self.config: Optional[DictConfig] = None

        if not self.config_dir.is_dir():
            raise FileNotFoundError(f"Configuration directory not found: {self.config_dir}")

    def load_config(self, config_name: str = "config",
                    overrides: Optional[List[str]] = None,
                    validate: bool = True) -> DictConfig:
        """Compose ``config_name`` with command-line style overrides.

        The result becomes the active configuration seen by ``get_config`` and
        ``get_parameter``.

        Args:
            config_name: Primary YAML file, without extension
            overrides: Entries such as ``planner.timeout_seconds=2``
            validate: Check value ranges before activating the result

        Raises:
            ConfigValidationError: If validation is requested and fails.
        """
        global _active_config

        # Hydra refuses to initialize twice in one process
        GlobalHydra.instance().clear()
        with initialize_config_dir(config_dir=str(self.config_dir), version_base=None):
            cfg = compose(config_name=config_name, overrides=overrides or [])

        if validate:
            validate_config(cfg)

        self.config = cfg
        _active_config = cfg
        logger.info(f"Loaded configuration '{config_name}' from {self.config_dir}")
        if overrides:
            logger.debug(f"Configuration overrides: {overrides}")
        return cfg


def load_config(config_name: str = "config",
                overrides: Optional[List[str]] = None,
                config_dir: Optional[Union[str, Path]] = None,
                validate: bool = True) -> DictConfig:
    """Load and activate a configuration in one call."""
    return ConfigManager(config_dir).load_config(config_name, overrides, validate)


def get_config() -> Optional[DictConfig]:
    return _active_config


def reset_config() -> None:
    """Drop the active configuration; components go back to their defaults."""
    global _active_config
    _active_config = None


def get_parameter(key: str, default: Any = None) -> Any:
    """Look up a dotted key in the active configuration.

    Returns ``default`` when the key is absent or nothing is loaded.
    """
    if _active_config is None:
        return default
    return OmegaConf.select(_active_config, key, default=default)
