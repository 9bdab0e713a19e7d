"""Configuration validation for the block-world planner."""

import logging
from omegaconf import DictConfig

logger = logging.getLogger(__name__)

WEIGHT_KEYS = (
    'per_object_above',
    'base_empty_arm',
    'base_holding',
    'under_empty_arm',
    'under_holding',
)


class ConfigValidationError(Exception):
    """Exception raised when configuration validation fails."""
    pass


def validate_config(config: DictConfig) -> None:
    """Validate the complete configuration.

    Args:
        config: Configuration to validate

    Raises:
        ConfigValidationError: If validation fails
    """
    try:
        validate_planner_config(config.get('planner', {}))
        validate_search_config(config.get('search', {}))
        validate_heuristics_config(config.get('heuristics', {}))

        logger.info("Configuration validation passed")

    except Exception as e:
        raise ConfigValidationError(f"Configuration validation failed: {e}")


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_planner_config(planner_config: DictConfig) -> None:
    """Validate planner configuration section."""
    if not planner_config:
        return

    timeout = planner_config.get('timeout_seconds', 5.0)
    if not _is_number(timeout) or timeout < 0:
        raise ConfigValidationError(
            f"timeout_seconds must be non-negative number, got {timeout}"
        )

    message = planner_config.get('already_true_message', "That is already true!")
    if not isinstance(message, str) or not message:
        raise ConfigValidationError(
            f"already_true_message must be a non-empty string, got {message!r}"
        )


def validate_search_config(search_config: DictConfig) -> None:
    """Validate search configuration section."""
    if not search_config:
        return

    max_time = search_config.get('max_computation_time', 5.0)
    if not _is_number(max_time) or max_time < 0:
        raise ConfigValidationError(
            f"search.max_computation_time must be non-negative number, got {max_time}"
        )


def validate_heuristics_config(heuristics_config: DictConfig) -> None:
    """Validate heuristic weights.

    Weights are small non-negative integers; unknown keys are reported but
    tolerated.
    """
    if not heuristics_config:
        return

    weights = heuristics_config.get('weights', {})
    if not weights:
        return

    for key, value in weights.items():
        if key not in WEIGHT_KEYS:
            logger.warning(f"Unknown heuristic weight '{key}' is ignored")
            continue
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ConfigValidationError(
                f"heuristics.weights.{key} must be non-negative integer, got {value}"
            )

    if weights.get('base_holding', 2) < weights.get('base_empty_arm', 1):
        logger.warning("heuristics.weights.base_holding is lower than base_empty_arm")
