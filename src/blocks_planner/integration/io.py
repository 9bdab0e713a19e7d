"""Loading and saving world snapshots as JSON."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from blocks_planner.core.data_models import WorldState

logger = logging.getLogger(__name__)


def world_from_json(text: str) -> WorldState:
    """Parse one world document.

    Raises:
        ValueError: If the JSON is malformed or the snapshot inconsistent.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid world JSON: {e}") from e
    return WorldState.from_dict(data)


def load_world(path: Union[str, Path]) -> WorldState:
    """Load a single world snapshot from a JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"World file not found: {path}")
    with open(path, 'r') as f:
        return world_from_json(f.read())


def load_worlds(path: Union[str, Path]) -> Dict[str, WorldState]:
    """Load a JSON file mapping world names to snapshots.

    Entries that fail to parse are reported and skipped.

    Raises:
        ValueError: If the file does not hold a JSON object.
    """
    path = Path(path)
    with open(path, 'r') as f:
        documents: Mapping[str, Any] = json.load(f)
    if not isinstance(documents, Mapping):
        raise ValueError(f"Expected a JSON object of named worlds in {path}")

    worlds = {}
    for name, data in documents.items():
        try:
            worlds[name] = WorldState.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping world '{name}' in {path}: {e}")
    return worlds


def save_world(state: WorldState, path: Union[str, Path]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(state.to_dict(), f, indent=2)
