"""World snapshot I/O."""

from .io import world_from_json, load_world, load_worlds, save_world

__all__ = [
    'world_from_json',
    'load_world',
    'load_worlds',
    'save_world'
]
