"""Block-world physics and state graph."""

from .physics import can_support, can_drop, can_pick
from .state_graph import (
    PICK, DROP, LEFT, RIGHT, ACTIONS, StateNode, StateGraph,
    possible_moves, apply_action, apply_plan
)

__all__ = [
    'can_support',
    'can_drop',
    'can_pick',
    'PICK',
    'DROP',
    'LEFT',
    'RIGHT',
    'ACTIONS',
    'StateNode',
    'StateGraph',
    'possible_moves',
    'apply_action',
    'apply_plan'
]
