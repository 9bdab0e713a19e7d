"""Block-world state graph generated on the fly.

Nodes wrap an immutable ``WorldState`` plus the action that produced it.
Edges are the four primitive arm actions, each costing one unit.
"""

from dataclasses import dataclass, field
from typing import List

from blocks_planner.core.data_models import WorldState
from blocks_planner.search.graph import Edge, Graph
from blocks_planner.world.physics import can_drop, can_pick

PICK = 'p'
DROP = 'd'
LEFT = 'l'
RIGHT = 'r'

ACTIONS = (PICK, DROP, LEFT, RIGHT)

ACTION_COST = 1.0


def possible_moves(state: WorldState) -> List[str]:
    """Return the actions that are physically valid in ``state``."""
    moves = []
    if can_pick(state):
        moves.append(PICK)
    elif can_drop(state):
        moves.append(DROP)
    if state.arm > 0:
        moves.append(LEFT)
    if state.arm < state.stack_count - 1:
        moves.append(RIGHT)
    return moves


def apply_action(state: WorldState, move: str) -> WorldState:
    """Return the snapshot produced by performing ``move`` in ``state``.

    Raises:
        ValueError: If the move is unknown or not valid in ``state``.
    """
    if move not in possible_moves(state):
        if move not in ACTIONS:
            raise ValueError(f"Unknown action: {move!r}")
        raise ValueError(f"Action {move!r} is not possible in {state}")
    return _perform(state, move)


def _perform(state: WorldState, move: str) -> WorldState:
    if move == LEFT:
        return state.replace(arm=state.arm - 1)
    if move == RIGHT:
        return state.replace(arm=state.arm + 1)

    stacks = [list(stack) for stack in state.stacks]
    if move == PICK:
        held = stacks[state.arm].pop()
        return state.replace(stacks=stacks, holding=held)

    stacks[state.arm].append(state.holding)
    return state.replace(stacks=stacks, holding=None)


def apply_plan(state: WorldState, moves: List[str]) -> WorldState:
    """Replay a sequence of actions from ``state``."""
    for move in moves:
        state = apply_action(state, move)
    return state


@dataclass(frozen=True)
class StateNode:
    """Search node: a world snapshot and the move that reached it.

    Equality and hashing only consider the snapshot, so a configuration
    regenerated through a different move is the same node.
    """
    state: WorldState
    move: str = field(default='', compare=False)


class StateGraph(Graph[StateNode]):
    """Graph over world snapshots whose edges are the primitive actions."""

    def outgoing_edges(self, node: StateNode) -> List[Edge[StateNode]]:
        edges = []
        for move in possible_moves(node.state):
            target = StateNode(state=_perform(node.state, move), move=move)
            edges.append(Edge(source=node, target=target, cost=ACTION_COST))
        return edges

    def node_key(self, node: StateNode) -> WorldState:
        return node.state
