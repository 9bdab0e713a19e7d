"""Shared world fixtures for planner tests."""

from collections import deque

import pytest

from blocks_planner.config import reset_config
from blocks_planner.core.data_models import ObjectAttributes, WorldState, parse_formula
from blocks_planner.planning.goal import formula_holds
from blocks_planner.world.state_graph import StateGraph, StateNode


def make_world(stacks, objects, arm=0, holding=None) -> WorldState:
    """Build a validated snapshot from plain lists and attribute tuples."""
    return WorldState.from_dict({
        'stacks': stacks,
        'arm': arm,
        'holding': holding,
        'objects': {
            name: {'form': form, 'size': size, 'color': color}
            for name, (form, size, color) in objects.items()
        },
    })


BRICKS = {
    'a': ('brick', 'large', 'red'),
    'b': ('brick', 'large', 'green'),
    'c': ('brick', 'large', 'blue'),
}

FORMS = ('brick', 'box', 'ball', 'pyramid')
SIZES = ('small', 'large')


def random_world(rng, names='abc', columns=(3, 4), any_form=True):
    """Scatter ``names`` over a few stacks, sometimes leaving one in the arm."""
    stack_count = int(rng.integers(columns[0], columns[1] + 1))
    order = [str(name) for name in rng.permutation(list(names))]
    holding = order.pop() if rng.random() < 0.3 else None
    stacks = [[] for _ in range(stack_count)]
    for name in order:
        stacks[int(rng.integers(0, stack_count))].append(name)
    objects = {
        name: (FORMS[int(rng.integers(0, len(FORMS)))] if any_form else 'brick',
               SIZES[int(rng.integers(0, len(SIZES)))], 'red')
        for name in names
    }
    return make_world(stacks, objects, arm=int(rng.integers(0, stack_count)),
                      holding=holding)


def goal_texts(names='abc'):
    """Every single-literal goal over ``names``."""
    texts = [f'holding({x})' for x in names]
    texts += [f'{relation}({x},floor)' for x in names for relation in ('ontop', 'above')]
    for relation in ('ontop', 'inside', 'above', 'under', 'beside', 'leftof', 'rightof'):
        texts += [f'{relation}({x},{y})' for x in names for y in names if x != y]
    return texts


def fewest_actions(state, goals):
    """Exact plan length for each goal text, by breadth-first search.

    Goals that no reachable world satisfies are left out of the result.
    """
    formulas = {text: parse_formula(text) for text in goals}
    graph = StateGraph()
    costs = {}
    seen = {state}
    frontier = deque([(StateNode(state), 0)])
    while frontier and len(costs) < len(formulas):
        node, depth = frontier.popleft()
        for text, formula in formulas.items():
            if text not in costs and formula_holds(formula, node.state):
                costs[text] = depth
        for edge in graph.outgoing_edges(node):
            if edge.target.state not in seen:
                seen.add(edge.target.state)
                frontier.append((edge.target, depth + 1))
    return costs


@pytest.fixture
def brick_world():
    """Three large bricks: [a, b] | [] | [c], arm over column 0."""
    return make_world([['a', 'b'], [], ['c']], BRICKS)


@pytest.fixture
def holding_world():
    """Arm over column 0 holding b: [a] | [] | [c]."""
    return make_world([['a'], [], ['c']], BRICKS, holding='b')


@pytest.fixture
def ball_box_world():
    """Small ball a on the floor next to large box b."""
    return make_world(
        [['a'], ['b']],
        {'a': ('ball', 'small', 'white'), 'b': ('box', 'large', 'red')}
    )


@pytest.fixture
def attributes():
    return {
        'large_ball': ObjectAttributes('ball', 'large', 'white'),
        'small_ball': ObjectAttributes('ball', 'small', 'black'),
        'large_box': ObjectAttributes('box', 'large', 'red'),
        'small_box': ObjectAttributes('box', 'small', 'blue'),
        'large_brick': ObjectAttributes('brick', 'large', 'green'),
        'small_brick': ObjectAttributes('brick', 'small', 'white'),
        'large_pyramid': ObjectAttributes('pyramid', 'large', 'yellow'),
        'small_pyramid': ObjectAttributes('pyramid', 'small', 'red'),
        'large_plank': ObjectAttributes('plank', 'large', 'green'),
        'small_plank': ObjectAttributes('plank', 'small', 'red'),
        'large_table': ObjectAttributes('table', 'large', 'blue'),
    }


@pytest.fixture(autouse=True)
def clean_global_config():
    """Each test starts and ends without a loaded configuration."""
    reset_config()
    yield
    reset_config()
