"""Heuristic estimator for block-world goals.

Each literal gets a weighted estimate built from the arm's distance to the
objects involved, the number of objects stacked above them and whether the
arm first has to put something down. The weights are tuning values rather
than a derived cost model; they live in ``HeuristicWeights`` so they can be
adjusted from configuration. Because tuned weights can overshoot, every
literal estimate is capped by ``lower_bound``, which only counts actions
that any plan for the literal must perform.

Literal estimates are combined as the minimum over clauses of the maximum
over each clause's literals: only one clause has to be satisfied, and within
a clause the most expensive literal bounds the work that may be shared among
all of them.
"""

import logging
import math
import time
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Set, Tuple, Union

from blocks_planner.core.data_models import FLOOR, DNFFormula, Conjunction, Literal, WorldState
from blocks_planner.core.errors import InvalidReference
from blocks_planner.planning.goal import literal_holds
from blocks_planner.world.state_graph import StateNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeuristicWeights:
    """Constants used by the per-literal estimates."""
    per_object_above: int = 3  # pick + move + drop for each object to clear
    base_empty_arm: int = 1
    base_holding: int = 2  # drop what is held, then pick
    under_empty_arm: int = 6
    under_holding: int = 8

    @classmethod
    def from_config(cls, weights_cfg: Optional[Any]) -> 'HeuristicWeights':
        if not weights_cfg:
            return cls()
        defaults = asdict(cls())
        return cls(**{
            name: int(weights_cfg.get(name, default))
            for name, default in defaults.items()
        })


DEFAULT_WEIGHTS = HeuristicWeights()


def _column(object_id: str, state: WorldState) -> int:
    if object_id == state.holding:
        return state.arm
    column = state.column_of(object_id)
    if column is None:
        raise InvalidReference(object_id)
    return column


def _objects_above(object_id: str, state: WorldState) -> int:
    if object_id == state.holding:
        return 0
    column, height = state.locate(object_id)
    return len(state.stacks[column]) - height - 1


def _floor_target(state: WorldState) -> Tuple[int, int]:
    """Return the (column, height) of the lowest stack nearest to the arm."""
    column = min(
        range(state.stack_count),
        key=lambda c: (len(state.stacks[c]), abs(c - state.arm))
    )
    return column, len(state.stacks[column])


def _distance_from_arm(object_id: str, state: WorldState) -> int:
    return abs(_column(object_id, state) - state.arm)


def _target_cost(object_id: str, state: WorldState, weights: HeuristicWeights,
                 clear_top: bool = True) -> int:
    """Cost of reaching (and optionally clearing) the destination object."""
    if object_id == FLOOR:
        # Every stacked object is already above the floor
        if not clear_top:
            return 0
        column, height = _floor_target(state)
        return abs(column - state.arm) + height * weights.per_object_above
    cost = _distance_from_arm(object_id, state)
    if clear_top:
        cost += _objects_above(object_id, state) * weights.per_object_above
    return cost


def _weighted_estimate(literal: Literal, state: WorldState,
                       weights: HeuristicWeights) -> int:
    """Tuned per-literal cost built from the configured weights."""
    x = literal.args[0]
    arm_free = state.holding is None or state.holding == x
    base = weights.base_empty_arm if arm_free else weights.base_holding

    if literal.relation == 'holding':
        return base + _distance_from_arm(x, state)

    y = literal.args[1]
    relation = literal.relation
    move_x = (_objects_above(x, state) * weights.per_object_above
              + _distance_from_arm(x, state))

    if relation in ('ontop', 'inside'):
        return base + move_x + _target_cost(y, state, weights)
    if relation == 'above':
        return base + move_x + _target_cost(y, state, weights, clear_top=False)
    if relation == 'under':
        base = weights.under_empty_arm if arm_free else weights.under_holding
        return base + move_x + _target_cost(y, state, weights)
    if relation == 'beside':
        return base + move_x + max(0, _distance_from_arm(y, state) - 1)
    if relation == 'leftof':
        return base + move_x + abs(_column(y, state) - 1 - state.arm)
    if relation == 'rightof':
        return base + move_x + abs(_column(y, state) + 1 - state.arm)

    logger.warning(f"No estimate for relation {relation!r}, using 0")
    return 0


# Column ranges are inclusive; infinite ends stand for "any column on that side"
Zone = Tuple[float, float]


def _stacked_above(object_id: str, state: WorldState) -> Set[str]:
    if object_id == state.holding:
        return set()
    column, height = state.locate(object_id)
    return set(state.stacks[column][height + 1:])


def _stack_column(object_id: str, state: WorldState) -> Optional[int]:
    """Column of a stacked object, None while it is held."""
    if object_id == state.holding:
        return None
    return state.locate(object_id)[0]


def _zone_distance(column: int, zone: Zone) -> float:
    low, high = zone
    return max(0, low - column, column - high)


def _handling_bound(mover: str, state: WorldState, also_clear: Tuple[str, ...] = ()) -> int:
    """Picks and drops needed by any plan whose last action drops ``mover``.

    Every object above ``mover`` (and above the ``also_clear`` objects) is
    picked and dropped once, ``mover`` is picked unless already held and then
    dropped, and a different held object has to be put down first.
    """
    cleared = _stacked_above(mover, state)
    for object_id in also_clear:
        cleared |= _stacked_above(object_id, state)
    cleared.discard(mover)

    actions = 2 * len(cleared) + 1
    if state.holding != mover:
        actions += 1
        if state.holding is not None:
            actions += 1
    return actions


def _route_bound(state: WorldState, column: Optional[int], zone: Optional[Zone]) -> float:
    """Arm moves needed to visit ``column`` and at least one column of ``zone``.

    A None column or zone imposes no visit.
    """
    if column is None and zone is None:
        return 0
    if column is None:
        return _zone_distance(state.arm, zone)
    if zone is None:
        return abs(state.arm - column)
    return (min(abs(state.arm - column), _zone_distance(state.arm, zone))
            + _zone_distance(column, zone))


def _move_bound(mover: str, state: WorldState, zone: Optional[Zone],
                also_clear: Tuple[str, ...] = ()) -> float:
    return (_handling_bound(mover, state, also_clear)
            + _route_bound(state, _stack_column(mover, state), zone))


def _zone_of(object_id: str, state: WorldState, low: float, high: float) -> Optional[Zone]:
    """Zone relative to a stacked object's column; None while it is held.

    A held reference object can still be dropped anywhere, so it constrains
    nothing.
    """
    column = _stack_column(object_id, state)
    if column is None:
        return None
    return column + low, column + high


def lower_bound(literal: Literal, state: WorldState) -> float:
    """Provable lower bound on the actions needed to make ``literal`` hold.

    Only a drop of one of the literal's objects can make a positional
    relation true, so the bound is the cheapest over the objects that could be
    dropped last, counting the picks and drops that drop forces plus the arm
    moves needed to reach the columns involved.
    """
    if literal_holds(literal, state):
        return 0

    relation = literal.relation
    x = literal.args[0]

    if relation == 'holding':
        column, height = state.locate(x)
        above = len(state.stacks[column]) - height - 1
        return (abs(state.arm - column) + 2 * above + 1
                + (1 if state.holding is not None else 0))

    y = literal.args[1]
    if y == FLOOR:
        # ontop(x, floor): x ends at the bottom of some stack
        return _move_bound(x, state, None)

    if relation in ('ontop', 'inside'):
        return _move_bound(x, state, _zone_of(y, state, 0, 0), also_clear=(y,))
    if relation == 'above':
        return _move_bound(x, state, _zone_of(y, state, 0, 0))
    if relation == 'under':
        return _move_bound(y, state, _zone_of(x, state, 0, 0))
    if relation == 'beside':
        return min(_move_bound(x, state, _zone_of(y, state, -1, 1)),
                   _move_bound(y, state, _zone_of(x, state, -1, 1)))
    if relation == 'leftof':
        return min(_move_bound(x, state, _zone_of(y, state, -math.inf, 0)),
                   _move_bound(y, state, _zone_of(x, state, 0, math.inf)))
    if relation == 'rightof':
        return min(_move_bound(x, state, _zone_of(y, state, 0, math.inf)),
                   _move_bound(y, state, _zone_of(x, state, -math.inf, 0)))
    return 0


def estimate_literal_cost(literal: Literal, state: WorldState,
                          weights: HeuristicWeights = DEFAULT_WEIGHTS) -> float:
    """Estimate the number of actions needed to make ``literal`` hold.

    The weighted estimate is capped by ``lower_bound`` so the result never
    exceeds the true cost, whatever weights are configured. Returns 0 when
    the literal already holds.
    """
    if literal_holds(literal, state):
        return 0
    return min(_weighted_estimate(literal, state, weights), lower_bound(literal, state))


def estimate_clause_cost(clause: Conjunction, state: WorldState,
                         weights: HeuristicWeights = DEFAULT_WEIGHTS) -> float:
    return max(
        (estimate_literal_cost(literal, state, weights) for literal in clause),
        default=0
    )


def estimate_formula_cost(formula: DNFFormula, state: WorldState,
                          weights: HeuristicWeights = DEFAULT_WEIGHTS) -> float:
    """Min over clauses of the max over each clause's literal estimates.

    An empty formula cannot be satisfied and estimates to infinity.
    """
    return min(
        (estimate_clause_cost(clause, state, weights) for clause in formula),
        default=math.inf
    )


class FormulaHeuristic:
    """Callable heuristic over search nodes for one goal formula."""

    def __init__(self, formula: DNFFormula,
                 weights: HeuristicWeights = DEFAULT_WEIGHTS):
        self.formula = formula
        self.weights = weights
        self.computation_count = 0
        self.total_computation_time = 0.0

    def __call__(self, node: Union[StateNode, WorldState]) -> float:
        start_time = time.perf_counter()
        state = node.state if isinstance(node, StateNode) else node
        value = estimate_formula_cost(self.formula, state, self.weights)
        self.computation_count += 1
        self.total_computation_time += time.perf_counter() - start_time
        return value

    def get_stats(self) -> Dict[str, Any]:
        """Get computation statistics."""
        avg_time = (self.total_computation_time / self.computation_count
                    if self.computation_count > 0 else 0.0)
        return {
            'computation_count': self.computation_count,
            'total_time': self.total_computation_time,
            'average_time_us': avg_time * 1000000
        }


def create_heuristic(formula: DNFFormula,
                     weights: Optional[HeuristicWeights] = None) -> FormulaHeuristic:
    """Factory for a formula heuristic, reading weights from configuration.

    Args:
        formula: Goal formula the heuristic estimates
        weights: Explicit weights; None reads ``heuristics.weights`` from the
            loaded configuration, falling back to the defaults
    """
    if weights is None:
        from blocks_planner.config import get_parameter

        weights = HeuristicWeights.from_config(get_parameter('heuristics.weights'))
    return FormulaHeuristic(formula, weights)
