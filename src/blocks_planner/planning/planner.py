"""Planner driver.

Turns a goal formula and a world snapshot into a sequence of primitive arm
actions by running A* over the block-world state graph. ``plan`` drives
several candidate interpretations and only fails when all of them fail.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from blocks_planner.core.data_models import DNFFormula, WorldState, stringify_formula
from blocks_planner.core.errors import NoPlanFound, PlanningError
from blocks_planner.planning.goal import formula_holds, validate_formula
from blocks_planner.planning.heuristics import HeuristicWeights, create_heuristic
from blocks_planner.search.astar import AStarSearcher, SearchConfig
from blocks_planner.world.state_graph import StateGraph, StateNode

logger = logging.getLogger(__name__)

ALREADY_TRUE_MESSAGE = "That is already true!"


@dataclass
class PlannerConfig:
    """Configuration for planning calls."""
    timeout_seconds: float = 5.0
    already_true_message: str = ALREADY_TRUE_MESSAGE


@dataclass
class PlannerResult:
    """Plan for one interpretation.

    ``actions`` holds the action codes; ``plan`` is what gets presented, i.e.
    the actions or the already-true message when nothing has to be done.
    """
    interpretation: DNFFormula
    actions: List[str]
    cost: float
    plan: List[str]
    statistics: Dict[str, Any] = field(default_factory=dict)

    @property
    def already_true(self) -> bool:
        return not self.actions


def _config_from_hydra() -> PlannerConfig:
    from blocks_planner.config import get_parameter

    config = PlannerConfig()
    config.timeout_seconds = float(
        get_parameter('planner.timeout_seconds', config.timeout_seconds)
    )
    config.already_true_message = str(
        get_parameter('planner.already_true_message', config.already_true_message)
    )
    return config


class Planner:
    """Plans action sequences for goal formulas."""

    def __init__(self, config: Optional[PlannerConfig] = None,
                 weights: Optional[HeuristicWeights] = None):
        """Initialize planner.

        Args:
            config: Planner configuration; defaults to the loaded Hydra
                configuration, then to built-in defaults
            weights: Heuristic weights; None reads them from configuration
        """
        self.config = config or _config_from_hydra()
        self.weights = weights
        self.graph = StateGraph()

    def plan_interpretation(self, formula: DNFFormula, state: WorldState,
                            timeout: Optional[float] = None) -> PlannerResult:
        """Find the cheapest action sequence making ``formula`` true.

        Args:
            formula: Goal in disjunctive normal form
            state: Current world snapshot
            timeout: Search budget in seconds; defaults to the configured one

        Raises:
            UnsupportedLiteral: If the formula contains a negated or unknown literal
            InvalidReference: If a literal names an object missing from ``state``
            SearchTimeout: If the search budget elapses
            NoPlanFound: If no reachable state satisfies the formula
        """
        validate_formula(formula, state)
        if not formula:
            raise NoPlanFound("Goal formula has no clauses")

        if formula_holds(formula, state):
            logger.info(f"Goal {stringify_formula(formula)} already holds")
            return PlannerResult(
                interpretation=formula,
                actions=[],
                cost=0.0,
                plan=[self.config.already_true_message]
            )

        budget = self.config.timeout_seconds if timeout is None else timeout
        heuristic = create_heuristic(formula, self.weights)
        # One searcher per call so no bookkeeping outlives the call
        searcher = AStarSearcher(SearchConfig(max_computation_time=budget))

        result = searcher.search(
            self.graph,
            StateNode(state),
            lambda node: formula_holds(formula, node.state),
            heuristic,
            budget
        )

        actions = [node.move for node in result.path[1:]]
        statistics = result.statistics.to_dict()
        statistics['computation_time'] = result.computation_time
        statistics['heuristic'] = heuristic.get_stats()

        logger.info(
            f"Planned {stringify_formula(formula)} with cost {result.cost}: "
            f"{', '.join(actions)}"
        )
        return PlannerResult(
            interpretation=formula,
            actions=actions,
            cost=result.cost,
            plan=list(actions),
            statistics=statistics
        )

    def plan(self, interpretations: Sequence[DNFFormula],
             state: WorldState) -> List[PlannerResult]:
        """Plan every candidate interpretation.

        Failures are recorded per interpretation; the first recorded error is
        raised only when no interpretation could be planned.
        """
        errors: List[PlanningError] = []
        plans: List[PlannerResult] = []

        for index, formula in enumerate(interpretations):
            try:
                plans.append(self.plan_interpretation(formula, state))
            except PlanningError as e:
                logger.warning(f"Interpretation {index} failed: {e}")
                errors.append(e)

        if plans:
            return plans
        if errors:
            raise errors[0]
        raise NoPlanFound("No interpretations to plan")


def create_planner(timeout_seconds: Optional[float] = None,
                   weights: Optional[HeuristicWeights] = None) -> Planner:
    """Factory function to create a planner.

    Args:
        timeout_seconds: Per-call search budget; None reads configuration
        weights: Heuristic weights; None reads configuration
    """
    config = _config_from_hydra()
    if timeout_seconds is not None:
        config.timeout_seconds = timeout_seconds
    return Planner(config, weights)


def plan_interpretation(formula: DNFFormula, state: WorldState,
                        timeout: Optional[float] = None) -> PlannerResult:
    return create_planner().plan_interpretation(formula, state, timeout)


def plan(interpretations: Sequence[DNFFormula], state: WorldState,
         timeout: Optional[float] = None) -> List[PlannerResult]:
    return create_planner(timeout).plan(interpretations, state)


def stringify_plan(result: PlannerResult) -> str:
    return ", ".join(result.plan)
