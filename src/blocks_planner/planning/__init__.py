"""Goal test, heuristic estimator and planner driver."""

from .goal import (
    literal_holds, clause_holds, formula_holds, validate_literal, validate_formula
)
from .heuristics import (
    HeuristicWeights, FormulaHeuristic, estimate_literal_cost,
    estimate_clause_cost, estimate_formula_cost, lower_bound, create_heuristic
)
from .planner import (
    ALREADY_TRUE_MESSAGE, Planner, PlannerConfig, PlannerResult,
    create_planner, plan, plan_interpretation, stringify_plan
)

__all__ = [
    'literal_holds',
    'clause_holds',
    'formula_holds',
    'validate_literal',
    'validate_formula',
    'HeuristicWeights',
    'FormulaHeuristic',
    'estimate_literal_cost',
    'estimate_clause_cost',
    'estimate_formula_cost',
    'lower_bound',
    'create_heuristic',
    'ALREADY_TRUE_MESSAGE',
    'Planner',
    'PlannerConfig',
    'PlannerResult',
    'create_planner',
    'plan',
    'plan_interpretation',
    'stringify_plan'
]
