"""Block-world planner.

Plans the cheapest sequence of robot-arm actions (pick, drop, left, right)
that makes a goal formula over spatial relations true.
"""

from blocks_planner.core import (
    FLOOR, Literal, ObjectAttributes, WorldState, parse_formula, parse_literal,
    stringify_formula, stringify_literal, PlanningError, SearchTimeout,
    NoPlanFound, InvalidReference, UnsupportedLiteral
)
from blocks_planner.planning import (
    Planner, PlannerResult, create_planner, plan, plan_interpretation, stringify_plan
)

__version__ = "0.1.0"

__all__ = [
    'FLOOR',
    'Literal',
    'ObjectAttributes',
    'WorldState',
    'parse_formula',
    'parse_literal',
    'stringify_formula',
    'stringify_literal',
    'PlanningError',
    'SearchTimeout',
    'NoPlanFound',
    'InvalidReference',
    'UnsupportedLiteral',
    'Planner',
    'PlannerResult',
    'create_planner',
    'plan',
    'plan_interpretation',
    'stringify_plan'
]
