"""Core data models and errors for the block-world planner."""

from .data_models import (
    FLOOR, RELATIONS, FLOOR_RELATIONS, ObjectAttributes, WorldState, Literal,
    Conjunction, DNFFormula, stringify_literal, stringify_formula,
    parse_literal, parse_formula
)
from .errors import (
    PlanningError, SearchTimeout, NoPlanFound, InvalidReference, UnsupportedLiteral
)

__all__ = [
    'FLOOR',
    'RELATIONS',
    'FLOOR_RELATIONS',
    'ObjectAttributes',
    'WorldState',
    'Literal',
    'Conjunction',
    'DNFFormula',
    'stringify_literal',
    'stringify_formula',
    'parse_literal',
    'parse_formula',
    'PlanningError',
    'SearchTimeout',
    'NoPlanFound',
    'InvalidReference',
    'UnsupportedLiteral'
]
