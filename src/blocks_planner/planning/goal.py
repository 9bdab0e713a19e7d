"""Goal test: does a world snapshot satisfy a DNF formula?"""

from blocks_planner.core.data_models import (
    FLOOR, FLOOR_RELATIONS, RELATIONS, Conjunction, DNFFormula, Literal, WorldState
)
from blocks_planner.core.errors import InvalidReference, UnsupportedLiteral


def _height(state: WorldState, object_id: str, column: int) -> int:
    return state.stacks[column].index(object_id)


def literal_holds(literal: Literal, state: WorldState) -> bool:
    """Indicate whether ``literal`` holds in ``state``.

    Held objects rest in no stack, so every positional relation over them is
    false.
    """
    relation = literal.relation
    x = literal.args[0]

    if relation == 'holding':
        return state.holding == x

    y = literal.args[1]
    x_column = state.column_of(x)
    if x_column is None:
        return False

    if y == FLOOR:
        if relation == 'ontop':
            return _height(state, x, x_column) == 0
        # Anything resting in a stack is above the floor
        return relation == 'above'

    y_column = state.column_of(y)
    if y_column is None:
        return False

    if relation in ('ontop', 'inside', 'above', 'under'):
        if x_column != y_column:
            return False
        offset = _height(state, x, x_column) - _height(state, y, y_column)
        if relation in ('ontop', 'inside'):
            return offset == 1
        if relation == 'above':
            return offset > 0
        return offset < 0
    if relation == 'beside':
        return abs(x_column - y_column) == 1
    if relation == 'leftof':
        return x_column < y_column
    if relation == 'rightof':
        return x_column > y_column

    raise UnsupportedLiteral(f"Unknown relation: {relation!r}")


def clause_holds(clause: Conjunction, state: WorldState) -> bool:
    return all(literal_holds(literal, state) for literal in clause)


def formula_holds(formula: DNFFormula, state: WorldState) -> bool:
    """True if any clause has all its literals hold."""
    return any(clause_holds(clause, state) for clause in formula)


def validate_literal(literal: Literal, state: WorldState) -> None:
    """Reject literals the planner cannot handle.

    Raises:
        UnsupportedLiteral: Negated literal, unknown relation or wrong arity
        InvalidReference: Argument not placed in ``state`` or misplaced floor
    """
    if not literal.polarity:
        raise UnsupportedLiteral(f"Negated literals are not supported: {literal}")
    arity = RELATIONS.get(literal.relation)
    if arity is None:
        raise UnsupportedLiteral(f"Unknown relation: {literal.relation!r}")
    if len(literal.args) != arity:
        raise UnsupportedLiteral(
            f"Relation {literal.relation!r} takes {arity} argument(s), got {literal}"
        )

    for position, object_id in enumerate(literal.args):
        if object_id == FLOOR:
            if position == 1 and literal.relation in FLOOR_RELATIONS:
                continue
            raise InvalidReference(object_id, f"cannot be used in {literal}")
        if not state.contains(object_id):
            raise InvalidReference(object_id)
        state.attributes(object_id)


def validate_formula(formula: DNFFormula, state: WorldState) -> None:
    for clause in formula:
        for literal in clause:
            validate_literal(literal, state)
