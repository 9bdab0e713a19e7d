"""Core data models for the block-world planner."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import InvalidReference, UnsupportedLiteral

# Pseudo-object naming the table surface under every stack
FLOOR = "floor"

RELATIONS = {
    'holding': 1,
    'ontop': 2,
    'inside': 2,
    'above': 2,
    'under': 2,
    'beside': 2,
    'leftof': 2,
    'rightof': 2,
}

# Relations whose second argument may be the floor
FLOOR_RELATIONS = ('ontop', 'above')

_UNCHANGED = object()


@dataclass(frozen=True)
class ObjectAttributes:
    """Physical attributes of a world object."""

    form: str
    size: str
    color: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ObjectAttributes':
        return cls(form=data['form'], size=data['size'], color=data.get('color'))

    def to_dict(self) -> Dict[str, Any]:
        return {'form': self.form, 'size': self.size, 'color': self.color}


@dataclass(frozen=True)
class WorldState:
    """Immutable snapshot of the block world.

    Two snapshots are equal when their stacks, arm column and held object are
    equal. The attribute table is shared between snapshots and takes no part
    in equality or hashing.
    """

    stacks: Tuple[Tuple[str, ...], ...]
    arm: int = 0
    holding: Optional[str] = None
    objects: Mapping[str, ObjectAttributes] = field(
        default_factory=dict, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        # Normalize mutable inputs so snapshots stay hashable
        object.__setattr__(self, 'stacks', tuple(tuple(stack) for stack in self.stacks))
        if self.holding == '':
            object.__setattr__(self, 'holding', None)

    @property
    def stack_count(self) -> int:
        return len(self.stacks)

    def column_of(self, object_id: str) -> Optional[int]:
        """Return the stack index holding ``object_id`` or None."""
        for column, stack in enumerate(self.stacks):
            if object_id in stack:
                return column
        return None

    def locate(self, object_id: str) -> Tuple[int, int]:
        """Return ``(column, height)`` of an object resting in a stack.

        Raises:
            InvalidReference: If the object is not in any stack.
        """
        for column, stack in enumerate(self.stacks):
            if object_id in stack:
                return column, stack.index(object_id)
        if object_id == self.holding:
            raise InvalidReference(object_id, "is held by the arm, not in a stack")
        raise InvalidReference(object_id)

    def contains(self, object_id: str) -> bool:
        """True if the object is placed in the world (stacked or held)."""
        return object_id == self.holding or self.column_of(object_id) is not None

    def top_of(self, column: int) -> Optional[str]:
        stack = self.stacks[column]
        return stack[-1] if stack else None

    def attributes(self, object_id: str) -> ObjectAttributes:
        try:
            return self.objects[object_id]
        except KeyError:
            raise InvalidReference(object_id, "has no physical attributes") from None

    def placed_objects(self) -> List[str]:
        placed = [obj for stack in self.stacks for obj in stack]
        if self.holding is not None:
            placed.append(self.holding)
        return placed

    def replace(self, stacks: Optional[Sequence[Sequence[str]]] = None,
                arm: Optional[int] = None,
                holding: Any = _UNCHANGED) -> 'WorldState':
        """Build a successor snapshot sharing this snapshot's attribute table.

        Pass ``holding=None`` to empty the arm.
        """
        return WorldState(
            stacks=self.stacks if stacks is None else stacks,
            arm=self.arm if arm is None else arm,
            holding=self.holding if holding is _UNCHANGED else holding,
            objects=self.objects,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'WorldState':
        """Build a snapshot from the world JSON shape.

        Raises:
            KeyError: If ``stacks`` or an attribute field is missing.
            ValueError: If the document has the wrong shape or the snapshot is
                inconsistent.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"World must be an object, got {type(data).__name__}")
        stacks = data['stacks']
        if not isinstance(stacks, (list, tuple)) or not all(
                isinstance(stack, (list, tuple)) for stack in stacks):
            raise ValueError("World stacks must be a list of lists")
        raw_objects = data.get('objects', {})
        if not isinstance(raw_objects, Mapping):
            raise ValueError("World objects must map names to attributes")
        for object_id, attrs in raw_objects.items():
            if not isinstance(attrs, (Mapping, ObjectAttributes)):
                raise ValueError(f"Attributes of '{object_id}' must be an object")
        arm = data.get('arm', 0)
        if isinstance(arm, bool) or not isinstance(arm, int):
            raise ValueError(f"Arm column must be an integer, got {arm!r}")

        objects = {
            object_id: attrs if isinstance(attrs, ObjectAttributes)
            else ObjectAttributes.from_dict(attrs)
            for object_id, attrs in raw_objects.items()
        }
        state = cls(
            stacks=stacks,
            arm=arm,
            holding=data.get('holding') or None,
            objects=objects,
        )
        state.validate()
        return state

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stacks': [list(stack) for stack in self.stacks],
            'arm': self.arm,
            'holding': self.holding,
            'objects': {k: v.to_dict() for k, v in self.objects.items()},
        }

    def validate(self) -> None:
        """Check that every object is placed at most once and has attributes."""
        if self.stack_count == 0:
            raise ValueError("World must have at least one stack")
        if not 0 <= self.arm < self.stack_count:
            raise ValueError(
                f"Arm column {self.arm} outside [0, {self.stack_count - 1}]"
            )
        seen = set()
        for object_id in self.placed_objects():
            if object_id in seen:
                raise ValueError(f"Object '{object_id}' is placed more than once")
            if object_id == FLOOR:
                raise ValueError(f"'{FLOOR}' is reserved and cannot be placed")
            if object_id not in self.objects:
                raise ValueError(f"Object '{object_id}' has no attributes")
            seen.add(object_id)


@dataclass(frozen=True)
class Literal:
    """Atomic spatial relation over one or two objects."""

    relation: str
    args: Tuple[str, ...]
    polarity: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, 'args', tuple(self.args))

    def __str__(self) -> str:
        return stringify_literal(self)


# A formula is a disjunction of conjunctive clauses
Conjunction = Sequence[Literal]
DNFFormula = Sequence[Conjunction]

_LITERAL_RE = re.compile(r'^\s*(-?)\s*([a-z]+)\s*\(\s*([^()]*)\)\s*$')


def stringify_literal(literal: Literal) -> str:
    """Render a literal as ``ontop(a,b)``, prefixed by ``-`` when negated."""
    return ("" if literal.polarity else "-") + literal.relation + "(" + ",".join(literal.args) + ")"


def stringify_formula(formula: DNFFormula) -> str:
    return " | ".join(
        " & ".join(stringify_literal(lit) for lit in clause) for clause in formula
    )


def parse_literal(text: str) -> Literal:
    """Parse ``ontop(a,b)`` / ``-holding(a)`` into a Literal.

    Raises:
        UnsupportedLiteral: If the text is not a well-formed literal.
    """
    match = _LITERAL_RE.match(text)
    if not match:
        raise UnsupportedLiteral(f"Cannot parse literal: {text!r}")
    negated, relation, raw_args = match.groups()
    args = tuple(arg.strip() for arg in raw_args.split(',') if arg.strip())
    return Literal(relation=relation, args=args, polarity=not negated)


def parse_formula(text: str) -> List[List[Literal]]:
    """Parse ``a & b | c`` into a list of clauses."""
    formula = []
    for clause_text in text.split('|'):
        clause = [parse_literal(part) for part in clause_text.split('&') if part.strip()]
        if clause:
            formula.append(clause)
    return formula
