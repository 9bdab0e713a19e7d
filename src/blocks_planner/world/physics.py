"""Physical stacking rules of the block world.

All checks are pure predicates over the object being dropped and the object
it would rest on (None for an empty stack, i.e. the floor).
"""

from typing import Optional

from blocks_planner.core.data_models import ObjectAttributes, WorldState


def can_support(held: ObjectAttributes, support: Optional[ObjectAttributes]) -> bool:
    """Return True if ``held`` may rest directly on ``support``."""
    if support is None:
        return True

    # Balls must be in boxes or on the floor, otherwise they roll away
    if held.form == 'ball' and support.form != 'box':
        return False
    # Balls cannot support anything
    if support.form == 'ball':
        return False
    # Small objects cannot support large objects
    if support.size == 'small' and held.size == 'large':
        return False
    # Boxes cannot contain pyramids, planks or boxes of the same size
    if (support.form == 'box' and support.size == held.size
            and held.form in ('pyramid', 'plank', 'box')):
        return False
    # Small boxes cannot be supported by small bricks or pyramids
    if (held.form == 'box' and held.size == 'small'
            and support.size == 'small' and support.form in ('brick', 'pyramid')):
        return False
    # Large boxes cannot be supported by large pyramids
    if (held.form == 'box' and held.size == 'large'
            and support.form == 'pyramid' and support.size == 'large'):
        return False

    return True


def can_drop(state: WorldState) -> bool:
    """Return True if the arm holds an object it may drop on the stack below."""
    if state.holding is None:
        return False
    top = state.top_of(state.arm)
    support = state.attributes(top) if top is not None else None
    return can_support(state.attributes(state.holding), support)


def can_pick(state: WorldState) -> bool:
    return state.holding is None and bool(state.stacks[state.arm])
