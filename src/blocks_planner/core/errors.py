"""Error taxonomy for planning calls.

Every error is fatal to a single planning call. Callers that try several
candidate interpretations catch ``PlanningError`` per candidate.
"""

from typing import Optional


class PlanningError(Exception):
    """Base class for all planning failures."""
    pass


class SearchTimeout(PlanningError):
    """Raised when the search exceeds its wall-clock budget."""

    def __init__(self, timeout: float, elapsed: float, nodes_expanded: int = 0):
        self.timeout = timeout
        self.elapsed = elapsed
        self.nodes_expanded = nodes_expanded
        super().__init__(
            f"Search timed out after {elapsed:.3f}s (budget {timeout}s, "
            f"{nodes_expanded} nodes expanded)"
        )


class NoPlanFound(PlanningError):
    """Raised when the open set is exhausted without reaching a goal."""

    def __init__(self, message: Optional[str] = None, nodes_expanded: int = 0):
        self.nodes_expanded = nodes_expanded
        super().__init__(
            message or f"No plan found after expanding {nodes_expanded} nodes"
        )


class InvalidReference(PlanningError):
    """Raised when a literal refers to an object the world does not contain."""

    def __init__(self, object_id: str, reason: str = "does not exist"):
        self.object_id = object_id
        super().__init__(f"Object '{object_id}' {reason}")


class UnsupportedLiteral(PlanningError):
    """Raised for literals the planner cannot accept (negated, unknown relation)."""
    pass
