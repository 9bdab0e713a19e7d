"""Graph abstraction consumed by the A* engine.

The engine never materializes a graph: it asks for the outgoing edges of a
node when the node is expanded, so implementations may generate successors
on the fly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Hashable, List, TypeVar

N = TypeVar('N', bound=Hashable)


@dataclass(frozen=True)
class Edge(Generic[N]):
    """Directed edge between two nodes."""
    source: N
    target: N
    cost: float = 1.0


class Graph(ABC, Generic[N]):
    """Directed graph whose nodes compare by value.

    Node identity is defined once, by ``node_key``; ``compare_nodes`` and the
    search engine both go through it.
    """

    @abstractmethod
    def outgoing_edges(self, node: N) -> List[Edge[N]]:
        """Compute the edges that leave ``node``."""
        pass

    def node_key(self, node: N) -> Hashable:
        """Identity under which the search engine tracks ``node``.

        The closed set, the open queue and the predecessor map are all keyed
        on this value, so two nodes with equal keys are the same vertex.
        Defaults to the node itself.
        """
        return node

    def compare_nodes(self, first: N, second: N) -> int:
        """Return 0 when both nodes denote the same vertex, non-zero otherwise."""
        return 0 if self.node_key(first) == self.node_key(second) else 1
