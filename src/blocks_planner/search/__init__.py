"""Generic search machinery.

This package provides the updatable priority queue, the graph abstraction
and the A* engine. Nothing here depends on block-world semantics.
"""

from .priority_queue import UpdatableHeap
from .graph import Edge, Graph
from .astar import (
    AStarSearcher, SearchConfig, SearchResult, SearchStatistics,
    astar_search, create_astar_searcher
)

__all__ = [
    'UpdatableHeap',
    'Edge',
    'Graph',
    'AStarSearcher',
    'SearchConfig',
    'SearchResult',
    'SearchStatistics',
    'astar_search',
    'create_astar_searcher'
]
