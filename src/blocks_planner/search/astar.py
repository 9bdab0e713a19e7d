"""A* search over lazily generated graphs.

This module implements a generic best-first search: it knows nothing about
block worlds and only relies on the ``Graph`` abstraction, a goal predicate
and a heuristic. The search is bounded by a wall-clock budget that is checked
once per iteration.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Hashable, List, Optional, Set, Tuple, TypeVar

from blocks_planner.core.errors import NoPlanFound, SearchTimeout
from blocks_planner.search.graph import Graph
from blocks_planner.search.priority_queue import UpdatableHeap

logger = logging.getLogger(__name__)

N = TypeVar('N', bound=Hashable)


@dataclass
class SearchStatistics:
    """Counters collected during one search call."""
    nodes_expanded: int = 0
    nodes_generated: int = 0
    duplicate_states: int = 0
    key_decreases: int = 0
    nodes_reopened: int = 0
    max_open_size: int = 0
    heuristic_computations: int = 0
    search_efficiency: float = 0.0  # nodes_expanded / nodes_generated

    def compute_efficiency(self) -> None:
        if self.nodes_generated > 0:
            self.search_efficiency = self.nodes_expanded / self.nodes_generated

    def to_dict(self) -> Dict[str, Any]:
        return {
            'nodes_expanded': self.nodes_expanded,
            'nodes_generated': self.nodes_generated,
            'duplicate_states': self.duplicate_states,
            'key_decreases': self.key_decreases,
            'nodes_reopened': self.nodes_reopened,
            'max_open_size': self.max_open_size,
            'heuristic_computations': self.heuristic_computations,
            'search_efficiency': self.search_efficiency
        }


@dataclass
class SearchResult(Generic[N]):
    """Path from the start node to a goal node and its total cost."""
    path: List[N]
    cost: float
    statistics: SearchStatistics = field(default_factory=SearchStatistics)
    computation_time: float = 0.0
    termination_reason: str = "goal_reached"


@dataclass
class SearchConfig:
    """Configuration for A* search."""
    max_computation_time: float = 5.0  # seconds, used when search() gets no timeout
    statistics_tracking: bool = True


def _config_from_hydra() -> SearchConfig:
    """Build a SearchConfig from the global configuration when one is loaded."""
    from blocks_planner.config import get_parameter

    config = SearchConfig()
    config.max_computation_time = float(
        get_parameter('search.max_computation_time', config.max_computation_time)
    )
    config.statistics_tracking = bool(
        get_parameter('search.statistics_tracking', config.statistics_tracking)
    )
    return config


class AStarSearcher:
    """Best-first search ranked by f = g + h with an updatable open queue."""

    def __init__(self, config: Optional[SearchConfig] = None):
        """Initialize A* searcher.

        Args:
            config: Search configuration. Falls back to the loaded Hydra
                configuration, then to defaults.
        """
        self.config = config or _config_from_hydra()
        self.statistics = SearchStatistics()

    def search(self, graph: Graph[N], start: N,
               is_goal: Callable[[N], bool],
               heuristic: Callable[[N], float],
               timeout: Optional[float] = None) -> SearchResult[N]:
        """Search for the cheapest path from ``start`` to a goal node.

        Args:
            graph: Graph providing outgoing edges on demand
            start: Initial node
            is_goal: Predicate identifying goal nodes
            heuristic: Estimate of the remaining cost; must not overestimate
                for the returned cost to be minimal
            timeout: Wall-clock budget in seconds

        Returns:
            SearchResult with the node path and its accumulated cost

        Raises:
            SearchTimeout: If the budget elapses before a goal is popped
            NoPlanFound: If the open queue runs empty
        """
        budget = self.config.max_computation_time if timeout is None else timeout
        start_time = time.perf_counter()
        stats = SearchStatistics()
        self.statistics = stats

        logger.info(f"Starting A* search with timeout {budget}s")

        if is_goal(start):
            return SearchResult(
                path=[start], cost=0.0, statistics=stats,
                computation_time=time.perf_counter() - start_time,
                termination_reason="initial_match"
            )

        key = graph.node_key
        estimates: Dict[Hashable, float] = {}
        # node key -> (node, predecessor, accumulated cost g)
        records: Dict[Hashable, Tuple[N, Optional[N], float]] = {key(start): (start, None, 0.0)}
        closed: Set[Hashable] = set()

        def estimate(node: N) -> float:
            node_key = key(node)
            value = estimates.get(node_key)
            if value is None:
                value = heuristic(node)
                estimates[node_key] = value
                stats.heuristic_computations += 1
            return value

        def rank(node: N) -> Tuple[float, float]:
            h = estimate(node)
            # Ties on f prefer the node closer to the goal
            return records[key(node)][2] + h, h

        open_nodes: UpdatableHeap[N] = UpdatableHeap(rank, key=key)
        open_nodes.insert(start)

        while True:
            elapsed = time.perf_counter() - start_time
            if elapsed >= budget:
                logger.warning(
                    f"A* search timed out after {elapsed:.3f}s "
                    f"({stats.nodes_expanded} nodes expanded)"
                )
                raise SearchTimeout(budget, elapsed, stats.nodes_expanded)

            if not open_nodes:
                logger.warning(
                    f"A* search exhausted the open set after expanding "
                    f"{stats.nodes_expanded} nodes"
                )
                raise NoPlanFound(nodes_expanded=stats.nodes_expanded)

            current = open_nodes.extract_min()
            current_key = key(current)
            current_cost = records[current_key][2]

            if is_goal(current):
                return self._create_success_result(
                    current, records, key, stats, time.perf_counter() - start_time
                )

            closed.add(current_key)
            stats.nodes_expanded += 1

            for edge in graph.outgoing_edges(current):
                successor = edge.target
                successor_key = key(successor)
                stats.nodes_generated += 1

                tentative = current_cost + edge.cost
                known = records.get(successor_key)
                if known is not None and tentative >= known[2]:
                    if successor_key in closed:
                        stats.duplicate_states += 1
                    continue

                records[successor_key] = (successor, current, tentative)
                if successor_key in closed:
                    # Only reachable when the heuristic is not consistent
                    closed.discard(successor_key)
                    stats.nodes_reopened += 1
                    open_nodes.insert(successor)
                elif open_nodes.contains(successor):
                    open_nodes.decrease_key(successor)
                    stats.key_decreases += 1
                else:
                    open_nodes.insert(successor)

            if self.config.statistics_tracking:
                stats.max_open_size = max(stats.max_open_size, len(open_nodes))

    def _create_success_result(self, goal: N,
                               records: Dict[Hashable, Tuple[N, Optional[N], float]],
                               key: Callable[[N], Hashable],
                               stats: SearchStatistics,
                               computation_time: float) -> SearchResult[N]:
        """Walk predecessor links back to the start and reverse them."""
        _, predecessor, cost = records[key(goal)]
        path = [goal]
        while predecessor is not None:
            node, predecessor, _ = records[key(predecessor)]
            path.append(node)
        path.reverse()

        stats.compute_efficiency()
        logger.debug(
            f"A* search reached goal with cost {cost} in {computation_time:.3f}s: "
            f"{stats.to_dict()}"
        )
        return SearchResult(
            path=path,
            cost=cost,
            statistics=stats,
            computation_time=computation_time
        )


def astar_search(graph: Graph[N], start: N,
                 is_goal: Callable[[N], bool],
                 heuristic: Callable[[N], float],
                 timeout: float) -> SearchResult[N]:
    """Run one A* search with a fresh searcher."""
    return AStarSearcher(SearchConfig(max_computation_time=timeout)).search(
        graph, start, is_goal, heuristic, timeout
    )


def create_astar_searcher(max_computation_time: Optional[float] = None,
                          statistics_tracking: bool = True) -> AStarSearcher:
    """Factory function to create an A* searcher.

    Args:
        max_computation_time: Default budget in seconds; None reads the
            loaded configuration

    Returns:
        Configured AStarSearcher instance
    """
    if max_computation_time is None:
        config = _config_from_hydra()
        config.statistics_tracking = statistics_tracking
    else:
        config = SearchConfig(
            max_computation_time=max_computation_time,
            statistics_tracking=statistics_tracking
        )
    return AStarSearcher(config)
