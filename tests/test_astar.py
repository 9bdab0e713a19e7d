"""Tests for the generic A* search engine."""

import heapq
from dataclasses import dataclass

import pytest
import numpy as np

from blocks_planner.core.errors import NoPlanFound, SearchTimeout
from blocks_planner.search.astar import (
    AStarSearcher, SearchConfig, SearchResult, SearchStatistics,
    astar_search, create_astar_searcher
)
from blocks_planner.search.graph import Edge, Graph


@dataclass(frozen=True)
class Cell:
    """Grid vertex; a fresh instance is built on every expansion."""
    row: int
    col: int


class GridGraph(Graph):
    """4-connected grid with blocked cells, unit edge costs."""

    def __init__(self, rows, cols, walls=()):
        self.rows = rows
        self.cols = cols
        self.walls = set(walls)
        self.expansions = 0

    def outgoing_edges(self, node):
        self.expansions += 1
        edges = []
        for dr, dc in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            r, c = node.row + dr, node.col + dc
            if 0 <= r < self.rows and 0 <= c < self.cols and (r, c) not in self.walls:
                edges.append(Edge(node, Cell(r, c), 1.0))
        return edges


class WeightedGraph(Graph):
    """Explicit adjacency lists with arbitrary edge costs."""

    def __init__(self, adjacency):
        self.adjacency = adjacency

    def outgoing_edges(self, node):
        return [Edge(node, target, cost) for target, cost in self.adjacency.get(node, [])]


class ModuloGraph(Graph):
    """Chain 0 -> 1 -> ... -> 8 whose vertices are the residues mod 3."""

    def __init__(self):
        self.expanded = []

    def outgoing_edges(self, node):
        self.expanded.append(node)
        return [Edge(node, node + 1)] if node < 8 else []

    def node_key(self, node):
        return node % 3


class LineGraph(Graph):
    """Infinite line of integers; no goal is ever reachable by exhaustion."""

    def outgoing_edges(self, node):
        return [Edge(node, node + 1), Edge(node, node - 1)]


def dijkstra_cost(adjacency, start, goal):
    """Reference shortest-path cost, or None when unreachable."""
    best = {start: 0.0}
    queue = [(0.0, start)]
    while queue:
        cost, node = heapq.heappop(queue)
        if node == goal:
            return cost
        if cost > best[node]:
            continue
        for target, weight in adjacency.get(node, []):
            candidate = cost + weight
            if candidate < best.get(target, float('inf')):
                best[target] = candidate
                heapq.heappush(queue, (candidate, target))
    return None


def zero(_node):
    return 0.0


class TestSearchConfig:
    """Test SearchConfig functionality."""

    def test_default_config(self):
        config = SearchConfig()
        assert config.max_computation_time == 5.0
        assert config.statistics_tracking is True

    def test_factory(self):
        searcher = create_astar_searcher(max_computation_time=2.0)
        assert isinstance(searcher, AStarSearcher)
        assert searcher.config.max_computation_time == 2.0


class TestSearchStatistics:

    def test_efficiency(self):
        stats = SearchStatistics(nodes_expanded=5, nodes_generated=20)
        stats.compute_efficiency()
        assert stats.search_efficiency == 0.25
        assert stats.to_dict()['nodes_expanded'] == 5
        assert stats.to_dict()['nodes_reopened'] == 0


class TestNodeIdentity:
    """The engine tracks nodes by the graph's ``node_key``."""

    def test_default_key_is_the_node(self):
        graph = WeightedGraph({})
        assert graph.node_key('A') == 'A'
        assert graph.compare_nodes('A', 'A') == 0
        assert graph.compare_nodes('A', 'B') != 0

    def test_compare_nodes_follows_key(self):
        graph = ModuloGraph()
        assert graph.compare_nodes(1, 4) == 0
        assert graph.compare_nodes(1, 2) != 0

    def test_search_merges_nodes_with_equal_keys(self):
        graph = ModuloGraph()
        searcher = AStarSearcher(SearchConfig(max_computation_time=5.0))
        with pytest.raises(NoPlanFound) as excinfo:
            searcher.search(graph, 0, lambda n: n == 8, zero)

        assert graph.expanded == [0, 1, 2]
        assert excinfo.value.nodes_expanded == 3
        assert searcher.statistics.duplicate_states == 1


class TestAStarSearcher:
    """Test A* search on toy graphs."""

    @pytest.fixture
    def searcher(self):
        return AStarSearcher(SearchConfig(max_computation_time=5.0))

    @pytest.fixture
    def diamond(self):
        # S -> B is cheaper through A, so B's key gets decreased
        return {
            'S': [('A', 1.0), ('B', 4.0)],
            'A': [('B', 1.0), ('G', 5.0)],
            'B': [('G', 1.0)],
        }

    def test_start_is_goal(self, searcher):
        result = searcher.search(GridGraph(3, 3), Cell(0, 0), lambda n: True, zero)
        assert result.path == [Cell(0, 0)]
        assert result.cost == 0.0
        assert result.termination_reason == "initial_match"

    def test_weighted_shortest_path(self, searcher, diamond):
        result = searcher.search(WeightedGraph(diamond), 'S', lambda n: n == 'G', zero)

        assert isinstance(result, SearchResult)
        assert result.path == ['S', 'A', 'B', 'G']
        assert result.cost == 3.0
        assert result.statistics.key_decreases >= 1

    def test_grid_with_manhattan_heuristic(self, searcher):
        goal = Cell(4, 4)
        graph = GridGraph(5, 5)

        def manhattan(node):
            return abs(node.row - goal.row) + abs(node.col - goal.col)

        result = searcher.search(graph, Cell(0, 0), lambda n: n == goal, manhattan)

        assert result.cost == 8.0
        assert result.path[0] == Cell(0, 0)
        assert result.path[-1] == goal
        assert len(result.path) == 9
        # Consecutive cells are adjacent
        for a, b in zip(result.path, result.path[1:]):
            assert abs(a.row - b.row) + abs(a.col - b.col) == 1

    def test_heuristic_reduces_expansions(self):
        goal = Cell(9, 9)

        def manhattan(node):
            return abs(node.row - goal.row) + abs(node.col - goal.col)

        blind = GridGraph(10, 10)
        guided = GridGraph(10, 10)
        blind_result = astar_search(blind, Cell(0, 0), lambda n: n == goal, zero, 5.0)
        guided_result = astar_search(guided, Cell(0, 0), lambda n: n == goal, manhattan, 5.0)

        assert blind_result.cost == guided_result.cost == 18.0
        assert guided.expansions < blind.expansions

    def test_walls_force_detour(self, searcher):
        # Column 1 is blocked except at the bottom row
        walls = [(0, 1), (1, 1), (2, 1)]
        goal = Cell(0, 2)
        result = searcher.search(GridGraph(4, 3, walls), Cell(0, 0), lambda n: n == goal, zero)
        assert result.cost == 8.0

    def test_unreachable_goal_raises(self, searcher):
        walls = [(0, 1), (1, 1), (2, 1)]
        with pytest.raises(NoPlanFound) as excinfo:
            searcher.search(GridGraph(3, 3, walls), Cell(0, 0), lambda n: n == Cell(0, 2), zero)
        # Only the three reachable cells get expanded
        assert excinfo.value.nodes_expanded == 3

    def test_closed_set_uses_value_equality(self, searcher):
        """Fresh but equal vertices are not expanded twice."""
        graph = GridGraph(4, 4)
        with pytest.raises(NoPlanFound):
            searcher.search(graph, Cell(0, 0), lambda n: False, zero)
        assert graph.expansions == 16
        assert searcher.statistics.duplicate_states > 0

    def test_zero_timeout_raises(self, searcher):
        with pytest.raises(SearchTimeout):
            searcher.search(GridGraph(3, 3), Cell(0, 0), lambda n: n == Cell(2, 2), zero, timeout=0)

    def test_timeout_on_infinite_graph(self, searcher):
        with pytest.raises(SearchTimeout) as excinfo:
            searcher.search(LineGraph(), 0, lambda n: False, zero, timeout=0.05)
        assert excinfo.value.nodes_expanded > 0
        assert excinfo.value.elapsed >= 0.05

    def test_config_timeout_used_by_default(self):
        searcher = AStarSearcher(SearchConfig(max_computation_time=0.0))
        with pytest.raises(SearchTimeout):
            searcher.search(LineGraph(), 0, lambda n: n == 5, zero)

    def test_optimal_on_random_graphs(self, searcher):
        """Returned cost equals the exhaustive shortest-path cost."""
        rng = np.random.default_rng(7)
        for _ in range(25):
            size = 12
            adjacency = {}
            for node in range(size):
                targets = rng.choice(size, size=int(rng.integers(0, 4)), replace=False)
                adjacency[node] = [
                    (int(t), float(rng.integers(1, 10))) for t in targets if t != node
                ]
            goal = size - 1
            expected = dijkstra_cost(adjacency, 0, goal)
            graph = WeightedGraph(adjacency)

            if expected is None:
                with pytest.raises(NoPlanFound):
                    searcher.search(graph, 0, lambda n: n == goal, zero)
            else:
                result = searcher.search(graph, 0, lambda n: n == goal, zero)
                assert result.cost == expected
                assert result.path[0] == 0 and result.path[-1] == goal
                path_cost = sum(
                    dict(adjacency[a])[b] for a, b in zip(result.path, result.path[1:])
                )
                assert path_cost == expected

    def test_cheaper_path_reopens_closed_node(self, searcher):
        # h(A) overshoots h(B) + cost(A, B), so B is closed before its cheapest path is known
        adjacency = {
            'S': [('A', 1.0), ('B', 3.0)],
            'A': [('B', 1.0)],
            'B': [('G', 5.0)],
        }
        estimates = {'S': 0.0, 'A': 4.0, 'B': 0.0, 'G': 0.0}

        result = searcher.search(
            WeightedGraph(adjacency), 'S', lambda n: n == 'G', estimates.__getitem__
        )

        assert result.cost == 7.0 == dijkstra_cost(adjacency, 'S', 'G')
        assert result.path == ['S', 'A', 'B', 'G']
        assert result.statistics.nodes_reopened == 1
        assert result.statistics.key_decreases == 1

    def test_consistent_heuristic_never_reopens(self, searcher):
        goal = Cell(5, 5)

        def manhattan(node):
            return abs(node.row - goal.row) + abs(node.col - goal.col)

        result = searcher.search(GridGraph(6, 6), Cell(0, 0), lambda n: n == goal, manhattan)
        assert result.cost == 10.0
        assert result.statistics.nodes_reopened == 0
