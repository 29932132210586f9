"""Tests for Graph and its post-order traversal."""

from digestflow import Graph


def _build(*edges):
    g = Graph()
    for u, v in edges:
        g.add_edge(u, v)
    return g


class TestEdges:
    def test_add_edge_adds_both_nodes(self):
        g = _build((1, 2))
        assert set(g.nodes()) == {1, 2}
        assert g.adjacent(1) == (2,)
        assert g.adjacent(2) == ()

    def test_duplicate_edges_are_noops(self):
        g = _build((1, 2), (1, 2), (1, 3))
        assert g.adjacent(1) == (2, 3)

    def test_adjacent_unknown_node(self):
        assert Graph().adjacent(42) == ()

    def test_has_edge_is_directed(self):
        g = _build((1, 2))
        assert g.has_edge(1, 2)
        assert not g.has_edge(2, 1)

    def test_len_and_repr(self):
        g = _build((1, 2), (2, 3))
        g.add_node(4)
        assert len(g) == 4
        assert "2 edges" in repr(g)


class TestTraverse:
    def test_post_order_chain(self):
        g = _build((1, 2), (2, 3))
        assert g.traverse([1]) == [3, 2, 1]

    def test_includes_isolated_source(self):
        g = Graph()
        g.add_node(7)
        assert g.traverse([7]) == [7]

    def test_unknown_source_is_recorded(self):
        assert Graph().traverse([9]) == [9]

    def test_visits_each_node_once(self):
        # diamond: 1 -> 2 -> 4, 1 -> 3 -> 4
        g = _build((1, 2), (1, 3), (2, 4), (3, 4))
        order = g.traverse([1])
        assert sorted(order) == [1, 2, 3, 4]

    def test_reverse_is_topological(self):
        edges = [(1, 2), (1, 3), (2, 4), (3, 4), (4, 5), (6, 3)]
        g = _build(*edges)
        order = list(reversed(g.traverse([1, 6])))
        for u, v in edges:
            assert order.index(u) < order.index(v)

    def test_skips_already_visited_sources(self):
        g = _build((1, 2), (2, 3))
        assert g.traverse([1, 2, 3]) == [3, 2, 1]

    def test_sources_in_sequence_order(self):
        g = _build((1, 10), (2, 20))
        assert g.traverse([2, 1]) == [20, 2, 10, 1]

    def test_only_reachable_nodes(self):
        g = _build((1, 2), (3, 4))
        assert g.traverse([1]) == [2, 1]

    def test_no_state_between_calls(self):
        g = _build((1, 2))
        assert g.traverse([1]) == g.traverse([1])

    def test_long_chain_does_not_recurse(self):
        g = Graph()
        n = 5000
        for i in range(n):
            g.add_edge(i, i + 1)
        order = g.traverse([0])
        assert order[0] == n
        assert order[-1] == 0

    def test_cycle_terminates(self):
        g = _build((1, 2), (2, 1))
        assert sorted(g.traverse([1])) == [1, 2]
