# tests/domain/test_graph.py
import networkx as nx
import numpy as np

from route_sim.domain.graph import Graph, bfs_hops
from route_sim.domain.locations import Locations
from route_sim.domain.topology import add_lattice4, add_line


def _line(n: int) -> Graph:
    g = Graph()
    add_line(g, n)
    return g


def _random_graph(rng, n: int, p: float) -> Graph:
    g = Graph()
    g.add_nodes(n)
    for a in range(n):
        for b in range(a + 1, n):
            if rng.random() < p:
                g.connect(a, b)
    return g


def _to_nx(g: Graph) -> nx.Graph:
    G = nx.Graph()
    G.add_nodes_from(g.nodes())
    G.add_edges_from(g.links())
    return G


# ------------------ edits ------------------


def test_remove_node_cascades_to_its_links():
    g = _line(5)
    assert g.remove_nodes([2]) == []
    assert g.node_count() == 4
    assert g.link_count() == 2
    assert g.neighbors(1) == (0,)
    assert g.neighbors(3) == (4,)
    assert g.links() == [(0, 1), (3, 4)]


def test_remove_unknown_id_is_reported_and_skipped():
    g = _line(3)
    assert g.remove_nodes([1, 99]) == [99]
    assert g.nodes() == [0, 2]
    assert g.link_count() == 0


def test_connect_nodes_links_consecutive_pairs_only():
    g = Graph()
    g.add_nodes(4)
    assert g.connect_nodes([0, 1, 2, 3]) == []
    assert g.links() == [(0, 1), (1, 2), (2, 3)]
    assert not g.has_link(0, 2)


def test_connect_chain_through_unknown_id_skips_both_touching_pairs():
    g = Graph()
    g.add_nodes(3)
    assert g.connect_nodes([0, 9, 2]) == [9]
    assert g.link_count() == 0


def test_disconnect_nodes_chain():
    g = _line(4)
    g.disconnect_nodes([1, 2, 3])
    assert g.links() == [(0, 1)]


def test_no_self_loops_and_adjacency_is_symmetric():
    g = Graph()
    g.add_nodes(3)
    g.connect(1, 1)
    g.connect(0, 2)
    g.connect(2, 0)
    assert g.link_count() == 1
    assert g.has_link(0, 2) and g.has_link(2, 0)
    assert g.neighbors(1) == ()


def test_avg_degree_and_empty_graph():
    assert Graph().avg_node_degree() == 0.0
    assert abs(_line(5).avg_node_degree() - 1.6) < 1e-12


def test_remove_unconnected_nodes():
    g = _line(3)
    g.add_nodes(2)
    assert g.remove_unconnected_nodes() == [3, 4]
    assert g.nodes() == [0, 1, 2]


def test_add_nodes_continues_after_highest_id():
    g = _line(3)
    g.remove_nodes([0])
    assert g.add_nodes(2) == [3, 4]


def test_clear():
    g = _line(4)
    g.clear()
    assert g.node_count() == 0 and g.link_count() == 0


def test_components_are_sorted_by_lowest_id():
    g = _line(3)
    add_line(g, 2)
    g.add_nodes(1)
    assert g.components() == [[0, 1, 2], [3, 4], [5]]


# ------------------ MST ------------------


def test_mst_on_lattice_spans_with_n_minus_one_links():
    g = Graph()
    add_lattice4(g, 3, 3)
    mst = g.minimum_spanning_tree()
    assert mst.node_count() == 9
    assert mst.link_count() == 8
    assert nx.is_tree(_to_nx(mst))
    assert all(g.has_link(a, b) for a, b in mst.links())


def test_mst_is_a_forest_on_disconnected_graph():
    g = _line(3)
    add_line(g, 2)
    g.add_nodes(1)
    mst = g.minimum_spanning_tree()
    assert mst.node_count() == 6
    assert mst.link_count() == 6 - 3


def test_mst_tie_break_prefers_lowest_ids():
    g = Graph()
    g.add_nodes(4)
    g.connect_nodes([0, 1, 2, 3, 0])
    assert g.minimum_spanning_tree().links() == [(0, 1), (0, 3), (1, 2)]


def test_mst_uses_euclidean_weights_when_positioned():
    g = Graph()
    g.add_nodes(3)
    g.connect_nodes([0, 1, 2, 0])
    loc = Locations()
    loc.set_position(0, (0.0, 0.0, 0.0))
    loc.set_position(1, (1.0, 0.0, 0.0))
    loc.set_position(2, (5.0, 0.0, 0.0))
    assert g.minimum_spanning_tree(loc).links() == [(0, 1), (1, 2)]


def test_mst_link_count_matches_components_on_random_graphs():
    rng = np.random.default_rng(11)
    for _ in range(20):
        g = _random_graph(rng, int(rng.integers(2, 25)), 0.12)
        mst = g.minimum_spanning_tree()
        G = _to_nx(g)
        assert mst.link_count() == g.node_count() - nx.number_connected_components(G)
        assert nx.is_forest(_to_nx(mst))


# ------------------ BFS & view ------------------


def test_bfs_hops_matches_networkx():
    rng = np.random.default_rng(5)
    g = _random_graph(rng, 30, 0.1)
    G = _to_nx(g)
    for src in (0, 7, 29):
        assert bfs_hops(g, src) == dict(nx.single_source_shortest_path_length(G, src))


def test_view_maps_sparse_ids_to_dense_slots():
    g = _line(4)
    g.remove_nodes([1])
    view = g.view()
    assert view.node_count == 3
    assert view.ids == (0, 2, 3)
    assert view.slot(2) == 1 and view.node_at(2) == 3
    assert view.neighbors(2) == (3,)
    assert not view.has_node(1)


def test_view_weight_uses_positions_when_present():
    g = _line(3)
    loc = Locations()
    loc.set_position(0, (0.0, 0.0, 0.0))
    loc.set_position(1, (3.0, 4.0, 0.0))
    view = g.view(loc)
    assert view.weight(0, 1) == 5.0
    assert view.weight(1, 2) == 1.0  # node 2 has no position
    assert view.has_positions()
