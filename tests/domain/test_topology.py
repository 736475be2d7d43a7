# tests/domain/test_topology.py
import numpy as np

from route_sim.domain.graph import Graph
from route_sim.domain.locations import Locations
from route_sim.domain.topology import (
    add_lattice4,
    add_lattice8,
    add_line,
    add_star,
    add_tree,
    connect_in_range,
    place_on_grid,
)


def test_line_open_and_closed():
    g = Graph()
    assert add_line(g, 4) == [0, 1, 2, 3]
    assert g.link_count() == 3
    add_line(g, 4, close=True)
    assert g.link_count() == 3 + 4
    assert g.has_link(7, 4)


def test_star_has_center_and_leaves():
    g = Graph()
    ids = add_star(g, 5)
    assert ids == [0, 1, 2, 3, 4, 5]
    assert g.neighbors(0) == (1, 2, 3, 4, 5)
    assert all(g.neighbors(leaf) == (0,) for leaf in ids[1:])


def test_lattices():
    g4, g8 = Graph(), Graph()
    add_lattice4(g4, 3, 2)
    add_lattice8(g8, 3, 2)
    assert g4.node_count() == g8.node_count() == 6
    assert g4.link_count() == 7
    assert g8.link_count() == 7 + 4
    assert g8.has_link(0, 4) and g8.has_link(1, 3)


def test_tree_and_interconnections():
    g = Graph()
    add_tree(g, 7)
    assert g.link_count() == 6
    assert g.neighbors(0) == (1, 2)
    assert g.neighbors(2) == (0, 5, 6)

    h = Graph()
    add_tree(h, 7, intra=3, rng=np.random.default_rng(1))
    assert 6 <= h.link_count() <= 9
    assert len(h.components()) == 1


def test_builders_append_after_existing_nodes():
    g = Graph()
    add_line(g, 2)
    assert add_star(g, 2) == [2, 3, 4]
    assert len(g.components()) == 2


def test_connect_in_range():
    g = Graph()
    g.add_nodes(3)
    loc = Locations()
    place_on_grid(loc, [0, 1, 2], x_count=3, spacing_km=1.0)
    loc.move_node(2, (5.0, 0.0, 0.0))
    assert connect_in_range(g, loc, 1.5) == 1
    assert g.links() == [(0, 1)]
    # existing links are not counted again
    assert connect_in_range(g, loc, 1.5) == 0
