# route_sim/domain/topology.py
# Structure generators. Each appends fresh nodes after the current highest id
# and returns the new ids so callers can place or inspect them.
import itertools

import numpy as np

from route_sim.domain.graph import Graph
from route_sim.domain.locations import Locations


def add_line(g: Graph, count: int, close: bool = False) -> list[int]:
    ids = g.add_nodes(count)
    for a, b in itertools.pairwise(ids):
        g.connect(a, b)
    if close and count > 2:
        g.connect(ids[-1], ids[0])
    return ids


def add_star(g: Graph, count: int) -> list[int]:
    """One center plus `count` leaves linked to it."""
    ids = g.add_nodes(count + 1)
    center = ids[0]
    for leaf in ids[1:]:
        g.connect(center, leaf)
    return ids


def add_tree(g: Graph, count: int, intra: int = 0, rng: np.random.Generator | None = None) -> list[int]:
    """
    Binary tree over `count` new nodes, then `intra` extra links between random
    pairs of the new nodes.
    """
    ids = g.add_nodes(count)
    for k in range(1, count):
        g.connect(ids[(k - 1) // 2], ids[k])
    if intra and count > 1:
        if rng is None:
            raise ValueError("add_tree with interconnections needs an rng")
        for _ in range(intra):
            a, b = rng.choice(count, size=2, replace=False)
            g.connect(ids[int(a)], ids[int(b)])
    return ids


def _lattice(g: Graph, x_count: int, y_count: int, diagonals: bool) -> list[int]:
    ids = g.add_nodes(x_count * y_count)

    def at(x, y):
        return ids[y * x_count + x]

    for y in range(y_count):
        for x in range(x_count):
            if x + 1 < x_count:
                g.connect(at(x, y), at(x + 1, y))
            if y + 1 < y_count:
                g.connect(at(x, y), at(x, y + 1))
            if diagonals and x + 1 < x_count and y + 1 < y_count:
                g.connect(at(x, y), at(x + 1, y + 1))
                g.connect(at(x + 1, y), at(x, y + 1))
    return ids


def add_lattice4(g: Graph, x_count: int, y_count: int) -> list[int]:
    return _lattice(g, x_count, y_count, diagonals=False)


def add_lattice8(g: Graph, x_count: int, y_count: int) -> list[int]:
    return _lattice(g, x_count, y_count, diagonals=True)


def place_on_grid(locations: Locations, ids: list[int], x_count: int, spacing_km: float = 1.0):
    """Lay nodes out row by row, handy for lines (x_count=len(ids)) and lattices."""
    for k, i in enumerate(ids):
        locations.set_position(i, (spacing_km * (k % x_count), spacing_km * (k // x_count), 0.0))


def connect_in_range(g: Graph, locations: Locations, range_km: float) -> int:
    """Link every pair of positioned nodes closer than range_km. Returns links added."""
    placed = [i for i in g.nodes() if i in locations]
    added = 0
    for a, b in itertools.combinations(placed, 2):
        d = locations.distance(a, b)
        if d is not None and d < range_km and not g.has_link(a, b):
            g.connect(a, b)
            added += 1
    return added
