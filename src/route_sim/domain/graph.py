# route_sim/domain/graph.py
from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence

from route_sim.domain.locations import Locations


class Graph:
    """
    Undirected simple graph over integer node ids.
    Invariant: adjacency is symmetric, no self-loops, every link endpoint is a node.
    """

    def __init__(self):
        self._adj: dict[int, set[int]] = {}

    # ------------- queries -------------------

    def node_count(self) -> int:
        return len(self._adj)

    def link_count(self) -> int:
        return sum(len(n) for n in self._adj.values()) // 2

    def avg_node_degree(self) -> float:
        n = self.node_count()
        return 2.0 * self.link_count() / n if n else 0.0

    def has_node(self, node_id: int) -> bool:
        return node_id in self._adj

    def has_link(self, a: int, b: int) -> bool:
        return b in self._adj.get(a, ())

    def nodes(self) -> list[int]:
        return sorted(self._adj)

    def neighbors(self, node_id: int) -> tuple[int, ...]:
        return tuple(sorted(self._adj.get(node_id, ())))

    def links(self) -> list[tuple[int, int]]:
        return sorted((a, b) for a, ns in self._adj.items() for b in ns if a < b)

    def next_id(self) -> int:
        return max(self._adj) + 1 if self._adj else 0

    def components(self) -> list[list[int]]:
        """Connected components, each sorted, ordered by their lowest id."""
        seen: set[int] = set()
        out = []
        for start in self.nodes():
            if start in seen:
                continue
            comp = list(bfs_hops(self, start))
            seen.update(comp)
            out.append(sorted(comp))
        return out

    # ------------- edits ---------------------
    # Edits skip unknown ids and return them so the caller can report them.

    def add_node(self, node_id: int) -> None:
        if node_id < 0:
            raise ValueError(f"node id must be non-negative, got {node_id}")
        self._adj.setdefault(node_id, set())

    def add_nodes(self, count: int) -> list[int]:
        start = self.next_id()
        ids = list(range(start, start + count))
        for i in ids:
            self._adj[i] = set()
        return ids

    def remove_nodes(self, ids: Iterable[int]) -> list[int]:
        rejected = []
        for i in ids:
            ns = self._adj.pop(i, None)
            if ns is None:
                rejected.append(i)
                continue
            for n in ns:
                self._adj[n].discard(i)
        return rejected

    def connect(self, a: int, b: int) -> list[int]:
        rejected = [i for i in (a, b) if i not in self._adj]
        if not rejected and a != b:
            self._adj[a].add(b)
            self._adj[b].add(a)
        return rejected

    def disconnect(self, a: int, b: int) -> list[int]:
        rejected = [i for i in (a, b) if i not in self._adj]
        if not rejected:
            self._adj[a].discard(b)
            self._adj[b].discard(a)
        return rejected

    def connect_nodes(self, ids: Sequence[int]) -> list[int]:
        """Link consecutive ids of the list as a chain: [a, b, c] -> a-b, b-c."""
        return self._chain(ids, self.connect)

    def disconnect_nodes(self, ids: Sequence[int]) -> list[int]:
        """Unlink consecutive ids of the list: [a, b, c] -> a-b, b-c."""
        return self._chain(ids, self.disconnect)

    def _chain(self, ids: Sequence[int], op) -> list[int]:
        rejected = sorted({i for i in ids if i not in self._adj})
        for a, b in zip(ids[:-1], ids[1:]):
            op(a, b)
        return rejected

    def remove_unconnected_nodes(self) -> list[int]:
        lonely = [i for i, ns in self._adj.items() if not ns]
        for i in lonely:
            del self._adj[i]
        return sorted(lonely)

    def clear(self) -> None:
        self._adj.clear()

    # ------------- derived -------------------

    def minimum_spanning_tree(self, locations: Locations | None = None) -> Graph:
        """
        Minimum spanning forest (Kruskal). Edge weight is the euclidean distance
        when both ends have a position, else one hop. Ties go to the lowest ids.
        The result keeps every node, so link_count == node_count - components.
        """

        def weight(a: int, b: int) -> float:
            d = locations.distance(a, b) if locations is not None else None
            return 1.0 if d is None else d

        edges = sorted((weight(a, b), a, b) for a, b in self.links())
        uf = UnionFind(self._adj)
        mst = Graph()
        for i in self._adj:
            mst.add_node(i)
        for _, a, b in edges:
            if uf.union(a, b):
                mst.connect(a, b)
        return mst

    def view(self, locations: Locations | None = None) -> GraphView:
        return GraphView(self, locations)


class UnionFind:
    def __init__(self, items: Iterable[int]):
        self.parent = {i: i for i in items}
        self.rank = dict.fromkeys(self.parent, 0)

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, a: int, b: int) -> bool:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if self.rank[ra] < self.rank[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        if self.rank[ra] == self.rank[rb]:
            self.rank[ra] += 1
        return True


class GraphView:
    """
    Read-only topology snapshot handed to routing algorithms.
    Node ids map to dense slots [0, node_count) in ascending id order.
    Positions are read through to the live Locations so movement is visible.
    """

    __slots__ = ("_ids", "_slot", "_nbrs", "_locations")

    def __init__(self, graph: Graph, locations: Locations | None = None):
        self._ids: tuple[int, ...] = tuple(graph.nodes())
        self._slot = {i: s for s, i in enumerate(self._ids)}
        self._nbrs = {i: graph.neighbors(i) for i in self._ids}
        self._locations = locations

    @property
    def node_count(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> tuple[int, ...]:
        return self._ids

    def has_node(self, node_id: int) -> bool:
        return node_id in self._slot

    def slot(self, node_id: int) -> int:
        return self._slot[node_id]

    def node_at(self, slot: int) -> int:
        return self._ids[slot]

    def neighbors(self, node_id: int) -> tuple[int, ...]:
        return self._nbrs.get(node_id, ())

    def has_positions(self) -> bool:
        return self._locations is not None and self._locations.enabled

    def position(self, node_id: int):
        return self._locations.position(node_id) if self._locations is not None else None

    def weight(self, a: int, b: int) -> float:
        """Link weight: euclidean distance in km when both ends are positioned, else 1."""
        d = self._locations.distance(a, b) if self._locations is not None else None
        return 1.0 if d is None else d


def bfs_hops(graph: Graph | GraphView, source: int) -> dict[int, int]:
    """Hop distance from source to every reachable node."""
    dist = {source: 0}
    q = deque([source])
    while q:
        u = q.popleft()
        for v in graph.neighbors(u):
            if v not in dist:
                dist[v] = dist[u] + 1
                q.append(v)
    return dist
