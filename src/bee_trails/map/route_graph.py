"""Connectivity graph between tiles and the edges they share.

Tiles and hex edges are both nodes. A tile links to an edge node only when a
placed cell has a route stub on that side, so two neighbouring tiles are
connected only if both of them open the shared edge (or one of them is a
house, which accepts any stub pointed at it).
"""

import heapq
import logging
from collections import deque
from typing import Any, Callable

from pydantic import BaseModel, model_validator

from .hexes import HexCoord

logger = logging.getLogger(__name__)

NodeId = int


class EdgeConnection(BaseModel):
    """The boundary between two adjacent cells.

    The pair is unordered: `first` is always the lower coordinate.
    """

    model_config = {"frozen": True}

    first: HexCoord
    second: HexCoord

    @model_validator(mode="before")
    @classmethod
    def _canonical_order(cls, data: Any) -> Any:
        """Sort the pair numerically."""
        if isinstance(data, dict) and "first" in data and "second" in data:
            a = HexCoord.model_validate(data["first"])
            b = HexCoord.model_validate(data["second"])
            if b < a:
                a, b = b, a
            return {"first": a, "second": b}
        return data

    @model_validator(mode="after")
    def _check_adjacent(self) -> "EdgeConnection":
        """Only neighbours share an edge."""
        if self.first.distance_to(self.second) != 1:
            raise ValueError(f"Cells are not adjacent: {self.first!r}, {self.second!r}")
        return self

    @classmethod
    def between(cls, a: HexCoord, b: HexCoord) -> "EdgeConnection":
        """Edge shared by two cells, in any order."""
        return cls(first=a, second=b)

    def sort_key(self) -> tuple[tuple[int, int], tuple[int, int]]:
        """Numeric sort key."""
        return (self.first.axial, self.second.axial)

    def __repr__(self) -> str:
        return f"EdgeConnection({self.first!r}, {self.second!r})"


class TileNode(BaseModel):
    """Graph node for a grid cell."""

    model_config = {"frozen": True}

    cell: HexCoord


class EdgeNode(BaseModel):
    """Graph node for the edge between two cells."""

    model_config = {"frozen": True}

    edge: EdgeConnection


GraphNode = TileNode | EdgeNode


class RouteGraph:
    """Undirected graph stored as a node table with integer handles."""

    def __init__(self) -> None:
        self.nodes: list[GraphNode] = []
        self.adjacency: list[set[NodeId]] = []
        self.tile_nodes: dict[HexCoord, NodeId] = {}
        self.edge_nodes: dict[EdgeConnection, NodeId] = {}

    def _add_node(self, node: GraphNode) -> NodeId:
        self.nodes.append(node)
        self.adjacency.append(set())
        return len(self.nodes) - 1

    def add_tile_node(self, cell: HexCoord) -> NodeId:
        """Add a node for a cell (once)."""
        if cell in self.tile_nodes:
            raise ValueError(f"Tile node already exists for {cell!r}")
        node_id = self._add_node(TileNode(cell=cell))
        self.tile_nodes[cell] = node_id
        return node_id

    def get_or_create_edge_node(self, a: HexCoord, b: HexCoord) -> NodeId:
        """Get the node of the edge between two cells, creating it if needed."""
        edge = EdgeConnection.between(a, b)
        node_id = self.edge_nodes.get(edge)
        if node_id is None:
            node_id = self._add_node(EdgeNode(edge=edge))
            self.edge_nodes[edge] = node_id
            logger.debug(f"New edge node {node_id} for {edge!r}")
        return node_id

    def add_link(self, u: NodeId, v: NodeId) -> None:
        """Connect two nodes (idempotent)."""
        self.adjacency[u].add(v)
        self.adjacency[v].add(u)

    def degree(self, node_id: NodeId) -> int:
        """Number of neighbours of a node."""
        return len(self.adjacency[node_id])

    def is_tile(self, node_id: NodeId) -> bool:
        """Whether the node is a tile node."""
        return isinstance(self.nodes[node_id], TileNode)

    def edge_of(self, node_id: NodeId) -> EdgeConnection:
        """Edge connection of an edge node."""
        node = self.nodes[node_id]
        if not isinstance(node, EdgeNode):
            raise TypeError(f"Node {node_id} is not an edge node: {node!r}")
        return node.edge

    def representative_hex(self, node_id: NodeId) -> HexCoord:
        """A cell standing in for the node's position."""
        node = self.nodes[node_id]
        if isinstance(node, TileNode):
            return node.cell
        return node.edge.first

    @property
    def edge_count(self) -> int:
        """Number of links."""
        return sum(len(adj) for adj in self.adjacency) // 2

    # Searches

    def reachable_from(self, source: NodeId) -> dict[NodeId, int]:
        """Unit-weight distances to every node reachable from the source."""
        dist: dict[NodeId, int] = {source: 0}
        queue = deque([source])
        while queue:
            cur = queue.popleft()
            for nxt in self.adjacency[cur]:
                if nxt not in dist:
                    dist[nxt] = dist[cur] + 1
                    queue.append(nxt)
        return dist

    def shortest_path(
        self,
        source: NodeId,
        target: NodeId,
        heuristic: Callable[[NodeId], float] | None = None,
    ) -> list[NodeId] | None:
        """A* search with unit link weights.

        Ties are broken by node id so results are reproducible.
        """
        if heuristic is None:
            heuristic = lambda _: 0.0  # noqa: E731

        gscore: dict[NodeId, int] = {source: 0}
        came_from: dict[NodeId, NodeId] = {}
        open_heap: list[tuple[float, int, NodeId]] = [(heuristic(source), 0, source)]
        closed: set[NodeId] = set()

        while open_heap:
            _, g, cur = heapq.heappop(open_heap)
            if cur in closed:
                continue
            closed.add(cur)

            if cur == target:
                path = [cur]
                while cur in came_from:
                    cur = came_from[cur]
                    path.append(cur)
                path.reverse()
                return path

            for nxt in sorted(self.adjacency[cur]):
                ng = g + 1
                if ng < gscore.get(nxt, ng + 1):
                    gscore[nxt] = ng
                    came_from[nxt] = cur
                    heapq.heappush(open_heap, (ng + heuristic(nxt), ng, nxt))

        return None

    def dead_end_edges(self) -> list[EdgeConnection]:
        """Edges whose node has exactly one link (an unanswered route stub)."""
        res = [
            self.edge_of(node_id)
            for node_id in self.edge_nodes.values()
            if self.degree(node_id) == 1
        ]
        return sorted(res, key=lambda e: e.sort_key())
