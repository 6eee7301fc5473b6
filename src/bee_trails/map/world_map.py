"""The grid: occupancy of each cell and the route graph built from placements."""

import logging
from typing import Iterable, Literal, Sequence

from pydantic import BaseModel

from bee_trails.piece.models import PieceHexData
from .hexes import HexCoord, HexLayout, XYCoord
from .layout import GridConfigError, GridLayout
from .route_graph import EdgeConnection, NodeId, RouteGraph

logger = logging.getLogger(__name__)


class PlacementError(ValueError):
    """A piece can't be placed where it was asked to go."""


class HouseMarker(BaseModel):
    """Occupant of a house cell."""

    kind: Literal["house"] = "house"


class MapHex(BaseModel):
    """A single grid cell."""

    node_id: int
    occupant: PieceHexData | HouseMarker | None = None

    @property
    def is_house(self) -> bool:
        """Whether a house sits here."""
        return isinstance(self.occupant, HouseMarker)

    @property
    def is_free(self) -> bool:
        """Whether a piece may still be placed here."""
        return self.occupant is None


class CompletedMap(BaseModel):
    """Result of a solved board."""

    routes: list[list[HexCoord]]
    dead_ends: list[EdgeConnection]


class WorldMap:
    """Grid and graph manager.

    Owns every cell of the round and the graph linking them. The graph is only
    changed through `apply_placement`.
    """

    def __init__(
        self,
        cells: dict[HexCoord, MapHex],
        houses: list[HexCoord],
        graph: RouteGraph,
        hex_layout: HexLayout | None = None,
    ) -> None:
        self.cells = cells
        self.houses = sorted(houses)
        self.graph = graph
        self.hex_layout = hex_layout if hex_layout is not None else HexLayout()

    @classmethod
    def create_grid(
        cls,
        shape: Iterable[HexCoord],
        houses: Iterable[HexCoord],
        hex_layout: HexLayout | None = None,
    ) -> "WorldMap":
        """Set up an empty grid with houses on it."""
        graph = RouteGraph()
        cells: dict[HexCoord, MapHex] = {}
        for cell in sorted(set(shape)):
            cells[cell] = MapHex(node_id=graph.add_tile_node(cell))

        house_list = sorted(set(houses))
        if len(house_list) == 0:
            raise GridConfigError("A grid needs at least one house.")
        outside = [h for h in house_list if h not in cells]
        if outside:
            raise GridConfigError(f"Houses outside the grid: {outside!r}")

        for house in house_list:
            cells[house].occupant = HouseMarker()

        logger.info(f"Created grid with {len(cells)} cells and {len(house_list)} houses")
        return cls(cells=cells, houses=house_list, graph=graph, hex_layout=hex_layout)

    @classmethod
    def from_layout(
        cls, grid_layout: GridLayout, hex_layout: HexLayout | None = None
    ) -> "WorldMap":
        """Set up a grid from a layout."""
        return cls.create_grid(grid_layout.shape, grid_layout.houses, hex_layout)

    # Lookups

    def __getitem__(self, cell: HexCoord) -> MapHex:
        return self.cells[cell]

    def tile_node(self, cell: HexCoord) -> NodeId:
        """Graph node of a cell."""
        return self.cells[cell].node_id

    def is_house(self, cell: HexCoord) -> bool:
        """Whether a house sits on the cell."""
        map_hex = self.cells.get(cell)
        return map_hex is not None and map_hex.is_house

    def get_or_create_edge_node(self, a: HexCoord, b: HexCoord) -> NodeId:
        """Graph node of the edge between two cells."""
        return self.graph.get_or_create_edge_node(a, b)

    def cell_to_xy(self, cell: HexCoord) -> XYCoord:
        """World position of a cell center."""
        return self.hex_layout.cell_to_xy(cell)

    def xy_to_cell(self, point: XYCoord) -> HexCoord:
        """Cell under a world position (may be outside the grid)."""
        return self.hex_layout.xy_to_cell(point)

    # Placement

    def can_place(self, anchor: HexCoord, offsets: Iterable[HexCoord]) -> bool:
        """Whether every cell lands on an existing, free grid cell."""
        for offset in offsets:
            map_hex = self.cells.get(anchor + offset)
            if map_hex is None or not map_hex.is_free:
                return False
        return True

    def apply_placement(self, anchor: HexCoord, cells: Sequence[PieceHexData]) -> None:
        """Place piece cells on the grid and link their route stubs."""
        if not self.can_place(anchor, [c.offset for c in cells]):
            raise PlacementError(f"Can't place piece at {anchor!r}")

        for cell in cells:
            absolute = anchor + cell.offset
            connections = cell.connections
            if connections is not None:
                tile_id = self.tile_node(absolute)
                for side, is_open in enumerate(connections):
                    if not is_open:
                        continue
                    neighbor = absolute.neighbor(side)
                    edge_id = self.get_or_create_edge_node(absolute, neighbor)
                    self.graph.add_link(tile_id, edge_id)
                    # houses take any stub pointed at them
                    if self.is_house(neighbor):
                        self.graph.add_link(edge_id, self.tile_node(neighbor))
            self.cells[absolute].occupant = cell

        logger.debug(
            f"Placed {len(cells)} cells at {anchor!r}, graph has {self.graph.edge_count} links"
        )

    # Completion

    def dead_ends(self) -> list[EdgeConnection]:
        """Route stubs that lead nowhere."""
        return self.graph.dead_end_edges()

    def check_completion(self) -> CompletedMap | None:
        """Check if all houses are connected.

        Returns routes from the lowest house to every other house, or None
        while some house is still unreachable.
        """
        source, *others = self.houses
        source_id = self.tile_node(source)
        reachable = self.graph.reachable_from(source_id)
        if any(self.tile_node(house) not in reachable for house in others):
            return None

        routes: list[list[HexCoord]] = []
        for house in others:
            path = self.graph.shortest_path(
                source_id,
                self.tile_node(house),
                heuristic=lambda n, h=house: self.graph.representative_hex(n).distance_to(h),
            )
            if path is None:  # pragma: no cover - reachable implies a path
                raise RuntimeError(f"No path to reachable house {house!r}")
            routes.append(
                [self.graph.representative_hex(n) for n in path if self.graph.is_tile(n)]
            )

        dead_ends = self.dead_ends()
        logger.info(f"Map completed: {len(routes)} routes, {len(dead_ends)} dead ends")
        return CompletedMap(routes=routes, dead_ends=dead_ends)
