import pytest

from bee_trails.data import base_catalog
from bee_trails.data.models import GameSettings
from bee_trails.map.hexes import HexCoord, HexLayout
from bee_trails.map.layout import GridLayout
from bee_trails.map.world_map import WorldMap
from bee_trails.piece.drag import PlacementValidator
from bee_trails.piece.generator import PieceGenerator
from bee_trails.piece.models import Piece, PieceHexData, RouteCell
from bee_trails.piece.rotation import RotationHandler
from bee_trails.piece.tray import PieceTray

STRAIGHT = (False, True, False, False, True, False)


def make_piece(piece_id, cells, rest=(500.0, 0.0)):
    """Piece from (offset, connections) pairs."""
    return Piece(
        id=piece_id,
        cells=[
            PieceHexData(
                offset=HexCoord.from_axial(*offset),
                content=RouteCell(connections=conns),
            )
            for offset, conns in cells
        ],
        rest_position=rest,
        position=rest,
    )


class Board:
    """Radius 2 grid with houses left and right, and an empty tray."""

    def __init__(self) -> None:
        self.settings = GameSettings(map_radius=2)
        self.hex_layout = HexLayout()
        self.world_map = WorldMap.from_layout(
            GridLayout.from_coords(2, [(-2, 0), (2, 0)]), self.hex_layout
        )
        self.tray = PieceTray(PieceGenerator(base_catalog, seed=0), self.settings, self.hex_layout)
        self.validator = PlacementValidator(self.world_map, self.tray)
        self.rotation = RotationHandler(self.tray, self.validator, cooldown_ms=300.0)

    def add(self, piece: Piece) -> Piece:
        self.tray.pieces[piece.id] = piece
        return piece

    def xy(self, q, r):
        return self.world_map.cell_to_xy(HexCoord.from_axial(q, r))


@pytest.fixture
def board():
    return Board()
