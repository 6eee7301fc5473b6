"""The lot of pieces the player picks from."""

import logging
from math import sqrt

from bee_trails.data.models import GameSettings
from bee_trails.map.hexes import HexCoord, HexLayout, XYCoord
from .generator import PieceGenerator
from .models import Piece

logger = logging.getLogger(__name__)


def staging_positions(
    count: int, radius: int, hex_layout: HexLayout, offset: float = 2.5
) -> list[XYCoord]:
    """World positions of the tray slots, in a column right of the grid."""
    right_x, _ = hex_layout.cell_to_xy(HexCoord.from_axial(radius, 0))
    x = right_x + offset * sqrt(3) * hex_layout.scale
    spacing = 3 * hex_layout.scale
    top = (count - 1) / 2 * spacing
    return [(x, top - i * spacing) for i in range(count)]


class PieceTray:
    """Active (un-placed) pieces, refilled a full lot at a time."""

    def __init__(
        self,
        generator: PieceGenerator,
        settings: GameSettings,
        hex_layout: HexLayout,
    ) -> None:
        self.generator = generator
        self.settings = settings
        self.slots = staging_positions(
            settings.batch_size,
            settings.map_radius,
            hex_layout,
            offset=settings.staging_offset,
        )
        self.pieces: dict[int, Piece] = {}
        self.placed: list[Piece] = []
        self.suppressed = False

    def __contains__(self, piece_id: int) -> bool:
        return piece_id in self.pieces

    def __len__(self) -> int:
        return len(self.pieces)

    def get(self, piece_id: int) -> Piece | None:
        """Active piece by id."""
        return self.pieces.get(piece_id)

    @property
    def active(self) -> list[Piece]:
        """Active pieces, oldest first."""
        return list(self.pieces.values())

    def refill(self) -> list[Piece]:
        """Deal a new lot if too few pieces are left.

        Leftover pieces of the old lot are discarded. Returns the new pieces.
        """
        if self.suppressed or len(self) >= self.settings.min_active_pieces:
            return []
        if self.pieces:
            logger.debug(f"Discarding {len(self.pieces)} leftover pieces")
        self.pieces.clear()
        batch = self.generator.generate_batch(self.settings.batch_size, self.slots)
        for piece in batch:
            self.pieces[piece.id] = piece
        logger.info(f"Dealt {len(batch)} new pieces: {[p.size for p in batch]}")
        return batch

    def mark_placed(self, piece_id: int) -> Piece:
        """Take a committed piece out of the tray."""
        piece = self.pieces.pop(piece_id)
        self.placed.append(piece)
        return piece

    def suppress(self) -> None:
        """Stop dealing pieces and drop the current lot (the board is done)."""
        self.suppressed = True
        self.pieces.clear()
