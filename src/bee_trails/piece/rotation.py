"""Rotating pieces before they are placed."""

import logging

from pydantic import BaseModel

from .drag import PlacementValidator
from .models import PieceState
from .tray import PieceTray

logger = logging.getLogger(__name__)


class HoveredCell(BaseModel):
    """Cell currently under the pointer."""

    piece_id: int
    cell_index: int


class RotationHandler:
    """Turns the hovered piece around the hovered cell."""

    def __init__(
        self,
        tray: PieceTray,
        validator: PlacementValidator,
        cooldown_ms: float = 300.0,
    ) -> None:
        self.tray = tray
        self.validator = validator
        self.cooldown_ms = cooldown_ms
        self.hovered: HoveredCell | None = None

    def hover(self, piece_id: int, cell_index: int) -> None:
        """Pointer entered a piece cell."""
        self.hovered = HoveredCell(piece_id=piece_id, cell_index=cell_index)

    def unhover(self, piece_id: int) -> None:
        """Pointer left a piece cell."""
        if self.hovered is not None and self.hovered.piece_id == piece_id:
            self.hovered = None

    def tick(self, elapsed_ms: float) -> None:
        """Count down rotation cooldowns."""
        for piece in self.tray.active:
            if piece.cooldown_ms > 0:
                piece.cooldown_ms = max(0.0, piece.cooldown_ms - elapsed_ms)

    def rotate(self, clockwise: bool = True) -> bool:
        """Rotate the hovered piece by one step.

        Returns False if nothing was rotated. A piece that is being dragged is
        checked against the grid again right away.
        """
        if self.hovered is None:
            return False
        piece = self.tray.get(self.hovered.piece_id)
        if piece is None or piece.is_cooling_down:
            return False
        if not 0 <= self.hovered.cell_index < piece.size:
            return False

        pivot = piece.cells[self.hovered.cell_index].offset
        step = 1 if clockwise else -1
        for cell in piece.cells:
            cell.offset = cell.offset.rotate_around(pivot, clockwise=clockwise)
            cell.content = cell.content.rotated(clockwise=clockwise)
            cell.side_index = (cell.side_index + step) % 6

        piece.target_hex = None
        piece.state = PieceState.FREE
        piece.cooldown_ms = self.cooldown_ms
        logger.debug(f"Rotated piece {piece.id} {'cw' if clockwise else 'ccw'}")

        self.validator.revalidate(piece.id)
        return True
