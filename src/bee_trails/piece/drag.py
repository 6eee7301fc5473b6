"""Dragging pieces onto the grid."""

import logging

from pydantic import BaseModel

from bee_trails.map.hexes import HexCoord, XYCoord
from bee_trails.map.world_map import CompletedMap, WorldMap
from .models import Piece, PieceState
from .tray import PieceTray

logger = logging.getLogger(__name__)


class DragSample(BaseModel):
    """Last pointer sample of a drag."""

    cell_index: int
    pointer: XYCoord
    delta: XYCoord


class DragUpdate(BaseModel):
    """Where a dragged piece should be drawn."""

    piece_id: int
    state: PieceState
    target_hex: HexCoord | None = None
    position: XYCoord


class DropResult(BaseModel):
    """Outcome of releasing a piece."""

    piece_id: int
    committed: bool
    position: XYCoord
    completed: CompletedMap | None = None


class PlacementValidator:
    """Checks drop targets while dragging and commits pieces on release."""

    def __init__(self, world_map: WorldMap, tray: PieceTray) -> None:
        self.world_map = world_map
        self.tray = tray
        self.dragging: dict[int, DragSample] = {}
        self.completed: CompletedMap | None = None

    def _anchor_under_pointer(self, piece: Piece, cell_index: int, pointer: XYCoord) -> HexCoord:
        """Anchor cell such that the dragged cell sits under the pointer."""
        local_x, local_y = self.world_map.cell_to_xy(piece.cells[cell_index].offset)
        return self.world_map.xy_to_cell((pointer[0] - local_x, pointer[1] - local_y))

    def _update(self, piece: Piece, sample: DragSample) -> DragUpdate:
        anchor = self._anchor_under_pointer(piece, sample.cell_index, sample.pointer)

        if piece.target_hex is not None and anchor == piece.target_hex:
            return DragUpdate(
                piece_id=piece.id,
                state=piece.state,
                target_hex=piece.target_hex,
                position=piece.position,
            )

        if self.world_map.can_place(anchor, piece.offsets):
            piece.target_hex = anchor
            piece.state = PieceState.CANDIDATE
            piece.position = self.world_map.cell_to_xy(anchor)
        else:
            piece.target_hex = None
            piece.state = PieceState.FREE
            piece.position = (
                piece.rest_position[0] + sample.delta[0],
                piece.rest_position[1] + sample.delta[1],
            )
        return DragUpdate(
            piece_id=piece.id,
            state=piece.state,
            target_hex=piece.target_hex,
            position=piece.position,
        )

    def drag_move(
        self,
        piece_id: int,
        cell_index: int,
        pointer: XYCoord,
        delta: XYCoord,
    ) -> DragUpdate | None:
        """Follow the pointer, snapping to a legal drop target if there is one.

        `pointer` is the world position of the pointer, `delta` the world-space
        distance dragged so far.
        """
        if self.completed is not None:
            return None
        piece = self.tray.get(piece_id)
        if piece is None:
            return None
        if not 0 <= cell_index < piece.size:
            raise IndexError(f"Piece {piece_id} has no cell {cell_index}")

        sample = DragSample(cell_index=cell_index, pointer=pointer, delta=delta)
        self.dragging[piece_id] = sample
        return self._update(piece, sample)

    def revalidate(self, piece_id: int) -> DragUpdate | None:
        """Check the last drag sample again (e.g. after a rotation)."""
        sample = self.dragging.get(piece_id)
        piece = self.tray.get(piece_id)
        if sample is None or piece is None or self.completed is not None:
            return None
        return self._update(piece, sample)

    def drag_end(self, piece_id: int) -> DropResult | None:
        """Release a piece: commit it if it is over a legal target."""
        self.dragging.pop(piece_id, None)
        if self.completed is not None:
            return None
        piece = self.tray.get(piece_id)
        if piece is None:
            return None

        # another drag may have taken the target since it was recorded
        if (
            piece.state != PieceState.CANDIDATE
            or piece.target_hex is None
            or not self.world_map.can_place(piece.target_hex, piece.offsets)
        ):
            piece.state = PieceState.FREE
            piece.target_hex = None
            piece.position = piece.rest_position
            return DropResult(piece_id=piece_id, committed=False, position=piece.position)

        anchor = piece.target_hex
        self.world_map.apply_placement(anchor, piece.cells)
        for cell in piece.cells:
            cell.interactive = False
        piece.state = PieceState.COMMITTED
        piece.rest_position = piece.position = self.world_map.cell_to_xy(anchor)
        self.tray.mark_placed(piece_id)
        logger.info(f"Piece {piece_id} placed at {anchor!r}")

        completed = self.world_map.check_completion()
        if completed is not None:
            self.completed = completed
            self.tray.suppress()
            self.dragging.clear()
        else:
            self.tray.refill()
        return DropResult(
            piece_id=piece_id,
            committed=True,
            position=piece.position,
            completed=completed,
        )
