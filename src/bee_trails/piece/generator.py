"""Random piece generation."""

import logging
from random import Random

from bee_trails.data.models import BlueprintCatalog, Connections
from bee_trails.map.hexes import HEX_ORIGIN, HEX_UNIT_VECTORS, XYCoord, opposite_side
from .models import CellContent, FillerCell, Piece, PieceHexData, RouteCell

logger = logging.getLogger(__name__)


def find_attachment_side(
    first: Connections, second: Connections | None, desired: bool
) -> int | None:
    """Find a side of the first cell where the second cell can be attached.

    The first cell's side must match `desired`; so must the facing side of the
    second cell, unless it is a filler.
    """
    for side in range(6):
        if first[side] != desired:
            continue
        if second is not None and second[opposite_side(side)] != desired:
            continue
        return side
    return None


class PieceGenerator:
    """Makes pieces out of weighted blueprints."""

    def __init__(
        self,
        catalog: BlueprintCatalog,
        *,
        seed: Random | int | None = None,
    ) -> None:
        self.catalog = catalog
        if isinstance(seed, Random):
            # clone
            self.rng = Random()
            self.rng.setstate(seed.getstate())
        else:
            self.rng = Random(seed)
        self._next_id = 0

    def _random_route_cell(self) -> tuple[RouteCell, int]:
        """Sample a blueprint and turn it randomly.

        Returns the cell and its facing (clockwise steps from the blueprint).
        """
        bp = self.catalog.sample_blueprint(self.rng)
        steps = self.rng.randint(0, 5)
        cell = RouteCell(connections=bp.rotated(steps), atlas_index=bp.atlas_index)
        return cell, (-steps) % 6

    def generate_cells(self) -> list[PieceHexData]:
        """Cells of one random piece."""
        size = self.catalog.sample_size(self.rng)
        if size > 2:
            # only pairs know how to attach their cells
            logger.debug(f"Piece size {size} not supported, using 2")
            size = 2

        first, first_side = self._random_route_cell()
        cells = [PieceHexData(offset=HEX_ORIGIN, content=first, side_index=first_side)]
        if size < 2:
            return cells

        second: CellContent
        second_side = 0
        if self.catalog.sample_is_filler(self.rng):
            second = FillerCell()
        else:
            second, second_side = self._random_route_cell()
        desired = self.rng.random() < 0.5

        second_conns = second.connections if isinstance(second, RouteCell) else None
        side = find_attachment_side(first.connections, second_conns, desired)
        if side is None:
            logger.debug(
                f"No side to attach {second!r} to {first!r} "
                f"(connected={desired}), dropping second cell"
            )
            return cells

        cells.append(
            PieceHexData(offset=HEX_UNIT_VECTORS[side], content=second, side_index=second_side)
        )
        return cells

    def generate(self, rest_position: XYCoord = (0.0, 0.0)) -> Piece:
        """Make a single piece resting at some position."""
        piece = Piece(
            id=self._next_id,
            cells=self.generate_cells(),
            rest_position=rest_position,
            position=rest_position,
        )
        self._next_id += 1
        return piece

    def generate_batch(
        self, count: int, rest_positions: list[XYCoord] | None = None
    ) -> list[Piece]:
        """Make several pieces at once."""
        if rest_positions is None:
            rest_positions = [(0.0, 0.0)] * count
        if len(rest_positions) < count:
            raise ValueError(f"Need {count} rest positions, got {len(rest_positions)}")
        return [self.generate(rest_positions[i]) for i in range(count)]
