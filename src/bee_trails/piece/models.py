"""Pieces and the cells they are made of."""

from enum import Enum
from typing import Literal

from typing_extensions import Annotated
from pydantic import BaseModel, Field, field_validator

from bee_trails.data.models import Connections, rotate_left, rotate_right
from bee_trails.map.hexes import HEX_ORIGIN, HexCoord, XYCoord


class RouteCell(BaseModel):
    """Cell content carrying route stubs."""

    model_config = {"frozen": True}

    kind: Literal["route"] = "route"
    connections: Connections
    atlas_index: int = 0

    @field_validator("connections", mode="after")
    @classmethod
    def _chk_open_side(cls, v: Connections) -> Connections:
        """A route cell without stubs would be a filler."""
        if not any(v):
            raise ValueError("Route cell must have at least one open side.")
        return v

    def rotated(self, clockwise: bool = True) -> "RouteCell":
        """Copy turned by one step."""
        if clockwise:
            conns = rotate_right(self.connections)
        else:
            conns = rotate_left(self.connections)
        return self.model_copy(update=dict(connections=conns))


class FillerCell(BaseModel):
    """Cell content without any route."""

    model_config = {"frozen": True}

    kind: Literal["filler"] = "filler"

    def rotated(self, clockwise: bool = True) -> "FillerCell":
        """Fillers look the same from all sides."""
        return self


CellContent = Annotated[RouteCell | FillerCell, Field(discriminator="kind")]


class PieceHexData(BaseModel):
    """One cell of a piece in play."""

    offset: HexCoord = HEX_ORIGIN
    content: CellContent
    side_index: Annotated[int, Field(ge=0, lt=6)] = 0
    occupant: int | None = None  # handle of the visual owned by the renderer
    interactive: bool = True

    @property
    def connections(self) -> Connections | None:
        """Route stubs, or None for a filler."""
        if isinstance(self.content, RouteCell):
            return self.content.connections
        return None

    @property
    def is_filler(self) -> bool:
        """Whether this cell carries no route."""
        return isinstance(self.content, FillerCell)


class PieceState(str, Enum):
    """Drag state of a piece."""

    FREE = "FREE"
    CANDIDATE = "CANDIDATE"
    COMMITTED = "COMMITTED"


class Piece(BaseModel):
    """A piece of 1-4 cells."""

    id: int
    cells: Annotated[list[PieceHexData], Field(min_length=1, max_length=4)]
    target_hex: HexCoord | None = None
    rest_position: XYCoord = (0.0, 0.0)
    position: XYCoord = (0.0, 0.0)
    state: PieceState = PieceState.FREE
    cooldown_ms: float = 0.0

    @field_validator("cells", mode="after")
    @classmethod
    def _chk_offsets(cls, v: list[PieceHexData]) -> list[PieceHexData]:
        """Cells can't overlap."""
        offsets = [c.offset for c in v]
        if len(set(offsets)) != len(offsets):
            raise ValueError(f"Overlapping cell offsets: {offsets!r}")
        return v

    @property
    def size(self) -> int:
        """Number of cells."""
        return len(self.cells)

    @property
    def offsets(self) -> list[HexCoord]:
        """Cell offsets from the anchor."""
        return [c.offset for c in self.cells]

    @property
    def is_cooling_down(self) -> bool:
        """Whether rotation input is currently ignored."""
        return self.cooldown_ms > 0
