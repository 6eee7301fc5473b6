"""Hexagonal coordinates and layout."""

from math import sqrt
from typing import Any, Literal

from typing_extensions import Annotated
from pydantic import BaseModel, RootModel, model_validator, Field, computed_field


class HexCoord(RootModel[tuple[int, int, int]]):
    """Hex coordinate definition, using cube coordinates.

    Axial coordinates are (q, r); the third coordinate is always -(q + r).

    https://www.redblobgames.com/grids/hexagons/#coordinates
    """

    model_config = {"frozen": True}

    root: tuple[int, int, int]

    @property
    def q(self) -> int:
        """First 'q' coordinate."""
        return self.root[0]

    @property
    def r(self) -> int:
        """Second 'r' coordinate."""
        return self.root[1]

    @property
    def s(self) -> int:
        """Third 's' coordinate."""
        return self.root[2]

    @property
    def axial(self) -> tuple[int, int]:
        """Axial (q, r) pair."""
        return (self.root[0], self.root[1])

    @classmethod
    def from_axial(cls, q: int, r: int) -> "HexCoord":
        """Create from axial coordinates."""
        return cls(root=(q, r, -(q + r)))

    @model_validator(mode="before")
    @classmethod
    def _set_third_coord(cls, data: Any) -> Any:
        """Set third coordinate if only given two."""
        if isinstance(data, (list, tuple)):
            if len(data) == 2:
                q, r = data
                return (q, r, -(q + r))
        return data

    @model_validator(mode="after")
    def _check_values(self) -> "HexCoord":
        """Check that coordinate values are okay."""
        q, r, s = self.q, self.r, self.s
        if q + r + s != 0:
            raise ValueError(f"Imbalanced hex coords: sum({q}, {r}, {s}) != 0")
        return self

    def __repr__(self) -> str:
        return f"HexCoord({self.q}, {self.r})"

    # Comparison operations

    def __eq__(self, rhs: object) -> bool:
        if isinstance(rhs, HexCoord):
            return self.root == rhs.root
        return NotImplemented

    def __ne__(self, rhs: object) -> bool:
        if isinstance(rhs, HexCoord):
            return self.root != rhs.root
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.root)

    def __lt__(self, rhs: "HexCoord") -> bool:
        """Numeric order over (q, r)."""
        if isinstance(rhs, HexCoord):
            return self.axial < rhs.axial
        return NotImplemented

    def __le__(self, rhs: "HexCoord") -> bool:
        if isinstance(rhs, HexCoord):
            return self.axial <= rhs.axial
        return NotImplemented

    def __gt__(self, rhs: "HexCoord") -> bool:
        if isinstance(rhs, HexCoord):
            return self.axial > rhs.axial
        return NotImplemented

    def __ge__(self, rhs: "HexCoord") -> bool:
        if isinstance(rhs, HexCoord):
            return self.axial >= rhs.axial
        return NotImplemented

    # Vector operations

    def __add__(self, rhs: "HexCoord") -> "HexCoord":
        """Add this delta to a coordinate (or another delta)."""
        if isinstance(rhs, HexCoord):
            return HexCoord(root=(self.q + rhs.q, self.r + rhs.r, self.s + rhs.s))
        return NotImplemented

    def __sub__(self, rhs: "HexCoord") -> "HexCoord":
        """Subtract a delta from this coordinate."""
        if isinstance(rhs, HexCoord):
            return HexCoord(root=(self.q - rhs.q, self.r - rhs.r, self.s - rhs.s))
        return NotImplemented

    # Neighbors

    def neighbor(self, side: int) -> "HexCoord":
        """Get the neighbor across the given side (see `HEX_UNIT_VECTORS`)."""
        return self + HEX_UNIT_VECTORS[side % 6]

    @property
    def neighbors(self) -> list["HexCoord"]:
        """Get direct neighbors of this cell, in side order.

        https://www.redblobgames.com/grids/hexagons/#neighbors
        """
        return [self + vec for vec in HEX_UNIT_VECTORS]

    def get_neighborhood(self, distance: int = 1) -> list["HexCoord"]:
        """Get cells at most `distance` tiles away from self (including self)."""
        N = distance
        res: list[HexCoord] = []
        for q in range(-N, N + 1):
            for r in range(max(-N, -q - N), min(N, -q + N) + 1):
                s = -q - r
                res.append(self + HexCoord(root=(q, r, s)))
        return res

    @property
    def vector_length(self) -> int:
        """Length of the coord as a vector (i.e. distance from center).

        https://www.redblobgames.com/grids/hexagons/#distances
        """
        return max(abs(self.q), abs(self.r), abs(self.s))

    def distance_to(self, other: "HexCoord") -> int:
        """Number of steps between two cells."""
        return (self - other).vector_length

    # Rotation

    def rotate_clockwise_60(self) -> "HexCoord":
        """Rotate around the origin by one clockwise step.

        https://www.redblobgames.com/grids/hexagons/#rotation
        """
        return HexCoord(root=(-self.r, -self.s, -self.q))

    def rotate_counterclockwise_60(self) -> "HexCoord":
        """Rotate around the origin by one counter-clockwise step."""
        return HexCoord(root=(-self.s, -self.q, -self.r))

    def rotate_around(self, pivot: "HexCoord", clockwise: bool = True) -> "HexCoord":
        """Rotate around another cell by one step."""
        rel = self - pivot
        if clockwise:
            rel = rel.rotate_clockwise_60()
        else:
            rel = rel.rotate_counterclockwise_60()
        return pivot + rel

    #

    @classmethod
    def nearest_hex(cls, qf: float, rf: float, sf: float) -> "HexCoord":
        """Nearest coordinates.

        https://www.redblobgames.com/grids/hexagons/#rounding
        """
        q = round(qf)
        r = round(rf)
        s = round(sf)

        qd = abs(q - qf)
        rd = abs(r - rf)
        sd = abs(s - sf)

        if (qd > rd) and (qd > sd):
            q = -(r + s)
        elif rd > sd:
            r = -(q + s)
        else:
            s = -(q + r)
        return cls(root=(q, r, s))


HEX_ORIGIN = HexCoord(root=(0, 0, 0))

HEX_UNIT_VECTORS = tuple(
    HexCoord(root=_tup)
    for _tup in [(1, -1, 0), (1, 0, -1), (0, 1, -1), (-1, 1, 0), (-1, 0, 1), (0, -1, 1)]
)
"""Vector directions in 'cube' coordinates, indexed by side.

Sides go clockwise from the top-right edge of a pointy hex:
NE, E, SE, SW, W, NW.
"""


def opposite_side(side: int) -> int:
    """Side index on the neighbor that faces back at us."""
    return (side + 3) % 6


def get_hexagon(radius: int, center: HexCoord = HEX_ORIGIN) -> list[HexCoord]:
    """All cells of a hexagon-shaped grid, sorted."""
    return sorted(center.get_neighborhood(radius))


XYCoord = tuple[float, float]


class HexLayout(BaseModel):
    """Conversion between hex cells and world positions."""

    # Styles for conversion to world coords
    top_style: Literal["flat", "pointy"] = "pointy"
    scale: Annotated[float, Field(description="Size of a hexagon side.", gt=0)] = 50.0
    invert_y: bool = True

    @computed_field
    @property
    def basis_qr_to_xy(self) -> tuple[tuple[float, float], tuple[float, float]]:
        """Matrix converting QR to XY coords."""
        # Basis vectors of 'q' and 'r' to 'xy' coords.
        y_sign = -1 if self.invert_y else 1
        if self.top_style == "flat":
            (qx, qy) = (1.5, sqrt(3) / 2 * y_sign)
            (rx, ry) = (0, sqrt(3) * y_sign)
        else:  # pointy
            (qx, qy) = (sqrt(3), 0 * y_sign)
            (rx, ry) = (sqrt(3) / 2, 1.5 * y_sign)
        return ((qx, qy), (rx, ry))

    def cell_to_xy(self, hexcoord: HexCoord) -> XYCoord:
        """Convert a hex coord to XY coordinates of its center.

        https://www.redblobgames.com/grids/hexagons/#hex-to-pixel
        """
        ((qx, qy), (rx, ry)) = self.basis_qr_to_xy

        qi = hexcoord.q
        ri = hexcoord.r
        xi = (qi * qx + ri * rx) * self.scale
        yi = (qi * qy + ri * ry) * self.scale
        return xi, yi

    def xy_to_cell(self, point: XYCoord) -> HexCoord:
        """Get the cell containing an XY point.

        https://www.redblobgames.com/grids/hexagons/#pixel-to-hex
        """
        # Basis vectors of 'x' and 'y' to 'qr' coords.
        y_sign = -1 if self.invert_y else 1
        if self.top_style == "flat":
            (xq, yq) = (2.0 / 3, 0 * y_sign)
            (xr, yr) = (-1.0 / 3, sqrt(3) / 3 * y_sign)
        else:  # pointy
            (xq, yq) = (sqrt(3) / 3, -1.0 / 3 * y_sign)
            (xr, yr) = (0, 2.0 / 3 * y_sign)

        xi, yi = point
        qi = (xi * xq + yi * yq) / self.scale
        ri = (xi * xr + yi * yr) / self.scale
        return HexCoord.nearest_hex(qi, ri, -(qi + ri))
