"""Grid shape and house positions for a round."""

import logging
from random import Random

from typing_extensions import Annotated
from pydantic import (
    BaseModel,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from .hexes import HEX_ORIGIN, HexCoord, get_hexagon

logger = logging.getLogger(__name__)

CoordLike = HexCoord | tuple[int, int] | tuple[int, int, int]
to_coord = TypeAdapter(HexCoord).validate_python


class GridConfigError(ValueError):
    """The grid can't be set up with the given houses."""


class GridLayout(BaseModel):
    """Hexagon-shaped grid with houses on some of its cells."""

    radius: Annotated[int, Field(ge=0)]
    houses: list[HexCoord]

    @field_validator("houses", mode="after")
    @classmethod
    def _check_houses(cls, v: list[HexCoord], info: ValidationInfo) -> list[HexCoord]:
        """Ensure houses exist and are inside the grid."""
        if len(v) == 0:
            raise ValueError("A grid needs at least one house.")
        if len(set(v)) != len(v):
            raise ValueError(f"Duplicate houses: {v!r}")
        radius = info.data.get("radius")
        if radius is not None:
            outside = [h for h in v if h.vector_length > radius]
            if outside:
                raise ValueError(f"Houses outside the grid: {outside!r}")
        return sorted(v)

    @property
    def shape(self) -> list[HexCoord]:
        """All cells of the grid."""
        return get_hexagon(self.radius)

    @property
    def free_tiles(self) -> list[HexCoord]:
        """Cells that can take pieces."""
        houses = set(self.houses)
        return [h for h in self.shape if h not in houses]

    @classmethod
    def from_coords(cls, radius: int, houses: list[CoordLike]) -> "GridLayout":
        """Create from loose coordinates.

        Raises `GridConfigError` for missing, duplicate or outside houses.
        """
        try:
            return cls(radius=radius, houses=[to_coord(h) for h in houses])
        except ValidationError as err:
            raise GridConfigError(f"Bad grid layout: {err}") from err

    @classmethod
    def make_random(
        cls,
        radius: int,
        n_houses: int,
        *,
        seed: Random | int | None = None,
        retries: int = 50,
    ) -> "GridLayout":
        """Pick houses at random, none of them next to each other or the center."""
        if n_houses < 1:
            raise GridConfigError(f"A grid needs at least one house, got {n_houses}.")

        if isinstance(seed, Random):
            rng = seed
        else:
            rng = Random(seed)

        candidates = [h for h in get_hexagon(radius) if h != HEX_ORIGIN]
        for i_try in range(retries):
            pool = list(candidates)
            rng.shuffle(pool)
            chosen: list[HexCoord] = []
            blocked: set[HexCoord] = set()
            for cell in pool:
                if cell in blocked:
                    continue
                chosen.append(cell)
                blocked.add(cell)
                blocked.update(cell.neighbors)
                if len(chosen) == n_houses:
                    logger.debug(f"Placed {n_houses} houses in {i_try + 1} tries")
                    return cls(radius=radius, houses=chosen)
        raise GridConfigError(
            f"Could not place {n_houses} houses on a radius {radius} grid "
            f"within {retries} tries."
        )
