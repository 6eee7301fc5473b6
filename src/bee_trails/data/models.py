"""Data models."""

from random import Random

from typing_extensions import Annotated
from pydantic import BaseModel, Field, field_validator, model_validator

Connections = tuple[bool, bool, bool, bool, bool, bool]
"""Open route stubs per side, clockwise from the top-right edge."""


def rotate_left(connections: Connections, steps: int = 1) -> Connections:
    """Rotate a connection array left (counter-clockwise) by some steps."""
    k = steps % 6
    res = connections[k:] + connections[:k]
    return res  # type: ignore[return-value]


def rotate_right(connections: Connections, steps: int = 1) -> Connections:
    """Rotate a connection array right (clockwise) by some steps."""
    return rotate_left(connections, -steps)


def weighted_choice(weights: list[int], rng: Random) -> int:
    """Pick an index with probability proportional to its weight."""
    return rng.choices(range(len(weights)), weights=weights, k=1)[0]


class RouteHexBlueprint(BaseModel):
    """Template for a single route cell."""

    model_config = {"frozen": True}

    connected_sides: Connections
    atlas_index: int = 0
    weight: Annotated[int, Field(ge=0)] = 1

    @field_validator("connected_sides", mode="after")
    @classmethod
    def _chk_open_side(cls, v: Connections) -> Connections:
        """Every blueprint must carry at least one route stub."""
        if not any(v):
            raise ValueError("Blueprint has no open side; fillers are not blueprints.")
        return v

    def rotated(self, steps: int) -> Connections:
        """Connection array rotated left by some steps."""
        return rotate_left(self.connected_sides, steps)


class BlueprintCatalog(BaseModel):
    """All blueprints and the weights used when sampling pieces."""

    blueprints: list[RouteHexBlueprint]
    size_weights: Annotated[
        list[Annotated[int, Field(ge=0)]],
        Field(min_length=1, max_length=4, description="Weights of piece sizes 1, 2, ..."),
    ] = [3, 4]
    filler_weights: Annotated[
        tuple[Annotated[int, Field(ge=0)], Annotated[int, Field(ge=0)]],
        Field(description="Weights of (route, filler) for the second cell."),
    ] = (3, 1)

    @model_validator(mode="after")
    def _chk_weights(self) -> "BlueprintCatalog":
        """Ensure something can actually be sampled."""
        if sum(bp.weight for bp in self.blueprints) <= 0:
            raise ValueError("Blueprint weights sum to zero.")
        if sum(self.size_weights) <= 0:
            raise ValueError("Size weights sum to zero.")
        if sum(self.filler_weights) <= 0:
            raise ValueError("Filler weights sum to zero.")
        return self

    def sample_blueprint(self, rng: Random) -> RouteHexBlueprint:
        """Weighted random blueprint."""
        idx = weighted_choice([bp.weight for bp in self.blueprints], rng)
        return self.blueprints[idx]

    def sample_size(self, rng: Random) -> int:
        """Weighted random piece size."""
        return weighted_choice(self.size_weights, rng) + 1

    def sample_is_filler(self, rng: Random) -> bool:
        """Weighted coin flip for a filler cell."""
        return weighted_choice(list(self.filler_weights), rng) == 1


class GameSettings(BaseModel):
    """Tunable game settings."""

    # Grid
    map_radius: Annotated[int, Field(ge=1)] = 3
    hex_size: Annotated[float, Field(gt=0)] = 50.0
    base_houses: Annotated[int, Field(ge=2)] = 3
    max_houses: Annotated[int, Field(ge=2)] = 6
    levels_per_extra_house: Annotated[int, Field(ge=1)] = 2
    layout_retries: Annotated[int, Field(ge=1)] = 50

    # Pieces
    batch_size: Annotated[int, Field(ge=1)] = 3
    min_active_pieces: Annotated[int, Field(ge=1)] = 2
    rotation_cooldown_ms: Annotated[float, Field(ge=0)] = 300.0
    staging_offset: Annotated[
        float, Field(description="Distance of the piece tray from the grid, in hexes.")
    ] = 2.5

    # Scoring
    route_points: int = 10
    dead_end_penalty: int = 1
    game_time_s: Annotated[float, Field(gt=0)] = 150.0
    route_bonus_s: Annotated[float, Field(ge=0)] = 20.0

    @model_validator(mode="after")
    def _chk_houses(self) -> "GameSettings":
        """Ensure house counts make sense."""
        if self.max_houses < self.base_houses:
            raise ValueError(
                f"max_houses ({self.max_houses}) < base_houses ({self.base_houses})"
            )
        if self.min_active_pieces > self.batch_size:
            raise ValueError("min_active_pieces can't exceed batch_size")
        return self

    def houses_for_level(self, level: int) -> int:
        """Number of houses on the board for a given level."""
        extra = level // self.levels_per_extra_house
        return min(self.base_houses + extra, self.max_houses)
