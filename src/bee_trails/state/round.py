"""Round and session state."""

import logging
from random import Random

from bee_trails.data import base_catalog, base_settings
from bee_trails.data.models import BlueprintCatalog, GameSettings
from bee_trails.map.hexes import HexLayout, XYCoord
from bee_trails.map.layout import GridLayout
from bee_trails.map.world_map import CompletedMap, WorldMap
from bee_trails.piece.drag import DragUpdate, DropResult, PlacementValidator
from bee_trails.piece.generator import PieceGenerator
from bee_trails.piece.rotation import RotationHandler
from bee_trails.piece.tray import PieceTray
from .score import GameTimer, ScoreKeeper

logger = logging.getLogger(__name__)


class RoundController:
    """Owns the current board and the session around it.

    Anything that needs to start a new board gets a reference to this object
    and calls `reset()` or `regenerate()`.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        catalog: BlueprintCatalog | None = None,
        *,
        seed: Random | int | None = None,
    ) -> None:
        self.settings = settings if settings is not None else base_settings
        self.catalog = catalog if catalog is not None else base_catalog
        if isinstance(seed, Random):
            # clone
            self.rng = Random()
            self.rng.setstate(seed.getstate())
        else:
            self.rng = Random(seed)
        self.hex_layout = HexLayout(scale=self.settings.hex_size)
        self.scores = ScoreKeeper(
            route_points=self.settings.route_points,
            dead_end_penalty=self.settings.dead_end_penalty,
        )
        self.timer = GameTimer(duration_s=self.settings.game_time_s)
        self.rounds_played = 0
        self._scored = False
        self.regenerate()

    # Round lifecycle

    def regenerate(self, layout: GridLayout | None = None) -> None:
        """Build a fresh board and deal pieces.

        Without a layout, houses are placed at random, more of them as the
        level goes up.
        """
        if layout is None:
            n_houses = self.settings.houses_for_level(self.scores.level)
            layout = GridLayout.make_random(
                self.settings.map_radius,
                n_houses,
                seed=self.rng,
                retries=self.settings.layout_retries,
            )
        self.layout = layout
        self.world_map = WorldMap.from_layout(self.layout, self.hex_layout)
        self.generator = PieceGenerator(self.catalog, seed=self.rng.getrandbits(32))
        self.tray = PieceTray(self.generator, self.settings, self.hex_layout)
        self.validator = PlacementValidator(self.world_map, self.tray)
        self.rotation = RotationHandler(
            self.tray, self.validator, cooldown_ms=self.settings.rotation_cooldown_ms
        )
        self._scored = False
        self.tray.refill()
        logger.info(f"New board: level {self.scores.level}, houses {self.layout.houses}")

    def reset(self) -> None:
        """Throw away the current board and start the next one."""
        self.rounds_played += 1
        logger.info(f"Resetting board after round {self.rounds_played}")
        self.regenerate()

    def new_session(self) -> None:
        """Start over: score, level and timer back to their initial values."""
        self.scores = ScoreKeeper(
            route_points=self.settings.route_points,
            dead_end_penalty=self.settings.dead_end_penalty,
        )
        self.timer = GameTimer(duration_s=self.settings.game_time_s)
        self.rounds_played = 0
        self.regenerate()

    # State

    @property
    def completed(self) -> CompletedMap | None:
        """The solved board, if it is solved."""
        return self.validator.completed

    @property
    def game_over(self) -> bool:
        """Whether the session timer ran out."""
        return self.timer.finished

    def _on_completed(self, completed: CompletedMap) -> None:
        if self._scored:
            return
        self._scored = True
        self.scores.apply(completed)
        self.timer.add_bonus(len(completed.routes) * self.settings.route_bonus_s)

    # Input

    def drag_move(
        self, piece_id: int, cell_index: int, pointer: XYCoord, delta: XYCoord
    ) -> DragUpdate | None:
        """Pointer moved while dragging a piece."""
        if self.game_over:
            return None
        return self.validator.drag_move(piece_id, cell_index, pointer, delta)

    def drag_end(self, piece_id: int) -> DropResult | None:
        """Piece released."""
        if self.game_over:
            return None
        res = self.validator.drag_end(piece_id)
        if res is not None and res.completed is not None:
            self._on_completed(res.completed)
        return res

    def hover(self, piece_id: int, cell_index: int) -> None:
        """Pointer over a piece cell."""
        self.rotation.hover(piece_id, cell_index)

    def unhover(self, piece_id: int) -> None:
        """Pointer left a piece cell."""
        self.rotation.unhover(piece_id)

    def rotate(self, clockwise: bool = True) -> bool:
        """Rotate the hovered piece."""
        if self.game_over or self.completed is not None:
            return False
        return self.rotation.rotate(clockwise)

    def tick(self, elapsed_ms: float) -> None:
        """Advance cooldowns and the session timer."""
        self.rotation.tick(elapsed_ms)
        self.timer.tick(elapsed_ms / 1000)
