"""Score, level and the session timer."""

import logging

from pydantic import BaseModel

from bee_trails.map.world_map import CompletedMap

logger = logging.getLogger(__name__)

MIN_ELAPSED_S = 0.1


class ScoreKeeper(BaseModel):
    """Points and level of a session."""

    route_points: int = 10
    dead_end_penalty: int = 1

    score: int = 0
    level: int = 0

    def points_for(self, completed: CompletedMap) -> int:
        """Score change for a solved board."""
        return (
            len(completed.routes) * self.route_points
            - len(completed.dead_ends) * self.dead_end_penalty
        )

    def apply(self, completed: CompletedMap) -> int:
        """Add a solved board to the score; returns the actual change."""
        old = self.score
        self.score = max(0, self.score + self.points_for(completed))
        self.level += 1
        logger.info(f"Score {old} -> {self.score}, level {self.level}")
        return self.score - old


class GameTimer(BaseModel):
    """Countdown for the whole session."""

    duration_s: float = 150.0
    elapsed_s: float = 0.0

    @property
    def remaining_s(self) -> float:
        """Seconds left."""
        return max(0.0, self.duration_s - self.elapsed_s)

    @property
    def finished(self) -> bool:
        """Whether time ran out."""
        return self.elapsed_s >= self.duration_s

    def tick(self, elapsed_s: float) -> bool:
        """Advance the timer; returns True only on the tick that finishes it."""
        if self.finished:
            return False
        self.elapsed_s += elapsed_s
        if self.finished:
            logger.info("Time is up")
            return True
        return False

    def add_bonus(self, seconds: float) -> None:
        """Give back some time, never more than was used."""
        if self.finished:
            return
        self.elapsed_s = max(MIN_ELAPSED_S, self.elapsed_s - seconds)
