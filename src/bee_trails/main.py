"""Headless runner: plays boards automatically and logs the results."""

import argparse
import logging
from random import Random

from bee_trails.data import load_settings
from bee_trails.map.hexes import HexCoord
from bee_trails.map.world_map import WorldMap
from bee_trails.piece.models import Piece
from bee_trails.state.round import RoundController

logger = logging.getLogger(__name__)

MOVE_TIME_MS = 2500.0


def score_placement(world_map: WorldMap, anchor: HexCoord, piece: Piece) -> int:
    """Rough value of a placement: stubs that meet something minus stubs into the void."""
    res = 0
    for cell in piece.cells:
        if cell.connections is None:
            continue
        absolute = anchor + cell.offset
        for side, is_open in enumerate(cell.connections):
            if not is_open:
                continue
            neighbor = absolute.neighbor(side)
            map_hex = world_map.cells.get(neighbor)
            if map_hex is None:
                res -= 2
            elif map_hex.is_house:
                res += 3
            elif map_hex.occupant is not None:
                conns = map_hex.occupant.connections
                if conns is not None and conns[(side + 3) % 6]:
                    res += 2
                else:
                    res -= 1
    return res


def play_move(ctrl: RoundController, rng: Random) -> bool:
    """Place the best-looking piece somewhere. Returns False if nothing fits."""
    best: tuple[int, float, int, int, HexCoord] | None = None
    for piece in ctrl.tray.active:
        ctrl.hover(piece.id, 0)
        for turns in range(6):
            for anchor in ctrl.layout.free_tiles:
                if not ctrl.world_map.can_place(anchor, piece.offsets):
                    continue
                value = score_placement(ctrl.world_map, anchor, piece)
                cand = (value, rng.random(), piece.id, turns, anchor)
                if best is None or cand[:2] > best[:2]:
                    best = cand
            ctrl.rotate(clockwise=True)
            ctrl.rotation.tick(ctrl.settings.rotation_cooldown_ms)
        ctrl.unhover(piece.id)

    if best is None:
        return False

    _, _, piece_id, turns, anchor = best
    ctrl.hover(piece_id, 0)
    for _ in range(turns):
        ctrl.rotate(clockwise=True)
        ctrl.rotation.tick(ctrl.settings.rotation_cooldown_ms)
    ctrl.unhover(piece_id)

    piece = ctrl.tray.get(piece_id)
    if piece is None:  # pragma: no cover
        return False
    x, y = ctrl.world_map.cell_to_xy(anchor + piece.cells[0].offset)
    delta = (x - piece.rest_position[0], y - piece.rest_position[1])
    ctrl.drag_move(piece_id, 0, (x, y), delta)
    res = ctrl.drag_end(piece_id)
    ctrl.tick(MOVE_TIME_MS)
    return res is not None and res.committed


def run_session(ctrl: RoundController, max_rounds: int, rng: Random) -> int:
    """Play until time runs out or enough boards were played; returns the score."""
    for i_round in range(max_rounds):
        while not ctrl.game_over and ctrl.completed is None:
            if not play_move(ctrl, rng):
                logger.warning(f"Round {i_round}: no legal move left, giving up the board")
                break
        if ctrl.completed is not None:
            logger.info(
                f"Round {i_round}: {len(ctrl.completed.routes)} routes, "
                f"{len(ctrl.completed.dead_ends)} dead ends"
            )
        if ctrl.game_over:
            break
        ctrl.reset()
    logger.info(
        f"Final score {ctrl.scores.score} at level {ctrl.scores.level}, "
        f"{ctrl.timer.remaining_s:.1f} s left"
    )
    return ctrl.scores.score


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    parser.add_argument("--rounds", type=int, default=5, help="Maximum boards to play.")
    parser.add_argument("--settings", default=None, help="Settings YAML file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    settings = load_settings(args.settings)
    rng = Random(args.seed)
    ctrl = RoundController(settings, seed=rng.getrandbits(32))
    run_session(ctrl, args.rounds, rng)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
