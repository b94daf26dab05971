import argparse
import logging

from goldmines.config import LEVEL_WIDTH_PX, LEVEL_HEIGHT_PX, FPS, TIER_CONFIG_PATH
from goldmines.entities.enemy_entities import EnemyMode
from goldmines.level.config_loader import load_tier_configs
from goldmines.level.level_manager import LevelManager
from goldmines.systems.game_session import GameSession, GameStatus

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Gold Mines headless level runner")
    parser.add_argument("--seed", type=int, default=None, help="Seed for level generation")
    parser.add_argument("--tier", type=int, default=1, help="Tier to start on (1-based)")
    parser.add_argument("--ticks", type=int, default=FPS * 5, help="Number of frames to simulate")
    parser.add_argument("--config", default=TIER_CONFIG_PATH, help="Tier configuration JSON")
    parser.add_argument("--background", action="store_true", help="Pre-generate the next tier on a worker thread")
    parser.add_argument("--ascii", action="store_true", help="Print the generated tile grid")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def main(args: argparse.Namespace) -> None:
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    manager = LevelManager(load_tier_configs(args.config), start_tier=args.tier)
    session = GameSession(LEVEL_WIDTH_PX, LEVEL_HEIGHT_PX, manager=manager, seed=args.seed,
                          background=args.background)
    try:
        level = session.level
        logger.info("Tier %d/%d: %d rooms, %d coins, %d enemies, connected=%s",
                    session.current_tier_display_index(), session.total_tiers(), len(level.rooms),
                    session.total_coins_this_level(), len(session.enemies), level.generator.is_connected())
        if args.ascii:
            print(level.grid.to_ascii(level.generator.crates))

        dt = 1.0 / FPS
        for _ in range(args.ticks):
            session.update(dt)
            if session.status is not GameStatus.PLAYING:
                break

        chasing = sum(1 for e in session.enemies if e.mode is EnemyMode.CHASING)
        logger.info("After %d ticks: status=%s health=%.0f chasing=%d/%d",
                    args.ticks, session.status.value, session.player.health, chasing, len(session.enemies))
    finally:
        session.dispose()


if __name__ == '__main__':
    main(parse_args())
