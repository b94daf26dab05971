"""
Game session: the world host that owns the active level, the player and
the enemies, and builds the next tier ahead of time.

The next tier is generated as soon as the current one is live, either
inline or on a worker thread. Walking through an open secret door swaps
the prepared state in; the swap waits for the build to finish, so a
half-built level is never observed.
"""

import logging
import random
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from ..config import LEVEL_WIDTH_PX, LEVEL_HEIGHT_PX, ENEMY_SPAWN_RATE
from ..entities.entities import Chest, Coin, Ore, SecretDoor
from ..entities.entity_common import WorldHost
from ..entities.player_entity import Player
from ..level.level_generator import EntityLayers, LevelGenerator
from ..level.level_manager import LevelManager
from ..level.safe_placement import SafePlacementSolver
from ..tiles.tile_collision import ObstacleMap

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"
    VICTORY = "victory"


@dataclass(frozen=True)
class LevelState:
    """Everything one tier needs once it is live."""
    tier: int
    generator: LevelGenerator
    layers: EntityLayers
    obstacles: ObstacleMap
    total_coins: int
    skip_door: bool

    @property
    def grid(self):
        return self.generator.grid

    @property
    def rooms(self):
        return self.generator.rooms


def build_level_state(manager: LevelManager, tier: int, width_px: int, height_px: int,
                      rng: random.Random, textures: Optional[Dict] = None) -> LevelState:
    """Generate and instantiate tier ``tier``. The final tier gets no secret door."""
    skip_door = tier == manager.total_levels
    generator = manager.generate_level(width_px, height_px, rng, level=tier)
    layers = generator.create_entities(textures, skip_door=skip_door)
    obstacles = ObstacleMap(wall.rect for wall in layers.walls)
    return LevelState(tier, generator, layers, obstacles, generator.total_coins, skip_door)


class GameSession(WorldHost):
    """Headless world host: progression, interactions and teardown."""

    def __init__(self, width_px: int = LEVEL_WIDTH_PX, height_px: int = LEVEL_HEIGHT_PX,
                 manager: Optional[LevelManager] = None, seed: Optional[int] = None,
                 background: bool = False, enemy_spawn_rate: float = ENEMY_SPAWN_RATE,
                 textures: Optional[Dict] = None):
        self.width_px = width_px
        self.height_px = height_px
        self.manager = manager or LevelManager()
        self.rng = random.Random(seed)
        self.enemy_spawn_rate = enemy_spawn_rate
        self.textures = textures or {}
        self.status = GameStatus.PLAYING
        self._collected = 0
        self._executor = ThreadPoolExecutor(max_workers=1) if background else None
        self._pending: Optional[Future] = None

        self.level = build_level_state(self.manager, self.manager.current_level,
                                       width_px, height_px, self._level_rng(), self.textures)
        self.player = self._spawn_player(self.level)
        self.enemies = self._spawn_enemies(self.level)
        self._prepare_next()

    # ------------------------------------------------------------------
    # Level lifecycle
    # ------------------------------------------------------------------

    def _level_rng(self) -> random.Random:
        # Each level draws from its own stream so worker threads never share one
        return random.Random(self.rng.getrandbits(64))

    def _spawn_player(self, state: LevelState) -> Player:
        room = state.generator.get_random_room()
        solver = SafePlacementSolver(state.layers.walls, state.layers.objects)
        self.spawn_point = solver.find_safe_spawn(room)
        logger.debug("Player spawns at (%.0f, %.0f) in room at (%d, %d)",
                     self.spawn_point[0], self.spawn_point[1], room.x, room.y)
        return Player(*self.spawn_point, texture=self.textures.get('player'))

    def _spawn_enemies(self, state: LevelState) -> List:
        state.generator.set_enemy_spawn_rate(self.enemy_spawn_rate)
        enemies = state.generator.create_enemies(state.obstacles, self.player, host=self,
                                                 texture=self.textures.get('enemy'))
        state.layers.objects.extend(enemies)
        return enemies

    def _prepare_next(self) -> None:
        """Start building the next tier, if there is one."""
        if not self.manager.has_next_level():
            self._pending = None
            return
        tier = self.manager.current_level + 1
        args = (self.manager, tier, self.width_px, self.height_px, self._level_rng(), self.textures)
        if self._executor is not None:
            self._pending = self._executor.submit(build_level_state, *args)
        else:
            self._pending = Future()
            self._pending.set_result(build_level_state(*args))
        logger.debug("Pre-generating tier %d (%s)", tier, "background" if self._executor else "inline")

    def advance_level(self) -> None:
        """Move to the prepared next tier, or finish the game after the final one."""
        if self.status is not GameStatus.PLAYING:
            return
        if not self.manager.has_next_level():
            logger.info("Final tier cleared")
            self.status = GameStatus.VICTORY
            return

        next_state = self._pending.result()
        self._pending = None
        snapshot = self.player.snapshot()

        self.manager.next_level()
        self._dispose_state(self.level)
        self.level = next_state
        self._collected = 0

        self.player = self._spawn_player(next_state)
        self.player.restore(snapshot)
        self.enemies = self._spawn_enemies(next_state)
        logger.info("Entered tier %d/%d: %d coins, %d enemies", self.manager.current_level,
                    self.manager.total_levels, next_state.total_coins, len(self.enemies))
        self._prepare_next()

    # ------------------------------------------------------------------
    # Frame update
    # ------------------------------------------------------------------

    def update(self, dt: float) -> None:
        if self.status is not GameStatus.PLAYING:
            return
        # Player first so enemies react to this frame's position
        self.player.update(dt)
        if not self.player.is_alive():
            self.on_player_died()
            return

        for obj in list(self.level.layers.objects):
            obj.update(dt)
            if self.status is not GameStatus.PLAYING:
                return
        self._resolve_contacts()

    def _resolve_contacts(self) -> None:
        """Pick up coins the player touches and walk through open doors."""
        for obj in list(self.level.layers.objects):
            if not self.player.rect.colliderect(obj.rect):
                continue
            if isinstance(obj, Coin):
                self.coin_collected(obj)
            elif isinstance(obj, SecretDoor) and obj.is_open:
                self.interact_door(obj)
                return
            if self.status is not GameStatus.PLAYING:
                return

    # ------------------------------------------------------------------
    # Interactions
    # ------------------------------------------------------------------

    def coin_collected(self, coin: Coin) -> bool:
        if not coin.collect():
            return False
        self._collected += 1
        self.player.add_coins(coin.value)
        self.remove_object(coin)

        for obj in self.level.layers.objects:
            if isinstance(obj, SecretDoor):
                obj.check_and_open(self._collected)

        if self.manager.is_last_level() and self._collected == self.level.total_coins:
            logger.info("All %d coins of the final tier collected", self._collected)
            self.status = GameStatus.VICTORY
        return True

    def mine_ore(self, ore: Ore) -> bool:
        if not ore.mine(self.player):
            return False
        self.remove_object(ore)
        return True

    def open_chest(self, chest: Chest):
        return chest.open(self.player, self.rng)

    def interact_door(self, door: SecretDoor) -> bool:
        return door.interact(self)

    def remove_object(self, obj) -> None:
        try:
            self.level.layers.objects.remove(obj)
        except ValueError:
            pass

    def on_player_damaged(self, amount: float) -> None:
        logger.debug("Player took %.0f damage, %.0f left", amount, self.player.health)

    def on_player_died(self) -> None:
        if self.status is GameStatus.GAME_OVER:
            return
        self.player.set_dead()
        self.status = GameStatus.GAME_OVER
        logger.info("Player died on tier %d", self.manager.current_level)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_next_tier(self) -> bool:
        return self.manager.has_next_level()

    def current_tier_display_index(self) -> int:
        return self.manager.current_level

    def total_tiers(self) -> int:
        return self.manager.total_levels

    def total_coins_this_level(self) -> int:
        return self.level.total_coins

    def collected_coins(self) -> int:
        return self._collected

    @property
    def next_level_ready(self) -> bool:
        return self._pending is not None and self._pending.done()

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    @staticmethod
    def _dispose_objects(objects) -> None:
        for obj in objects:
            if obj is None:
                continue
            try:
                obj.dispose()
            except Exception:
                logger.exception("Error disposing %r", obj)

    def _dispose_state(self, state: Optional[LevelState]) -> None:
        if state is None:
            return
        for layer in (state.layers.background, state.layers.objects, state.layers.walls):
            self._dispose_objects(layer)
            layer.clear()

    def dispose(self) -> None:
        """Release both level states; every failure is logged and teardown continues."""
        pending = getattr(self, '_pending', None)
        if pending is not None:
            try:
                self._dispose_state(pending.result())
            except Exception:
                logger.exception("Next level could not be disposed")
            self._pending = None

        self._dispose_state(getattr(self, 'level', None))
        player = getattr(self, 'player', None)
        if player is not None:
            self._dispose_objects([player])

        executor = getattr(self, '_executor', None)
        if executor is not None:
            executor.shutdown(wait=True)
            self._executor = None
