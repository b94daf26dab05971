"""
Seed-driven room-and-corridor level generator.

A level is built in four passes over a GridBuilder: fill with walls, place
non-overlapping rooms, join consecutive rooms with L-shaped corridors, then
populate (chests, ore, coins, the secret door and crates). The finished grid
is frozen and handed to create_entities(), which turns every cell into game
objects through a TileKind -> constructor table.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ..config import (
    TILE, ROOM_PLACEMENT_ATTEMPTS, SECRET_ROOM_CHANCE,
    CHESTS_PER_LEVEL, CHEST_PLACEMENT_ATTEMPTS,
    ORE_TOTAL_RANGE, ORE_PER_ROOM, ORE_CENTER_EXCLUSION, ORE_PLACEMENT_ATTEMPTS,
    COINS_PER_ROOM_RANGE, COIN_PLACEMENT_ATTEMPTS, SECRET_DOOR_INSET,
    CRATES_PER_ROOM_RANGE, CRATE_PLACEMENT_ATTEMPTS, CORRIDOR_CRATE_CHANCE, STACKED_CRATE_CHANCE,
    ORE_VALUE_RANGE, CHEST_COIN_RANGE,
    ENEMY_BASE_COUNT, ENEMY_SPAWN_RATE, ENEMY_SPAWN_ATTEMPTS, ENEMY_MIN_PLAYER_DISTANCE,
)
from ..core.utils import sample_until, distance
from ..entities.entities import BackgroundTile, Wall, Ore, Chest, Coin, SecretDoor, Crate
from ..entities.enemy_entities import Enemy
from ..tiles.tile_collision import ObstacleMap
from ..tiles.tile_types import TileKind, tile_to_world
from .room_data import (
    Cell, CratePlacement, GridBuilder, LevelConfiguration, PlacementCounts, Room, TileGrid,
)

logger = logging.getLogger(__name__)

# Smallest grid that still holds a 3x3 room inside the outer wall ring
MIN_GRID_SIZE = 5


@dataclass
class EntityLayers:
    """Game objects emitted for one level, split the way the host draws and collides them."""
    background: List = field(default_factory=list)
    objects: List = field(default_factory=list)
    walls: List = field(default_factory=list)

    def all_objects(self):
        yield from self.background
        yield from self.objects
        yield from self.walls


class LevelGenerator:
    """
    Builds one level's tile grid and its population.

    Generation runs in the constructor; afterwards the generator only answers
    queries and instantiates entities. Everything random is drawn from the
    injected ``rng`` so a seeded Random reproduces the same level.
    """

    def __init__(self, width_px: int, height_px: int, min_rooms: int, max_rooms: int,
                 min_room_size: int, max_room_size: int, corridor_width: int, max_coins: int,
                 rng: Optional[random.Random] = None):
        self.config = LevelConfiguration(min_rooms, max_rooms, min_room_size, max_room_size,
                                         corridor_width, max_coins).validate()
        self.width = width_px // TILE
        self.height = height_px // TILE
        if self.width < MIN_GRID_SIZE or self.height < MIN_GRID_SIZE:
            raise ValueError(f"level of {width_px}x{height_px}px is too small for a room")

        self.rng = rng or random.Random()
        self.enemy_spawn_rate = ENEMY_SPAWN_RATE
        self.rooms: List[Room] = []
        self.secret_room: Optional[Room] = None
        self.crates: List[CratePlacement] = []
        self.counts = PlacementCounts()
        self.total_coins = 0
        self.required_coins = 0

        self._builder = GridBuilder(self.width, self.height)
        self._crate_cells: Set[Cell] = set()
        self._generate()
        self.grid: TileGrid = self._builder.freeze()

    @classmethod
    def from_config(cls, config: LevelConfiguration, width_px: int, height_px: int,
                    rng: Optional[random.Random] = None) -> "LevelGenerator":
        return cls(width_px, height_px, config.min_rooms, config.max_rooms,
                   config.min_room_size, config.max_room_size,
                   config.corridor_width, config.max_coins, rng)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _generate(self):
        self._builder.fill(TileKind.WALL)
        self._generate_rooms()
        self._connect_rooms()
        self._populate()
        self.counts.rooms = len(self.rooms)
        logger.info("Generated %dx%d level: %d rooms, %d chests, %d ore, %d coins, %d crates, door=%s",
                    self.width, self.height, self.counts.rooms, self.counts.chests, self.counts.ores,
                    self.counts.coins, self.counts.crates, self.counts.has_secret_door)

    def _generate_rooms(self):
        cfg = self.config
        attempts = 0
        while len(self.rooms) < cfg.max_rooms and attempts < ROOM_PLACEMENT_ATTEMPTS:
            attempts += 1
            room_w = self.rng.randint(cfg.min_room_size, cfg.max_room_size)
            room_h = self.rng.randint(cfg.min_room_size, cfg.max_room_size)
            if self.width - room_w - 1 < 1 or self.height - room_h - 1 < 1:
                continue
            x = self.rng.randint(1, self.width - room_w - 1)
            y = self.rng.randint(1, self.height - room_h - 1)

            room = Room(x, y, room_w, room_h)
            if any(room.overlaps(other) for other in self.rooms):
                continue

            self._builder.carve_room(room)
            self.rooms.append(room)
            # Later rooms keep re-rolling the secret room, so the last winner stands
            if len(self.rooms) > 1 and (self.secret_room is None or self.rng.random() < SECRET_ROOM_CHANCE):
                if self.secret_room is not None:
                    self.secret_room.is_secret = False
                room.is_secret = True
                self.secret_room = room

        if not self.rooms:
            size_w = min(cfg.max_room_size, self.width - 2)
            size_h = min(cfg.max_room_size, self.height - 2)
            room = Room((self.width - size_w) // 2, (self.height - size_h) // 2, size_w, size_h)
            logger.warning("No room fit after %d attempts; carving %dx%d fallback room at the center",
                           attempts, size_w, size_h)
            self._builder.carve_room(room)
            self.rooms.append(room)
        elif len(self.rooms) < cfg.min_rooms:
            logger.warning("Only %d of %d minimum rooms fit; continuing with a smaller level",
                           len(self.rooms), cfg.min_rooms)

    def _connect_rooms(self):
        for room_a, room_b in zip(self.rooms, self.rooms[1:]):
            x1, y1 = room_a.center
            x2, y2 = room_b.center
            if self.rng.random() < 0.5:
                self._carve_horizontal(x1, x2, y1)
                self._carve_vertical(y1, y2, x2)
            else:
                self._carve_vertical(y1, y2, x1)
                self._carve_horizontal(x1, x2, y2)

    def _corridor_offsets(self):
        w = self.config.corridor_width
        return range(-(w // 2), w - w // 2)

    def _carve_horizontal(self, x1, x2, y):
        for x in range(min(x1, x2), max(x1, x2) + 1):
            for offset in self._corridor_offsets():
                if 1 <= y + offset <= self.height - 2 and 1 <= x <= self.width - 2:
                    self._builder.carve(x, y + offset)

    def _carve_vertical(self, y1, y2, x):
        for y in range(min(y1, y2), max(y1, y2) + 1):
            for offset in self._corridor_offsets():
                if 1 <= x + offset <= self.width - 2 and 1 <= y <= self.height - 2:
                    self._builder.carve(x + offset, y)

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def _random_interior_cell(self, room: Room) -> Cell:
        x_min, x_max, y_min, y_max = room.interior_bounds()
        return (self.rng.randint(x_min, max(x_min, x_max)), self.rng.randint(y_min, max(y_min, y_max)))

    def _free(self, cell: Cell) -> bool:
        return self._builder.is_free(*cell) and cell not in self._crate_cells

    def _door_cell(self) -> Optional[Cell]:
        if self.secret_room is None:
            return None
        room = self.secret_room
        return (room.x + room.width - SECRET_DOOR_INSET, room.y + room.height - SECRET_DOOR_INSET)

    def _populate(self):
        door = self._door_cell()
        if door is not None:
            self._builder.reserve(*door)

        self._place_chests()
        self._place_ores()
        self._place_coins()

        if door is not None:
            self._builder.release(*door)
            self._builder.set(door[0], door[1], TileKind.SECRET_DOOR)
            self.counts.has_secret_door = True
        self.required_coins = self.total_coins

        self._place_room_crates()
        self._place_corridor_crates()
        self.counts.crates = len(self.crates)

    def _place_chests(self):
        available = list(self.rooms)
        while self.counts.chests < CHESTS_PER_LEVEL and available:
            room = available.pop(self.rng.randrange(len(available)))
            cell = sample_until(lambda: self._random_interior_cell(room), self._free, CHEST_PLACEMENT_ATTEMPTS)
            if cell is None:
                logger.warning("No free cell for a chest in room at (%d, %d)", room.x, room.y)
                continue
            self._builder.set(cell[0], cell[1], TileKind.CHEST)
            self.counts.chests += 1

    def _away_from_center(self, room: Room, cell: Cell) -> bool:
        cx, cy = room.center
        return abs(cell[0] - cx) >= ORE_CENTER_EXCLUSION or abs(cell[1] - cy) >= ORE_CENTER_EXCLUSION

    def _place_ores(self):
        max_ores = self.rng.randint(*ORE_TOTAL_RANGE)
        for room in self.rooms:
            if self.counts.ores >= max_ores:
                break
            for _ in range(min(ORE_PER_ROOM, max_ores - self.counts.ores)):
                cell = sample_until(lambda: self._random_interior_cell(room),
                                    lambda c: self._free(c) and self._away_from_center(room, c),
                                    ORE_PLACEMENT_ATTEMPTS)
                if cell is None:
                    # Small rooms may be all center; settle for any free cell
                    cell = sample_until(lambda: self._random_interior_cell(room), self._free,
                                        ORE_PLACEMENT_ATTEMPTS)
                if cell is None:
                    continue
                self._builder.set(cell[0], cell[1], TileKind.ORE)
                self.counts.ores += 1

    def _place_coins(self):
        for room in self.rooms:
            remaining = self.config.max_coins - self.total_coins
            if remaining <= 0:
                break
            batch = min(remaining, self.rng.randint(*COINS_PER_ROOM_RANGE))
            for _ in range(batch):
                cell = sample_until(lambda: self._random_interior_cell(room), self._free,
                                    COIN_PLACEMENT_ATTEMPTS)
                if cell is None:
                    logger.debug("Room at (%d, %d) is full; %d coins left unplaced", room.x, room.y, batch)
                    break
                self._builder.set(cell[0], cell[1], TileKind.COIN)
                self.total_coins += 1
        self.counts.coins = self.total_coins

    def _add_crate(self, cell: Cell):
        self._crate_cells.add(cell)
        self.crates.append(CratePlacement(cell[0], cell[1], self.rng.random() < STACKED_CRATE_CHANCE))

    def _room_crate_spot(self, cell: Cell) -> bool:
        x, y = cell
        return self._free(cell) and self._free((x, y + 1))

    def _place_room_crates(self):
        for room in self.rooms:
            for _ in range(self.rng.randint(*CRATES_PER_ROOM_RANGE)):
                cell = sample_until(lambda: self._random_interior_cell(room), self._room_crate_spot,
                                    CRATE_PLACEMENT_ATTEMPTS)
                if cell is not None:
                    self._add_crate(cell)

    def _place_corridor_crates(self):
        for x in range(self.width):
            for y in range(1, self.height):
                if (self._free((x, y)) and self._builder.get(x, y - 1) == TileKind.WALL
                        and self.rng.random() < CORRIDOR_CRATE_CHANCE):
                    self._add_crate((x, y))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def start_room(self) -> Room:
        return self.rooms[0]

    def get_random_room(self) -> Room:
        return self.rng.choice(self.rooms)

    def is_connected(self) -> bool:
        """Every open cell is reachable from the start room's center."""
        reachable = self.grid.reachable_from(self.start_room.center)
        connected = reachable == self.grid.open_cells()
        if not connected:
            logger.warning("Level has %d open cells unreachable from the start room",
                           len(self.grid.open_cells() - reachable))
        return connected

    def set_enemy_spawn_rate(self, rate: float) -> None:
        if rate < 0:
            raise ValueError(f"enemy spawn rate must not be negative, got {rate}")
        self.enemy_spawn_rate = rate

    # ------------------------------------------------------------------
    # Instantiation
    # ------------------------------------------------------------------

    def _entity_factories(self, textures: Dict, skip_door: bool):
        tex = textures.get
        return {
            TileKind.EMPTY: None,
            TileKind.WALL: lambda wx, wy: Wall(wx, wy, tex('wall')),
            TileKind.ORE: lambda wx, wy: Ore(wx, wy, tex('ore'), self.rng.randint(*ORE_VALUE_RANGE)),
            TileKind.CHEST: lambda wx, wy: Chest(wx, wy, tex('chest'), self.rng.randint(*CHEST_COIN_RANGE),
                                                 tex('chest_open')),
            TileKind.COIN: lambda wx, wy: Coin(wx, wy, tex('coin')),
            TileKind.SECRET_DOOR: None if skip_door else (
                lambda wx, wy: SecretDoor(wx, wy, tex('door'), self.required_coins, tex('door_open'))),
        }

    def create_entities(self, textures: Optional[Dict] = None, skip_door: bool = False) -> EntityLayers:
        """Walk every cell once and emit its background tile plus the entity its kind maps to."""
        textures = textures or {}
        factories = self._entity_factories(textures, skip_door)
        layers = EntityLayers()

        for x, y, kind in self.grid.cells():
            wx, wy = tile_to_world(x), tile_to_world(y)
            layers.background.append(BackgroundTile(wx, wy, textures.get('background')))
            factory = factories[kind]
            if factory is None:
                continue
            entity = factory(wx, wy)
            if kind == TileKind.WALL:
                layers.walls.append(entity)
            else:
                layers.objects.append(entity)

        for crate in self.crates:
            texture = textures.get('crate_stacked' if crate.stacked else 'crate')
            layers.objects.append(Crate(tile_to_world(crate.x), tile_to_world(crate.y), texture, crate.stacked))

        logger.debug("Instantiated %d walls and %d objects (skip_door=%s)",
                     len(layers.walls), len(layers.objects), skip_door)
        return layers

    def create_enemies(self, walls, player, host=None, enemy_count: Optional[int] = None,
                       texture=None) -> List[Enemy]:
        """
        Spawn enemies in random rooms, far enough from the player.

        Each attempt consumes one room and tries up to ENEMY_SPAWN_ATTEMPTS
        interior cells; a room with no valid cell simply yields no enemy.
        """
        obstacles = walls if isinstance(walls, ObstacleMap) else ObstacleMap(
            w.rect if hasattr(w, 'rect') else w for w in walls)
        if enemy_count is None:
            enemy_count = int(ENEMY_BASE_COUNT * self.enemy_spawn_rate)
        player_pos = player.position()

        def valid(cell: Cell) -> bool:
            center = (tile_to_world(cell[0]) + TILE / 2, tile_to_world(cell[1]) + TILE / 2)
            return (self.grid[cell] == TileKind.EMPTY and cell not in self._crate_cells
                    and distance(center, player_pos) >= ENEMY_MIN_PLAYER_DISTANCE)

        enemies: List[Enemy] = []
        available = list(self.rooms)
        for _ in range(enemy_count):
            if not available:
                break
            room = available.pop(self.rng.randrange(len(available)))
            cell = sample_until(lambda: self._random_interior_cell(room), valid, ENEMY_SPAWN_ATTEMPTS)
            if cell is None:
                continue
            enemies.append(Enemy(tile_to_world(cell[0]), tile_to_world(cell[1]), player, obstacles,
                                 host=host, texture=texture, rng=self.rng))

        logger.info("Spawned %d enemies (rate %.1f)", len(enemies), self.enemy_spawn_rate)
        return enemies
