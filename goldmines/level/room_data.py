from collections import deque
from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Tuple

import pygame

from ..config import TILE
from ..tiles.tile_types import TileKind

Cell = Tuple[int, int]


@dataclass(frozen=True)
class LevelConfiguration:
    """
    Generation parameters for one difficulty tier.

    Attributes:
        min_rooms: Rooms the generator aims for at least (fewer is logged, not fatal)
        max_rooms: Upper bound on accepted rooms
        min_room_size: Smallest room edge in tiles
        max_room_size: Largest room edge in tiles
        corridor_width: Corridor thickness in tiles
        max_coins: Coin budget for the whole level
    """
    min_rooms: int
    max_rooms: int
    min_room_size: int
    max_room_size: int
    corridor_width: int
    max_coins: int

    def validate(self) -> "LevelConfiguration":
        if self.min_rooms < 1 or self.max_rooms < self.min_rooms:
            raise ValueError(f"invalid room count range {self.min_rooms}..{self.max_rooms}")
        if self.min_room_size < 3 or self.max_room_size < self.min_room_size:
            raise ValueError(f"invalid room size range {self.min_room_size}..{self.max_room_size}")
        if self.corridor_width < 1:
            raise ValueError(f"corridor width must be positive, got {self.corridor_width}")
        if self.max_coins < 0:
            raise ValueError(f"coin budget must not be negative, got {self.max_coins}")
        return self


@dataclass
class Room:
    """Axis-aligned room rectangle in tile coordinates."""
    x: int
    y: int
    width: int
    height: int
    is_secret: bool = False

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(self.x, self.y, self.width, self.height)

    @property
    def center(self) -> Cell:
        return (self.x + self.width // 2, self.y + self.height // 2)

    def overlaps(self, other: "Room") -> bool:
        return self.rect.colliderect(other.rect)

    def interior_bounds(self) -> Tuple[int, int, int, int]:
        """Inclusive (x_min, x_max, y_min, y_max) of the cells one tile in from the edge."""
        return (self.x + 1, self.x + self.width - 2, self.y + 1, self.y + self.height - 2)

    def world_rect(self) -> pygame.Rect:
        return pygame.Rect(self.x * TILE, self.y * TILE, self.width * TILE, self.height * TILE)

    def cells(self) -> Iterator[Cell]:
        for y in range(self.y, self.y + self.height):
            for x in range(self.x, self.x + self.width):
                yield (x, y)


@dataclass(frozen=True)
class CratePlacement:
    x: int
    y: int
    stacked: bool = False


@dataclass
class PlacementCounts:
    """What the population pass actually committed to the level."""
    rooms: int = 0
    chests: int = 0
    ores: int = 0
    coins: int = 0
    crates: int = 0
    has_secret_door: bool = False


class TileGrid:
    """
    Read-only width x height grid of TileKind values, indexed [x, y].

    Produced by GridBuilder.freeze(); nothing mutates it afterwards.
    """

    def __init__(self, width: int, height: int, cells: Tuple[Tuple[TileKind, ...], ...]):
        self.width = width
        self.height = height
        self._rows = cells  # rows[y][x]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> TileKind:
        return self._rows[y][x]

    def __getitem__(self, cell: Cell) -> TileKind:
        x, y = cell
        return self._rows[y][x]

    def cells(self) -> Iterator[Tuple[int, int, TileKind]]:
        """Every cell, column by column (x-major), as (x, y, kind)."""
        for x in range(self.width):
            for y in range(self.height):
                yield x, y, self._rows[y][x]

    def cells_of(self, kind: TileKind) -> List[Cell]:
        return [(x, y) for x, y, k in self.cells() if k == kind]

    def count(self, kind: TileKind) -> int:
        return sum(row.count(kind) for row in self._rows)

    def neighbors4(self, x: int, y: int) -> Iterator[Cell]:
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield (nx, ny)

    def reachable_from(self, start: Cell) -> Set[Cell]:
        """Flood fill over every non-Wall cell connected to ``start``."""
        if not self.in_bounds(*start) or self[start].is_solid:
            return set()
        visited = {start}
        queue = deque([start])
        while queue:
            x, y = queue.popleft()
            for nxt in self.neighbors4(x, y):
                if nxt not in visited and not self[nxt].is_solid:
                    visited.add(nxt)
                    queue.append(nxt)
        return visited

    def open_cells(self) -> Set[Cell]:
        return {(x, y) for x, y, k in self.cells() if not k.is_solid}

    def to_ascii(self, crates: Optional[List[CratePlacement]] = None) -> str:
        crate_cells = {(c.x, c.y) for c in crates or ()}
        lines = []
        for y in range(self.height):
            line = []
            for x in range(self.width):
                line.append("x" if (x, y) in crate_cells else self._rows[y][x].char)
            lines.append("".join(line))
        return "\n".join(lines)


class GridBuilder:
    """Mutable grid owned by the generator while a level is being built."""

    def __init__(self, width: int, height: int, fill: TileKind = TileKind.WALL):
        self.width = width
        self.height = height
        self._rows: List[List[TileKind]] = [[fill] * width for _ in range(height)]
        self._reserved: Set[Cell] = set()
        self._frozen = False

    def _check_open(self) -> None:
        if self._frozen:
            raise RuntimeError("grid has been frozen; build a new level instead")

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> TileKind:
        return self._rows[y][x]

    def fill(self, kind: TileKind) -> None:
        self._check_open()
        for row in self._rows:
            for x in range(self.width):
                row[x] = kind

    def carve(self, x: int, y: int) -> None:
        """Turn a Wall cell into Empty; anything else is left alone."""
        self._check_open()
        if self.in_bounds(x, y) and self._rows[y][x] == TileKind.WALL:
            self._rows[y][x] = TileKind.EMPTY

    def carve_room(self, room: Room) -> None:
        for x, y in room.cells():
            self.carve(x, y)

    def reserve(self, x: int, y: int) -> None:
        """Keep a cell free of population so a later placement can claim it."""
        self._reserved.add((x, y))

    def release(self, x: int, y: int) -> None:
        self._reserved.discard((x, y))

    def is_free(self, x: int, y: int) -> bool:
        return (self.in_bounds(x, y)
                and self._rows[y][x] == TileKind.EMPTY
                and (x, y) not in self._reserved)

    def set(self, x: int, y: int, kind: TileKind) -> None:
        self._check_open()
        self._rows[y][x] = kind

    def freeze(self) -> TileGrid:
        self._frozen = True
        return TileGrid(self.width, self.height, tuple(tuple(row) for row in self._rows))
