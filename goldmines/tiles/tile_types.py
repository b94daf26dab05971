from enum import IntEnum

from ..config import TILE


class TileKind(IntEnum):
    """Enumeration of all tile kinds a level cell can hold."""

    EMPTY = 0
    WALL = 1
    ORE = 2
    CHEST = 3
    COIN = 4
    SECRET_DOOR = 5

    @property
    def is_solid(self) -> bool:
        """Return True if tile blocks movement completely."""
        return self == TileKind.WALL

    @property
    def is_occupied(self) -> bool:
        """Return True if something other than open floor sits on the tile."""
        return self != TileKind.EMPTY

    @property
    def char(self) -> str:
        return {
            TileKind.EMPTY: ".",
            TileKind.WALL: "#",
            TileKind.ORE: "o",
            TileKind.CHEST: "C",
            TileKind.COIN: "$",
            TileKind.SECRET_DOOR: "D",
        }[self]


def tile_to_world(index: int) -> int:
    """Convert a tile index into world units."""
    return index * TILE


def world_to_tile(value: float) -> int:
    return int(value // TILE)
