import logging
import math
from typing import Iterable, Tuple

import pygame

from ..config import TILE, PLAYER_SIZE
from ..entities.entities import OBSTRUCTING_OBJECTS
from .room_data import Room

logger = logging.getLogger(__name__)

# Compass directions tried around the room center, in degrees
SPAWN_ANGLES = tuple(range(0, 360, 45))


class SafePlacementSolver:
    """
    Finds a player-sized spot in a room that overlaps no wall, crate or ore.

    The search starts at the room center and walks outward in rings of
    half a tile, trying eight directions on each ring.
    """

    def __init__(self, walls: Iterable, objects: Iterable):
        self.walls = [w.rect if hasattr(w, 'rect') else w for w in walls]
        self.blockers = [o.rect for o in objects if isinstance(o, OBSTRUCTING_OBJECTS)]

    def is_position_safe(self, x: float, y: float, width: int = PLAYER_SIZE, height: int = PLAYER_SIZE) -> bool:
        bounds = pygame.Rect(int(x), int(y), width, height)
        if bounds.collidelist(self.walls) != -1:
            return False
        return bounds.collidelist(self.blockers) == -1

    def find_safe_spawn(self, room: Room, size: int = PLAYER_SIZE) -> Tuple[float, float]:
        """Top-left world position for a ``size`` square entity inside ``room``."""
        center_x = (room.x + room.width / 2) * TILE
        center_y = (room.y + room.height / 2) * TILE
        if self.is_position_safe(center_x, center_y, size, size):
            return (center_x, center_y)

        area = room.world_rect()
        radius = 1.0
        max_radius = min(room.width, room.height) * TILE / 2
        while radius < max_radius:
            for angle in SPAWN_ANGLES:
                x = center_x + radius * math.cos(math.radians(angle))
                y = center_y + radius * math.sin(math.radians(angle))
                if area.left <= x < area.right and area.top <= y < area.bottom \
                        and self.is_position_safe(x, y, size, size):
                    return (x, y)
            radius += TILE / 2

        logger.warning("No safe spawn in room at (%d, %d); using its center", room.x, room.y)
        return (center_x, center_y)
