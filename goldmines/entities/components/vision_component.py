"""
Vision Component - distance and line-of-sight checks for enemies
"""

import pygame

from ...config import ENEMY_VISION_RADIUS, LOS_SAMPLES
from ...core.utils import los_clear


class VisionComponent:
    """Handles vision and detection for entities"""

    def __init__(self, entity, obstacles, vision_range=ENEMY_VISION_RADIUS, samples=LOS_SAMPLES):
        self.entity = entity
        self.obstacles = obstacles
        self.vision_range = vision_range
        self.samples = samples

        # Debug information
        self._has_los = False
        self._los_point = None
        self._distance = float("inf")

    def get_distance_to(self, target_pos) -> float:
        return pygame.math.Vector2(self.entity.center).distance_to(target_pos)

    def has_line_of_sight(self, target_pos) -> bool:
        return los_clear(self.obstacles, self.entity.center, target_pos, self.samples)

    def look_at(self, target_pos):
        """Return (distance, has_los) for the target and remember them for debug drawing."""
        dist = self.get_distance_to(target_pos)
        has_los = self.has_line_of_sight(target_pos)
        self._distance = dist
        self._has_los = has_los
        self._los_point = (target_pos[0], target_pos[1])
        return dist, has_los

    def can_see(self, target_pos) -> bool:
        """Target is inside the vision radius and nothing blocks the sampled line."""
        dist, has_los = self.look_at(target_pos)
        return dist <= self.vision_range and has_los

    def get_debug_info(self):
        return {
            'has_los': self._has_los,
            'los_point': self._los_point,
            'distance': self._distance,
            'vision_range': self.vision_range,
        }
