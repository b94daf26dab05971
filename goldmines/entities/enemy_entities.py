from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Optional

import pygame

from ..config import ENEMY_SIZE, ENEMY_VISION_RADIUS
from ..core.utils import random_unit_vector
from ..ai.enemy_movement import PatrolStrategy, ChaseStrategy
from .entity_common import GameObject, PlayerLink, WorldHost
from .components.vision_component import VisionComponent
from .components.combat_component import CombatComponent

logger = logging.getLogger(__name__)

Vector2 = pygame.math.Vector2


class EnemyMode(Enum):
    PATROLLING = "patrolling"
    CHASING = "chasing"


class Enemy(GameObject):
    """
    Top-down melee enemy.

    Every tick it decides between chasing and patrolling from distance and
    line of sight to the player, steers around walls, and swings at the
    player when close enough. It only sees the player through PlayerLink and
    reports hits through WorldHost.
    """

    def __init__(self, x, y, player: PlayerLink, obstacles, host: Optional[WorldHost] = None,
                 texture=None, rng: Optional[random.Random] = None):
        super().__init__(x, y, ENEMY_SIZE, ENEMY_SIZE, texture)
        self.player = player
        self.obstacles = obstacles
        self.host = host
        self.rng = rng or random.Random()

        self.mode = EnemyMode.PATROLLING
        self.velocity = Vector2(0, 0)
        self.desired_direction = Vector2(0, 0)
        self.avoidance_force = Vector2(0, 0)
        self.last_perturbation = Vector2(0, 0)
        self.facing_left = False

        self.patrol_timer = 0.0
        self.patrol_direction = random_unit_vector(self.rng)

        self.stuck_timer = 0.0
        self.is_stuck = False
        self.last_position = Vector2(self.x, self.y)

        self.vision = VisionComponent(self, obstacles, ENEMY_VISION_RADIUS)
        self.combat = CombatComponent(self)
        self._patrol = PatrolStrategy()
        self._chase = ChaseStrategy()

    @property
    def is_chasing(self) -> bool:
        return self.mode is EnemyMode.CHASING

    def update(self, dt):
        player_pos = self.player.position()
        distance, has_los = self.vision.look_at(player_pos)

        if distance <= self.vision.vision_range and has_los:
            if self.mode is not EnemyMode.CHASING:
                logger.debug("%r spotted player at %.0f", self, distance)
            self.mode = EnemyMode.CHASING
        else:
            self.mode = EnemyMode.PATROLLING

        strategy = self._chase if self.is_chasing else self._patrol
        strategy.move(self, {'player_pos': player_pos, 'distance_to_player': distance, 'has_los': has_los}, dt)

        self.combat.update_cooldown(dt)
        if self.player.is_alive():
            self.combat.try_attack(self.player, distance, has_los, self.host)
