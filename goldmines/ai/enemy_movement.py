"""
Enemy Movement System - steering strategies for top-down enemies
Patrol and chase share one collision-checked move with wall avoidance
"""

import pygame
from abc import ABC, abstractmethod
from typing import Any, Dict

from ..config import (
    ENEMY_CHASE_SPEED, ENEMY_PATROL_SPEED, ENEMY_AVOIDANCE_RADIUS,
    ENEMY_PATROL_INTERVAL, ENEMY_STUCK_DISTANCE, ENEMY_STUCK_TIME,
)
from ..core.utils import random_unit_vector

Vector2 = pygame.math.Vector2


def avoidance_force(obstacles, center, radius: float = ENEMY_AVOIDANCE_RADIUS) -> Vector2:
    """Sum of pushes away from every obstacle whose center is closer than ``radius``.

    Each push points from the obstacle center to ``center`` and is scaled by
    ``1 - dist / radius`` so nearer obstacles push harder.
    """
    force = Vector2(0, 0)
    here = Vector2(center)
    near = obstacles.near(center, radius) if hasattr(obstacles, "near") else obstacles
    for rect in near:
        away = here - Vector2(rect.centerx, rect.centery)
        dist = away.length()
        if dist >= radius or dist == 0:
            continue
        force += away.normalize() * (1.0 - dist / radius)
    return force


def blocked_at(obstacles, rect: pygame.Rect) -> bool:
    if hasattr(obstacles, "collides"):
        return obstacles.collides(rect)
    return rect.collidelist(list(obstacles)) != -1


class MovementStrategy(ABC):
    """Base class for enemy movement strategies"""

    def __init__(self, name: str, speed: float):
        self.name = name
        self.speed = speed

    @abstractmethod
    def steer(self, enemy, context: Dict[str, Any], dt: float) -> Vector2:
        """Update the enemy's heading state and return the desired direction"""

    def on_blocked(self, enemy) -> None:
        """Called when the collision-checked move was rejected"""

    def move(self, enemy, context: Dict[str, Any], dt: float) -> bool:
        enemy.desired_direction = self.steer(enemy, context, dt)
        moved = move_with_collision_avoidance(enemy, enemy.obstacles, self.speed, dt)
        if not moved:
            self.on_blocked(enemy)
        return moved


class PatrolStrategy(MovementStrategy):
    """Wander in a straight line, picking a new random heading every interval"""

    def __init__(self, speed: float = ENEMY_PATROL_SPEED, interval: float = ENEMY_PATROL_INTERVAL):
        super().__init__("patrol", speed)
        self.interval = interval

    def steer(self, enemy, context, dt):
        enemy.patrol_timer += dt
        if enemy.patrol_timer >= self.interval:
            enemy.patrol_timer = 0.0
            enemy.patrol_direction = random_unit_vector(enemy.rng)
        enemy.facing_left = enemy.patrol_direction.x < 0
        return Vector2(enemy.patrol_direction)

    def on_blocked(self, enemy):
        # Bounce off whatever stopped us
        enemy.patrol_direction = -enemy.patrol_direction
        enemy.patrol_timer = 0.0


class ChaseStrategy(MovementStrategy):
    """Head straight for the player; flags the enemy as stuck when it stops making progress"""

    def __init__(self, speed: float = ENEMY_CHASE_SPEED,
                 stuck_distance: float = ENEMY_STUCK_DISTANCE, stuck_time: float = ENEMY_STUCK_TIME):
        super().__init__("chase", speed)
        self.stuck_distance = stuck_distance
        self.stuck_time = stuck_time

    def steer(self, enemy, context, dt):
        here = Vector2(enemy.x, enemy.y)
        if here.distance_to(enemy.last_position) < self.stuck_distance:
            enemy.stuck_timer += dt
            if enemy.stuck_timer > self.stuck_time:
                enemy.is_stuck = True
        else:
            enemy.stuck_timer = 0.0
            enemy.is_stuck = False
        enemy.last_position = here

        target = Vector2(context['player_pos'])
        to_player = target - Vector2(enemy.center)
        enemy.facing_left = target.x < enemy.center[0]
        if to_player.length_squared() == 0:
            return Vector2(0, 0)
        return to_player.normalize()


def move_with_collision_avoidance(enemy, obstacles, speed: float, dt: float) -> bool:
    """
    Blend the desired direction with wall avoidance and try to move.

    A stuck enemy gets an extra random push in [-1, 1] on both axes. The move
    is committed only if the enemy's bounds at the new position overlap no
    obstacle; otherwise the enemy stays where it is and False is returned.
    """
    force = avoidance_force(obstacles, enemy.center)
    enemy.last_perturbation = Vector2(0, 0)
    if enemy.is_stuck:
        enemy.last_perturbation = Vector2(enemy.rng.uniform(-1.0, 1.0), enemy.rng.uniform(-1.0, 1.0))
        force += enemy.last_perturbation
    enemy.avoidance_force = force

    velocity = enemy.desired_direction + force
    if velocity.length_squared() == 0:
        enemy.velocity = Vector2(0, 0)
        return True
    enemy.velocity = velocity.normalize()

    new_x = enemy.x + enemy.velocity.x * speed * dt
    new_y = enemy.y + enemy.velocity.y * speed * dt
    candidate = pygame.Rect(int(new_x), int(new_y), enemy.rect.width, enemy.rect.height)
    if blocked_at(obstacles, candidate):
        return False

    enemy.x, enemy.y = new_x, new_y
    enemy.sync_rect()
    return True
