"""
Combat Component - attack range and cooldown for enemies
"""

import logging

from ...config import ENEMY_ATTACK_RANGE, ENEMY_ATTACK_DAMAGE, ENEMY_ATTACK_COOLDOWN

logger = logging.getLogger(__name__)


class CombatComponent:
    """Handles the melee attack of an enemy against its target"""

    def __init__(self, entity, damage=ENEMY_ATTACK_DAMAGE, attack_range=ENEMY_ATTACK_RANGE,
                 cooldown=ENEMY_ATTACK_COOLDOWN):
        self.entity = entity
        self.damage = damage
        self.attack_range = attack_range
        self.cooldown = cooldown
        # Primed so the first attack in range lands immediately
        self.attack_timer = cooldown

    def update_cooldown(self, dt):
        self.attack_timer += dt

    def is_ready(self) -> bool:
        return self.attack_timer >= self.cooldown

    def in_range(self, distance: float) -> bool:
        return distance <= self.attack_range

    def try_attack(self, target, distance, has_los, host=None) -> bool:
        """Hit ``target`` if it is in range, visible and the cooldown has elapsed."""
        if not (has_los and self.in_range(distance) and self.is_ready()):
            return False
        if not target.is_alive():
            return False

        remaining = target.apply_damage(self.damage)
        self.attack_timer = 0.0
        logger.debug("%r hit player for %.0f, %.0f left", self.entity, self.damage, remaining)

        if host is not None:
            host.on_player_damaged(self.damage)
            if remaining <= 0:
                host.on_player_died()
        return True
