import logging
from dataclasses import dataclass, field
from typing import List

import pygame

from ..config import PLAYER_SIZE, PLAYER_MAX_HEALTH, PLAYER_MAX_STAMINA
from .entity_common import GameObject, PlayerLink

logger = logging.getLogger(__name__)


@dataclass
class PlayerSnapshot:
    """State carried from one tier to the next."""
    health: float
    stamina: float
    inventory: List = field(default_factory=list)
    coins: int = 0
    max_health: float = PLAYER_MAX_HEALTH
    max_stamina: float = PLAYER_MAX_STAMINA
    speed_multiplier: float = 1.0


class Player(GameObject, PlayerLink):
    """
    Player bookkeeping the world needs: position, health, stamina, ore and coins.

    Movement input and drawing live in the host; this class only keeps the
    numbers that gate chests, doors and enemy attacks.
    """

    def __init__(self, x, y, texture=None):
        super().__init__(x, y, PLAYER_SIZE, PLAYER_SIZE, texture)
        self.max_health = PLAYER_MAX_HEALTH
        self.health = self.max_health
        self.max_stamina = PLAYER_MAX_STAMINA
        self.stamina = self.max_stamina
        self.speed_multiplier = 1.0
        self.inventory: List = []
        self.coins = 0
        self.dead = False

    # --- PlayerLink -------------------------------------------------------

    def position(self) -> pygame.math.Vector2:
        return pygame.math.Vector2(self.center)

    def is_alive(self) -> bool:
        return not self.dead and self.health > 0

    def apply_damage(self, amount: float) -> float:
        self.health = max(0.0, self.health - amount)
        return self.health

    # --- Movement ---------------------------------------------------------

    def move_to(self, x: float, y: float) -> None:
        self.x, self.y = float(x), float(y)
        self.sync_rect()

    # --- Stats ------------------------------------------------------------

    def heal(self, amount: float) -> None:
        self.health = min(self.max_health, self.health + amount)

    def set_stamina(self, stamina: float) -> None:
        self.stamina = min(self.max_stamina, stamina)

    def increase_max_health(self, amount: float) -> None:
        self.max_health += amount
        self.health += amount

    def increase_max_stamina(self, amount: float) -> None:
        self.max_stamina += amount
        self.stamina += amount

    def increase_speed(self, fraction: float) -> None:
        self.speed_multiplier += fraction

    def set_dead(self, dead: bool = True) -> None:
        self.dead = dead

    # --- Inventory --------------------------------------------------------

    def add_coins(self, amount: int) -> None:
        self.coins += amount

    def add_ore(self, ore) -> None:
        self.inventory.append(ore)

    @property
    def ore_count(self) -> int:
        return len(self.inventory)

    def has_enough_ore(self, amount: int = 2) -> bool:
        return len(self.inventory) >= amount

    def remove_ore(self, amount: int) -> None:
        for _ in range(min(amount, len(self.inventory))):
            self.inventory.pop()

    # --- Tier transitions -------------------------------------------------

    def snapshot(self) -> PlayerSnapshot:
        return PlayerSnapshot(
            health=self.health,
            stamina=self.stamina,
            inventory=list(self.inventory),
            coins=self.coins,
            max_health=self.max_health,
            max_stamina=self.max_stamina,
            speed_multiplier=self.speed_multiplier,
        )

    def restore(self, snap: PlayerSnapshot) -> None:
        """Apply a snapshot taken on the previous tier to this fresh player.

        Health is restored by healing (or damaging) the delta from the fresh
        full-health baseline; stamina is set explicitly.
        """
        self.max_health = snap.max_health
        self.max_stamina = snap.max_stamina
        self.speed_multiplier = snap.speed_multiplier
        delta = snap.health - self.health
        if delta >= 0:
            self.heal(delta)
        else:
            self.apply_damage(-delta)
        self.set_stamina(snap.stamina)
        self.inventory = list(snap.inventory)
        self.coins = snap.coins
        logger.debug("Player restored: hp=%.1f stamina=%.1f ore=%d coins=%d",
                     self.health, self.stamina, len(self.inventory), self.coins)
