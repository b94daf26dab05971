"""
World objects produced from a generated tile grid.

Every object is one tile in size except coins, which are drawn smaller.
Interactions on an already-resolved object (opened chest, mined ore,
collected coin, open door) are no-ops.
"""

import logging
import random
from enum import Enum

from ..config import (
    TILE, COIN_SIZE, COIN_VALUE,
    CHEST_ORE_COST, CHEST_HEAL_CHANCE, CHEST_HEAL_AMOUNT,
    CHEST_MAX_HEALTH_BONUS, CHEST_MAX_STAMINA_BONUS, CHEST_SPEED_BONUS,
)
from .entity_common import GameObject

logger = logging.getLogger(__name__)


class ChestBonus(Enum):
    HEAL = "heal"
    MAX_HEALTH = "max_health"
    MAX_STAMINA = "max_stamina"
    SPEED = "speed"


# Drawn uniformly when the heal roll fails
_SECONDARY_BONUSES = (ChestBonus.MAX_HEALTH, ChestBonus.MAX_STAMINA, ChestBonus.SPEED)


class BackgroundTile(GameObject):
    def __init__(self, x, y, texture=None):
        super().__init__(x, y, TILE, TILE, texture)


class Wall(GameObject):
    def __init__(self, x, y, texture=None):
        super().__init__(x, y, TILE, TILE, texture)


class Ore(GameObject):
    """Ore deposit; mining moves it into the player's inventory."""

    def __init__(self, x, y, texture=None, value=5):
        super().__init__(x, y, TILE, TILE, texture)
        self.value = value
        self.collected = False

    def mine(self, player) -> bool:
        if self.collected:
            return False
        self.collected = True
        player.add_ore(self)
        return True


class Chest(GameObject):
    """
    Chest that trades ore for coins and one random bonus.

    Opening requires CHEST_ORE_COST ore. The bonus is a heal with
    CHEST_HEAL_CHANCE probability, otherwise one of max health, max stamina
    or speed with equal odds.
    """

    def __init__(self, x, y, texture=None, coins=10, open_texture=None):
        super().__init__(x, y, TILE, TILE, texture)
        self.coins = coins
        self.opened = False
        self.open_texture = open_texture

    def open(self, player, rng=random):
        """Open the chest for ``player``; returns the granted ChestBonus or None."""
        if self.opened or not player.has_enough_ore(CHEST_ORE_COST):
            return None
        self.opened = True
        player.remove_ore(CHEST_ORE_COST)
        player.add_coins(self.coins)
        if self.open_texture is not None:
            self.texture = self.open_texture

        if rng.random() < CHEST_HEAL_CHANCE:
            bonus = ChestBonus.HEAL
        else:
            bonus = _SECONDARY_BONUSES[rng.randrange(len(_SECONDARY_BONUSES))]

        if bonus is ChestBonus.HEAL:
            player.heal(CHEST_HEAL_AMOUNT)
        elif bonus is ChestBonus.MAX_HEALTH:
            player.increase_max_health(CHEST_MAX_HEALTH_BONUS)
        elif bonus is ChestBonus.MAX_STAMINA:
            player.increase_max_stamina(CHEST_MAX_STAMINA_BONUS)
        else:
            player.increase_speed(CHEST_SPEED_BONUS)
        logger.debug("Chest at %s opened: +%d coins, bonus %s", self.rect.topleft, self.coins, bonus.value)
        return bonus

    def dispose(self):
        super().dispose()
        self.open_texture = None


class Coin(GameObject):
    def __init__(self, x, y, texture=None, value=COIN_VALUE):
        super().__init__(x, y, COIN_SIZE, COIN_SIZE, texture)
        self.value = value
        self.collected = False

    def collect(self) -> bool:
        if self.collected:
            return False
        self.collected = True
        return True


class SecretDoor(GameObject):
    """Door to the next tier; opens once enough of this level's coins are collected."""

    def __init__(self, x, y, texture=None, required_coins=0, open_texture=None):
        super().__init__(x, y, TILE, TILE, texture)
        self.required_coins = required_coins
        self.is_open = False
        self.open_texture = open_texture

    def check_and_open(self, collected_coins: int) -> bool:
        if not self.is_open and collected_coins >= self.required_coins:
            self.is_open = True
            if self.open_texture is not None:
                self.texture = self.open_texture
            logger.info("Secret door opened (%d/%d coins)", collected_coins, self.required_coins)
        return self.is_open

    def interact(self, host) -> bool:
        """Walk through the door; only an open door signals the host."""
        if not self.is_open or host is None:
            return False
        host.advance_level()
        return True

    def dispose(self):
        super().dispose()
        self.open_texture = None


class Crate(GameObject):
    def __init__(self, x, y, texture=None, stacked=False):
        super().__init__(x, y, TILE, TILE, texture)
        self.stacked = stacked


# Objects that block spawning and player placement
OBSTRUCTING_OBJECTS = (Wall, Crate, Ore)
