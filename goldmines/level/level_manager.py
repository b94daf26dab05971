import logging
import random
from typing import List, Optional

from .config_loader import default_tier_configs
from .level_generator import LevelGenerator
from .room_data import LevelConfiguration

logger = logging.getLogger(__name__)


class LevelManager:
    """
    Tracks which difficulty tier the session is on.

    Tiers only move forward; ``next_level()`` on the last tier is a no-op.
    ``current_level`` is 1-based for display.
    """

    def __init__(self, tiers: Optional[List[LevelConfiguration]] = None, start_tier: int = 1):
        self.tiers = list(tiers) if tiers is not None else default_tier_configs()
        if not self.tiers:
            raise ValueError("at least one tier is required")
        if not 1 <= start_tier <= len(self.tiers):
            raise ValueError(f"start tier {start_tier} outside 1..{len(self.tiers)}")
        self._index = start_tier - 1

    @property
    def current_level(self) -> int:
        return self._index + 1

    @property
    def total_levels(self) -> int:
        return len(self.tiers)

    @property
    def current_config(self) -> LevelConfiguration:
        return self.tiers[self._index]

    def config_for(self, level: int) -> LevelConfiguration:
        """Configuration of the 1-based tier ``level``."""
        return self.tiers[level - 1]

    def has_next_level(self) -> bool:
        return self._index < len(self.tiers) - 1

    def is_last_level(self) -> bool:
        return not self.has_next_level()

    def next_level(self) -> None:
        if self.has_next_level():
            self._index += 1
            logger.info("Advanced to tier %d/%d", self.current_level, self.total_levels)

    def generate_level(self, width_px: int, height_px: int, rng: Optional[random.Random] = None,
                       level: Optional[int] = None) -> LevelGenerator:
        """Build a level for the current tier, or for tier ``level`` when given."""
        config = self.config_for(level) if level is not None else self.current_config
        return LevelGenerator.from_config(config, width_px, height_px, rng)
