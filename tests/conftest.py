import random

import pytest

from goldmines.config import LEVEL_WIDTH_PX, LEVEL_HEIGHT_PX
from goldmines.entities.entity_common import WorldHost
from goldmines.level.level_generator import LevelGenerator
from goldmines.level.room_data import LevelConfiguration


class RecordingHost(WorldHost):
    """World host that just remembers what it was told."""

    def __init__(self):
        self.damage = []
        self.deaths = 0
        self.advances = 0

    def on_player_damaged(self, amount):
        self.damage.append(amount)

    def on_player_died(self):
        self.deaths += 1

    def advance_level(self):
        self.advances += 1


class CountingTexture:
    def __init__(self):
        self.disposed = 0

    def dispose(self):
        self.disposed += 1


# --- Fixtures for common test data ---

@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def tier1_config():
    return LevelConfiguration(min_rooms=8, max_rooms=12, min_room_size=8, max_room_size=12,
                              corridor_width=2, max_coins=30)


@pytest.fixture
def generator(tier1_config):
    return LevelGenerator.from_config(tier1_config, LEVEL_WIDTH_PX, LEVEL_HEIGHT_PX, random.Random(42))


@pytest.fixture
def host():
    return RecordingHost()
