import random

import pytest

from goldmines.entities.entities import Chest, ChestBonus, Coin, Ore, SecretDoor
from goldmines.entities.player_entity import Player

from conftest import CountingTexture


def player_with_ore(count):
    player = Player(0, 0)
    for _ in range(count):
        player.add_ore(Ore(0, 0, value=5))
    return player


# --- Chest gating ---

def test_chest_needs_two_ore():
    player = player_with_ore(1)
    chest = Chest(0, 0, coins=25)
    assert chest.open(player) is None
    assert not chest.opened
    assert player.ore_count == 1
    assert player.coins == 0


def test_chest_takes_two_ore_and_pays_out():
    player = player_with_ore(3)
    chest = Chest(0, 0, coins=25)
    bonus = chest.open(player, random.Random(5))
    assert isinstance(bonus, ChestBonus)
    assert chest.opened
    assert player.ore_count == 1
    assert player.coins == 25


def test_chest_opens_only_once():
    player = player_with_ore(4)
    chest = Chest(0, 0, coins=10)
    chest.open(player)
    assert chest.open(player) is None
    assert player.ore_count == 2
    assert player.coins == 10


def test_chest_heal_fraction_is_about_a_quarter():
    rng = random.Random(2024)
    bonuses = []
    for _ in range(1000):
        player = player_with_ore(2)
        bonuses.append(Chest(0, 0, coins=10).open(player, rng))
    heal_fraction = bonuses.count(ChestBonus.HEAL) / len(bonuses)
    assert 0.20 <= heal_fraction <= 0.30
    # The rest is split between the three permanent upgrades
    for bonus in (ChestBonus.MAX_HEALTH, ChestBonus.MAX_STAMINA, ChestBonus.SPEED):
        assert bonuses.count(bonus) > 150


class FixedRoll:
    def __init__(self, roll, index=0):
        self.roll = roll
        self.index = index

    def random(self):
        return self.roll

    def randrange(self, n):
        return self.index


@pytest.mark.parametrize("index,check", [
    (0, lambda p: p.max_health == 120 and p.health == 120),
    (1, lambda p: p.max_stamina == 120 and p.stamina == 120),
    (2, lambda p: p.speed_multiplier == pytest.approx(1.2)),
])
def test_chest_permanent_bonuses(index, check):
    player = player_with_ore(2)
    Chest(0, 0).open(player, FixedRoll(0.9, index))
    assert check(player)


def test_chest_heal_is_capped_at_max_health():
    player = player_with_ore(2)
    player.apply_damage(10)
    assert Chest(0, 0).open(player, FixedRoll(0.1)) is ChestBonus.HEAL
    assert player.health == player.max_health


# --- Door gating ---

def test_door_stays_closed_below_threshold(host):
    door = SecretDoor(0, 0, required_coins=5)
    for collected in range(5):
        assert not door.check_and_open(collected)
    assert not door.interact(host)
    assert host.advances == 0


def test_door_opens_at_threshold_and_stays_open(host):
    door = SecretDoor(0, 0, required_coins=5)
    assert door.check_and_open(5)
    assert door.check_and_open(2)
    assert door.interact(host)
    assert host.advances == 1


def test_door_with_zero_threshold_opens_immediately():
    assert SecretDoor(0, 0, required_coins=0).check_and_open(0)


# --- Pickups ---

def test_ore_can_only_be_mined_once():
    player = Player(0, 0)
    ore = Ore(0, 0, value=7)
    assert ore.mine(player)
    assert not ore.mine(player)
    assert player.inventory == [ore]


def test_coin_can_only_be_collected_once():
    coin = Coin(0, 0)
    assert coin.rect.size == (16, 16)
    assert coin.collect()
    assert not coin.collect()


# --- Player ---

def test_player_snapshot_restore_carries_state():
    old = player_with_ore(3)
    old.add_coins(12)
    old.apply_damage(35)
    old.set_stamina(40)
    old.increase_max_health(20)

    fresh = Player(64, 64)
    fresh.restore(old.snapshot())
    assert fresh.health == old.health
    assert fresh.max_health == 120
    assert fresh.stamina == 40
    assert fresh.ore_count == 3
    assert fresh.coins == 12
    assert fresh.rect.topleft == (64, 64)


def test_player_damage_never_goes_negative():
    player = Player(0, 0)
    assert player.apply_damage(250) == 0
    assert not player.is_alive()


def test_dispose_releases_texture():
    texture = CountingTexture()
    open_texture = CountingTexture()
    chest = Chest(0, 0, texture=texture, open_texture=open_texture)
    chest.dispose()
    chest.dispose()
    assert texture.disposed == 1
    assert chest.texture is None and chest.open_texture is None
