import logging

import pytest

from goldmines.entities.entities import Chest, Coin, Ore, SecretDoor
from goldmines.entities.enemy_entities import Enemy
from goldmines.level.level_manager import LevelManager
from goldmines.systems.game_session import GameSession, GameStatus, LevelState

from conftest import CountingTexture


@pytest.fixture
def session():
    s = GameSession(seed=7)
    yield s
    s.dispose()


def objects_of(session, cls):
    return [o for o in session.level.layers.objects if isinstance(o, cls)]


def collect_all_coins(session):
    for coin in objects_of(session, Coin):
        session.coin_collected(coin)


# --- Start of a session ---

def test_session_starts_on_first_tier(session):
    assert session.status is GameStatus.PLAYING
    assert session.current_tier_display_index() == 1
    assert session.total_tiers() == 3
    assert session.has_next_tier()
    assert session.collected_coins() == 0
    assert session.total_coins_this_level() == len(objects_of(session, Coin))


def test_next_tier_is_prepared_ahead(session):
    assert session.next_level_ready
    prepared = session._pending.result()
    assert isinstance(prepared, LevelState)
    assert prepared.tier == 2
    assert not prepared.skip_door


def test_player_spawn_avoids_walls(session):
    walls = [w.rect for w in session.level.layers.walls]
    assert session.player.rect.collidelist(walls) == -1


def test_enemies_belong_to_the_level(session):
    assert len(session.enemies) <= 10
    for enemy in session.enemies:
        assert session.player.position().distance_to(enemy.center) >= 1000
        assert enemy in session.level.layers.objects
        assert enemy.host is session


def test_update_runs_a_frame(session):
    session.update(1 / 60)
    assert session.status is GameStatus.PLAYING


# --- Interactions ---

def test_collecting_coins_opens_the_door(session):
    doors = objects_of(session, SecretDoor)
    assert len(doors) == 1
    collect_all_coins(session)
    assert session.collected_coins() == session.total_coins_this_level()
    assert session.player.coins == session.total_coins_this_level()
    assert doors[0].is_open
    assert not objects_of(session, Coin)
    assert session.status is GameStatus.PLAYING


def test_coin_counts_once(session):
    coin = objects_of(session, Coin)[0]
    assert session.coin_collected(coin)
    assert not session.coin_collected(coin)
    assert session.collected_coins() == 1


def test_mined_ore_pays_for_a_chest(session):
    for ore in objects_of(session, Ore)[:2]:
        assert session.mine_ore(ore)
    assert session.player.ore_count == 2
    chest = objects_of(session, Chest)[0]
    assert session.open_chest(chest) is not None
    assert session.player.ore_count == 0
    assert session.player.coins == chest.coins


# --- Progression ---

def test_open_door_advances_to_prepared_tier(session):
    door = objects_of(session, SecretDoor)[0]
    assert not session.interact_door(door)

    collect_all_coins(session)
    session.mine_ore(objects_of(session, Ore)[0])
    session.player.apply_damage(30)
    carried_coins = session.player.coins
    prepared = session._pending.result()

    assert session.interact_door(door)
    assert session.level is prepared
    assert session.current_tier_display_index() == 2
    assert session.collected_coins() == 0
    assert session.player.health == 70
    assert session.player.coins == carried_coins
    assert session.player.ore_count == 1
    assert session._pending.result().tier == 3


def test_final_tier_has_no_door_and_ends_in_victory():
    session = GameSession(seed=3)
    try:
        session.advance_level()
        session.advance_level()
        assert session.current_tier_display_index() == 3
        assert not session.has_next_tier()
        assert session.level.skip_door
        assert not objects_of(session, SecretDoor)
        assert session.status is GameStatus.PLAYING

        session.advance_level()
        assert session.status is GameStatus.VICTORY
    finally:
        session.dispose()


def test_collecting_every_coin_on_final_tier_wins():
    session = GameSession(seed=5, manager=LevelManager(start_tier=3))
    try:
        assert session.total_coins_this_level() > 0
        collect_all_coins(session)
        assert session.status is GameStatus.VICTORY
    finally:
        session.dispose()


def test_player_death_ends_the_game(session):
    session.player.apply_damage(500)
    session.update(1 / 60)
    assert session.status is GameStatus.GAME_OVER
    assert not session.player.is_alive()

    session.advance_level()
    assert session.current_tier_display_index() == 1


def test_background_pipeline_swaps_complete_state():
    session = GameSession(seed=11, background=True)
    try:
        session.advance_level()
        assert session.current_tier_display_index() == 2
        assert session.level.tier == 2
        assert session.level.layers.walls
        assert all(isinstance(e, Enemy) for e in session.enemies)
    finally:
        session.dispose()


# --- Teardown ---

class ExplodingTexture:
    def dispose(self):
        raise RuntimeError("texture already gone")


def test_dispose_continues_past_failures(caplog):
    session = GameSession(seed=2)
    good = CountingTexture()
    objects = session.level.layers.objects
    objects[0].texture = ExplodingTexture()
    objects[-1].texture = good

    with caplog.at_level(logging.ERROR):
        session.dispose()

    assert good.disposed == 1
    assert "Error disposing" in caplog.text
    assert not session.level.layers.objects


def test_dispose_on_half_built_session():
    GameSession.__new__(GameSession).dispose()
