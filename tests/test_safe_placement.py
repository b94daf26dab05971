import logging

import pygame

from goldmines.entities.entities import Coin, Crate, Ore, Wall
from goldmines.level.room_data import Room
from goldmines.level.safe_placement import SafePlacementSolver


ROOM = Room(2, 2, 8, 8)


def test_empty_room_spawns_at_center():
    solver = SafePlacementSolver([], [])
    assert solver.find_safe_spawn(ROOM) == (192, 192)


def test_coins_do_not_block_spawn():
    solver = SafePlacementSolver([], [Coin(192, 192)])
    assert solver.find_safe_spawn(ROOM) == (192, 192)


def test_blocked_center_moves_to_nearby_safe_spot():
    blockers = [Crate(192, 192), Ore(176, 176)]
    solver = SafePlacementSolver([], blockers)
    x, y = solver.find_safe_spawn(ROOM)
    assert (x, y) != (192, 192)
    assert solver.is_position_safe(x, y)
    assert ROOM.world_rect().collidepoint(int(x), int(y))
    spawn = pygame.Rect(int(x), int(y), 32, 32)
    assert spawn.collidelist([b.rect for b in blockers]) == -1


def test_walls_block_spawn():
    solver = SafePlacementSolver([Wall(192, 192)], [])
    assert not solver.is_position_safe(192, 192)
    assert solver.is_position_safe(224, 192)


def test_fully_blocked_room_falls_back_to_center(caplog):
    crates = [Crate(x * 32, y * 32) for x in range(2, 10) for y in range(2, 10)]
    solver = SafePlacementSolver([], crates)
    with caplog.at_level(logging.WARNING):
        assert solver.find_safe_spawn(ROOM) == (192, 192)
    assert "No safe spawn" in caplog.text
