import random

import pygame
import pytest

from goldmines.core.utils import los_clear, random_unit_vector, sample_until
from goldmines.level.room_data import CratePlacement, GridBuilder, LevelConfiguration, Room
from goldmines.tiles.tile_collision import ObstacleMap
from goldmines.tiles.tile_types import TileKind, tile_to_world, world_to_tile


# --- Grid builder ---

def test_carving_only_turns_wall_into_empty():
    builder = GridBuilder(6, 5)
    builder.carve(2, 2)
    builder.set(3, 2, TileKind.ORE)
    builder.carve(3, 2)
    builder.carve(10, 10)
    assert builder.get(2, 2) == TileKind.EMPTY
    assert builder.get(3, 2) == TileKind.ORE


def test_frozen_grid_rejects_writes():
    builder = GridBuilder(4, 4)
    builder.carve_room(Room(1, 1, 2, 2))
    grid = builder.freeze()
    with pytest.raises(RuntimeError):
        builder.set(0, 0, TileKind.EMPTY)
    with pytest.raises(RuntimeError):
        builder.carve(0, 0)
    assert grid[1, 1] == TileKind.EMPTY
    assert grid.count(TileKind.EMPTY) == 4


def test_reserved_cell_is_not_free():
    builder = GridBuilder(4, 4, fill=TileKind.EMPTY)
    builder.reserve(1, 1)
    assert not builder.is_free(1, 1)
    builder.release(1, 1)
    assert builder.is_free(1, 1)


def test_grid_is_indexed_x_then_y():
    builder = GridBuilder(5, 3)
    builder.carve(4, 1)
    grid = builder.freeze()
    assert grid.get(4, 1) == TileKind.EMPTY
    assert grid.cells_of(TileKind.EMPTY) == [(4, 1)]
    assert grid.to_ascii([CratePlacement(4, 1)]).splitlines() == ["#####", "####x", "#####"]


def test_reachable_from_stops_at_walls():
    builder = GridBuilder(7, 3)
    builder.carve(1, 1)
    builder.carve(2, 1)
    builder.carve(4, 1)
    grid = builder.freeze()
    assert grid.reachable_from((1, 1)) == {(1, 1), (2, 1)}
    assert grid.reachable_from((0, 0)) == set()


def test_room_geometry():
    room = Room(2, 3, 6, 5)
    assert room.center == (5, 5)
    assert room.interior_bounds() == (3, 6, 4, 6)
    assert room.world_rect() == pygame.Rect(64, 96, 192, 160)
    assert not room.overlaps(Room(8, 3, 4, 4))
    assert room.overlaps(Room(7, 7, 4, 4))


def test_level_configuration_validation():
    assert LevelConfiguration(1, 1, 3, 3, 1, 0).validate()
    with pytest.raises(ValueError):
        LevelConfiguration(5, 4, 8, 12, 2, 30).validate()
    with pytest.raises(ValueError):
        LevelConfiguration(1, 2, 8, 12, 0, 30).validate()
    with pytest.raises(ValueError):
        LevelConfiguration(1, 2, 8, 12, 2, -1).validate()


def test_tile_conversions():
    assert tile_to_world(3) == 96
    assert world_to_tile(97.5) == 3
    assert TileKind.WALL.is_solid and not TileKind.SECRET_DOOR.is_solid


# --- Obstacle map ---

def test_obstacle_map_collision_is_strict():
    walls = ObstacleMap([pygame.Rect(64, 64, 32, 32)])
    assert walls.collides(pygame.Rect(70, 70, 10, 10))
    assert not walls.collides(pygame.Rect(96, 64, 32, 32))
    assert walls.contains_point((96, 96))
    assert not walls.contains_point((97, 96))


def test_obstacle_map_add_remove():
    walls = ObstacleMap()
    rect = pygame.Rect(0, 0, 32, 32)
    walls.add(rect)
    assert len(walls) == 1
    assert walls.remove(pygame.Rect(0, 0, 32, 32))
    assert not walls.remove(rect)
    assert not walls.collides(pygame.Rect(5, 5, 5, 5))


def test_near_returns_close_obstacles():
    walls = ObstacleMap([pygame.Rect(0, 0, 32, 32), pygame.Rect(640, 640, 32, 32)])
    near = walls.near((40, 16), 50)
    assert pygame.Rect(0, 0, 32, 32) in near
    assert pygame.Rect(640, 640, 32, 32) not in near


# --- Utilities ---

def test_sample_until_gives_up():
    draws = []
    assert sample_until(lambda: draws.append(1) or len(draws), lambda v: v > 10, 5) is None
    assert len(draws) == 5
    assert sample_until(lambda: 7, lambda v: v == 7, 1) == 7


def test_line_of_sight():
    wall = [pygame.Rect(50, 0, 10, 100)]
    assert not los_clear(wall, (0, 50), (100, 50))
    assert los_clear(wall, (0, 150), (100, 150))
    assert los_clear(ObstacleMap(wall), (0, 150), (100, 150))


def test_random_unit_vector_is_normalized():
    rng = random.Random(8)
    for _ in range(20):
        assert random_unit_vector(rng).length() == pytest.approx(1.0)
