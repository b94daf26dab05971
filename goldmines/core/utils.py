import math
from typing import Callable, Optional, TypeVar

import pygame

from ..config import LOS_SAMPLES

T = TypeVar("T")


def sample_until(sample: Callable[[], T], predicate: Callable[[T], bool],
                 max_attempts: int) -> Optional[T]:
    """Draw from ``sample`` until ``predicate`` accepts a value.

    Returns the first accepted value, or None once ``max_attempts`` draws have
    been rejected. Callers decide what giving up means for them.
    """
    for _ in range(max_attempts):
        value = sample()
        if predicate(value):
            return value
    return None


def rect_contains_point(rect: pygame.Rect, x: float, y: float) -> bool:
    """Point-in-rect test with inclusive edges (pygame's collidepoint excludes right/bottom)."""
    return rect.left <= x <= rect.right and rect.top <= y <= rect.bottom


def los_clear(obstacles, a, b, samples: int = LOS_SAMPLES) -> bool:
    """Return True if the segment a->b does not pass through any obstacle.

    a,b are (x,y) world coordinates. Samples ``samples`` equally spaced points
    after a, the last one being b itself. Thin obstacles that fall between two
    samples are missed; that approximation is good enough for enemy sight.
    ``obstacles`` is anything with ``contains_point`` (an ObstacleMap) or an
    iterable of rects.
    """
    x1, y1 = a
    x2, y2 = b
    step_x = (x2 - x1) / samples
    step_y = (y2 - y1) / samples
    contains = getattr(obstacles, "contains_point", None)
    for i in range(1, samples + 1):
        px = x1 + step_x * i
        py = y1 + step_y * i
        if contains is not None:
            if contains((px, py)):
                return False
        elif any(rect_contains_point(r, px, py) for r in obstacles):
            return False
    return True


def distance(a, b) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def random_unit_vector(rng) -> pygame.math.Vector2:
    """Random heading with both components drawn from [-1, 1], normalized."""
    v = pygame.math.Vector2(rng.uniform(-1.0, 1.0), rng.uniform(-1.0, 1.0))
    while v.length_squared() == 0:
        v.update(rng.uniform(-1.0, 1.0), rng.uniform(-1.0, 1.0))
    return v.normalize()
