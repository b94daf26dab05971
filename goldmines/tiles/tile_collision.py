import pygame
from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from ..config import TILE
from ..core.utils import rect_contains_point


class ObstacleMap:
    """Obstacle rects bucketed by the tile cells they cover.

    Queries only look at the buckets around the point or rect being tested,
    so a full level worth of wall tiles stays cheap to check every frame.
    """

    def __init__(self, rects: Iterable[pygame.Rect] = (), tile_size: Optional[int] = None):
        self.tile_size = tile_size if tile_size is not None else TILE
        self._buckets: Dict[Tuple[int, int], List[pygame.Rect]] = defaultdict(list)
        self._rects: List[pygame.Rect] = []
        for rect in rects:
            self.add(rect)

    def _cells_for(self, rect: pygame.Rect) -> Iterator[Tuple[int, int]]:
        ts = self.tile_size
        start_x = rect.left // ts
        end_x = rect.right // ts
        start_y = rect.top // ts
        end_y = rect.bottom // ts
        for cy in range(start_y, end_y + 1):
            for cx in range(start_x, end_x + 1):
                yield (cx, cy)

    def add(self, rect: pygame.Rect) -> None:
        rect = pygame.Rect(rect)
        self._rects.append(rect)
        for cell in self._cells_for(rect):
            self._buckets[cell].append(rect)

    def remove(self, rect: pygame.Rect) -> bool:
        """Remove one obstacle equal to ``rect``; returns False if absent."""
        for i, existing in enumerate(self._rects):
            if existing == rect:
                del self._rects[i]
                for cell in self._cells_for(existing):
                    bucket = self._buckets.get(cell)
                    if bucket and existing in bucket:
                        bucket.remove(existing)
                return True
        return False

    def _candidates(self, rect: pygame.Rect) -> List[pygame.Rect]:
        seen: Set[int] = set()
        out = []
        for cell in self._cells_for(rect):
            for r in self._buckets.get(cell, ()):
                if id(r) not in seen:
                    seen.add(id(r))
                    out.append(r)
        return out

    def near(self, point, radius: float) -> List[pygame.Rect]:
        """Obstacles whose bucket lies within ``radius`` of ``point`` (a superset; callers filter by distance)."""
        x, y = point
        r = int(radius) + 1
        area = pygame.Rect(int(x) - r, int(y) - r, 2 * r, 2 * r)
        return self._candidates(area)

    def collides(self, rect: pygame.Rect) -> bool:
        return any(rect.colliderect(r) for r in self._candidates(rect))

    def contains_point(self, point) -> bool:
        x, y = point
        probe = pygame.Rect(int(x) - 1, int(y) - 1, 2, 2)
        return any(rect_contains_point(r, x, y) for r in self._candidates(probe))

    def __iter__(self) -> Iterator[pygame.Rect]:
        return iter(self._rects)

    def __len__(self) -> int:
        return len(self._rects)
