from abc import ABC, abstractmethod

import pygame

# ============================================================================
# Capability interfaces between agents, the player and the host world
# ============================================================================


class PlayerLink(ABC):
    """The narrow view of the player that enemies are allowed to hold."""

    @abstractmethod
    def position(self) -> pygame.math.Vector2:
        """Current center of the player in world units."""

    @abstractmethod
    def is_alive(self) -> bool:
        pass

    @abstractmethod
    def apply_damage(self, amount: float) -> float:
        """Apply damage and return the remaining health."""


class WorldHost(ABC):
    """Callbacks a level's entities use to signal the world that owns them."""

    @abstractmethod
    def on_player_damaged(self, amount: float) -> None:
        pass

    @abstractmethod
    def on_player_died(self) -> None:
        pass

    def advance_level(self) -> None:
        """Called by an open secret door; hosts without progression ignore it."""


# ============================================================================
# Base game object
# ============================================================================


class GameObject:
    """
    Anything placed in a level: position, size, collision bounds and an
    opaque texture handle owned by the renderer.
    """

    def __init__(self, x, y, width, height, texture=None):
        self.x = float(x)
        self.y = float(y)
        self.width = width
        self.height = height
        self.texture = texture
        self.rect = pygame.Rect(int(self.x), int(self.y), width, height)

    @property
    def center(self):
        return (self.x + self.width / 2, self.y + self.height / 2)

    def sync_rect(self):
        self.rect.topleft = (int(self.x), int(self.y))

    def update(self, dt):
        self.sync_rect()

    def dispose(self):
        """Release the texture handle; safe to call on a half-built object."""
        texture = getattr(self, "texture", None)
        self.texture = None
        release = getattr(texture, "dispose", None)
        if callable(release):
            release()

    def __repr__(self):
        return f"{self.__class__.__name__}({self.x:.0f}, {self.y:.0f})"
