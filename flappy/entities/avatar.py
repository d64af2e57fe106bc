"""Avatar entity with per-tick gravity physics.

The avatar never moves horizontally; the world scrolls past it. Every
operation returns a new Avatar, the engine swaps its reference.
"""

from dataclasses import dataclass
from typing import Tuple

from flappy import config


@dataclass(frozen=True)
class AvatarConfig:
    """Avatar configuration."""

    x: float = config.AVATAR_X
    radius: float = config.AVATAR_RADIUS
    start_y: float = config.AVATAR_START_Y  # Used until the surface height is known


class Avatar:
    """Controllable circle subject to gravity and flap impulses."""

    def __init__(
        self,
        config: AvatarConfig,
        y: float,
        vy: float = 0.0,
    ):
        """Initialize avatar.

        Args:
            config: Avatar configuration (fixed x, radius)
            y: Center Y position
            vy: Vertical velocity in pixels per tick (negative = up)
        """
        self._config = config
        self._y = y
        self._vy = vy

    @classmethod
    def spawn(cls, config: AvatarConfig, surface_height: float = 0) -> 'Avatar':
        """Create an avatar at rest, vertically centered on the surface.

        Args:
            config: Avatar configuration
            surface_height: Current surface height, 0 if not known yet

        Returns:
            New Avatar with zero velocity
        """
        y = surface_height / 2 if surface_height > 1 else config.start_y
        return cls(config, y, 0.0)

    @property
    def x(self) -> float:
        """Get avatar center X (constant)."""
        return self._config.x

    @property
    def y(self) -> float:
        """Get avatar center Y."""
        return self._y

    @property
    def vy(self) -> float:
        """Get vertical velocity."""
        return self._vy

    @property
    def radius(self) -> float:
        """Get avatar radius."""
        return self._config.radius

    @property
    def top(self) -> float:
        """Y of the avatar's top edge."""
        return self._y - self._config.radius

    @property
    def bottom(self) -> float:
        """Y of the avatar's bottom edge."""
        return self._y + self._config.radius

    def apply_gravity(self, gravity: float) -> 'Avatar':
        """Integrate one tick: velocity first, then position.

        Args:
            gravity: Per-tick acceleration

        Returns:
            New Avatar after one tick of free fall
        """
        vy = self._vy + gravity
        return Avatar(self._config, self._y + vy, vy)

    def flap(self, velocity: float) -> 'Avatar':
        """Replace the vertical velocity with the flap impulse.

        Returns:
            New Avatar with vy == velocity, whatever it was before
        """
        return Avatar(self._config, self._y, velocity)

    def set_position(self, y: float) -> 'Avatar':
        """Move the avatar to a new center Y, keeping its velocity."""
        return Avatar(self._config, y, self._vy)

    def stop(self) -> 'Avatar':
        """Zero the vertical velocity."""
        return Avatar(self._config, self._y, 0.0)

    def get_bounds(self) -> Tuple[float, float, float, float]:
        """Get avatar bounding box (left, top, right, bottom)."""
        r = self._config.radius
        return (self.x - r, self._y - r, self.x + r, self._y + r)

    def __repr__(self) -> str:
        return f"Avatar(x={self.x:.1f}, y={self._y:.2f}, vy={self._vy:.2f})"
