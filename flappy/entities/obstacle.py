"""Pipe obstacle entity.

A pipe is a pair of blocking rectangles with a vertical opening between
them. Pipes scroll left by a fixed amount per tick, get scored once the
avatar has passed them, and are dropped when they leave the screen.
"""

import random

from flappy.config import WorldConfig
from flappy.physics.collision import circle_intersects_rect
from flappy.primitives import Rect


class Obstacle:
    """Immutable pipe pair with a gap."""

    def __init__(
        self,
        x: float,
        top_height: float,
        gap: float,
        scored: bool = False,
    ):
        """Initialize pipe.

        Args:
            x: Left edge X position
            top_height: Height of the upper segment measured from the world top
            gap: Height of the opening below the upper segment
            scored: Whether the avatar has already passed this pipe

        Raises:
            ValueError: If gap is not positive or top_height is negative
        """
        if gap <= 0:
            raise ValueError(f'Pipe gap must be positive, got {gap}')
        if top_height < 0:
            raise ValueError(f'Pipe top height must be non-negative, got {top_height}')
        self._x = x
        self._top_height = top_height
        self._gap = gap
        self._scored = scored

    @property
    def x(self) -> float:
        """Get left edge X."""
        return self._x

    @property
    def top_height(self) -> float:
        """Get the upper segment height."""
        return self._top_height

    @property
    def gap(self) -> float:
        """Get the opening height."""
        return self._gap

    @property
    def gap_bottom(self) -> float:
        """Y where the lower segment starts."""
        return self._top_height + self._gap

    @property
    def scored(self) -> bool:
        """Check if this pipe has already counted toward the score."""
        return self._scored

    def advance(self, speed: float) -> 'Obstacle':
        """Scroll left by one tick.

        Returns:
            New Obstacle moved speed pixels to the left
        """
        return Obstacle(self._x - speed, self._top_height, self._gap, self._scored)

    def mark_scored(self) -> 'Obstacle':
        """Return a copy flagged as scored."""
        return Obstacle(self._x, self._top_height, self._gap, True)

    def has_passed(self, avatar_x: float, score_offset: float) -> bool:
        """Check if the pipe's trailing edge is behind the avatar.

        Args:
            avatar_x: Fixed avatar center X
            score_offset: Distance from the pipe's left edge that must pass the avatar
        """
        return self._x + score_offset < avatar_x

    def is_offscreen(self, despawn_offset: float) -> bool:
        """Check if the pipe has scrolled fully past the left edge.

        Args:
            despawn_offset: Distance from the pipe's left edge to its trailing
                edge, normally the pipe width
        """
        return self._x + despawn_offset < 0

    def top_rect(self, width: float) -> Rect:
        """Upper blocking segment, from the world top down to top_height."""
        return Rect(left=self._x, top=0.0, right=self._x + width, bottom=self._top_height)

    def bottom_rect(self, width: float, ground_line: float) -> Rect:
        """Lower blocking segment, from the end of the gap down to the ground."""
        return Rect(
            left=self._x,
            top=self.gap_bottom,
            right=self._x + width,
            bottom=ground_line,
        )

    def collides_with(
        self,
        cx: float,
        cy: float,
        radius: float,
        width: float,
        ground_line: float,
    ) -> bool:
        """Check if a circle touches either segment of this pipe.

        Args:
            cx: Circle center X
            cy: Circle center Y
            radius: Circle radius
            width: Pipe width
            ground_line: Y of the top of the ground band

        Returns:
            True if the circle intersects the top or bottom rectangle
        """
        return (
            circle_intersects_rect(cx, cy, radius, self.top_rect(width)) or
            circle_intersects_rect(cx, cy, radius, self.bottom_rect(width, ground_line))
        )

    def __repr__(self) -> str:
        return (
            f"Obstacle(x={self._x:.1f}, top_height={self._top_height:.1f}, "
            f"gap={self._gap:.1f}, scored={self._scored})"
        )


def spawn_obstacle(
    rng: random.Random,
    surface_width: float,
    surface_height: float,
    world: WorldConfig,
) -> Obstacle:
    """Create a new pipe just beyond the right edge of the world.

    The upper segment height is sampled uniformly from
    [top_min, top_max) where top_max leaves room for the ground, the
    base gap and a margin, floored at world.top_floor. The gap is the
    base gap plus a jitter sampled from [-gap_jitter, gap_jitter).

    Args:
        rng: Random source
        surface_width: Current world width
        surface_height: Current world height
        world: Physics and geometry configuration

    Returns:
        New unscored Obstacle at surface_width + spawn_offset
    """
    top_min = world.top_min
    top_max = max(
        int(surface_height - world.ground_height - world.base_gap - world.top_margin),
        world.top_floor,
    )
    top_height = rng.randrange(top_min, max(top_min + 1, top_max))

    if world.gap_jitter > 0:
        jitter = rng.randrange(-world.gap_jitter, world.gap_jitter)
    else:
        jitter = 0
    gap = world.base_gap + jitter

    return Obstacle(surface_width + world.spawn_offset, float(top_height), float(gap))
