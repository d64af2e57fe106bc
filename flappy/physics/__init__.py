"""Flappy physics and collision detection."""

from .collision import (
    circle_intersects_rect,
    circle_hits_ground,
    circle_above_ceiling,
)

__all__ = [
    'circle_intersects_rect',
    'circle_hits_ground',
    'circle_above_ceiling',
]
