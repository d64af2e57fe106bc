"""Collision detection for Flappy.

Circle-vs-rectangle tests for avatar/pipe hits plus the ground and
ceiling checks. All functions are pure.
"""

from flappy.primitives import Rect


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def circle_intersects_rect(cx: float, cy: float, r: float, rect: Rect) -> bool:
    """Check if a circle touches or overlaps a rectangle.

    Clamps the circle center into the rectangle to find the nearest
    point on it, then compares the squared distance to that point
    with the squared radius. Tangent circles count as intersecting.

    Args:
        cx: Circle center X
        cy: Circle center Y
        r: Circle radius
        rect: Rectangle to test against

    Returns:
        True if the distance from the center to the rectangle is <= r
    """
    closest_x = _clamp(cx, rect.left, rect.right)
    closest_y = _clamp(cy, rect.top, rect.bottom)
    dx = cx - closest_x
    dy = cy - closest_y
    return (dx * dx + dy * dy) <= r * r


def circle_hits_ground(y: float, radius: float, ground_line: float) -> bool:
    """Check if a circle's bottom edge has gone past the ground line.

    Args:
        y: Circle center Y
        radius: Circle radius
        ground_line: Y coordinate of the top of the ground band

    Returns:
        True if y + radius strictly exceeds the ground line
    """
    return y + radius > ground_line


def circle_above_ceiling(y: float, radius: float) -> bool:
    """Check if a circle's top edge is above the top of the world."""
    return y - radius < 0
