"""
Shared primitive data types for the simulation and renderer.
"""

from pydantic import BaseModel, ConfigDict, computed_field


class Rect(BaseModel):
    """Immutable axis-aligned rectangle given by its edges.

    Uses screen coordinates (y grows downward). Zero-size and inverted
    rectangles are allowed: a pipe's bottom segment collapses or flips
    on very short surfaces, and collision tests stay well-defined for
    those shapes.

    Attributes:
        left: X coordinate of the left edge
        top: Y coordinate of the top edge
        right: X coordinate of the right edge
        bottom: Y coordinate of the bottom edge

    Examples:
        >>> rect = Rect(left=120.0, top=80.0, right=200.0, bottom=160.0)
        >>> rect.width
        80.0
    """
    left: float
    top: float
    right: float
    bottom: float

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def width(self) -> float:
        """Horizontal extent (negative if inverted)."""
        return self.right - self.left

    @computed_field
    @property
    def height(self) -> float:
        """Vertical extent (negative if inverted)."""
        return self.bottom - self.top

    def __str__(self) -> str:
        """String representation for debugging."""
        return (
            f"Rect(({self.left:.1f}, {self.top:.1f})-"
            f"({self.right:.1f}, {self.bottom:.1f}))"
        )
