"""Drawable surface abstraction and its pygame implementation.

The renderer only talks to the Surface and SurfaceHost protocols, so it
can draw into a pygame window, an off-screen buffer, or a recording fake
in tests.

A host hands out its surface with lock() and takes it back with
unlock_and_post(); each frame is drawn between exactly one such pair.
"""

import threading
from typing import Dict, Optional, Protocol, Tuple, runtime_checkable

import pygame

Color = Tuple[int, int, int]


@runtime_checkable
class Surface(Protocol):
    """Primitive drawing operations on a surface of known pixel size."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def fill(self, color: Color) -> None: ...

    def fill_rect(
        self, left: float, top: float, right: float, bottom: float, color: Color,
    ) -> None: ...

    def fill_circle(self, cx: float, cy: float, radius: float, color: Color) -> None: ...

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        size: int,
        color: Color,
        center: bool = True,
    ) -> None: ...


@runtime_checkable
class SurfaceHost(Protocol):
    """Provider of a transient drawable surface."""

    def is_valid(self) -> bool: ...

    def size(self) -> Tuple[int, int]: ...

    def lock(self) -> Optional[Surface]: ...

    def unlock_and_post(self, surface: Surface) -> None: ...


_font_cache: Dict[int, pygame.font.Font] = {}
_font_lock = threading.Lock()


def get_font(size: int) -> pygame.font.Font:
    """Get the default pygame font at a size, cached per size."""
    with _font_lock:
        font = _font_cache.get(size)
        if font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            font = pygame.font.Font(None, size)
            _font_cache[size] = font
        return font


class PygameSurface:
    """Surface backed by a pygame.Surface."""

    def __init__(self, raw: pygame.Surface):
        self.raw = raw

    @property
    def width(self) -> int:
        return self.raw.get_width()

    @property
    def height(self) -> int:
        return self.raw.get_height()

    def fill(self, color: Color) -> None:
        self.raw.fill(color)

    def fill_rect(
        self, left: float, top: float, right: float, bottom: float, color: Color,
    ) -> None:
        """Fill the rectangle between two corners.

        Empty and inverted rectangles draw nothing.
        """
        if right <= left or bottom <= top:
            return
        pygame.draw.rect(
            self.raw,
            color,
            pygame.Rect(int(left), int(top), int(right - left), int(bottom - top)),
        )

    def fill_circle(self, cx: float, cy: float, radius: float, color: Color) -> None:
        pygame.draw.circle(self.raw, color, (int(cx), int(cy)), int(radius))

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        size: int,
        color: Color,
        center: bool = True,
    ) -> None:
        """Draw text with its baseline at y.

        Args:
            text: Text to draw
            x: Horizontal anchor (center if center=True, else left edge)
            y: Baseline Y
            size: Font size in pixels
            color: RGB color
            center: Center horizontally on x
        """
        image = get_font(size).render(text, True, color)
        rect = image.get_rect()
        if center:
            rect.midbottom = (int(x), int(y))
        else:
            rect.bottomleft = (int(x), int(y))
        self.raw.blit(image, rect)


class PygameSurfaceHost:
    """Double-buffered host for drawing from a background thread.

    The loop thread draws into the back buffer between lock() and
    unlock_and_post(); posting copies it into the front buffer. The main
    thread calls present() to put the latest front buffer on screen,
    since pygame windows should only be touched from the thread that
    created them.
    """

    def __init__(self, width: int, height: int):
        self._lock = threading.Lock()
        self._back = pygame.Surface((width, height))
        self._front = pygame.Surface((width, height))
        self._valid = True
        self._locked = False
        self._posted = 0
        self._presented = 0

    def is_valid(self) -> bool:
        with self._lock:
            return self._valid

    def size(self) -> Tuple[int, int]:
        with self._lock:
            return self._back.get_size()

    @property
    def frames_posted(self) -> int:
        """Number of frames published so far."""
        with self._lock:
            return self._posted

    def lock(self) -> Optional[PygameSurface]:
        """Hand out the back buffer, or None if invalid or already locked."""
        with self._lock:
            if not self._valid or self._locked:
                return None
            self._locked = True
            return PygameSurface(self._back)

    def unlock_and_post(self, surface: Surface) -> None:
        """Release the back buffer and publish it as the next frame.

        A frame drawn into a buffer that was replaced by resize() while
        locked is discarded.
        """
        with self._lock:
            self._locked = False
            if isinstance(surface, PygameSurface) and surface.raw is self._back:
                self._front.blit(self._back, (0, 0))
                self._posted += 1

    def resize(self, width: int, height: int) -> None:
        """Replace both buffers with ones of the new size."""
        with self._lock:
            if self._back.get_size() == (width, height):
                return
            self._back = pygame.Surface((width, height))
            self._front = pygame.Surface((width, height))

    def invalidate(self) -> None:
        """Stop handing out surfaces (window hidden or closing)."""
        with self._lock:
            self._valid = False

    def validate(self) -> None:
        """Resume handing out surfaces."""
        with self._lock:
            self._valid = True

    def present(self, display: pygame.Surface) -> bool:
        """Blit the latest published frame onto the display surface.

        Returns:
            True if a frame newer than the last presented one was shown
        """
        with self._lock:
            display.blit(self._front, (0, 0))
            fresh = self._posted != self._presented
            self._presented = self._posted
            return fresh
