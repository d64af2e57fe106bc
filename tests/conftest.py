"""Pytest fixtures for Flappy tests."""
import os

# pygame must not open a real window or audio device during tests
os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import pytest

from flappy import logging as flappy_logging
from flappy.config import WorldConfig
from flappy.engine import SimulationEngine


class RecordingSurface:
    """Surface that records draw calls instead of drawing."""

    def __init__(self, width: int, height: int):
        self._width = width
        self._height = height
        self.calls = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def fill(self, color):
        self.calls.append(('fill', color))

    def fill_rect(self, left, top, right, bottom, color):
        self.calls.append(('rect', left, top, right, bottom, color))

    def fill_circle(self, cx, cy, radius, color):
        self.calls.append(('circle', cx, cy, radius, color))

    def draw_text(self, text, x, y, size, color, center=True):
        self.calls.append(('text', text, x, y, size, color, center))


class RecordingHost:
    """SurfaceHost handing out a RecordingSurface."""

    def __init__(self, width: int = 1080, height: int = 1920, valid: bool = True):
        self.surface = RecordingSurface(width, height)
        self.valid = valid
        self.locks = 0
        self.posts = 0

    def is_valid(self) -> bool:
        return self.valid

    def size(self):
        return (self.surface.width, self.surface.height)

    def lock(self):
        if not self.valid:
            return None
        self.locks += 1
        self.surface.calls = []
        return self.surface

    def unlock_and_post(self, surface):
        self.posts += 1


@pytest.fixture
def make_host():
    """Factory for RecordingHost instances."""
    return RecordingHost


@pytest.fixture
def world():
    """Default physics and geometry values."""
    return WorldConfig()


@pytest.fixture
def safe_world():
    """World where pipes never touch a still avatar at y=300.

    No gravity, every pipe has top_height 0 and a fixed 350px gap, so
    the avatar (radius 30 at y=300) always sits inside the opening.
    """
    return WorldConfig(
        gravity=0.0,
        top_min=0,
        top_floor=1,
        top_margin=100000,
        gap_jitter=0,
    )


@pytest.fixture
def engine(world):
    """Engine on a 1080x1920 surface."""
    engine = SimulationEngine(world=world, seed=1234)
    engine.initialize(1080, 1920)
    return engine


@pytest.fixture
def safe_engine(safe_world):
    """Engine on a 1080x1920 surface that never collides with pipes."""
    engine = SimulationEngine(world=safe_world, seed=1234)
    engine.initialize(1080, 1920)
    return engine


@pytest.fixture
def restore_logging():
    """Restore logging configuration after a test changes it."""
    saved_default = flappy_logging._config['default_level']
    saved_modules = dict(flappy_logging._config['module_levels'])
    yield
    flappy_logging._config['default_level'] = saved_default
    flappy_logging._config['module_levels'] = saved_modules
