"""Configuration for Flappy.

Contains screen dimensions, loop timing, physics constants, obstacle
geometry, colors and overlay text. Every value can be overridden from
the environment or from a ``.env`` file next to this module.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

# Load .env from package directory
_env_path = Path(__file__).parent / '.env'
load_dotenv(_env_path)


def _get_int(key: str, default: int) -> int:
    """Get integer from environment."""
    return int(os.getenv(key, str(default)))


def _get_float(key: str, default: float) -> float:
    """Get float from environment."""
    return float(os.getenv(key, str(default)))


def _get_str(key: str, default: str) -> str:
    """Get string from environment."""
    return os.getenv(key, default)


# Display settings (desktop window only, the engine takes its size from the host)
SCREEN_WIDTH = _get_int('FLAPPY_SCREEN_WIDTH', 540)
SCREEN_HEIGHT = _get_int('FLAPPY_SCREEN_HEIGHT', 960)

# Loop timing
FPS = _get_int('FLAPPY_FPS', 60)
FRAME_SLEEP_MS = _get_int('FLAPPY_FRAME_SLEEP_MS', 16)
MAX_FRAME_DELTA_MS = _get_int('FLAPPY_MAX_FRAME_DELTA_MS', 50)

# Physics (per tick, not per second)
GRAVITY = _get_float('FLAPPY_GRAVITY', 0.9)
FLAP_VELOCITY = _get_float('FLAPPY_FLAP_VELOCITY', -18.0)

# Avatar
AVATAR_X = _get_float('FLAPPY_AVATAR_X', 200.0)
AVATAR_START_Y = _get_float('FLAPPY_AVATAR_START_Y', 300.0)
AVATAR_RADIUS = _get_float('FLAPPY_AVATAR_RADIUS', 30.0)

# World
GROUND_HEIGHT = _get_float('FLAPPY_GROUND_HEIGHT', 120.0)

# Pipes
PIPE_WIDTH = _get_float('FLAPPY_PIPE_WIDTH', 140.0)
PIPE_SPEED = _get_float('FLAPPY_PIPE_SPEED', 6.0)
PIPE_INTERVAL = _get_int('FLAPPY_PIPE_INTERVAL', 120)  # ticks between spawns
PIPE_BASE_GAP = _get_float('FLAPPY_PIPE_BASE_GAP', 350.0)
PIPE_GAP_JITTER = _get_int('FLAPPY_PIPE_GAP_JITTER', 80)
PIPE_SPAWN_OFFSET = _get_float('FLAPPY_PIPE_SPAWN_OFFSET', 200.0)
PIPE_SCORE_OFFSET = _get_float('FLAPPY_PIPE_SCORE_OFFSET', 100.0)
PIPE_TOP_MIN = _get_int('FLAPPY_PIPE_TOP_MIN', 100)
PIPE_TOP_MARGIN = _get_int('FLAPPY_PIPE_TOP_MARGIN', 200)
PIPE_TOP_FLOOR = _get_int('FLAPPY_PIPE_TOP_FLOOR', 150)

# Colors
BACKGROUND_COLOR: Tuple[int, int, int] = (135, 206, 235)  # Sky
GROUND_COLOR: Tuple[int, int, int] = (87, 59, 12)
PIPE_COLOR: Tuple[int, int, int] = (34, 139, 34)
AVATAR_COLOR: Tuple[int, int, int] = (255, 200, 0)
EYE_COLOR: Tuple[int, int, int] = (0, 0, 0)
SCORE_COLOR: Tuple[int, int, int] = (255, 255, 255)
GAME_OVER_COLOR: Tuple[int, int, int] = (255, 0, 0)
HINT_COLOR: Tuple[int, int, int] = (255, 255, 255)

# Text
SCORE_FONT_SIZE = 72
SCORE_Y = 120.0
GAME_OVER_FONT_SIZE = 64
HINT_FONT_SIZE = 40
GAME_OVER_TEXT = _get_str('FLAPPY_GAME_OVER_TEXT', 'Game Over!')
RESTART_HINT_TEXT = _get_str('FLAPPY_RESTART_HINT_TEXT', 'Tap to restart')


@dataclass(frozen=True)
class WorldConfig:
    """Physics and geometry values used by the simulation.

    Defaults come from the module constants so ``WorldConfig()`` follows
    the environment. Tests build their own instances.
    """

    gravity: float = GRAVITY
    flap_velocity: float = FLAP_VELOCITY
    avatar_x: float = AVATAR_X
    avatar_start_y: float = AVATAR_START_Y
    avatar_radius: float = AVATAR_RADIUS
    ground_height: float = GROUND_HEIGHT
    pipe_width: float = PIPE_WIDTH
    pipe_speed: float = PIPE_SPEED
    pipe_interval: int = PIPE_INTERVAL
    base_gap: float = PIPE_BASE_GAP
    gap_jitter: int = PIPE_GAP_JITTER
    spawn_offset: float = PIPE_SPAWN_OFFSET
    score_offset: float = PIPE_SCORE_OFFSET
    despawn_offset: Optional[float] = None  # None means pipe_width
    top_min: int = PIPE_TOP_MIN
    top_margin: int = PIPE_TOP_MARGIN
    top_floor: int = PIPE_TOP_FLOOR

    def __post_init__(self) -> None:
        if self.avatar_radius <= 0:
            raise ValueError(f'avatar_radius must be positive, got {self.avatar_radius}')
        if self.pipe_width <= 0:
            raise ValueError(f'pipe_width must be positive, got {self.pipe_width}')
        if self.pipe_interval <= 0:
            raise ValueError(f'pipe_interval must be positive, got {self.pipe_interval}')
        if self.base_gap <= 0:
            raise ValueError(f'base_gap must be positive, got {self.base_gap}')
        if not 0 <= self.gap_jitter < self.base_gap:
            raise ValueError(
                f'gap_jitter must be in [0, base_gap), got {self.gap_jitter}'
            )
        if self.top_min < 0:
            raise ValueError(f'top_min must be non-negative, got {self.top_min}')
        if self.despawn_offset is None:
            # Pipes leave once their trailing edge passes the left border
            object.__setattr__(self, 'despawn_offset', self.pipe_width)
