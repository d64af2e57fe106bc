"""
Flappy

Side-scrolling arcade game built around a fixed-step simulation engine
that any host (pygame window, off-screen buffer, test harness) can
drive through a background loop thread.
"""

from flappy.engine import SimulationEngine, WorldSnapshot
from flappy.game_state import GameState
from flappy.loop import LoopDriver, LoopState
from flappy.renderer import Renderer

__all__ = [
    'SimulationEngine',
    'WorldSnapshot',
    'GameState',
    'LoopDriver',
    'LoopState',
    'Renderer',
]
