"""GameState enum reported by the simulation engine.

The engine only tracks a terminal flag internally; ``SimulationEngine.state``
maps it onto these values for hosts that prefer an enum.
"""
from enum import Enum


class GameState(Enum):
    """Externally visible state of a run.

    States:
        WAITING: Surface size not known yet, nothing is simulated
        PLAYING: Active gameplay in progress
        GAME_OVER: Avatar hit the ground or a pipe, waiting for restart
    """
    WAITING = "waiting"
    PLAYING = "playing"
    GAME_OVER = "game_over"
