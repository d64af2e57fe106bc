"""Flappy game entities."""

from .avatar import Avatar, AvatarConfig
from .obstacle import Obstacle, spawn_obstacle

__all__ = [
    'Avatar', 'AvatarConfig',
    'Obstacle', 'spawn_obstacle',
]
