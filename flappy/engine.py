"""
Simulation engine for Flappy.

Owns the avatar and the pipe sequence and advances the world one fixed
tick at a time. Physics uses per-tick constants, so the outcome of a
run depends only on the number of ticks and the inputs received, not on
wall-clock time.

The loop thread calls step() while the host's event thread calls
on_primary_action(); every public method takes the same lock so the two
never interleave inside a tick.
"""

import random
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple

from flappy.config import WorldConfig
from flappy.entities.avatar import Avatar, AvatarConfig
from flappy.entities.obstacle import Obstacle, spawn_obstacle
from flappy.game_state import GameState
from flappy.logging import get_logger
from flappy.physics.collision import circle_above_ceiling, circle_hits_ground

log = get_logger('engine')


@dataclass(frozen=True)
class WorldSnapshot:
    """Read-only copy of the world taken under the engine lock.

    Avatar and Obstacle are immutable, so the snapshot can be handed to
    another thread while the engine keeps stepping.
    """

    avatar: Avatar
    obstacles: Tuple[Obstacle, ...]
    score: int
    terminal: bool
    width: int
    height: int
    ground_height: float
    pipe_width: float

    @property
    def ground_line(self) -> float:
        """Y of the top of the ground band."""
        return self.height - self.ground_height


class SimulationEngine:
    """Fixed-step world simulation.

    Attributes:
        world: Physics and geometry configuration

    Examples:
        >>> engine = SimulationEngine(seed=1)
        >>> engine.initialize(1080, 1920)
        >>> engine.step()
        >>> engine.on_primary_action()
    """

    def __init__(
        self,
        world: Optional[WorldConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the engine.

        Args:
            world: Physics and geometry configuration (defaults from env)
            seed: Seed for pipe randomization, ignored if rng is given
            rng: Random source to use for pipe randomization
        """
        self.world = world or WorldConfig()
        self._rng = rng or random.Random(seed)
        self._lock = threading.RLock()

        self._avatar_config = AvatarConfig(
            x=self.world.avatar_x,
            radius=self.world.avatar_radius,
            start_y=self.world.avatar_start_y,
        )

        # World dimensions, unknown until the host reports them
        self._width = 0
        self._height = 0

        self._avatar = Avatar(self._avatar_config, self.world.avatar_start_y)
        self._obstacles: List[Obstacle] = []
        self._spawn_countdown = 0
        self._score = 0
        self._terminal = False
        self._tick_count = 0

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def avatar(self) -> Avatar:
        with self._lock:
            return self._avatar

    @property
    def obstacles(self) -> Tuple[Obstacle, ...]:
        """Live pipes in spawn order (also left-to-right)."""
        with self._lock:
            return tuple(self._obstacles)

    @property
    def score(self) -> int:
        with self._lock:
            return self._score

    @property
    def terminal(self) -> bool:
        with self._lock:
            return self._terminal

    @property
    def spawn_countdown(self) -> int:
        with self._lock:
            return self._spawn_countdown

    @property
    def tick_count(self) -> int:
        """Ticks simulated while playing since the last reset."""
        with self._lock:
            return self._tick_count

    @property
    def width(self) -> int:
        with self._lock:
            return self._width

    @property
    def height(self) -> int:
        with self._lock:
            return self._height

    @property
    def ground_line(self) -> float:
        """Y of the top of the ground band."""
        with self._lock:
            return self._height - self.world.ground_height

    @property
    def is_ready(self) -> bool:
        """Check if the world size is known and stepping does anything."""
        with self._lock:
            return self._width > 1 and self._height > 1

    @property
    def state(self) -> GameState:
        """Current state as a GameState enum."""
        with self._lock:
            if self._terminal:
                return GameState.GAME_OVER
            if self._width <= 1 or self._height <= 1:
                return GameState.WAITING
            return GameState.PLAYING

    def snapshot(self) -> WorldSnapshot:
        """Capture a consistent copy of the world for rendering."""
        with self._lock:
            return WorldSnapshot(
                avatar=self._avatar,
                obstacles=tuple(self._obstacles),
                score=self._score,
                terminal=self._terminal,
                width=self._width,
                height=self._height,
                ground_height=self.world.ground_height,
                pipe_width=self.world.pipe_width,
            )

    # =========================================================================
    # Host entry points
    # =========================================================================

    def initialize(self, width: int, height: int) -> None:
        """Set the world size from the host surface.

        Safe to call every frame; reapplying the current size changes
        nothing.

        Args:
            width: Surface width in pixels
            height: Surface height in pixels
        """
        with self._lock:
            if (width, height) == (self._width, self._height):
                return
            log.debug("World size %dx%d -> %dx%d", self._width, self._height, width, height)
            self._width = width
            self._height = height

    def on_primary_action(self) -> None:
        """Flap while playing, restart after a game over."""
        with self._lock:
            if self._terminal:
                self.reset()
                return
            self._avatar = self._avatar.flap(self.world.flap_velocity)

    def reset(self) -> None:
        """Start a new run on the current surface."""
        with self._lock:
            self._avatar = Avatar.spawn(self._avatar_config, self._height)
            self._obstacles = []
            self._spawn_countdown = 0
            self._score = 0
            self._terminal = False
            self._tick_count = 0
            log.debug("Reset, avatar at y=%.1f", self._avatar.y)

    def step(self) -> None:
        """Advance the world by exactly one tick.

        Does nothing until the world size is known. After a game over
        only the avatar keeps falling until it rests on the ground.
        """
        with self._lock:
            if self._width <= 1 or self._height <= 1:
                return

            if self._terminal:
                self._settle()
                return

            self._tick_count += 1
            self._avatar = self._avatar.apply_gravity(self.world.gravity)
            self._update_obstacles()
            self._update_spawner()
            self._check_bounds()
            self._check_obstacle_collisions()

    # =========================================================================
    # Tick phases
    # =========================================================================

    def _update_obstacles(self) -> None:
        """Scroll, score and despawn pipes.

        Rebuilds the list instead of removing in place so no pipe is
        skipped or visited twice.
        """
        world = self.world
        survivors: List[Obstacle] = []
        for obstacle in self._obstacles:
            obstacle = obstacle.advance(world.pipe_speed)

            if not obstacle.scored and obstacle.has_passed(self._avatar.x, world.score_offset):
                obstacle = obstacle.mark_scored()
                self._score += 1
                log.debug("Scored, total %d", self._score)

            if obstacle.is_offscreen(world.despawn_offset):
                log.trace("Despawned %r", obstacle)
                continue

            survivors.append(obstacle)
        self._obstacles = survivors

    def _update_spawner(self) -> None:
        self._spawn_countdown += 1
        if self._spawn_countdown >= self.world.pipe_interval:
            obstacle = spawn_obstacle(self._rng, self._width, self._height, self.world)
            self._obstacles.append(obstacle)
            self._spawn_countdown = 0
            log.debug("Spawned %r", obstacle)

    def _check_bounds(self) -> None:
        """Ground ends the run, the ceiling only stops the avatar."""
        avatar = self._avatar
        ground_line = self._height - self.world.ground_height

        if circle_hits_ground(avatar.y, avatar.radius, ground_line):
            self._avatar = avatar.set_position(ground_line - avatar.radius)
            self._end_run("hit the ground")

        avatar = self._avatar
        if circle_above_ceiling(avatar.y, avatar.radius):
            self._avatar = avatar.set_position(avatar.radius).stop()

    def _check_obstacle_collisions(self) -> None:
        avatar = self._avatar
        ground_line = self._height - self.world.ground_height
        for obstacle in self._obstacles:
            if obstacle.collides_with(
                avatar.x, avatar.y, avatar.radius, self.world.pipe_width, ground_line,
            ):
                self._end_run("hit a pipe")

    def _end_run(self, reason: str) -> None:
        if self._terminal:
            return
        self._terminal = True
        log.info("Run over (%s) after %d ticks, score %d", reason, self._tick_count, self._score)

    def _settle(self) -> None:
        """Let the avatar drop onto the ground after a game over."""
        avatar = self._avatar
        ground_line = self._height - self.world.ground_height
        if avatar.bottom >= ground_line:
            return

        avatar = avatar.apply_gravity(self.world.gravity)
        if avatar.bottom > ground_line:
            avatar = avatar.set_position(ground_line - avatar.radius)
        self._avatar = avatar
