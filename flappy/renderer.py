"""Renderer - draws the current world onto a host surface.

The renderer only reads engine snapshots; the game logic never draws.
Draw order is back to front: sky, ground, pipes, avatar, score, then
the game over overlay.
"""

from flappy import config
from flappy.engine import SimulationEngine, WorldSnapshot
from flappy.entities import Obstacle
from flappy.logging import get_logger
from flappy.surface import Surface, SurfaceHost

log = get_logger('renderer')


class Renderer:
    """Flat-color renderer for the simulation."""

    BACKGROUND_COLOR = config.BACKGROUND_COLOR
    GROUND_COLOR = config.GROUND_COLOR
    PIPE_COLOR = config.PIPE_COLOR
    AVATAR_COLOR = config.AVATAR_COLOR
    EYE_COLOR = config.EYE_COLOR
    SCORE_COLOR = config.SCORE_COLOR
    GAME_OVER_COLOR = config.GAME_OVER_COLOR
    HINT_COLOR = config.HINT_COLOR

    def __init__(
        self,
        engine: SimulationEngine,
        game_over_text: str = config.GAME_OVER_TEXT,
        restart_hint_text: str = config.RESTART_HINT_TEXT,
    ):
        """Initialize renderer.

        Args:
            engine: Engine to read state from
            game_over_text: Overlay message shown after a game over
            restart_hint_text: Hint shown below the overlay message
        """
        self._engine = engine
        self._game_over_text = game_over_text
        self._restart_hint_text = restart_hint_text

    def draw(self, host: SurfaceHost) -> bool:
        """Draw one frame.

        Locks a surface from the host, draws into it and posts it. The
        surface is posted even if drawing raises.

        Args:
            host: Surface provider

        Returns:
            True if a frame was drawn and posted, False if no surface was available
        """
        surface = host.lock()
        if surface is None:
            log.trace("No surface available, frame skipped")
            return False

        try:
            self.render(surface, self._engine.snapshot())
        finally:
            host.unlock_and_post(surface)
        return True

    def render(self, surface: Surface, world: WorldSnapshot) -> None:
        """Draw a world snapshot onto an already locked surface."""
        width = surface.width
        height = surface.height
        ground_top = height - world.ground_height

        surface.fill(self.BACKGROUND_COLOR)
        surface.fill_rect(0, ground_top, width, height, self.GROUND_COLOR)

        for obstacle in world.obstacles:
            self._render_obstacle(surface, obstacle, world.pipe_width, ground_top)

        self._render_avatar(surface, world)
        surface.draw_text(
            f"{world.score}", width / 2, config.SCORE_Y,
            config.SCORE_FONT_SIZE, self.SCORE_COLOR,
        )

        if world.terminal:
            self._render_game_over(surface, width, height)

    def _render_obstacle(
        self, surface: Surface, obstacle: Obstacle, pipe_width: float, ground_top: float,
    ) -> None:
        left = obstacle.x
        right = obstacle.x + pipe_width
        surface.fill_rect(left, 0, right, obstacle.top_height, self.PIPE_COLOR)
        surface.fill_rect(left, obstacle.gap_bottom, right, ground_top, self.PIPE_COLOR)

    def _render_avatar(self, surface: Surface, world: WorldSnapshot) -> None:
        avatar = world.avatar
        r = avatar.radius
        surface.fill_circle(avatar.x, avatar.y, r, self.AVATAR_COLOR)
        # Eye
        surface.fill_circle(avatar.x + r / 3, avatar.y - r / 3, r / 6, self.EYE_COLOR)

    def _render_game_over(self, surface: Surface, width: int, height: int) -> None:
        surface.draw_text(
            self._game_over_text, width / 2, height / 2 - 40,
            config.GAME_OVER_FONT_SIZE, self.GAME_OVER_COLOR,
        )
        surface.draw_text(
            self._restart_hint_text, width / 2, height / 2 + 20,
            config.HINT_FONT_SIZE, self.HINT_COLOR,
        )
