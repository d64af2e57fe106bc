#!/usr/bin/env python3
"""Flappy - Desktop Entry Point.

Opens a pygame window, runs the simulation loop on a background thread
and feeds clicks and key presses to it from the main thread.

Usage:
    python -m flappy
    python -m flappy --width 720 --height 1280
    python -m flappy --seed 42 --log-level DEBUG
"""

import argparse
import sys
from typing import List, Optional

import pygame

from flappy import config
from flappy.engine import SimulationEngine
from flappy.logging import configure_logging, get_logger
from flappy.loop import LoopDriver
from flappy.renderer import Renderer
from flappy.surface import PygameSurfaceHost

log = get_logger('main')

FLAP_KEYS = (pygame.K_SPACE, pygame.K_UP, pygame.K_w)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(description="Flappy - tap to fly between the pipes")

    # Display options
    parser.add_argument('--width', type=int, default=config.SCREEN_WIDTH, help='Window width')
    parser.add_argument('--height', type=int, default=config.SCREEN_HEIGHT, help='Window height')
    parser.add_argument('--fullscreen', action='store_true', help='Run fullscreen')

    # Game options
    parser.add_argument('--seed', type=int, default=None, help='Seed for pipe placement')
    parser.add_argument('--log-level', type=str, default=None,
                        choices=['TRACE', 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'OFF'],
                        help='Log level for all modules')
    return parser


def is_primary_action(event: pygame.event.Event) -> bool:
    """Check if a pygame event counts as the flap/restart input."""
    if event.type == pygame.MOUSEBUTTONDOWN:
        # SDL mirrors every tap as a mouse click; the FINGERDOWN already counts
        if getattr(event, 'touch', False):
            return False
        return event.button == 1
    if event.type == pygame.FINGERDOWN:
        return True
    if event.type == pygame.KEYDOWN:
        return event.key in FLAP_KEYS
    return False


def main(argv: Optional[List[str]] = None) -> int:
    """Run Flappy in a desktop window."""
    args = build_parser().parse_args(argv)
    if args.log_level:
        configure_logging(level=args.log_level)

    pygame.init()
    pygame.font.init()

    if args.fullscreen:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    else:
        screen = pygame.display.set_mode((args.width, args.height), pygame.RESIZABLE)
    pygame.display.set_caption("Flappy")
    width, height = screen.get_size()

    engine = SimulationEngine(seed=args.seed)
    engine.initialize(width, height)
    host = PygameSurfaceHost(width, height)
    driver = LoopDriver(engine, Renderer(engine), host)

    print("\n" + "=" * 50)
    print("FLAPPY")
    print("=" * 50)
    print("Controls:")
    print("  - Click, SPACE or UP to flap")
    print("  - Same input restarts after a game over")
    print("  - ESC to quit")
    print("=" * 50 + "\n")

    clock = pygame.time.Clock()
    running = True
    driver.start()
    try:
        while running:
            clock.tick(config.FPS)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    host.resize(event.w, event.h)
                    engine.initialize(event.w, event.h)
                elif is_primary_action(event):
                    driver.dispatch_primary_action()

            if host.present(screen):
                pygame.display.flip()
    finally:
        host.invalidate()
        driver.stop()
        pygame.quit()

    log.info("Final score %d", engine.score)
    return 0


if __name__ == "__main__":
    sys.exit(main())
