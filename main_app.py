"""
Tactical Globe - Main Application

Runs the pygame loop around the globe screen:
- window, fullscreen (F11) and resize handling
- command line options (bodies file, engine settings, 2D-only, seed)
- logging setup
"""

import argparse
import logging
import sys
from pathlib import Path

import pygame

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from app.state_manager import StateManager
from catalogs.bodies import builtin_bodies, load_bodies
from core.config import EngineConfig
from core.errors import ConfigError
from ui.theme import get_theme
from ui.screen_globe import GlobeScreen

# Window settings
WIDTH, HEIGHT = 1280, 800
FPS = 60
TITLE = "Tactical Globe"


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description=TITLE)
    p.add_argument("--bodies", type=Path, default=None,
                   help="JSON file with body configurations (default: built-ins)")
    p.add_argument("--config", type=Path, default=None,
                   help="JSON file overriding engine settings")
    p.add_argument("--no-3d", dest="enable_3d", action="store_false",
                   help="skip the shaded sphere layer, draw the 2D fallback")
    p.add_argument("--width", type=int, default=WIDTH)
    p.add_argument("--height", type=int, default=HEIGHT)
    p.add_argument("--seed", type=int, default=None,
                   help="seed for the starfield and asteroid belt")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)


class GlobeApp:
    """
    Main application

    Manages the loop, the state manager and screen coordination.
    """

    def __init__(self, args: argparse.Namespace):
        self.args = args
        settings = EngineConfig.from_json(args.config) if args.config else EngineConfig()
        bodies = load_bodies(args.bodies) if args.bodies else builtin_bodies()

        pygame.init()

        self.windowed_size = (args.width, args.height)
        self.fullscreen = False
        self.screen = pygame.display.set_mode(self.windowed_size, pygame.RESIZABLE)
        pygame.display.set_caption(TITLE)
        self.clock = pygame.time.Clock()

        self.theme = get_theme()

        self.state_manager = StateManager(bodies)
        self.state_manager.register_screen(
            'GLOBE', GlobeScreen(self.state_manager, settings,
                                 enable_3d=args.enable_3d, seed=args.seed))
        self.state_manager.switch_to('GLOBE', push_stack=False)

        self.running = True
        print(f"\n{TITLE}")
        print("=" * 60)
        print(f"Bodies: {', '.join(b.display_name for b in bodies)}")
        print("Initialized successfully!")
        print("=" * 60)

    def run(self):
        """Main loop"""
        print("\nStarting main loop...")
        print("Press ESC to quit\n")

        while self.running:
            dt = self.clock.tick(FPS) / 1000.0

            events = pygame.event.get()
            for event in events:
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_F11:
                    self.toggle_fullscreen()
                elif event.type == pygame.VIDEORESIZE:
                    self.handle_resize(event.w, event.h)

            self.state_manager.handle_input(events)
            if self.state_manager.quit_requested:
                self.running = False

            self.state_manager.update(dt)

            self.screen.fill(self.theme.colors.BG_DARK)
            self.state_manager.render(self.screen)
            pygame.display.flip()

        self.quit()

    def toggle_fullscreen(self):
        """Toggle between fullscreen and windowed mode"""
        self.fullscreen = not self.fullscreen

        if self.fullscreen:
            info = pygame.display.Info()
            width, height = info.current_w, info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
            print(f"Switched to fullscreen: {width}x{height}")
        else:
            self.screen = pygame.display.set_mode(self.windowed_size, pygame.RESIZABLE)
            print(f"Switched to windowed: {self.windowed_size[0]}x{self.windowed_size[1]}")

    def handle_resize(self, width: int, height: int):
        if not self.fullscreen:
            self.windowed_size = (width, height)
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

    def quit(self):
        print("\nShutting down...")
        self.state_manager.shutdown()
        pygame.quit()


def main(argv=None) -> int:
    """Entry point"""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    try:
        app = GlobeApp(args)
        app.run()
    except ConfigError as e:
        print(f"\nCONFIG ERROR: {e}")
        pygame.quit()
        return 2
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        pygame.quit()
        return 0
    except Exception:
        logging.getLogger(__name__).exception("fatal error")
        pygame.quit()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
