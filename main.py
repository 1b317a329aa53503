# main.py
"""
Main entry point for the star-dust demo.

This script orchestrates the whole lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens a Pygame window and wires the event bridge, frame scheduler,
   renderer and engine together.
4. Runs the frame loop until the window is closed or max_frames is hit.
5. Unmounts the engine and shuts Pygame down.
"""
import logging
import cProfile
import pstats
import io
import pygame

from utils import setup_logging, load_config, window_size
from constants import BACKGROUND_COLOR, DEFAULT_FPS


def _open_window(window_params: dict, config: dict) -> pygame.Surface:
    """Creates the display surface, fullscreen or windowed."""
    if window_params.get('fullscreen', False):
        display_info = pygame.display.Info()
        size = (display_info.current_w, display_info.current_h)
        screen = pygame.display.set_mode(size, pygame.FULLSCREEN)
    else:
        flags = pygame.RESIZABLE if window_params.get('resizable', True) else 0
        screen = pygame.display.set_mode(window_size(config), flags)
    pygame.display.set_caption(window_params.get('caption', "Star Dust"))
    return screen


def main(config_path: str = 'config.json'):
    """
    The main function to run the demo.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Star Dust Starting ---")

    window_params = config.get('window', {})
    run_params = config.get('run_control', {})
    page_params = config.get('page', {})

    from events import EventHost, PygameEventBridge
    from scheduler import PygameFrameScheduler
    from visualization import Renderer
    from engine import StarDustEngine

    pygame.init()
    screen = _open_window(window_params, config)
    width, height = screen.get_size()

    # --- Component Initialization ---
    host = EventHost()
    bridge = PygameEventBridge(
        host, width, height,
        page_height_ratio=page_params.get('height_ratio', 3.0),
        scroll_step=page_params.get('scroll_step', 80),
        scroll_lock_ms=page_params.get('scroll_lock_ms', 1000),
    )
    scheduler = PygameFrameScheduler(fps=window_params.get('fps', DEFAULT_FPS))
    renderer = Renderer(width, height)
    engine = StarDustEngine(
        host, scheduler, renderer, width, height,
        seed=run_params.get('seed'),
        scroll_y=bridge.scroll_y,
        log_throttle_frames=run_params.get('log_throttle_frames', 300),
    )

    profiler = cProfile.Profile() if run_params.get('profile', False) else None
    max_frames = run_params.get('max_frames', 0)

    engine.mount()
    if profiler is not None:
        profiler.enable()

    running = True
    try:
        while running:
            if not bridge.pump():
                break

            scheduler.tick()

            # Resizable windows hand back a new display surface.
            screen = pygame.display.get_surface()
            screen.fill(BACKGROUND_COLOR)
            renderer.composite(screen, engine.display_opacity)
            pygame.display.flip()

            if max_frames and engine.frame_count >= max_frames:
                logging.info(f"Reached max_frames ({max_frames}). Stopping.")
                running = False
    finally:
        if profiler is not None:
            profiler.disable()
        engine.unmount()
        pygame.quit()

    logging.info("Frame loop finished.")

    if profiler is not None:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Star Dust Shutting Down ---")


if __name__ == "__main__":
    main()
