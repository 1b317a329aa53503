# utils.py
"""
Start-up helpers for the star-dust demo host.

`config.json` only tunes the host around the field (log output, window,
frame pacing, the virtual page that is scrolled). The look of the field
itself lives in constants.py and is never read from the config.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, List, Tuple

from constants import DEFAULT_WINDOW_SIZE

DEFAULT_LOG_FILE = 'logs/stardust.log'
DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
# At most ~6MB of logs on disk.
LOG_ROTATE_BYTES = 1024 * 1024
LOG_BACKUPS = 5

CONFIG_SECTIONS = ('logging', 'window', 'run_control', 'page')

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs: the loaded config. Its "logging" section may set "level",
#     "format" and "log_file"; missing keys fall back to the defaults above.
#   - Side Effects: Replaces every root-logger handler with one console
#     handler and one rotating file handler. Creates the log directory.
#   - Invariants: Calling it twice never duplicates handlers.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: the parsed JSON object, unchanged.
#   - Side Effects: Warns about top-level sections the host does not read.
#     Logs, then re-raises FileNotFoundError or json.JSONDecodeError.
#
# window_size(config: Dict[str, Any]) -> Tuple[int, int]:
#   - Invariants: Raises ValueError for non-positive or non-integer sizes.


def _make_handlers(log_file_path: str, formatter: logging.Formatter) -> List[logging.Handler]:
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    handlers = [
        logging.StreamHandler(),
        logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=LOG_ROTATE_BYTES, backupCount=LOG_BACKUPS
        ),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(config: Dict[str, Any]) -> None:
    """Routes the root logger to the console and a rotating log file."""
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)
    formatter = logging.Formatter(log_config.get('format', DEFAULT_LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    for handler in _make_handlers(log_file_path, formatter):
        root.addHandler(handler)

    logging.info(f"Logging to console and {log_file_path} at {log_level}.")


def load_config(path: str) -> Dict[str, Any]:
    """Reads the host configuration from a JSON file."""
    logging.info(f"Loading host configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"No host configuration at {path}.")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"{path} is not valid JSON (line {e.lineno}, column {e.colno}).")
        raise

    unknown = sorted(set(config) - set(CONFIG_SECTIONS))
    if unknown:
        logging.warning(f"Ignoring unknown config sections: {', '.join(unknown)}.")
    return config


def window_size(config: Dict[str, Any]) -> Tuple[int, int]:
    """Reads and validates the windowed-mode size from the config."""
    window = config.get('window', {})
    width = window.get('width', DEFAULT_WINDOW_SIZE[0])
    height = window.get('height', DEFAULT_WINDOW_SIZE[1])
    valid = all(
        isinstance(v, int) and not isinstance(v, bool) and v > 0
        for v in (width, height)
    )
    if not valid:
        msg = (
            f"Configuration error: window size {width!r}x{height!r} is invalid. "
            f"Width and height must be positive integers."
        )
        logging.critical(msg)
        raise ValueError(msg)
    return width, height
