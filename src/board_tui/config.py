from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

# --- Configuration ---
ORIGIN = "https://www.clien.net"
HTTP_TIMEOUT = 15
TICK_INTERVAL = 10.0
POLL_TIMEOUT = 0.25
CHANNEL_SIZE = 256

CONFIG_PATH = os.path.expanduser("~/.config/board/config.json")

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:115.0) "
        "Gecko/20100101 Firefox/115.0"
    )
}

DEFAULT_BOARDS = [
    {"name": "모두의공원", "uri": "/service/board/park"},
    {"name": "새로운소식", "uri": "/service/board/news"},
    {"name": "사진게시판", "uri": "/service/board/image"},
    {"name": "아무거나질문", "uri": "/service/board/kin"},
    {"name": "알뜰구매", "uri": "/service/board/jirum"},
    {"name": "팁과강좌", "uri": "/service/board/lecture"},
    {"name": "사용기", "uri": "/service/board/use"},
]

DEFAULT_CONFIG: Dict[str, Any] = {
    "origin": ORIGIN,
    "boards": DEFAULT_BOARDS,
    "tick_interval": TICK_INTERVAL,
    "refresh_on_tick": True,
    "http_timeout": HTTP_TIMEOUT,
    "initial_view": "home",
    "theme": "dracula",
}

# Default UI settings
UI_DEFAULTS = {
    "statusbar_keybindings": (
        "[b {color}]h[/] home, [b {color}]b[/] boards, "
        "[b {color}]up/down[/] move, [b {color}]q[/] quit"
    ),
}

# --- Logging ---
logger = logging.getLogger("board")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/board_debug_{ts}_{pid}.log"

    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(threadName)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def ensure_config_file_exists() -> None:
    """Write the default config file if the user's config file is not found."""
    if not os.path.exists(CONFIG_PATH):
        logger.info("Config file not found at %s, creating default.", CONFIG_PATH)
        save_config(DEFAULT_CONFIG)


def load_config() -> Dict[str, Any]:
    """Load the main configuration file."""
    ensure_config_file_exists()
    try:
        with open(CONFIG_PATH, "r", encoding="utf-8") as f:
            config = json.load(f)
            logger.info("Loaded config from %s", CONFIG_PATH)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", CONFIG_PATH, e)
        return {}
    if not isinstance(config, dict):
        logger.error("Ignoring config at %s: top level is not an object", CONFIG_PATH)
        return {}
    return config


def save_config(config: Dict[str, Any]) -> None:
    """Save the main configuration file."""
    try:
        os.makedirs(os.path.dirname(CONFIG_PATH), exist_ok=True)
        with open(CONFIG_PATH, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2, ensure_ascii=False)
        logger.info("Saved config to %s", CONFIG_PATH)
    except IOError as e:
        logger.error("Failed to save config to %s: %s", CONFIG_PATH, e)


def get_positive_float(config: Dict[str, Any], key: str, default: float) -> float:
    """Read a positive number from the config, falling back to ``default``."""
    value = config.get(key, default)
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid %s=%r, using %s", key, value, default)
        return default
    if number <= 0:
        logger.warning("Ignoring non-positive %s=%r, using %s", key, value, default)
        return default
    return number
