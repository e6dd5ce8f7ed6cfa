import logging
import os
import sys
from typing import Union

PACKAGE_LOGGER = "dungeon_props"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def resolve_level(value: Union[str, int, None], default: int) -> int:
    """Turn ``"debug"``, ``"10"`` or ``10`` into a logging level; unknown names give ``default``."""
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    if value.strip().isdigit():
        return int(value)
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(default_level: int = logging.INFO) -> int:
    """Send log records to stderr and set the package level.

    DP_LOG_LEVEL overrides ``default_level``. stdout is left alone so the CLI
    can print its JSON summary there. Returns the level in effect.
    """
    level = resolve_level(os.getenv("DP_LOG_LEVEL"), default_level)
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, stream=sys.stderr, force=True)
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    return level
