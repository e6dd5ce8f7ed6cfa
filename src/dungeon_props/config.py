from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml
from platformdirs import user_config_dir

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

APP_NAME = "dungeon-props"


def default_settings_path() -> Path:
    """Per-user settings file, e.g. ~/.config/dungeon-props/settings.yaml on Linux."""
    return Path(user_config_dir(APP_NAME)) / "settings.yaml"


@dataclass
class GenerationSettings:
    """Settings for one generation run.

    - room_centers / room_width / room_height: layout handed to SimpleDungeonGenerator.
    - corner_chance: base acceptance probability for corner props.
    - notify_delay: seconds between the end of prop placement and the
      "placement finished" notification (0 = synchronous).
    - room_enemy_counts: enemies per room, by room index; missing rooms get none.
    - player_room_index: room the player spawns in, None for no player.
    """

    seed: Optional[int] = None
    room_width: int = 10
    room_height: int = 10
    room_centers: List[Tuple[int, int]] = field(default_factory=lambda: [(0, 0), (15, 0), (0, -15)])
    corner_chance: float = 0.7
    notify_delay: float = 0.0
    player_room_index: Optional[int] = 0
    room_enemy_counts: List[int] = field(default_factory=lambda: [2, 3, 3])
    enemy_visual: str = "enemy"
    player_visual: str = "player"
    catalog_path: Optional[str] = None

    def validate(self) -> None:
        self._check_types()
        if self.room_width < 1 or self.room_height < 1:
            raise ConfigurationError(f"Room size must be positive, got {self.room_width}x{self.room_height}")
        if not self.room_centers:
            raise ConfigurationError("room_centers must not be empty")
        if not 0.0 <= self.corner_chance <= 1.0:
            raise ConfigurationError(f"corner_chance must be within [0, 1], got {self.corner_chance}")
        if self.notify_delay < 0:
            raise ConfigurationError(f"notify_delay must be non-negative, got {self.notify_delay}")
        if any(c < 0 for c in self.room_enemy_counts):
            raise ConfigurationError(f"room_enemy_counts must be non-negative, got {self.room_enemy_counts}")
        if self.player_room_index is not None and not 0 <= self.player_room_index < len(self.room_centers):
            raise ConfigurationError(
                f"player_room_index {self.player_room_index} out of range for {len(self.room_centers)} rooms"
            )

    def _check_types(self) -> None:
        # YAML happily yields strings or scalars where numbers/lists belong
        for name in ("room_width", "room_height", "seed", "player_room_index"):
            value = getattr(self, name)
            if value is None and name in ("seed", "player_room_index"):
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        for name in ("corner_chance", "notify_delay"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
        for name in ("room_centers", "room_enemy_counts"):
            if not isinstance(getattr(self, name), list):
                raise ConfigurationError(f"{name} must be a list, got {getattr(self, name)!r}")
        if any(isinstance(c, bool) or not isinstance(c, int) for c in self.room_enemy_counts):
            raise ConfigurationError(f"room_enemy_counts must hold integers, got {self.room_enemy_counts}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GenerationSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning("Ignoring unknown settings keys: %s", ", ".join(sorted(unknown)))
        values = {k: v for k, v in data.items() if k in known}
        try:
            if "room_centers" in values:
                values["room_centers"] = [(int(x), int(y)) for x, y in values["room_centers"]]
            if "room_enemy_counts" in values:
                values["room_enemy_counts"] = [int(c) for c in values["room_enemy_counts"]]
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid room layout settings: {e}") from e
        settings = cls(**values)
        settings.validate()
        return settings

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "GenerationSettings":
        """Load settings from a YAML file over the dataclass defaults.

        Without an explicit path the per-user settings file is used if it exists.
        """
        explicit = path is not None
        path = Path(path) if explicit else default_settings_path()
        if not path.exists():
            if explicit:
                raise FileNotFoundError(f"Settings file not found: {path}")
            logger.debug("No user settings at %s; using defaults", path)
            return cls()
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Settings file {path} must contain a mapping")
        logger.info("Loaded settings from %s", path)
        return cls.from_dict(raw)

    def with_env(self, environ: Optional[Mapping[str, str]] = None) -> "GenerationSettings":
        """Overlay DP_* environment variables onto these settings."""
        env = os.environ if environ is None else environ
        data: Dict[str, Any] = asdict(self)
        try:
            if env.get("DP_SEED"):
                data["seed"] = int(env["DP_SEED"])
            if env.get("DP_CORNER_CHANCE"):
                data["corner_chance"] = float(env["DP_CORNER_CHANCE"])
            if env.get("DP_NOTIFY_DELAY"):
                data["notify_delay"] = float(env["DP_NOTIFY_DELAY"])
            if env.get("DP_PLAYER_ROOM"):
                data["player_room_index"] = int(env["DP_PLAYER_ROOM"])
            if env.get("DP_ENEMIES"):
                data["room_enemy_counts"] = [int(c) for c in env["DP_ENEMIES"].split(",") if c.strip()]
        except ValueError as e:
            raise ConfigurationError(f"Invalid DP_* environment value: {e}") from e
        if env.get("DP_CATALOG"):
            data["catalog_path"] = env["DP_CATALOG"]
        return GenerationSettings.from_dict(data)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GenerationSettings":
        return cls().with_env(environ)

    def save(self, path: Path) -> None:
        data = asdict(self)
        data["room_centers"] = [list(c) for c in self.room_centers]
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)
        logger.info("Saved settings to %s", path)
