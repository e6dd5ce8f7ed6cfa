from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from .config import GenerationSettings
from .data import default_catalog, load_catalog
from .exceptions import CatalogValidationError, DungeonPropsError
from .logging_config import configure_logging
from .pipeline import DungeonPipeline
from .spawning import InMemorySpawner

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="dungeon-props",
        description="Generate a small dungeon, dress it with props and agents, print a JSON summary.",
    )
    p.add_argument("--seed", type=int, default=None, help="Seed for deterministic output")
    p.add_argument("--config", type=Path, default=None, help="YAML settings file")
    p.add_argument("--catalog", type=Path, default=None, help="Prop catalog (.yaml or .json)")
    p.add_argument("--corner-chance", type=float, default=None, help="Base corner prop chance [0..1]")
    p.add_argument("--enemies", type=str, default=None, help="Comma-separated enemy counts per room")
    p.add_argument("--player-room", type=int, default=None, help="Room index for the player")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    return p.parse_args(argv)


def build_settings(args: argparse.Namespace) -> GenerationSettings:
    """Defaults < settings file < DP_* environment < command line."""
    settings = GenerationSettings.load(args.config).with_env()
    overrides = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.corner_chance is not None:
        overrides["corner_chance"] = args.corner_chance
    if args.enemies is not None:
        overrides["room_enemy_counts"] = [int(c) for c in args.enemies.split(",") if c.strip()]
    if args.player_room is not None:
        overrides["player_room_index"] = args.player_room
    if args.catalog is not None:
        overrides["catalog_path"] = str(args.catalog)
    if not overrides:
        return settings
    data = {**asdict(settings), **overrides}
    return GenerationSettings.from_dict(data)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.debug else logging.WARNING)

    try:
        settings = build_settings(args)
        catalog = load_catalog(settings.catalog_path) if settings.catalog_path else default_catalog()
        pipeline = DungeonPipeline(settings, catalog, InMemorySpawner())
        pipeline.generate()
        pipeline.wait()
    except CatalogValidationError as e:
        logger.error("%s", e.to_human())
        return 2
    except (DungeonPropsError, FileNotFoundError, ValueError) as e:
        logger.error("Generation failed: %s", e)
        return 2

    print(json.dumps(pipeline.summary(), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
