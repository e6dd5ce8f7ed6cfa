from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from .config import GenerationSettings
from .dungeon.agents import AgentPlacer
from .dungeon.classifier import RoomDataExtractor
from .dungeon.generator import SimpleDungeonGenerator
from .dungeon.models import DungeonData, PropSpec
from .dungeon.props import PropPlacementManager
from .events import DeferredNotifier, EventBus, EventType
from .rng import RandomSource
from .spawning import Spawner

logger = logging.getLogger(__name__)


class DungeonPipeline:
    """Generate -> classify -> place props -> place agents.

    Each stage publishes an event on the bus when it is done. The
    "props placed" notification goes through a DeferredNotifier so a host
    can delay it (e.g. until spawn animations settle); by default it is
    synchronous.

    Usage:
      pipeline = DungeonPipeline(GenerationSettings(seed=1), default_catalog(), InMemorySpawner())
      dungeon = pipeline.generate()
    """

    def __init__(
        self,
        settings: GenerationSettings,
        catalog: Sequence[PropSpec],
        spawner: Spawner,
        rng: Optional[RandomSource] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        settings.validate()
        self.settings = settings
        self.spawner = spawner
        self.rng = rng if rng is not None else RandomSource(settings.seed)
        self.bus = bus if bus is not None else EventBus()
        self.notifier = DeferredNotifier(settings.notify_delay)
        self.dungeon = DungeonData()

        self.generator = SimpleDungeonGenerator(
            room_size=(settings.room_width, settings.room_height),
            room_centers=settings.room_centers,
        )
        self.extractor = RoomDataExtractor(bus=self.bus)
        self.prop_placer = PropPlacementManager(
            catalog,
            self.rng,
            spawner,
            corner_chance=settings.corner_chance,
            notifier=self.notifier,
            bus=self.bus,
        )
        self.agent_placer = AgentPlacer(
            spawner,
            self.rng,
            room_enemy_counts=settings.room_enemy_counts,
            player_room_index=settings.player_room_index,
            enemy_visual=settings.enemy_visual,
            player_visual=settings.player_visual,
            bus=self.bus,
        )

    def reset(self) -> None:
        self.notifier.cancel()
        self.dungeon.reset(self.spawner)
        self.bus.publish(EventType.DUNGEON_RESET, {})

    def generate(self) -> DungeonData:
        """Tear down the previous dungeon (if any) and build a new one."""
        self.reset()
        self.generator.generate(self.dungeon)
        self.bus.publish(
            EventType.ROOMS_GENERATED,
            {"rooms": len(self.dungeon.rooms), "path": len(self.dungeon.path)},
        )

        self.extractor.process_rooms(self.dungeon)

        self.prop_placer.process_rooms(self.dungeon)
        self.agent_placer.place_agents(self.dungeon)
        logger.info("Dungeon generated (seed=%s)", self.settings.seed)
        return self.dungeon

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until a delayed completion notification has fired."""
        self.notifier.wait(timeout)

    def summary(self) -> Dict[str, Any]:
        """JSON-friendly description of the current dungeon."""
        rooms = []
        zone_counts = self.dungeon.zone_counts()
        for index, room in enumerate(self.dungeon.rooms):
            rooms.append(
                {
                    "index": index,
                    "center": list(room.center),
                    "floor_tiles": len(room.floor_tiles),
                    "zones": zone_counts[index],
                    "props": [
                        {
                            "name": p.spec.name,
                            "origin": [p.origin.x, p.origin.y],
                            "cells": sorted([c.x, c.y] for c in p.cells),
                            "zone": p.zone.value,
                            "grouped": p.grouped,
                        }
                        for p in room.placed_props
                    ],
                    "reachable_from_path": len(room.accessible_from_path),
                    "enemies": len(room.enemy_handles),
                }
            )
        return {
            "seed": self.settings.seed,
            "path_tiles": len(self.dungeon.path),
            "wall_tiles": len(self.dungeon.wall_tiles),
            "player_room": self.settings.player_room_index if self.dungeon.player_handle is not None else None,
            "rooms": rooms,
        }
