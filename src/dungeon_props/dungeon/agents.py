from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from ..events import EventBus, EventType
from ..rng import RandomSource
from ..spawning import EntityKind, Spawner
from .graph import accessible_from_path
from .models import DungeonData, Room

logger = logging.getLogger(__name__)

# Agents stand in the middle of their tile.
TILE_CENTER = 0.5


class AgentPlacer:
    """Spawns enemies on tiles reachable from the path and the player in a chosen room."""

    def __init__(
        self,
        spawner: Spawner,
        rng: RandomSource,
        room_enemy_counts: Sequence[int] = (),
        player_room_index: Optional[int] = 0,
        enemy_visual: Any = "enemy",
        player_visual: Any = "player",
        bus: Optional[EventBus] = None,
    ) -> None:
        self.spawner = spawner
        self.rng = rng
        self.room_enemy_counts = list(room_enemy_counts)
        self.player_room_index = player_room_index
        self.enemy_visual = enemy_visual
        self.player_visual = player_visual
        self.bus = bus

    def place_agents(self, dungeon: DungeonData) -> None:
        for index, room in enumerate(dungeon.rooms):
            room.accessible_from_path = accessible_from_path(room, dungeon.path, self.rng)
            is_player_room = index == self.player_room_index

            if index < len(self.room_enemy_counts):
                self.place_enemies(room, self.room_enemy_counts[index], keep_center_free=is_player_room)

            if is_player_room:
                dungeon.player_handle = self.spawner.spawn(
                    EntityKind.PLAYER,
                    (room.center[0] + TILE_CENTER, room.center[1] + TILE_CENTER),
                    self.player_visual,
                )
                logger.info("Player spawned in room %d at %s", index, room.center)

        if self.bus is not None:
            self.bus.publish(
                EventType.AGENTS_PLACED,
                {
                    "enemies": sum(len(r.enemy_handles) for r in dungeon.rooms),
                    "player": dungeon.player_handle is not None,
                },
            )

    def place_enemies(self, room: Room, count: int, keep_center_free: bool = False) -> List[Any]:
        """Spawn up to ``count`` enemies on distinct reachable tiles; fewer if the room is cramped."""
        positions = room.accessible_from_path
        if keep_center_free:
            positions = [p for p in positions if p != room.center_tile]
        if count > len(positions):
            logger.warning("%r: only %d reachable tiles for %d enemies", room, len(positions), count)
        handles = []
        for pos in positions[:count]:
            handle = self.spawner.spawn(EntityKind.ENEMY, pos.to_world(TILE_CENTER), self.enemy_visual)
            room.enemy_handles.append(handle)
            handles.append(handle)
        return handles
