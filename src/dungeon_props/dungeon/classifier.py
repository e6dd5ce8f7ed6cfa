from __future__ import annotations

import logging
from typing import Iterable, Optional, Set

from ..events import DeferredNotifier, EventBus, EventType
from .geometry import DOWN, LEFT, RIGHT, UP, Position
from .models import DungeonData, RoomZones

logger = logging.getLogger(__name__)


def classify_tiles(floor_tiles: Iterable[Position]) -> RoomZones:
    """Split a room's floor into corner, near-wall and inner tiles.

    A tile missing a neighbour on some side is near that side's wall. Tiles
    missing two or more neighbours are corners and are removed from the
    near-wall sets; tiles with all four neighbours are inner. The result only
    depends on set membership.
    """
    floor = frozenset(floor_tiles)
    up: Set[Position] = set()
    down: Set[Position] = set()
    left: Set[Position] = set()
    right: Set[Position] = set()
    corners: Set[Position] = set()
    inner: Set[Position] = set()

    for tile in floor:
        neighbours = 4
        if tile + UP not in floor:
            up.add(tile)
            neighbours -= 1
        if tile + DOWN not in floor:
            down.add(tile)
            neighbours -= 1
        if tile + RIGHT not in floor:
            right.add(tile)
            neighbours -= 1
        if tile + LEFT not in floor:
            left.add(tile)
            neighbours -= 1

        if neighbours <= 2:
            corners.add(tile)
        if neighbours == 4:
            inner.add(tile)

    return RoomZones(
        near_wall_up=frozenset(up - corners),
        near_wall_down=frozenset(down - corners),
        near_wall_left=frozenset(left - corners),
        near_wall_right=frozenset(right - corners),
        corner=frozenset(corners),
        inner=frozenset(inner),
    )


class RoomDataExtractor:
    """Classifies every room of a dungeon and announces when it is done."""

    def __init__(self, bus: Optional[EventBus] = None, notifier: Optional[DeferredNotifier] = None) -> None:
        self.bus = bus
        self.notifier = notifier

    def process_rooms(self, dungeon: DungeonData) -> None:
        for index, room in enumerate(dungeon.rooms):
            room.clear_derived()
            room.apply_zones(classify_tiles(room.floor_tiles))
            zones = room.zones
            logger.debug(
                "Room %d: corners=%d up=%d down=%d left=%d right=%d inner=%d",
                index,
                len(zones.corner),
                len(zones.near_wall_up),
                len(zones.near_wall_down),
                len(zones.near_wall_left),
                len(zones.near_wall_right),
                len(zones.inner),
            )
        logger.info("Classified %d rooms", len(dungeon.rooms))
        if self.notifier is not None:
            self.notifier.schedule(self._finished, dungeon)
        else:
            self._finished(dungeon)

    def _finished(self, dungeon: DungeonData) -> None:
        if self.bus is not None:
            self.bus.publish(EventType.ROOMS_PROCESSED, {"rooms": len(dungeon.rooms)})
