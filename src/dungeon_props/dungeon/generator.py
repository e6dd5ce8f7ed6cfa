from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from ..exceptions import ConfigurationError
from .geometry import FOUR_DIRECTIONS, Position
from .models import DungeonData, Room

logger = logging.getLogger(__name__)

DEFAULT_ROOM_CENTERS: Tuple[Tuple[int, int], ...] = ((0, 0), (15, 0), (0, -15))


class SimpleDungeonGenerator:
    """Rectangular rooms joined by straight corridors.

    Corridors run from the first room's center to every other room's center, so
    each room shares at least one tile with the path. Only axis-aligned
    corridors are supported.
    """

    def __init__(
        self,
        room_size: Tuple[int, int] = (10, 10),
        room_centers: Optional[Sequence[Tuple[int, int]]] = None,
    ) -> None:
        if room_size[0] < 1 or room_size[1] < 1:
            raise ConfigurationError(f"room_size must be positive, got {room_size}")
        self.room_size = (int(room_size[0]), int(room_size[1]))
        self.room_centers = [Position(int(x), int(y)) for x, y in (room_centers or DEFAULT_ROOM_CENTERS)]
        if not self.room_centers:
            raise ConfigurationError("At least one room center is required")

    def generate(self, dungeon: Optional[DungeonData] = None) -> DungeonData:
        dungeon = dungeon if dungeon is not None else DungeonData()
        for center in self.room_centers:
            dungeon.rooms.append(self.rectangular_room(center, self.room_size))

        origin = self.room_centers[0]
        for target in self.room_centers[1:]:
            dungeon.path.update(straight_corridor(origin, target))
        if len(self.room_centers) == 1:
            # A lone room still needs a path tile to enter from
            dungeon.path.add(origin)

        dungeon.wall_tiles = outline(dungeon.floor_positions())
        logger.info(
            "Generated %d rooms, %d path tiles, %d wall tiles",
            len(dungeon.rooms),
            len(dungeon.path),
            len(dungeon.wall_tiles),
        )
        return dungeon

    @staticmethod
    def rectangular_room(center: Position, size: Tuple[int, int]) -> Room:
        half_w, half_h = size[0] // 2, size[1] // 2
        # Odd sizes keep their extra column/row on the positive side
        tiles = [
            Position(center.x + dx, center.y + dy)
            for dx in range(-half_w, size[0] - half_w)
            for dy in range(-half_h, size[1] - half_h)
        ]
        return Room((center.x, center.y), tiles)


def straight_corridor(start: Position, end: Position) -> Set[Position]:
    """Tiles from ``start`` to ``end`` inclusive along one axis."""
    if start.x != end.x and start.y != end.y:
        raise ConfigurationError(f"Corridor {start} -> {end} is not axis-aligned")
    step_x = (end.x > start.x) - (end.x < start.x)
    step_y = (end.y > start.y) - (end.y < start.y)
    tiles = {start}
    current = start
    while current != end:
        current = current + (step_x, step_y)
        tiles.add(current)
    return tiles


def outline(tiles: Iterable[Position]) -> Set[Position]:
    """Non-dungeon tiles touching the dungeon on any side: where the walls go."""
    dungeon_tiles = set(tiles)
    walls: Set[Position] = set()
    for tile in dungeon_tiles:
        for direction in FOUR_DIRECTIONS:
            neighbour = tile + direction
            if neighbour not in dungeon_tiles:
                walls.add(neighbour)
    return walls
