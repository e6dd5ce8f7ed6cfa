from __future__ import annotations

import logging
from collections import deque
from typing import AbstractSet, Deque, Dict, Iterable, List, Set

from ..exceptions import PreconditionError
from ..rng import RandomSource
from .geometry import Position
from .models import Room

logger = logging.getLogger(__name__)


class RoomGraph:
    """4-directional adjacency over a room's floor tiles."""

    def __init__(self, floor_tiles: Iterable[Position]) -> None:
        floor = frozenset(floor_tiles)
        self.graph: Dict[Position, List[Position]] = {
            pos: [n for n in pos.neighbors4() if n in floor] for pos in floor
        }

    def __contains__(self, pos: Position) -> bool:
        return pos in self.graph

    def neighbours(self, pos: Position) -> List[Position]:
        return self.graph.get(pos, [])

    def run_bfs(self, start: Position, occupied: AbstractSet[Position]) -> Dict[Position, Position]:
        """Map every tile reachable from ``start`` to its BFS parent.

        Occupied tiles are never entered, so anything behind them is unreachable.
        ``start`` maps to itself.
        """
        to_visit: Deque[Position] = deque([start])
        visited: Set[Position] = {start}
        parents: Dict[Position, Position] = {start: start}

        while to_visit:
            node = to_visit.popleft()
            for neighbour in self.neighbours(node):
                if neighbour in visited or neighbour in occupied:
                    continue
                visited.add(neighbour)
                parents[neighbour] = node
                to_visit.append(neighbour)
        return parents


def path_entry_point(room: Room, path: AbstractSet[Position]) -> Position:
    """Smallest floor tile of ``room`` that lies on the path."""
    shared = room.floor_tiles & path
    if not shared:
        raise PreconditionError(f"{room!r} has no floor tile on the path; cannot find a BFS start")
    return min(shared)


def accessible_from_path(room: Room, path: AbstractSet[Position], rng: RandomSource) -> List[Position]:
    """Tiles reachable from where the path enters the room, props acting as walls. Shuffled."""
    start = path_entry_point(room, path)
    reachable = RoomGraph(room.floor_tiles).run_bfs(start, room.prop_positions)
    logger.debug("%r: %d tiles reachable from path entry %s", room, len(reachable), start)
    return rng.shuffled(sorted(reachable))
