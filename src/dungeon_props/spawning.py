from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Hashable, List, Protocol, Tuple

logger = logging.getLogger(__name__)

# Opaque to the placement code: stored for teardown, never inspected.
EntityHandle = Hashable


class EntityKind(Enum):
    PROP = "prop"
    ENEMY = "enemy"
    PLAYER = "player"


class Spawner(Protocol):
    """Visual instantiation boundary.

    Implementations create whatever the host engine needs (sprites, scene nodes)
    and hand back a handle the dungeon keeps until teardown.
    """

    def spawn(self, kind: EntityKind, position: Tuple[float, float], visual: Any) -> EntityHandle:
        """Create an entity at world ``position`` and return its handle."""

    def despawn(self, handle: EntityHandle) -> None:
        """Destroy an entity previously returned by :meth:`spawn`."""


@dataclass(frozen=True)
class SpawnedEntity:
    handle: int
    kind: EntityKind
    position: Tuple[float, float]
    visual: Any


class InMemorySpawner:
    """Spawner that only records entities. Used by the CLI and the tests."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.entities: Dict[int, SpawnedEntity] = {}
        self.despawned: List[int] = []

    def spawn(self, kind: EntityKind, position: Tuple[float, float], visual: Any) -> int:
        handle = next(self._ids)
        self.entities[handle] = SpawnedEntity(handle, kind, (float(position[0]), float(position[1])), visual)
        logger.debug("Spawned %s #%d at %s (%r)", kind.value, handle, position, visual)
        return handle

    def despawn(self, handle: int) -> None:
        if handle not in self.entities:
            raise KeyError(f"Unknown entity handle: {handle!r}")
        del self.entities[handle]
        self.despawned.append(handle)

    def of_kind(self, kind: EntityKind) -> List[SpawnedEntity]:
        return [e for e in self.entities.values() if e.kind is kind]
