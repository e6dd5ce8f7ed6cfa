from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from ..exceptions import ConfigurationError
from ..spawning import EntityHandle, Spawner
from .geometry import Position

logger = logging.getLogger(__name__)


class Zone(Enum):
    CORNER = "corner"
    NEAR_WALL_UP = "near_wall_up"
    NEAR_WALL_DOWN = "near_wall_down"
    NEAR_WALL_LEFT = "near_wall_left"
    NEAR_WALL_RIGHT = "near_wall_right"
    INNER = "inner"


@dataclass(frozen=True)
class PropSpec:
    """Immutable template describing a placeable prop.

    ``sprite`` is opaque to the placement code and forwarded to the spawner.
    ``size`` is the footprint (width, height) in tiles. Group placement is
    enabled when both ``group_min`` and ``group_max`` are given.
    """

    name: str
    sprite: Any = None
    size: Tuple[int, int] = (1, 1)
    corner: bool = True
    near_wall_up: bool = True
    near_wall_down: bool = True
    near_wall_left: bool = True
    near_wall_right: bool = True
    inner: bool = True
    quantity_min: int = 1
    quantity_max: int = 1
    group_min: Optional[int] = None
    group_max: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "size", tuple(self.size))
        self.validate()

    def validate(self) -> None:
        w, h = self.size
        if w < 1 or h < 1:
            raise ConfigurationError(f"Prop '{self.name}': size must be at least 1x1, got {w}x{h}")
        if self.quantity_min < 1 or self.quantity_max < 1:
            raise ConfigurationError(f"Prop '{self.name}': placement quantity must be >= 1")
        if self.quantity_min > self.quantity_max:
            raise ConfigurationError(
                f"Prop '{self.name}': quantity_min {self.quantity_min} > quantity_max {self.quantity_max}"
            )
        if (self.group_min is None) != (self.group_max is None):
            raise ConfigurationError(f"Prop '{self.name}': group_min and group_max must be given together")
        if self.group_min is not None and self.group_max is not None:
            if self.group_min < 1 or self.group_max < 1:
                raise ConfigurationError(f"Prop '{self.name}': group counts must be >= 1")
            if self.group_min > self.group_max:
                raise ConfigurationError(
                    f"Prop '{self.name}': group_min {self.group_min} > group_max {self.group_max}"
                )

    @property
    def area(self) -> int:
        return self.size[0] * self.size[1]

    @property
    def place_as_group(self) -> bool:
        return self.group_min is not None

    def allows(self, zone: Zone) -> bool:
        return bool(getattr(self, zone.value))

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PropSpec":
        """Build a spec from a catalog entry (see data/schemas/prop_catalog.schema.json)."""
        placement = d.get("placement", {})
        size = d.get("size", [1, 1])
        quantity = d.get("quantity", [1, 1])
        group = d.get("group")
        return cls(
            name=str(d["name"]),
            sprite=d.get("sprite"),
            size=(int(size[0]), int(size[1])),
            corner=bool(placement.get("corner", True)),
            near_wall_up=bool(placement.get("near_wall_up", True)),
            near_wall_down=bool(placement.get("near_wall_down", True)),
            near_wall_left=bool(placement.get("near_wall_left", True)),
            near_wall_right=bool(placement.get("near_wall_right", True)),
            inner=bool(placement.get("inner", True)),
            quantity_min=int(quantity[0]),
            quantity_max=int(quantity[1]),
            group_min=int(group[0]) if group else None,
            group_max=int(group[1]) if group else None,
        )


@dataclass(frozen=True)
class PlacedProp:
    spec: PropSpec
    origin: Position
    cells: FrozenSet[Position]
    handle: EntityHandle
    zone: Zone
    grouped: bool = False


@dataclass(frozen=True)
class RoomZones:
    """Result of classifying a room's floor tiles. The six sets partition the floor."""

    near_wall_up: FrozenSet[Position] = frozenset()
    near_wall_down: FrozenSet[Position] = frozenset()
    near_wall_left: FrozenSet[Position] = frozenset()
    near_wall_right: FrozenSet[Position] = frozenset()
    corner: FrozenSet[Position] = frozenset()
    inner: FrozenSet[Position] = frozenset()

    def for_zone(self, zone: Zone) -> FrozenSet[Position]:
        return getattr(self, zone.value)


class Room:
    """Holds the floor of a room plus everything derived from it during generation."""

    def __init__(self, center: Tuple[float, float], floor_tiles: Iterable[Position]) -> None:
        self.center: Tuple[float, float] = (float(center[0]), float(center[1]))
        self.floor_tiles: FrozenSet[Position] = frozenset(floor_tiles)
        self.zones = RoomZones()
        self.prop_positions: Set[Position] = set()
        self.placed_props: List[PlacedProp] = []
        self.prop_handles: List[EntityHandle] = []
        self.accessible_from_path: List[Position] = []
        self.enemy_handles: List[EntityHandle] = []

    def __repr__(self) -> str:
        return f"Room(center={self.center}, tiles={len(self.floor_tiles)})"

    @property
    def center_tile(self) -> Position:
        return Position(math.floor(self.center[0]), math.floor(self.center[1]))

    def zone_tiles(self, zone: Zone) -> FrozenSet[Position]:
        return self.zones.for_zone(zone)

    def apply_zones(self, zones: RoomZones) -> None:
        self.zones = zones

    def record_prop(self, placed: PlacedProp) -> None:
        self.prop_positions.update(placed.cells)
        self.placed_props.append(placed)
        self.prop_handles.append(placed.handle)

    def clear_derived(self) -> None:
        """Forget classification and placement results (handles are not despawned)."""
        self.zones = RoomZones()
        self.prop_positions = set()
        self.placed_props = []
        self.prop_handles = []
        self.accessible_from_path = []
        self.enemy_handles = []


@dataclass
class DungeonData:
    """Aggregate root: rooms, the shared corridor path and spawned agents."""

    rooms: List[Room] = field(default_factory=list)
    path: Set[Position] = field(default_factory=set)
    wall_tiles: Set[Position] = field(default_factory=set)
    player_handle: Optional[EntityHandle] = None

    def floor_positions(self) -> Set[Position]:
        tiles: Set[Position] = set()
        for room in self.rooms:
            tiles.update(room.floor_tiles)
        tiles.update(self.path)
        return tiles

    def tracked_handles(self) -> List[EntityHandle]:
        handles: List[EntityHandle] = []
        for room in self.rooms:
            handles.extend(room.prop_handles)
            handles.extend(room.enemy_handles)
        if self.player_handle is not None:
            handles.append(self.player_handle)
        return handles

    def reset(self, spawner: Spawner) -> None:
        """Despawn every owned entity once and clear rooms and path.

        Tracking is dropped before despawning, so a spawner error leaves no
        handle behind that a later reset would despawn a second time.
        """
        handles = self.tracked_handles()
        room_count = len(self.rooms)
        self.rooms = []
        self.path = set()
        self.wall_tiles = set()
        self.player_handle = None
        for handle in handles:
            spawner.despawn(handle)
        logger.info("Dungeon reset: despawned %d entities, dropped %d rooms", len(handles), room_count)

    def zone_counts(self) -> List[Dict[str, int]]:
        return [{zone.value: len(room.zone_tiles(zone)) for zone in Zone} for room in self.rooms]
