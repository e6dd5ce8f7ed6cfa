from __future__ import annotations

import logging
from typing import AbstractSet, FrozenSet, List, Optional, Sequence, Set, Tuple

from ..events import DeferredNotifier, EventBus, EventType
from ..exceptions import ConfigurationError, PreconditionError
from ..rng import RandomSource
from ..spawning import EntityKind, Spawner
from .footprint import PlacementOriginCorner, try_to_fit_prop
from .geometry import Position
from .grouping import place_group
from .models import DungeonData, PlacedProp, PropSpec, Room, Zone

logger = logging.getLogger(__name__)

CORNER_CHANCE_STEP = 0.1
WALL_GROUP_RADIUS = 1
CORNER_GROUP_RADIUS = 2

# Zone passes after the corners, in order. Anchors make big props grow into the room.
ZONE_PASSES: Tuple[Tuple[Zone, PlacementOriginCorner], ...] = (
    (Zone.NEAR_WALL_LEFT, PlacementOriginCorner.BOTTOM_LEFT),
    (Zone.NEAR_WALL_RIGHT, PlacementOriginCorner.TOP_RIGHT),
    (Zone.NEAR_WALL_UP, PlacementOriginCorner.TOP_LEFT),
    (Zone.NEAR_WALL_DOWN, PlacementOriginCorner.BOTTOM_LEFT),
    (Zone.INNER, PlacementOriginCorner.BOTTOM_LEFT),
)


class PropPlacementManager:
    """Places props from a catalog into classified rooms.

    Per room: corners first (probabilistic, single tile), then the left, right,
    top and bottom wall bands, then the inner tiles. Within a band the biggest
    props pick first and every candidate tile is tried before a prop is given up.
    Running out of space is expected and never raises.
    """

    def __init__(
        self,
        catalog: Sequence[PropSpec],
        rng: RandomSource,
        spawner: Spawner,
        corner_chance: float = 0.7,
        notifier: Optional[DeferredNotifier] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        if not catalog:
            raise PreconditionError("Prop catalog is empty; nothing to place")
        if not 0.0 <= corner_chance <= 1.0:
            raise ConfigurationError(f"corner_chance must be within [0, 1], got {corner_chance}")
        self.catalog: List[PropSpec] = list(catalog)
        self.rng = rng
        self.spawner = spawner
        self.corner_chance = corner_chance
        self.notifier = notifier
        self.bus = bus

    def eligible_props(self, zone: Zone) -> List[PropSpec]:
        props = [p for p in self.catalog if p.allows(zone)]
        if zone is not Zone.CORNER:
            # Stable sort keeps catalog order among equal areas
            props.sort(key=lambda p: p.area, reverse=True)
        return props

    # ---- Passes ----------------------------------------------------------
    def process_rooms(self, dungeon: DungeonData) -> None:
        for room in dungeon.rooms:
            self.place_room(room, dungeon.path)
        total = sum(len(r.placed_props) for r in dungeon.rooms)
        logger.info("Placed %d props in %d rooms", total, len(dungeon.rooms))
        if self.notifier is not None:
            self.notifier.schedule(self._finished, dungeon)
        else:
            self._finished(dungeon)

    def _finished(self, dungeon: DungeonData) -> None:
        if self.bus is not None:
            self.bus.publish(
                EventType.PROPS_PLACED,
                {"rooms": len(dungeon.rooms), "props": sum(len(r.placed_props) for r in dungeon.rooms)},
            )

    def place_room(self, room: Room, path: AbstractSet[Position]) -> List[PlacedProp]:
        before = len(room.placed_props)
        self.place_corner_props(room, path, self.eligible_props(Zone.CORNER))
        for zone, corner in ZONE_PASSES:
            self.place_props(room, self.eligible_props(zone), zone, corner, path)
        placed = room.placed_props[before:]
        logger.debug("%r: placed %d props", room, len(placed))
        return placed

    def place_corner_props(
        self, room: Room, path: AbstractSet[Position], corner_props: Sequence[PropSpec]
    ) -> List[float]:
        """Probabilistic single-tile placement on the room's corners.

        Each skipped corner raises the chance by CORNER_CHANCE_STEP (capped at 1)
        so rooms with many corners still get dressed. Returns the chance in
        effect at each draw.
        """
        history: List[float] = []
        if not corner_props:
            logger.debug("%r: no corner props in catalog", room)
            return history
        chance = self.corner_chance
        for tile in sorted(room.zone_tiles(Zone.CORNER)):
            if tile in room.prop_positions or tile in path:
                continue
            history.append(chance)
            if self.rng.random() < chance:
                spec = self.rng.choice(corner_props)
                self.spawn_prop(room, tile, spec, frozenset([tile]), Zone.CORNER)
                if spec.place_as_group:
                    place_group(room, tile, spec, CORNER_GROUP_RADIUS, path, self.rng, self._companion(Zone.CORNER))
            else:
                chance = min(1.0, max(0.0, chance + CORNER_CHANCE_STEP))
        return history

    def place_props(
        self,
        room: Room,
        props: Sequence[PropSpec],
        zone: Zone,
        corner: PlacementOriginCorner,
        path: AbstractSet[Position],
    ) -> None:
        # Path tiles stay clear so the dungeon remains traversable
        candidates: Set[Position] = set(room.zone_tiles(zone)) - set(path)
        for spec in props:
            quantity = self.rng.randint(spec.quantity_min, spec.quantity_max)
            for _ in range(quantity):
                candidates -= room.prop_positions
                order = self.rng.shuffled(sorted(candidates))
                if self.try_place_prop(room, spec, order, zone, corner, path) is None:
                    # More attempts cannot succeed with the same or less space
                    logger.debug("%r: no room left for '%s' in %s", room, spec.name, zone.value)
                    break

    def try_place_prop(
        self,
        room: Room,
        spec: PropSpec,
        candidates: Sequence[Position],
        zone: Zone,
        corner: PlacementOriginCorner,
        path: AbstractSet[Position],
    ) -> Optional[PlacedProp]:
        """Brute force: the first candidate whose whole footprint is free wins."""
        available = frozenset(candidates)
        for origin in candidates:
            # Group companions may have claimed tiles after the list was built
            if origin in room.prop_positions:
                continue
            cells = try_to_fit_prop(spec.size, available, origin, corner)
            if len(cells) != spec.area:
                continue
            placed = self.spawn_prop(room, origin, spec, frozenset(cells), zone)
            if spec.place_as_group:
                place_group(room, origin, spec, WALL_GROUP_RADIUS, path, self.rng, self._companion(zone))
            return placed
        return None

    # ---- Spawning --------------------------------------------------------
    def spawn_prop(
        self,
        room: Room,
        origin: Position,
        spec: PropSpec,
        cells: FrozenSet[Position],
        zone: Zone,
        grouped: bool = False,
    ) -> PlacedProp:
        handle = self.spawner.spawn(EntityKind.PROP, origin.to_world(), spec.sprite)
        placed = PlacedProp(spec=spec, origin=origin, cells=cells, handle=handle, zone=zone, grouped=grouped)
        room.record_prop(placed)
        logger.debug("Placed '%s' at %s (%d cells, %s)", spec.name, origin, len(placed.cells), zone.value)
        return placed

    def _companion(self, zone: Zone):
        def place_single(room: Room, pos: Position, spec: PropSpec) -> PlacedProp:
            return self.spawn_prop(room, pos, spec, frozenset([pos]), zone, grouped=True)

        return place_single
