from __future__ import annotations

import logging
from typing import AbstractSet, Callable, List

from ..exceptions import PreconditionError
from ..rng import RandomSource
from .geometry import Position, square_around
from .models import PlacedProp, PropSpec, Room

logger = logging.getLogger(__name__)

MAX_GROUP_COMPANIONS = 8

# Spawns a single-tile instance of a prop for a room and returns the record.
PlaceSingle = Callable[[Room, Position, PropSpec], PlacedProp]


def place_group(
    room: Room,
    anchor: Position,
    spec: PropSpec,
    radius: int,
    path: AbstractSet[Position],
    rng: RandomSource,
    place_single: PlaceSingle,
) -> List[PlacedProp]:
    """Scatter companions of an already placed prop around ``anchor``.

    Companions are always single tile, whatever the prop's footprint, and only
    land on free floor tiles off the path within ``radius`` of the anchor.
    """
    if spec.group_min is None or spec.group_max is None:
        raise PreconditionError(f"Prop '{spec.name}' has no group range; cannot place it as a group")

    # One instance already stands at the anchor.
    count = rng.randint(spec.group_min - 1, spec.group_max - 1)
    count = max(0, min(MAX_GROUP_COMPANIONS, count))

    candidates = [
        pos
        for pos in square_around(anchor, radius)
        if pos in room.floor_tiles and pos not in path and pos not in room.prop_positions
    ]
    rng.shuffle(candidates)

    placed = [place_single(room, pos, spec) for pos in candidates[:count]]
    logger.debug(
        "Group '%s' at %s: wanted %d companions, %d free tiles, placed %d",
        spec.name,
        anchor,
        count,
        len(candidates),
        len(placed),
    )
    return placed
