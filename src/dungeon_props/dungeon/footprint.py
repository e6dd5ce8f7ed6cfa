from __future__ import annotations

from enum import Enum
from typing import AbstractSet, Iterator, List, Tuple

from .geometry import Position


class PlacementOriginCorner(Enum):
    """Which corner of a footprint the origin tile stands for.

    A bottom-left origin grows right and up, a top-right origin grows left and down.
    """

    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"


def footprint_offsets(size: Tuple[int, int], corner: PlacementOriginCorner) -> Iterator[Tuple[int, int]]:
    w, h = size
    if corner in (PlacementOriginCorner.BOTTOM_LEFT, PlacementOriginCorner.TOP_LEFT):
        xs = range(0, w)
    else:
        xs = range(-w + 1, 1)
    if corner in (PlacementOriginCorner.BOTTOM_LEFT, PlacementOriginCorner.BOTTOM_RIGHT):
        ys = range(0, h)
    else:
        ys = range(-h + 1, 1)
    for dx in xs:
        for dy in ys:
            yield dx, dy


def try_to_fit_prop(
    size: Tuple[int, int],
    available: AbstractSet[Position],
    origin: Position,
    corner: PlacementOriginCorner,
) -> List[Position]:
    """Return the cells of the footprint at ``origin`` that are in ``available``.

    The footprint is never moved; callers compare the result length with the
    footprint area to decide whether the prop fits.
    """
    return [origin + offset for offset in footprint_offsets(size, corner) if origin + offset in available]


def fits(
    size: Tuple[int, int],
    available: AbstractSet[Position],
    origin: Position,
    corner: PlacementOriginCorner,
) -> bool:
    return len(try_to_fit_prop(size, available, origin, corner)) == size[0] * size[1]
