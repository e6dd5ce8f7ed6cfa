from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple, Union


@dataclass(frozen=True, order=True)
class Position:
    """Integer grid coordinate. y grows upwards."""

    x: int
    y: int

    def __add__(self, other: Union["Position", Tuple[int, int]]) -> "Position":
        if isinstance(other, Position):
            return Position(self.x + other.x, self.y + other.y)
        dx, dy = other
        return Position(self.x + dx, self.y + dy)

    def neighbors4(self) -> Iterator["Position"]:
        # Ordered for deterministic traversal
        for direction in FOUR_DIRECTIONS:
            yield self + direction

    def to_world(self, offset: float = 0.0) -> Tuple[float, float]:
        return (self.x + offset, self.y + offset)


UP = Position(0, 1)
DOWN = Position(0, -1)
RIGHT = Position(1, 0)
LEFT = Position(-1, 0)

FOUR_DIRECTIONS: Tuple[Position, ...] = (UP, RIGHT, DOWN, LEFT)


def square_around(center: Position, radius: int) -> Iterator[Position]:
    """Every position within Chebyshev distance ``radius`` of ``center``."""
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            yield Position(center.x + dx, center.y + dy)
