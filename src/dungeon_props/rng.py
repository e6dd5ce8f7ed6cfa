from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RandomSource:
    """
    A thin wrapper around random.Random to:
    - keep every placement pass off the module-level generator
    - support deterministic seeding for tests and replays
    - provide the few sampling helpers the placement code needs
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        if self.seed is not None:
            self._rng = random.Random(self.seed)
            logger.debug("Initialized RandomSource with deterministic seed=%s", self.seed)
        else:
            self._rng = random.Random()
            logger.debug("Initialized RandomSource with non-deterministic seed")

    def randint(self, a: int, b: int) -> int:
        """Uniform integer in [a, b], both ends inclusive."""
        return self._rng.randint(a, b)

    def random(self) -> float:
        return self._rng.random()

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise ValueError("RandomSource.choice() received an empty sequence")
        idx = self._rng.randrange(0, len(seq))
        return seq[idx]

    def shuffle(self, items: List[Any]) -> None:
        """In-place Fisher-Yates shuffle."""
        for i in range(len(items) - 1, 0, -1):
            j = self._rng.randint(0, i)
            items[i], items[j] = items[j], items[i]

    def shuffled(self, items: Iterable[T]) -> List[T]:
        out = list(items)
        self.shuffle(out)
        return out


__all__ = ["RandomSource"]
