import sys
from pathlib import Path
from typing import Iterable, List

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from dungeon_props.dungeon.geometry import Position  # noqa: E402
from dungeon_props.rng import RandomSource  # noqa: E402
from dungeon_props.spawning import InMemorySpawner  # noqa: E402


def rect_tiles(width: int, height: int, x0: int = 0, y0: int = 0) -> List[Position]:
    return [Position(x, y) for x in range(x0, x0 + width) for y in range(y0, y0 + height)]


class ScriptedRandom(RandomSource):
    """RandomSource whose random() replays fixed draws; everything else is seeded."""

    def __init__(self, draws: Iterable[float], seed: int = 0) -> None:
        super().__init__(seed)
        self.draws = list(draws)

    def random(self) -> float:
        return self.draws.pop(0)


@pytest.fixture
def spawner() -> InMemorySpawner:
    return InMemorySpawner()


@pytest.fixture
def rng() -> RandomSource:
    return RandomSource(1234)


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch, tmp_path):
    """Keep tests away from the real user settings file and DP_* variables."""
    for name in ("DP_SEED", "DP_CORNER_CHANCE", "DP_NOTIFY_DELAY", "DP_PLAYER_ROOM", "DP_ENEMIES", "DP_CATALOG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("dungeon_props.config.default_settings_path", lambda: tmp_path / "no-settings.yaml")
