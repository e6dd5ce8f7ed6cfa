"""Dungeon room classification and constrained prop/agent placement."""

from .config import GenerationSettings
from .dungeon import (
    AgentPlacer,
    DungeonData,
    PlacementOriginCorner,
    Position,
    PropPlacementManager,
    PropSpec,
    Room,
    RoomDataExtractor,
    RoomGraph,
    SimpleDungeonGenerator,
    Zone,
    classify_tiles,
    try_to_fit_prop,
)
from .exceptions import CatalogValidationError, ConfigurationError, DungeonPropsError, PreconditionError
from .pipeline import DungeonPipeline
from .rng import RandomSource
from .spawning import EntityKind, InMemorySpawner, Spawner

__version__ = "0.1.0"

__all__ = [
    "AgentPlacer",
    "CatalogValidationError",
    "ConfigurationError",
    "DungeonData",
    "DungeonPipeline",
    "DungeonPropsError",
    "EntityKind",
    "GenerationSettings",
    "InMemorySpawner",
    "PlacementOriginCorner",
    "Position",
    "PreconditionError",
    "PropPlacementManager",
    "PropSpec",
    "RandomSource",
    "Room",
    "RoomDataExtractor",
    "RoomGraph",
    "SimpleDungeonGenerator",
    "Spawner",
    "Zone",
    "classify_tiles",
    "try_to_fit_prop",
]
