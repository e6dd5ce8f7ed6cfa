"""
Dungeon tile classification and prop/agent placement.

Rooms are classified into corner, near-wall and inner tiles, props are packed
into those zones without blocking the corridor path, and agents are spawned on
tiles still reachable from the path.
"""
from .agents import AgentPlacer
from .classifier import RoomDataExtractor, classify_tiles
from .footprint import PlacementOriginCorner, try_to_fit_prop
from .generator import SimpleDungeonGenerator
from .geometry import Position
from .graph import RoomGraph
from .models import DungeonData, PlacedProp, PropSpec, Room, RoomZones, Zone
from .props import PropPlacementManager

__all__ = [
    "AgentPlacer",
    "DungeonData",
    "PlacedProp",
    "PlacementOriginCorner",
    "Position",
    "PropPlacementManager",
    "PropSpec",
    "Room",
    "RoomDataExtractor",
    "RoomGraph",
    "RoomZones",
    "SimpleDungeonGenerator",
    "Zone",
    "classify_tiles",
    "try_to_fit_prop",
]
