from itertools import combinations

import pytest

from dungeon_props.dungeon.classifier import RoomDataExtractor, classify_tiles
from dungeon_props.dungeon.footprint import PlacementOriginCorner
from dungeon_props.dungeon.generator import SimpleDungeonGenerator
from dungeon_props.dungeon.geometry import Position
from dungeon_props.dungeon.models import Room, RoomZones, Zone
from dungeon_props.dungeon.props import ZONE_PASSES, PropPlacementManager
from dungeon_props.data import default_catalog
from dungeon_props.dungeon.models import PropSpec
from dungeon_props.events import DeferredNotifier, EventBus, EventType
from dungeon_props.exceptions import ConfigurationError, PreconditionError
from dungeon_props.rng import RandomSource
from dungeon_props.spawning import EntityKind, InMemorySpawner

from conftest import ScriptedRandom, rect_tiles

INNER_ONLY = dict(corner=False, near_wall_up=False, near_wall_down=False, near_wall_left=False, near_wall_right=False)


def classified_room(floor, center=(0, 0)):
    room = Room(center, floor)
    room.apply_zones(classify_tiles(floor))
    return room


def test_quantity_stops_when_space_runs_out(spawner, rng):
    room = classified_room(rect_tiles(3, 3))
    assert room.zone_tiles(Zone.INNER) == {Position(1, 1)}
    spec = PropSpec("statue", quantity_min=2, quantity_max=2, **INNER_ONLY)
    manager = PropPlacementManager([spec], rng, spawner)

    manager.place_props(room, [spec], Zone.INNER, PlacementOriginCorner.BOTTOM_LEFT, set())

    assert len(room.placed_props) == 1
    assert room.placed_props[0].origin == Position(1, 1)


def test_too_big_prop_is_skipped_without_error(spawner, rng):
    room = classified_room(rect_tiles(3, 3))
    spec = PropSpec("table", size=(2, 2), **INNER_ONLY)
    manager = PropPlacementManager([spec], rng, spawner)

    assert manager.try_place_prop(room, spec, [Position(1, 1)], Zone.INNER, PlacementOriginCorner.BOTTOM_LEFT, set()) is None
    manager.place_room(room, set())
    assert room.placed_props == []
    assert spawner.entities == {}


def test_corner_chance_ratchets_on_skips():
    corners = [Position(0, 0), Position(0, 4), Position(4, 0)]
    room = Room((2, 2), rect_tiles(5, 5))
    room.apply_zones(RoomZones(corner=frozenset(corners)))
    spawner = InMemorySpawner()
    manager = PropPlacementManager([PropSpec("crate")], ScriptedRandom([0.9, 0.5, 0.95]), spawner, corner_chance=0.7)

    history = manager.place_corner_props(room, set(), manager.eligible_props(Zone.CORNER))

    assert history == pytest.approx([0.7, 0.8, 0.8])
    assert [p.origin for p in room.placed_props] == [Position(0, 4)]
    assert room.prop_positions == {Position(0, 4)}


def test_corner_chance_never_exceeds_one():
    corners = [Position(x, 0) for x in range(0, 10, 2)]
    room = Room((5, 0), rect_tiles(10, 1))
    room.apply_zones(RoomZones(corner=frozenset(corners)))
    manager = PropPlacementManager([PropSpec("crate")], ScriptedRandom([0.999] * 5), InMemorySpawner(), corner_chance=0.95)

    history = manager.place_corner_props(room, set(), manager.eligible_props(Zone.CORNER))

    assert history[0] == pytest.approx(0.95)
    assert all(c <= 1.0 for c in history)
    assert history == sorted(history)
    assert len(room.placed_props) == 4


def test_corner_chance_restarts_for_each_room():
    manager = PropPlacementManager([PropSpec("crate")], ScriptedRandom([0.99] * 6), InMemorySpawner(), corner_chance=0.5)
    histories = []
    for _ in range(2):
        room = Room((0, 0), rect_tiles(3, 3))
        room.apply_zones(RoomZones(corner=frozenset(rect_tiles(3, 1))))
        histories.append(manager.place_corner_props(room, set(), manager.eligible_props(Zone.CORNER)))
    assert histories[0] == pytest.approx([0.5, 0.6, 0.7])
    assert histories[1] == pytest.approx([0.5, 0.6, 0.7])


def test_corner_on_path_is_passed_over_without_a_draw():
    room = Room((0, 0), rect_tiles(3, 3))
    room.apply_zones(RoomZones(corner=frozenset([Position(0, 0), Position(2, 2)])))
    manager = PropPlacementManager([PropSpec("crate")], ScriptedRandom([0.0]), InMemorySpawner())

    history = manager.place_corner_props(room, {Position(0, 0)}, manager.eligible_props(Zone.CORNER))

    assert history == [pytest.approx(0.7)]
    assert [p.origin for p in room.placed_props] == [Position(2, 2)]


def test_eligible_props_sorted_by_area():
    small = PropSpec("crate")
    wide = PropSpec("shelf", size=(3, 1))
    big = PropSpec("bed", size=(2, 2))
    manager = PropPlacementManager([small, wide, big], RandomSource(1), InMemorySpawner())
    assert [p.name for p in manager.eligible_props(Zone.INNER)] == ["bed", "shelf", "crate"]


def test_invalid_planner_inputs():
    with pytest.raises(PreconditionError):
        PropPlacementManager([], RandomSource(1), InMemorySpawner())
    with pytest.raises(ConfigurationError):
        PropPlacementManager([PropSpec("crate")], RandomSource(1), InMemorySpawner(), corner_chance=1.5)


@pytest.mark.parametrize("seed", [1, 2, 3, 42])
def test_full_pass_keeps_footprints_disjoint_and_off_the_path(seed):
    dungeon = SimpleDungeonGenerator().generate()
    RoomDataExtractor().process_rooms(dungeon)
    spawner = InMemorySpawner()
    manager = PropPlacementManager(default_catalog(), RandomSource(seed), spawner)
    manager.process_rooms(dungeon)

    total = 0
    for room in dungeon.rooms:
        assert room.placed_props, "default catalog should dress every room"
        for placed in room.placed_props:
            assert placed.cells <= room.prop_positions
            assert placed.cells <= room.floor_tiles
            assert not placed.cells & dungeon.path
            if not placed.grouped:
                assert placed.cells <= room.zone_tiles(placed.zone)
                assert len(placed.cells) == placed.spec.area
        for a, b in combinations(room.placed_props, 2):
            assert not a.cells & b.cells
        total += len(room.placed_props)
    assert len(spawner.of_kind(EntityKind.PROP)) == total


def anchor_for(zone):
    return dict(ZONE_PASSES)[zone]


def only(zone, name, size=(1, 1)):
    flags = {z.value: z is zone for z in Zone}
    return PropSpec(name, size=size, **flags)


@pytest.mark.parametrize(
    "zone, size, fitting_origin, blocked_origin",
    [
        # Right band x=7, y=1..6: a tall prop hangs down from its top tile
        (Zone.NEAR_WALL_RIGHT, (1, 2), Position(7, 6), Position(7, 1)),
        # Left band x=0, y=1..6: grows up from its bottom tile
        (Zone.NEAR_WALL_LEFT, (1, 2), Position(0, 1), Position(0, 6)),
        # Top band y=7, x=1..6: grows right from its left tile
        (Zone.NEAR_WALL_UP, (2, 1), Position(1, 7), Position(6, 7)),
        # Bottom band y=0, x=1..6: grows right from its left tile
        (Zone.NEAR_WALL_DOWN, (2, 1), Position(1, 0), Position(6, 0)),
    ],
)
def test_zone_anchor_decides_which_origins_fit(spawner, zone, size, fitting_origin, blocked_origin):
    room = classified_room(rect_tiles(8, 8))
    spec = only(zone, "rack", size)
    manager = PropPlacementManager([spec], RandomSource(9), spawner)
    band = sorted(room.zone_tiles(zone))
    rest = [t for t in band if t not in (blocked_origin, fitting_origin)]

    # The blocked origin is tried first; with the right anchor its footprint leaves the band
    placed = manager.try_place_prop(room, spec, [blocked_origin, fitting_origin] + rest, zone, anchor_for(zone), set())

    assert placed is not None
    assert placed.origin == fitting_origin
    assert placed.cells <= set(band)
    assert len(placed.cells) == 2
    assert fitting_origin in placed.cells
    assert blocked_origin not in placed.cells


def test_wall_bands_are_too_narrow_for_wide_props(spawner):
    room = classified_room(rect_tiles(8, 8))
    shelf = only(Zone.NEAR_WALL_RIGHT, "shelf", (2, 2))
    manager = PropPlacementManager([shelf], RandomSource(9), spawner)

    manager.place_props(room, [shelf], Zone.NEAR_WALL_RIGHT, anchor_for(Zone.NEAR_WALL_RIGHT), set())

    assert room.placed_props == []


def test_place_room_visits_zones_in_order(spawner):
    room = classified_room(rect_tiles(8, 8))
    # Catalog order is scrambled so only the pass order can explain the result
    catalog = [
        only(Zone.INNER, "rug"),
        only(Zone.NEAR_WALL_DOWN, "bench"),
        only(Zone.NEAR_WALL_UP, "banner"),
        only(Zone.NEAR_WALL_RIGHT, "torch"),
        only(Zone.NEAR_WALL_LEFT, "rack"),
        only(Zone.CORNER, "crate"),
    ]
    manager = PropPlacementManager(catalog, RandomSource(4), spawner, corner_chance=1.0)

    manager.place_room(room, set())

    zones = [p.zone for p in room.placed_props]
    assert zones == [Zone.CORNER] * 4 + [
        Zone.NEAR_WALL_LEFT,
        Zone.NEAR_WALL_RIGHT,
        Zone.NEAR_WALL_UP,
        Zone.NEAR_WALL_DOWN,
        Zone.INNER,
    ]
    assert [p.spec.name for p in room.placed_props[4:]] == ["rack", "torch", "banner", "bench", "rug"]
    spawned = [e.visual for e in spawner.entities.values()]
    assert spawned == [p.spec.sprite for p in room.placed_props]


def test_zone_pass_anchors():
    assert ZONE_PASSES == (
        (Zone.NEAR_WALL_LEFT, PlacementOriginCorner.BOTTOM_LEFT),
        (Zone.NEAR_WALL_RIGHT, PlacementOriginCorner.TOP_RIGHT),
        (Zone.NEAR_WALL_UP, PlacementOriginCorner.TOP_LEFT),
        (Zone.NEAR_WALL_DOWN, PlacementOriginCorner.BOTTOM_LEFT),
        (Zone.INNER, PlacementOriginCorner.BOTTOM_LEFT),
    )


def test_process_rooms_announces_completion_once():
    dungeon = SimpleDungeonGenerator().generate()
    RoomDataExtractor().process_rooms(dungeon)
    bus = EventBus()
    events = []
    bus.subscribe(EventType.PROPS_PLACED, events.append)
    notifier = DeferredNotifier(0.01)
    manager = PropPlacementManager(default_catalog(), RandomSource(5), InMemorySpawner(), notifier=notifier, bus=bus)

    manager.process_rooms(dungeon)
    notifier.wait(timeout=5)

    assert len(events) == 1
    assert events[0].payload["rooms"] == 3
    assert events[0].payload["props"] == sum(len(r.placed_props) for r in dungeon.rooms)
