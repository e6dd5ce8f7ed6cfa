from dungeon_props.dungeon.classifier import RoomDataExtractor, classify_tiles
from dungeon_props.dungeon.geometry import Position
from dungeon_props.dungeon.models import DungeonData, Room, Zone
from dungeon_props.events import DeferredNotifier, EventBus, EventType

from conftest import rect_tiles


def assert_partition(floor, zones):
    sets = [zones.for_zone(z) for z in Zone]
    union = set().union(*sets)
    assert union == set(floor)
    assert sum(len(s) for s in sets) == len(set(floor)), "zone sets must be pairwise disjoint"


def test_square_room_roles():
    floor = rect_tiles(10, 10)
    zones = classify_tiles(floor)

    assert zones.corner == {Position(0, 0), Position(9, 0), Position(0, 9), Position(9, 9)}
    assert len(zones.inner) == 64
    assert zones.near_wall_up == {Position(x, 9) for x in range(1, 9)}
    assert zones.near_wall_down == {Position(x, 0) for x in range(1, 9)}
    assert zones.near_wall_left == {Position(0, y) for y in range(1, 9)}
    assert zones.near_wall_right == {Position(9, y) for y in range(1, 9)}
    assert_partition(floor, zones)


def test_partition_holds_for_irregular_rooms():
    l_shape = rect_tiles(6, 3) + rect_tiles(3, 5, y0=3)
    plus = rect_tiles(7, 3, y0=2) + rect_tiles(3, 7, x0=2)
    for floor in (l_shape, plus, rect_tiles(2, 6), rect_tiles(5, 4)):
        assert_partition(floor, classify_tiles(floor))


def test_one_tile_wide_room_is_all_corners():
    floor = rect_tiles(1, 5)
    zones = classify_tiles(floor)
    assert zones.corner == set(floor)
    assert not zones.inner
    assert not (zones.near_wall_up | zones.near_wall_down | zones.near_wall_left | zones.near_wall_right)


def test_classification_ignores_iteration_order():
    floor = rect_tiles(6, 4) + rect_tiles(2, 2, x0=6)
    assert classify_tiles(floor) == classify_tiles(list(reversed(floor)))


def test_extractor_is_idempotent_and_notifies_once():
    dungeon = DungeonData(rooms=[Room((2, 2), rect_tiles(5, 5))])
    bus = EventBus()
    seen = []
    bus.subscribe(EventType.ROOMS_PROCESSED, seen.append)
    extractor = RoomDataExtractor(bus=bus, notifier=DeferredNotifier(0))

    extractor.process_rooms(dungeon)
    first = dungeon.rooms[0].zones
    dungeon.rooms[0].prop_positions.add(Position(1, 1))
    extractor.process_rooms(dungeon)

    assert dungeon.rooms[0].zones == first
    assert dungeon.rooms[0].prop_positions == set()
    assert len(seen) == 2
    assert seen[0].payload == {"rooms": 1}
