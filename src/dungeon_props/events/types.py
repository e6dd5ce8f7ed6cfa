class EventType:
    """Names of the events emitted while a dungeon is generated."""

    # Rooms and path exist, nothing classified yet
    ROOMS_GENERATED = "dungeon.rooms.generated"

    # Every room has its corner/near-wall/inner sets
    ROOMS_PROCESSED = "dungeon.rooms.processed"

    # Prop placement finished for all rooms
    PROPS_PLACED = "dungeon.props.placed"

    AGENTS_PLACED = "dungeon.agents.placed"

    DUNGEON_RESET = "dungeon.reset"
