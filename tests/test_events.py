"""Tests for the entity event bus"""
from whimsy.events import ENTITY_CREATED, ENTITY_DELETED, Event, EventBus, get_event_bus


class TestEventBus:
    """Test subscribe/emit semantics"""

    def test_emit_delivers_to_subscribers(self, event_bus):
        """Test handlers receive the event"""
        received = []
        event_bus.subscribe(ENTITY_CREATED, received.append)

        delivered = event_bus.emit(ENTITY_CREATED, {"entity": {"address": "a"}})

        assert delivered == 1
        assert len(received) == 1
        assert isinstance(received[0], Event)
        assert received[0].name == ENTITY_CREATED
        assert received[0].payload == {"entity": {"address": "a"}}

    def test_emit_only_matching_name(self, event_bus):
        """Test handlers only see their event name"""
        received = []
        event_bus.subscribe(ENTITY_DELETED, received.append)

        assert event_bus.emit(ENTITY_CREATED, {}) == 0
        assert received == []

    def test_unsubscribe(self, event_bus):
        """Test unsubscribed handlers stop receiving"""
        received = []
        event_bus.subscribe(ENTITY_CREATED, received.append)
        event_bus.unsubscribe(ENTITY_CREATED, received.append)
        event_bus.unsubscribe(ENTITY_CREATED, received.append)

        event_bus.emit(ENTITY_CREATED, {})
        assert received == []

    def test_failing_handler_is_skipped(self, event_bus, caplog):
        """Test one failing handler does not stop the others"""
        received = []

        def boom(event):
            raise ValueError("nope")

        event_bus.subscribe(ENTITY_CREATED, boom)
        event_bus.subscribe(ENTITY_CREATED, received.append)

        assert event_bus.emit(ENTITY_CREATED, {}) == 1
        assert len(received) == 1
        assert "Error in event handler for entity.created" in caplog.text

    def test_clear(self, event_bus):
        """Test clear drops every subscription"""
        event_bus.subscribe(ENTITY_CREATED, lambda e: None)
        event_bus.clear()
        assert event_bus.emit(ENTITY_CREATED, {}) == 0

    def test_global_bus(self):
        """Test the process-wide bus is a singleton"""
        assert get_event_bus() is get_event_bus()
        assert isinstance(get_event_bus(), EventBus)
