"""Tests for the EventBus domain event dispatch system."""

import pytest

from natural_selection.events import (
    EventBus,
    GenerationCompletedEvent,
    MutationActivatedEvent,
    SimulationCompletedEvent,
)


class TestEventBus:
    """Test suite for EventBus functionality."""

    def test_emit_reaches_subscriber(self) -> None:
        bus = EventBus()
        received: list = []
        bus.subscribe(SimulationCompletedEvent, received.append)

        event = SimulationCompletedEvent(reason="extinction", generation=12, live_count=0)
        assert bus.emit(event) == 1

        assert received == [event]

    def test_no_subscribers_no_crash(self) -> None:
        bus = EventBus()
        assert bus.emit(MutationActivatedEvent("fur", "brown fur", "white fur")) == 0
        assert bus.subscriber_count(MutationActivatedEvent) == 0

    def test_handlers_called_in_registration_order(self) -> None:
        bus = EventBus()
        order: list = []
        bus.subscribe(SimulationCompletedEvent, lambda event: order.append("first"))
        bus.subscribe(SimulationCompletedEvent, lambda event: order.append("second"))

        bus.emit(SimulationCompletedEvent(reason="generation_limit", generation=3, live_count=9))

        assert order == ["first", "second"]

    def test_dispatch_is_by_exact_type(self) -> None:
        bus = EventBus()
        received: list = []
        bus.subscribe(GenerationCompletedEvent, received.append)

        bus.emit(SimulationCompletedEvent(reason="extinction", generation=1, live_count=0))

        assert received == []

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        received: list = []
        bus.subscribe(MutationActivatedEvent, received.append)

        assert bus.unsubscribe(MutationActivatedEvent, received.append) is True
        assert bus.unsubscribe(MutationActivatedEvent, received.append) is False
        bus.emit(MutationActivatedEvent("ears", "floppy ears", "floppy ears"))
        assert received == []

    def test_clear_subscribers(self) -> None:
        bus = EventBus()
        bus.subscribe(MutationActivatedEvent, lambda event: None)
        bus.clear_subscribers()
        assert bus.subscriber_count(MutationActivatedEvent) == 0

    def test_events_are_frozen(self) -> None:
        event = SimulationCompletedEvent(reason="extinction", generation=1, live_count=0)
        with pytest.raises(AttributeError):
            event.generation = 2
