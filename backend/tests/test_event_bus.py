"""
Event bus and notification feed unit tests
"""
import pytest
from datetime import datetime

from tropicana.models.events import EventType
from tropicana.services.event_bus import EventBus, Event, event_bus, publish_event
from tropicana.services.notifications import NotificationCenter, notification_center


@pytest.fixture
def bus():
    """The shared bus, emptied for the test and rewired to the feed afterwards"""
    event_bus.clear_subscribers()
    event_bus.clear_history()
    yield event_bus
    event_bus.clear_subscribers()
    event_bus.clear_history()
    notification_center.unregister()
    notification_center.register()


@pytest.fixture
def sample_event():
    return Event(
        event_type="test.event",
        timestamp=datetime.utcnow(),
        data={"key": "value"},
        source="test"
    )


class TestEventBus:

    def test_singleton(self):
        assert EventBus() is event_bus

    def test_subscribe_and_publish(self, bus, sample_event):
        received = []
        bus.subscribe("test.event", received.append)
        bus.publish(sample_event)

        assert len(received) == 1
        assert received[0].data["key"] == "value"

    def test_subscribe_twice_runs_once(self, bus, sample_event):
        calls = []

        def handler(event):
            calls.append(event)

        bus.subscribe("test.event", handler)
        bus.subscribe("test.event", handler)
        bus.publish(sample_event)
        assert len(calls) == 1

    def test_unsubscribe(self, bus, sample_event):
        calls = []

        def handler(event):
            calls.append(event)

        bus.subscribe("test.event", handler)
        bus.unsubscribe("test.event", handler)
        bus.unsubscribe("other.event", handler)
        bus.publish(sample_event)
        assert calls == []

    def test_failing_handler_does_not_stop_others(self, bus, sample_event):
        calls = []

        def broken(event):
            raise RuntimeError("boom")

        def working(event):
            calls.append(event)

        bus.subscribe("test.event", broken)
        bus.subscribe("test.event", working)
        bus.publish(sample_event)
        assert len(calls) == 1

    def test_history_newest_first(self, bus):
        publish_event("a.event", {"n": 1}, source="test")
        publish_event("b.event", {"n": 2}, source="test")
        publish_event("a.event", {"n": 3}, source="test")

        assert [e.data["n"] for e in bus.get_history()] == [3, 2, 1]
        assert [e.data["n"] for e in bus.get_history(event_type="a.event", limit=1)] == [3]

    def test_publish_event_accepts_enum(self, bus):
        event = publish_event(EventType.PAYMENT_FAILED, {}, source="test")
        assert event.event_type == "payment.failed"
        assert event.to_dict()["source"] == "test"
        assert event.event_id

    def test_get_subscribers(self, bus):
        def on_created(event):
            pass

        bus.subscribe("reservation.created", on_created)
        assert bus.get_subscribers() == {"reservation.created": ["on_created"]}


class TestNotificationCenter:

    def test_formats_subscribed_events(self, bus):
        center = NotificationCenter(maxlen=10)
        center.register()
        try:
            publish_event(EventType.RESERVATION_STATUS_CHANGED, {
                "confirmation_number": "TR-1", "old_status": "PENDING", "new_status": "CONFIRMED",
            }, source="test")
            publish_event(EventType.WEBHOOK_FAILED, {
                "event_type": "payment.paid", "event_id": "evt_1", "error": "No reservation",
            }, source="test")
            publish_event("unrelated.event", {}, source="test")
        finally:
            center.unregister()

        items = center.recent()
        assert [n.title for n in items] == ["Webhook processing failed", "Reservation updated"]
        assert items[1].message == "TR-1: PENDING -> CONFIRMED"
        assert items[0].severity == "error"
        assert [n.title for n in center.recent(event_type="reservation.status_changed")] == ["Reservation updated"]

    def test_bounded_feed(self, bus):
        center = NotificationCenter(maxlen=2)
        center.register()
        try:
            for number in range(3):
                publish_event(EventType.GUEST_CHECKED_IN, {
                    "guest_name": f"Guest {number}", "confirmation_number": f"TR-{number}",
                }, source="test")
        finally:
            center.unregister()

        assert [n.message for n in center.recent()] == ["Guest 2 (TR-2)", "Guest 1 (TR-1)"]
        center.clear()
        assert center.recent() == []

    def test_unregistered_center_receives_nothing(self, bus):
        center = NotificationCenter()
        center.register()
        center.unregister()
        publish_event(EventType.FEEDBACK_RECEIVED, {"category": "PRAISE", "excerpt": "Lovely"}, source="test")
        assert center.recent() == []
