"""
Staff notifications
Turns domain events into short notices for the back-office feed
"""
import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from tropicana.models.events import EventType
from tropicana.services.event_bus import event_bus, Event

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    event_type: str
    title: str
    message: str
    severity: str
    data: Dict[str, Any]
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "title": self.title,
            "message": self.message,
            "severity": self.severity,
            "data": self.data,
            "created_at": self.created_at.isoformat(),
        }


def _reservation_created(data):
    return ("New reservation",
            f"{data.get('confirmation_number')} for {data.get('guest_name')} "
            f"({data.get('check_in')} to {data.get('check_out')})", "info")


def _status_changed(data):
    return ("Reservation updated",
            f"{data.get('confirmation_number')}: {data.get('old_status')} -> {data.get('new_status')}", "info")


def _payment_succeeded(data):
    return ("Payment received",
            f"{data.get('confirmation_number')} paid {data.get('amount')} {data.get('currency', '')}".strip(),
            "success")


def _payment_failed(data):
    return ("Payment failed",
            f"{data.get('confirmation_number')}: {data.get('reason') or 'payment was not completed'}", "warning")


def _payment_refunded(data):
    return ("Payment refunded",
            f"Payment {data.get('payment_id')} refunded {data.get('amount')}", "info")


def _checked_in(data):
    return ("Guest checked in", f"{data.get('guest_name')} ({data.get('confirmation_number')})", "info")


def _checked_out(data):
    return ("Guest checked out", f"{data.get('guest_name')} ({data.get('confirmation_number')})", "info")


def _feedback(data):
    return ("New feedback", f"{data.get('category')}: {data.get('excerpt')}", "info")


def _webhook_failed(data):
    return ("Webhook processing failed", f"{data.get('event_type')} {data.get('event_id')}: {data.get('error')}",
            "error")


FORMATTERS = {
    EventType.RESERVATION_CREATED: _reservation_created,
    EventType.RESERVATION_STATUS_CHANGED: _status_changed,
    EventType.PAYMENT_SUCCEEDED: _payment_succeeded,
    EventType.PAYMENT_FAILED: _payment_failed,
    EventType.PAYMENT_REFUNDED: _payment_refunded,
    EventType.GUEST_CHECKED_IN: _checked_in,
    EventType.GUEST_CHECKED_OUT: _checked_out,
    EventType.FEEDBACK_RECEIVED: _feedback,
    EventType.WEBHOOK_FAILED: _webhook_failed,
}


class NotificationCenter:
    """Bounded, thread-safe feed of staff notifications"""

    def __init__(self, maxlen: int = 200):
        self._items: deque = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self._registered = False

    def handle_event(self, event: Event) -> None:
        formatter = FORMATTERS.get(EventType(event.event_type))
        title, message, severity = formatter(event.data)
        with self._lock:
            self._items.append(Notification(
                event_type=event.event_type,
                title=title,
                message=message,
                severity=severity,
                data=event.data,
                created_at=event.timestamp,
            ))
        log = logger.warning if severity in ("warning", "error") else logger.info
        log(f"[{event.event_type}] {message}")

    def register(self) -> None:
        if self._registered:
            return
        for event_type in FORMATTERS:
            event_bus.subscribe(event_type.value, self.handle_event)
        self._registered = True

    def unregister(self) -> None:
        for event_type in FORMATTERS:
            event_bus.unsubscribe(event_type.value, self.handle_event)
        self._registered = False

    def recent(self, limit: int = 50, event_type: Optional[str] = None) -> List[Notification]:
        with self._lock:
            items = list(self._items)
        if event_type:
            items = [n for n in items if n.event_type == event_type]
        return list(reversed(items))[:limit]

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


notification_center = NotificationCenter()


def register_event_handlers() -> None:
    """Subscribe the notification feed to every domain event"""
    notification_center.register()
