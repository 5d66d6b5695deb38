"""
Domain event types published on the in-process event bus
"""
from enum import Enum


class EventType(str, Enum):
    """Event type"""
    RESERVATION_CREATED = "reservation.created"
    RESERVATION_STATUS_CHANGED = "reservation.status_changed"

    PAYMENT_SUCCEEDED = "payment.succeeded"
    PAYMENT_FAILED = "payment.failed"
    PAYMENT_REFUNDED = "payment.refunded"

    GUEST_CHECKED_IN = "guest.checked_in"
    GUEST_CHECKED_OUT = "guest.checked_out"

    FEEDBACK_RECEIVED = "feedback.received"
    WEBHOOK_FAILED = "webhook.failed"
