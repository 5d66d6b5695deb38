"""
PayMongo webhook service
Verifies, records and applies gateway events to reservations and payments
"""
import hashlib
import json
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from tropicana.config import settings
from tropicana.models.booking import Reservation, Payment, WebhookEvent
from tropicana.models.enums import (
    ReservationStatus, ReservationPaymentStatus, PaymentStatus, WebhookEventStatus
)
from tropicana.models.events import EventType
from tropicana.integrations.paymongo import verify_webhook_signature
from tropicana.services.event_bus import publish_event
from tropicana.services.exceptions import ValidationError, WebhookSignatureError

logger = logging.getLogger(__name__)

PAID_EVENTS = {
    "checkout_session.payment.paid",
    "payment_intent.payment.paid",
    "payment.paid",
}
FAILED_EVENTS = {
    "checkout_session.payment.failed",
    "payment_intent.payment.failed",
    "payment.failed",
}
RETRY_BATCH_SIZE = 10
RETRY_BACKOFF = timedelta(minutes=5)


class WebhookService:
    """Webhook service"""

    def __init__(self, db: Session, webhook_secret: Optional[str] = None):
        self.db = db
        self.webhook_secret = webhook_secret if webhook_secret is not None else settings.PAYMONGO_WEBHOOK_SECRET

    # ============== Intake ==============

    @staticmethod
    def parse_payload(raw_body: bytes) -> Dict[str, Any]:
        try:
            payload = json.loads(raw_body or b"{}")
        except ValueError:
            raise ValidationError("Invalid event structure")
        attributes = (payload.get("data") or {}).get("attributes") if isinstance(payload, dict) else None
        if not isinstance(attributes, dict) or not attributes.get("type") or not attributes.get("data"):
            raise ValidationError("Invalid event structure")
        return payload

    @staticmethod
    def _livemode(raw_body: bytes) -> bool:
        """``data.attributes.livemode`` of a body that has not been validated yet"""
        try:
            payload = json.loads(raw_body or b"{}")
        except ValueError:
            return False
        data = payload.get("data") if isinstance(payload, dict) else None
        attributes = data.get("attributes") if isinstance(data, dict) else None
        return bool(attributes.get("livemode")) if isinstance(attributes, dict) else False

    def verify_signature(self, raw_body: bytes, signature: Optional[str], livemode: bool = False) -> None:
        """A configured secret makes the signature mandatory"""
        if not self.webhook_secret:
            return
        if not signature or not verify_webhook_signature(raw_body, signature, self.webhook_secret, livemode):
            logger.warning("Rejected PayMongo webhook with an invalid signature")
            raise WebhookSignatureError("Invalid signature")

    def receive(self, raw_body: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """
        Verify and process one webhook delivery

        Returns the acknowledgement body. ``error`` is set when processing
        failed and the event was scheduled for a retry.
        """
        self.verify_signature(raw_body, signature, self._livemode(raw_body))
        payload = self.parse_payload(raw_body)
        attributes = payload["data"]["attributes"]

        event_id = payload["data"].get("id") or hashlib.sha256(raw_body).hexdigest()[:40]
        event = self.db.query(WebhookEvent).filter(WebhookEvent.event_id == event_id).first()
        if event and event.processed:
            logger.info(f"Duplicate webhook {event_id} ignored")
            return {"received": True, "processed": True, "duplicate": True}

        if not event:
            event = WebhookEvent(
                provider="paymongo",
                event_id=event_id,
                event_type=attributes["type"],
                resource_id=(attributes.get("data") or {}).get("id"),
                payload=payload,
                status=WebhookEventStatus.RECEIVED,
            )
            self.db.add(event)
            self.db.commit()

        try:
            handled = self.process_event(event)
        except Exception as e:
            self.db.rollback()
            self._mark_failed(event, e)
            return {"received": True, "processed": False, "error": str(e)}
        return {"received": True, "processed": handled}

    # ============== Processing ==============

    def process_event(self, event: WebhookEvent) -> bool:
        """Apply a stored event; returns False for event types that need no action"""
        event.status = WebhookEventStatus.PROCESSING
        self.db.flush()

        attributes = event.payload["data"]["attributes"]
        event_type = attributes["type"]
        resource = attributes["data"]

        if event_type in PAID_EVENTS:
            handled = self._apply_paid(resource)
        elif event_type in FAILED_EVENTS:
            handled = self._apply_failed(resource)
        else:
            logger.info(f"Unhandled PayMongo event type: {event_type}")
            handled = False

        event.status = WebhookEventStatus.PROCESSED
        event.processed = True
        event.processed_at = datetime.utcnow()
        event.error = None
        event.next_retry_at = None
        self.db.commit()
        return handled

    def _mark_failed(self, event: WebhookEvent, error: Exception) -> None:
        event.status = WebhookEventStatus.FAILED
        event.error = str(error)
        event.next_retry_at = datetime.utcnow() + RETRY_BACKOFF * ((event.retry_count or 0) + 1)
        self.db.commit()
        logger.error(f"Webhook {event.event_id} ({event.event_type}) failed: {error}", exc_info=True)
        publish_event(EventType.WEBHOOK_FAILED, {
            "event_id": event.event_id,
            "event_type": event.event_type,
            "error": str(error),
            "retry_count": event.retry_count,
        }, source="webhook_service")

    @staticmethod
    def _resource_ids(resource: Dict[str, Any]) -> List[str]:
        attributes = resource.get("attributes") or {}
        ids = [resource.get("id"), attributes.get("payment_intent_id")]
        intent = attributes.get("payment_intent")
        if isinstance(intent, dict):
            ids.append(intent.get("id"))
        return [i for i in ids if i]

    def _find_reservation(self, resource: Dict[str, Any]) -> Optional[Reservation]:
        attributes = resource.get("attributes") or {}
        metadata = attributes.get("metadata") or {}
        reservation_id = metadata.get("reservation_id")
        if reservation_id:
            reservation = self.db.query(Reservation).filter(Reservation.id == int(reservation_id)).first()
            if reservation:
                return reservation

        ids = self._resource_ids(resource)
        if not ids:
            return None
        reservation = self.db.query(Reservation).filter(Reservation.payment_intent_id.in_(ids)).first()
        if reservation:
            return reservation
        payment = self._matching_payments_query(ids).first()
        return payment.reservation if payment else None

    def _matching_payments_query(self, ids: List[str]):
        return self.db.query(Payment).filter(or_(
            Payment.checkout_session_id.in_(ids),
            Payment.provider_payment_id.in_(ids),
        ))

    def _payments_for(self, reservation: Reservation, resource: Dict[str, Any]) -> List[Payment]:
        ids = self._resource_ids(resource)
        matched = self._matching_payments_query(ids).all() if ids else []
        if matched:
            return matched
        return [p for p in reservation.payments
                if p.provider == "paymongo" and p.status in (PaymentStatus.PENDING, PaymentStatus.PROCESSING)]

    def _apply_paid(self, resource: Dict[str, Any]) -> bool:
        reservation = self._find_reservation(resource)
        if not reservation:
            raise ValueError("No reservation matches this payment")

        now = datetime.utcnow()
        old_status = reservation.status
        reservation.payment_status = ReservationPaymentStatus.PAID
        reservation.paid_at = now
        if reservation.status == ReservationStatus.PENDING:
            reservation.status = ReservationStatus.CONFIRMED

        paid_amount = None
        for payment in self._payments_for(reservation, resource):
            payment.status = PaymentStatus.SUCCEEDED
            payment.processed_at = now
            payment.provider_payment_id = payment.provider_payment_id or resource.get("id")
            paid_amount = payment.amount

        self.db.flush()
        logger.info(f"Reservation {reservation.confirmation_number} paid and confirmed")
        publish_event(EventType.PAYMENT_SUCCEEDED, {
            "reservation_id": reservation.id,
            "confirmation_number": reservation.confirmation_number,
            "amount": str(paid_amount if paid_amount is not None else reservation.total_amount),
            "currency": reservation.currency,
        }, source="webhook_service")
        if old_status != reservation.status:
            publish_event(EventType.RESERVATION_STATUS_CHANGED, {
                "reservation_id": reservation.id,
                "confirmation_number": reservation.confirmation_number,
                "old_status": old_status.value,
                "new_status": reservation.status.value,
            }, source="webhook_service")
        return True

    def _apply_failed(self, resource: Dict[str, Any]) -> bool:
        reservation = self._find_reservation(resource)
        if not reservation:
            raise ValueError("No reservation matches this payment")

        attributes = resource.get("attributes") or {}
        error = attributes.get("last_payment_error") or {}
        now = datetime.utcnow()
        old_status = reservation.status

        reservation.payment_status = ReservationPaymentStatus.FAILED
        if reservation.status in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED):
            reservation.status = ReservationStatus.CANCELLED
            reservation.cancelled_at = now
            reservation.cancellation_reason = "Payment failed"

        for payment in self._payments_for(reservation, resource):
            payment.status = PaymentStatus.FAILED
            payment.failure_code = error.get("code") or attributes.get("failed_code")
            payment.failure_message = error.get("detail") or attributes.get("failed_message")
            payment.processed_at = now

        self.db.flush()
        logger.info(f"Payment failed for reservation {reservation.confirmation_number}")
        publish_event(EventType.PAYMENT_FAILED, {
            "reservation_id": reservation.id,
            "confirmation_number": reservation.confirmation_number,
            "reason": error.get("detail") or attributes.get("failed_message"),
        }, source="webhook_service")
        if old_status != reservation.status:
            publish_event(EventType.RESERVATION_STATUS_CHANGED, {
                "reservation_id": reservation.id,
                "confirmation_number": reservation.confirmation_number,
                "old_status": old_status.value,
                "new_status": reservation.status.value,
            }, source="webhook_service")
        return True

    # ============== Maintenance ==============

    def list_events(self, resource_id: Optional[str] = None, event_type: Optional[str] = None,
                    limit: int = 50) -> List[WebhookEvent]:
        query = self.db.query(WebhookEvent)
        if resource_id:
            query = query.filter(WebhookEvent.resource_id == resource_id)
        if event_type:
            query = query.filter(WebhookEvent.event_type == event_type)
        return query.order_by(WebhookEvent.created_at.desc(), WebhookEvent.id.desc()).limit(limit).all()

    def retry_failed_webhooks(self, now: Optional[datetime] = None) -> Dict[str, int]:
        """Re-process failed events whose retry time has come"""
        now = now or datetime.utcnow()
        events = (
            self.db.query(WebhookEvent)
            .filter(
                WebhookEvent.status == WebhookEventStatus.FAILED,
                WebhookEvent.retry_count < settings.WEBHOOK_MAX_RETRIES,
                or_(WebhookEvent.next_retry_at == None, WebhookEvent.next_retry_at <= now),
            )
            .order_by(WebhookEvent.next_retry_at)
            .limit(RETRY_BATCH_SIZE)
            .all()
        )

        stats = {"attempted": 0, "succeeded": 0, "failed": 0}
        for event in events:
            stats["attempted"] += 1
            event.retry_count = (event.retry_count or 0) + 1
            self.db.commit()
            try:
                self.process_event(event)
                stats["succeeded"] += 1
            except Exception as e:
                self.db.rollback()
                self._mark_failed(event, e)
                stats["failed"] += 1

        if stats["attempted"]:
            logger.info(f"Webhook retry run: {stats}")
        return stats

    def cleanup_old_events(self, days: Optional[int] = None) -> int:
        """Delete processed events older than the retention window"""
        cutoff = datetime.utcnow() - timedelta(days=days or settings.WEBHOOK_RETENTION_DAYS)
        deleted = self.db.query(WebhookEvent).filter(
            WebhookEvent.created_at < cutoff,
            WebhookEvent.processed == True,
        ).delete(synchronize_session=False)
        self.db.commit()
        logger.info(f"Deleted {deleted} webhook events older than {cutoff.date()}")
        return deleted
