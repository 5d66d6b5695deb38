"""
Payment service
Payment records, refunds, retries and reservation payment status
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from tropicana.models.booking import Reservation, Payment, PaymentAttempt
from tropicana.models.enums import (
    PaymentStatus, PaymentMethod, ReservationPaymentStatus, ReservationStatus
)
from tropicana.models.events import EventType
from tropicana.models.schemas import ManualPaymentCreate, RefundRequest
from tropicana.integrations.paymongo import PayMongoClient, to_centavos
from tropicana.services.event_bus import publish_event
from tropicana.services.exceptions import NotFoundError, ValidationError
from tropicana.services.price_service import money

logger = logging.getLogger(__name__)

SETTLED_STATUSES = (PaymentStatus.SUCCEEDED, PaymentStatus.PAID)
PAYMONGO = "paymongo"


class PaymentService:
    """Payment service"""

    def __init__(self, db: Session):
        self.db = db

    def require_payment(self, payment_id: int) -> Payment:
        payment = self.db.query(Payment).filter(Payment.id == payment_id).first()
        if not payment:
            raise NotFoundError("Payment not found")
        return payment

    def _require_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.db.query(Reservation).filter(Reservation.id == reservation_id).first()
        if not reservation:
            raise NotFoundError("Reservation not found")
        return reservation

    def list_payments(self, property_id: Optional[int] = None,
                      status: Optional[PaymentStatus] = None) -> List[Payment]:
        query = self.db.query(Payment)
        if property_id:
            query = query.join(Reservation).filter(Reservation.property_id == property_id)
        if status:
            query = query.filter(Payment.status == status)
        return query.order_by(Payment.created_at.desc(), Payment.id.desc()).all()

    # ============== Totals ==============

    @staticmethod
    def net_paid(reservation: Reservation) -> Decimal:
        """Settled amount minus refunds"""
        total = Decimal("0")
        for p in reservation.payments:
            if p.status in SETTLED_STATUSES or p.status in (PaymentStatus.REFUNDED,
                                                            PaymentStatus.PARTIALLY_REFUNDED):
                total += Decimal(p.amount) - Decimal(p.refunded_amount or 0)
        return money(total)

    def recompute_reservation_payment_status(self, reservation: Reservation) -> None:
        """Derive the reservation payment status from its payments; does not commit"""
        paid = self.net_paid(reservation)
        refunded_any = any(Decimal(p.refunded_amount or 0) > 0 for p in reservation.payments)

        if paid >= Decimal(reservation.total_amount) and paid > 0:
            reservation.payment_status = ReservationPaymentStatus.PAID
            if not reservation.paid_at:
                reservation.paid_at = datetime.utcnow()
        elif refunded_any:
            reservation.payment_status = (ReservationPaymentStatus.PARTIALLY_REFUNDED if paid > 0
                                          else ReservationPaymentStatus.REFUNDED)
        elif paid > 0:
            reservation.payment_status = ReservationPaymentStatus.PARTIALLY_PAID

    def get_payment_status(self, reservation_id: int) -> dict:
        reservation = self._require_reservation(reservation_id)
        payments = sorted(reservation.payments, key=lambda p: (p.created_at, p.id))
        if not payments:
            return {"status": "NO_PAYMENT", "total_paid": Decimal("0.00"), "latest_payment": None, "payments": []}

        total_paid = money(sum(
            (Decimal(p.amount) for p in payments if p.status in SETTLED_STATUSES),
            Decimal("0")
        ))
        latest = payments[-1]
        return {
            "status": latest.status.value,
            "total_paid": total_paid,
            "latest_payment": latest,
            "payments": payments,
        }

    # ============== Commands ==============

    def record_manual_payment(self, reservation_id: int, data: ManualPaymentCreate) -> Payment:
        """Front-desk payment (cash, card terminal, transfer) recorded as paid"""
        reservation = self._require_reservation(reservation_id)
        if reservation.status in (ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW):
            raise ValidationError("Cannot take a payment for a cancelled reservation")

        now = datetime.utcnow()
        payment = Payment(
            reservation_id=reservation.id,
            amount=money(data.amount),
            currency=data.currency or reservation.currency,
            method=data.method,
            status=PaymentStatus.PAID,
            provider="manual",
            provider_ref=data.provider_ref,
            notes=data.notes,
            transaction_date=now,
            processed_at=now,
        )
        reservation.payments.append(payment)
        self.db.flush()
        self.recompute_reservation_payment_status(reservation)
        self.db.commit()
        self.db.refresh(payment)

        logger.info(f"Manual payment {payment.id} of {payment.amount} for {reservation.confirmation_number}")
        publish_event(EventType.PAYMENT_SUCCEEDED, {
            "reservation_id": reservation.id,
            "confirmation_number": reservation.confirmation_number,
            "payment_id": payment.id,
            "amount": str(payment.amount),
            "currency": payment.currency,
            "method": payment.method.value,
        }, source="payment_service")
        return payment

    def create_payment_intent(self, reservation_id: int, client: PayMongoClient) -> dict:
        """Create a PayMongo payment intent for the reservation balance"""
        reservation = self._require_reservation(reservation_id)
        currency = reservation.currency or "PHP"

        intent = client.create_payment_intent(
            amount=to_centavos(reservation.total_amount),
            currency=currency,
            description=f"Payment for reservation {reservation.confirmation_number}",
            metadata={
                "reservation_id": reservation.id,
                "confirmation_number": reservation.confirmation_number,
            },
        )
        attributes = intent.get("attributes", {})

        payment = Payment(
            reservation_id=reservation.id,
            amount=reservation.total_amount,
            currency=currency,
            method=PaymentMethod.PAYMONGO,
            status=PaymentStatus.PENDING,
            provider=PAYMONGO,
            provider_payment_id=intent["id"],
            client_key=attributes.get("client_key"),
            payment_flow="direct",
        )
        self.db.add(payment)
        reservation.payment_provider = PAYMONGO
        reservation.payment_intent_id = intent["id"]
        self.db.commit()

        logger.info(f"Payment intent {intent['id']} created for {reservation.confirmation_number}")
        return {"client_key": attributes.get("client_key"), "payment_intent_id": intent["id"]}

    def retry_failed_payment(self, payment_id: int) -> Payment:
        payment = self.require_payment(payment_id)
        if payment.status != PaymentStatus.FAILED:
            raise ValidationError("Only failed payments can be retried")

        attempt = PaymentAttempt(
            attempt_number=len(payment.attempts) + 1,
            status="pending",
            attempted_at=datetime.utcnow(),
        )
        payment.attempts.append(attempt)
        payment.status = PaymentStatus.PENDING
        payment.failure_code = None
        payment.failure_message = None

        self.db.commit()
        self.db.refresh(payment)
        logger.info(f"Payment {payment.id} queued for retry (attempt {attempt.attempt_number})")
        return payment

    def process_refund(self, payment_id: int, data: RefundRequest) -> Payment:
        payment = self.require_payment(payment_id)
        if payment.status not in SETTLED_STATUSES + (PaymentStatus.PARTIALLY_REFUNDED,):
            raise ValidationError("Only settled payments can be refunded")

        already = Decimal(payment.refunded_amount or 0)
        refundable = Decimal(payment.amount) - already
        amount = money(data.amount)
        if amount > refundable:
            raise ValidationError(f"Refund exceeds the refundable amount of {money(refundable)}")

        payment.refunded_amount = money(already + amount)
        payment.status = (PaymentStatus.REFUNDED if payment.refunded_amount >= Decimal(payment.amount)
                          else PaymentStatus.PARTIALLY_REFUNDED)
        payment.refund_reason = data.reason
        payment.refund_id = data.provider_refund_id
        payment.refunded_at = datetime.utcnow()

        self.recompute_reservation_payment_status(payment.reservation)
        self.db.commit()
        self.db.refresh(payment)

        logger.info(f"Refunded {amount} of payment {payment.id} ({payment.status.value})")
        publish_event(EventType.PAYMENT_REFUNDED, {
            "payment_id": payment.id,
            "reservation_id": payment.reservation_id,
            "amount": str(amount),
            "status": payment.status.value,
        }, source="payment_service")
        return payment
