"""
Booking models
Guest -> Reservation -> ReservationRoom, with payments and gateway webhook log
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, ForeignKey, Text,
    Boolean, Numeric, JSON, UniqueConstraint, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
from tropicana.database import Base
from tropicana.models.enums import (
    ReservationStatus, ReservationSource, ReservationPaymentStatus,
    PaymentStatus, PaymentMethod, WebhookEventStatus
)


class Guest(Base):
    """Guest profile, unique per property by email"""
    __tablename__ = "guests"
    __table_args__ = (UniqueConstraint("property_id", "email", name="uq_guest_property_email"),)

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(150), nullable=False, index=True)
    title = Column(String(20))
    phone = Column(String(50))
    date_of_birth = Column(Date)
    nationality = Column(String(100))
    passport_number = Column(String(50))
    id_number = Column(String(50))
    id_type = Column(String(50))

    address = Column(String(255))
    city = Column(String(100))
    state = Column(String(100))
    country = Column(String(100))
    postal_code = Column(String(20))

    vip_status = Column(Boolean, default=False)
    loyalty_number = Column(String(50))
    preferences = Column(JSON, default=dict)
    notes = Column(Text)
    marketing_opt_in = Column(Boolean, default=False)
    source = Column(String(50))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    hotel = relationship("Property", back_populates="guests")
    reservations = relationship("Reservation", back_populates="guest",
                                order_by="Reservation.created_at.desc()")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Reservation(Base):
    """A booking of one or more rooms for a date range"""
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, index=True)
    confirmation_number = Column(String(50), unique=True, nullable=False, index=True)
    source = Column(SQLEnum(ReservationSource), default=ReservationSource.ADMIN, nullable=False)
    status = Column(SQLEnum(ReservationStatus), default=ReservationStatus.PENDING, nullable=False)

    check_in = Column(Date, nullable=False, index=True)
    check_out = Column(Date, nullable=False, index=True)
    nights = Column(Integer, nullable=False)
    adults = Column(Integer, default=1, nullable=False)
    children = Column(Integer, default=0, nullable=False)
    infants = Column(Integer, default=0, nullable=False)

    subtotal = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    taxes = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    service_fee = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    discounts = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    total_amount = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    currency = Column(String(3), default="PHP")

    payment_status = Column(SQLEnum(ReservationPaymentStatus), default=ReservationPaymentStatus.PENDING,
                            nullable=False)
    payment_provider = Column(String(50))
    payment_intent_id = Column(String(100), index=True)
    paid_at = Column(DateTime)
    cancelled_at = Column(DateTime)
    cancellation_reason = Column(Text)

    special_requests = Column(Text)
    guest_notes = Column(Text)
    internal_notes = Column(Text)
    created_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    hotel = relationship("Property", back_populates="reservations")
    guest = relationship("Guest", back_populates="reservations")
    rooms = relationship("ReservationRoom", back_populates="reservation", cascade="all, delete-orphan",
                         order_by="ReservationRoom.id")
    payments = relationship("Payment", back_populates="reservation", cascade="all, delete-orphan",
                            order_by="Payment.created_at")
    stays = relationship("Stay", back_populates="reservation", cascade="all, delete-orphan")

    @property
    def property_name(self) -> str:
        return (self.hotel.display_name or self.hotel.name) if self.hotel else None


class ReservationRoom(Base):
    """One booked room line of a reservation"""
    __tablename__ = "reservation_rooms"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=False, index=True)
    room_type_id = Column(Integer, ForeignKey("room_types.id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"))
    rate = Column(Numeric(12, 2), nullable=False)
    nights = Column(Integer, nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)

    reservation = relationship("Reservation", back_populates="rooms")
    room_type = relationship("RoomType")
    room = relationship("Room")

    @property
    def room_type_name(self) -> str:
        return self.room_type.display_name if self.room_type else None

    @property
    def room_number(self) -> str:
        return self.room.room_number if self.room else None


class Payment(Base):
    """A payment (or payment attempt) against a reservation"""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), default="PHP")
    method = Column(SQLEnum(PaymentMethod), nullable=False)
    status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)

    provider = Column(String(50))
    provider_payment_id = Column(String(100), index=True)
    provider_ref = Column(String(100))
    checkout_session_id = Column(String(100), index=True)
    client_key = Column(String(255))
    payment_flow = Column(String(20))

    failure_code = Column(String(100))
    failure_message = Column(Text)

    refunded_amount = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
    refund_reason = Column(Text)
    refund_id = Column(String(100))
    refunded_at = Column(DateTime)

    transaction_date = Column(DateTime, default=datetime.utcnow)
    processed_at = Column(DateTime)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reservation = relationship("Reservation", back_populates="payments")
    attempts = relationship("PaymentAttempt", back_populates="payment", cascade="all, delete-orphan",
                            order_by="PaymentAttempt.attempt_number")


class PaymentAttempt(Base):
    """Retry record of a failed payment"""
    __tablename__ = "payment_attempts"

    id = Column(Integer, primary_key=True, index=True)
    payment_id = Column(Integer, ForeignKey("payments.id"), nullable=False, index=True)
    attempt_number = Column(Integer, nullable=False)
    status = Column(String(20), default="pending")
    attempted_at = Column(DateTime, default=datetime.utcnow)

    payment = relationship("Payment", back_populates="attempts")


class WebhookEvent(Base):
    """Payment gateway webhook delivery, kept for idempotency and retries"""
    __tablename__ = "webhook_events"

    id = Column(Integer, primary_key=True, index=True)
    provider = Column(String(50), default="paymongo", nullable=False)
    event_id = Column(String(100), unique=True, nullable=False, index=True)
    event_type = Column(String(100), nullable=False, index=True)
    resource_id = Column(String(100), index=True)
    payload = Column(JSON, nullable=False)
    status = Column(SQLEnum(WebhookEventStatus), default=WebhookEventStatus.RECEIVED, nullable=False)
    processed = Column(Boolean, default=False)
    retry_count = Column(Integer, default=0)
    next_retry_at = Column(DateTime)
    error = Column(Text)
    processed_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
