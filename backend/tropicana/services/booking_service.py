"""
Public booking service
Website reservations paid through a PayMongo checkout session
"""
import logging
from datetime import datetime
from decimal import Decimal
from urllib.parse import urlencode
from sqlalchemy.orm import Session
from tropicana.config import settings
from tropicana.models.booking import Reservation, ReservationRoom, Payment
from tropicana.models.hotel import Property, RoomType
from tropicana.models.enums import (
    ReservationStatus, ReservationSource, ReservationPaymentStatus,
    PaymentStatus, PaymentMethod
)
from tropicana.models.schemas import BookingRequest
from tropicana.integrations.paymongo import PayMongoClient, to_centavos
from tropicana.services.availability_service import AvailabilityService
from tropicana.services.exceptions import ValidationError, ConflictError, PaymentGatewayError
from tropicana.services.guest_service import GuestService
from tropicana.services.price_service import PriceService, money
from tropicana.services.reservation_service import ReservationService

logger = logging.getLogger(__name__)

PRICE_TOLERANCE = Decimal("0.01")


class BookingService:
    """Booking service"""

    def __init__(self, db: Session):
        self.db = db
        self.availability = AvailabilityService(db)
        self.prices = PriceService(db)
        self.guests = GuestService(db)
        self.reservations = ReservationService(db)

    def _validate_property(self, property_id: int) -> Property:
        prop = self.db.query(Property).filter(Property.id == property_id).first()
        if not prop or not prop.is_active:
            raise ValidationError("Invalid or inactive property")
        return prop

    def _validate_room_type(self, prop: Property, room_type_id: int) -> RoomType:
        room_type = self.db.query(RoomType).filter(RoomType.id == room_type_id).first()
        if not room_type or not room_type.is_active or room_type.property_id != prop.id:
            raise ValidationError("Invalid or inactive room type")
        return room_type

    @staticmethod
    def _validate_occupancy(room_type: RoomType, adults: int, children: int) -> None:
        if adults + children > room_type.max_occupancy:
            raise ValidationError(
                f"Total guests ({adults + children}) exceeds room capacity ({room_type.max_occupancy})"
            )
        if adults > room_type.max_adults:
            raise ValidationError(f"Number of adults ({adults}) exceeds maximum allowed ({room_type.max_adults})")
        if children > room_type.max_children:
            raise ValidationError(
                f"Number of children ({children}) exceeds maximum allowed ({room_type.max_children})"
            )

    @staticmethod
    def _check_client_figures(data: BookingRequest, quote: dict) -> None:
        if data.nights is not None and data.nights != quote["nights"]:
            raise ValidationError("Number of nights does not match the selected dates")
        if data.total_amount is not None and \
                abs(money(data.total_amount) - quote["total_amount"]) > PRICE_TOLERANCE:
            raise ValidationError(
                f"Price has changed: expected {quote['total_amount']}, got {money(data.total_amount)}"
            )

    @staticmethod
    def _return_url(kind: str, reservation: Reservation) -> str:
        query = urlencode({
            "reservation": reservation.id,
            "confirmation": reservation.confirmation_number,
        })
        return f"{settings.APP_URL.rstrip('/')}/booking/{kind}?{query}"

    def create_with_payment(self, data: BookingRequest, client: PayMongoClient) -> dict:
        """
        Create a pending website reservation and a PayMongo checkout session for it

        The reservation is committed before the gateway call. If the gateway
        rejects the session, the reservation is cancelled and the error re-raised.
        """
        prop = self._validate_property(data.property_id)
        room_type = self._validate_room_type(prop, data.room_type_id)
        self._validate_occupancy(room_type, data.adults, data.children)

        if self.availability.count_available(room_type.id, data.check_in, data.check_out) < 1:
            raise ConflictError("No rooms of this type are available for the selected dates")

        quote = self.prices.quote(room_type.id, data.check_in, data.check_out)
        self._check_client_figures(data, quote)
        nights = quote["nights"]

        try:
            guest = self.guests.upsert_website_guest(
                prop.id, data.first_name, data.last_name, data.email, data.phone
            )
            reservation = Reservation(
                property_id=prop.id,
                guest_id=guest.id,
                confirmation_number=self.reservations.generate_website_confirmation(),
                source=ReservationSource.WEBSITE,
                status=ReservationStatus.PENDING,
                payment_status=ReservationPaymentStatus.PENDING,
                check_in=data.check_in,
                check_out=data.check_out,
                nights=nights,
                adults=data.adults,
                children=data.children,
                subtotal=quote["subtotal"],
                taxes=quote["taxes"],
                service_fee=quote["service_fee"],
                discounts=Decimal("0.00"),
                total_amount=quote["total_amount"],
                currency=prop.primary_currency or settings.DEFAULT_CURRENCY,
                special_requests=data.special_requests,
                guest_notes=data.guest_notes,
            )
            reservation.rooms.append(ReservationRoom(
                room_type_id=room_type.id,
                rate=money(quote["subtotal"] / nights),
                nights=nights,
                subtotal=quote["subtotal"],
            ))
            self.db.add(reservation)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(reservation)
        logger.info(f"Website reservation {reservation.confirmation_number} created, opening checkout")

        try:
            session = client.create_checkout_session(
                line_items=[{
                    "currency": reservation.currency,
                    "amount": to_centavos(reservation.total_amount),
                    "name": f"Hotel Reservation ({reservation.confirmation_number})",
                    "quantity": 1,
                    "description": f"{prop.display_name} - {nights} night{'s' if nights != 1 else ''}",
                }],
                success_url=self._return_url("success", reservation),
                cancel_url=self._return_url("cancelled", reservation),
                description=f"Booking for {data.first_name} {data.last_name} at {prop.display_name}",
                billing={
                    "name": f"{data.first_name} {data.last_name}",
                    "email": data.email,
                    "phone": data.phone,
                },
                reference_number=reservation.confirmation_number,
                metadata={
                    "reservation_id": reservation.id,
                    "confirmation_number": reservation.confirmation_number,
                    "property_id": prop.id,
                    "guest_id": guest.id,
                    "guest_name": f"{data.first_name} {data.last_name}",
                    "check_in": data.check_in.isoformat(),
                    "check_out": data.check_out.isoformat(),
                    "adults": data.adults,
                    "children": data.children,
                    "nights": nights,
                    "room_type_id": room_type.id,
                },
            )
        except PaymentGatewayError as e:
            reservation.status = ReservationStatus.CANCELLED
            reservation.cancelled_at = datetime.utcnow()
            reservation.cancellation_reason = "Payment gateway error"
            reservation.internal_notes = str(e)
            self.db.commit()
            logger.error(f"Checkout session failed for {reservation.confirmation_number}: {e}")
            raise

        attributes = session.get("attributes", {})
        reservation.payment_provider = "paymongo"
        reservation.payment_intent_id = session["id"]
        self.db.add(Payment(
            reservation_id=reservation.id,
            amount=reservation.total_amount,
            currency=reservation.currency,
            method=PaymentMethod.CARD,
            status=PaymentStatus.PENDING,
            provider="paymongo",
            checkout_session_id=session["id"],
            client_key=attributes.get("client_key"),
            payment_flow="checkout",
        ))
        self.db.commit()

        self.reservations.publish_created(reservation)
        return {
            "reservation_id": reservation.id,
            "confirmation_number": reservation.confirmation_number,
            "checkout_url": attributes.get("checkout_url"),
            "payment_session_id": session["id"],
        }
