"""
Reservation service
Manages reservations, their room lines and lifecycle transitions
"""
import logging
import secrets
import string
import time
from collections import Counter
from datetime import datetime, date
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from tropicana.config import settings
from tropicana.models.booking import Reservation, ReservationRoom, Guest
from tropicana.models.hotel import Property, RoomType, Room
from tropicana.models.enums import ReservationStatus
from tropicana.models.events import EventType
from tropicana.models.schemas import ReservationCreate, ReservationUpdate
from tropicana.services.availability_service import AvailabilityService
from tropicana.services.event_bus import publish_event
from tropicana.services.exceptions import NotFoundError, ConflictError, ValidationError
from tropicana.services.price_service import money, count_nights

logger = logging.getLogger(__name__)

BASE36_ALPHABET = string.digits + string.ascii_uppercase


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class ReservationService:
    """Reservation service"""

    def __init__(self, db: Session):
        self.db = db
        self.availability = AvailabilityService(db)

    # ============== Confirmation numbers ==============

    def _is_taken(self, confirmation_number: str) -> bool:
        return self.db.query(Reservation.id).filter(
            Reservation.confirmation_number == confirmation_number
        ).first() is not None

    def generate_admin_confirmation(self, prop: Property) -> str:
        """Property prefix plus a millisecond timestamp, e.g. TR-1718000000000"""
        prefix = (prop.slug or prop.name)[:2].upper()
        stamp = _epoch_ms()
        candidate = f"{prefix}-{stamp}"
        while self._is_taken(candidate):
            stamp += 1
            candidate = f"{prefix}-{stamp}"
        return candidate

    def generate_website_confirmation(self) -> str:
        """RES-<base36 timestamp>-<5 random base36 chars>"""
        while True:
            suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(5))
            candidate = f"RES-{to_base36(_epoch_ms())}-{suffix}"
            if not self._is_taken(candidate):
                return candidate

    # ============== Queries ==============

    def get_reservations(self, property_id: int,
                         status: Optional[ReservationStatus] = None,
                         check_in_from: Optional[date] = None,
                         check_in_to: Optional[date] = None) -> List[Reservation]:
        query = self.db.query(Reservation).filter(Reservation.property_id == property_id)
        if status:
            query = query.filter(Reservation.status == status)
        if check_in_from:
            query = query.filter(Reservation.check_in >= check_in_from)
        if check_in_to:
            query = query.filter(Reservation.check_in <= check_in_to)
        return query.order_by(Reservation.check_in.desc(), Reservation.id.desc()).all()

    def get_reservation(self, reservation_id: int) -> Optional[Reservation]:
        return self.db.query(Reservation).filter(Reservation.id == reservation_id).first()

    def require_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            raise NotFoundError("Reservation not found")
        return reservation

    def get_by_confirmation(self, confirmation_number: str) -> Optional[Reservation]:
        return self.db.query(Reservation).filter(
            Reservation.confirmation_number == confirmation_number
        ).first()

    def get_status_view(self, reservation_id: int) -> dict:
        """Guest-facing summary used by the booking success page"""
        r = self.require_reservation(reservation_id)
        first_line = r.rooms[0] if r.rooms else None
        return {
            "id": r.id,
            "confirmation_number": r.confirmation_number,
            "status": r.status,
            "payment_status": r.payment_status,
            "paid_at": r.paid_at,
            "cancelled_at": r.cancelled_at,
            "check_in": r.check_in,
            "check_out": r.check_out,
            "total_amount": r.total_amount,
            "currency": r.currency,
            "guest": {
                "first_name": r.guest.first_name,
                "last_name": r.guest.last_name,
                "email": r.guest.email,
            },
            "property": {"name": r.hotel.display_name or r.hotel.name, "slug": r.hotel.slug},
            "room_type": {"name": first_line.room_type.display_name} if first_line else None,
        }

    # ============== Inventory checks ==============

    def check_inventory(self, property_id: int, lines: List[dict], check_in: date, check_out: date,
                        exclude_reservation_id: Optional[int] = None) -> None:
        """
        Ensure every requested room type has enough free rooms and that
        assigned rooms are not double-booked

        lines: dicts with room_type_id and optional room_id
        """
        requested = Counter(line["room_type_id"] for line in lines)
        for room_type_id, wanted in requested.items():
            room_type = self.db.query(RoomType).filter(RoomType.id == room_type_id).first()
            if not room_type or room_type.property_id != property_id:
                raise ValidationError(f"Room type {room_type_id} does not belong to this property")
            if not room_type.is_active:
                raise ValidationError(f"Room type {room_type.display_name} is not available for booking")

            free = self.availability.count_available(room_type_id, check_in, check_out, exclude_reservation_id)
            if wanted > free:
                raise ConflictError(
                    f"Not enough {room_type.display_name} rooms available: requested {wanted}, available {free}"
                )

        assigned = [line["room_id"] for line in lines if line.get("room_id")]
        if len(assigned) != len(set(assigned)):
            raise ValidationError("The same room is assigned twice")
        for line in lines:
            room_id = line.get("room_id")
            if not room_id:
                continue
            room = self.db.query(Room).filter(Room.id == room_id).first()
            if not room or room.room_type_id != line["room_type_id"]:
                raise ValidationError(f"Room {room_id} does not match room type {line['room_type_id']}")
            if not self.availability.is_room_free(room_id, check_in, check_out, exclude_reservation_id):
                raise ConflictError(f"Room {room.room_number} is already booked for these dates")

    @staticmethod
    def charges_for(prop: Property, subtotal: Decimal, taxes: Optional[Decimal] = None,
                    service_fee: Optional[Decimal] = None):
        """Taxes and service fee for a subtotal; explicit amounts win over the property rates"""
        tax_rate = prop.tax_rate if prop.tax_rate is not None else settings.DEFAULT_TAX_RATE
        fee_rate = prop.service_fee_rate if prop.service_fee_rate is not None else settings.DEFAULT_SERVICE_FEE_RATE
        taxes = money(taxes) if taxes is not None else money(subtotal * Decimal(tax_rate))
        service_fee = money(service_fee) if service_fee is not None else money(subtotal * Decimal(fee_rate))
        return taxes, service_fee

    # ============== Commands ==============

    def create_reservation(self, data: ReservationCreate, created_by: Optional[int] = None) -> Reservation:
        """Create a back-office reservation with one or more room lines"""
        prop = self.db.query(Property).filter(Property.id == data.property_id).first()
        if not prop:
            raise NotFoundError("Property not found")

        guest = self.db.query(Guest).filter(Guest.id == data.guest_id).first()
        if not guest or guest.property_id != prop.id:
            raise ValidationError("Guest does not belong to this property")

        nights = count_nights(data.check_in, data.check_out)
        lines = [line.model_dump() for line in data.rooms]
        self.check_inventory(prop.id, lines, data.check_in, data.check_out)

        subtotal = money(sum((Decimal(line["rate"]) * nights for line in lines), Decimal("0")))
        taxes, service_fee = self.charges_for(prop, subtotal, data.taxes, data.service_fee)
        discounts = money(data.discounts)
        total = money(subtotal + taxes + service_fee - discounts)
        if total < 0:
            raise ValidationError("Discounts exceed the reservation amount")

        reservation = Reservation(
            property_id=prop.id,
            guest_id=guest.id,
            confirmation_number=self.generate_admin_confirmation(prop),
            source=data.source,
            status=data.status,
            check_in=data.check_in,
            check_out=data.check_out,
            nights=nights,
            adults=data.adults,
            children=data.children,
            infants=data.infants,
            subtotal=subtotal,
            taxes=taxes,
            service_fee=service_fee,
            discounts=discounts,
            total_amount=total,
            currency=prop.primary_currency or "PHP",
            special_requests=data.special_requests,
            guest_notes=data.guest_notes,
            internal_notes=data.internal_notes,
            created_by=created_by,
        )
        for line in lines:
            reservation.rooms.append(ReservationRoom(
                room_type_id=line["room_type_id"],
                room_id=line.get("room_id"),
                rate=money(line["rate"]),
                nights=nights,
                subtotal=money(Decimal(line["rate"]) * nights),
            ))

        self.db.add(reservation)
        self.db.commit()
        self.db.refresh(reservation)

        logger.info(f"Reservation {reservation.confirmation_number} created for guest {guest.id}")
        self.publish_created(reservation)
        return reservation

    def publish_created(self, reservation: Reservation) -> None:
        publish_event(EventType.RESERVATION_CREATED, {
            "reservation_id": reservation.id,
            "confirmation_number": reservation.confirmation_number,
            "property_id": reservation.property_id,
            "guest_name": reservation.guest.full_name if reservation.guest else None,
            "check_in": reservation.check_in.isoformat(),
            "check_out": reservation.check_out.isoformat(),
            "total_amount": str(reservation.total_amount),
            "source": reservation.source.value,
        }, source="reservation_service")

    def _publish_status_change(self, reservation: Reservation, old_status: ReservationStatus) -> None:
        if old_status == reservation.status:
            return
        publish_event(EventType.RESERVATION_STATUS_CHANGED, {
            "reservation_id": reservation.id,
            "confirmation_number": reservation.confirmation_number,
            "old_status": old_status.value,
            "new_status": reservation.status.value,
        }, source="reservation_service")

    def update_reservation(self, reservation_id: int, data: ReservationUpdate) -> Reservation:
        reservation = self.require_reservation(reservation_id)
        old_status = reservation.status
        update_data = data.model_dump(exclude_unset=True)

        new_check_in = update_data.get("check_in", reservation.check_in)
        new_check_out = update_data.get("check_out", reservation.check_out)
        if "check_in" in update_data or "check_out" in update_data:
            if new_check_out <= new_check_in:
                raise ValidationError("check_out must be after check_in")
            lines = [{"room_type_id": line.room_type_id, "room_id": line.room_id} for line in reservation.rooms]
            self.check_inventory(reservation.property_id, lines, new_check_in, new_check_out,
                                 exclude_reservation_id=reservation.id)
            nights = count_nights(new_check_in, new_check_out)
            update_data["nights"] = nights
            for line in reservation.rooms:
                line.nights = nights
                line.subtotal = money(Decimal(line.rate) * nights)

            money_fields = ("subtotal", "taxes", "service_fee", "total_amount")
            if not any(key in update_data for key in money_fields):
                subtotal = money(sum((Decimal(line.subtotal) for line in reservation.rooms), Decimal("0")))
                taxes, service_fee = self.charges_for(reservation.hotel, subtotal)
                discounts = money(update_data.get("discounts", reservation.discounts) or 0)
                update_data.update(
                    subtotal=subtotal,
                    taxes=taxes,
                    service_fee=service_fee,
                    total_amount=money(subtotal + taxes + service_fee - discounts),
                )

        for key, value in update_data.items():
            setattr(reservation, key, value)

        if reservation.status == ReservationStatus.CANCELLED and old_status != ReservationStatus.CANCELLED:
            reservation.cancelled_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(reservation)
        self._publish_status_change(reservation, old_status)
        return reservation

    def delete_reservation(self, reservation_id: int) -> None:
        reservation = self.require_reservation(reservation_id)
        if reservation.status == ReservationStatus.CHECKED_IN:
            raise ValidationError("Cannot delete a reservation that is checked in")
        self.db.delete(reservation)
        self.db.commit()
        logger.info(f"Reservation {reservation_id} deleted")

    def confirm_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.require_reservation(reservation_id)
        if reservation.status != ReservationStatus.PENDING:
            raise ValidationError(f"Only pending reservations can be confirmed (current: {reservation.status.value})")
        reservation.status = ReservationStatus.CONFIRMED
        self.db.commit()
        self.db.refresh(reservation)
        self._publish_status_change(reservation, ReservationStatus.PENDING)
        return reservation

    def cancel_reservation(self, reservation_id: int, reason: Optional[str] = None) -> Reservation:
        reservation = self.require_reservation(reservation_id)
        if reservation.status not in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED):
            raise ValidationError(f"Reservation cannot be cancelled (current: {reservation.status.value})")
        old_status = reservation.status
        reservation.status = ReservationStatus.CANCELLED
        reservation.cancelled_at = datetime.utcnow()
        reservation.cancellation_reason = reason
        self.db.commit()
        self.db.refresh(reservation)
        self._publish_status_change(reservation, old_status)
        return reservation

    def mark_no_show(self, reservation_id: int) -> Reservation:
        reservation = self.require_reservation(reservation_id)
        if reservation.status != ReservationStatus.CONFIRMED:
            raise ValidationError(f"Only confirmed reservations can be marked no-show (current: {reservation.status.value})")
        reservation.status = ReservationStatus.NO_SHOW
        self.db.commit()
        self.db.refresh(reservation)
        self._publish_status_change(reservation, ReservationStatus.CONFIRMED)
        return reservation
