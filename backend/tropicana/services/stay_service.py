"""
Stay service
Check-in, check-out and folio charges
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from tropicana.models.booking import Reservation
from tropicana.models.operations import Stay, StayCharge, Task
from tropicana.models.enums import (
    ReservationStatus, RoomStatus, HousekeepingStatus,
    ServiceCategory, TaskPriority, ServiceStatus
)
from tropicana.models.events import EventType
from tropicana.services.event_bus import publish_event
from tropicana.services.exceptions import NotFoundError, ValidationError
from tropicana.services.price_service import money

logger = logging.getLogger(__name__)


class StayService:
    """Stay service"""

    def __init__(self, db: Session):
        self.db = db

    def require_stay(self, stay_id: int) -> Stay:
        stay = self.db.query(Stay).filter(Stay.id == stay_id).first()
        if not stay:
            raise NotFoundError("Stay not found")
        return stay

    def list_stays(self, property_id: Optional[int] = None, active_only: bool = False) -> List[Stay]:
        query = self.db.query(Stay).join(Reservation)
        if property_id:
            query = query.filter(Reservation.property_id == property_id)
        if active_only:
            query = query.filter(Stay.actual_check_out == None)
        return query.order_by(Stay.actual_check_in.desc()).all()

    # ============== Check-in / check-out ==============

    def check_in(self, reservation_id: int, notes: Optional[str] = None,
                 user_id: Optional[int] = None) -> Stay:
        """
        Open a stay for a confirmed reservation

        The stay, the reservation status and the room statuses change in one commit.
        """
        reservation = self.db.query(Reservation).filter(Reservation.id == reservation_id).first()
        if not reservation:
            raise NotFoundError("Reservation not found")
        if reservation.status != ReservationStatus.CONFIRMED:
            raise ValidationError(
                f"Only confirmed reservations can be checked in (current status: {reservation.status.value})"
            )

        try:
            stay = Stay(
                reservation_id=reservation.id,
                guest_id=reservation.guest_id,
                actual_check_in=datetime.utcnow(),
                room_charges=reservation.total_amount,
                extra_charges=Decimal("0.00"),
                total_charges=reservation.total_amount,
                notes=notes,
            )
            self.db.add(stay)
            reservation.status = ReservationStatus.CHECKED_IN
            for line in reservation.rooms:
                if line.room:
                    line.room.status = RoomStatus.OCCUPIED
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(stay)

        logger.info(f"Checked in reservation {reservation.confirmation_number} (stay {stay.id})")
        publish_event(EventType.GUEST_CHECKED_IN, {
            "stay_id": stay.id,
            "reservation_id": reservation.id,
            "confirmation_number": reservation.confirmation_number,
            "guest_name": reservation.guest.full_name if reservation.guest else None,
            "rooms": [line.room_number for line in reservation.rooms if line.room_number],
            "user_id": user_id,
        }, source="stay_service")
        return stay

    def check_out(self, stay_id: int, notes: Optional[str] = None,
                  user_id: Optional[int] = None) -> Stay:
        """Close a stay, release its rooms and open housekeeping tasks"""
        stay = self.require_stay(stay_id)
        if stay.actual_check_out is not None:
            raise ValidationError("Guest has already checked out")

        reservation = stay.reservation
        now = datetime.utcnow()
        try:
            stay.actual_check_out = now
            if notes:
                stay.notes = f"{stay.notes}\n{notes}" if stay.notes else notes
            reservation.status = ReservationStatus.CHECKED_OUT

            for line in reservation.rooms:
                room = line.room
                if not room:
                    continue
                room.status = RoomStatus.AVAILABLE
                room.housekeeping = HousekeepingStatus.DIRTY
                self.db.add(Task(
                    property_id=reservation.property_id,
                    room_id=room.id,
                    title=f"Clean room {room.room_number}",
                    description=f"Checkout cleaning after reservation {reservation.confirmation_number}",
                    category=ServiceCategory.HOUSEKEEPING,
                    priority=TaskPriority.HIGH,
                    status=ServiceStatus.PENDING,
                    created_by=user_id,
                    scheduled_at=now,
                ))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(stay)

        logger.info(f"Checked out stay {stay.id} ({reservation.confirmation_number})")
        publish_event(EventType.GUEST_CHECKED_OUT, {
            "stay_id": stay.id,
            "reservation_id": reservation.id,
            "confirmation_number": reservation.confirmation_number,
            "guest_name": reservation.guest.full_name if reservation.guest else None,
            "total_charges": str(stay.total_charges),
            "user_id": user_id,
        }, source="stay_service")
        return stay

    # ============== Folio ==============

    def get_charges(self, stay_id: int) -> List[StayCharge]:
        return list(self.require_stay(stay_id).charges)

    def add_charge(self, stay_id: int, description: str, unit_price: Decimal, quantity: int = 1,
                   amount: Optional[Decimal] = None, department: Optional[str] = None,
                   reference: Optional[str] = None, user_id: Optional[int] = None) -> StayCharge:
        stay = self.require_stay(stay_id)
        if not stay.is_active:
            raise ValidationError("Cannot add charges to a checked-out stay")

        amount = money(amount if amount is not None else Decimal(unit_price) * quantity)
        charge = StayCharge(
            description=description,
            quantity=quantity,
            unit_price=money(unit_price),
            amount=amount,
            department=department,
            reference=reference,
            charged_at=datetime.utcnow(),
            created_by=user_id,
        )
        stay.charges.append(charge)
        stay.extra_charges = money(Decimal(stay.extra_charges or 0) + amount)
        stay.total_charges = money(Decimal(stay.total_charges or 0) + amount)
        self.db.commit()
        self.db.refresh(charge)
        logger.info(f"Posted {amount} to stay {stay.id}: {description}")
        return charge
