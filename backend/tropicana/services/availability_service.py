"""
Availability service
Counts sellable rooms per room type over a date range

A reservation blocks a room type for the nights [check_in, check_out); stays
that end on the day another begins do not overlap.
"""
import logging
from datetime import date
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from tropicana.models.hotel import Property, RoomType, Room
from tropicana.models.booking import Reservation, ReservationRoom
from tropicana.models.enums import ReservationStatus
from tropicana.services.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Reservations in these states no longer hold inventory
RELEASED_STATUSES = (ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW)


class AvailabilityService:
    """Availability service"""

    def __init__(self, db: Session):
        self.db = db

    def _overlapping(self, query, check_in: date, check_out: date,
                     exclude_reservation_id: Optional[int] = None):
        query = query.filter(
            Reservation.status.notin_(RELEASED_STATUSES),
            Reservation.check_in < check_out,
            Reservation.check_out > check_in,
        )
        if exclude_reservation_id:
            query = query.filter(Reservation.id != exclude_reservation_id)
        return query

    def booked_by_room_type(self, property_id: int, check_in: date, check_out: date,
                            exclude_reservation_id: Optional[int] = None) -> Dict[int, int]:
        """Number of booked room lines per room type for overlapping reservations"""
        query = (
            self.db.query(ReservationRoom.room_type_id, func.count(ReservationRoom.id))
            .join(Reservation, ReservationRoom.reservation_id == Reservation.id)
            .filter(Reservation.property_id == property_id)
        )
        query = self._overlapping(query, check_in, check_out, exclude_reservation_id)
        return dict(query.group_by(ReservationRoom.room_type_id).all())

    def total_by_room_type(self, property_id: int) -> Dict[int, int]:
        rows = (
            self.db.query(Room.room_type_id, func.count(Room.id))
            .filter(Room.property_id == property_id, Room.is_active == True)
            .group_by(Room.room_type_id)
            .all()
        )
        return dict(rows)

    def count_available(self, room_type_id: int, check_in: date, check_out: date,
                        exclude_reservation_id: Optional[int] = None) -> int:
        room_type = self.db.query(RoomType).filter(RoomType.id == room_type_id).first()
        if not room_type:
            raise NotFoundError("Room type not found")
        total = self.total_by_room_type(room_type.property_id).get(room_type_id, 0)
        booked = self.booked_by_room_type(
            room_type.property_id, check_in, check_out, exclude_reservation_id
        ).get(room_type_id, 0)
        return max(total - booked, 0)

    def is_room_free(self, room_id: int, check_in: date, check_out: date,
                     exclude_reservation_id: Optional[int] = None) -> bool:
        """True when no active overlapping reservation has this room assigned"""
        query = (
            self.db.query(ReservationRoom.id)
            .join(Reservation, ReservationRoom.reservation_id == Reservation.id)
            .filter(ReservationRoom.room_id == room_id)
        )
        query = self._overlapping(query, check_in, check_out, exclude_reservation_id)
        return query.first() is None

    def search(self, property_id: int, check_in: date, check_out: date,
               adults: int, children: int = 0) -> List[dict]:
        """
        Room types with at least one free room for the stay

        Only active room types whose max occupancy fits the party are returned.
        """
        if adults < 1:
            raise ValidationError("At least one adult is required")
        if children < 0:
            raise ValidationError("children must not be negative")
        if check_out <= check_in:
            raise ValidationError("check_out must be after check_in")

        prop = self.db.query(Property).filter(Property.id == property_id).first()
        if not prop:
            raise NotFoundError("Property not found")

        total_guests = adults + children
        room_types = (
            self.db.query(RoomType)
            .filter(
                RoomType.property_id == property_id,
                RoomType.is_active == True,
                RoomType.max_occupancy >= total_guests,
            )
            .order_by(RoomType.sort_order, RoomType.name)
            .all()
        )

        totals = self.total_by_room_type(property_id)
        booked = self.booked_by_room_type(property_id, check_in, check_out)

        results = []
        for rt in room_types:
            total = totals.get(rt.id, 0)
            taken = booked.get(rt.id, 0)
            available = total - taken
            if available <= 0:
                continue
            results.append({
                "room_type_id": rt.id,
                "name": rt.name,
                "display_name": rt.display_name,
                "category": rt.category,
                "description": rt.description,
                "base_rate": rt.base_rate,
                "max_occupancy": rt.max_occupancy,
                "max_adults": rt.max_adults,
                "max_children": rt.max_children,
                "bed_configuration": rt.bed_configuration,
                "room_size": rt.room_size,
                "primary_image": rt.primary_image,
                "images": rt.images or [],
                "total_rooms": total,
                "booked_rooms": taken,
                "available_count": available,
            })

        logger.debug(f"Availability for property {property_id} {check_in}..{check_out}: "
                     f"{len(results)} room types")
        return results
