"""
Room inventory service
Room types, physical rooms and room type amenities of a property
"""
import logging
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from tropicana.models.hotel import Property, RoomType, Room, Amenity, RoomTypeAmenity
from tropicana.models.booking import ReservationRoom
from tropicana.models.enums import RoomStatus, HousekeepingStatus
from tropicana.models.schemas import (
    RoomTypeCreate, RoomTypeUpdate, RoomCreate, RoomUpdate,
    AmenityCreate, AmenityUpdate
)
from tropicana.services.exceptions import NotFoundError, ConflictError, ValidationError

logger = logging.getLogger(__name__)


class RoomService:
    """Room types and rooms"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Room types ==============

    def get_room_type(self, room_type_id: int) -> Optional[RoomType]:
        return self.db.query(RoomType).filter(RoomType.id == room_type_id).first()

    def require_room_type(self, room_type_id: int) -> RoomType:
        room_type = self.get_room_type(room_type_id)
        if not room_type:
            raise NotFoundError("Room type not found")
        return room_type

    def list_room_types(self, property_id: int, active_only: bool = False) -> List[Tuple[RoomType, int]]:
        """Room types of a property with their room counts"""
        query = self.db.query(RoomType).filter(RoomType.property_id == property_id)
        if active_only:
            query = query.filter(RoomType.is_active == True)
        room_types = query.order_by(RoomType.sort_order, RoomType.name).all()

        counts = dict(
            self.db.query(Room.room_type_id, func.count(Room.id))
            .filter(Room.property_id == property_id)
            .group_by(Room.room_type_id)
            .all()
        )
        return [(rt, counts.get(rt.id, 0)) for rt in room_types]

    def create_room_type(self, prop: Property, data: RoomTypeCreate) -> RoomType:
        existing = self.db.query(RoomType).filter(
            RoomType.property_id == prop.id,
            RoomType.name == data.name
        ).first()
        if existing:
            raise ConflictError("A room type with this name already exists for this property")

        room_type = RoomType(property_id=prop.id, **data.model_dump())
        self.db.add(room_type)
        self.db.commit()
        self.db.refresh(room_type)
        logger.info(f"Room type created: {room_type.name} at {prop.slug}")
        return room_type

    def update_room_type(self, room_type_id: int, data: RoomTypeUpdate) -> RoomType:
        room_type = self.require_room_type(room_type_id)
        update_data = data.model_dump(exclude_unset=True)

        new_name = update_data.get("name")
        if new_name and new_name != room_type.name:
            clash = self.db.query(RoomType).filter(
                RoomType.property_id == room_type.property_id,
                RoomType.name == new_name
            ).first()
            if clash:
                raise ConflictError("A room type with this name already exists for this property")

        for key, value in update_data.items():
            setattr(room_type, key, value)

        self.db.commit()
        self.db.refresh(room_type)
        return room_type

    def delete_room_type(self, room_type_id: int) -> None:
        room_type = self.require_room_type(room_type_id)

        if self.db.query(Room).filter(Room.room_type_id == room_type_id).count() > 0:
            raise ValidationError("Room type still has rooms")
        if self.db.query(ReservationRoom).filter(ReservationRoom.room_type_id == room_type_id).count() > 0:
            raise ValidationError("Room type is referenced by reservations")

        self.db.delete(room_type)
        self.db.commit()

    # ============== Amenity links ==============

    def link_amenity(self, room_type_id: int, amenity_id: int) -> RoomTypeAmenity:
        room_type = self.require_room_type(room_type_id)
        amenity = self.db.query(Amenity).filter(Amenity.id == amenity_id).first()
        if not amenity:
            raise NotFoundError("Amenity not found")
        if amenity.property_id != room_type.property_id:
            raise ValidationError("Amenity belongs to a different property")

        existing = self.db.query(RoomTypeAmenity).filter(
            RoomTypeAmenity.room_type_id == room_type_id,
            RoomTypeAmenity.amenity_id == amenity_id
        ).first()
        if existing:
            raise ConflictError("Amenity already linked to this room type")

        link = RoomTypeAmenity(room_type_id=room_type_id, amenity_id=amenity_id)
        self.db.add(link)
        self.db.commit()
        self.db.refresh(link)
        return link

    def unlink_amenity(self, room_type_id: int, amenity_id: int) -> None:
        link = self.db.query(RoomTypeAmenity).filter(
            RoomTypeAmenity.room_type_id == room_type_id,
            RoomTypeAmenity.amenity_id == amenity_id
        ).first()
        if not link:
            raise NotFoundError("Amenity is not linked to this room type")
        self.db.delete(link)
        self.db.commit()

    # ============== Rooms ==============

    def get_room(self, room_id: int) -> Optional[Room]:
        return self.db.query(Room).filter(Room.id == room_id).first()

    def require_room(self, room_id: int) -> Room:
        room = self.get_room(room_id)
        if not room:
            raise NotFoundError("Room not found")
        return room

    def get_rooms(self, property_id: Optional[int] = None,
                  status: Optional[RoomStatus] = None,
                  housekeeping: Optional[HousekeepingStatus] = None,
                  room_type_id: Optional[int] = None) -> List[Room]:
        query = self.db.query(Room)
        if property_id:
            query = query.filter(Room.property_id == property_id)
        if status:
            query = query.filter(Room.status == status)
        if housekeeping:
            query = query.filter(Room.housekeeping == housekeeping)
        if room_type_id:
            query = query.filter(Room.room_type_id == room_type_id)
        return query.order_by(Room.room_number).all()

    def _check_room_type_of_property(self, property_id: int, room_type_id: int) -> None:
        room_type = self.get_room_type(room_type_id)
        if not room_type or room_type.property_id != property_id:
            raise ValidationError("Room type does not belong to this property")

    def create_room(self, prop: Property, data: RoomCreate) -> Room:
        self._check_room_type_of_property(prop.id, data.room_type_id)

        existing = self.db.query(Room).filter(
            Room.property_id == prop.id,
            Room.room_number == data.room_number
        ).first()
        if existing:
            raise ConflictError(f"Room {data.room_number} already exists")

        values = data.model_dump(exclude_none=True)
        room = Room(property_id=prop.id, **values)
        self.db.add(room)
        self.db.commit()
        self.db.refresh(room)
        return room

    def update_room(self, room_id: int, data: RoomUpdate) -> Room:
        room = self.require_room(room_id)
        update_data = data.model_dump(exclude_unset=True)

        if "room_type_id" in update_data:
            self._check_room_type_of_property(room.property_id, update_data["room_type_id"])

        new_number = update_data.get("room_number")
        if new_number and new_number != room.room_number:
            clash = self.db.query(Room).filter(
                Room.property_id == room.property_id,
                Room.room_number == new_number
            ).first()
            if clash:
                raise ConflictError(f"Room {new_number} already exists")

        for key, value in update_data.items():
            setattr(room, key, value)

        self.db.commit()
        self.db.refresh(room)
        return room

    def delete_room(self, room_id: int) -> None:
        room = self.require_room(room_id)
        if room.status == RoomStatus.OCCUPIED:
            raise ValidationError("Cannot delete an occupied room")
        self.db.delete(room)
        self.db.commit()


class AmenityService:
    """Property amenities"""

    def __init__(self, db: Session):
        self.db = db

    def list_amenities(self, property_id: int) -> List[Amenity]:
        return self.db.query(Amenity).filter(
            Amenity.property_id == property_id
        ).order_by(Amenity.sort_order, Amenity.name).all()

    def require_amenity(self, amenity_id: int) -> Amenity:
        amenity = self.db.query(Amenity).filter(Amenity.id == amenity_id).first()
        if not amenity:
            raise NotFoundError("Amenity not found")
        return amenity

    def create_amenity(self, data: AmenityCreate) -> Amenity:
        if not self.db.query(Property).filter(Property.id == data.property_id).first():
            raise NotFoundError("Property not found")
        amenity = Amenity(**data.model_dump())
        self.db.add(amenity)
        self.db.commit()
        self.db.refresh(amenity)
        return amenity

    def update_amenity(self, amenity_id: int, data: AmenityUpdate) -> Amenity:
        amenity = self.require_amenity(amenity_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(amenity, key, value)
        self.db.commit()
        self.db.refresh(amenity)
        return amenity

    def delete_amenity(self, amenity_id: int) -> None:
        amenity = self.require_amenity(amenity_id)
        self.db.query(RoomTypeAmenity).filter(RoomTypeAmenity.amenity_id == amenity.id).delete(synchronize_session=False)
        self.db.delete(amenity)
        self.db.commit()
