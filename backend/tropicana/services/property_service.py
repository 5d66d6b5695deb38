"""
Property service
Manages business units (hotels, resorts, villa complexes)
"""
import logging
from typing import List, Optional, Dict
from sqlalchemy import func
from sqlalchemy.orm import Session
from tropicana.models.hotel import Property, RoomType, Room
from tropicana.models.booking import Reservation, Guest
from tropicana.models.schemas import PropertyCreate, PropertyUpdate
from tropicana.services.exceptions import NotFoundError, ConflictError

logger = logging.getLogger(__name__)


class PropertyService:
    """Property service"""

    def __init__(self, db: Session):
        self.db = db

    def get_property(self, property_id: int) -> Optional[Property]:
        return self.db.query(Property).filter(Property.id == property_id).first()

    def get_by_slug(self, slug: str) -> Optional[Property]:
        return self.db.query(Property).filter(Property.slug == slug).first()

    def require_property(self, property_id: int) -> Property:
        prop = self.get_property(property_id)
        if not prop:
            raise NotFoundError("Property not found")
        return prop

    def require_by_slug(self, slug: str) -> Property:
        prop = self.get_by_slug(slug)
        if not prop:
            raise NotFoundError("Property not found")
        return prop

    def _count_by_property(self, model) -> Dict[int, int]:
        rows = self.db.query(model.property_id, func.count(model.id)).group_by(model.property_id).all()
        return {property_id: count for property_id, count in rows}

    def get_counts(self, property_id: int) -> Dict[str, int]:
        return {
            "rooms": self.db.query(Room).filter(Room.property_id == property_id).count(),
            "room_types": self.db.query(RoomType).filter(RoomType.property_id == property_id).count(),
            "reservations": self.db.query(Reservation).filter(Reservation.property_id == property_id).count(),
            "guests": self.db.query(Guest).filter(Guest.property_id == property_id).count(),
        }

    def list_properties(self) -> List[dict]:
        """All properties ordered by sort order, each with related counts"""
        properties = self.db.query(Property).order_by(Property.sort_order, Property.name).all()
        rooms = self._count_by_property(Room)
        room_types = self._count_by_property(RoomType)
        reservations = self._count_by_property(Reservation)
        guests = self._count_by_property(Guest)
        return [
            {
                "property": p,
                "counts": {
                    "rooms": rooms.get(p.id, 0),
                    "room_types": room_types.get(p.id, 0),
                    "reservations": reservations.get(p.id, 0),
                    "guests": guests.get(p.id, 0),
                },
            }
            for p in properties
        ]

    def get_detail(self, slug: str) -> dict:
        """Property with room types, rooms and the latest reservations"""
        prop = self.require_by_slug(slug)
        room_counts = dict(
            self.db.query(Room.room_type_id, func.count(Room.id))
            .filter(Room.property_id == prop.id)
            .group_by(Room.room_type_id)
            .all()
        )
        recent = (
            self.db.query(Reservation)
            .filter(Reservation.property_id == prop.id)
            .order_by(Reservation.created_at.desc(), Reservation.id.desc())
            .limit(10)
            .all()
        )
        return {
            "property": prop,
            "room_types": [(rt, room_counts.get(rt.id, 0)) for rt in prop.room_types],
            "rooms": list(prop.rooms),
            "recent_reservations": recent,
            "counts": self.get_counts(prop.id),
        }

    def create_property(self, data: PropertyCreate, created_by: Optional[int] = None) -> Property:
        if self.get_by_slug(data.slug):
            raise ConflictError("A property with this slug already exists")

        prop = Property(**data.model_dump(), created_by=created_by)
        self.db.add(prop)
        self.db.commit()
        self.db.refresh(prop)
        logger.info(f"Property created: {prop.slug} (id={prop.id})")
        return prop

    def update_property(self, slug: str, data: PropertyUpdate) -> Property:
        prop = self.require_by_slug(slug)
        update_data = data.model_dump(exclude_unset=True)

        new_slug = update_data.get("slug")
        if new_slug and new_slug != prop.slug and self.get_by_slug(new_slug):
            raise ConflictError("A property with this slug already exists")

        for key, value in update_data.items():
            setattr(prop, key, value)

        self.db.commit()
        self.db.refresh(prop)
        return prop

    def delete_property(self, slug: str) -> None:
        prop = self.require_by_slug(slug)
        self.db.delete(prop)
        self.db.commit()
        logger.info(f"Property deleted: {slug}")
