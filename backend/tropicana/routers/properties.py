"""
Property routes
Business units plus their room types and rooms
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.schemas import (
    PropertyCreate, PropertyUpdate, PropertyResponse, PropertyListItem, PropertyDetail,
    PropertyCounts, RoomTypeCreate, RoomTypeWithCounts, RoomCreate, RoomResponse,
    ReservationResponse
)
from tropicana.services.property_service import PropertyService
from tropicana.services.room_service import RoomService
from tropicana.security.auth import get_current_user, require_admin, require_manager
from tropicana.routers.room_types import room_type_out

router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get("", response_model=List[PropertyListItem])
def list_properties(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """All properties with related counts"""
    return [
        PropertyListItem(
            **PropertyResponse.model_validate(item["property"]).model_dump(),
            counts=PropertyCounts(**item["counts"]),
        )
        for item in PropertyService(db).list_properties()
    ]


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(
    data: PropertyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create a property"""
    return PropertyService(db).create_property(data, created_by=current_user.id)


@router.get("/{slug}", response_model=PropertyDetail)
def get_property(
    slug: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Property detail with room types, rooms and the latest reservations"""
    detail = PropertyService(db).get_detail(slug)
    return PropertyDetail(
        **PropertyResponse.model_validate(detail["property"]).model_dump(),
        counts=PropertyCounts(**detail["counts"]),
        room_types=[room_type_out(rt, count) for rt, count in detail["room_types"]],
        rooms=[RoomResponse.model_validate(r) for r in detail["rooms"]],
        recent_reservations=[ReservationResponse.model_validate(r) for r in detail["recent_reservations"]],
    )


@router.patch("/{slug}", response_model=PropertyResponse)
def update_property(
    slug: str,
    data: PropertyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Update a property"""
    return PropertyService(db).update_property(slug, data)


@router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
def delete_property(
    slug: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Delete a property and everything it owns"""
    PropertyService(db).delete_property(slug)


# ============== Room types ==============

@router.get("/{slug}/room-types", response_model=List[RoomTypeWithCounts])
def list_property_room_types(
    slug: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    prop = PropertyService(db).require_by_slug(slug)
    return [room_type_out(rt, count) for rt, count in RoomService(db).list_room_types(prop.id)]


@router.post("/{slug}/room-types", response_model=RoomTypeWithCounts, status_code=status.HTTP_201_CREATED)
def create_property_room_type(
    slug: str,
    data: RoomTypeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    prop = PropertyService(db).require_by_slug(slug)
    room_type = RoomService(db).create_room_type(prop, data)
    return room_type_out(room_type, 0)


# ============== Rooms ==============

@router.get("/{slug}/rooms", response_model=List[RoomResponse])
def list_property_rooms(
    slug: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    prop = PropertyService(db).require_by_slug(slug)
    return RoomService(db).get_rooms(property_id=prop.id)


@router.post("/{slug}/rooms", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_property_room(
    slug: str,
    data: RoomCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    prop = PropertyService(db).require_by_slug(slug)
    return RoomService(db).create_room(prop, data)
