"""
Room type and amenity routes
"""
from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.hotel import RoomType
from tropicana.models.users import User
from tropicana.models.schemas import (
    RoomTypeUpdate, RoomTypeResponse, RoomTypeWithCounts,
    AmenityCreate, AmenityUpdate, AmenityResponse, AmenityLink
)
from tropicana.services.room_service import RoomService, AmenityService
from tropicana.security.auth import get_current_user, require_manager

router = APIRouter(tags=["Room types"])


def room_type_out(room_type: RoomType, room_count: int) -> RoomTypeWithCounts:
    """Room type with its room count and linked amenities"""
    return RoomTypeWithCounts(
        **RoomTypeResponse.model_validate(room_type).model_dump(),
        room_count=room_count,
        amenities=[AmenityResponse.model_validate(a) for a in room_type.amenities],
    )


# ============== Room types ==============

@router.get("/room-types/{room_type_id}", response_model=RoomTypeWithCounts)
def get_room_type(
    room_type_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Room type detail"""
    room_type = RoomService(db).require_room_type(room_type_id)
    return room_type_out(room_type, len(room_type.rooms))


@router.patch("/room-types/{room_type_id}", response_model=RoomTypeWithCounts)
def update_room_type(
    room_type_id: int,
    data: RoomTypeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """Update a room type"""
    room_type = RoomService(db).update_room_type(room_type_id, data)
    return room_type_out(room_type, len(room_type.rooms))


@router.delete("/room-types/{room_type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room_type(
    room_type_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """Delete a room type that has no rooms or bookings"""
    RoomService(db).delete_room_type(room_type_id)


@router.post("/room-types/{room_type_id}/amenities", response_model=RoomTypeWithCounts,
             status_code=status.HTTP_201_CREATED)
def link_amenity(
    room_type_id: int,
    data: AmenityLink,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """Link an amenity to a room type"""
    service = RoomService(db)
    service.link_amenity(room_type_id, data.amenity_id)
    room_type = service.require_room_type(room_type_id)
    db.refresh(room_type)
    return room_type_out(room_type, len(room_type.rooms))


@router.delete("/room-types/{room_type_id}/amenities/{amenity_id}", status_code=status.HTTP_204_NO_CONTENT)
def unlink_amenity(
    room_type_id: int,
    amenity_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """Remove an amenity from a room type"""
    RoomService(db).unlink_amenity(room_type_id, amenity_id)


# ============== Amenities ==============

@router.get("/amenities", response_model=List[AmenityResponse])
def list_amenities(
    property_id: int = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Amenities of a property"""
    return AmenityService(db).list_amenities(property_id)


@router.post("/amenities", response_model=AmenityResponse, status_code=status.HTTP_201_CREATED)
def create_amenity(
    data: AmenityCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """Create an amenity"""
    return AmenityService(db).create_amenity(data)


@router.get("/amenities/{amenity_id}", response_model=AmenityResponse)
def get_amenity(
    amenity_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return AmenityService(db).require_amenity(amenity_id)


@router.patch("/amenities/{amenity_id}", response_model=AmenityResponse)
def update_amenity(
    amenity_id: int,
    data: AmenityUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return AmenityService(db).update_amenity(amenity_id, data)


@router.delete("/amenities/{amenity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_amenity(
    amenity_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    AmenityService(db).delete_amenity(amenity_id)
