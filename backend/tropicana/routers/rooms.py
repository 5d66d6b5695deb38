"""
Room routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.enums import RoomStatus, HousekeepingStatus
from tropicana.models.schemas import RoomUpdate, RoomResponse
from tropicana.services.room_service import RoomService
from tropicana.security.auth import get_current_user, require_manager, require_staff

router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    property_id: Optional[int] = None,
    room_status: Optional[RoomStatus] = Query(None, alias="status"),
    housekeeping: Optional[HousekeepingStatus] = None,
    room_type_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Rooms with optional filters"""
    return RoomService(db).get_rooms(property_id, room_status, housekeeping, room_type_id)


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return RoomService(db).require_room(room_id)


@router.patch("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int,
    data: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Update a room, including status and housekeeping changes"""
    return RoomService(db).update_room(room_id, data)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    RoomService(db).delete_room(room_id)
