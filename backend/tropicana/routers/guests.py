"""
Guest routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.schemas import GuestCreate, GuestUpdate, GuestResponse, ReservationResponse
from tropicana.services.guest_service import GuestService
from tropicana.security.auth import require_staff, require_manager

router = APIRouter(prefix="/guests", tags=["Guests"])


@router.get("", response_model=List[GuestResponse])
def list_guests(
    property_id: int = Query(...),
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Guests of a property, optionally filtered by name or email"""
    return GuestService(db).get_guests(property_id, search)


@router.post("", response_model=GuestResponse, status_code=status.HTTP_201_CREATED)
def create_guest(
    data: GuestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return GuestService(db).create_guest(data)


@router.get("/{guest_id}", response_model=GuestResponse)
def get_guest(
    guest_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return GuestService(db).require_guest(guest_id)


@router.patch("/{guest_id}", response_model=GuestResponse)
def update_guest(
    guest_id: int,
    data: GuestUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return GuestService(db).update_guest(guest_id, data)


@router.delete("/{guest_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_guest(
    guest_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    GuestService(db).delete_guest(guest_id)


@router.get("/{guest_id}/reservations", response_model=List[ReservationResponse])
def get_guest_reservations(
    guest_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Reservation history of a guest, newest first"""
    return GuestService(db).get_guest_reservations(guest_id)
