"""
Rate and pricing routes
"""
from typing import List
from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.schemas import RoomRateCreate, RoomRateUpdate, RoomRateResponse, PriceQuote
from tropicana.services.price_service import PriceService
from tropicana.security.auth import get_current_user, require_manager

router = APIRouter(prefix="/rates", tags=["Rates"])


@router.get("", response_model=List[RoomRateResponse])
def list_rates(
    room_type_id: int = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Rates of a room type in priority order"""
    return PriceService(db).get_rates(room_type_id)


@router.post("", response_model=RoomRateResponse, status_code=status.HTTP_201_CREATED)
def create_rate(
    data: RoomRateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return PriceService(db).create_rate(data)


@router.get("/quote", response_model=PriceQuote)
def get_quote(
    room_type_id: int,
    check_in: date,
    check_out: date,
    adults: int = Query(1, ge=1),
    children: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """Price a stay night by night"""
    return PriceService(db).quote(room_type_id, check_in, check_out)


@router.get("/{rate_id}", response_model=RoomRateResponse)
def get_rate(
    rate_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return PriceService(db).require_rate(rate_id)


@router.patch("/{rate_id}", response_model=RoomRateResponse)
def update_rate(
    rate_id: int,
    data: RoomRateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return PriceService(db).update_rate(rate_id, data)


@router.delete("/{rate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rate(
    rate_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    PriceService(db).delete_rate(rate_id)
