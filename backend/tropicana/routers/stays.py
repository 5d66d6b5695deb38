"""
Stay routes
Check-out and folio charges of in-house guests
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.schemas import (
    StayResponse, StayChargeCreate, StayChargeResponse, CheckOutRequest
)
from tropicana.services.stay_service import StayService
from tropicana.security.auth import require_staff

router = APIRouter(prefix="/stays", tags=["Stays"])


@router.get("", response_model=List[StayResponse])
def list_stays(
    property_id: Optional[int] = None,
    stay_status: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Stays, newest check-in first; status=active keeps in-house guests only"""
    return StayService(db).list_stays(property_id, active_only=stay_status == "active")


@router.get("/{stay_id}", response_model=StayResponse)
def get_stay(
    stay_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return StayService(db).require_stay(stay_id)


@router.post("/{stay_id}/check-out", response_model=StayResponse)
@router.post("/{stay_id}", response_model=StayResponse, include_in_schema=False)
def check_out(
    stay_id: int,
    data: Optional[CheckOutRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Check out a stay; rooms go to housekeeping"""
    return StayService(db).check_out(stay_id, notes=data.notes if data else None, user_id=current_user.id)


@router.get("/{stay_id}/charges", response_model=List[StayChargeResponse])
def list_charges(
    stay_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return StayService(db).get_charges(stay_id)


@router.post("/{stay_id}/charges", response_model=StayChargeResponse, status_code=status.HTTP_201_CREATED)
def add_charge(
    stay_id: int,
    data: StayChargeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Post a charge to the folio"""
    return StayService(db).add_charge(
        stay_id,
        description=data.description,
        unit_price=data.unit_price,
        quantity=data.quantity,
        amount=data.amount,
        department=data.department,
        reference=data.reference,
        user_id=current_user.id,
    )
