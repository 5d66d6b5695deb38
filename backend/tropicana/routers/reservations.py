"""
Reservation routes
Back-office reservations, the public booking flow and front-desk actions
"""
from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.enums import ReservationStatus
from tropicana.models.schemas import (
    ReservationCreate, ReservationUpdate, ReservationCancel, ReservationResponse,
    ReservationDetail, ReservationStatusView, BookingRequest, BookingResponse,
    ManualPaymentCreate, PaymentResponse, PaymentStatusSummary,
    CheckInRequest, StayResponse
)
from tropicana.integrations.paymongo import PayMongoClient, get_paymongo_client
from tropicana.services.booking_service import BookingService
from tropicana.services.payment_service import PaymentService
from tropicana.services.reservation_service import ReservationService
from tropicana.services.stay_service import StayService
from tropicana.security.auth import require_staff, require_manager

router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.get("", response_model=List[ReservationResponse])
def list_reservations(
    property_id: int = Query(...),
    reservation_status: Optional[ReservationStatus] = Query(None, alias="status"),
    check_in_from: Optional[date] = None,
    check_in_to: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Reservations of a property, latest check-in first"""
    return ReservationService(db).get_reservations(property_id, reservation_status, check_in_from, check_in_to)


@router.post("", response_model=ReservationDetail, status_code=status.HTTP_201_CREATED)
def create_reservation(
    data: ReservationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Create a reservation from the back office"""
    return ReservationService(db).create_reservation(data, created_by=current_user.id)


@router.post("/create-with-payment", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_with_payment(
    data: BookingRequest,
    db: Session = Depends(get_db),
    client: PayMongoClient = Depends(get_paymongo_client)
):
    """Public booking: pending reservation plus a PayMongo checkout session"""
    return BookingService(db).create_with_payment(data, client)


@router.get("/{reservation_id}", response_model=ReservationDetail)
def get_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return ReservationService(db).require_reservation(reservation_id)


@router.get("/{reservation_id}/status", response_model=ReservationStatusView)
def get_reservation_status(reservation_id: int, db: Session = Depends(get_db)):
    """Public status lookup used by the booking return pages"""
    return ReservationService(db).get_status_view(reservation_id)


@router.patch("/{reservation_id}", response_model=ReservationDetail)
@router.patch("/{reservation_id}/edit", response_model=ReservationDetail, include_in_schema=False)
def update_reservation(
    reservation_id: int,
    data: ReservationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Update a reservation; date changes recheck availability"""
    return ReservationService(db).update_reservation(reservation_id, data)


@router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    ReservationService(db).delete_reservation(reservation_id)


# ============== Status transitions ==============

@router.post("/{reservation_id}/confirm", response_model=ReservationResponse)
def confirm_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return ReservationService(db).confirm_reservation(reservation_id)


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
def cancel_reservation(
    reservation_id: int,
    data: Optional[ReservationCancel] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return ReservationService(db).cancel_reservation(reservation_id, data.reason if data else None)


@router.post("/{reservation_id}/no-show", response_model=ReservationResponse)
def mark_no_show(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return ReservationService(db).mark_no_show(reservation_id)


# ============== Payments ==============

@router.post("/{reservation_id}/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def record_payment(
    reservation_id: int,
    data: ManualPaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Record a front-desk payment"""
    return PaymentService(db).record_manual_payment(reservation_id, data)


@router.get("/{reservation_id}/payment-status", response_model=PaymentStatusSummary)
def get_payment_status(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return PaymentService(db).get_payment_status(reservation_id)


# ============== Check-in ==============

@router.post("/{reservation_id}/check-in", response_model=StayResponse, status_code=status.HTTP_201_CREATED)
def check_in(
    reservation_id: int,
    data: Optional[CheckInRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Check in a confirmed reservation"""
    return StayService(db).check_in(reservation_id, notes=data.notes if data else None, user_id=current_user.id)
