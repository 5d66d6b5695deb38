"""
Payment routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.enums import PaymentStatus
from tropicana.models.schemas import (
    PaymentIntentRequest, PaymentIntentResponse, RefundRequest, PaymentResponse
)
from tropicana.integrations.paymongo import PayMongoClient, get_paymongo_client
from tropicana.services.payment_service import PaymentService
from tropicana.security.auth import require_staff, require_manager

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("", response_model=List[PaymentResponse])
def list_payments(
    property_id: Optional[int] = None,
    payment_status: Optional[PaymentStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return PaymentService(db).list_payments(property_id, payment_status)


@router.post("/create-intent", response_model=PaymentIntentResponse)
def create_payment_intent(
    data: PaymentIntentRequest,
    db: Session = Depends(get_db),
    client: PayMongoClient = Depends(get_paymongo_client)
):
    """Public: PayMongo payment intent for a reservation"""
    return PaymentService(db).create_payment_intent(data.reservation_id, client)


@router.post("/{payment_id}/retry", response_model=PaymentResponse)
def retry_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return PaymentService(db).retry_failed_payment(payment_id)


@router.post("/{payment_id}/refund", response_model=PaymentResponse)
def refund_payment(
    payment_id: int,
    data: RefundRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return PaymentService(db).process_refund(payment_id, data)
