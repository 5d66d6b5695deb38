"""
Availability search (public)
"""
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.schemas import AvailabilityResponse
from tropicana.services.availability_service import AvailabilityService
from tropicana.services.price_service import count_nights

router = APIRouter(prefix="/availability", tags=["Availability"])


@router.get("", response_model=AvailabilityResponse)
def search_availability(
    property_id: int,
    check_in: date,
    check_out: date,
    adults: int = Query(1),
    children: int = Query(0),
    db: Session = Depends(get_db)
):
    """Room types with free rooms for the requested stay"""
    room_types = AvailabilityService(db).search(property_id, check_in, check_out, adults, children)
    return {
        "property_id": property_id,
        "check_in": check_in,
        "check_out": check_out,
        "nights": count_nights(check_in, check_out),
        "adults": adults,
        "children": children,
        "room_types": room_types,
    }
